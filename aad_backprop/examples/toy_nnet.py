"""
Two-layer neural network classifier trained with reverse-mode gradients.

    h1 = X · W1,  a1 = tanh(h1)
    h2 = a1 · W2, log_p = logsoftmax(h2, axis=1)
    L  = -Σ (log_p ⊙ Y)                    (cross-entropy, one-hot Y)

Both weight matrices are Context variables; every gradient-descent step
re-runs one forward/backward pass per weight matrix.
"""

import argparse
from typing import Dict, Optional, Tuple

import numpy as np

from aad_backprop.aad import Context, Gradient
from aad_backprop.aad.ops import logsoftmax, matmul, sum_all, tanh
from aad_backprop.examples.logistic_regression import TrainConfig


def toy_dataset() -> Tuple[np.ndarray, np.ndarray]:
    """Nine points in three well separated classes (one-hot targets)."""
    inputs = np.array([[0.52, 1.12, 0.77],
                       [0.88, 1.08, 0.15],
                       [0.90, 1.32, 0.07],
                       [0.73, 0.91, 0.22],
                       [0.52, 0.06, -1.30],
                       [0.31, 0.00, -1.63],
                       [0.72, 0.02, -1.17],
                       [0.74, -2.49, 1.39],
                       [0.66, -3.01, 1.77]])
    labels = np.array([0, 0, 0, 0, 1, 1, 1, 2, 2])
    targets = np.eye(3)[labels]
    return inputs, targets


def pred_acc(log_probs: np.ndarray, targets: np.ndarray) -> float:
    """Fraction of rows whose arg-max prediction matches the one-hot target."""
    return float(np.mean(np.argmax(log_probs, axis=1) == np.argmax(targets, axis=1)))


class ToyNet:
    """tanh hidden layer + log-softmax output, no biases."""

    def __init__(self,
                 inputs: np.ndarray,
                 targets: np.ndarray,
                 n_hidden: int = 8,
                 config: Optional[TrainConfig] = None,
                 seed: int = 0):
        self.config = config or TrainConfig(learning_rate=0.05, max_iterations=200)
        n_in = inputs.shape[1]
        n_out = targets.shape[1]

        rng = np.random.default_rng(seed)
        w1 = rng.normal(size=(n_in, n_hidden)) * np.sqrt(2.0 / n_in)
        w2 = rng.normal(size=(n_hidden, n_out)) * np.sqrt(2.0 / n_hidden)

        self.targets = np.asarray(targets, dtype=float)
        self.context = Context()
        self.x = self.context.create_variable(inputs)
        self.y = self.context.create_variable(self.targets)
        self.w1 = self.context.create_variable(w1)
        self.w2 = self.context.create_variable(w2)

        a1 = tanh(matmul(self.x, self.w1))
        self.log_probs = logsoftmax(matmul(a1, self.w2), axis=1)
        self.loss = -sum_all(self.log_probs * self.y)

        self.gradient = Gradient.of(self.loss, self.context)

    def loss_value(self) -> float:
        return float(self.gradient.value())

    def accuracy(self) -> float:
        return pred_acc(self.log_probs.eval(self.context).value, self.targets)

    def fit(self) -> Dict:
        """Gradient descent on both weight matrices."""
        cfg = self.config
        history = []
        if cfg.verbose:
            print(f"\nTraining toy network...")
            print(f"  Initial loss: {self.loss_value():.6f}  accuracy: {self.accuracy():.2f}")

        for i in range(cfg.max_iterations):
            w1_grad, w2_grad = self.gradient.grads([self.w1, self.w2])
            self.gradient.set(self.w1, self.gradient.get(self.w1) - cfg.learning_rate * w1_grad)
            self.gradient.set(self.w2, self.gradient.get(self.w2) - cfg.learning_rate * w2_grad)
            history.append(self.loss_value())
            if cfg.verbose and (i + 1) % cfg.print_every == 0:
                print(f"  iter {i + 1:4d}  loss={history[-1]:.6f}")

        acc = self.accuracy()
        if cfg.verbose:
            print(f"  Final loss: {history[-1] if history else self.loss_value():.6f}")
            print(f"  Training accuracy: {acc:.2f}")

        return {
            'loss': self.loss_value(),
            'accuracy': acc,
            'loss_history': history,
        }


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Two-layer tanh network on a toy three-class dataset',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--hidden', type=int, default=8,
                       help='Hidden layer width')
    parser.add_argument('--lr', type=float, default=0.05,
                       help='Learning rate')
    parser.add_argument('--iters', type=int, default=200,
                       help='Number of gradient-descent steps')
    parser.add_argument('--seed', type=int, default=0,
                       help='Seed for the weight initialisation')
    return parser.parse_args()


def main():
    args = parse_args()
    inputs, targets = toy_dataset()
    config = TrainConfig(learning_rate=args.lr, max_iterations=args.iters, print_every=20)
    net = ToyNet(inputs, targets, n_hidden=args.hidden, config=config, seed=args.seed)
    net.fit()


if __name__ == "__main__":
    main()
