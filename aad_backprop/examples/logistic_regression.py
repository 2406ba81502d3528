"""
Logistic regression trained with reverse-mode gradients.

Model and loss:

    p = sigmoid(X · w)
    L(w) = -Σᵢ log( pᵢ·(2yᵢ - 1) + 1 - yᵢ )

i.e. the negative log-likelihood of the labels y ∈ {0, 1}. The data X and
labels y are Context variables too; the gradient is only ever taken with
respect to w.

Two optimisers:
1. **'gd'**: plain gradient descent, one Gradient.grad + set per step
2. **scipy** ('L-BFGS-B', 'BFGS', ...): scipy.optimize.minimize with the AD
   gradient passed as `jac`
"""

import argparse
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np
from scipy.optimize import minimize, OptimizeResult

from aad_backprop.aad import Context, Gradient
from aad_backprop.aad.ops import dot, log, sigmoid, sum_all


@dataclass
class TrainConfig:
    """Configuration for the example training loops."""
    # Optimization
    optimizer: str = 'gd'  # 'gd', 'L-BFGS-B', 'BFGS', ...
    learning_rate: float = 0.01
    max_iterations: int = 100
    tolerance: float = 1e-8

    # Logging
    verbose: bool = True
    print_every: int = 10


def toy_dataset() -> Tuple[np.ndarray, np.ndarray]:
    inputs = np.array([[0.52, 1.12, 0.77],
                       [0.88, -1.08, 0.15],
                       [0.52, 0.06, -1.30],
                       [0.74, -2.49, 1.39]])
    targets = np.array([1.0, 1.0, 0.0, 1.0])
    return inputs, targets


class LogisticRegression:
    """
    Binary logistic regression whose loss is an Expression over a Context.

    Usage:
        >>> X, y = toy_dataset()
        >>> model = LogisticRegression(X, y, TrainConfig(verbose=False))
        >>> result = model.fit()
        >>> model.predict()
    """

    def __init__(self,
                 inputs: np.ndarray,
                 targets: np.ndarray,
                 config: Optional[TrainConfig] = None,
                 initial_weights: Optional[np.ndarray] = None):
        inputs = np.asarray(inputs, dtype=float)
        targets = np.asarray(targets, dtype=float).reshape(-1)
        if inputs.ndim != 2 or inputs.shape[0] != targets.shape[0]:
            raise ValueError(
                f"inputs must be (n, d) and targets (n,), got {inputs.shape} and {targets.shape}"
            )

        self.config = config or TrainConfig()
        self.n_features = inputs.shape[1]

        self.context = Context()
        self.x = self.context.create_variable(inputs)
        self.y = self.context.create_variable(targets)
        if initial_weights is None:
            initial_weights = np.zeros(self.n_features)
        self.w = self.context.create_variable(initial_weights)

        self.preds = sigmoid(dot(self.x, self.w))
        label_probs = self.preds * (self.y + self.y - 1.0) + 1.0 - self.y
        self.loss = -sum_all(log(label_probs))

        self.gradient = Gradient.of(self.loss, self.context)
        self.loss_history = []

    @property
    def weights(self) -> np.ndarray:
        return self.gradient.get(self.w)

    def loss_value(self) -> float:
        return float(self.gradient.value())

    def predict(self) -> np.ndarray:
        """Predicted probabilities on the training inputs."""
        return self.preds.eval(self.context).value

    def _objective_function(self, w: np.ndarray) -> float:
        self.gradient.set(self.w, w)
        loss = self.loss_value()
        self.loss_history.append(loss)
        return loss

    def _objective_gradient(self, w: np.ndarray) -> np.ndarray:
        self.gradient.set(self.w, w)
        return self.gradient.grad(self.w)

    def fit(self) -> Dict:
        """
        Run the configured optimiser from the current weights.

        Returns:
            Dictionary with:
                - weights: final weights
                - loss: final loss value
                - n_iterations: iterations performed
                - loss_history: loss after each evaluation
        """
        cfg = self.config
        self.loss_history = []
        if cfg.verbose:
            print(f"\nTraining logistic regression ({cfg.optimizer})...")
            print(f"  Samples: {self.context.get_variable_value(self.x).shape[0]}")
            print(f"  Features: {self.n_features}")
            print(f"  Initial loss: {self.loss_value():.6f}")

        if cfg.optimizer == 'gd':
            n_iter = self._fit_gd()
            success, message = True, "max iterations reached"
        else:
            result = self._fit_scipy()
            n_iter = result.nit
            success, message = bool(result.success), result.message

        final_loss = self.loss_value()
        if cfg.verbose:
            print(f"\nTraining Complete:")
            print(f"  Status: {message}")
            print(f"  Iterations: {n_iter}")
            print(f"  Final loss: {final_loss:.6f}")

        return {
            'weights': self.weights.copy(),
            'loss': final_loss,
            'n_iterations': n_iter,
            'success': success,
            'message': message,
            'loss_history': list(self.loss_history),
        }

    def _fit_gd(self) -> int:
        cfg = self.config
        for i in range(cfg.max_iterations):
            w_grad = self.gradient.grad(self.w)
            self.gradient.set(self.w, self.weights - cfg.learning_rate * w_grad)
            loss = self.loss_value()
            self.loss_history.append(loss)
            if cfg.verbose and (i + 1) % cfg.print_every == 0:
                print(f"  iter {i + 1:4d}  loss={loss:.6f}  |grad|={np.linalg.norm(w_grad):.3e}")
        return cfg.max_iterations

    def _fit_scipy(self) -> OptimizeResult:
        cfg = self.config
        result: OptimizeResult = minimize(
            fun=self._objective_function,
            x0=self.weights.copy(),
            method=cfg.optimizer,
            jac=self._objective_gradient,
            options={'maxiter': cfg.max_iterations},
            tol=cfg.tolerance,
        )
        self.gradient.set(self.w, result.x)
        return result


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Logistic regression on the toy dataset',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--optimizer', type=str, default='gd',
                       help="'gd' or a scipy.optimize.minimize method (e.g. L-BFGS-B)")
    parser.add_argument('--lr', type=float, default=0.01,
                       help='Learning rate for gradient descent')
    parser.add_argument('--iters', type=int, default=100,
                       help='Maximum number of iterations')
    return parser.parse_args()


def main():
    args = parse_args()
    inputs, targets = toy_dataset()
    config = TrainConfig(optimizer=args.optimizer, learning_rate=args.lr,
                         max_iterations=args.iters)
    model = LogisticRegression(inputs, targets, config)
    result = model.fit()
    print(f"  Weights: {np.array2string(result['weights'], precision=4)}")
    print(f"  Predictions: {np.array2string(model.predict(), precision=3)}")


if __name__ == "__main__":
    main()
