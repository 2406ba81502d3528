# aad/core/engine.py
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Any, Dict, List, Sequence

import numpy as np

from ..config import DTYPE
from .context import Context
from .node import Node
from .topology import reverse_topology
from .utils import assigning_sum, to_value, zeros_like
from .var import Expression, Variable

logger = logging.getLogger(__name__)


def _seed_for(root: Node, seed: Any):
    """
    Shape the seed like the root value. A scalar seed on a tensor-valued
    root becomes one unit of `seed` per output element.
    """
    seed = to_value(seed)
    shape = np.shape(root.value)
    if np.shape(seed) != shape:
        seed = np.broadcast_to(seed, shape).astype(DTYPE)
    return seed


def backprop_node(root: Node, target_id: int, seed: Any):
    """
    Backward sweep over an already evaluated pass.

    Returns the gradient accumulated at `target_id`, or None when the root
    does not depend on it.

    Notes:
        - Contributions for one id are collected in a list and summed left
          to right in arrival order (`assigning_sum`) when the node is
          reached; the traversal guarantees the list is complete by then.
        - Only relevant operands receive contributions; every other operand
          would be skipped by the traversal anyway.
    """
    pending: Dict[int, List[Any]] = defaultdict(list)
    pending[root.id].append(_seed_for(root, seed))
    result = None
    n_visited = 0

    topo = reverse_topology(root, target_id)
    for node in topo:
        contributions = pending.get(node.id)
        if not contributions:
            continue  # nothing to propagate
        n_visited += 1
        g = assigning_sum(contributions)
        if node.id == target_id:
            result = g
        for argnum, p in enumerate(node.operands):
            if not p.depends_on(target_id):
                continue
            pending[p.id].append(node.vjp(g, p, argnum))

    logger.debug("backprop wrt id %d visited %d node(s)", target_id, n_visited)
    return result


def backprop(expr: Expression, context: Context, wrt: Variable, seed: Any = 1.0):
    """
    One forward pass then one reverse pass: d(expr)/d(wrt), scaled by `seed`.

    A variable the expression does not depend on gets the additive identity
    (zeros shaped like the variable). A variable from another context raises
    ContextMismatchError.
    """
    context.check_variable(wrt)
    tape = context.new_tape()
    root = expr.eval(context, tape)
    logger.debug("forward pass recorded %d node(s)", len(tape))

    g = backprop_node(root, wrt.index, seed)
    if g is None:
        return zeros_like(context.get_variable_value(wrt))
    if np.ndim(g) == 0:
        return DTYPE(g)
    return g


class Gradient:
    """
    Gradient of an expression with respect to the variables of its context.

    Every request rebuilds the forward pass from the current variable
    values, so changing a value between requests (gradient descent, say)
    needs no extra bookkeeping.

    Usage:
        >>> ctx = Context()
        >>> x = ctx.create_variable(0.5)
        >>> y = ctx.create_variable(0.3)
        >>> g = Gradient.of(y * sin(x) + cos(y), ctx)
        >>> g.grad(x)            # y * cos(x)
        >>> ctx.set_variable_value(x, 0.8)
        >>> g.grad(x)            # recomputed at the new value
    """
    def __init__(self, expr: Expression, context: Context):
        self.expr = expr
        self._context = context

    @classmethod
    def of(cls, expr: Expression, context: Context) -> "Gradient":
        return cls(expr, context)

    @property
    def context(self) -> Context:
        return self._context

    def value(self):
        """Forward value of the expression at the current variable values."""
        return self.expr.eval(self._context).value

    def grad(self, wrt: Variable):
        """d(expr)/d(wrt) with a unit seed."""
        return self.backprop(wrt, 1.0)

    def backprop(self, wrt: Variable, seed: Any):
        return backprop(self.expr, self._context, wrt, seed)

    def grads(self, wrts: Sequence[Variable]) -> List[Any]:
        """One single-target backprop per variable, in order."""
        return [self.grad(v) for v in wrts]

    def get(self, var: Variable):
        return self._context.get_variable_value(var)

    def set(self, var: Variable, value: Any) -> None:
        self._context.set_variable_value(var, value)
