# aad/ops/linalg.py
"""
Linear-algebra primitives.

The backward rule of `Dot` dispatches on the rank of each operand and on
the position being differentiated:

    ranks   out = a·b          ∂/∂a                 ∂/∂b
    (1, 1)  scalar inner prod  g * b                g * a
    (2, 1)  matrix-vector      outer(g, b)          aᵀ g
    (1, 2)  vector-matrix      b g                  outer(a, g)
    (2, 2)  matrix-matrix      g bᵀ                 aᵀ g

Any other combination (scalars, rank > 2) raises
UnsupportedDerivativeError instead of returning a wrongly shaped gradient.
"""

import numpy as np

from ..core.var import Operation
from ..core.vjp import VJP, invalid_argnum
from ..errors import UnsupportedDerivativeError

_SUPPORTED_RANKS = {(1, 1), (2, 1), (1, 2), (2, 2)}


class DotVJP(VJP):
    def __init__(self, a, b):
        self.a = a
        self.b = b

    def vjp(self, g, node, operand, argnum):
        a, b = self.a, self.b
        ranks = (np.ndim(a), np.ndim(b))
        if ranks not in _SUPPORTED_RANKS:
            raise UnsupportedDerivativeError(
                f"dot derivative not supported for operand ranks {ranks}"
            )
        if argnum == 0:
            if ranks == (1, 1):
                return g * b
            if ranks == (2, 1):
                return np.outer(g, b)
            if ranks == (1, 2):
                return np.dot(b, g)
            return np.dot(g, b.T)
        if argnum == 1:
            if ranks == (1, 1):
                return g * a
            if ranks == (2, 1):
                return np.dot(a.T, g)
            if ranks == (1, 2):
                return np.outer(a, g)
            return np.dot(a.T, g)
        raise invalid_argnum(node, argnum)


class Dot(Operation):
    """np.dot for vectors and matrices."""
    op_tag = "dot"

    def forward(self, a, b):
        return np.dot(a, b), DotVJP(a, b)


class TransposeVJP(VJP):
    def vjp(self, g, node, operand, argnum):
        if argnum != 0:
            raise invalid_argnum(node, argnum)
        return np.transpose(g)


class Transpose(Operation):
    op_tag = "transpose"

    def forward(self, x):
        return np.transpose(x), TransposeVJP()


def dot(a, b): return Dot(a, b)
def matmul(a, b): return Dot(a, b)
def transpose(x): return Transpose(x)
