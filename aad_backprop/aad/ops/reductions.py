# aad/ops/reductions.py
import numpy as np

from ..core.var import Operation
from ..core.vjp import VJP, invalid_argnum
from ..core.utils import repeat_to_match


class SumVJP(VJP):
    """Tile the incoming gradient back to the operand's shape (scaled for mean)."""

    def __init__(self, shape, axis, scale: float = 1.0):
        self.shape = shape
        self.axis = axis
        self.scale = scale

    def vjp(self, g, node, operand, argnum):
        if argnum != 0:
            raise invalid_argnum(node, argnum)
        tiled = repeat_to_match(g, self.shape, self.axis)
        if self.scale != 1.0:
            tiled = tiled * self.scale
        if tiled.ndim == 0:
            return np.float64(tiled)
        return tiled


class Sum(Operation):
    """Sum over all elements (axis=None) or along `axis`."""
    op_tag = "sum"

    def __init__(self, x, axis=None):
        super().__init__(x)
        self.axis = axis

    def forward(self, x):
        return np.sum(x, axis=self.axis), SumVJP(np.shape(x), self.axis)


class Mean(Operation):
    """Arithmetic mean over all elements or along `axis`."""
    op_tag = "mean"

    def __init__(self, x, axis=None):
        super().__init__(x)
        self.axis = axis

    def forward(self, x):
        shape = np.shape(x)
        out = np.mean(x, axis=self.axis)
        count = np.size(x) / max(np.size(out), 1)
        return out, SumVJP(shape, self.axis, scale=1.0 / count)


def reduce_sum(x, axis=None): return Sum(x, axis)
def reduce_mean(x, axis=None): return Mean(x, axis)
def sum_all(x): return Sum(x)
