# aad/core/utils.py
"""
Numeric helpers shared by the engine and the operation catalog.
"""

from functools import reduce
from typing import Any, Sequence, Tuple
import operator

import numpy as np

from ..config import DTYPE


def to_value(val: Any):
    """
    Convert user input to the engine's numeric form:
      - int/float/numpy scalar  -> np.float64
      - list/tuple/ndarray      -> float64 ndarray (copied)
    """
    if isinstance(val, (list, tuple, np.ndarray)):
        return np.array(val, dtype=DTYPE)
    if isinstance(val, (int, float, np.integer, np.floating)):
        return DTYPE(val)
    raise TypeError(
        f"Only numeric types (int, float, list, tuple, ndarray) can be stored, "
        f"but got {type(val)}"
    )


def assigning_sum(xs: Sequence[Any]):
    """
    Sum the gradient contributions in `xs` left to right, starting from the
    first element (no zero of unknown shape is needed).
    """
    if not xs:
        raise ValueError("Cannot do an assigning sum of an empty sequence")
    return reduce(operator.add, xs)


def unbroadcast(g, target_shape: Tuple[int, ...]):
    """
    Reduce a broadcasted gradient `g` back to `target_shape` by summing over
    the broadcasted axes.
    """
    if np.shape(g) == tuple(target_shape):
        return g
    g = np.asarray(g, dtype=DTYPE)
    if g.ndim < len(target_shape):
        return np.broadcast_to(g, target_shape).copy()
    while g.ndim > len(target_shape):
        g = g.sum(axis=0)
    for i, (gs, ts) in enumerate(zip(g.shape, target_shape)):
        if gs != ts:
            g = g.sum(axis=i, keepdims=True)
    g = g.reshape(target_shape)
    return DTYPE(g) if g.ndim == 0 else g


def repeat_to_match(g, target_shape: Tuple[int, ...], axis=None):
    """
    Tile a reduced gradient back to the shape of the reduction's input.
    `axis` is the axis (or axes) the reduction removed; None means all.
    """
    g = np.asarray(g, dtype=DTYPE)
    if axis is not None:
        g = np.expand_dims(g, axis)
    return np.broadcast_to(g, target_shape).copy()


def zeros_like(val):
    """Additive identity shaped like `val`."""
    if np.ndim(val) == 0:
        return DTYPE(0.0)
    return np.zeros_like(val, dtype=DTYPE)
