"""
Bumping: finite-difference gradients for validating the reverse pass.

Each partial costs one (forward) or two (central) extra forward passes per
element of the bumped variable, so this is only meant for checking small
problems:

    ∂f/∂x ≈ (f(x + ε) - f(x)) / ε              forward
    ∂f/∂x ≈ (f(x + ε) - f(x - ε)) / (2ε)       central

The variable's value is bumped in place in the Context and restored
afterwards, also when evaluation fails.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .config import DTYPE, GradCheckConfig
from .core.context import Context
from .core.engine import backprop
from .core.var import Expression, Variable

logger = logging.getLogger(__name__)

SCHEMES = ('central', 'forward')


def _eval_scalar(expr: Expression, context: Context) -> float:
    out = expr.eval(context).value
    if np.shape(out) != ():
        raise ValueError("finite-difference check expects a scalar-valued expression")
    return float(out)


def finite_diff_grad(expr: Expression,
                     context: Context,
                     variable: Variable,
                     eps: Optional[float] = None,
                     scheme: Optional[str] = None):
    """
    Finite-difference estimate of d(expr)/d(variable) at the current values.

    Args:
        expr: scalar-valued expression
        context: context holding the variable values
        variable: variable to bump (scalar or array; arrays are bumped
                  one element at a time)
        eps: bump size (default GradCheckConfig.epsilon)
        scheme: 'central' or 'forward' (default GradCheckConfig.scheme)

    Returns:
        np.float64 for a scalar variable, otherwise an array shaped like it
    """
    defaults = GradCheckConfig()
    eps = defaults.epsilon if eps is None else eps
    scheme = defaults.scheme if scheme is None else scheme
    if scheme not in SCHEMES:
        raise ValueError(f"Unknown finite-difference scheme {scheme!r}; expected one of {SCHEMES}")

    base = context.get_variable_value(variable)
    base_arr = np.array(base, dtype=DTYPE)
    f0 = _eval_scalar(expr, context) if scheme == 'forward' else None
    out = np.zeros_like(base_arr)

    try:
        for idx in np.ndindex(base_arr.shape):
            bumped = base_arr.copy()
            bumped[idx] += eps
            context.set_variable_value(variable, bumped if base_arr.ndim else bumped[()])
            f_up = _eval_scalar(expr, context)
            if scheme == 'forward':
                out[idx] = (f_up - f0) / eps
                continue
            bumped[idx] -= 2.0 * eps
            context.set_variable_value(variable, bumped if base_arr.ndim else bumped[()])
            f_down = _eval_scalar(expr, context)
            out[idx] = (f_up - f_down) / (2.0 * eps)
    finally:
        context.set_variable_value(variable, base)

    if out.ndim == 0:
        return DTYPE(out)
    return out


def compare_grads(expr: Expression,
                  context: Context,
                  variable: Variable,
                  eps: Optional[float] = None,
                  scheme: Optional[str] = None) -> Tuple:
    """Return (finite-difference estimate, reverse-mode gradient)."""
    fd = finite_diff_grad(expr, context, variable, eps=eps, scheme=scheme)
    ad = backprop(expr, context, variable)
    return fd, ad


def check_grad(expr: Expression,
               context: Context,
               variable: Variable,
               config: Optional[GradCheckConfig] = None) -> bool:
    """True if bumping and the reverse pass agree within the configured tolerances."""
    config = config or GradCheckConfig()
    fd, ad = compare_grads(expr, context, variable, eps=config.epsilon, scheme=config.scheme)
    ok = bool(np.allclose(fd, ad, rtol=config.rtol, atol=config.atol))
    if not ok:
        logger.warning("gradient check failed for %r: fd=%s ad=%s", variable, fd, ad)
    return ok
