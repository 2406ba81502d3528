# aad/core/seeds.py

#-----------------------------------------------------------------------------
# One-call gradients for plain Python functions. Each call builds its own
# Context, seeds the scalar output with 1 and backpropagates once per input.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Union
import numpy as np

from .context import Context
from .engine import backprop
from .var import Expression, Variable, as_expression

Numeric = Union[float, np.ndarray]


def value(expr: Any, context: Context) -> Any:
    """Forward value of `expr` in `context`; plain numbers pass through unchanged."""
    if not isinstance(expr, Expression):
        return expr
    return expr.eval(context).value


def _scalar_output(f_out: Any, context: Context, caller: str) -> Expression:
    y = as_expression(f_out)
    if np.shape(y.eval(context).value) != ():
        raise ValueError(f"{caller} expects scalar output.")
    return y


def grad(f: Callable[[Variable], Expression], x0: Numeric) -> Numeric:
    """df/dx at x0 for a function of one (scalar or array) input."""
    ctx = Context()
    x = ctx.create_variable(x0)
    y = _scalar_output(f(x), ctx, "grad(f, x0)")
    return backprop(y, ctx, x, seed=1.0)


def grads(f: Callable[[Dict[str, Variable]], Expression],
          inputs: Dict[str, Numeric]) -> Dict[str, Numeric]:
    """
    Partials of f with respect to each named input.

    `f` receives a dict mapping every key of `inputs` to a Variable holding
    that input's value. The result maps the same keys, in the same order, to
    the partial derivatives. One backprop runs per key.
    """
    ctx = Context()
    handles = {k: ctx.create_variable(v) for k, v in inputs.items()}
    y = _scalar_output(f(handles), ctx, "grads(f, inputs)")
    return {k: backprop(y, ctx, handle) for k, handle in handles.items()}


def grads_list(f: Callable[[List[Variable]], Expression],
               x0_list: Iterable[Numeric]) -> List[Numeric]:
    """
    Positional form of grads(): `f` takes a list of Variables and the
    partials come back in input order.

        grads_list(lambda xs: xs[0] * xs[0] + 3 * xs[1], [2.0, 4.0])
        # -> partials 4.0 and 3.0
    """
    ctx = Context()
    xs = [ctx.create_variable(v) for v in x0_list]
    y = _scalar_output(f(xs), ctx, "grads_list(f, x0_list)")
    return [backprop(y, ctx, x) for x in xs]
