# aad/core/var.py
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Optional, Tuple

import numpy as np

from .node import Node
from .tape import Tape
from .utils import to_value
from .vjp import VJP

if TYPE_CHECKING:
    from .context import Context


class Expression:
    """
    Immutable description of a computation, evaluated on demand against a
    Context.

    Subclasses implement `_forward(tape)`. `eval` opens a fresh Tape when
    called without one, so every top-level evaluation is an independent
    forward pass.
    """
    op_tag = "expr"

    def eval(self, context: "Context", tape: Optional[Tape] = None) -> Node:
        if tape is None:
            tape = context.new_tape()
        return tape.evaluate(self)

    def subexpressions(self) -> Tuple["Expression", ...]:
        """Direct arguments, in argument order (none for leaves)."""
        return ()

    def _forward(self, tape: Tape) -> Node:
        """Build this expression's node; its arguments are already on `tape`."""
        raise NotImplementedError

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow, powf
        if isinstance(other, (int, float)):
            return powf(self, other)
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)

    def __matmul__(self, other):
        from ..ops.linalg import dot
        return dot(self, other)

    def __rmatmul__(self, other):
        from ..ops.linalg import dot
        return dot(other, self)


class Variable(Expression):
    """
    Stable handle to one leaf slot of a Context.

    Evaluates to a leaf Node whose id is the variable index, so every
    occurrence of the same variable in an expression shares one id.
    """
    op_tag = "var"

    def __init__(self, index: int, context: "Context"):
        self.index = index
        self._context = context

    @property
    def context(self) -> "Context":
        return self._context

    def _forward(self, tape: Tape) -> Node:
        value = tape.context.get_variable_value(self)
        return tape.make_leaf(self.index, value, self.op_tag)

    def __eq__(self, other):
        return (isinstance(other, Variable)
                and other.index == self.index
                and other._context is self._context)

    def __hash__(self):
        return hash((self.index, id(self._context)))

    def __repr__(self):
        return f"Variable({self.index})"


class Constant(Expression):
    """
    Leaf holding a fixed value. It gets a fresh pass-local id, so it can
    never be a differentiation target.
    """
    op_tag = "const"

    def __init__(self, value: Any):
        self.value = to_value(value)

    def _forward(self, tape: Tape) -> Node:
        return tape.make_leaf(tape.next_id(), self.value, self.op_tag)

    def __repr__(self):
        return f"Constant({self.value!r})"


def as_expression(x: Any) -> Expression:
    """Ensure x is an Expression; otherwise wrap it as a Constant."""
    return x if isinstance(x, Expression) else Constant(x)


class Operation(Expression):
    """
    Base class for catalog operations.

    Holds the sub-expressions in argument order. Evaluation is depth-first in
    that order; the subclass's `forward` then maps operand values to
    `(output_value, backward_rule)`, capturing any snapshot the rule needs.
    """
    op_tag = "op"

    def __init__(self, *args: Any):
        self.args: Tuple[Expression, ...] = tuple(as_expression(a) for a in args)

    def forward(self, *values: Any) -> Tuple[Any, VJP]:
        raise NotImplementedError

    def subexpressions(self) -> Tuple[Expression, ...]:
        return self.args

    def _forward(self, tape: Tape) -> Node:
        operands = [tape.lookup(arg) for arg in self.args]
        value, rule = self.forward(*[p.value for p in operands])
        if np.ndim(value) == 0:
            value = np.float64(value)
        return tape.make_node(value, operands, rule, self.op_tag)

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(repr(a) for a in self.args)})"
