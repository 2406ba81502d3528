# aad/core/context.py
from __future__ import annotations
from typing import Any, List

from ..errors import ContextMismatchError
from .tape import Tape
from .utils import to_value
from .var import Variable


class Context:
    """
    Session state for expression building: the ordered store of current
    variable values.

    Variables are appended monotonically and never removed. Values may be
    overwritten between gradient requests (e.g. one gradient-descent step),
    but not while a pass is running.
    """
    def __init__(self):
        self._values: List[Any] = []

    def __len__(self):
        return len(self._values)

    @property
    def n_variables(self) -> int:
        return len(self._values)

    def create_variable(self, value: Any) -> Variable:
        """Append `value` to the store and return a handle to its slot."""
        var = Variable(len(self._values), self)
        self._values.append(to_value(value))
        return var

    def variables(self) -> List[Variable]:
        return [Variable(i, self) for i in range(len(self._values))]

    def check_variable(self, var: Variable) -> None:
        """Fail fast if `var` was not created by this context."""
        if not isinstance(var, Variable):
            raise TypeError(f"Expected a Variable, got {type(var)}")
        if var.context is not self:
            raise ContextMismatchError(
                f"{var!r} belongs to a different Context"
            )
        if not 0 <= var.index < len(self._values):
            raise ContextMismatchError(
                f"{var!r} is out of range for a Context with {len(self._values)} variable(s)"
            )

    def get_variable_value(self, var: Variable) -> Any:
        self.check_variable(var)
        return self._values[var.index]

    def set_variable_value(self, var: Variable, value: Any) -> None:
        self.check_variable(var)
        self._values[var.index] = to_value(value)

    def new_tape(self) -> Tape:
        """Open the record for a new forward pass."""
        return Tape(self)

    def __repr__(self):
        return f"Context(n_variables={len(self._values)})"
