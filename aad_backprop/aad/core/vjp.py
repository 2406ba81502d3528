# aad/core/vjp.py
"""
Backward rules (vector-Jacobian products).

Every Node carries one VJP object. The engine asks it:
    "given gradient g flowing into `node`, what flows into `operand`,
     which sits at position `argnum` of node.operands?"

Rules are pure: they only read their captured forward-pass snapshots and
their arguments. Operations that need more than the node/operand values
(e.g. the *other* factor of a product) capture it at construction time.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from ..errors import InvalidArgnumError
from .utils import unbroadcast

if TYPE_CHECKING:
    from .node import Node


class VJP(ABC):
    """Strategy object implementing one operation's local chain-rule step."""

    @abstractmethod
    def vjp(self, g: Any, node: "Node", operand: "Node", argnum: int) -> Any:
        ...

    def __repr__(self):
        return f"{type(self).__name__}()"


def invalid_argnum(node: "Node", argnum: int):
    return InvalidArgnumError(node.op_tag, argnum, len(node.operands))


class IdentityVJP(VJP):
    """Pass-through: leaves and addition."""

    def vjp(self, g, node, operand, argnum):
        if not 0 <= argnum < len(node.operands):
            raise invalid_argnum(node, argnum)
        return unbroadcast(g, np.shape(operand.value))


class NegVJP(VJP):
    def vjp(self, g, node, operand, argnum):
        if argnum != 0:
            raise invalid_argnum(node, argnum)
        return -g


class SubVJP(VJP):
    def vjp(self, g, node, operand, argnum):
        if argnum == 0:
            return unbroadcast(g, np.shape(operand.value))
        if argnum == 1:
            return unbroadcast(-g, np.shape(operand.value))
        raise invalid_argnum(node, argnum)


class LinVJP(VJP):
    """
    Elementwise unary rule g * f'(x), with f' evaluated at the operand's
    forward value.
    """

    def __init__(self, deriv: Callable[[Any], Any]):
        self.deriv = deriv

    def vjp(self, g, node, operand, argnum):
        if argnum != 0:
            raise invalid_argnum(node, argnum)
        return g * self.deriv(operand.value)


class OutputVJP(VJP):
    """
    Elementwise unary rule whose derivative is cheaper in terms of the
    node's own output y = f(x): g * d(y). Used by exp, sigmoid, tanh, sqrt.
    """

    def __init__(self, deriv_from_output: Callable[[Any], Any]):
        self.deriv_from_output = deriv_from_output

    def vjp(self, g, node, operand, argnum):
        if argnum != 0:
            raise invalid_argnum(node, argnum)
        return g * self.deriv_from_output(node.value)
