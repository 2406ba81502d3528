# aad/core/__init__.py

"""
Core public API for the AAD package.

Exports:
    Context         : Store of variable values; creates Variables.
    Variable        : Handle to one leaf slot of a Context.
    Constant        : Leaf with a fixed value (never a differentiation target).
    Expression      : Base of every differentiable expression.
    Node            : Record of one evaluated expression in one pass.
    Gradient        : Driver: value and per-variable gradients of an expression.
    backprop        : One forward + one reverse pass for a single target.
    reverse_topology: Restricted reverse-topological iterator over a pass.
    grad, grads, grads_list, value : Convenience seeds on fresh contexts.
"""

from .context import Context
from .var import Expression, Variable, Constant, Operation, as_expression
from .node import Node
from .tape import Tape
from .topology import reverse_topology
from .engine import Gradient, backprop, backprop_node
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Context",
    "Expression", "Variable", "Constant", "Operation", "as_expression",
    "Node", "Tape",
    "reverse_topology",
    "Gradient", "backprop", "backprop_node",
    "grad", "grads", "grads_list", "value",
]
