# aad/__init__.py
# Reverse-mode automatic adjoint differentiation

from .core.context import Context
from .core.var import Expression, Variable, Constant
from .core.engine import Gradient, backprop
from .core.seeds import grad, grads, grads_list, value
from .errors import (
    AADError,
    ContextMismatchError,
    UnsupportedDerivativeError,
    InvalidArgnumError,
)
from .config import GradCheckConfig, configure_logging

# Operation catalog
from . import ops
from .ops import *  # noqa: F401,F403

# Finite-difference validation
from .bumping import finite_diff_grad, compare_grads, check_grad

__all__ = [
    # Core
    'Context',
    'Expression',
    'Variable',
    'Constant',
    # Engine
    'Gradient',
    'backprop',
    'grad',
    'grads',
    'grads_list',
    'value',
    # Errors
    'AADError',
    'ContextMismatchError',
    'UnsupportedDerivativeError',
    'InvalidArgnumError',
    # Config
    'GradCheckConfig',
    'configure_logging',
    # Bumping
    'finite_diff_grad',
    'compare_grads',
    'check_grad',
    # Operations
    'ops',
] + ops.__all__
