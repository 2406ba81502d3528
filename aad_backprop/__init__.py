# aad_backprop/__init__.py
"""Reverse-mode automatic differentiation over lazily evaluated expressions."""

from .aad import *  # noqa: F401,F403
from .aad import __all__

__version__ = "0.1.0"
