# aad/errors.py
"""
Exception types raised by the AAD engine.

All of them signal programmer errors (contract violations). None is
transient, so callers are not expected to catch and retry.
"""


class AADError(Exception):
    """Base class for every error raised by the engine."""


class ContextMismatchError(AADError, IndexError):
    """A Variable was used against a Context that did not create it."""


class UnsupportedDerivativeError(AADError, NotImplementedError):
    """A backward rule was asked for a shape/rank combination it cannot handle."""


class InvalidArgnumError(AADError, ValueError):
    """A backward rule received an operand position the operation does not have."""

    def __init__(self, op_tag: str, argnum: int, arity: int):
        super().__init__(
            f"Invalid argnum {argnum} fed to {op_tag} VJP (operation takes {arity} operand(s))"
        )
        self.op_tag = op_tag
        self.argnum = argnum
        self.arity = arity
