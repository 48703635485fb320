"""Exceptions raised by the integer engine.

Every error is raised at the point of the invalid operation.  Operands are
immutable, so a failed call never leaves partial state behind.
"""
from __future__ import annotations

from typing import Any


class BigIntegerError(Exception):
    """Base class for every engine error."""


class InvalidInteger(BigIntegerError, ValueError):
    """Raised when text or a native value cannot be read as an integer."""

    def __init__(self, text: Any, reason: str = "") -> None:
        self.text = text
        self.reason = reason
        message = f"Invalid integer: {text!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidBaseZero(BigIntegerError, ValueError):
    """Raised when a non-zero value is converted to or from base 0."""

    def __init__(self) -> None:
        super().__init__("Cannot convert nonzero numbers to base 0.")


class DivisionByZero(BigIntegerError, ZeroDivisionError):
    """Raised by divide, mod, divmod and mod_pow on a zero divisor."""

    def __init__(self, operation: str = "division") -> None:
        self.operation = operation
        super().__init__(f"{operation} by zero")


class ShiftOutOfRange(BigIntegerError, OverflowError):
    """Raised when a shift amount lies outside [-2**53, 2**53]."""

    def __init__(self, amount: Any) -> None:
        self.amount = amount
        super().__init__(f"Shift amount {amount} is outside the safe range")


class UnsupportedExponent(BigIntegerError, ValueError):
    """Raised when an exponent has no defined result."""

    def __init__(self, exponent: Any, reason: str) -> None:
        self.exponent = exponent
        super().__init__(f"Unsupported exponent {exponent}: {reason}")


class NotInvertible(UnsupportedExponent):
    """Raised when a modular inverse does not exist."""

    def __init__(self, value: Any, modulus: Any) -> None:
        self.value = value
        self.modulus = modulus
        super().__init__(-1, f"{value} has no inverse modulo {modulus}")
