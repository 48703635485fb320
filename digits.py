"""Digit store: the canonical representation of a non-negative magnitude.

A magnitude is a tuple of base-``BASE`` digits, least-significant first.
Canonical form has no most-significant zero digits, except that zero itself
is the single digit ``(0,)``.  A magnitude is never empty.

Every constructor in this module returns canonical form.  Sign lives one
level up, in ``biginteger.BigInteger``.
"""
from __future__ import annotations

import re
from typing import Iterable

from errors import InvalidInteger

# ---------------------------------------------------------------------------
# Radix
# ---------------------------------------------------------------------------

LOG_BASE = 7
BASE = 10 ** LOG_BASE

# Largest magnitude a double represents exactly is 2**53.
SAFE_BOUND = 2 ** 53

Magnitude = tuple[int, ...]

ZERO: Magnitude = (0,)
ONE: Magnitude = (1,)

_DECIMAL = re.compile(r"[0-9]+")


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def normalize(digits: Iterable[int]) -> Magnitude:
    """Strip most-significant zero digits and freeze into a tuple."""
    out = list(digits)
    while len(out) > 1 and out[-1] == 0:
        out.pop()
    if not out:
        return ZERO
    return tuple(out)


def from_int(value: int) -> Magnitude:
    """Split a non-negative native int into digits."""
    if value < 0:
        raise ValueError(f"magnitude must be non-negative, got {value}")
    if value < BASE:
        return (value,)
    out: list[int] = []
    while value:
        value, digit = divmod(value, BASE)
        out.append(digit)
    return tuple(out)


def from_sequence(digits: Iterable[int]) -> Magnitude:
    """Build a magnitude from raw little-endian digits, validating each."""
    out = []
    for d in digits:
        if not isinstance(d, int) or not 0 <= d < BASE:
            raise InvalidInteger(d, f"digit outside [0, {BASE})")
        out.append(d)
    return normalize(out)


def from_decimal(text: str) -> Magnitude:
    """Read an unsigned string of decimal digits, seven at a time."""
    if not _DECIMAL.fullmatch(text):
        raise InvalidInteger(text)
    out = []
    end = len(text)
    while end > 0:
        start = max(0, end - LOG_BASE)
        out.append(int(text[start:end]))
        end = start
    return normalize(out)


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------

def is_zero(mag: Magnitude) -> bool:
    return len(mag) == 1 and mag[0] == 0


def digit_count(mag: Magnitude) -> int:
    return len(mag)


def to_int(mag: Magnitude) -> int:
    value = 0
    for digit in reversed(mag):
        value = value * BASE + digit
    return value


def to_decimal(mag: Magnitude) -> str:
    """Render a magnitude as unsigned decimal text."""
    head = str(mag[-1])
    tail = "".join(str(d).zfill(LOG_BASE) for d in reversed(mag[:-1]))
    return head + tail


def is_safe(mag: Magnitude) -> bool:
    """True when the magnitude is at most ``SAFE_BOUND``."""
    if len(mag) > 3:
        return False
    return to_int(mag) <= SAFE_BOUND
