"""Conversion between integers and digit strings in any integer base.

Bases may be negative, zero, one or minus one as well as the usual 2..36.
Digits below the alphabet length are written with the alphabet; larger
digits use bracket notation, so 567890 in base 100 is ``<56><78><90>``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

import digits
from biginteger import MINUS_ONE, ONE, ZERO, BigInteger, Operand, parse_value
from errors import InvalidBaseZero, InvalidInteger

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_SIGNED_DECIMAL = re.compile(r"(-?)([0-9]+)")
_BRACKET_DIGIT = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class BaseRepresentation:
    """Digits of a value in some base, most significant first."""

    digits: tuple[int, ...]
    is_negative: bool = False


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_decimal(text: str) -> BigInteger:
    """Read ``-?[0-9]+``; anything else is an ``InvalidInteger``."""
    match = _SIGNED_DECIMAL.fullmatch(text)
    if match is None:
        raise InvalidInteger(text)
    sign, body = match.groups()
    return BigInteger._from_magnitude(digits.from_decimal(body), sign == "-")


def parse_integer(
    text: str,
    base: Operand = 10,
    alphabet: str | None = None,
    case_sensitive: bool = False,
) -> BigInteger:
    """Read ``text`` as a number written in ``base``.

    Branches: RADIX-DECIMAL, RADIX-ZERO-ERROR, RADIX-BRACKET, RADIX-DIGIT-RANGE
    """
    base = parse_value(base)
    if alphabet is None and base.equals(10):                  # RADIX-DECIMAL
        return parse_decimal(text)

    alphabet = DEFAULT_ALPHABET if alphabet is None else alphabet
    if not case_sensitive:
        text = text.lower()
        alphabet = alphabet.lower()
    values = {c: i for i, c in enumerate(alphabet)}

    negative = text.startswith("-")
    body = text[1:] if negative else text
    if not body:
        raise InvalidInteger(text, "no digits")

    read = []
    i = 0
    while i < len(body):
        c = body[i]
        if c in values:
            read.append(values[c])
            i += 1
        elif c == "<":                                        # RADIX-BRACKET
            end = body.find(">", i)
            if end < 0:
                raise InvalidInteger(text, "unterminated bracket digit")
            inner = body[i + 1:end]
            if not _BRACKET_DIGIT.fullmatch(inner):
                raise InvalidInteger(text, f"bad bracket digit <{inner}>")
            read.append(int(inner))
            i = end + 1
        else:
            raise InvalidInteger(text, f"{c!r} is not a valid character")

    for d in read:
        if d == 0:
            continue
        if base.is_zero():                                    # RADIX-ZERO-ERROR
            raise InvalidBaseZero()
        if base.compare_abs(d) <= 0 and not (d == 1 and base.is_unit()):
            raise InvalidInteger(                             # RADIX-DIGIT-RANGE
                text, f"{d} is not a valid digit in base {base}"
            )

    return from_array(read, base, is_negative=negative)


def from_array(
    values: Iterable[Operand], base: Operand = 10, is_negative: bool = False
) -> BigInteger:
    """Sum of ``digit * base**i`` over most-significant-first digits."""
    base = parse_value(base)
    result = ZERO
    for d in values:
        result = result.multiply(base).add(parse_value(d))
    return result.negate() if is_negative else result


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def to_base(value: Operand, base: Operand) -> BaseRepresentation:
    """Digits of ``value`` in ``base``.

    Positive bases carry the sign in ``is_negative``.  Negative bases and
    base -1 represent negative values directly, so their flag is always
    false.

    Branches: RADIX-ZERO-OK, RADIX-ZERO-ERROR, RADIX-MINUS-ONE, RADIX-UNARY,
              RADIX-NEG-ADJUST
    """
    n = parse_value(value)
    base = parse_value(base)

    if base.is_zero():
        if n.is_zero():                                       # RADIX-ZERO-OK
            return BaseRepresentation((0,))
        raise InvalidBaseZero()                               # RADIX-ZERO-ERROR

    if base.equals(MINUS_ONE):                                # RADIX-MINUS-ONE
        if n.is_zero():
            return BaseRepresentation((0,))
        count = int(n.abs())
        logger.debug("Expanding %s into %d base -1 digit pairs", n, count)
        if n.is_negative():
            return BaseRepresentation((1, 0) * count)
        return BaseRepresentation((1,) + (0, 1) * (count - 1))

    negative = False
    if n.is_negative() and base.is_positive():
        negative = True
        n = n.abs()

    if base.is_unit():                                        # RADIX-UNARY
        if n.is_zero():
            return BaseRepresentation((0,))
        count = int(n)
        logger.debug("Expanding %s into %d unary digits", n, count)
        return BaseRepresentation((1,) * count, negative)

    out = []
    left = n
    while left.is_negative() or left.compare_abs(base) >= 0:
        quotient, digit = left.divmod(base)
        left = quotient
        if digit.is_negative():                               # RADIX-NEG-ADJUST
            digit = base.subtract(digit).abs()
            left = left.add(ONE)
        out.append(int(digit))
    out.append(int(left))
    return BaseRepresentation(tuple(reversed(out)), negative)


def format_integer(
    value: Operand, base: Operand = 10, alphabet: str | None = None
) -> str:
    rep = to_base(value, base)
    alphabet = DEFAULT_ALPHABET if alphabet is None else alphabet
    text = "".join(
        alphabet[d] if d < len(alphabet) else f"<{d}>" for d in rep.digits
    )
    return "-" + text if rep.is_negative else text
