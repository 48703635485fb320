"""Unsigned arithmetic over digit-store magnitudes.

All functions take and return canonical magnitudes (see ``digits``) and never
mutate their inputs.  Sign handling happens in ``biginteger``.

Algorithms
----------
compare         digit count first, then digits from the most significant
add / subtract  carry / borrow propagation, subtract requires a >= b
multiply        schoolbook O(n*m) below the Karatsuba threshold,
                Karatsuba divide-and-conquer above it
div_mod         Knuth long division with divisor normalization
to_words        repeated small division into power-of-two words
"""
from __future__ import annotations

import logging

from config import get_settings
from digits import BASE, ONE, ZERO, Magnitude, is_zero, normalize
from errors import DivisionByZero

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def compare(a: Magnitude, b: Magnitude) -> int:
    """Three-way comparison: -1, 0 or 1."""
    if len(a) != len(b):
        return 1 if len(a) > len(b) else -1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return 1 if a[i] > b[i] else -1
    return 0


# ---------------------------------------------------------------------------
# Addition / subtraction
# ---------------------------------------------------------------------------

def add(a: Magnitude, b: Magnitude) -> Magnitude:
    if len(a) < len(b):
        a, b = b, a
    out = []
    carry = 0
    for i in range(len(b)):
        total = a[i] + b[i] + carry
        if total >= BASE:
            out.append(total - BASE)
            carry = 1
        else:
            out.append(total)
            carry = 0
    for i in range(len(b), len(a)):
        total = a[i] + carry
        if total >= BASE:
            out.append(total - BASE)
            carry = 1
        else:
            out.append(total)
            carry = 0
    if carry:
        out.append(carry)
    return tuple(out)


def add_small(a: Magnitude, n: int) -> Magnitude:
    """Add a native non-negative int."""
    out = list(a)
    carry = n
    i = 0
    while carry:
        if i == len(out):
            out.append(0)
        carry, out[i] = divmod(out[i] + carry, BASE)
        i += 1
    return tuple(out)


def subtract(a: Magnitude, b: Magnitude) -> Magnitude:
    """Return a - b.  The caller guarantees a >= b."""
    out = []
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - borrow - (b[i] if i < len(b) else 0)
        if diff < 0:
            out.append(diff + BASE)
            borrow = 1
        else:
            out.append(diff)
            borrow = 0
    if borrow:
        raise ValueError("subtract requires a >= b")
    return normalize(out)


def subtract_small(a: Magnitude, n: int) -> Magnitude:
    """Return a - n for 0 <= n < BASE.  The caller guarantees a >= n."""
    out = list(a)
    borrow = n
    i = 0
    while borrow:
        if i == len(out):
            raise ValueError("subtract requires a >= b")
        diff = out[i] - borrow
        if diff < 0:
            out[i] = diff + BASE
            borrow = 1
        else:
            out[i] = diff
            borrow = 0
        i += 1
    return normalize(out)


# ---------------------------------------------------------------------------
# Multiplication
# ---------------------------------------------------------------------------

def multiply_small(a: Magnitude, n: int) -> Magnitude:
    """Multiply by a native non-negative int of any size."""
    if n == 0 or is_zero(a):
        return ZERO
    out = []
    carry = 0
    for digit in a:
        carry, low = divmod(digit * n + carry, BASE)
        out.append(low)
    while carry:
        carry, low = divmod(carry, BASE)
        out.append(low)
    return tuple(out)


def multiply_schoolbook(a: Magnitude, b: Magnitude) -> Magnitude:
    out = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        k = i
        for y in b:
            carry, out[k] = divmod(out[k] + x * y + carry, BASE)
            k += 1
        out[k] = carry
    return normalize(out)


def shift_digits(a: Magnitude, places: int) -> Magnitude:
    """Multiply by BASE ** places."""
    if places == 0 or is_zero(a):
        return a
    return (0,) * places + a


def _split(a: Magnitude, half: int) -> tuple[Magnitude, Magnitude]:
    return normalize(a[:half]), normalize(a[half:])


def _karatsuba(a: Magnitude, b: Magnitude, threshold: int) -> Magnitude:
    if min(len(a), len(b)) <= threshold:
        return multiply_schoolbook(a, b)

    half = (max(len(a), len(b)) + 1) // 2
    a_low, a_high = _split(a, half)
    b_low, b_high = _split(b, half)

    low = _karatsuba(a_low, b_low, threshold)
    high = _karatsuba(a_high, b_high, threshold)
    cross = _karatsuba(add(a_low, a_high), add(b_low, b_high), threshold)
    middle = subtract(subtract(cross, low), high)

    return add(add(shift_digits(high, 2 * half), shift_digits(middle, half)), low)


def multiply(a: Magnitude, b: Magnitude, threshold: int | None = None) -> Magnitude:
    """Product of two magnitudes.

    ``threshold`` is the digit count of the shorter operand at or below
    which schoolbook multiplication is used.  It only affects speed.
    """
    if is_zero(a) or is_zero(b):
        return ZERO
    if len(a) == 1:
        return multiply_small(b, a[0])
    if len(b) == 1:
        return multiply_small(a, b[0])
    if threshold is None:
        threshold = get_settings().karatsuba_threshold
    if min(len(a), len(b)) <= threshold:
        return multiply_schoolbook(a, b)
    logger.debug(
        "Karatsuba multiply: %d x %d digits (threshold %d)",
        len(a), len(b), threshold,
    )
    return _karatsuba(a, b, threshold)


def square(a: Magnitude) -> Magnitude:
    return multiply(a, a)


def power(a: Magnitude, exponent: int) -> Magnitude:
    """Repeated squaring, exponent is a native non-negative int."""
    result = ONE
    base = a
    while exponent > 0:
        if exponent & 1:
            result = multiply(result, base)
        exponent >>= 1
        if exponent:
            base = square(base)
    return result


# ---------------------------------------------------------------------------
# Division
# ---------------------------------------------------------------------------

def div_mod_small(a: Magnitude, n: int) -> tuple[Magnitude, int]:
    """Divide by a native positive int of any size."""
    if n == 0:
        raise DivisionByZero()
    out = [0] * len(a)
    remainder = 0
    for i in range(len(a) - 1, -1, -1):
        out[i], remainder = divmod(remainder * BASE + a[i], n)
    return normalize(out), remainder


def div_mod(a: Magnitude, b: Magnitude) -> tuple[Magnitude, Magnitude]:
    """Long division: (quotient, remainder) with 0 <= remainder < b."""
    if is_zero(b):
        raise DivisionByZero()
    order = compare(a, b)
    if order < 0:
        return ZERO, a
    if order == 0:
        return ONE, ZERO
    if len(b) == 1:
        quotient, remainder = div_mod_small(a, b[0])
        return quotient, (remainder,)

    # Scale both operands so the divisor's top digit is at least BASE / 2;
    # each quotient digit estimate is then at most two too large.
    scale = BASE // (b[-1] + 1)
    remainder = list(multiply_small(a, scale))
    divisor = list(multiply_small(b, scale))
    if len(remainder) == len(a):
        remainder.append(0)
    n = len(divisor)
    top = divisor[-1]
    divisor.append(0)

    quotient = [0] * (len(remainder) - n)
    for shift in range(len(remainder) - n - 1, -1, -1):
        if remainder[shift + n] == top:
            guess = BASE - 1
        else:
            guess = (remainder[shift + n] * BASE + remainder[shift + n - 1]) // top
            if guess >= BASE:
                guess = BASE - 1

        carry = 0
        borrow = 0
        for i in range(n + 1):
            carry += guess * divisor[i]
            carry, low = carry // BASE, carry % BASE
            borrow += remainder[shift + i] - low
            if borrow < 0:
                remainder[shift + i] = borrow + BASE
                borrow = -1
            else:
                remainder[shift + i] = borrow
                borrow = 0

        # Estimate was too large: add the divisor back until the window is
        # non-negative again.
        while borrow != 0:
            guess -= 1
            carry = 0
            for i in range(n + 1):
                carry += remainder[shift + i] - BASE + divisor[i]
                if carry < 0:
                    remainder[shift + i] = carry + BASE
                    carry = 0
                else:
                    remainder[shift + i] = carry
                    carry = 1
            borrow += carry

        quotient[shift] = guess

    unscaled, _ = div_mod_small(normalize(remainder), scale)
    return normalize(quotient), unscaled


# ---------------------------------------------------------------------------
# Power-of-two words (bitwise support)
# ---------------------------------------------------------------------------

def to_words(a: Magnitude, bits: int) -> list[int]:
    """Little-endian base-2**bits words of a magnitude."""
    radix = 1 << bits
    words = []
    while not is_zero(a):
        a, word = div_mod_small(a, radix)
        words.append(word)
    return words or [0]


def from_words(words: list[int], bits: int) -> Magnitude:
    """Inverse of ``to_words``."""
    radix = 1 << bits
    result = ZERO
    for word in reversed(words):
        result = add_small(multiply_small(result, radix), word)
    return result
