"""Number theory over BigInteger: gcd, lcm, modular arithmetic, primality
and uniform random draws.

Primality policy
----------------
``is_prime`` is deterministic.  It trial-divides by every prime below
``Settings.trial_division_limit``, which settles any value below the square
of that limit, then runs Miller-Rabin.  With the first thirteen primes as
witnesses Miller-Rabin is exact below ``DETERMINISTIC_BOUND``; above it the
witness count grows with ``ln n`` (``strict=True`` uses the ``2 ln(n)**2``
bound, exact under the generalized Riemann hypothesis).

``is_probable_prime`` is a Fermat test with random bases and may disagree
with itself between calls on Carmichael numbers.
"""
from __future__ import annotations

import logging
import math
import random
import threading
from functools import lru_cache

import digits
import magnitude
from biginteger import ONE, ZERO, BigInteger, Operand, parse_value
from config import get_settings
from errors import DivisionByZero, NotInvertible

logger = logging.getLogger(__name__)

MILLER_RABIN_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
DETERMINISTIC_BOUND = 3317044064679887385961981

_local = threading.local()


def default_rng() -> random.Random:
    """The calling thread's random source."""
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = _local.rng = random.Random()
    return rng


# ---------------------------------------------------------------------------
# gcd / lcm
# ---------------------------------------------------------------------------

def gcd(a: Operand, b: Operand) -> BigInteger:
    x = parse_value(a)._magnitude
    y = parse_value(b)._magnitude
    while not digits.is_zero(y):
        x, y = y, magnitude.div_mod(x, y)[1]
    return BigInteger._from_magnitude(x)


def lcm(a: Operand, b: Operand) -> BigInteger:
    a, b = parse_value(a).abs(), parse_value(b).abs()
    if a.is_zero() or b.is_zero():
        return ZERO
    return a.divide(gcd(a, b)).multiply(b)


# ---------------------------------------------------------------------------
# Modular arithmetic
# ---------------------------------------------------------------------------

def _residue(value: BigInteger, modulus: BigInteger) -> BigInteger:
    """value mod modulus in [0, modulus) for a positive modulus."""
    r = value.mod(modulus)
    return r.add(modulus) if r.is_negative() else r


def mod_inv(value: Operand, modulus: Operand) -> BigInteger:
    """Inverse of ``value`` modulo ``|modulus|``, in ``[0, |modulus|)``."""
    value = parse_value(value)
    m = parse_value(modulus).abs()
    if m.is_zero():
        raise DivisionByZero("modular inverse")

    t, new_t = ZERO, ONE
    r, new_r = m, _residue(value, m)
    while not new_r.is_zero():
        q = r.divide(new_r)
        t, new_t = new_t, t.subtract(q.multiply(new_t))
        r, new_r = new_r, r.subtract(q.multiply(new_r))
    if not r.is_unit():
        raise NotInvertible(value, modulus)
    return _residue(t, m)


def mod_pow(base: Operand, exponent: Operand, modulus: Operand) -> BigInteger:
    """``base ** exponent`` modulo ``|modulus|``, in ``[0, |modulus|)``.

    Branches: MODPOW-ZERO-MODULUS, MODPOW-NEGATIVE-EXPONENT
    """
    m = parse_value(modulus).abs()
    if m.is_zero():                                           # MODPOW-ZERO-MODULUS
        raise DivisionByZero("modular exponentiation")
    base = parse_value(base)
    exponent = parse_value(exponent)
    if exponent.is_negative():                                # MODPOW-NEGATIVE-EXPONENT
        base = mod_inv(base, m)
        exponent = exponent.negate()
    if m.is_unit():
        return ZERO

    mod_mag = m._magnitude
    result = digits.ONE
    square = _residue(base, m)._magnitude
    words = magnitude.to_words(exponent._magnitude, 30)
    for index, word in enumerate(words):
        last = index == len(words) - 1
        for _ in range(30):
            if word & 1:
                result = magnitude.div_mod(magnitude.multiply(result, square), mod_mag)[1]
            word >>= 1
            if last and word == 0:
                break
            square = magnitude.div_mod(magnitude.square(square), mod_mag)[1]
    return BigInteger._from_magnitude(result)


# ---------------------------------------------------------------------------
# Primality
# ---------------------------------------------------------------------------

@lru_cache(maxsize=8)
def small_primes(limit: int) -> tuple[int, ...]:
    """Primes below ``limit`` by the sieve of Eratosthenes."""
    sieve = bytearray([1]) * limit
    sieve[:2] = b"\x00\x00"
    for p in range(2, math.isqrt(limit - 1) + 1):
        if sieve[p]:
            sieve[p * p::p] = bytearray(len(range(p * p, limit, p)))
    return tuple(i for i, flag in enumerate(sieve) if flag)


def _miller_rabin(n: BigInteger, witnesses) -> bool:
    """Strong probable-prime test of odd ``n > 2`` against each witness."""
    n_prev = n.prev()
    d = n_prev
    r = 0
    while d.is_even():
        d = d.shift_right(1)
        r += 1

    for a in witnesses:
        if n.compare(a) <= 0:
            continue
        x = mod_pow(a, d, n)
        if x.is_unit() or x.equals(n_prev):
            continue
        for _ in range(r - 1):
            x = x.square().mod(n)
            if x.is_unit():
                return False
            if x.equals(n_prev):
                break
        else:
            return False
    return True


def is_prime(value: Operand, strict: bool = False) -> bool:
    """Deterministic primality of ``|value|``.

    Branches: PRIME-BELOW-TWO, PRIME-TRIAL, PRIME-MR-FIXED, PRIME-MR-GROWING
    """
    n = parse_value(value).abs()
    if n.lesser(2):                                           # PRIME-BELOW-TWO
        return False

    limit = get_settings().trial_division_limit
    for p in small_primes(limit):                             # PRIME-TRIAL
        if n.equals(p):
            return True
        if magnitude.div_mod_small(n._magnitude, p)[1] == 0:
            return False
    if n.lesser(limit * limit):
        return True

    if n.lesser(DETERMINISTIC_BOUND):                         # PRIME-MR-FIXED
        logger.debug("Miller-Rabin with fixed witnesses for %d-bit value", n.bit_length())
        return _miller_rabin(n, MILLER_RABIN_WITNESSES)

    log_n = math.log(2) * n.bit_length()                      # PRIME-MR-GROWING
    if strict:
        top = math.floor(2 * log_n ** 2)
    else:
        top = math.ceil(log_n) + 1
    logger.debug(
        "Miller-Rabin with witnesses 2..%d for %d-bit value (strict=%s)",
        top, n.bit_length(), strict,
    )
    return _miller_rabin(n, range(2, top + 1))


def _basic_screen(n: BigInteger) -> bool | None:
    if n.is_unit() or n.lesser(2):
        return False
    if n.equals(2) or n.equals(3) or n.equals(5):
        return True
    if n.is_even() or n.is_divisible_by(3) or n.is_divisible_by(5):
        return False
    if n.lesser(49):
        return True
    return None


def is_probable_prime(value: Operand, iterations: int | None = None, rng=None) -> bool:
    """Fermat test of ``|value|`` with ``iterations`` random bases."""
    if iterations is None:
        iterations = get_settings().probable_prime_iterations
    if iterations < 1:
        raise ValueError(f"iterations must be at least 1, got {iterations}")
    n = parse_value(value).abs()
    screened = _basic_screen(n)
    if screened is not None:
        return screened

    n_prev = n.prev()
    for _ in range(iterations):
        a = rand_between(2, n.subtract(2), rng=rng)
        if not mod_pow(a, n_prev, n).is_unit():
            return False
    return True


# ---------------------------------------------------------------------------
# Random draws
# ---------------------------------------------------------------------------

def rand_between(a: Operand, b: Operand, rng=None) -> BigInteger:
    """Uniform draw from the closed range between ``a`` and ``b``.

    Candidates are drawn digit by digit below the top digit of the span and
    rejected when they overshoot it.
    """
    low, high = parse_value(a), parse_value(b)
    if low.greater(high):
        low, high = high, low
    span = high.subtract(low)._magnitude
    if digits.is_zero(span):
        return low
    if rng is None:
        rng = default_rng()

    while True:
        drawn = [rng.randrange(digits.BASE) for _ in range(len(span) - 1)]
        drawn.append(rng.randrange(span[-1] + 1))
        candidate = digits.normalize(drawn)
        if magnitude.compare(candidate, span) <= 0:
            return low.add(BigInteger._from_magnitude(candidate))
