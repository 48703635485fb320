"""Tests for gcd/lcm, modular arithmetic, primality and random draws."""

from __future__ import annotations

import logging
import math
import random
import threading

import pytest
from hypothesis import given, settings, assume
from hypothesis.strategies import integers

import number_theory
from biginteger import BigInteger, gcd, lcm, rand_between
from digits import BASE
from errors import DivisionByZero, NotInvertible
from number_theory import is_prime, is_probable_prime, mod_inv, mod_pow, small_primes

signed = integers(min_value=-(10 ** 40), max_value=10 ** 40)
positive = integers(min_value=1, max_value=10 ** 30)


# ===================================================================
# GCD / LCM
# ===================================================================

class TestGcdLcm:

    def test_examples(self):
        assert gcd(42, 56) == 14
        assert lcm(21, 6) == 42

    def test_signs_are_dropped(self):
        assert gcd(-42, 56) == 14
        assert gcd(42, -56) == 14
        assert lcm(-21, 6) == 42

    def test_zero(self):
        assert gcd(0, 0) == 0
        assert gcd(0, -5) == 5
        assert lcm(0, 5) == 0

    @given(a=signed, b=signed)
    def test_matches_native(self, a, b):
        assert gcd(a, b) == math.gcd(a, b)
        assert lcm(a, b) == math.lcm(a, b)

    def test_method_forms(self):
        assert BigInteger(10).mod_pow(3, 30) == 10
        assert BigInteger(3).mod_inv(7) == 5


# ===================================================================
# MODULAR ARITHMETIC
# ===================================================================

class TestModular:

    def test_mod_pow_examples(self):
        assert mod_pow(10, 3, 30) == 10
        assert mod_pow(4, 13, 497) == 445
        assert mod_pow(-2, 3, 5) == 2

    def test_mod_pow_modulus_sign_is_ignored(self):
        assert mod_pow(4, 13, -497) == 445

    def test_mod_pow_unit_modulus(self):
        assert mod_pow(12345, 678, 1) == 0
        assert mod_pow(12345, 0, -1) == 0

    def test_mod_pow_zero_exponent(self):
        assert mod_pow(0, 0, 7) == 1

    @given(a=signed, e=integers(min_value=0, max_value=10 ** 30), m=positive)
    @settings(max_examples=200)
    def test_mod_pow_matches_native(self, a, e, m):
        assert mod_pow(a, e, m) == pow(a, e, m)

    @given(a=signed, e=integers(min_value=1, max_value=10 ** 6), m=positive)
    def test_mod_pow_negative_exponent(self, a, e, m):
        assume(math.gcd(a, m) == 1)
        assert mod_pow(a, -e, m) == pow(a, -e, m)

    def test_mod_inv_examples(self):
        assert mod_inv(3, 7) == 5
        assert mod_inv(-3, 7) == 2
        assert mod_inv(3, -7) == 5
        assert mod_inv(5, 1) == 0

    def test_mod_inv_not_invertible(self):
        with pytest.raises(NotInvertible) as info:
            mod_inv(6, 9)
        assert info.value.value == 6
        assert info.value.modulus == 9

    def test_mod_inv_zero_modulus(self):
        with pytest.raises(DivisionByZero):
            mod_inv(3, 0)

    @given(a=signed, m=integers(min_value=2, max_value=10 ** 30))
    def test_mod_inv_matches_native(self, a, m):
        assume(math.gcd(a, m) == 1)
        assert mod_inv(a, m) == pow(a, -1, m)


# ===================================================================
# PRIMALITY
# ===================================================================

def _native_is_prime(n: int) -> bool:
    if n < 2:
        return False
    for p in range(2, math.isqrt(n) + 1):
        if n % p == 0:
            return False
    return True


class TestIsPrime:

    def test_small_primes_sieve(self):
        primes = small_primes(50)
        assert primes == (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47)

    def test_matches_trial_division_below_two_thousand(self):
        for n in range(-20, 2000):
            assert is_prime(n) == _native_is_prime(abs(n)), n

    @given(n=integers(min_value=0, max_value=10 ** 7))
    @settings(max_examples=200)
    def test_matches_trial_division(self, n):
        assert is_prime(n) == _native_is_prime(n)

    @pytest.mark.parametrize("n", [
        561, 1105, 1729, 2465, 2821, 6601, 8911,      # Carmichael numbers
        2047, 1373653, 25326001, 3215031751,          # strong pseudoprimes
        3825123056546413051,
    ])
    def test_pseudoprimes_are_composite(self, n):
        assert not is_prime(n)

    @pytest.mark.parametrize("n", [
        1000003, 998244353, 1000000007, 2147483647, 2305843009213693951,
    ])
    def test_known_primes(self, n):
        assert is_prime(n)

    def test_method_form(self):
        assert BigInteger(97).is_prime()
        assert not BigInteger(-91).is_prime()

    def test_trial_limit_comes_from_settings(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("BIGINT_TRIAL_DIVISION_LIMIT", "50")
        # 2401 = 7**4 is above 50**2 but caught by trial division by 7.
        assert not is_prime(2401)
        # 2503 is prime and above 50**2, so Miller-Rabin decides it.
        assert is_prime(2503)

    def test_primality_path_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="number_theory")
        is_prime(1000003)
        assert "Miller-Rabin" in caplog.text


class TestIsProbablePrime:

    def test_basic_screen(self):
        assert is_probable_prime(2)
        assert is_probable_prime(-3)
        assert is_probable_prime(5)
        assert is_probable_prime(47)
        assert not is_probable_prime(0)
        assert not is_probable_prime(1)
        assert not is_probable_prime(-1)
        assert not is_probable_prime(25)
        assert not is_probable_prime(39)

    def test_carmichael_fools_coprime_base(self, constant_rng):
        # Base 2 is a Fermat liar for 1729 = 7 * 13 * 19.
        assert is_probable_prime(1729, rng=constant_rng(0))

    def test_carmichael_caught_by_factor_base(self, constant_rng):
        # Base 7 shares a factor with 1729.
        assert not is_probable_prime(1729, rng=constant_rng(5))

    def test_composite_with_witness(self, constant_rng):
        assert not is_probable_prime(91, rng=constant_rng(0))

    def test_iterations(self, constant_rng):
        rng = constant_rng(0)
        assert is_probable_prime(1729, iterations=3, rng=rng)
        assert rng.calls == 3

    @pytest.mark.parametrize("iterations", [0, -1])
    def test_iterations_must_be_positive(self, iterations):
        with pytest.raises(ValueError):
            is_probable_prime(91, iterations=iterations)
        with pytest.raises(ValueError):
            is_probable_prime(7, iterations=iterations)

    def test_default_iterations_from_settings(self, constant_rng):
        rng = constant_rng(0)
        is_probable_prime(1729, rng=rng)
        assert rng.calls == 5

    def test_primes_always_pass(self):
        rng = random.Random(1)
        for p in (101, 7919, 2147483647, 2 ** 89 - 1):
            assert is_probable_prime(p, iterations=10, rng=rng)

    def test_method_form(self):
        assert BigInteger(7919).is_probable_prime(iterations=3)


# ===================================================================
# RANDOM DRAWS
# ===================================================================

class TestRandBetween:

    def test_bounds_are_inclusive_and_swappable(self):
        rng = random.Random(7)
        seen = {int(rand_between(3, 1, rng=rng)) for _ in range(200)}
        assert seen == {1, 2, 3}

    def test_uniform_across_multi_digit_span(self):
        # Span of 2.5 digits: the top digit is drawn in [0, 2] and draws
        # past the span are rejected.
        high = 2 * BASE + BASE // 2 - 1
        width = BASE // 2
        draws = 20000
        rng = random.Random(11)
        buckets = [0] * 5
        for _ in range(draws):
            buckets[int(rand_between(0, high, rng=rng)) // width] += 1
        expected = draws // len(buckets)
        assert all(abs(count - expected) < 300 for count in buckets), buckets

    def test_equal_bounds(self):
        assert rand_between(5, 5) == 5

    def test_negative_range(self):
        rng = random.Random(3)
        for _ in range(100):
            assert -10 <= rand_between(-10, -5, rng=rng) <= -5

    @given(a=signed, b=signed, seed=integers(min_value=0, max_value=2 ** 32))
    def test_within_range(self, a, b, seed):
        value = rand_between(a, b, rng=random.Random(seed))
        assert min(a, b) <= value <= max(a, b)

    def test_constant_source_is_reproducible(self, constant_rng):
        assert rand_between(10, 10 ** 20, rng=constant_rng(0)) == 10
        assert rand_between(2, 1727, rng=constant_rng(5)) == 7

    def test_default_source_is_per_thread(self):
        sources = []

        def grab():
            sources.append(number_theory.default_rng())

        worker = threading.Thread(target=grab)
        worker.start()
        worker.join()
        grab()
        assert sources[0] is not sources[1]
        assert number_theory.default_rng() is sources[1]
