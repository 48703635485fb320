"""Tests for the digit store: canonical form and decimal conversion."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis.strategies import integers

import digits
from digits import BASE, LOG_BASE, SAFE_BOUND
from errors import InvalidInteger

naturals = integers(min_value=0, max_value=10 ** 80)


class TestCanonicalForm:
    def test_zero_is_single_digit(self):
        assert digits.from_int(0) == (0,)
        assert digits.normalize([]) == (0,)
        assert digits.normalize([0, 0, 0]) == (0,)

    def test_strips_leading_zero_digits(self):
        assert digits.normalize([5, 0, 0]) == (5,)
        assert digits.normalize([0, 3, 0]) == (0, 3)

    def test_little_endian(self):
        assert digits.from_int(BASE + 2) == (2, 1)
        assert digits.from_int(BASE ** 2) == (0, 0, 1)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            digits.from_int(-1)

    @given(n=naturals)
    def test_no_top_zero(self, n):
        mag = digits.from_int(n)
        assert len(mag) >= 1
        assert len(mag) == 1 or mag[-1] != 0
        assert all(0 <= d < BASE for d in mag)

    def test_from_sequence_validates_digits(self):
        assert digits.from_sequence([1, 2, 0]) == (1, 2)
        with pytest.raises(InvalidInteger):
            digits.from_sequence([BASE])
        with pytest.raises(InvalidInteger):
            digits.from_sequence([-1])


class TestDecimal:
    def test_chunks_from_the_right(self):
        assert digits.from_decimal("12345678") == (2345678, 1)

    def test_leading_zeros_collapse(self):
        assert digits.from_decimal("0000000000000") == (0,)
        assert digits.from_decimal("000000042") == (42,)

    @pytest.mark.parametrize("text", ["", "-1", "+1", "1.0", "1e3", " 1", "abc"])
    def test_rejects_non_digits(self, text):
        with pytest.raises(InvalidInteger):
            digits.from_decimal(text)

    def test_inner_digits_are_zero_padded(self):
        assert digits.to_decimal((5, 1)) == "1" + "0" * (LOG_BASE - 1) + "5"

    @given(n=naturals)
    def test_matches_native(self, n):
        mag = digits.from_decimal(str(n))
        assert mag == digits.from_int(n)
        assert digits.to_decimal(mag) == str(n)
        assert digits.to_int(mag) == n


class TestSafeBound:
    def test_bound_is_inclusive(self):
        assert digits.is_safe(digits.from_int(SAFE_BOUND))
        assert not digits.is_safe(digits.from_int(SAFE_BOUND + 1))

    def test_long_magnitudes_are_unsafe(self):
        assert not digits.is_safe(digits.from_int(10 ** 30))

    def test_digit_count(self):
        assert digits.digit_count(digits.from_int(BASE ** 3)) == 4
