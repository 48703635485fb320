"""Shared fixtures for BigInteger tests."""

from __future__ import annotations

import pytest

from config import get_settings


class ConstantRandom:
    """Stand-in random source whose draws are all the same number.

    ``randrange(n)`` returns ``min(value, n - 1)``, which makes
    ``rand_between`` and ``is_probable_prime`` reproducible.
    """

    def __init__(self, value: int) -> None:
        self.value = value
        self.calls = 0

    def randrange(self, n: int) -> int:
        self.calls += 1
        return min(self.value, n - 1)


@pytest.fixture
def constant_rng():
    return ConstantRandom


@pytest.fixture
def fresh_settings():
    """Reload settings from the environment before and after the test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
