"""Engine settings.

Tunables that change speed, never results.  Values come from the
environment (``BIGINT_KARATSUBA_THRESHOLD=64`` and so on) and are validated
by pydantic on load.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Performance knobs for the arithmetic and primality code paths."""

    model_config = SettingsConfigDict(env_prefix="BIGINT_", frozen=True)

    karatsuba_threshold: int = Field(
        default=40,
        ge=2,
        le=10_000,
        description="Digit count of the shorter operand above which "
                    "multiplication switches from schoolbook to Karatsuba",
    )
    trial_division_limit: int = Field(
        default=1000,
        ge=50,
        le=1_000_000,
        description="Primes below this bound are tried before Miller-Rabin",
    )
    probable_prime_iterations: int = Field(
        default=5,
        ge=1,
        le=10_000,
        description="Default number of Fermat rounds in is_probable_prime",
    )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    logger.debug("Loaded engine settings: %s", settings.model_dump())
    return settings
