"""Configuration helpers for engine defaults."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _Settings(BaseSettings):
    default_allowance_percent: int = Field(
        default=100, alias="GOLFBETS_DEFAULT_ALLOWANCE"
    )
    match_play_allowance_percent: int = Field(
        default=75, alias="GOLFBETS_MATCH_PLAY_ALLOWANCE"
    )
    currency: str = Field(default="USD", alias="GOLFBETS_CURRENCY")
    finished_rounds_retained: int = Field(
        default=64, ge=0, alias="GOLFBETS_FINISHED_ROUNDS_RETAINED"
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


STANDARD_SLOPE: int = 113
MONEY_PLACES: int = _int_env("GOLFBETS_MONEY_PLACES", 2)
ENFORCE_INVARIANTS: bool = env_bool("GOLFBETS_ENFORCE_INVARIANTS", True)


__all__ = [
    "ENFORCE_INVARIANTS",
    "MONEY_PLACES",
    "STANDARD_SLOPE",
    "env_bool",
    "get_settings",
    "reset_settings_cache",
]
