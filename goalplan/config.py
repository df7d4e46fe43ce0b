"""Engine defaults, overridable through environment variables.

Env vars:
  GOALPLAN_GROWTH_RATE=0.06    -> yearly escalation applied to income and living costs
  GOALPLAN_HORIZON_YEARS=35    -> default projection length (years after the base year)
  GOALPLAN_DEFAULT_AGE=30      -> assumed age when a profile carries no birth year
  GOALPLAN_CACHE_SIZE=64       -> memoized API responses kept per endpoint
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_GROWTH_RATE = 0.06
DEFAULT_HORIZON_YEARS = 35
DEFAULT_AGE = 30
DEFAULT_CACHE_SIZE = 64


@dataclass(frozen=True)
class EngineSettings:
    growth_rate: float = DEFAULT_GROWTH_RATE
    horizon_years: int = DEFAULT_HORIZON_YEARS
    default_age: int = DEFAULT_AGE
    cache_size: int = DEFAULT_CACHE_SIZE


def _env_number(name: str, default: float, cast=float):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default


def settings_from_env() -> EngineSettings:
    return EngineSettings(
        growth_rate=_env_number("GOALPLAN_GROWTH_RATE", DEFAULT_GROWTH_RATE),
        horizon_years=max(0, _env_number("GOALPLAN_HORIZON_YEARS", DEFAULT_HORIZON_YEARS, int)),
        default_age=_env_number("GOALPLAN_DEFAULT_AGE", DEFAULT_AGE, int),
        cache_size=max(1, _env_number("GOALPLAN_CACHE_SIZE", DEFAULT_CACHE_SIZE, int)),
    )
