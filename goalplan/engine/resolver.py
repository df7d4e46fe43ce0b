from __future__ import annotations

import logging
from typing import Tuple

from ..data_model import DateKind, Goal, HouseholdProfile, RelativeDate
from ..data_model.base import to_int

logger = logging.getLogger(__name__)


def resolve_year(date: RelativeDate, birth_year: int, retirement_age: int, life_expectancy: int) -> int:
    """Translate a relative date into a calendar year.

    Unknown kinds resolve to their offset, read as an absolute year.
    """
    offset = to_int(date.offset)
    kind = DateKind.parse(date.kind)
    if kind is DateKind.YEAR:
        return offset
    if kind is DateKind.AGE:
        return birth_year + offset
    if kind is DateKind.RETIREMENT:
        return birth_year + retirement_age + offset
    if kind is DateKind.LIFE_EXPECTANCY:
        return birth_year + life_expectancy + offset
    logger.debug("Unrecognized date kind %r; treating offset %d as a calendar year", kind, offset)
    return offset


def resolve_goal_years(
    goal: Goal, profile: HouseholdProfile, base_year: int, default_age: int = 30
) -> Tuple[int, int]:
    """Resolve a goal's start and end years against a single profile snapshot."""
    birth_year = profile.effective_birth_year(base_year, default_age)
    start = resolve_year(goal.start, birth_year, profile.retirement_age, profile.life_expectancy)
    end = resolve_year(goal.end, birth_year, profile.retirement_age, profile.life_expectancy)
    return start, end
