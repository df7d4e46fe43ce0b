from __future__ import annotations

import datetime
import logging
import math
from dataclasses import asdict, dataclass
from typing import Iterable, List, Sequence, Tuple

from ..config import EngineSettings
from ..data_model import Goal, HouseholdProfile
from .corpus import GoalCorpus, compute_goal_corpus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionYear:
    year: int
    age: int
    inflow: int
    living: int
    commitments: int
    outflow: int
    goal_requirement: int
    surplus: int
    cumulative: int
    coverage: float  # percent of the goal draw covered by the year's pre-goal surplus

    def to_record(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BreakEven:
    """First year the cumulative surplus turns positive, if any."""

    year: int | None = None

    @property
    def reached(self) -> bool:
        return self.year is not None

    def __str__(self) -> str:
        return str(self.year) if self.reached else "not reached"

    def to_payload(self) -> dict:
        return {"reached": self.reached, "year": self.year, "label": str(self)}


@dataclass(frozen=True)
class Projection:
    base_year: int
    growth_rate: float
    rows: Tuple[ProjectionYear, ...]
    break_even: BreakEven

    def __len__(self) -> int:
        return len(self.rows)


def round_money(value: float) -> int:
    """Round half away from zero to a whole currency unit."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def growth_factor(rate: float, years: int) -> float:
    return (1.0 + rate) ** years


def coverage_percent(available: float, requirement: float) -> float:
    if requirement <= 0:
        return 100.0
    return round(min(100.0, max(0.0, available) / requirement * 100.0), 1)


def find_break_even(rows: Iterable[ProjectionYear]) -> BreakEven:
    for row in rows:
        if row.cumulative > 0:
            return BreakEven(row.year)
    return BreakEven()


def project(
    profile: HouseholdProfile,
    goals: Sequence[Goal],
    horizon_years: int | None = None,
    *,
    base_year: int | None = None,
    growth_rate: float | None = None,
    settings: EngineSettings | None = None,
) -> Projection:
    """Simulate ``horizon_years + 1`` years of household cash flow.

    Income, living costs and committed savings escalate together at ``growth_rate``;
    loan instalments stay flat until the loan's remaining tenure runs out. Goals draw
    according to :meth:`GoalCorpus.requirement_for_year`. Rows are rounded for display
    while the running cumulative surplus keeps full precision.
    """
    settings = settings or EngineSettings()
    base_year = datetime.date.today().year if base_year is None else int(base_year)
    horizon = settings.horizon_years if horizon_years is None else max(0, int(horizon_years))
    rate = settings.growth_rate if growth_rate is None else float(growth_rate)
    birth_year = profile.effective_birth_year(base_year, settings.default_age)

    base_inflow = profile.monthly_income() * 12
    base_living = profile.monthly_living() * 12
    base_savings = profile.committed_savings * 12

    corpora: List[GoalCorpus] = [
        compute_goal_corpus(goal, profile, base_year, settings.default_age) for goal in goals
    ]

    rows: List[ProjectionYear] = []
    cumulative = 0.0
    break_even_year: int | None = None
    for i in range(horizon + 1):
        year = base_year + i
        factor = growth_factor(rate, i)

        inflow = base_inflow * factor
        living = base_living * factor
        commitments = base_savings * factor + profile.monthly_emi(i) * 12
        outflow = living + commitments
        requirement = sum(corpus.requirement_for_year(year) for corpus in corpora)

        surplus = inflow - outflow - requirement
        cumulative += surplus
        if break_even_year is None and cumulative > 0:
            break_even_year = year

        rows.append(
            ProjectionYear(
                year=year,
                age=year - birth_year,
                inflow=round_money(inflow),
                living=round_money(living),
                commitments=round_money(commitments),
                outflow=round_money(outflow),
                goal_requirement=round_money(requirement),
                surplus=round_money(surplus),
                cumulative=round_money(cumulative),
                coverage=coverage_percent(inflow - outflow, requirement),
            )
        )

    break_even = BreakEven(break_even_year)
    logger.info(
        "Projected %d years from %d for %d goals; break-even %s", len(rows), base_year, len(corpora), break_even
    )
    return Projection(base_year=base_year, growth_rate=rate, rows=tuple(rows), break_even=break_even)


def project_cashflow(
    profile: HouseholdProfile,
    goals: Sequence[Goal],
    horizon_years: int | None = None,
    **kwargs,
) -> List[ProjectionYear]:
    return list(project(profile, goals, horizon_years, **kwargs).rows)
