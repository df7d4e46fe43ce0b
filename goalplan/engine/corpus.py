"""Inflation-adjusted capital requirements for individual goals."""
from __future__ import annotations

from dataclasses import dataclass

from ..data_model import Goal, HouseholdProfile
from .resolver import resolve_goal_years


@dataclass(frozen=True)
class GoalCorpus:
    goal: Goal
    base_year: int
    start_year: int
    end_year: int
    years_to_start: int
    duration: int
    corpus_at_start: float
    lifetime_corpus: float

    def _factor(self, years: int) -> float:
        return (1.0 + self.goal.inflation_rate / 100.0) ** years

    def is_active(self, year: int) -> bool:
        return self.start_year <= year <= self.end_year

    def requirement_for_year(self, year: int) -> float:
        """Nominal amount the goal draws in ``year``.

        Recurring goals cost one inflated instalment per year of their span. One-time
        goals are paid in full in the end year, compounded up to that year.
        """
        if not self.is_active(year):
            return 0.0
        if self.goal.is_recurring:
            k = year - self.start_year
            return self.goal.target_amount * self._factor(self.years_to_start + k)
        if year != self.end_year:
            return 0.0
        return self.goal.target_amount * self._factor(max(0, self.end_year - self.base_year))


def compute_goal_corpus(
    goal: Goal, profile: HouseholdProfile, base_year: int, default_age: int = 30
) -> GoalCorpus:
    start_year, end_year = resolve_goal_years(goal, profile, base_year, default_age)
    years_to_start = max(0, start_year - base_year)
    duration = max(1, end_year - start_year + 1)
    growth = 1.0 + goal.inflation_rate / 100.0

    corpus_at_start = goal.target_amount * growth**years_to_start
    if goal.is_recurring:
        lifetime = sum(goal.target_amount * growth ** (years_to_start + k) for k in range(duration))
    else:
        lifetime = corpus_at_start

    return GoalCorpus(
        goal=goal,
        base_year=base_year,
        start_year=start_year,
        end_year=end_year,
        years_to_start=years_to_start,
        duration=duration,
        corpus_at_start=corpus_at_start,
        lifetime_corpus=lifetime,
    )
