from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ..data_model import Goal, HouseholdProfile
from .corpus import compute_goal_corpus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalFunding:
    rank: int
    goal: Goal
    start_year: int
    end_year: int
    corpus_at_start: float
    lifetime_corpus: float

    @property
    def current_amount(self) -> float:
        return self.goal.current_amount

    @property
    def progress(self) -> float:
        """Share of the point-in-time corpus already earmarked, in percent."""
        if self.corpus_at_start <= 0:
            return 0.0
        return min(100.0, self.goal.current_amount / self.corpus_at_start * 100.0)

    @property
    def funding_gap(self) -> float:
        return max(0.0, self.corpus_at_start - self.goal.current_amount)

    def to_payload(self) -> dict:
        return {
            "rank": self.rank,
            "id": self.goal.id,
            "label": self.goal.label,
            "type": self.goal.goal_type,
            "priority": self.goal.priority,
            "isRecurring": self.goal.is_recurring,
            "startYear": self.start_year,
            "endYear": self.end_year,
            "corpusAtStart": self.corpus_at_start,
            "lifetimeCorpus": self.lifetime_corpus,
            "currentAmount": self.current_amount,
            "progress": self.progress,
            "fundingGap": self.funding_gap,
            "resourceBuckets": list(self.goal.resource_buckets),
        }


@dataclass(frozen=True)
class FundingPlan:
    base_year: int
    goals: Tuple[GoalFunding, ...]
    buckets: Dict[str, List[str]] = field(default_factory=dict)
    unearmarked: Tuple[str, ...] = ()

    @property
    def total_lifetime_corpus(self) -> float:
        return sum(item.lifetime_corpus for item in self.goals)

    @property
    def total_corpus_at_start(self) -> float:
        return sum(item.corpus_at_start for item in self.goals)

    @property
    def total_current_amount(self) -> float:
        return sum(item.current_amount for item in self.goals)

    def to_payload(self) -> dict:
        return {
            "baseYear": self.base_year,
            "goals": [item.to_payload() for item in self.goals],
            "totalLifetimeCorpus": self.total_lifetime_corpus,
            "totalCorpusAtStart": self.total_corpus_at_start,
            "totalCurrentAmount": self.total_current_amount,
            "buckets": {name: list(ids) for name, ids in self.buckets.items()},
            "unearmarked": list(self.unearmarked),
        }


def partition_by_bucket(goals: Sequence[Goal]) -> Dict[str, List[str]]:
    """Map each resource bucket to the ids of goals drawing on it, in the given order."""
    buckets: Dict[str, List[str]] = {}
    for goal in goals:
        for bucket in goal.resource_buckets:
            buckets.setdefault(bucket, []).append(goal.id)
    return buckets


def build_funding_plan(
    profile: HouseholdProfile,
    goals: Sequence[Goal],
    *,
    base_year: int | None = None,
    default_age: int = 30,
) -> FundingPlan:
    base_year = datetime.date.today().year if base_year is None else int(base_year)
    ordered = sorted(goals, key=lambda goal: goal.priority)

    funded: List[GoalFunding] = []
    for rank, goal in enumerate(ordered, start=1):
        corpus = compute_goal_corpus(goal, profile, base_year, default_age)
        funded.append(
            GoalFunding(
                rank=rank,
                goal=goal,
                start_year=corpus.start_year,
                end_year=corpus.end_year,
                corpus_at_start=corpus.corpus_at_start,
                lifetime_corpus=corpus.lifetime_corpus,
            )
        )

    unearmarked = tuple(goal.id for goal in ordered if not goal.resource_buckets)
    if unearmarked:
        logger.debug("Goals with no resource earmarked: %s", ", ".join(unearmarked))

    return FundingPlan(
        base_year=base_year,
        goals=tuple(funded),
        buckets=partition_by_bucket(ordered),
        unearmarked=unearmarked,
    )
