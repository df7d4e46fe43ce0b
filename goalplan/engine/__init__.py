from .aggregate import aggregate_ledger, projection_to_frame, summarize_phases
from .corpus import GoalCorpus, compute_goal_corpus
from .funding import FundingPlan, GoalFunding, build_funding_plan, partition_by_bucket
from .projector import (
    BreakEven,
    Projection,
    ProjectionYear,
    find_break_even,
    growth_factor,
    project,
    project_cashflow,
)
from .resolver import resolve_goal_years, resolve_year
from .snapshot import HouseholdSnapshot, asset_allocation, household_snapshot, weighted_average_return

__all__ = [
    "BreakEven",
    "FundingPlan",
    "GoalCorpus",
    "GoalFunding",
    "HouseholdSnapshot",
    "Projection",
    "ProjectionYear",
    "aggregate_ledger",
    "asset_allocation",
    "build_funding_plan",
    "compute_goal_corpus",
    "find_break_even",
    "growth_factor",
    "household_snapshot",
    "partition_by_bucket",
    "project",
    "project_cashflow",
    "projection_to_frame",
    "resolve_goal_years",
    "resolve_year",
    "summarize_phases",
    "weighted_average_return",
]
