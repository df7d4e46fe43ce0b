from .base import ColumnDefinition, TableModel
from .dates import DATE_KINDS, DateKind, RelativeDate
from .goals import (
    GOAL_TYPES,
    RESOURCE_BUCKETS,
    Goal,
    GoalTableModel,
    dataframe_to_goals,
)
from .household import (
    ASSET_CATEGORIES,
    Asset,
    DetailedIncome,
    ExpenseItem,
    FamilyMember,
    HouseholdProfile,
    IncomeTableModel,
    Loan,
    apply_income_table,
    dataframe_to_family,
)

__all__ = [
    "ASSET_CATEGORIES",
    "DATE_KINDS",
    "GOAL_TYPES",
    "RESOURCE_BUCKETS",
    "Asset",
    "ColumnDefinition",
    "DateKind",
    "DetailedIncome",
    "ExpenseItem",
    "FamilyMember",
    "Goal",
    "GoalTableModel",
    "HouseholdProfile",
    "IncomeTableModel",
    "Loan",
    "RelativeDate",
    "TableModel",
    "apply_income_table",
    "dataframe_to_family",
    "dataframe_to_goals",
]
