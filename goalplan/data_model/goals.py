from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

import pandas as pd

from .base import ColumnDefinition, TableModel, to_float, to_int
from .dates import DATE_KINDS, DateKind, RelativeDate

GOAL_TYPES = [
    "Retirement",
    "Child Education",
    "Child Marriage",
    "Vacation",
    "Car",
    "Land / Home",
    "Commercial",
    "Home Renovation",
    "Holiday Home",
    "Corpus for Start-up",
    "Charity / Philanthropy",
    "Child-birth Expenses",
    "Big Purchases",
    "Estate for Children",
    "Others",
]

RESOURCE_BUCKETS = ["Equity & MF", "Bank Balance", "NPS & EPF", "Cashflow Surplus", "Insurance Payouts"]

DEFAULT_GOAL_INFLATION = 6.0


@dataclass(frozen=True)
class Goal:
    """A wealth goal priced in today's money and anchored to relative dates."""

    id: str
    target_amount: float
    start: RelativeDate
    end: RelativeDate
    priority: int = 1
    inflation_rate: float = DEFAULT_GOAL_INFLATION  # percent per year
    is_recurring: bool = False
    resource_buckets: Tuple[str, ...] = ()
    current_amount: float = 0.0
    goal_type: str = "Others"
    description: str = ""

    @classmethod
    def from_dict(cls, payload: dict) -> "Goal":
        buckets = payload.get("resourceBuckets", payload.get("resource_buckets"))
        if isinstance(buckets, str):
            buckets = buckets.split(",")
        elif not isinstance(buckets, (list, tuple)):
            buckets = ()
        return cls(
            id=_text(payload.get("id")),
            target_amount=to_float(payload.get("targetAmountToday", payload.get("target_amount"))),
            start=RelativeDate.from_dict(payload.get("startDate", payload.get("start"))),
            end=RelativeDate.from_dict(payload.get("endDate", payload.get("end"))),
            priority=to_int(payload.get("priority"), 1),
            inflation_rate=to_float(
                payload.get("inflationRate", payload.get("inflation_rate")), DEFAULT_GOAL_INFLATION
            ),
            is_recurring=_to_bool(payload.get("isRecurring", payload.get("is_recurring"))),
            resource_buckets=tuple(str(b).strip() for b in buckets if str(b).strip()),
            current_amount=to_float(payload.get("currentAmount", payload.get("current_amount"))),
            goal_type=_text(payload.get("type", payload.get("goal_type"))) or "Others",
            description=_text(payload.get("description")),
        )

    @property
    def label(self) -> str:
        return self.description or self.goal_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.goal_type,
            "description": self.description,
            "priority": self.priority,
            "targetAmountToday": self.target_amount,
            "inflationRate": self.inflation_rate,
            "startDate": self.start.to_dict(),
            "endDate": self.end.to_dict(),
            "isRecurring": self.is_recurring,
            "resourceBuckets": list(self.resource_buckets),
            "currentAmount": self.current_amount,
        }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value))


def _text(value: Any) -> str:
    return "" if _is_blank(value) else str(value).strip()


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on", "y"}
    return False if _is_blank(value) else bool(value)


def _goal_defaults() -> List[dict[str, Any]]:
    return [
        {
            "Id": "retirement",
            "Type": "Retirement",
            "Description": "Retirement living expenses",
            "Priority": 1,
            "Target Amount": 600000.0,
            "Inflation Rate (%)": 6.0,
            "Start Kind": DateKind.RETIREMENT.value,
            "Start Offset": 0,
            "End Kind": DateKind.LIFE_EXPECTANCY.value,
            "End Offset": 0,
            "Recurring": True,
            "Resource Buckets": "Equity & MF, NPS & EPF",
            "Current Amount": 0.0,
        },
        {
            "Id": "education",
            "Type": "Child Education",
            "Description": "Undergraduate fees",
            "Priority": 2,
            "Target Amount": 2500000.0,
            "Inflation Rate (%)": 8.0,
            "Start Kind": DateKind.AGE.value,
            "Start Offset": 48,
            "End Kind": DateKind.AGE.value,
            "End Offset": 48,
            "Recurring": False,
            "Resource Buckets": "Equity & MF, Bank Balance",
            "Current Amount": 0.0,
        },
    ]


class GoalTableModel(TableModel):
    def __init__(self) -> None:
        columns = [
            ColumnDefinition("Id", "Id"),
            ColumnDefinition("Type", "Goal Type", kind="select", default="Others", options=GOAL_TYPES),
            ColumnDefinition("Description", "Description"),
            ColumnDefinition("Priority", "Priority", kind="number", default=1, min_value=1, step=1),
            ColumnDefinition(
                "Target Amount",
                "Target Amount (today)",
                kind="number",
                default=0.0,
                min_value=0.0,
                step=10000.0,
                format="%.2f",
            ),
            ColumnDefinition(
                "Inflation Rate (%)", "Inflation Rate (%)", kind="number", default=DEFAULT_GOAL_INFLATION, step=0.5
            ),
            ColumnDefinition("Start Kind", "Starts at", kind="select", default=DateKind.AGE.value, options=DATE_KINDS),
            ColumnDefinition("Start Offset", "Start value", kind="number", default=60, step=1),
            ColumnDefinition(
                "End Kind", "Ends at", kind="select", default=DateKind.LIFE_EXPECTANCY.value, options=DATE_KINDS
            ),
            ColumnDefinition("End Offset", "End value", kind="number", default=0, step=1),
            ColumnDefinition("Recurring", "Recurring", kind="select", default=False, options=["true", "false"]),
            ColumnDefinition(
                "Resource Buckets",
                "Funding sources",
                kind="multiselect",
                default="",
                options=RESOURCE_BUCKETS,
                help="Comma separated",
            ),
            ColumnDefinition("Current Amount", "Already saved", kind="number", default=0.0, min_value=0.0),
        ]
        super().__init__("goals", columns, _goal_defaults())


def dataframe_to_goals(df: pd.DataFrame) -> List[Goal]:
    goals: List[Goal] = []
    for index, row in enumerate(df.to_dict("records")):
        amount = to_float(row.get("Target Amount"))
        if amount == 0.0:
            continue
        goal_id = _text(row.get("Id")) or f"goal-{index + 1}"
        goals.append(
            Goal.from_dict(
                {
                    "id": goal_id,
                    "type": row.get("Type"),
                    "description": row.get("Description"),
                    "priority": row.get("Priority"),
                    "targetAmountToday": amount,
                    "inflationRate": row.get("Inflation Rate (%)"),
                    "startDate": {"type": row.get("Start Kind"), "value": row.get("Start Offset")},
                    "endDate": {"type": row.get("End Kind"), "value": row.get("End Offset")},
                    "isRecurring": row.get("Recurring"),
                    "resourceBuckets": row.get("Resource Buckets"),
                    "currentAmount": row.get("Current Amount"),
                }
            )
        )
    return goals
