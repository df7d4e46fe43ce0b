from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Tuple

import pandas as pd

from .base import ColumnDefinition, TableModel, to_float, to_optional_int

INCOME_FIELDS = ("salary", "bonus", "reimbursements", "business", "rental", "investment")
ASSET_CATEGORIES = ["Liquid", "Debt", "Equity", "Real Estate", "Gold/Silver", "Personal"]

DEFAULT_RETIREMENT_AGE = 60
DEFAULT_LIFE_EXPECTANCY = 85


@dataclass(frozen=True)
class DetailedIncome:
    """Monthly income components for one household member."""

    salary: float = 0.0
    bonus: float = 0.0
    reimbursements: float = 0.0
    business: float = 0.0
    rental: float = 0.0
    investment: float = 0.0

    @classmethod
    def from_dict(cls, payload: Any) -> "DetailedIncome":
        payload = payload if isinstance(payload, dict) else {}
        return cls(**{name: to_float(payload.get(name)) for name in INCOME_FIELDS})

    def total(self) -> float:
        return sum(getattr(self, name) for name in INCOME_FIELDS)


@dataclass(frozen=True)
class FamilyMember:
    name: str
    relation: str = ""
    income: DetailedIncome = field(default_factory=DetailedIncome)

    @classmethod
    def from_dict(cls, payload: dict) -> "FamilyMember":
        return cls(
            name=str(payload.get("name", "")).strip(),
            relation=str(payload.get("relation", "")).strip(),
            income=DetailedIncome.from_dict(payload.get("income")),
        )


@dataclass(frozen=True)
class ExpenseItem:
    category: str
    amount: float  # monthly

    @classmethod
    def from_dict(cls, payload: dict) -> "ExpenseItem":
        return cls(
            category=str(payload.get("category", payload.get("name", "other"))).strip() or "other",
            amount=to_float(payload.get("amount")),
        )


@dataclass(frozen=True)
class Loan:
    name: str
    kind: str = ""
    outstanding: float = 0.0
    emi: float = 0.0  # monthly instalment
    remaining_years: int | None = None

    @classmethod
    def from_dict(cls, payload: dict) -> "Loan":
        return cls(
            name=str(payload.get("name", payload.get("type", ""))).strip(),
            kind=str(payload.get("type", payload.get("kind", ""))).strip(),
            outstanding=to_float(payload.get("outstandingAmount", payload.get("outstanding"))),
            emi=to_float(payload.get("emi")),
            remaining_years=to_optional_int(payload.get("remainingYears", payload.get("remaining_years"))),
        )

    def is_active(self, years_elapsed: int) -> bool:
        return self.remaining_years is None or years_elapsed < self.remaining_years


@dataclass(frozen=True)
class Asset:
    name: str
    category: str = "Liquid"
    current_value: float = 0.0
    growth_rate: float = 0.0  # percent per year

    @classmethod
    def from_dict(cls, payload: dict) -> "Asset":
        return cls(
            name=str(payload.get("name", "")).strip(),
            category=str(payload.get("category", "Liquid")).strip() or "Liquid",
            current_value=to_float(payload.get("currentValue", payload.get("current_value"))),
            growth_rate=to_float(payload.get("growthRate", payload.get("growth_rate"))),
        )


@dataclass(frozen=True)
class HouseholdProfile:
    """Read-only snapshot of everything the engine needs about a household.

    Monetary amounts are monthly unless noted. ``birth_year`` may be unknown; the
    engine then assumes the primary member is ``default_age`` years old in the base year.
    """

    birth_year: int | None = None
    retirement_age: int = DEFAULT_RETIREMENT_AGE
    life_expectancy: int = DEFAULT_LIFE_EXPECTANCY
    monthly_expenses: float = 0.0
    income: DetailedIncome = field(default_factory=DetailedIncome)
    family: Tuple[FamilyMember, ...] = ()
    expenses: Tuple[ExpenseItem, ...] = ()
    loans: Tuple[Loan, ...] = ()
    assets: Tuple[Asset, ...] = ()
    committed_savings: float = 0.0

    @classmethod
    def from_dict(cls, payload: Any) -> "HouseholdProfile":
        payload = payload if isinstance(payload, dict) else {}
        birth_year = to_optional_int(payload.get("birthYear", payload.get("birth_year")))
        if birth_year is None:
            birth_year = _year_from_dob(payload.get("dob"))
        retirement_age = to_optional_int(payload.get("retirementAge", payload.get("retirement_age")))
        life_expectancy = to_optional_int(payload.get("lifeExpectancy", payload.get("life_expectancy")))
        return cls(
            birth_year=birth_year,
            retirement_age=DEFAULT_RETIREMENT_AGE if retirement_age is None else retirement_age,
            life_expectancy=DEFAULT_LIFE_EXPECTANCY if life_expectancy is None else life_expectancy,
            monthly_expenses=to_float(payload.get("monthlyExpenses", payload.get("monthly_expenses"))),
            income=DetailedIncome.from_dict(payload.get("income")),
            family=tuple(FamilyMember.from_dict(row) for row in _rows(payload.get("family"))),
            expenses=tuple(
                ExpenseItem.from_dict(row)
                for row in _rows(payload.get("detailedExpenses", payload.get("expenses")))
            ),
            loans=tuple(Loan.from_dict(row) for row in _rows(payload.get("loans"))),
            assets=tuple(Asset.from_dict(row) for row in _rows(payload.get("assets"))),
            committed_savings=to_float(payload.get("committedSavings", payload.get("committed_savings"))),
        )

    def effective_birth_year(self, base_year: int, default_age: int = 30) -> int:
        if self.birth_year is None:
            return base_year - default_age
        return self.birth_year

    def members_income(self) -> List[DetailedIncome]:
        return [self.income] + [member.income for member in self.family]

    def monthly_income(self) -> float:
        return sum(income.total() for income in self.members_income())

    def monthly_living(self) -> float:
        itemized = sum(item.amount for item in self.expenses)
        return itemized or self.monthly_expenses

    def monthly_emi(self, years_elapsed: int = 0) -> float:
        return sum(loan.emi for loan in self.loans if loan.is_active(years_elapsed))


def _rows(value: Any) -> Iterable[dict]:
    if isinstance(value, pd.DataFrame):
        return value.to_dict("records")
    return [row for row in (value or []) if isinstance(row, dict)]


def _year_from_dob(dob: Any) -> int | None:
    if not dob:
        return None
    stamp = pd.to_datetime(str(dob), errors="coerce")
    if pd.isna(stamp):
        return None
    return int(stamp.year)


def _income_defaults() -> List[dict[str, float | str]]:
    return [
        {
            "Member": "Self",
            "Relation": "self",
            "Salary": 150000.0,
            "Bonus": 0.0,
            "Reimbursements": 0.0,
            "Business": 0.0,
            "Rental": 0.0,
            "Investment": 10000.0,
        }
    ]


class IncomeTableModel(TableModel):
    def __init__(self) -> None:
        columns = [
            ColumnDefinition("Member", "Member", default="Self"),
            ColumnDefinition("Relation", "Relation", default=""),
        ]
        for name in INCOME_FIELDS:
            label = name.capitalize()
            columns.append(
                ColumnDefinition(
                    label,
                    f"{label} (monthly)",
                    kind="number",
                    default=0.0,
                    min_value=0.0,
                    step=1000.0,
                    format="%.2f",
                )
            )
        super().__init__("income", columns, _income_defaults())


def dataframe_to_family(df: pd.DataFrame) -> List[FamilyMember]:
    """Convert an income table into household members, in table order."""
    members: List[FamilyMember] = []
    for row in df.to_dict("records"):
        name = _cell_text(row.get("Member"))
        if not name:
            continue
        income = DetailedIncome(**{field_name: to_float(row.get(field_name.capitalize())) for field_name in INCOME_FIELDS})
        members.append(FamilyMember(name=name, relation=_cell_text(row.get("Relation")), income=income))
    return members


def apply_income_table(profile: HouseholdProfile, df: pd.DataFrame) -> HouseholdProfile:
    """Replace the profile's incomes with an income table.

    The first named row becomes the primary member's income and the rest become family.
    An empty table leaves the profile unchanged.
    """
    members = dataframe_to_family(df)
    if not members:
        return profile
    return replace(profile, income=members[0].income, family=tuple(members[1:]))


def _cell_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()
