"""Present-day view of the household: monthly cash flow, balance sheet and allocation."""
from __future__ import annotations

from dataclasses import asdict, dataclass

import pandas as pd

from ..data_model import HouseholdProfile

ALLOCATION_COLUMNS = ["Name", "Category", "Value", "Allocation (%)", "Growth (%)"]


@dataclass(frozen=True)
class HouseholdSnapshot:
    monthly_income: float
    monthly_expenses: float
    monthly_emi: float
    monthly_savings: float
    monthly_surplus: float
    savings_rate: float
    debt_to_income: float
    total_assets: float
    total_loans: float
    net_worth: float

    def to_payload(self) -> dict:
        return asdict(self)


def household_snapshot(profile: HouseholdProfile) -> HouseholdSnapshot:
    income = profile.monthly_income()
    expenses = profile.monthly_living()
    emi = profile.monthly_emi()
    surplus = income - expenses - emi
    total_assets = sum(asset.current_value for asset in profile.assets)
    total_loans = sum(loan.outstanding for loan in profile.loans)
    return HouseholdSnapshot(
        monthly_income=income,
        monthly_expenses=expenses,
        monthly_emi=emi,
        monthly_savings=profile.committed_savings,
        monthly_surplus=surplus,
        savings_rate=surplus / income * 100.0 if income > 0 else 0.0,
        debt_to_income=emi / income * 100.0 if income > 0 else 0.0,
        total_assets=total_assets,
        total_loans=total_loans,
        net_worth=total_assets - total_loans,
    )


def asset_allocation(profile: HouseholdProfile) -> pd.DataFrame:
    """Group holdings by name (category when unnamed) with their share of total assets.

    Growth is the value-weighted growth rate of the holdings in each group.
    """
    if not profile.assets:
        return pd.DataFrame(columns=ALLOCATION_COLUMNS)

    df = pd.DataFrame(
        [
            {
                "Name": asset.name or asset.category,
                "Category": asset.category,
                "Value": asset.current_value,
                "Weighted": asset.current_value * asset.growth_rate,
            }
            for asset in profile.assets
        ]
    )
    grouped = df.groupby("Name", as_index=False, sort=False).agg(
        Category=("Category", "first"), Value=("Value", "sum"), Weighted=("Weighted", "sum")
    )
    total = max(grouped["Value"].sum(), 1.0)
    grouped["Allocation (%)"] = grouped["Value"] / total * 100.0
    grouped["Growth (%)"] = grouped["Weighted"] / grouped["Value"].where(grouped["Value"] != 0, 1.0)
    return grouped[ALLOCATION_COLUMNS]


def weighted_average_return(profile: HouseholdProfile) -> float:
    total = max(sum(asset.current_value for asset in profile.assets), 1.0)
    return sum(asset.growth_rate * asset.current_value / total for asset in profile.assets)
