import pytest

from goalplan.data_model import Asset, DetailedIncome, HouseholdProfile, Loan
from goalplan.engine import asset_allocation, household_snapshot, weighted_average_return
from goalplan.engine.snapshot import ALLOCATION_COLUMNS


def test_snapshot_ratios():
    profile = HouseholdProfile(
        monthly_expenses=4000.0,
        income=DetailedIncome(salary=9000.0, investment=1000.0),
        loans=(Loan("Home", outstanding=250000.0, emi=1000.0),),
        assets=(Asset("Savings", "Liquid", 50000.0), Asset("Index", "Equity", 150000.0)),
    )

    snap = household_snapshot(profile)

    assert snap.monthly_surplus == 5000.0
    assert snap.savings_rate == 50.0
    assert snap.debt_to_income == 10.0
    assert snap.net_worth == -50000.0


def test_snapshot_without_income_has_zero_ratios():
    snap = household_snapshot(HouseholdProfile(monthly_expenses=100.0))

    assert snap.savings_rate == 0.0
    assert snap.debt_to_income == 0.0
    assert snap.monthly_surplus == -100.0


def test_allocation_groups_by_name():
    profile = HouseholdProfile(
        assets=(
            Asset("Index", "Equity", 100.0, 10.0),
            Asset("Index", "Equity", 100.0, 14.0),
            Asset("", "Liquid", 200.0, 3.0),
        )
    )

    df = asset_allocation(profile)

    assert list(df.columns) == ALLOCATION_COLUMNS
    assert df["Name"].tolist() == ["Index", "Liquid"]
    assert df["Allocation (%)"].sum() == pytest.approx(100.0)
    assert df.loc[df["Name"] == "Index", "Growth (%)"].iloc[0] == pytest.approx(12.0)


def test_allocation_without_value_does_not_divide_by_zero():
    df = asset_allocation(HouseholdProfile(assets=(Asset("Car", "Personal", 0.0, -10.0),)))

    assert df["Allocation (%)"].tolist() == [0.0]
    assert df["Growth (%)"].notna().all()


def test_allocation_empty():
    df = asset_allocation(HouseholdProfile())

    assert df.empty
    assert list(df.columns) == ALLOCATION_COLUMNS


def test_weighted_average_return():
    profile = HouseholdProfile(assets=(Asset("A", "Equity", 100.0, 10.0), Asset("B", "Debt", 300.0, 2.0)))

    assert weighted_average_return(profile) == pytest.approx(4.0)
    assert weighted_average_return(HouseholdProfile()) == 0
