from __future__ import annotations

from typing import Iterable

import pandas as pd

from .projector import ProjectionYear

REQUIRED_COLUMNS = {"Year", "Age", "Inflow", "Outflow", "GoalRequirement", "Surplus", "Cumulative"}
FLOW_COLUMNS = ["Inflow", "Living", "Commitments", "Outflow", "GoalRequirement", "Surplus"]

_COLUMN_NAMES = {
    "year": "Year",
    "age": "Age",
    "inflow": "Inflow",
    "living": "Living",
    "commitments": "Commitments",
    "outflow": "Outflow",
    "goal_requirement": "GoalRequirement",
    "surplus": "Surplus",
    "cumulative": "Cumulative",
    "coverage": "Coverage",
}


def projection_to_frame(rows: Iterable[ProjectionYear]) -> pd.DataFrame:
    records = [row.to_record() for row in rows]
    if not records:
        return pd.DataFrame(columns=list(_COLUMN_NAMES.values()))
    return pd.DataFrame(records).rename(columns=_COLUMN_NAMES)


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    missing = REQUIRED_COLUMNS.difference(df.columns)
    if missing:
        raise KeyError(f"Missing required columns: {', '.join(sorted(missing))}")
    return df.sort_values("Year").copy()


def _flows(df: pd.DataFrame) -> list[str]:
    return [col for col in FLOW_COLUMNS if col in df.columns]


def summarize_phases(df: pd.DataFrame, retirement_year: int) -> pd.DataFrame:
    """Total the ledger for the working years and the retirement years."""
    if df.empty:
        return df

    df = _prepare(df)
    df["Phase"] = df["Year"].map(lambda year: "accumulation" if year < retirement_year else "retirement")
    aggregations = {col: (col, "sum") for col in _flows(df)}
    aggregations.update(
        StartYear=("Year", "first"),
        EndYear=("Year", "last"),
        Years=("Year", "count"),
        Cumulative=("Cumulative", "last"),
    )
    return df.groupby("Phase", as_index=False, sort=False).agg(**aggregations)


def aggregate_ledger(df: pd.DataFrame, span: int = 5) -> pd.DataFrame:
    """Roll the yearly ledger up into ``span``-year periods labelled ``"2026-2030"``."""
    if df.empty:
        return df

    span = max(1, int(span or 1))
    df = _prepare(df)
    first_year = int(df["Year"].iloc[0])
    df["PeriodValue"] = (df["Year"] - first_year) // span
    aggregations = {col: (col, "sum") for col in _flows(df)}
    aggregations.update(
        StartYear=("Year", "first"),
        EndYear=("Year", "last"),
        Age=("Age", "first"),
        Cumulative=("Cumulative", "last"),
    )
    grouped = df.groupby("PeriodValue", as_index=False).agg(**aggregations)
    grouped["Period"] = grouped["StartYear"].astype(str) + "-" + grouped["EndYear"].astype(str)
    return grouped
