from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List

import pandas as pd


@dataclass
class ColumnDefinition:
    """Lightweight schema descriptor used by table editors."""

    field: str
    label: str
    kind: str = "text"  # text | number | select | multiselect | date
    default: Any = ""
    options: List[str] | None = None
    min_value: float | None = None
    step: float | None = None
    format: str | None = None
    help: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "label": self.label,
            "kind": self.kind,
            "default": self.default,
            "options": self.options or [],
            "min": self.min_value,
            "step": self.step,
            "format": self.format,
            "help": self.help,
        }


@dataclass
class TableModel:
    """Container for a table schema plus default rows."""

    name: str
    columns: List[ColumnDefinition]
    default_rows: List[dict[str, Any]] = field(default_factory=list)

    def create_default_df(self) -> pd.DataFrame:
        if self.default_rows:
            return pd.DataFrame(self.default_rows)
        seed = {col.field: col.default for col in self.columns}
        return pd.DataFrame([seed])


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce form values to float; blanks, NaN and junk become ``default``."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def to_int(value: Any, default: int = 0) -> int:
    number = to_float(value, float(default))
    if math.isinf(number):
        return default
    return int(number)


def to_optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    number = to_float(value, math.nan)
    if not math.isfinite(number):
        return None
    return int(number)
