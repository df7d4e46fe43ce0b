from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .base import to_int


class DateKind(str, Enum):
    """Life-event anchors a relative date can be expressed against."""

    YEAR = "Year"
    AGE = "Age"
    RETIREMENT = "Retirement"
    LIFE_EXPECTANCY = "LifeExpectancy"

    @classmethod
    def parse(cls, raw: Any) -> "DateKind | str":
        """Return the matching member, or the raw string when nothing matches.

        Matching ignores case, spaces and underscores so that ``"life_expectancy"``
        and ``"Life Expectancy"`` both land on ``LIFE_EXPECTANCY``.
        """
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip()
        key = text.replace("_", "").replace(" ", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return text


DATE_KINDS = [kind.value for kind in DateKind]


@dataclass(frozen=True)
class RelativeDate:
    kind: DateKind | str
    offset: int = 0

    @classmethod
    def year(cls, value: int) -> "RelativeDate":
        return cls(DateKind.YEAR, value)

    @classmethod
    def age(cls, value: int) -> "RelativeDate":
        return cls(DateKind.AGE, value)

    @classmethod
    def retirement(cls, offset: int = 0) -> "RelativeDate":
        return cls(DateKind.RETIREMENT, offset)

    @classmethod
    def life_expectancy(cls, offset: int = 0) -> "RelativeDate":
        return cls(DateKind.LIFE_EXPECTANCY, offset)

    @classmethod
    def from_dict(cls, payload: Any) -> "RelativeDate":
        if isinstance(payload, RelativeDate):
            return payload
        if not isinstance(payload, dict):
            # A bare number is read as an absolute year.
            return cls(DateKind.YEAR, to_int(payload))
        kind = payload.get("type", payload.get("kind"))
        offset = payload.get("value", payload.get("offset"))
        return cls(DateKind.parse(kind), to_int(offset))

    def to_dict(self) -> dict[str, Any]:
        kind = self.kind.value if isinstance(self.kind, DateKind) else self.kind
        return {"type": kind, "value": self.offset}

    def __str__(self) -> str:
        if self.kind is DateKind.YEAR:
            return str(self.offset)
        kind = self.kind.value if isinstance(self.kind, DateKind) else self.kind
        if not self.offset:
            return kind
        return f"{kind}{self.offset:+d}"
