"""Supported display granularities and their fixed sizing rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Mapping


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: "str | Granularity") -> "Granularity":
        if isinstance(value, Granularity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown granularity {value!r}; expected one of {choices}") from exc

    @property
    def spec(self) -> "GranularitySpec":
        return GRANULARITY_SPECS[self]

    @property
    def column_width(self) -> int:
        return GRANULARITY_SPECS[self].column_width


@dataclass(frozen=True)
class GranularitySpec:
    """Sizing rules for one granularity.

    ``visible_days`` only seeds a window after a granularity change.
    ``extend_steps`` counts whole days, weeks or months depending on the
    granularity.
    """

    column_width: int
    visible_days: int
    extend_steps: int

    @property
    def half_span(self) -> int:
        return self.visible_days // 2


GRANULARITY_SPECS: Final[Mapping[Granularity, GranularitySpec]] = {
    Granularity.DAY: GranularitySpec(column_width=60, visible_days=30, extend_steps=20),
    Granularity.WEEK: GranularitySpec(column_width=180, visible_days=90, extend_steps=4),
    Granularity.MONTH: GranularitySpec(column_width=240, visible_days=365, extend_steps=2),
}

# Coarsest to finest; zooming "in" moves towards the end.
ZOOM_ORDER: Final[tuple[Granularity, ...]] = (Granularity.MONTH, Granularity.WEEK, Granularity.DAY)


def zoom(current: Granularity, direction: int) -> Granularity:
    """Step ``direction`` levels finer (positive) or coarser (negative), saturating."""

    index = ZOOM_ORDER.index(current)
    step = (direction > 0) - (direction < 0)
    target = min(max(index + step, 0), len(ZOOM_ORDER) - 1)
    return ZOOM_ORDER[target]


__all__ = ["GRANULARITY_SPECS", "Granularity", "GranularitySpec", "ZOOM_ORDER", "zoom"]
