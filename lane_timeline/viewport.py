"""The visible date window and the rules for growing or re-centring it."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional, Sequence

from .calendar.dates import WEEK_LENGTH, add_days, add_months, add_weeks, days_between, format_date, months_between
from .calendar.items import TimelineItem, date_range
from .layout.granularity import Granularity


class Edge(str, Enum):
    START = "start"
    END = "end"

    @classmethod
    def parse(cls, value: "str | Edge") -> "Edge":
        if isinstance(value, Edge):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown edge {value!r}; expected 'start' or 'end'") from exc


@dataclass(frozen=True)
class VisibleWindow:
    """Inclusive calendar span materialized into columns."""

    min_date: date
    max_date: date

    def __post_init__(self) -> None:
        if self.min_date > self.max_date:
            raise ValueError(
                f"Window starts ({format_date(self.min_date)}) after it ends "
                f"({format_date(self.max_date)})"
            )

    @property
    def days(self) -> int:
        return days_between(self.min_date, self.max_date)

    def covers(self, start: date, end: date) -> bool:
        return self.min_date <= start and end <= self.max_date

    def __str__(self) -> str:
        return f"{format_date(self.min_date)}..{format_date(self.max_date)}"


def initial_window(
    items: Sequence[TimelineItem],
    *,
    today: Callable[[], date] = date.today,
) -> VisibleWindow:
    min_date, max_date = date_range(items, today=today)
    return VisibleWindow(min_date, max_date)


def _shift(value: date, granularity: Granularity, steps: int) -> date:
    if granularity is Granularity.DAY:
        return add_days(value, steps)
    if granularity is Granularity.WEEK:
        return add_weeks(value, steps)
    return add_months(value, steps)


def extend_window(
    window: VisibleWindow,
    edge: Edge,
    granularity: Granularity,
    steps: Optional[int] = None,
) -> VisibleWindow:
    """Grow ``window`` past ``edge`` by ``steps`` days, weeks or months.

    ``steps`` defaults to the granularity's extension step and must be
    positive, so the window never shrinks.
    """

    if steps is None:
        steps = granularity.spec.extend_steps
    if steps <= 0:
        raise ValueError(f"Extension steps must be positive, got {steps}")

    if edge is Edge.START:
        return VisibleWindow(_shift(window.min_date, granularity, -steps), window.max_date)
    return VisibleWindow(window.min_date, _shift(window.max_date, granularity, steps))


def extend_to_reach(
    window: VisibleWindow,
    edge: Edge,
    granularity: Granularity,
    boundary: date,
    target: date,
) -> VisibleWindow:
    """Grow ``window`` past ``edge`` in whole extension steps until it reaches ``target``.

    ``boundary`` is the first (``START``) or last (``END``) day the window's
    columns currently cover. The window is returned unchanged when
    ``target`` is already on the covered side of ``boundary``.
    """

    near, far = (target, boundary) if edge is Edge.START else (boundary, target)
    if far <= near:
        return window

    if granularity is Granularity.DAY:
        units = days_between(near, far)
    elif granularity is Granularity.WEEK:
        units = -(-days_between(near, far) // WEEK_LENGTH)
    else:
        units = months_between(near, far)
    step = granularity.spec.extend_steps
    return extend_window(window, edge, granularity, -(-units // step) * step)


def window_for_granularity(center: date, granularity: Granularity) -> VisibleWindow:
    """A window of the granularity's default span centred on ``center``."""

    half = granularity.spec.half_span
    return VisibleWindow(add_days(center, -half), add_days(center, half))


def cover(window: VisibleWindow, start: date, end: date) -> VisibleWindow:
    """Smallest window containing both ``window`` and ``start..end``."""

    return VisibleWindow(min(window.min_date, start), max(window.max_date, end))


__all__ = [
    "Edge",
    "VisibleWindow",
    "cover",
    "extend_to_reach",
    "extend_window",
    "initial_window",
    "window_for_granularity",
]
