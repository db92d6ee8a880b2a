"""Mapping between calendar dates and horizontal pixel offsets.

Every granularity maps dates linearly *within* a column: a day column holds a
single day, a week column holds seven equal slices starting on Monday and a
month column is divided into as many slices as the month has days. The
inverse, :func:`date_at_pixel`, uses the same slicing so that a date mapped to
a pixel and back lands on the same day.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Final, Sequence, Tuple

from ..calendar.dates import (
    WEEK_LENGTH,
    add_days,
    add_months,
    days_between,
    days_in_month,
    end_of_month,
    inclusive_days,
    months_between,
    start_of_month,
)
from ..calendar.items import TimelineItem
from .columns import column_span_end
from .granularity import Granularity


@dataclass(frozen=True)
class LayoutMetrics:
    """Vertical sizing and spacing constants for item cards."""

    lane_height: int = 60
    item_height: int = 50
    item_top_offset: int = 5
    min_item_width: float = 20.0
    margin_ratio: float = 0.05
    header_height: int = 48

    def margin(self, column_width: float) -> float:
        return column_width * self.margin_ratio

    def lane_top(self, lane: int) -> int:
        return lane * self.lane_height + self.item_top_offset

    def lanes_height(self, lanes: int) -> int:
        return max(lanes, 1) * self.lane_height


DEFAULT_METRICS: Final[LayoutMetrics] = LayoutMetrics()


@dataclass(frozen=True)
class PositionRect:
    left: float
    width: float
    top: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


def _day_share(value: date, column_width: float, granularity: Granularity) -> float:
    if granularity is Granularity.DAY:
        return column_width
    if granularity is Granularity.WEEK:
        return column_width / WEEK_LENGTH
    return column_width / days_in_month(value)


def date_offset(value: date, origin: date, column_width: float, granularity: Granularity) -> float:
    """Left edge, in pixels from ``origin``'s column, of the day ``value``."""

    if granularity is Granularity.DAY:
        return days_between(origin, value) * column_width
    if granularity is Granularity.WEEK:
        return days_between(origin, value) * column_width / WEEK_LENGTH
    whole_months = months_between(start_of_month(origin), value)
    return whole_months * column_width + (value.day - 1) * column_width / days_in_month(value)


def interval_width(start: date, end: date, column_width: float, granularity: Granularity) -> float:
    """Width of the inclusive interval ``start..end`` before margins and floors."""

    if granularity is Granularity.DAY:
        return inclusive_days(start, end) * column_width
    if granularity is Granularity.WEEK:
        return inclusive_days(start, end) * column_width / WEEK_LENGTH

    total = 0.0
    month = start_of_month(start)
    while month <= end:
        month_end = end_of_month(month)
        covered = inclusive_days(max(start, month), min(end, month_end))
        total += column_width * covered / days_in_month(month)
        month = add_months(month, 1)
    return total


def focal_pixel(value: date, origin: date, column_width: float, granularity: Granularity) -> float:
    """Horizontal centre of the slice occupied by the day ``value``."""

    return date_offset(value, origin, column_width, granularity) + _day_share(
        value, column_width, granularity
    ) / 2


def position(
    item_start: date,
    item_end: date,
    window_start: date,
    column_width: float,
    lane: int,
    granularity: Granularity,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> PositionRect:
    """Return the pixel rectangle for an interval placed in ``lane``.

    ``window_start`` is the anchor date of the first rendered column. Day
    cards are inset by the margin on the left and shortened by it; week cards
    are only shortened; month cards use the proportional width as is. The
    width never drops below ``metrics.min_item_width``.
    """

    if item_start > item_end:
        raise ValueError(f"Interval ends ({item_end}) before it starts ({item_start})")

    left = date_offset(item_start, window_start, column_width, granularity)
    width = interval_width(item_start, item_end, column_width, granularity)
    margin = metrics.margin(column_width)
    if granularity is Granularity.DAY:
        left += margin
        width -= margin
    elif granularity is Granularity.WEEK:
        width -= margin

    return PositionRect(
        left=left,
        width=max(width, metrics.min_item_width),
        top=metrics.lane_top(lane),
        height=metrics.item_height,
    )


def date_at_pixel(
    x: float,
    columns: Sequence[date],
    column_width: float,
    granularity: Granularity,
) -> date:
    """Return the calendar day under the horizontal pixel ``x``.

    Pixels before the first column or after the last one resolve to the
    first and last covered day respectively.
    """

    if not columns:
        raise ValueError("Cannot resolve a pixel against an empty column list")

    index = min(max(int(math.floor(x / column_width)), 0), len(columns) - 1)
    anchor = columns[index]
    if granularity is Granularity.DAY:
        return anchor

    fraction = (x - index * column_width) / column_width
    fraction = min(max(fraction, 0.0), 1.0)
    slices = WEEK_LENGTH if granularity is Granularity.WEEK else days_in_month(anchor)
    return add_days(anchor, min(int(math.floor(fraction * slices)), slices - 1))


def extrapolate_date(x: float, origin: date, column_width: float, granularity: Granularity) -> date:
    """Unbounded inverse of :func:`date_offset`.

    Columns are assumed to continue past both ends of the grid at the same
    width, so pixels outside it resolve to days outside it instead of being
    clamped.
    """

    if not math.isfinite(x):
        raise ValueError(f"Cannot resolve a non-finite pixel offset: {x!r}")
    if granularity is Granularity.DAY:
        return add_days(origin, int(math.floor(x / column_width)))
    if granularity is Granularity.WEEK:
        return add_days(origin, int(math.floor(x * WEEK_LENGTH / column_width)))

    index = int(math.floor(x / column_width))
    anchor = add_months(start_of_month(origin), index)
    slices = days_in_month(anchor)
    fraction = x / column_width - index
    return add_days(anchor, min(int(math.floor(fraction * slices)), slices - 1))


@dataclass(frozen=True)
class TimelineGeometry:
    """Columns plus the sizing needed to place anything against them."""

    columns: Tuple[date, ...]
    granularity: Granularity
    column_width: float
    metrics: LayoutMetrics = DEFAULT_METRICS

    @property
    def is_empty(self) -> bool:
        return not self.columns

    @property
    def origin(self) -> date:
        if not self.columns:
            raise ValueError("Geometry has no columns")
        return self.columns[0]

    @property
    def first_day(self) -> date:
        return self.origin

    @property
    def last_day(self) -> date:
        return column_span_end(self.columns, self.granularity)

    @property
    def total_width(self) -> float:
        return len(self.columns) * self.column_width

    def total_height(self, lanes: int) -> int:
        return self.metrics.lanes_height(lanes)

    def contains(self, value: date) -> bool:
        return bool(self.columns) and self.first_day <= value <= self.last_day

    def column_left(self, index: int) -> float:
        return index * self.column_width

    def rect(self, start: date, end: date, lane: int) -> PositionRect:
        return position(
            start,
            end,
            self.origin,
            self.column_width,
            lane,
            self.granularity,
            self.metrics,
        )

    def position(self, item: TimelineItem) -> PositionRect:
        if item.lane is None:
            raise ValueError(f"Item {item.id} has no lane; assign lanes before positioning")
        return self.rect(item.start, item.end, item.lane)

    def date_offset(self, value: date) -> float:
        return date_offset(value, self.origin, self.column_width, self.granularity)

    def focal_pixel(self, value: date) -> float:
        return focal_pixel(value, self.origin, self.column_width, self.granularity)

    def date_at(self, x: float) -> date:
        return date_at_pixel(x, self.columns, self.column_width, self.granularity)

    def project(self, x: float) -> date:
        """Like :meth:`date_at`, but pixels outside the grid are extrapolated."""

        if 0 <= x < self.total_width:
            return self.date_at(x)
        return extrapolate_date(x, self.origin, self.column_width, self.granularity)


__all__ = [
    "DEFAULT_METRICS",
    "LayoutMetrics",
    "PositionRect",
    "TimelineGeometry",
    "date_at_pixel",
    "date_offset",
    "extrapolate_date",
    "focal_pixel",
    "interval_width",
    "position",
]
