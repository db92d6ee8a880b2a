"""Immutable timeline state and the named transitions that produce new states.

Each transition takes a :class:`TimelineState` and returns a new one; nothing
is mutated in place. Lane tags, columns, geometry and the focal pixel are all
derived from the state's items, window and granularity.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from functools import cached_property
from typing import Callable, Iterable, List, Optional, Tuple

from .calendar.dates import add_days, days_between
from .calendar.items import TimelineItem
from .focus import FocalPoint, refresh, track, track_pixel
from .layout.columns import ColumnInfo, describe_columns, timeline_columns
from .layout.coordinates import DEFAULT_METRICS, LayoutMetrics, PositionRect, TimelineGeometry
from .layout.granularity import Granularity
from .layout.lanes import assign_lanes, lane_count
from .viewport import (
    Edge,
    VisibleWindow,
    cover,
    extend_to_reach,
    extend_window,
    initial_window,
    window_for_granularity,
)

logger = logging.getLogger(__name__)

DEFAULT_PADDING_DAYS = 7


class UnknownItemError(KeyError):
    """Raised when a transition names an item id that is not in the state."""


@dataclass(frozen=True)
class TimelineState:
    items: Tuple[TimelineItem, ...]
    window: VisibleWindow
    initial_window: VisibleWindow
    granularity: Granularity = Granularity.DAY
    focal: Optional[FocalPoint] = None
    padding_before: int = DEFAULT_PADDING_DAYS
    padding_after: int = DEFAULT_PADDING_DAYS
    metrics: LayoutMetrics = DEFAULT_METRICS

    @property
    def column_width(self) -> int:
        return self.granularity.column_width

    @cached_property
    def columns(self) -> Tuple[date, ...]:
        return tuple(
            timeline_columns(
                self.window.min_date,
                self.window.max_date,
                self.granularity,
                self.padding_before,
                self.padding_after,
            )
        )

    @cached_property
    def geometry(self) -> TimelineGeometry:
        return TimelineGeometry(
            columns=self.columns,
            granularity=self.granularity,
            column_width=self.column_width,
            metrics=self.metrics,
        )

    @property
    def column_info(self) -> List[ColumnInfo]:
        return describe_columns(self.columns, self.granularity)

    @property
    def lane_count(self) -> int:
        return lane_count(self.items)

    @property
    def rects(self) -> Tuple[Tuple[TimelineItem, PositionRect], ...]:
        """Each item paired with its rectangle, in item order."""

        geometry = self.geometry
        return tuple((item, geometry.position(item)) for item in self.items)

    def item(self, item_id: int) -> TimelineItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise UnknownItemError(item_id)


def create_state(
    items: Iterable[TimelineItem],
    *,
    granularity: Granularity = Granularity.DAY,
    padding_before: int = DEFAULT_PADDING_DAYS,
    padding_after: int = DEFAULT_PADDING_DAYS,
    metrics: LayoutMetrics = DEFAULT_METRICS,
    today: Callable[[], date] = date.today,
) -> TimelineState:
    if padding_before < 0 or padding_after < 0:
        raise ValueError("Padding must not be negative")
    placed = tuple(assign_lanes(items))
    window = initial_window(placed, today=today)
    return TimelineState(
        items=placed,
        window=window,
        initial_window=window,
        granularity=granularity,
        padding_before=padding_before,
        padding_after=padding_after,
        metrics=metrics,
    )


def _with_window(
    state: TimelineState,
    window: VisibleWindow,
    granularity: Optional[Granularity] = None,
) -> TimelineState:
    updated = replace(state, window=window, granularity=granularity or state.granularity)
    return replace(updated, focal=refresh(updated.focal, updated.geometry))


def replace_items(
    state: TimelineState,
    items: Iterable[TimelineItem],
    *,
    today: Callable[[], date] = date.today,
) -> TimelineState:
    """Swap in a new item set, re-seeding the window from it."""

    placed = tuple(assign_lanes(items))
    window = initial_window(placed, today=today)
    return _with_window(replace(state, items=placed, initial_window=window), window)


def extend(state: TimelineState, edge: Edge | str, steps: Optional[int] = None) -> TimelineState:
    side = Edge.parse(edge)
    window = extend_window(state.window, side, state.granularity, steps)
    logger.debug("Extended window past %s edge: %s -> %s", side.value, state.window, window)
    return _with_window(state, window)


def change_granularity(
    state: TimelineState,
    granularity: Granularity | str,
    focal_date: Optional[date] = None,
) -> TimelineState:
    """Replace the window with one sized for ``granularity``.

    The new window is centred on ``focal_date``, else on the active focal
    point, else on the earliest item start, else on the first column.
    Requesting the current granularity leaves the state untouched.
    """

    target = Granularity.parse(granularity)
    if target is state.granularity:
        return state

    center = focal_date
    if center is None and state.focal is not None:
        center = state.focal.date
    if center is None and state.items:
        center = min(item.start for item in state.items)
    if center is None:
        center = state.columns[0] if state.columns else state.window.min_date

    window = window_for_granularity(center, target)
    logger.debug(
        "Granularity %s -> %s centred on %s: window %s",
        state.granularity.value,
        target.value,
        center,
        window,
    )
    return _with_window(state, window, target)


def reset(state: TimelineState) -> TimelineState:
    return _with_window(state, state.initial_window)


def ensure_visible(state: TimelineState, start: date, end: date) -> TimelineState:
    """Grow the window just enough to include ``start..end``."""

    if state.window.covers(start, end):
        return state
    return _with_window(state, cover(state.window, start, end))


def set_focus(state: TimelineState, value: date) -> TimelineState:
    return replace(state, focal=track(value, state.geometry))


def set_focus_at_pixel(state: TimelineState, x: float) -> TimelineState:
    return replace(state, focal=track_pixel(x, state.geometry))


def clear_focus(state: TimelineState) -> TimelineState:
    if state.focal is None:
        return state
    return replace(state, focal=None)


def drag_item(
    state: TimelineState,
    item_id: int,
    delta_x: float,
    *,
    allow_extend: bool = True,
) -> TimelineState:
    """Move an item horizontally by ``delta_x`` pixels, keeping its duration.

    The item's start slice is shifted by ``delta_x`` and mapped back to a
    date. If the result falls outside the window it is grown towards the
    item when ``allow_extend`` is true; otherwise the item is clamped inside
    the covered days.
    """

    if not math.isfinite(delta_x):
        raise ValueError(f"Drag offset must be finite, got {delta_x!r}")
    item = state.item(item_id)
    if delta_x == 0:
        return state

    duration = days_between(item.start, item.end)
    geometry = state.geometry
    target = geometry.focal_pixel(item.start) + delta_x
    window = state.window

    if allow_extend:
        new_start = geometry.project(target)
        new_end = add_days(new_start, duration)
        window = extend_to_reach(window, Edge.START, state.granularity, geometry.first_day, new_start)
        window = extend_to_reach(window, Edge.END, state.granularity, geometry.last_day, new_end)
    else:
        new_start = geometry.date_at(target)
        new_end = add_days(new_start, duration)
        if new_end > geometry.last_day:
            new_start = max(geometry.first_day, add_days(geometry.last_day, -duration))
            new_end = add_days(new_start, duration)

    logger.debug("Dragged item %s from %s to %s", item_id, item.start, new_start)
    moved = [
        candidate.with_dates(new_start, new_end) if candidate.id == item_id else candidate
        for candidate in state.items
    ]
    current = replace(state, items=tuple(assign_lanes(moved)))
    return _with_window(current, window)


__all__ = [
    "DEFAULT_PADDING_DAYS",
    "TimelineState",
    "UnknownItemError",
    "change_granularity",
    "clear_focus",
    "create_state",
    "drag_item",
    "ensure_visible",
    "extend",
    "replace_items",
    "reset",
    "set_focus",
    "set_focus_at_pixel",
]
