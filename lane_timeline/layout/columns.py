"""Column anchor dates for the visible window and their header metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Sequence

from ..calendar.dates import (
    add_days,
    add_months,
    add_weeks,
    end_of_month,
    end_of_week,
    is_month_start,
    is_weekend,
    start_of_month,
    start_of_week,
)
from .granularity import Granularity


def timeline_columns(
    min_date: date,
    max_date: date,
    granularity: Granularity,
    padding_before: int = 0,
    padding_after: int = 0,
) -> List[date]:
    """Return one anchor date per column covering ``min_date..max_date``.

    Day columns are every calendar day, widened by the padding on each side.
    Week columns are Mondays and month columns are first days of the month;
    padding is ignored for both. A window whose ``min_date`` is after its
    ``max_date`` yields no columns.
    """

    if min_date > max_date:
        return []

    columns: List[date] = []
    if granularity is Granularity.DAY:
        current = add_days(min_date, -padding_before)
        last = add_days(max_date, padding_after)
        while current <= last:
            columns.append(current)
            current = add_days(current, 1)
    elif granularity is Granularity.WEEK:
        current = start_of_week(min_date)
        last = end_of_week(max_date)
        while current <= last:
            columns.append(current)
            current = add_weeks(current, 1)
    else:
        current = start_of_month(min_date)
        last = end_of_month(max_date)
        while current <= last:
            columns.append(current)
            current = add_months(current, 1)
    return columns


def grid_start(min_date: date, granularity: Granularity, padding_before: int = 0) -> date:
    """Anchor date of the first column for a window starting at ``min_date``."""

    if granularity is Granularity.DAY:
        return add_days(min_date, -padding_before)
    if granularity is Granularity.WEEK:
        return start_of_week(min_date)
    return start_of_month(min_date)


def column_end(anchor: date, granularity: Granularity) -> date:
    """Last calendar day covered by the column anchored at ``anchor``."""

    if granularity is Granularity.DAY:
        return anchor
    if granularity is Granularity.WEEK:
        return add_days(anchor, 6)
    return end_of_month(anchor)


def column_span_end(columns: Sequence[date], granularity: Granularity) -> date:
    if not columns:
        raise ValueError("An empty column list covers no dates")
    return column_end(columns[-1], granularity)


@dataclass(frozen=True)
class ColumnInfo:
    """Header metadata for a single column."""

    date: date
    label: str
    is_weekend: bool
    is_month_start: bool


def header_label(anchor: date, granularity: Granularity) -> str:
    if granularity is Granularity.DAY:
        return anchor.strftime("%m/%d")
    if granularity is Granularity.WEEK:
        monday = start_of_week(anchor)
        return f"{monday.strftime('%m/%d')} - {end_of_week(anchor).strftime('%m/%d')}"
    return anchor.strftime("%B %Y")


def classify(anchor: date, granularity: Granularity) -> ColumnInfo:
    return ColumnInfo(
        date=anchor,
        label=header_label(anchor, granularity),
        is_weekend=is_weekend(anchor),
        is_month_start=is_month_start(anchor),
    )


def describe_columns(columns: Sequence[date], granularity: Granularity) -> List[ColumnInfo]:
    return [classify(anchor, granularity) for anchor in columns]


__all__ = [
    "ColumnInfo",
    "classify",
    "column_end",
    "column_span_end",
    "describe_columns",
    "grid_start",
    "header_label",
    "timeline_columns",
]
