"""Greedy first-fit packing of date intervals into non-overlapping lanes."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ..calendar.items import TimelineItem


def assign_lanes(items: Iterable[TimelineItem]) -> List[TimelineItem]:
    """Return copies of ``items`` tagged with a lane index, ordered by start.

    Items are visited earliest start first (ties keep their input order) and
    each one takes the lowest lane whose last item ended strictly before it
    starts. Any existing lane tags are ignored, so the result depends only on
    the item dates and their order.
    """

    ordered = sorted(items, key=lambda item: item.start)
    lane_ends: List[date] = []
    placed: List[TimelineItem] = []

    for item in ordered:
        lane = 0
        while lane < len(lane_ends) and not lane_ends[lane] < item.start:
            lane += 1
        if lane == len(lane_ends):
            lane_ends.append(item.end)
        else:
            lane_ends[lane] = item.end
        placed.append(item.with_lane(lane))

    return placed


def lane_count(items: Iterable[TimelineItem]) -> int:
    """Number of lanes occupied by already-tagged ``items``."""

    lanes = [item.lane for item in items if item.lane is not None]
    return max(lanes) + 1 if lanes else 0


__all__ = ["assign_lanes", "lane_count"]
