from __future__ import annotations

import random
from datetime import date, timedelta
from typing import List

import pytest

from lane_timeline.calendar import TimelineItem
from lane_timeline.layout import assign_lanes, lane_count


def _item(item_id: int, start: str, end: str) -> TimelineItem:
    return TimelineItem(item_id, f"item {item_id}", date.fromisoformat(start), date.fromisoformat(end))


def _random_items(seed: int, count: int = 60) -> List[TimelineItem]:
    rng = random.Random(seed)
    base = date(2021, 1, 1)
    items = []
    for item_id in range(count):
        start = base + timedelta(days=rng.randint(0, 90))
        items.append(TimelineItem(item_id, "", start, start + timedelta(days=rng.randint(0, 20))))
    return items


def _max_overlap(items: List[TimelineItem]) -> int:
    first = min(item.start for item in items)
    last = max(item.end for item in items)
    best = 0
    day = first
    while day <= last:
        best = max(best, sum(1 for item in items if item.start <= day <= item.end))
        day += timedelta(days=1)
    return best


def test_overlapping_items_are_split_across_lanes() -> None:
    items = [
        _item(1, "2021-01-01", "2021-01-05"),
        _item(2, "2021-01-03", "2021-01-10"),
        _item(3, "2021-01-06", "2021-01-08"),
    ]

    lanes = {item.id: item.lane for item in assign_lanes(items)}

    assert lanes == {1: 0, 2: 1, 3: 0}


def test_empty_input_yields_empty_output() -> None:
    assert assign_lanes([]) == []
    assert lane_count([]) == 0


def test_items_sharing_an_end_and_start_day_need_separate_lanes() -> None:
    placed = assign_lanes([_item(1, "2021-01-01", "2021-01-05"), _item(2, "2021-01-05", "2021-01-07")])
    assert [item.lane for item in placed] == [0, 1]


def test_zero_duration_items_pack_like_single_days() -> None:
    placed = assign_lanes(
        [
            _item(1, "2021-01-02", "2021-01-02"),
            _item(2, "2021-01-02", "2021-01-02"),
            _item(3, "2021-01-03", "2021-01-03"),
        ]
    )
    assert [(item.id, item.lane) for item in placed] == [(1, 0), (2, 1), (3, 0)]


def test_output_is_sorted_by_start_and_input_is_untouched() -> None:
    items = [_item(2, "2021-01-09", "2021-01-10"), _item(1, "2021-01-01", "2021-01-02")]

    placed = assign_lanes(items)

    assert [item.id for item in placed] == [1, 2]
    assert all(item.lane is None for item in items)


def test_existing_lane_tags_are_ignored() -> None:
    stale = [_item(1, "2021-01-01", "2021-01-02").with_lane(4), _item(2, "2021-01-05", "2021-01-06").with_lane(9)]
    assert [item.lane for item in assign_lanes(stale)] == [0, 0]


@pytest.mark.parametrize("seed", [1, 7, 42, 2021])
def test_no_two_items_in_a_lane_overlap(seed: int) -> None:
    placed = assign_lanes(_random_items(seed))

    by_lane: dict[int, List[TimelineItem]] = {}
    for item in placed:
        assert item.lane is not None
        by_lane.setdefault(item.lane, []).append(item)

    for members in by_lane.values():
        members.sort(key=lambda item: item.start)
        for earlier, later in zip(members, members[1:]):
            assert earlier.end < later.start


@pytest.mark.parametrize("seed", [1, 7, 42, 2021])
def test_lane_count_equals_peak_overlap(seed: int) -> None:
    items = _random_items(seed)
    assert lane_count(assign_lanes(items)) == _max_overlap(items)


@pytest.mark.parametrize("seed", [3, 11])
def test_reassigning_is_idempotent(seed: int) -> None:
    once = assign_lanes(_random_items(seed))
    twice = assign_lanes([item.with_lane(None) for item in once])
    assert [(item.id, item.lane) for item in twice] == [(item.id, item.lane) for item in once]
