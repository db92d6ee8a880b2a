from __future__ import annotations

import logging
from datetime import date

import pytest

from lane_timeline.calendar import (
    InvalidDateError,
    InvalidItemError,
    InvertedIntervalError,
    ItemError,
    TimelineItem,
    date_range,
    load_items,
)


def test_from_record_parses_iso_dates() -> None:
    item = TimelineItem.from_record(
        {"id": "7", "name": "Kickoff", "start": "2021-01-03", "end": "2021-01-05"}
    )

    assert item == TimelineItem(id=7, name="Kickoff", start=date(2021, 1, 3), end=date(2021, 1, 5))
    assert item.lane is None
    assert item.duration_days == 3
    assert item.to_record() == {"id": 7, "name": "Kickoff", "start": "2021-01-03", "end": "2021-01-05"}


def test_zero_duration_items_are_valid() -> None:
    item = TimelineItem(id=1, name="Milestone", start=date(2021, 1, 3), end=date(2021, 1, 3))
    assert item.duration_days == 1


def test_inverted_interval_is_rejected_at_construction() -> None:
    with pytest.raises(InvertedIntervalError):
        TimelineItem(id=1, name="Backwards", start=date(2021, 1, 5), end=date(2021, 1, 3))


def test_malformed_date_raises_invalid_date_error() -> None:
    with pytest.raises(InvalidDateError, match="start"):
        TimelineItem.from_record({"id": 1, "name": "x", "start": "2021-13-01", "end": "2021-12-01"})


@pytest.mark.parametrize(
    "record",
    [
        {"name": "no id", "start": "2021-01-01", "end": "2021-01-02"},
        {"id": True, "name": "bool id", "start": "2021-01-01", "end": "2021-01-02"},
        {"id": "abc", "name": "text id", "start": "2021-01-01", "end": "2021-01-02"},
        {"id": 1, "name": "no end", "start": "2021-01-01"},
        ["not", "a", "mapping"],
    ],
)
def test_invalid_records_raise_item_errors(record: object) -> None:
    with pytest.raises(InvalidItemError):
        TimelineItem.from_record(record)  # type: ignore[arg-type]


def test_load_items_keeps_valid_records_and_reports_bad_ones(caplog: pytest.LogCaptureFixture) -> None:
    records = [
        {"id": 1, "name": "Good", "start": "2021-01-01", "end": "2021-01-04"},
        {"id": 2, "name": "Bad date", "start": "2021-01-40", "end": "2021-01-04"},
        {"id": 3, "name": "Inverted", "start": "2021-01-09", "end": "2021-01-04"},
        {"id": 4, "name": "Also good", "start": "2021-01-02", "end": "2021-01-02"},
    ]

    with caplog.at_level(logging.WARNING):
        batch = load_items(records)

    assert [item.id for item in batch.items] == [1, 4]
    assert not batch.ok
    assert [rejection.index for rejection in batch.rejected] == [1, 2]
    assert isinstance(batch.rejected[0].error, InvalidDateError)
    assert isinstance(batch.rejected[1].error, InvertedIntervalError)
    assert all(isinstance(rejection.error, ItemError) for rejection in batch.rejected)
    assert "Rejected timeline item #1" in caplog.text


def test_duplicate_ids_are_not_deduplicated() -> None:
    batch = load_items(
        [
            {"id": 1, "name": "a", "start": "2021-01-01", "end": "2021-01-02"},
            {"id": 1, "name": "b", "start": "2021-01-03", "end": "2021-01-04"},
        ]
    )
    assert len(batch.items) == 2
    assert batch.ok


def test_date_range_spans_items() -> None:
    items = [
        TimelineItem(1, "a", date(2021, 1, 5), date(2021, 1, 9)),
        TimelineItem(2, "b", date(2021, 1, 2), date(2021, 1, 3)),
        TimelineItem(3, "c", date(2021, 1, 4), date(2021, 1, 20)),
    ]
    assert date_range(items) == (date(2021, 1, 2), date(2021, 1, 20))


def test_date_range_defaults_to_thirty_days_from_today() -> None:
    assert date_range([], today=lambda: date(2024, 5, 1)) == (date(2024, 5, 1), date(2024, 5, 31))
