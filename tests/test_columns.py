from __future__ import annotations

from datetime import date

import pytest

from lane_timeline.layout import Granularity, classify, column_span_end, grid_start, timeline_columns


def test_day_columns_include_padding() -> None:
    columns = timeline_columns(date(2021, 1, 5), date(2021, 1, 7), Granularity.DAY, 2, 1)

    assert columns == [date(2021, 1, day) for day in range(3, 9)]


def test_week_columns_are_mondays_and_ignore_padding() -> None:
    columns = timeline_columns(date(2021, 1, 6), date(2021, 1, 20), Granularity.WEEK, 10, 10)

    assert columns == [date(2021, 1, 4), date(2021, 1, 11), date(2021, 1, 18)]


def test_month_columns_are_first_days_and_ignore_padding() -> None:
    columns = timeline_columns(date(2021, 1, 20), date(2021, 3, 2), Granularity.MONTH, 45, 45)

    assert columns == [date(2021, 1, 1), date(2021, 2, 1), date(2021, 3, 1)]


@pytest.mark.parametrize("granularity", list(Granularity))
def test_degenerate_window_has_no_columns(granularity: Granularity) -> None:
    assert timeline_columns(date(2021, 2, 1), date(2021, 1, 1), granularity, 3, 3) == []


@pytest.mark.parametrize("granularity", list(Granularity))
def test_columns_are_strictly_ascending_and_cover_the_window(granularity: Granularity) -> None:
    min_date, max_date = date(2020, 11, 17), date(2021, 4, 3)
    columns = timeline_columns(min_date, max_date, granularity, 7, 7)

    assert all(earlier < later for earlier, later in zip(columns, columns[1:]))
    assert columns[0] <= min_date
    assert column_span_end(columns, granularity) >= max_date
    assert columns[0] == grid_start(min_date, granularity, 7)


def test_column_span_end_per_granularity() -> None:
    assert column_span_end([date(2021, 1, 4)], Granularity.DAY) == date(2021, 1, 4)
    assert column_span_end([date(2021, 1, 4)], Granularity.WEEK) == date(2021, 1, 10)
    assert column_span_end([date(2021, 2, 1)], Granularity.MONTH) == date(2021, 2, 28)
    with pytest.raises(ValueError):
        column_span_end([], Granularity.DAY)


def test_classify_flags_weekends_and_month_starts() -> None:
    saturday = classify(date(2021, 1, 2), Granularity.DAY)
    assert saturday.is_weekend
    assert not saturday.is_month_start
    assert saturday.label == "01/02"

    first = classify(date(2021, 2, 1), Granularity.DAY)
    assert first.is_month_start
    assert not first.is_weekend


def test_header_labels_for_coarser_granularities() -> None:
    assert classify(date(2021, 1, 4), Granularity.WEEK).label == "01/04 - 01/10"
    assert classify(date(2021, 1, 1), Granularity.MONTH).label == "January 2021"


def test_granularity_parse() -> None:
    assert Granularity.parse("Week") is Granularity.WEEK
    assert Granularity.parse(Granularity.MONTH) is Granularity.MONTH
    with pytest.raises(ValueError, match="Unknown granularity"):
        Granularity.parse("cal")
