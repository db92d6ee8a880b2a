"""Timeline item model and normalization of raw item records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .dates import add_days, format_date, parse_date

logger = logging.getLogger(__name__)

DEFAULT_EMPTY_RANGE_DAYS = 30


class ItemError(ValueError):
    """Base class for problems with a single timeline item."""


class InvalidItemError(ItemError):
    """Raised when an item record is missing fields or has malformed values."""


class InvalidDateError(ItemError):
    """Raised when an item's start or end date cannot be parsed."""


class InvertedIntervalError(ItemError):
    """Raised when an item ends before it starts."""


@dataclass(frozen=True)
class TimelineItem:
    """A named, inclusive date interval placed on the timeline.

    ``lane`` is derived by :func:`lane_timeline.layout.assign_lanes` and is
    never part of an item's source data.
    """

    id: int
    name: str
    start: date
    end: date
    lane: Optional[int] = None

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvertedIntervalError(
                f"Item {self.id} ends ({format_date(self.end)}) before it starts "
                f"({format_date(self.start)})"
            )

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> "TimelineItem":
        """Build an item from a ``{id, name, start, end}`` mapping."""

        if not isinstance(record, Mapping):
            raise InvalidItemError(f"Item record must be a mapping, got {type(record).__name__}")

        missing = [key for key in ("id", "start", "end") if key not in record]
        if missing:
            raise InvalidItemError(f"Item record is missing {', '.join(missing)}")

        raw_id = record["id"]
        if isinstance(raw_id, bool):
            raise InvalidItemError(f"Item id must be an integer, got {raw_id!r}")
        try:
            item_id = int(raw_id)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise InvalidItemError(f"Item id must be an integer, got {raw_id!r}") from exc

        start = _parse_item_date(item_id, "start", record["start"])
        end = _parse_item_date(item_id, "end", record["end"])
        name = str(record.get("name") or "")
        return cls(id=item_id, name=name, start=start, end=end)

    @property
    def duration_days(self) -> int:
        """Number of days the item covers, counting both ends."""

        return (self.end - self.start).days + 1

    def with_lane(self, lane: Optional[int]) -> "TimelineItem":
        return replace(self, lane=lane)

    def with_dates(self, start: date, end: date) -> "TimelineItem":
        return replace(self, start=start, end=end)

    def to_record(self) -> dict[str, object]:
        record: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "start": format_date(self.start),
            "end": format_date(self.end),
        }
        if self.lane is not None:
            record["lane"] = self.lane
        return record


@dataclass(frozen=True)
class ItemRejection:
    """A record that could not be turned into a :class:`TimelineItem`."""

    index: int
    record: object
    error: ItemError


@dataclass(frozen=True)
class ItemBatch:
    items: Tuple[TimelineItem, ...]
    rejected: Tuple[ItemRejection, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.rejected


def _parse_item_date(item_id: int, field_name: str, value: object) -> date:
    try:
        return parse_date(value)  # type: ignore[arg-type]
    except ValueError as exc:
        raise InvalidDateError(f"Item {item_id} has an invalid {field_name} date: {value!r}") from exc


def load_items(records: Iterable[object]) -> ItemBatch:
    """Normalize raw item records, collecting a rejection for each bad one.

    A malformed record never prevents the rest of the batch from loading.
    """

    items: List[TimelineItem] = []
    rejected: List[ItemRejection] = []
    for index, record in enumerate(records):
        try:
            items.append(TimelineItem.from_record(record))  # type: ignore[arg-type]
        except ItemError as exc:
            logger.warning("Rejected timeline item #%d: %s", index, exc)
            rejected.append(ItemRejection(index=index, record=record, error=exc))
    return ItemBatch(items=tuple(items), rejected=tuple(rejected))


def date_range(
    items: Sequence[TimelineItem],
    *,
    today: Callable[[], date] = date.today,
) -> Tuple[date, date]:
    """Return the earliest start and latest end across ``items``.

    An empty collection yields a window starting today and spanning
    ``DEFAULT_EMPTY_RANGE_DAYS`` days.
    """

    if not items:
        anchor = today()
        return anchor, add_days(anchor, DEFAULT_EMPTY_RANGE_DAYS)
    return min(item.start for item in items), max(item.end for item in items)


__all__ = [
    "DEFAULT_EMPTY_RANGE_DAYS",
    "InvalidDateError",
    "InvalidItemError",
    "InvertedIntervalError",
    "ItemBatch",
    "ItemError",
    "ItemRejection",
    "TimelineItem",
    "date_range",
    "load_items",
]
