"""Calendar primitives and the timeline item model."""

from .items import (
    InvalidDateError,
    InvalidItemError,
    InvertedIntervalError,
    ItemBatch,
    ItemError,
    ItemRejection,
    TimelineItem,
    date_range,
    load_items,
)

__all__ = [
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
