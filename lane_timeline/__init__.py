"""Lane-packed timeline layout with day, week and month granularities."""

from __future__ import annotations

from .calendar import ItemBatch, ItemError, TimelineItem, load_items
from .controller import TimelineController
from .layout import Granularity, PositionRect, TimelineGeometry, assign_lanes, date_at_pixel, position, timeline_columns
from .state import TimelineState, create_state
from .viewport import Edge, VisibleWindow

__all__ = [
    "__version__",
    "Edge",
    "Granularity",
    "ItemBatch",
    "ItemError",
    "PositionRect",
    "TimelineController",
    "TimelineGeometry",
    "TimelineItem",
    "TimelineState",
    "VisibleWindow",
    "assign_lanes",
    "create_state",
    "date_at_pixel",
    "load_items",
    "position",
    "timeline_columns",
]

__version__ = "0.1.0"
