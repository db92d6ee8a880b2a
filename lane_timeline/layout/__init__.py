"""Temporal layout engine: lanes, columns and date/pixel mapping."""

from .columns import ColumnInfo, classify, column_span_end, describe_columns, grid_start, timeline_columns
from .coordinates import (
    DEFAULT_METRICS,
    LayoutMetrics,
    PositionRect,
    TimelineGeometry,
    date_at_pixel,
    date_offset,
    extrapolate_date,
    focal_pixel,
    interval_width,
    position,
)
from .granularity import GRANULARITY_SPECS, Granularity, GranularitySpec, zoom
from .lanes import assign_lanes, lane_count

__all__ = [
    "ColumnInfo",
    "DEFAULT_METRICS",
    "GRANULARITY_SPECS",
    "Granularity",
    "GranularitySpec",
    "LayoutMetrics",
    "PositionRect",
    "TimelineGeometry",
    "assign_lanes",
    "classify",
    "column_span_end",
    "date_at_pixel",
    "date_offset",
    "describe_columns",
    "extrapolate_date",
    "focal_pixel",
    "grid_start",
    "interval_width",
    "lane_count",
    "position",
    "timeline_columns",
    "zoom",
]
