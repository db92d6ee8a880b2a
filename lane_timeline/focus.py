"""Focal point bookkeeping: a pinned date and its current pixel."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .calendar.dates import format_date
from .layout.coordinates import TimelineGeometry


@dataclass(frozen=True)
class FocalPoint:
    date: date
    pixel_offset: float

    @property
    def label(self) -> str:
        return format_date(self.date)


def track(value: date, geometry: TimelineGeometry) -> Optional[FocalPoint]:
    """Pin ``value`` and compute where it currently sits.

    Returns ``None`` when the geometry has no columns to place it against.
    """

    if geometry.is_empty:
        return None
    return FocalPoint(date=value, pixel_offset=geometry.focal_pixel(value))


def track_pixel(x: float, geometry: TimelineGeometry) -> Optional[FocalPoint]:
    """Pin whichever day lies under the pixel ``x``."""

    if geometry.is_empty:
        return None
    return track(geometry.date_at(x), geometry)


def refresh(focal: Optional[FocalPoint], geometry: TimelineGeometry) -> Optional[FocalPoint]:
    """Recompute the pixel of an existing focal date against new geometry."""

    if focal is None:
        return None
    return FocalPoint(date=focal.date, pixel_offset=geometry.focal_pixel(focal.date))


def scroll_target(pixel: float, viewport_width: float) -> float:
    """Scroll offset that puts ``pixel`` in the middle of the viewport."""

    return max(0.0, pixel - viewport_width / 2)


__all__ = ["FocalPoint", "refresh", "scroll_target", "track", "track_pixel"]
