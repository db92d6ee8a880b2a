"""Stateful front end that serializes timeline transitions for a UI layer."""

from __future__ import annotations

import logging
from collections import deque
from datetime import date
from typing import Any, Callable, Deque, Iterable, Optional, Set, Tuple

from . import state as transitions
from .calendar.items import ItemBatch, TimelineItem, load_items
from .focus import FocalPoint, scroll_target
from .layout.granularity import Granularity, zoom
from .state import TimelineState
from .viewport import Edge

LOGGER = logging.getLogger(__name__)

RecenterCallback = Callable[[FocalPoint, float], None]


class TimelineController:
    """Owns the current :class:`TimelineState` and applies one transition at a time.

    Requests that arrive while a transition is being applied (for example
    from the ``on_recenter`` callback) are queued and run in arrival order
    once the current one has been committed.
    """

    def __init__(
        self,
        state: TimelineState,
        *,
        viewport_width: float = 0.0,
        on_recenter: Optional[RecenterCallback] = None,
        today: Callable[[], date] = date.today,
        logger: logging.Logger | None = None,
    ) -> None:
        self._state = state
        self.today = today
        self.viewport_width = viewport_width
        self.on_recenter = on_recenter
        self.logger = logger or LOGGER
        self._latched_edges: Set[Edge] = set()
        self._pending: Deque[Tuple[str, Callable[[], None]]] = deque()
        self._busy = False

    @property
    def state(self) -> TimelineState:
        return self._state

    @property
    def focal_pixel(self) -> Optional[float]:
        focal = self._state.focal
        return focal.pixel_offset if focal is not None else None

    # ------------------------------------------------------------------
    # Item set
    # ------------------------------------------------------------------
    def load_records(self, records: Iterable[object]) -> ItemBatch:
        """Normalize raw records and swap them in; returns rejections too."""

        batch = load_items(records)
        self.set_items(batch.items)
        return batch

    def set_items(self, items: Iterable[TimelineItem]) -> TimelineState:
        materialized = tuple(items)

        def action() -> None:
            self._apply("replace items", transitions.replace_items, materialized, today=self.today)
            self._latched_edges.clear()

        return self._submit("replace items", action)

    # ------------------------------------------------------------------
    # Window navigation
    # ------------------------------------------------------------------
    def on_near_edge(self, edge: Edge | str) -> TimelineState:
        """Extend the window once per approach to ``edge``.

        Further signals for the same edge are ignored until
        :meth:`on_leave_edge` reports that the viewport moved away from it.
        """

        side = Edge.parse(edge)

        def action() -> None:
            if side in self._latched_edges:
                self.logger.debug("Ignoring repeated near-%s signal", side.value)
                return
            self._apply(f"extend {side.value}", transitions.extend, side)
            self._latched_edges.add(side)

        return self._submit(f"near {side.value}", action)

    def on_leave_edge(self, edge: Edge | str) -> None:
        self._latched_edges.discard(Edge.parse(edge))

    def change_granularity(
        self,
        granularity: Granularity | str,
        focal_date: Optional[date] = None,
    ) -> TimelineState:
        target = Granularity.parse(granularity)

        def action() -> None:
            self._apply(f"granularity {target.value}", transitions.change_granularity, target, focal_date)
            self._latched_edges.clear()

        return self._submit(f"granularity {target.value}", action)

    def zoom(self, direction: int, focal_date: Optional[date] = None) -> TimelineState:
        """Step one granularity finer (``direction > 0``) or coarser."""

        def action() -> None:
            target = zoom(self._state.granularity, direction)
            self._apply(f"zoom {target.value}", transitions.change_granularity, target, focal_date)
            self._latched_edges.clear()

        return self._submit("zoom", action)

    def reset(self) -> TimelineState:
        def action() -> None:
            self._apply("reset", transitions.reset)
            self._latched_edges.clear()

        return self._submit("reset", action)

    def ensure_visible(self, start: date, end: date) -> TimelineState:
        return self._submit(
            "ensure visible",
            lambda: self._apply("ensure visible", transitions.ensure_visible, start, end),
        )

    # ------------------------------------------------------------------
    # Items and focus
    # ------------------------------------------------------------------
    def drag_item(self, item_id: int, delta_x: float, *, allow_extend: bool = True) -> TimelineState:
        return self._submit(
            f"drag {item_id}",
            lambda: self._apply(
                f"drag {item_id}",
                transitions.drag_item,
                item_id,
                delta_x,
                allow_extend=allow_extend,
            ),
        )

    def set_focus(self, value: date) -> TimelineState:
        return self._submit("focus", lambda: self._apply("focus", transitions.set_focus, value))

    def set_focus_at_pixel(self, x: float) -> TimelineState:
        return self._submit("focus", lambda: self._apply("focus", transitions.set_focus_at_pixel, x))

    def clear_focus(self) -> TimelineState:
        return self._submit("clear focus", lambda: self._apply("clear focus", transitions.clear_focus))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _submit(self, description: str, action: Callable[[], None]) -> TimelineState:
        self._pending.append((description, action))
        if self._busy:
            self.logger.debug("Queued %s behind an in-flight transition", description)
            return self._state

        self._busy = True
        try:
            while self._pending:
                _, queued = self._pending.popleft()
                queued()
        except Exception:
            self._pending.clear()
            raise
        finally:
            self._busy = False
        return self._state

    def _apply(
        self,
        description: str,
        transition: Callable[..., TimelineState],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        previous = self._state
        updated = transition(previous, *args, **kwargs)
        if updated is previous:
            self.logger.debug("Transition %s left the state unchanged", description)
            return

        self._state = updated
        self.logger.debug(
            "Applied %s: window %s at %s granularity",
            description,
            updated.window,
            updated.granularity.value,
        )

        view_changed = updated.window != previous.window or updated.granularity is not previous.granularity
        if view_changed and updated.focal is not None:
            self._notify_recenter(updated.focal)

    def _notify_recenter(self, focal: FocalPoint) -> None:
        if self.on_recenter is None:
            return
        target = scroll_target(focal.pixel_offset, self.viewport_width)
        self.logger.debug("Recentering on %s at scroll offset %.1f", focal.label, target)
        self.on_recenter(focal, target)


__all__ = ["RecenterCallback", "TimelineController"]
