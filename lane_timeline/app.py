"""Command line entry point: lay out an item file and render a preview."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, List, Optional, TextIO

from .calendar.dates import format_date, parse_date
from .config import ConfigError, TimelineSettings, load_env_file
from .controller import TimelineController
from .focus import scroll_target
from .layout.granularity import Granularity
from .rendering import TimelineRenderer
from .state import TimelineState, create_state

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lay out date-ranged items into lanes")
    parser.add_argument(
        "items",
        type=Path,
        help="JSON file holding a list of {id, name, start, end} records.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before settings are resolved.",
    )
    parser.add_argument(
        "--granularity",
        choices=[member.value for member in Granularity],
        default=None,
        help="Column granularity (overrides TIMELINE_GRANULARITY).",
    )
    parser.add_argument(
        "--focus",
        type=str,
        default=None,
        help="Pin a YYYY-MM-DD date and centre the preview on it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    output_group = parser.add_argument_group("Output options")
    output_group.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a PNG preview to this path.",
    )
    output_group.add_argument(
        "--viewport-width",
        type=int,
        default=None,
        help="Preview width in pixels (overrides TIMELINE_VIEWPORT_WIDTH).",
    )
    output_group.add_argument(
        "--scroll-left",
        type=float,
        default=0.0,
        help="Horizontal scroll offset of the preview; ignored when --focus is set.",
    )
    output_group.add_argument(
        "--print-layout",
        action="store_true",
        help="Print lanes, rectangles and columns as JSON on stdout.",
    )

    return parser


@dataclass
class RunOptions:
    items_path: Path
    settings: TimelineSettings
    focus: Optional[date]
    output: Optional[Path]
    scroll_left: float
    print_layout: bool


def resolve_options(args: argparse.Namespace) -> RunOptions:
    load_env_file(args.env_file)
    settings = TimelineSettings.from_env().with_overrides(
        granularity=args.granularity,
        viewport_width=args.viewport_width,
    )
    focus = parse_date(args.focus) if args.focus else None
    return RunOptions(
        items_path=args.items,
        settings=settings,
        focus=focus,
        output=args.output,
        scroll_left=args.scroll_left,
        print_layout=args.print_layout,
    )


def read_records(path: Path) -> List[object]:
    """Read item records from ``path``; accepts a list or ``{"items": [...]}``."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a list of items")
    return payload


def layout_summary(state: TimelineState) -> dict[str, object]:
    return {
        "granularity": state.granularity.value,
        "window": {
            "min": format_date(state.window.min_date),
            "max": format_date(state.window.max_date),
        },
        "column_width": state.column_width,
        "columns": [format_date(column) for column in state.columns],
        "lanes": state.lane_count,
        "items": [
            {
                **item.to_record(),
                "rect": {
                    "left": round(rect.left, 2),
                    "width": round(rect.width, 2),
                    "top": rect.top,
                    "height": rect.height,
                },
            }
            for item, rect in state.rects
        ],
        "focus": (
            {"date": state.focal.label, "pixel": round(state.focal.pixel_offset, 2)}
            if state.focal is not None
            else None
        ),
    }


def run(
    options: RunOptions,
    *,
    renderer_factory: Callable[[], TimelineRenderer] = TimelineRenderer,
    today: Callable[[], date] = date.today,
    stdout: TextIO | None = None,
) -> int:
    settings = options.settings
    records = read_records(options.items_path)

    controller = TimelineController(
        create_state(
            (),
            granularity=settings.granularity,
            padding_before=settings.padding_before,
            padding_after=settings.padding_after,
            metrics=settings.metrics,
            today=today,
        ),
        viewport_width=settings.viewport_width,
        today=today,
    )
    batch = controller.load_records(records)
    if batch.rejected:
        LOGGER.warning("Skipped %d of %d item(s)", len(batch.rejected), len(records))
    LOGGER.info(
        "Placed %d item(s) in %d lane(s) across %d %s column(s)",
        len(controller.state.items),
        controller.state.lane_count,
        len(controller.state.columns),
        settings.granularity.value,
    )

    scroll_left = options.scroll_left
    if options.focus is not None:
        controller.ensure_visible(options.focus, options.focus)
        controller.set_focus(options.focus)
        pixel = controller.focal_pixel
        if pixel is not None:
            scroll_left = scroll_target(pixel, settings.viewport_width)

    state = controller.state
    if options.output is not None:
        image = renderer_factory().render(
            state,
            scroll_left=scroll_left,
            viewport_width=settings.viewport_width,
        )
        options.output.parent.mkdir(parents=True, exist_ok=True)
        image.save(options.output)
        LOGGER.info("Wrote preview to %s", options.output)

    if options.print_layout:
        out = stdout or sys.stdout
        json.dump(layout_summary(state), out, indent=2)
        out.write("\n")

    return 0


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    renderer_factory: Callable[[], TimelineRenderer] = TimelineRenderer,
    today: Callable[[], date] = date.today,
    stdout: TextIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.viewport_width is not None and args.viewport_width <= 0:
        parser.error("--viewport-width must be positive")

    try:
        options = resolve_options(args)
    except (ConfigError, ValueError) as exc:
        parser.error(str(exc))

    try:
        return run(options, renderer_factory=renderer_factory, today=today, stdout=stdout)
    except (OSError, ValueError) as exc:
        LOGGER.error("Failed to lay out %s: %s", options.items_path, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
