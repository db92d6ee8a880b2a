#!/usr/bin/env python3
"""Render sample timeline previews at every granularity using built-in items."""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from lane_timeline import TimelineController, create_state, load_items
from lane_timeline.focus import scroll_target
from lane_timeline.layout import Granularity
from lane_timeline.rendering import TimelineRenderer


PREVIEWS_DIR = PROJECT_ROOT / "previews"

SAMPLE_RECORDS = [
    {"id": 1, "name": "First item", "start": "2021-01-14", "end": "2021-01-25"},
    {"id": 2, "name": "Second item", "start": "2021-01-18", "end": "2021-01-31"},
    {"id": 3, "name": "Another item", "start": "2021-02-02", "end": "2021-02-05"},
    {"id": 4, "name": "Another item", "start": "2021-01-03", "end": "2021-01-05"},
    {"id": 5, "name": "Last item", "start": "2021-02-01", "end": "2021-02-02"},
    {"id": 6, "name": "Conference", "start": "2021-01-20", "end": "2021-02-10"},
    {"id": 7, "name": "Planning", "start": "2021-03-01", "end": "2021-03-14"},
    {"id": 8, "name": "Release", "start": "2021-03-15", "end": "2021-03-15"},
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=PREVIEWS_DIR,
        help="Directory for the generated PNG files (defaults to previews/).",
    )
    parser.add_argument(
        "--focus",
        type=date.fromisoformat,
        default=date(2021, 1, 20),
        help="Focal date every preview is centred on.",
    )
    parser.add_argument("--viewport-width", type=int, default=1200)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    args.output_dir.mkdir(parents=True, exist_ok=True)

    controller = TimelineController(create_state(load_items(SAMPLE_RECORDS).items))
    controller.set_focus(args.focus)
    renderer = TimelineRenderer()

    for granularity in Granularity:
        state = controller.change_granularity(granularity, args.focus)
        scroll_left = scroll_target(state.geometry.focal_pixel(args.focus), args.viewport_width)
        image = renderer.render(state, scroll_left=scroll_left, viewport_width=args.viewport_width)
        output_path = args.output_dir / f"timeline_{granularity.value}.png"
        image.save(output_path)
        print(f"Wrote preview to {output_path}")


if __name__ == "__main__":
    main()
