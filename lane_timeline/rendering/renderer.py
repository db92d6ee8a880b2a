"""Pillow preview renderer for a laid-out timeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..layout.coordinates import PositionRect
from ..state import TimelineState

ELLIPSIS = "…"


def _font_length(font: ImageFont.ImageFont, text: str) -> float:
    return font.getlength(text)


def _load_font(path_candidates: Sequence[Path], size: int) -> ImageFont.ImageFont:
    for candidate in path_candidates:
        if candidate and candidate.exists():
            return ImageFont.truetype(str(candidate), size=size)
    return ImageFont.load_default()


def _default_font_candidates(bold: bool) -> List[Path]:
    names = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "Arial Bold.ttf" if bold else "Arial.ttf",
    ]
    search_dirs = [
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts"),
        Path("/Library/Fonts"),
        Path.home() / ".fonts",
    ]
    return [directory / name for name in names for directory in search_dirs]


def _fit_text(text: str, font: ImageFont.ImageFont, max_width: float) -> str:
    """Return ``text`` shortened with an ellipsis so it fits ``max_width``."""

    if max_width <= 0:
        return ""
    if _font_length(font, text) <= max_width:
        return text
    current = text
    while current and _font_length(font, current + ELLIPSIS) > max_width:
        current = current[:-1].rstrip()
    return current + ELLIPSIS if current else ""


@dataclass
class RendererConfig:
    """Colours, fonts and output options for :class:`TimelineRenderer`."""

    font_regular_path: Path | None = None
    font_bold_path: Path | None = None
    preview_output_dir: Path | None = None
    background_color: int = 255
    grid_color: int = 210
    month_rule_color: int = 120
    weekend_color: int = 240
    lane_rule_color: int = 232
    item_fill_color: int = 200
    item_outline_color: int = 60
    text_color: int = 17
    secondary_text_color: int = 90
    focus_color: int = 0
    header_font_size: int = 12
    item_font_size: int = 13
    item_corner_radius: int = 6
    item_padding_x: int = 6
    bottom_padding: int = 10

    def __post_init__(self) -> None:
        if self.preview_output_dir is not None:
            self.preview_output_dir = Path(self.preview_output_dir)
            self.preview_output_dir.mkdir(parents=True, exist_ok=True)

    def _font_candidates(self, bold: bool) -> List[Path]:
        provided = self.font_bold_path if bold else self.font_regular_path
        candidates: List[Path] = []
        if provided is not None:
            candidates.append(Path(provided))
        candidates.extend(_default_font_candidates(bold))
        return candidates

    def font(self, size: int, *, bold: bool = False) -> ImageFont.ImageFont:
        return _load_font(self._font_candidates(bold), size)


class TimelineRenderer:
    """Draw the header, grid, lanes, item cards and focal marker of a state."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()

    def render(
        self,
        state: TimelineState,
        *,
        scroll_left: float = 0.0,
        viewport_width: Optional[int] = None,
        preview_name: str | None = None,
    ) -> Image.Image:
        """Render the part of ``state`` visible from ``scroll_left``.

        Args:
            state: Timeline to draw.
            scroll_left: Horizontal scroll offset in timeline pixels.
            viewport_width: Width of the output image. Defaults to the full
                timeline width.
            preview_name: Optional file name (without extension) for saving
                a copy when ``preview_output_dir`` is configured.
        """

        cfg = self.config
        geometry = state.geometry
        metrics = geometry.metrics
        width = viewport_width or max(1, int(math.ceil(geometry.total_width)))
        height = metrics.header_height + geometry.total_height(state.lane_count) + cfg.bottom_padding

        image = Image.new("L", (width, height), color=cfg.background_color)
        draw = ImageDraw.Draw(image)

        if not geometry.is_empty:
            self._draw_columns(draw, state, scroll_left, width, height)
            self._draw_lane_rules(draw, state, width)
            self._draw_items(draw, state, scroll_left, width)
            self._draw_focus(draw, state, scroll_left, height)

        if cfg.preview_output_dir is not None and preview_name is not None:
            image.save(cfg.preview_output_dir / f"{preview_name}.png")

        return image

    # ------------------------------------------------------------------
    # Drawing helpers
    # ------------------------------------------------------------------
    def _draw_columns(
        self,
        draw: ImageDraw.ImageDraw,
        state: TimelineState,
        scroll_left: float,
        width: int,
        height: int,
    ) -> None:
        cfg = self.config
        geometry = state.geometry
        header_height = geometry.metrics.header_height
        label_font = cfg.font(cfg.header_font_size)
        column_width = geometry.column_width

        for index, info in enumerate(state.column_info):
            x0 = geometry.column_left(index) - scroll_left
            x1 = x0 + column_width
            if x1 < 0 or x0 > width:
                continue
            if info.is_weekend:
                draw.rectangle((x0, header_height, x1, height), fill=cfg.weekend_color)
            rule_color = cfg.month_rule_color if info.is_month_start else cfg.grid_color
            draw.line((x0, 0, x0, height), fill=rule_color, width=1)
            label = _fit_text(info.label, label_font, column_width - 8)
            label_top = header_height / 2 - cfg.header_font_size / 2
            draw.text((x0 + 4, label_top), label, font=label_font, fill=cfg.secondary_text_color)

        draw.line((0, header_height, width, header_height), fill=cfg.month_rule_color, width=1)

    def _draw_lane_rules(self, draw: ImageDraw.ImageDraw, state: TimelineState, width: int) -> None:
        cfg = self.config
        metrics = state.metrics
        for lane in range(1, state.lane_count):
            y = metrics.header_height + lane * metrics.lane_height
            draw.line((0, y, width, y), fill=cfg.lane_rule_color, width=1)

    def _draw_items(
        self,
        draw: ImageDraw.ImageDraw,
        state: TimelineState,
        scroll_left: float,
        width: int,
    ) -> None:
        cfg = self.config
        geometry = state.geometry
        font = cfg.font(cfg.item_font_size, bold=True)
        header_height = geometry.metrics.header_height

        for item in state.items:
            rect = geometry.position(item)
            box = self._to_canvas(rect, scroll_left, header_height)
            if box[2] < 0 or box[0] > width:
                continue
            draw.rounded_rectangle(
                box,
                radius=cfg.item_corner_radius,
                fill=cfg.item_fill_color,
                outline=cfg.item_outline_color,
                width=1,
            )
            text_left = max(box[0], 0) + cfg.item_padding_x
            label = _fit_text(item.name, font, box[2] - text_left - cfg.item_padding_x)
            if label:
                text_top = box[1] + (rect.height - cfg.item_font_size) / 2
                draw.text((text_left, text_top), label, font=font, fill=cfg.text_color)

    def _draw_focus(
        self,
        draw: ImageDraw.ImageDraw,
        state: TimelineState,
        scroll_left: float,
        height: int,
    ) -> None:
        focal = state.focal
        if focal is None:
            return
        cfg = self.config
        x = focal.pixel_offset - scroll_left
        draw.line((x, 0, x, height), fill=cfg.focus_color, width=2)
        radius = 4
        draw.ellipse((x - radius, 2, x + radius, 2 + radius * 2), fill=cfg.focus_color)

    @staticmethod
    def _to_canvas(rect: PositionRect, scroll_left: float, header_height: int) -> tuple[float, float, float, float]:
        return (
            rect.left - scroll_left,
            rect.top + header_height,
            rect.right - scroll_left,
            rect.bottom + header_height,
        )


def render_preview(
    state: TimelineState,
    output_path: Path,
    *,
    config: RendererConfig | None = None,
    scroll_left: float = 0.0,
    viewport_width: Optional[int] = None,
) -> Path:
    """Render ``state`` and write it as a PNG to ``output_path``."""

    image = TimelineRenderer(config).render(state, scroll_left=scroll_left, viewport_width=viewport_width)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path)
    return output_path


__all__ = ["RendererConfig", "TimelineRenderer", "render_preview"]
