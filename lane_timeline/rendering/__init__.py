"""Raster previews of a laid-out timeline."""

from .renderer import RendererConfig, TimelineRenderer, render_preview

__all__ = [
    "RendererConfig",
    "TimelineRenderer",
    "render_preview",
]
