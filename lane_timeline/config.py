"""Environment-driven settings for the timeline tools."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Mapping, Optional

from .layout.coordinates import DEFAULT_METRICS, LayoutMetrics
from .layout.granularity import Granularity
from .state import DEFAULT_PADDING_DAYS

__all__ = ["ConfigError", "TimelineSettings", "load_env_file"]

ENV_PREFIX = "TIMELINE_"


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load ``KEY=VALUE`` pairs from ``env_file`` into the environment.

    When ``env_file`` is :data:`None`, a ``.env`` file in the current working
    directory is used if present. Variables already set are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for number, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if "=" not in line:
            raise ConfigError(
                f"Invalid line {number} in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigError(f"Environment variable key is missing in line {number}: {raw_line!r}")
        yield key, raw_value.strip().strip('"').strip("'")


@dataclass(frozen=True)
class TimelineSettings:
    """Layout settings that callers usually want to tweak without code changes."""

    granularity: Granularity = Granularity.DAY
    padding_before: int = DEFAULT_PADDING_DAYS
    padding_after: int = DEFAULT_PADDING_DAYS
    viewport_width: int = 1200
    lane_height: int = DEFAULT_METRICS.lane_height
    item_height: int = DEFAULT_METRICS.item_height

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TimelineSettings":
        env = os.environ if environ is None else environ
        defaults = cls()

        raw_granularity = env.get(f"{ENV_PREFIX}GRANULARITY")
        try:
            granularity = (
                Granularity.parse(raw_granularity) if raw_granularity else defaults.granularity
            )
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        settings = cls(
            granularity=granularity,
            padding_before=_read_int(env, "PADDING_BEFORE", defaults.padding_before, minimum=0),
            padding_after=_read_int(env, "PADDING_AFTER", defaults.padding_after, minimum=0),
            viewport_width=_read_int(env, "VIEWPORT_WIDTH", defaults.viewport_width, minimum=1),
            lane_height=_read_int(env, "LANE_HEIGHT", defaults.lane_height, minimum=1),
            item_height=_read_int(env, "ITEM_HEIGHT", defaults.item_height, minimum=1),
        )
        if settings.item_height > settings.lane_height:
            raise ConfigError(
                f"{ENV_PREFIX}ITEM_HEIGHT ({settings.item_height}) must not exceed "
                f"{ENV_PREFIX}LANE_HEIGHT ({settings.lane_height})"
            )
        return settings

    def with_overrides(self, **overrides: object) -> "TimelineSettings":
        """Return a copy with every non-``None`` override applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        if "granularity" in values:
            values["granularity"] = Granularity.parse(values["granularity"])  # type: ignore[arg-type]
        return replace(self, **values)  # type: ignore[arg-type]

    @property
    def metrics(self) -> LayoutMetrics:
        return replace(DEFAULT_METRICS, lane_height=self.lane_height, item_height=self.item_height)


def _read_int(env: Mapping[str, str], name: str, default: int, *, minimum: int) -> int:
    key = f"{ENV_PREFIX}{name}"
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigError(f"{key} must be at least {minimum}, got {value}")
    return value
