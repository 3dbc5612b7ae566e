from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import math
import re
from typing import Any, Mapping

from barchart.axis import DEFAULT_TARGET_GRID_COUNT
from barchart.errors import ChartDataError


RGBA = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
_COLOR_FIELDS = (
    "bar_color",
    "axis_line_color",
    "grid_line_color",
    "data_label_text_color",
    "grid_value_text_color",
    "background_color",
)


@dataclass(frozen=True)
class BarChartAttributes:
    """Appearance and axis options for a bar chart. Sizes are in pixels."""

    y_min: float | None = None
    y_max: float | None = None
    target_grid_count: float = DEFAULT_TARGET_GRID_COUNT
    bar_interval: float = 64.0
    bar_width: float = 48.0
    bar_color: RGBA = (63, 81, 181, 255)
    axis_line_color: RGBA = (0, 0, 0, 96)
    grid_line_color: RGBA = (0, 0, 0, 32)
    data_label_text_color: RGBA = (0, 0, 0, 221)
    data_label_text_size: float = 12.0
    grid_value_text_color: RGBA = (0, 0, 0, 221)
    grid_value_text_size: float = 12.0
    grid_value_format: str | None = None
    data_value_format: str | None = None
    background_color: RGBA = (255, 255, 255, 255)
    padding: float = 8.0
    font_family: str = "DejaVu Sans Mono"

    def __post_init__(self) -> None:
        if self.y_min is not None and not math.isfinite(self.y_min):
            raise ValueError("y_min must be finite")
        if self.y_max is not None and not math.isfinite(self.y_max):
            raise ValueError("y_max must be finite")
        if not self.target_grid_count > 1:
            raise ValueError("target_grid_count must be > 1")
        if self.bar_interval <= 0:
            raise ValueError("bar_interval must be > 0")
        if self.bar_width <= 0 or self.bar_width > self.bar_interval:
            raise ValueError("bar_width must be in (0, bar_interval]")
        if self.data_label_text_size <= 0 or self.grid_value_text_size <= 0:
            raise ValueError("text sizes must be > 0")
        if self.padding < 0:
            raise ValueError("padding must be >= 0")
        for name in _COLOR_FIELDS:
            color = getattr(self, name)
            if len(color) != 4 or any(int(c) != c or c < 0 or c > 255 for c in color):
                raise ValueError(f"{name} must be an RGBA tuple of ints in [0, 255]")


DEFAULT_ATTRIBUTES = BarChartAttributes()


def parse_color(value: Any, *, name: str = "color") -> RGBA:
    """Accept ``#RRGGBB``, ``#RRGGBBAA`` or a 3/4 item sequence of channel ints."""

    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise ChartDataError(f"`{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        raw = value[1:]
        channels = [int(raw[i : i + 2], 16) for i in range(0, len(raw), 2)]
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    try:
        channels = [int(c) for c in value]
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"`{name}` must be a hex string or RGBA sequence") from exc
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4 or any(c < 0 or c > 255 for c in channels):
        raise ChartDataError(f"`{name}` must have 3 or 4 channels in [0, 255]")
    return (channels[0], channels[1], channels[2], channels[3])


def chart_attributes_from_mapping(overrides: Mapping[str, Any] | None = None) -> BarChartAttributes:
    """Merge user overrides (e.g. parsed JSON) onto the default attributes."""

    raw: dict[str, Any] = asdict(DEFAULT_ATTRIBUTES)
    if overrides:
        known = {f.name for f in fields(BarChartAttributes)}
        for key, value in overrides.items():
            if key not in known:
                raise ChartDataError(f"unknown chart attribute: {key}")
            raw[key] = value

    for name in _COLOR_FIELDS:
        raw[name] = parse_color(raw[name], name=name)
    for name in ("y_min", "y_max"):
        if raw[name] is not None:
            raw[name] = _number(raw[name], name=name)
    for name in ("target_grid_count", "bar_interval", "bar_width", "data_label_text_size", "grid_value_text_size", "padding"):
        raw[name] = _number(raw[name], name=name)
    for name in ("grid_value_format", "data_value_format"):
        if raw[name] is not None and not isinstance(raw[name], str):
            raise ChartDataError(f"`{name}` must be a format string")
    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise ChartDataError("`font_family` must be a non-empty string")

    try:
        return BarChartAttributes(**raw)
    except ValueError as exc:
        raise ChartDataError(str(exc)) from exc


def _number(value: Any, *, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChartDataError(f"`{name}` must be a number")
    return float(value)
