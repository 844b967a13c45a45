from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import re
from typing import Any, Mapping

from diagram_plot.text import DEFAULT_CHAR_WIDTH_RATIO, DEFAULT_LINE_HEIGHT_RATIO

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{3}([0-9a-fA-F]{3})?([0-9a-fA-F]{2})?$")

_COLOR_TOKENS = (
    "background",
    "axis",
    "grid_major",
    "axis_label",
    "tick_label",
    "text",
    "title",
    "quadrant_label",
)
_STRING_TOKENS = ("font_family", "dash_pattern", "distance_dash_pattern")


@dataclass(frozen=True)
class DiagramTheme:
    """Read-only colors, fonts and spacing shared by every element of one render."""

    background: str = "none"
    axis: str = "#333333"
    grid_major: str = "#DDDDDD"
    axis_label: str = "#333333"
    tick_label: str = "#333333"
    text: str = "#111111"
    title: str = "#111111"
    quadrant_label: str = "#CCCCCC"

    font_family: str = "sans-serif"
    font_size_px: float = 12.0
    tick_label_font_px: float = 12.0
    axis_title_font_px: float = 14.0
    chart_title_font_px: float = 16.0
    quadrant_label_font_px: float = 18.0
    polygon_label_font_px: float = 14.0
    char_width_ratio: float = DEFAULT_CHAR_WIDTH_RATIO
    line_height_ratio: float = DEFAULT_LINE_HEIGHT_RATIO

    padding_px: float = 20.0
    tick_length_px: float = 5.0
    tick_label_padding_px: float = 5.0
    axis_title_padding_px: float = 10.0
    chart_title_top_padding_px: float = 15.0
    chart_title_bottom_padding_px: float = 10.0
    min_label_gap_px: float = 8.0
    quadrant_margin_px: float = 40.0
    quadrant_tick_half_px: float = 4.0

    axis_stroke_width: float = 1.5
    grid_stroke_width: float = 1.0
    stroke_width_base: float = 2.0
    stroke_width_thick: float = 2.5
    point_radius_px: float = 4.0
    point_label_offset_px: float = 6.0
    polygon_label_offset_px: float = 20.0
    viewbox_padding_px: float = 10.0
    dash_pattern: str = "5 3"
    distance_dash_pattern: str = "4 3"


DEFAULT_THEME = DiagramTheme()


def validate_theme(overrides: Mapping[str, Any] | None = None, *, base: DiagramTheme = DEFAULT_THEME) -> DiagramTheme:
    """Validate and merge token overrides onto ``base``."""

    raw: dict[str, Any] = asdict(base)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        value = raw[key]
        if not isinstance(value, str) or not (value == "none" or _HEX_COLOR.match(value)):
            raise ValueError(f"Token `{key}` must be a hex color (#RGB, #RRGGBB, #RRGGBBAA) or `none`")

    for key in _STRING_TOKENS:
        if not isinstance(raw[key], str) or not raw[key].strip():
            raise ValueError(f"Token `{key}` must be a non-empty string")

    numeric = [f.name for f in fields(DiagramTheme) if f.name not in _COLOR_TOKENS and f.name not in _STRING_TOKENS]
    for key in numeric:
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or float(value) <= 0:
            raise ValueError(f"Token `{key}` must be a positive number")
        raw[key] = float(value)

    return DiagramTheme(**raw)
