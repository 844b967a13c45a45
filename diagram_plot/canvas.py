from __future__ import annotations

from typing import Mapping
from xml.sax.saxutils import escape

import numpy as np

from diagram_plot.text import text_size, wrap_text
from diagram_plot.theme import DEFAULT_THEME, DiagramTheme

SVG_NS = "http://www.w3.org/2000/svg"
DEFAULT_CLIP_ID = "chart-area"

_ATTR_ENTITIES = {'"': "&quot;"}


def format_number(value: float) -> str:
    """Shortest round-trip positional text: ``5``, ``0.1``, never ``5.0``, ``-0`` or ``1e-07``."""
    v = float(value)
    if v == 0.0:
        return "0"
    return np.format_float_positional(v, trim="-")


def escape_text(text: str) -> str:
    return escape(text)


def svg_element(tag: str, attrs: Mapping[str, object], content: str | None = None) -> str:
    """Serialize one element; ``None`` attributes are omitted, ``content`` is inserted as markup."""
    parts = [tag]
    for key, value in attrs.items():
        if value is None:
            continue
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, (int, float, np.integer, np.floating)):
            text = format_number(value)
        else:
            text = escape(str(value), _ATTR_ENTITIES)
        parts.append(f'{key}="{text}"')
    head = " ".join(parts)
    if content is None:
        return f"<{head}/>"
    return f"<{head}>{content}</{tag}>"


def points_attr(points: list[tuple[float, float]]) -> str:
    return " ".join(f"{format_number(x)},{format_number(y)}" for x, y in points)


def clipped_group(clip_id: str, markup: str) -> str:
    if not markup:
        return ""
    return svg_element("g", {"clip-path": f"url(#{clip_id})"}, markup)


class SvgCanvas:
    """Accumulates SVG body markup and ``<defs>`` for one diagram.

    The canvas knows pixels only; axes and domain math live in the layouts.
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        theme: DiagramTheme = DEFAULT_THEME,
        clip_id: str = DEFAULT_CLIP_ID,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("canvas width and height must be > 0")
        if not clip_id:
            raise ValueError("clip_id must be non-empty")
        self.width = width
        self.height = height
        self.theme = theme
        self._clip_id = clip_id
        self._defs: list[str] = []
        self._body: list[str] = []
        self._min_x = 0.0
        self._max_x = float(width)

    @property
    def clip_id(self) -> str:
        return self._clip_id

    def add_def(self, markup: str) -> None:
        if markup:
            self._defs.append(markup)

    def add_raw(self, markup: str) -> None:
        if markup:
            self._body.append(markup)

    def add_clipped(self, markup: str) -> None:
        self.add_raw(clipped_group(self._clip_id, markup))

    def set_clip_rect(self, left: float, top: float, width: float, height: float) -> None:
        rect = svg_element("rect", {"x": left, "y": top, "width": width, "height": height})
        self.add_def(svg_element("clipPath", {"id": self._clip_id}, rect))

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        stroke: str,
        stroke_width: float = 1.0,
        dash: str | None = None,
    ) -> None:
        self._body.append(
            svg_element(
                "line",
                {
                    "x1": x1,
                    "y1": y1,
                    "x2": x2,
                    "y2": y2,
                    "stroke": stroke,
                    "stroke-width": stroke_width,
                    "stroke-dasharray": dash,
                },
            )
        )

    def include_point_x(self, x: float) -> None:
        self._min_x = min(self._min_x, x)
        self._max_x = max(self._max_x, x)

    def include_text(self, x: float, text: str, anchor: str | None, font_px: float, rotate_deg: float | None = None) -> None:
        """Widen the tracked horizontal extent by the estimated box of one text run."""
        if not text:
            return
        t = self.theme
        quarter = int(rotate_deg) if rotate_deg and rotate_deg % 90 == 0 else 0
        w, _ = text_size(
            text,
            font_px=font_px,
            char_width_ratio=t.char_width_ratio,
            line_height_ratio=t.line_height_ratio,
            rotate_deg=quarter,
        )
        if rotate_deg and not quarter:
            self.include_point_x(x - w)
            self.include_point_x(x + w)
        elif quarter:
            # quarter-turned runs stack their lines rightward from x
            self.include_point_x(x)
            self.include_point_x(x + w)
        elif anchor == "middle":
            self.include_point_x(x - w / 2)
            self.include_point_x(x + w / 2)
        elif anchor == "end":
            self.include_point_x(x - w)
            self.include_point_x(x)
        else:
            self.include_point_x(x)
            self.include_point_x(x + w)

    def dynamic_width(self) -> tuple[float, float]:
        """``(vb_min_x, width)`` of a viewBox wide enough for every tracked extent.

        Content inside ``[0, width]`` keeps the nominal box; overflow on either
        side is covered plus ``viewbox_padding_px``.
        """
        pad = self.theme.viewbox_padding_px
        vb_min_x = self._min_x - pad if self._min_x < 0 else 0.0
        right = self._max_x + pad if self._max_x > self.width else float(self.width)
        return (vb_min_x, right - vb_min_x)

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        fill: str | None = None,
        font_px: float | None = None,
        anchor: str | None = None,
        dominant_baseline: str | None = None,
        rotate_deg: float | None = None,
        font_weight: str | None = None,
    ) -> None:
        if not text:
            return
        self.include_text(x, text, anchor, font_px if font_px is not None else self.theme.font_size_px, rotate_deg)
        self._body.append(
            svg_element(
                "text",
                self._text_attrs(x, y, fill, font_px, anchor, dominant_baseline, rotate_deg, font_weight),
                escape_text(text),
            )
        )

    def draw_wrapped_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        max_width_px: float,
        font_px: float,
        fill: str | None = None,
        anchor: str = "middle",
        dominant_baseline: str | None = None,
        rotate_deg: float | None = None,
        font_weight: str | None = None,
    ) -> int:
        """Draw word-wrapped text as one ``<text>`` with a ``<tspan>`` per line; returns the line count."""
        lines = wrap_text(text, max_width_px, font_px, self.theme.char_width_ratio)
        if not lines:
            return 0
        line_h = font_px * self.theme.line_height_ratio
        if rotate_deg:
            self.include_point_x(x)
            self.include_point_x(x + len(lines) * line_h)
        else:
            for line in lines:
                self.include_text(x, line, anchor, font_px)
        spans = []
        for i, line in enumerate(lines):
            spans.append(svg_element("tspan", {"x": x, "dy": 0 if i == 0 else line_h}, escape_text(line)))
        self._body.append(
            svg_element(
                "text",
                self._text_attrs(x, y, fill, font_px, anchor, dominant_baseline, rotate_deg, font_weight),
                "".join(spans),
            )
        )
        return len(lines)

    def body(self) -> str:
        return "".join(self._body)

    def to_svg(self) -> str:
        vb_min_x, vb_width = self.dynamic_width()
        head = svg_element(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": vb_width,
                "height": self.height,
                "viewBox": f"{format_number(vb_min_x)} 0 {format_number(vb_width)} {format_number(self.height)}",
                "font-family": self.theme.font_family,
                "font-size": f"{format_number(self.theme.font_size_px)}px",
            },
            "",
        )[: -len("</svg>")]
        parts = [head]
        if self._defs:
            parts.append(f"<defs>{''.join(self._defs)}</defs>")
        if self.theme.background != "none":
            parts.append(
                svg_element("rect", {"x": vb_min_x, "y": 0, "width": vb_width, "height": self.height, "fill": self.theme.background})
            )
        parts.extend(self._body)
        parts.append("</svg>")
        return "".join(parts)

    def _text_attrs(
        self,
        x: float,
        y: float,
        fill: str | None,
        font_px: float | None,
        anchor: str | None,
        dominant_baseline: str | None,
        rotate_deg: float | None,
        font_weight: str | None,
    ) -> dict[str, object]:
        transform = None
        if rotate_deg:
            transform = f"rotate({format_number(rotate_deg)}, {format_number(x)}, {format_number(y)})"
        return {
            "x": x,
            "y": y,
            "fill": fill,
            "font-size": f"{format_number(font_px)}px" if font_px is not None else None,
            "font-weight": font_weight,
            "text-anchor": anchor,
            "dominant-baseline": dominant_baseline,
            "transform": transform,
        }
