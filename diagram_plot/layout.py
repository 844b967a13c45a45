from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import ClassVar, Iterable, Protocol, Sequence

import numpy as np

from diagram_plot.canvas import DEFAULT_CLIP_ID, SvgCanvas
from diagram_plot.errors import InvalidDimensionsError, InvalidIntervalError, InvalidRangeError
from diagram_plot.labels import abbreviate_month, select_tick_labels
from diagram_plot.schema import AxisSpec, ScaleKind
from diagram_plot.text import estimate_text_width, estimate_wrapped_text_dimensions
from diagram_plot.theme import DEFAULT_THEME, DiagramTheme
from diagram_plot.ticks import TickSet, build_ticks

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartArea:
    top: float
    left: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            LOGGER.error("non-positive chart area: width=%r height=%r", self.width, self.height)
            raise InvalidDimensionsError(f"chart area must be positive, got width={self.width!r} height={self.height!r}")

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class CoordinateTransform:
    """Domain -> pixel mapping shared by every renderer of one diagram.

    For categorical x scales ``to_svg_x`` takes a category index.
    """

    chart_area: ChartArea
    x_domain: tuple[float, float]
    y_domain: tuple[float, float]
    x_scale: ScaleKind = "numeric"
    category_count: int = 0
    clip_id: str = DEFAULT_CLIP_ID

    def to_svg_x(self, value: float) -> float:
        area = self.chart_area
        if self.x_scale == "categoryBand":
            return area.left + (value + 0.5) * (area.width / self.category_count)
        if self.x_scale == "categoryPoint":
            if self.category_count <= 1:
                return area.left + area.width / 2
            return area.left + value * (area.width / (self.category_count - 1))
        lo, hi = self.x_domain
        return area.left + (value - lo) / (hi - lo) * area.width

    def to_svg_y(self, value: float) -> float:
        area = self.chart_area
        lo, hi = self.y_domain
        return area.top + area.height - (value - lo) / (hi - lo) * area.height

    def map_points(self, points: Sequence[tuple[float, float]]) -> list[tuple[float, float]]:
        if not points:
            return []
        xy = np.asarray(points, dtype=np.float64)
        if self.x_scale == "numeric":
            lo, hi = self.x_domain
            px = self.chart_area.left + (xy[:, 0] - lo) / (hi - lo) * self.chart_area.width
        else:
            px = np.asarray([self.to_svg_x(float(v)) for v in xy[:, 0]], dtype=np.float64)
        ylo, yhi = self.y_domain
        py = self.chart_area.top + self.chart_area.height - (xy[:, 1] - ylo) / (yhi - ylo) * self.chart_area.height
        return list(zip(px.tolist(), py.tolist()))


@dataclass(frozen=True)
class PlaneLayout:
    transform: CoordinateTransform
    chart_area: ChartArea
    band_width: float | None = None
    x_ticks: TickSet | None = None
    y_ticks: TickSet | None = None

    def to_svg_x(self, value: float) -> float:
        return self.transform.to_svg_x(value)

    def to_svg_y(self, value: float) -> float:
        return self.transform.to_svg_y(value)


class CoordinatePlaneLayout(Protocol):
    mode: ClassVar[str]

    def layout(self, canvas: SvgCanvas) -> PlaneLayout:
        ...


@dataclass(frozen=True)
class QuadrantPlaneLayout:
    """Signed-coordinate plane: fixed padding, axes drawn through the origin."""

    mode: ClassVar[str] = "quadrant"
    width: float
    height: float
    x_axis: AxisSpec
    y_axis: AxisSpec
    show_quadrant_labels: bool = False
    theme: DiagramTheme = DEFAULT_THEME

    def layout(self, canvas: SvgCanvas) -> PlaneLayout:
        t = self.theme
        x_axis, y_axis = self.x_axis, self.y_axis
        if x_axis.is_categorical or y_axis.is_categorical:
            raise ValueError("quadrant layout requires numeric axes")
        assert x_axis.min is not None and x_axis.max is not None and x_axis.tick_interval is not None
        assert y_axis.min is not None and y_axis.max is not None and y_axis.tick_interval is not None
        if self.width <= 0 or self.height <= 0 or x_axis.min >= x_axis.max or y_axis.min >= y_axis.max:
            LOGGER.error(
                "invalid chart dimensions or axis range: width=%r height=%r x=[%r, %r] y=[%r, %r]",
                self.width,
                self.height,
                x_axis.min,
                x_axis.max,
                y_axis.min,
                y_axis.max,
            )
            raise InvalidDimensionsError(
                f"width: {self.width}, height: {self.height}, "
                f"x range: {x_axis.min}-{x_axis.max}, y range: {y_axis.min}-{y_axis.max}"
            )

        margin = t.quadrant_margin_px
        area = ChartArea(
            top=t.padding_px,
            left=margin,
            width=self.width - margin - t.padding_px,
            height=self.height - t.padding_px - margin,
        )
        transform = CoordinateTransform(
            chart_area=area,
            x_domain=(x_axis.min, x_axis.max),
            y_domain=(y_axis.min, y_axis.max),
            clip_id=canvas.clip_id,
        )
        canvas.set_clip_rect(area.left, area.top, area.width, area.height)

        x_ticks = build_ticks(x_axis.min, x_axis.max, x_axis.tick_interval)
        y_ticks = build_ticks(y_axis.min, y_axis.max, y_axis.tick_interval)
        x_labels = x_ticks.labels(x_axis.value_formatter)
        y_labels = y_ticks.labels(y_axis.value_formatter)
        x_zero = _zero_indices(x_ticks)
        y_zero = _zero_indices(y_ticks)
        x_selected = select_tick_labels(
            x_labels,
            extent_px=area.width,
            font_px=t.tick_label_font_px,
            char_width_ratio=t.char_width_ratio,
            min_gap_px=t.min_label_gap_px,
            excluded=x_zero,
        )
        y_selected = select_tick_labels(
            y_labels,
            extent_px=area.height,
            font_px=t.tick_label_font_px,
            char_width_ratio=t.char_width_ratio,
            min_gap_px=t.min_label_gap_px,
            excluded=y_zero,
            horizontal=False,
        )

        zero_x = transform.to_svg_x(_clamp(0.0, x_axis.min, x_axis.max))
        zero_y = transform.to_svg_y(_clamp(0.0, y_axis.min, y_axis.max))

        if x_axis.show_grid_lines:
            for i in sorted(x_selected):
                x = transform.to_svg_x(x_ticks.values[i])
                canvas.draw_line(x, area.top, x, area.bottom, stroke=t.grid_major, stroke_width=t.grid_stroke_width)
        if y_axis.show_grid_lines:
            for i in sorted(y_selected):
                y = transform.to_svg_y(y_ticks.values[i])
                canvas.draw_line(area.left, y, area.right, y, stroke=t.grid_major, stroke_width=t.grid_stroke_width)

        canvas.draw_line(area.left, zero_y, area.right, zero_y, stroke=t.axis, stroke_width=t.axis_stroke_width)
        canvas.draw_line(zero_x, area.top, zero_x, area.bottom, stroke=t.axis, stroke_width=t.axis_stroke_width)

        half = t.quadrant_tick_half_px
        for i, value in enumerate(x_ticks.values):
            if i in x_zero:
                continue
            x = transform.to_svg_x(value)
            if x_axis.show_ticks:
                canvas.draw_line(x, zero_y - half, x, zero_y + half, stroke=t.axis, stroke_width=t.grid_stroke_width)
            if x_axis.show_tick_labels and i in x_selected:
                canvas.draw_text(
                    x,
                    zero_y + half + t.tick_label_padding_px,
                    x_labels[i],
                    fill=t.tick_label,
                    font_px=t.tick_label_font_px,
                    anchor="middle",
                    dominant_baseline="hanging",
                )
        for i, value in enumerate(y_ticks.values):
            if i in y_zero:
                continue
            y = transform.to_svg_y(value)
            if y_axis.show_ticks:
                canvas.draw_line(zero_x - half, y, zero_x + half, y, stroke=t.axis, stroke_width=t.grid_stroke_width)
            if y_axis.show_tick_labels and i in y_selected:
                canvas.draw_text(
                    zero_x - half - t.tick_label_padding_px,
                    y,
                    y_labels[i],
                    fill=t.tick_label,
                    font_px=t.tick_label_font_px,
                    anchor="end",
                    dominant_baseline="middle",
                )

        canvas.draw_text(
            area.left + area.width / 2,
            self.height - t.tick_label_padding_px,
            abbreviate_month(x_axis.label),
            fill=t.axis_label,
            font_px=t.axis_title_font_px,
            anchor="middle",
        )
        y_title_x = t.axis_title_font_px
        y_title_y = area.top + area.height / 2
        canvas.draw_text(
            y_title_x,
            y_title_y,
            abbreviate_month(y_axis.label),
            fill=t.axis_label,
            font_px=t.axis_title_font_px,
            anchor="middle",
            rotate_deg=-90,
        )

        if self.show_quadrant_labels:
            mid_right = (zero_x + area.right) / 2
            mid_left = (area.left + zero_x) / 2
            mid_top = (area.top + zero_y) / 2
            mid_bottom = (zero_y + area.bottom) / 2
            for numeral, qx, qy in (
                ("I", mid_right, mid_top),
                ("II", mid_left, mid_top),
                ("III", mid_left, mid_bottom),
                ("IV", mid_right, mid_bottom),
            ):
                canvas.draw_text(
                    qx,
                    qy,
                    numeral,
                    fill=t.quadrant_label,
                    font_px=t.quadrant_label_font_px,
                    anchor="middle",
                    dominant_baseline="middle",
                )

        return PlaneLayout(transform=transform, chart_area=area, x_ticks=x_ticks, y_ticks=y_ticks)


@dataclass(frozen=True)
class _Margins:
    top: float
    bottom: float
    left: float
    right: float
    chart_width: float
    chart_height: float
    text_width: float


@dataclass(frozen=True)
class FramedPlaneLayout:
    """Chart-style plane: axes on the left/bottom edges, margins sized from estimated text."""

    mode: ClassVar[str] = "framed"
    width: float
    height: float
    x_axis: AxisSpec
    y_axis: AxisSpec
    title: str | None = None
    theme: DiagramTheme = DEFAULT_THEME

    def layout(self, canvas: SvgCanvas) -> PlaneLayout:
        t = self.theme
        x_axis, y_axis = self.x_axis, self.y_axis
        if y_axis.is_categorical:
            raise ValueError("framed layout requires a numeric y-axis")
        _validate_numeric_axis(y_axis, "y")
        if not x_axis.is_categorical:
            _validate_numeric_axis(x_axis, "x")

        y_ticks = build_ticks(y_axis.min, y_axis.max, y_axis.tick_interval)  # type: ignore[arg-type]
        y_labels = y_ticks.labels(y_axis.value_formatter)
        x_ticks: TickSet | None = None
        if x_axis.is_categorical:
            x_labels = [abbreviate_month(c) for c in x_axis.categories]
        else:
            x_ticks = build_ticks(x_axis.min, x_axis.max, x_axis.tick_interval)  # type: ignore[arg-type]
            x_labels = x_ticks.labels(x_axis.value_formatter)

        x_title = abbreviate_month(x_axis.label)
        y_title = abbreviate_month(y_axis.label)
        tick_len = t.tick_length_px
        x_tick_len = tick_len if x_axis.show_ticks else 0.0
        y_tick_len = tick_len if y_axis.show_ticks else 0.0

        # Wrapped-title heights depend on the width they get, so estimate
        # against a provisional width first, then against the resulting chart width.
        provisional = self._margins(self.width - 2 * t.padding_px, x_labels, y_labels, x_title, y_title)
        text_width = provisional.chart_width if provisional.chart_width > 0 else self.width - 2 * t.padding_px
        final = self._margins(text_width, x_labels, y_labels, x_title, y_title)
        area = ChartArea(top=final.top, left=final.left, width=final.chart_width, height=final.chart_height)

        band_width: float | None = None
        if x_axis.scale == "categoryBand":
            count = len(x_axis.categories)
            band_width = area.width / count
            x_domain = (-0.5, count - 0.5)
        elif x_axis.scale == "categoryPoint":
            count = len(x_axis.categories)
            band_width = area.width / (count - 1) if count > 1 else area.width
            x_domain = (0.0, float(max(count - 1, 0)))
        else:
            count = 0
            x_domain = (x_axis.min, x_axis.max)  # type: ignore[assignment]
        transform = CoordinateTransform(
            chart_area=area,
            x_domain=x_domain,
            y_domain=(y_axis.min, y_axis.max),  # type: ignore[arg-type]
            x_scale=x_axis.scale,
            category_count=count,
            clip_id=canvas.clip_id,
        )

        if self.title:
            canvas.draw_wrapped_text(
                area.left + area.width / 2,
                t.chart_title_top_padding_px,
                self.title,
                max_width_px=final.text_width,
                font_px=t.chart_title_font_px,
                fill=t.title,
                anchor="middle",
                dominant_baseline="hanging",
                font_weight="bold",
            )

        x_selected = select_tick_labels(
            x_labels,
            extent_px=area.width,
            font_px=t.tick_label_font_px,
            char_width_ratio=t.char_width_ratio,
            min_gap_px=t.min_label_gap_px,
        )
        y_selected = select_tick_labels(
            y_labels,
            extent_px=area.height,
            font_px=t.tick_label_font_px,
            char_width_ratio=t.char_width_ratio,
            min_gap_px=t.min_label_gap_px,
            horizontal=False,
        )
        x_positions = (
            [transform.to_svg_x(float(i)) for i in range(count)]
            if x_ticks is None
            else [transform.to_svg_x(v) for v in x_ticks.values]
        )
        y_positions = [transform.to_svg_y(v) for v in y_ticks.values]

        if y_axis.show_grid_lines:
            for i in sorted(y_selected):
                if y_ticks.values[i] == y_axis.min:
                    continue
                y = y_positions[i]
                canvas.draw_line(area.left, y, area.right, y, stroke=t.grid_major, stroke_width=t.grid_stroke_width)
        if x_axis.show_grid_lines:
            for i in sorted(x_selected):
                if x_ticks is not None and x_ticks.values[i] == x_axis.min:
                    continue
                x = x_positions[i]
                canvas.draw_line(x, area.top, x, area.bottom, stroke=t.grid_major, stroke_width=t.grid_stroke_width)

        canvas.draw_line(area.left, area.top, area.left, area.bottom, stroke=t.axis, stroke_width=t.axis_stroke_width)
        canvas.draw_line(area.left, area.bottom, area.right, area.bottom, stroke=t.axis, stroke_width=t.axis_stroke_width)

        for i, y in enumerate(y_positions):
            if y_tick_len > 0:
                canvas.draw_line(area.left - y_tick_len, y, area.left, y, stroke=t.axis, stroke_width=t.axis_stroke_width)
            if y_axis.show_tick_labels and i in y_selected:
                canvas.draw_text(
                    area.left - y_tick_len - t.tick_label_padding_px,
                    y,
                    y_labels[i],
                    fill=t.tick_label,
                    font_px=t.tick_label_font_px,
                    anchor="end",
                    dominant_baseline="middle",
                )
        for i, x in enumerate(x_positions):
            if x_tick_len > 0:
                canvas.draw_line(x, area.bottom, x, area.bottom + x_tick_len, stroke=t.axis, stroke_width=t.axis_stroke_width)
            if x_axis.show_tick_labels and i in x_selected:
                canvas.draw_text(
                    x,
                    area.bottom + x_tick_len + t.tick_label_padding_px,
                    x_labels[i],
                    fill=t.tick_label,
                    font_px=t.tick_label_font_px,
                    anchor="middle",
                    dominant_baseline="hanging",
                )

        if x_title:
            tick_row = t.tick_label_padding_px + t.tick_label_font_px * t.line_height_ratio if x_axis.show_tick_labels else 0.0
            canvas.draw_wrapped_text(
                area.left + area.width / 2,
                area.bottom + x_tick_len + tick_row + t.axis_title_padding_px,
                x_title,
                max_width_px=final.text_width,
                font_px=t.axis_title_font_px,
                fill=t.axis_label,
                anchor="middle",
                dominant_baseline="hanging",
            )
        if y_title:
            # rotate(-90) turns successive wrapped lines rightward, toward the axis,
            # so the block starts at the outer left padding.
            canvas.draw_wrapped_text(
                t.tick_label_padding_px,
                area.top + area.height / 2,
                y_title,
                max_width_px=area.height,
                font_px=t.axis_title_font_px,
                fill=t.axis_label,
                anchor="middle",
                dominant_baseline="hanging",
                rotate_deg=-90,
            )

        canvas.set_clip_rect(area.left, area.top, area.width, area.height)
        return PlaneLayout(transform=transform, chart_area=area, band_width=band_width, x_ticks=x_ticks, y_ticks=y_ticks)

    def _margins(
        self,
        text_width: float,
        x_labels: Sequence[str],
        y_labels: Sequence[str],
        x_title: str,
        y_title: str,
    ) -> _Margins:
        t = self.theme
        outer = t.tick_label_padding_px
        x_tick_len = t.tick_length_px if self.x_axis.show_ticks else 0.0
        y_tick_len = t.tick_length_px if self.y_axis.show_ticks else 0.0

        top = t.padding_px
        if self.title:
            title_h = self._wrapped_height(self.title, text_width, t.chart_title_font_px)
            top = max(top, t.chart_title_top_padding_px + title_h + t.chart_title_bottom_padding_px)

        bottom = x_tick_len + outer
        if self.x_axis.show_tick_labels:
            bottom += t.tick_label_padding_px + t.tick_label_font_px * t.line_height_ratio
        if x_title:
            bottom += t.axis_title_padding_px + self._wrapped_height(x_title, text_width, t.axis_title_font_px)
        chart_height = self.height - top - bottom

        y_title_block = 0.0
        if y_title:
            y_title_block = self._wrapped_height(y_title, max(chart_height, 0.0), t.axis_title_font_px)
        widest_y = _widest(y_labels, t) if self.y_axis.show_tick_labels else 0.0
        left = outer + y_tick_len + widest_y
        if self.y_axis.show_tick_labels:
            left += t.tick_label_padding_px
        if y_title:
            left += y_title_block + t.axis_title_padding_px

        last_x = estimate_text_width(x_labels[-1], t.tick_label_font_px, t.char_width_ratio) if x_labels else 0.0
        right = t.padding_px
        if self.x_axis.show_tick_labels:
            right = max(right, last_x / 2 + outer)
        return _Margins(
            top=top,
            bottom=bottom,
            left=left,
            right=right,
            chart_width=self.width - left - right,
            chart_height=chart_height,
            text_width=text_width,
        )

    def _wrapped_height(self, text: str, max_width_px: float, font_px: float) -> float:
        t = self.theme
        _, h = estimate_wrapped_text_dimensions(text, max_width_px, font_px, t.char_width_ratio, t.line_height_ratio)
        return h


LAYOUTS: dict[str, type] = {
    QuadrantPlaneLayout.mode: QuadrantPlaneLayout,
    FramedPlaneLayout.mode: FramedPlaneLayout,
}


def layout_for(mode: str, **kwargs: object) -> CoordinatePlaneLayout:
    """Build the layout strategy named by ``mode`` (``"quadrant"`` or ``"framed"``)."""
    try:
        cls = LAYOUTS[mode]
    except KeyError:
        raise ValueError(f"Unsupported coordinate plane mode: {mode}") from None
    return cls(**kwargs)


def _validate_numeric_axis(axis: AxisSpec, name: str) -> None:
    assert axis.min is not None and axis.max is not None and axis.tick_interval is not None
    if axis.min >= axis.max:
        LOGGER.error("invalid %s-axis domain: min=%r max=%r", name, axis.min, axis.max)
        raise InvalidRangeError(f"{name}-axis min {axis.min} must be less than max {axis.max}")
    if axis.tick_interval <= 0:
        LOGGER.error("invalid %s-axis tick interval: %r", name, axis.tick_interval)
        raise InvalidIntervalError(f"{name}-axis tick interval must be positive, got {axis.tick_interval}")


def _zero_indices(ticks: TickSet) -> set[int]:
    return {i for i, v in enumerate(ticks.ints) if v == 0}


def _widest(labels: Iterable[str], theme: DiagramTheme) -> float:
    return max((estimate_text_width(s, theme.tick_label_font_px, theme.char_width_ratio) for s in labels), default=0.0)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
