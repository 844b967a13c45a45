from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from diagram_plot.canvas import SvgCanvas, points_attr, svg_element
from diagram_plot.errors import UnresolvedPointError
from diagram_plot.labels import abbreviate_month
from diagram_plot.layout import CoordinateTransform
from diagram_plot.schema import (
    Distance,
    Line,
    LineEquation,
    PlotPoint,
    PointSlopeEquation,
    Polygon,
    Polyline,
    SlopeInterceptEquation,
    StandardEquation,
)
from diagram_plot.theme import DEFAULT_THEME, DiagramTheme
from diagram_plot.ticks import format_decimal_difference

LOGGER = logging.getLogger(__name__)

Segment = tuple[tuple[float, float], tuple[float, float]]


def build_point_map(points: Iterable[PlotPoint]) -> dict[str, PlotPoint]:
    """Index points by id; a repeated id keeps its last definition."""
    out: dict[str, PlotPoint] = {}
    for point in points:
        if point.id in out:
            LOGGER.debug("point id %r defined more than once; keeping the last definition", point.id)
        out[point.id] = point
    return out


def resolve_line_endpoints(
    equation: LineEquation,
    x_domain: tuple[float, float],
    y_domain: tuple[float, float],
) -> Segment:
    """Endpoints of ``equation`` across the full plane, in domain units.

    Non-vertical lines span ``x_domain``; a standard-form line with ``B == 0``
    is the vertical ``x = C / A`` spanning ``y_domain``.
    """
    x_min, x_max = x_domain
    if isinstance(equation, SlopeInterceptEquation):
        m, b = equation.slope, equation.y_intercept
        return ((x_min, m * x_min + b), (x_max, m * x_max + b))
    if isinstance(equation, PointSlopeEquation):
        m = equation.slope
        return (
            (x_min, equation.y1 + m * (x_min - equation.x1)),
            (x_max, equation.y1 + m * (x_max - equation.x1)),
        )
    if isinstance(equation, StandardEquation):
        if equation.b == 0:
            x = equation.c / equation.a
            y_min, y_max = y_domain
            return ((x, y_min), (x, y_max))
        a, b, c = equation.a, equation.b, equation.c
        return ((x_min, (c - a * x_min) / b), (x_max, (c - a * x_max) / b))
    raise TypeError(f"Unsupported line equation: {type(equation).__name__}")


def render_points(
    canvas: SvgCanvas,
    transform: CoordinateTransform,
    points: Sequence[PlotPoint],
    *,
    theme: DiagramTheme = DEFAULT_THEME,
) -> None:
    markup: list[str] = []
    for point in points:
        cx = transform.to_svg_x(point.x)
        cy = transform.to_svg_y(point.y)
        if point.style == "open":
            attrs = {"fill": "none", "stroke": point.color, "stroke-width": theme.stroke_width_base}
        else:
            attrs = {"fill": point.color, "stroke": point.color}
        markup.append(svg_element("circle", {"cx": cx, "cy": cy, "r": theme.point_radius_px, **attrs}))
    canvas.add_clipped("".join(markup))

    offset = theme.point_label_offset_px
    for point in points:
        label = abbreviate_month(point.label)
        if not label:
            continue
        canvas.draw_text(
            transform.to_svg_x(point.x) + offset,
            transform.to_svg_y(point.y) - offset,
            label,
            fill=theme.text,
            font_px=theme.font_size_px,
        )


def render_lines(
    canvas: SvgCanvas,
    transform: CoordinateTransform,
    lines: Sequence[Line],
    *,
    theme: DiagramTheme = DEFAULT_THEME,
) -> None:
    markup: list[str] = []
    for line in lines:
        (x1, y1), (x2, y2) = resolve_line_endpoints(line.equation, transform.x_domain, transform.y_domain)
        markup.append(
            svg_element(
                "line",
                {
                    "x1": transform.to_svg_x(x1),
                    "y1": transform.to_svg_y(y1),
                    "x2": transform.to_svg_x(x2),
                    "y2": transform.to_svg_y(y2),
                    "stroke": line.color,
                    "stroke-width": theme.stroke_width_thick,
                    "stroke-dasharray": theme.dash_pattern if line.style == "dashed" else None,
                },
            )
        )
    canvas.add_clipped("".join(markup))


def render_polygons(
    canvas: SvgCanvas,
    transform: CoordinateTransform,
    polygons: Sequence[Polygon],
    point_map: Mapping[str, PlotPoint],
    *,
    theme: DiagramTheme = DEFAULT_THEME,
    strict: bool = False,
) -> None:
    markup: list[str] = []
    labels: list[tuple[float, float, str, str]] = []
    for polygon in polygons:
        resolved = [_resolve_point(point_map, pid, strict, "polygon") for pid in polygon.vertices]
        pixels = [
            (transform.to_svg_x(p.x), transform.to_svg_y(p.y)) for p in resolved if p is not None
        ]
        if len(pixels) < 2:
            LOGGER.debug("skipping polygon %r: fewer than 2 resolved vertices", polygon.vertices)
            continue
        if polygon.is_closed:
            markup.append(
                svg_element(
                    "polygon",
                    {
                        "points": points_attr(pixels),
                        "fill": polygon.fill_color,
                        "stroke": polygon.stroke_color,
                        "stroke-width": theme.stroke_width_thick,
                    },
                )
            )
        else:
            markup.append(
                svg_element(
                    "polyline",
                    {
                        "points": points_attr(pixels),
                        "fill": "none",
                        "stroke": polygon.stroke_color,
                        "stroke-width": theme.stroke_width_thick,
                    },
                )
            )
        label = abbreviate_month(polygon.label)
        if label:
            centroid_x = sum(x for x, _ in pixels) / len(pixels)
            lowest_y = max(y for _, y in pixels)
            labels.append((centroid_x, lowest_y + theme.polygon_label_offset_px, label, polygon.stroke_color))
    canvas.add_clipped("".join(markup))

    for x, y, label, color in labels:
        canvas.draw_text(
            x,
            y,
            label,
            fill=color,
            font_px=theme.polygon_label_font_px,
            anchor="middle",
            font_weight="500",
        )


def render_distances(
    canvas: SvgCanvas,
    transform: CoordinateTransform,
    distances: Sequence[Distance],
    point_map: Mapping[str, PlotPoint],
    *,
    theme: DiagramTheme = DEFAULT_THEME,
    strict: bool = False,
) -> None:
    """Draw each distance as a hypotenuse with optional right-angle legs.

    The legs meet at the corner ``(x2, y1)``; leg labels show ``|x2 - x1|`` and
    ``|y2 - y1|`` computed in decimal-scaled integers.
    """
    markup: list[str] = []
    texts: list[tuple[float, float, str, str | None]] = []
    offset = theme.point_label_offset_px
    for distance in distances:
        p1 = _resolve_point(point_map, distance.point_id1, strict, "distance")
        p2 = _resolve_point(point_map, distance.point_id2, strict, "distance")
        if p1 is None or p2 is None:
            continue
        x1, y1 = transform.to_svg_x(p1.x), transform.to_svg_y(p1.y)
        x2, y2 = transform.to_svg_x(p2.x), transform.to_svg_y(p2.y)
        stroke = {
            "stroke": distance.color,
            "stroke-width": theme.stroke_width_base,
            "stroke-dasharray": theme.distance_dash_pattern if distance.style == "dashed" else None,
        }
        segments = [(x1, y1, x2, y2)]
        if distance.show_legs:
            segments += [(x1, y1, x2, y1), (x2, y1, x2, y2)]
        for ax, ay, bx, by in segments:
            markup.append(svg_element("line", {"x1": ax, "y1": ay, "x2": bx, "y2": by, **stroke}))
        if distance.show_leg_labels:
            if p1.x != p2.x:
                texts.append(((x1 + x2) / 2, y1 + offset, format_decimal_difference(p1.x, p2.x), "hanging"))
            if p1.y != p2.y:
                texts.append((x2 + offset, (y1 + y2) / 2, format_decimal_difference(p1.y, p2.y), "middle"))
        if distance.hypotenuse_label:
            texts.append(((x1 + x2) / 2 - offset, (y1 + y2) / 2 - offset, distance.hypotenuse_label, None))
    canvas.add_clipped("".join(markup))

    for x, y, text, baseline in texts:
        canvas.draw_text(
            x,
            y,
            text,
            fill=theme.text,
            font_px=theme.font_size_px,
            anchor="start" if baseline == "middle" else "middle",
            dominant_baseline=baseline,
        )


def render_polylines(
    canvas: SvgCanvas,
    transform: CoordinateTransform,
    polylines: Sequence[Polyline],
    *,
    theme: DiagramTheme = DEFAULT_THEME,
) -> None:
    markup: list[str] = []
    for polyline in polylines:
        if len(polyline.points) < 2:
            LOGGER.debug("skipping polyline %r: fewer than 2 points", polyline.id)
            continue
        markup.append(
            svg_element(
                "polyline",
                {
                    "points": points_attr(transform.map_points(polyline.points)),
                    "fill": "none",
                    "stroke": polyline.color,
                    "stroke-width": theme.stroke_width_thick,
                    "stroke-dasharray": theme.dash_pattern if polyline.style == "dashed" else None,
                },
            )
        )
    canvas.add_clipped("".join(markup))


def _resolve_point(
    point_map: Mapping[str, PlotPoint],
    point_id: str,
    strict: bool,
    context: str,
) -> PlotPoint | None:
    point = point_map.get(point_id)
    if point is not None:
        return point
    if strict:
        LOGGER.error("%s references unknown point id %r", context, point_id)
        raise UnresolvedPointError(f"{context} references unknown point id: {point_id}")
    LOGGER.debug("%s references unknown point id %r; skipping", context, point_id)
    return None
