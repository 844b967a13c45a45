from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping

from diagram_plot.canvas import DEFAULT_CLIP_ID, SvgCanvas
from diagram_plot.geometry import (
    build_point_map,
    render_distances,
    render_lines,
    render_points,
    render_polygons,
    render_polylines,
)
from diagram_plot.layout import LAYOUTS, CoordinatePlaneLayout, FramedPlaneLayout, QuadrantPlaneLayout, layout_for
from diagram_plot.schema import (
    AxisSpec,
    Distance,
    Line,
    PlotPoint,
    Polygon,
    Polyline,
    axis_from_dict,
    distance_from_dict,
    line_from_dict,
    point_from_dict,
    polygon_from_dict,
    polyline_from_dict,
)
from diagram_plot.theme import DEFAULT_THEME, DiagramTheme

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoordinatePlaneDiagram:
    """A complete coordinate-plane diagram: plane geometry plus everything drawn on it."""

    width: float
    height: float
    x_axis: AxisSpec
    y_axis: AxisSpec
    mode: str = "quadrant"
    title: str | None = None
    show_quadrant_labels: bool = False
    points: tuple[PlotPoint, ...] = ()
    lines: tuple[Line, ...] = ()
    polygons: tuple[Polygon, ...] = ()
    distances: tuple[Distance, ...] = ()
    polylines: tuple[Polyline, ...] = ()

    def __post_init__(self) -> None:
        if self.mode not in LAYOUTS:
            raise ValueError(f"Unsupported coordinate plane mode: {self.mode}")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CoordinatePlaneDiagram":
        try:
            return cls(
                width=float(raw["width"]),
                height=float(raw["height"]),
                x_axis=axis_from_dict(_mapping(raw, "xAxis")),
                y_axis=axis_from_dict(_mapping(raw, "yAxis")),
                mode=str(raw.get("mode", "quadrant")),
                title=_optional_text(raw.get("title")),
                show_quadrant_labels=bool(raw.get("showQuadrantLabels", False)),
                points=tuple(point_from_dict(p) for p in raw.get("points") or ()),
                lines=tuple(line_from_dict(item) for item in raw.get("lines") or ()),
                polygons=tuple(polygon_from_dict(item) for item in raw.get("polygons") or ()),
                distances=tuple(distance_from_dict(item) for item in raw.get("distances") or ()),
                polylines=tuple(polyline_from_dict(item) for item in raw.get("polylines") or ()),
            )
        except KeyError as exc:
            raise ValueError(f"missing required key: {exc.args[0]}") from exc

    def plane_layout(self, theme: DiagramTheme = DEFAULT_THEME) -> CoordinatePlaneLayout:
        if self.mode == QuadrantPlaneLayout.mode:
            return layout_for(
                self.mode,
                width=self.width,
                height=self.height,
                x_axis=self.x_axis,
                y_axis=self.y_axis,
                show_quadrant_labels=self.show_quadrant_labels,
                theme=theme,
            )
        return layout_for(
            FramedPlaneLayout.mode,
            width=self.width,
            height=self.height,
            x_axis=self.x_axis,
            y_axis=self.y_axis,
            title=self.title,
            theme=theme,
        )


def render_coordinate_plane(
    spec: CoordinatePlaneDiagram | Mapping[str, Any],
    *,
    theme: DiagramTheme = DEFAULT_THEME,
    strict: bool = False,
    clip_id: str = DEFAULT_CLIP_ID,
) -> str:
    """Render a diagram to a complete ``<svg>`` document.

    Output depends only on ``spec``, ``theme`` and ``clip_id``; rendering the
    same input twice yields byte-identical markup. With ``strict`` a polygon
    or distance naming an unknown point id raises ``UnresolvedPointError``
    instead of being skipped.
    """
    diagram = spec if isinstance(spec, CoordinatePlaneDiagram) else CoordinatePlaneDiagram.from_dict(spec)
    canvas = SvgCanvas(diagram.width, diagram.height, theme=theme, clip_id=clip_id)
    plane = diagram.plane_layout(theme).layout(canvas)
    LOGGER.debug(
        "laid out %s plane: chart area %r, %d points, %d lines, %d polygons, %d distances, %d polylines",
        diagram.mode,
        plane.chart_area,
        len(diagram.points),
        len(diagram.lines),
        len(diagram.polygons),
        len(diagram.distances),
        len(diagram.polylines),
    )

    point_map = build_point_map(diagram.points)
    transform = plane.transform
    render_polygons(canvas, transform, diagram.polygons, point_map, theme=theme, strict=strict)
    render_lines(canvas, transform, diagram.lines, theme=theme)
    render_polylines(canvas, transform, diagram.polylines, theme=theme)
    render_distances(canvas, transform, diagram.distances, point_map, theme=theme, strict=strict)
    render_points(canvas, transform, diagram.points, theme=theme)
    return canvas.to_svg()


def _mapping(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw[key]
    if not isinstance(value, Mapping):
        raise TypeError(f"`{key}` must be a mapping")
    return value


def _optional_text(raw: object) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text if text else None
