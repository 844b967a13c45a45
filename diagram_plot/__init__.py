from diagram_plot.api import CoordinatePlaneDiagram, render_coordinate_plane
from diagram_plot.canvas import SvgCanvas, format_number
from diagram_plot.errors import (
    DiagramError,
    InvalidCategoriesError,
    InvalidDimensionsError,
    InvalidIntervalError,
    InvalidRangeError,
    PrecisionOverflowError,
    UnresolvedPointError,
)
from diagram_plot.geometry import (
    build_point_map,
    render_distances,
    render_lines,
    render_points,
    render_polygons,
    render_polylines,
    resolve_line_endpoints,
)
from diagram_plot.labels import abbreviate_month, compute_equally_spaced_indices, compute_label_selection
from diagram_plot.layout import (
    ChartArea,
    CoordinatePlaneLayout,
    CoordinateTransform,
    FramedPlaneLayout,
    PlaneLayout,
    QuadrantPlaneLayout,
    layout_for,
)
from diagram_plot.schema import (
    AxisSpec,
    Distance,
    Line,
    PlotPoint,
    PointSlopeEquation,
    Polygon,
    Polyline,
    SlopeInterceptEquation,
    StandardEquation,
)
from diagram_plot.theme import DEFAULT_THEME, DiagramTheme, validate_theme
from diagram_plot.ticks import TickSet, build_ticks, compute_decimal_scale, format_tick_int

__all__ = [
    "AxisSpec",
    "ChartArea",
    "CoordinatePlaneDiagram",
    "CoordinatePlaneLayout",
    "CoordinateTransform",
    "DEFAULT_THEME",
    "DiagramError",
    "DiagramTheme",
    "Distance",
    "FramedPlaneLayout",
    "InvalidCategoriesError",
    "InvalidDimensionsError",
    "InvalidIntervalError",
    "InvalidRangeError",
    "Line",
    "PlaneLayout",
    "PlotPoint",
    "PointSlopeEquation",
    "Polygon",
    "Polyline",
    "PrecisionOverflowError",
    "QuadrantPlaneLayout",
    "SlopeInterceptEquation",
    "StandardEquation",
    "SvgCanvas",
    "TickSet",
    "UnresolvedPointError",
    "abbreviate_month",
    "build_point_map",
    "build_ticks",
    "compute_decimal_scale",
    "compute_equally_spaced_indices",
    "compute_label_selection",
    "format_number",
    "format_tick_int",
    "layout_for",
    "render_coordinate_plane",
    "render_distances",
    "render_lines",
    "render_points",
    "render_polygons",
    "render_polylines",
    "resolve_line_endpoints",
    "validate_theme",
]
