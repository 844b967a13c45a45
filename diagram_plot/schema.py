from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, ClassVar, Iterable, Literal, Mapping, Union

from diagram_plot.errors import InvalidCategoriesError

LOGGER = logging.getLogger(__name__)

ScaleKind = Literal["numeric", "categoryBand", "categoryPoint"]
SCALE_KINDS: tuple[str, ...] = ("numeric", "categoryBand", "categoryPoint")
POINT_STYLES: tuple[str, ...] = ("open", "closed")
STROKE_STYLES: tuple[str, ...] = ("solid", "dashed")


@dataclass(frozen=True)
class AxisSpec:
    """One axis of a coordinate plane.

    Numeric axes carry ``min``/``max``/``tick_interval``; categorical axes carry
    ``categories``. Ordering (``min < max``, ``tick_interval > 0``) is checked
    by the layout that consumes the axis, since the two layouts report it
    differently.
    """

    label: str = ""
    scale: ScaleKind = "numeric"
    min: float | None = None
    max: float | None = None
    tick_interval: float | None = None
    categories: tuple[str, ...] = ()
    show_grid_lines: bool = True
    show_tick_labels: bool = True
    show_ticks: bool = True
    value_formatter: Callable[[float], str] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.scale not in SCALE_KINDS:
            raise ValueError(f"Unsupported axis scale: {self.scale}")
        if self.scale == "numeric":
            if self.min is None or self.max is None or self.tick_interval is None:
                raise ValueError("numeric AxisSpec requires min, max and tick_interval")
        elif not self.categories:
            LOGGER.error("categorical axis %r has no categories", self.label)
            raise InvalidCategoriesError(f"{self.scale} axis requires non-empty categories")

    @property
    def is_categorical(self) -> bool:
        return self.scale != "numeric"


@dataclass(frozen=True)
class SlopeInterceptEquation:
    kind: ClassVar[str] = "slopeIntercept"
    slope: float
    y_intercept: float


@dataclass(frozen=True)
class StandardEquation:
    """``A*x + B*y = C``."""

    kind: ClassVar[str] = "standard"
    a: float
    b: float
    c: float

    def __post_init__(self) -> None:
        if self.a == 0 and self.b == 0:
            raise ValueError("StandardEquation requires A or B to be non-zero")


@dataclass(frozen=True)
class PointSlopeEquation:
    kind: ClassVar[str] = "pointSlope"
    x1: float
    y1: float
    slope: float


LineEquation = Union[SlopeInterceptEquation, StandardEquation, PointSlopeEquation]


@dataclass(frozen=True)
class PlotPoint:
    id: str
    x: float
    y: float
    color: str
    style: str = "closed"
    label: str | None = None

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise ValueError("PlotPoint.id must be non-empty")
        if self.style not in POINT_STYLES:
            raise ValueError(f"Unsupported point style: {self.style}")


@dataclass(frozen=True)
class Line:
    id: str
    equation: LineEquation
    color: str
    style: str = "solid"

    def __post_init__(self) -> None:
        if self.style not in STROKE_STYLES:
            raise ValueError(f"Unsupported line style: {self.style}")


@dataclass(frozen=True)
class Polygon:
    vertices: tuple[str, ...]
    is_closed: bool
    fill_color: str
    stroke_color: str
    label: str | None = None

    def __post_init__(self) -> None:
        if len(self.vertices) < 2:
            raise ValueError("Polygon requires at least 2 vertices")


@dataclass(frozen=True)
class Distance:
    point_id1: str
    point_id2: str
    color: str
    show_legs: bool = False
    show_leg_labels: bool = False
    hypotenuse_label: str | None = None
    style: str = "solid"

    def __post_init__(self) -> None:
        if self.style not in STROKE_STYLES:
            raise ValueError(f"Unsupported distance style: {self.style}")


@dataclass(frozen=True)
class Polyline:
    id: str
    points: tuple[tuple[float, float], ...]
    color: str
    style: str = "solid"

    def __post_init__(self) -> None:
        if self.style not in STROKE_STYLES:
            raise ValueError(f"Unsupported polyline style: {self.style}")


def axis_from_dict(raw: Mapping[str, Any]) -> AxisSpec:
    scale = str(raw.get("xScaleType") or raw.get("scaleType") or "numeric")
    domain = raw.get("domain")
    if isinstance(domain, Mapping):
        vmin, vmax = domain.get("min"), domain.get("max")
    else:
        vmin, vmax = raw.get("min"), raw.get("max")
    return AxisSpec(
        label=str(raw.get("label") or ""),
        scale=scale,  # type: ignore[arg-type]
        min=_coerce_optional_float(vmin),
        max=_coerce_optional_float(vmax),
        tick_interval=_coerce_optional_float(raw.get("tickInterval")),
        categories=_coerce_string_tuple(raw.get("categories")),
        show_grid_lines=bool(raw.get("showGridLines", True)),
        show_tick_labels=bool(raw.get("showTickLabels", True)),
        show_ticks=bool(raw.get("showTicks", True)),
    )


def equation_from_dict(raw: Mapping[str, Any]) -> LineEquation:
    kind = raw.get("type")
    if kind == SlopeInterceptEquation.kind:
        return SlopeInterceptEquation(slope=float(raw["slope"]), y_intercept=float(raw["yIntercept"]))
    if kind == StandardEquation.kind:
        return StandardEquation(a=float(raw["A"]), b=float(raw["B"]), c=float(raw["C"]))
    if kind == PointSlopeEquation.kind:
        return PointSlopeEquation(x1=float(raw["x1"]), y1=float(raw["y1"]), slope=float(raw["slope"]))
    raise ValueError(f"Unsupported line equation type: {kind}")


def point_from_dict(raw: Mapping[str, Any]) -> PlotPoint:
    return PlotPoint(
        id=str(raw["id"]),
        x=float(raw["x"]),
        y=float(raw["y"]),
        color=str(raw["color"]),
        style=str(raw.get("style", "closed")),
        label=_coerce_optional_str(raw.get("label")),
    )


def line_from_dict(raw: Mapping[str, Any]) -> Line:
    equation = raw["equation"]
    if not isinstance(equation, Mapping):
        raise TypeError("`equation` must be a mapping")
    return Line(
        id=str(raw["id"]),
        equation=equation_from_dict(equation),
        color=str(raw["color"]),
        style=str(raw.get("style", "solid")),
    )


def polygon_from_dict(raw: Mapping[str, Any]) -> Polygon:
    return Polygon(
        vertices=_coerce_string_tuple(raw["vertices"]),
        is_closed=bool(raw.get("isClosed", True)),
        fill_color=str(raw.get("fillColor", "none")),
        stroke_color=str(raw["strokeColor"]),
        label=_coerce_optional_str(raw.get("label")),
    )


def distance_from_dict(raw: Mapping[str, Any]) -> Distance:
    return Distance(
        point_id1=str(raw["pointId1"]),
        point_id2=str(raw["pointId2"]),
        color=str(raw["color"]),
        show_legs=bool(raw.get("showLegs", False)),
        show_leg_labels=bool(raw.get("showLegLabels", False)),
        hypotenuse_label=_coerce_optional_str(raw.get("hypotenuseLabel")),
        style=str(raw.get("style", "solid")),
    )


def polyline_from_dict(raw: Mapping[str, Any]) -> Polyline:
    raw_points = raw["points"]
    if not isinstance(raw_points, list):
        raise TypeError("`points` must be a list")
    points = []
    for item in raw_points:
        if not isinstance(item, Mapping):
            raise TypeError("Each polyline point must be a mapping")
        points.append((float(item["x"]), float(item["y"])))
    return Polyline(
        id=str(raw.get("id", "")),
        points=tuple(points),
        color=str(raw["color"]),
        style=str(raw.get("style", "solid")),
    )


def _coerce_optional_float(raw: object) -> float | None:
    if raw is None:
        return None
    return float(raw)  # type: ignore[arg-type]


def _coerce_optional_str(raw: object) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text if text else None


def _coerce_string_tuple(raw: object) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, Iterable):
        return tuple(str(item) for item in raw)
    raise TypeError("expected a string or a list of strings")
