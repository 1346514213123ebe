"""Class-specific derived measurements for detections.

Turns a pixel polygon + class + scale ratio into the lengths an estimator
orders material by:
- windows: head, sill and jamb trim
- doors / garage doors: head and jamb (no sill)
- gables: rake boards and base
- buildings: area, perimeter and level-starter (base course)
- roofline / trim lines: open polyline length
- siding, soffit, roof: area and perimeter

Results are rounded to 2 decimals on the way out; intermediate math keeps
full precision. Malformed polygons never raise: 4-point and 3-point rules
fall back to bounding-box approximations, and polygons with too few points
for any rule produce no measurement (None).
"""
import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from geometry.polygon import (
    bounding_box,
    outer_ring,
    polygon_area,
    polygon_perimeter,
    polyline_length,
)
from schemas.enums import MeasurementKind
from schemas.geometry import Point
from schemas.measurements import (
    AreaMeasurements,
    BuildingMeasurements,
    DerivedMeasurements,
    DoorMeasurements,
    GableMeasurements,
    LineMeasurements,
    WindowMeasurements,
)
from .classes import measurement_kind

logger = logging.getLogger(__name__)

DECIMALS = 2


def _ft(pixels: float, scale_ratio: float) -> float:
    return round(pixels / scale_ratio, DECIMALS)


def _sqft(pixels_sq: float, scale_ratio: float) -> float:
    return round(pixels_sq / (scale_ratio * scale_ratio), DECIMALS)


def _distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def _opening_edges(points: Sequence[Point]) -> Tuple[float, float, float]:
    """Return (head, sill, jamb) in pixels for a 4-point opening.

    The two highest vertices (smallest y) form the head, the two lowest
    form the sill; each pair is ordered left to right so the jambs pair
    top-left with bottom-left and top-right with bottom-right.
    """
    by_y = sorted(points, key=lambda p: p.y)
    top_left, top_right = sorted(by_y[:2], key=lambda p: p.x)
    bottom_left, bottom_right = sorted(by_y[2:], key=lambda p: p.x)

    head = _distance(top_left, top_right)
    sill = _distance(bottom_left, bottom_right)
    jamb = _distance(top_left, bottom_left) + _distance(top_right, bottom_right)
    return head, sill, jamb


def _opening_edges_fallback(points: Sequence[Point]) -> Tuple[float, float, float]:
    """Bounding-box approximation for openings that are not quadrilaterals."""
    bbox = bounding_box(points)
    return bbox.width, bbox.width, 2 * bbox.height


def window_measurements(points: Sequence[Point], scale_ratio: float) -> WindowMeasurements:
    if len(points) == 4:
        head, sill, jamb = _opening_edges(points)
    else:
        head, sill, jamb = _opening_edges_fallback(points)

    return WindowMeasurements(
        head_lf=_ft(head, scale_ratio),
        sill_lf=_ft(sill, scale_ratio),
        jamb_lf=_ft(jamb, scale_ratio),
        perimeter_lf=_ft(head + sill + jamb, scale_ratio),
    )


def door_measurements(points: Sequence[Point], scale_ratio: float) -> DoorMeasurements:
    """Doors and garage doors share the window rule without the sill."""
    if len(points) == 4:
        head, _, jamb = _opening_edges(points)
    else:
        head, _, jamb = _opening_edges_fallback(points)

    return DoorMeasurements(
        head_lf=_ft(head, scale_ratio),
        jamb_lf=_ft(jamb, scale_ratio),
        perimeter_lf=_ft(head + jamb, scale_ratio),
    )


def gable_measurements(points: Sequence[Point], scale_ratio: float) -> GableMeasurements:
    if len(points) == 3:
        by_y = sorted(points, key=lambda p: p.y)
        peak, base_a, base_b = by_y[0], by_y[1], by_y[2]
        rake = _distance(peak, base_a) + _distance(peak, base_b)
        base = _distance(base_a, base_b)
    else:
        # Treat the outline as an isosceles triangle filling its bounding box
        bbox = bounding_box(points)
        base = bbox.width
        rake = 2 * math.hypot(bbox.width / 2, bbox.height)

    return GableMeasurements(
        rake_lf=_ft(rake, scale_ratio),
        base_lf=_ft(base, scale_ratio),
        area_sf=_sqft(polygon_area(points), scale_ratio),
    )


def level_starter_length(points: Sequence[Point]) -> float:
    """Pixel length of the lowest mostly-horizontal edge, 0 if there is none."""
    best_length = 0.0
    best_y = -math.inf
    n = len(points)
    for i in range(n):
        p1, p2 = points[i], points[(i + 1) % n]
        if abs(p2.x - p1.x) <= abs(p2.y - p1.y):
            continue
        avg_y = (p1.y + p2.y) / 2
        if avg_y > best_y:
            best_y = avg_y
            best_length = _distance(p1, p2)
    return best_length


def building_measurements(points: Sequence[Point], scale_ratio: float) -> BuildingMeasurements:
    return BuildingMeasurements(
        area_sf=_sqft(polygon_area(points), scale_ratio),
        perimeter_lf=_ft(polygon_perimeter(points), scale_ratio),
        level_starter_lf=_ft(level_starter_length(points), scale_ratio),
    )


def line_measurements(points: Sequence[Point], scale_ratio: float) -> LineMeasurements:
    return LineMeasurements(
        length_lf=_ft(polyline_length(points), scale_ratio),
        segment_count=max(len(points) - 1, 0),
    )


def area_measurements(points: Sequence[Point], scale_ratio: float) -> AreaMeasurements:
    return AreaMeasurements(
        area_sf=_sqft(polygon_area(points), scale_ratio),
        perimeter_lf=_ft(polygon_perimeter(points), scale_ratio),
    )


_RULES: Dict[MeasurementKind, Callable[[Sequence[Point], float], DerivedMeasurements]] = {
    MeasurementKind.WINDOW: window_measurements,
    MeasurementKind.DOOR: door_measurements,
    MeasurementKind.GARAGE: door_measurements,
    MeasurementKind.GABLE: gable_measurements,
    MeasurementKind.BUILDING: building_measurements,
    MeasurementKind.LINE: line_measurements,
    MeasurementKind.AREA: area_measurements,
}

# Open lines need two points, every closed shape needs a triangle
MIN_POINTS = {kind: 3 for kind in _RULES}
MIN_POINTS[MeasurementKind.LINE] = 2


def has_valid_scale(scale_ratio: Optional[float]) -> bool:
    return scale_ratio is not None and scale_ratio > 0


def derive_measurements(
    class_name: Optional[str],
    polygon,
    scale_ratio: Optional[float],
) -> Optional[DerivedMeasurements]:
    """Compute the derived measurements for one detection outline.

    Args:
        class_name: Raw detection class (aliases are normalized)
        polygon: Points, {x, y} dicts, [x, y] pairs or an outer+holes polygon
        scale_ratio: Pixels per foot for the page

    Returns:
        The class-specific measurement model, or None when the class has
        no derived geometry, the page is uncalibrated, or the outline has
        too few points for the rule.
    """
    kind = measurement_kind(class_name)
    if kind is None:
        return None

    if not has_valid_scale(scale_ratio):
        logger.debug(f"No measurement for {class_name}: scale ratio {scale_ratio!r} is not usable")
        return None

    points: List[Point] = outer_ring(polygon)
    if len(points) < MIN_POINTS[kind]:
        logger.debug(f"No measurement for {class_name}: {len(points)} points, need {MIN_POINTS[kind]}")
        return None

    return _RULES[kind](points, scale_ratio)
