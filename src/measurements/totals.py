"""Page-level aggregation of derived measurements.

Sums the derived measurements of every live detection on a page into one
PageTotals record, the numbers the reviewer sees in the totals panel:
- counts, areas and trim lengths per opening type
- line lengths per roofline / trim class
- net siding area (facade area minus window, door and garage openings)
- outside and inside corner lengths inferred from facade outlines
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from geometry.polygon import bounding_box, outer_ring, rect_to_polygon
from schemas.detection import Detection
from schemas.enums import MarkupType, MeasurementKind
from schemas.geometry import Point
from schemas.measurements import PageTotals
from .classes import measurement_kind, normalize_class
from .derive import DECIMALS, area_measurements, derive_measurements, has_valid_scale

logger = logging.getLogger(__name__)

# Facade outlines whose vertical centers are closer than this share a row
ROW_TOLERANCE_PX = 50
# Horizontal gap between neighbouring facades that makes an inside corner
CORNER_GAP_PX = 10


def detection_points(detection: Detection) -> List[Point]:
    """Outline of a detection, falling back to its legacy rectangle."""
    points = outer_ring(detection.polygon_points)
    if points:
        return points
    return rect_to_polygon(
        detection.pixel_x,
        detection.pixel_y,
        detection.pixel_width,
        detection.pixel_height,
    )


def _side_height(points: Sequence[Point], right: bool) -> Optional[float]:
    """Vertical extent of the two outermost vertices on one side of an outline."""
    side = sorted(points, key=lambda p: p.x, reverse=right)[:2]
    if len(side) < 2:
        return None
    return abs(side[1].y - side[0].y)


def _group_rows(walls: List[List[Point]]) -> List[List[dict]]:
    entries = []
    for points in walls:
        bbox = bounding_box(points)
        entries.append({
            "points": points,
            "min_x": bbox.min_x,
            "max_x": bbox.max_x,
            "center_y": bbox.center_y,
        })
    entries.sort(key=lambda e: e["center_y"])

    rows: List[List[dict]] = []
    current: List[dict] = []
    for entry in entries:
        if current and abs(entry["center_y"] - current[-1]["center_y"]) >= ROW_TOLERANCE_PX:
            rows.append(current)
            current = []
        current.append(entry)
    if current:
        rows.append(current)
    return rows


def corner_lengths(walls: List[List[Point]], scale_ratio: float) -> Tuple[int, float, int, float]:
    """Infer corners from facade outlines.

    Within each row of facades, the left side of the leftmost facade and
    the right side of the rightmost one are outside corners. Neighbouring
    facades separated by a gap contribute two inside corners, one on each
    side of the gap.

    Returns:
        (outside_count, outside_lf, inside_count, inside_lf)
    """
    outside_count, outside_px = 0, 0.0
    inside_count, inside_px = 0, 0.0

    for row in _group_rows(walls):
        leftmost = min(row, key=lambda e: e["min_x"])
        rightmost = max(row, key=lambda e: e["max_x"])

        for entry, right in ((leftmost, False), (rightmost, True)):
            height = _side_height(entry["points"], right=right)
            if height is not None:
                outside_count += 1
                outside_px += height

        ordered = sorted(row, key=lambda e: e["min_x"])
        for left_wall, right_wall in zip(ordered, ordered[1:]):
            if right_wall["min_x"] <= left_wall["max_x"] + CORNER_GAP_PX:
                continue
            for entry, right in ((left_wall, True), (right_wall, False)):
                height = _side_height(entry["points"], right=right)
                if height is not None:
                    inside_count += 1
                    inside_px += height

    return (
        outside_count,
        round(outside_px / scale_ratio, DECIMALS),
        inside_count,
        round(inside_px / scale_ratio, DECIMALS),
    )


def _bump(mapping: dict, key: str, amount) -> None:
    mapping[key] = mapping.get(key, 0) + amount


def compute_page_totals(detections: Iterable[Detection], scale_ratio: Optional[float]) -> Optional[PageTotals]:
    """Aggregate the non-deleted detections of one page.

    Args:
        detections: Detections on the page (deleted ones are ignored)
        scale_ratio: Pixels per foot for the page

    Returns:
        PageTotals, or None when the page has no usable scale ratio
    """
    if not has_valid_scale(scale_ratio):
        return None

    totals = PageTotals()
    walls: List[List[Point]] = []

    for detection in detections:
        if detection.is_deleted:
            continue

        cls = normalize_class(detection.class_name)

        # Point markers are counted, never measured
        if detection.markup_type == MarkupType.POINT:
            _bump(totals.counts_by_class, cls or "count", 1)
            totals.total_point_count += 1
            continue

        kind = measurement_kind(cls)
        points = detection_points(detection)
        derived = derive_measurements(cls, points, scale_ratio)
        if derived is None:
            continue

        if kind == MeasurementKind.BUILDING:
            totals.building_count += 1
            totals.building_area_sf += derived.area_sf
            totals.building_perimeter_lf += derived.perimeter_lf
            totals.building_level_starter_lf += derived.level_starter_lf
            walls.append(points)
        elif kind == MeasurementKind.WINDOW:
            area = area_measurements(points, scale_ratio)
            totals.window_count += 1
            totals.window_area_sf += area.area_sf
            totals.window_perimeter_lf += area.perimeter_lf
            totals.window_head_lf += derived.head_lf
            totals.window_jamb_lf += derived.jamb_lf
            totals.window_sill_lf += derived.sill_lf
            totals.openings_area_sf += area.area_sf
        elif kind == MeasurementKind.DOOR:
            area = area_measurements(points, scale_ratio)
            totals.door_count += 1
            totals.door_area_sf += area.area_sf
            totals.door_perimeter_lf += area.perimeter_lf
            totals.door_head_lf += derived.head_lf
            totals.door_jamb_lf += derived.jamb_lf
            totals.openings_area_sf += area.area_sf
        elif kind == MeasurementKind.GARAGE:
            area = area_measurements(points, scale_ratio)
            totals.garage_count += 1
            totals.garage_area_sf += area.area_sf
            totals.garage_perimeter_lf += area.perimeter_lf
            totals.garage_head_lf += derived.head_lf
            totals.garage_jamb_lf += derived.jamb_lf
            totals.openings_area_sf += area.area_sf
        elif kind == MeasurementKind.GABLE:
            totals.gable_count += 1
            totals.gable_area_sf += derived.area_sf
            totals.gable_rake_lf += derived.rake_lf
        elif kind == MeasurementKind.AREA:
            _bump(totals.area_count_by_class, cls, 1)
            _bump(totals.area_sf_by_class, cls, derived.area_sf)
        elif kind == MeasurementKind.LINE:
            _bump(totals.line_count_by_class, cls, 1)
            _bump(totals.line_lf_by_class, cls, derived.length_lf)

    totals.siding_net_sf = max(0.0, totals.building_area_sf - totals.openings_area_sf)

    if walls:
        (
            totals.outside_corner_count,
            totals.outside_corner_lf,
            totals.inside_corner_count,
            totals.inside_corner_lf,
        ) = corner_lengths(walls, scale_ratio)

    return _rounded(totals)


def _rounded(totals: PageTotals) -> PageTotals:
    data = totals.model_dump()
    for key, value in data.items():
        if isinstance(value, float):
            data[key] = round(value, DECIMALS)
        elif isinstance(value, dict):
            data[key] = {k: round(v, DECIMALS) if isinstance(v, float) else v for k, v in value.items()}
    return PageTotals.model_validate(data)


def sum_page_totals(pages: Iterable[PageTotals]) -> PageTotals:
    """Add several pages together (pages without totals should be filtered out first)."""
    combined = PageTotals().model_dump()
    for page in pages:
        for key, value in page.model_dump().items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    _bump(combined[key], sub_key, sub_value)
            else:
                combined[key] += value
    logger.debug(f"Summed totals: {combined['building_count']} facades, {combined['window_count']} windows")
    return _rounded(PageTotals.model_validate(combined))
