"""Polygon math for detection outlines.

All routines are pure and operate on the outer ring of a polygon. Holes are
ignored: a detection split into an outer boundary plus holes is measured as
if the holes were filled in.

Coordinates are page pixels. Conversions to feet take an explicit
scale ratio (pixels per foot): lengths divide by it, areas by its square.
"""
import math
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from schemas.geometry import (
    BoundingBox,
    EdgeHit,
    Point,
    PolygonMeasurements,
    PolygonWithHoles,
)

# Below this |signed area| the centroid formula is numerically unusable
DEGENERATE_AREA_EPSILON = 1e-4

PointLike = Union[Point, dict, Sequence[float]]


def _to_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    if isinstance(value, dict):
        return Point(x=float(value.get("x", 0)), y=float(value.get("y", 0)))
    return Point(x=float(value[0]), y=float(value[1]))


def outer_ring(polygon) -> List[Point]:
    """Reduce any polygon payload to its outer ring of Points.

    Accepts a list of Points / {x, y} dicts / [x, y] pairs, a
    PolygonWithHoles, or a raw {"outer": [...], "holes": [...]} dict.
    Returns an empty list for None.
    """
    if polygon is None:
        return []
    if isinstance(polygon, PolygonWithHoles):
        return list(polygon.outer)
    if isinstance(polygon, dict):
        return [_to_point(p) for p in polygon.get("outer") or []]
    return [_to_point(p) for p in polygon]


def _coords(points: Iterable[Point]) -> np.ndarray:
    return np.array([[p.x, p.y] for p in points], dtype=float).reshape(-1, 2)


def _distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def rect_to_polygon(center_x: float, center_y: float, width: float, height: float) -> List[Point]:
    """Convert a center-based rectangle to 4 points, clockwise from top-left."""
    half_w = width / 2
    half_h = height / 2
    return [
        Point(x=center_x - half_w, y=center_y - half_h),  # top-left
        Point(x=center_x + half_w, y=center_y - half_h),  # top-right
        Point(x=center_x + half_w, y=center_y + half_h),  # bottom-right
        Point(x=center_x - half_w, y=center_y + half_h),  # bottom-left
    ]


def polygon_area(points: Sequence[Point]) -> float:
    """Shoelace area in square pixels. Always >= 0; 0 for fewer than 3 points."""
    if len(points) < 3:
        return 0.0
    xy = _coords(points)
    x, y = xy[:, 0], xy[:, 1]
    cross = x * np.roll(y, -1) - np.roll(x, -1) * y
    return float(abs(cross.sum()) / 2)


def polygon_perimeter(points: Sequence[Point]) -> float:
    """Sum of edge lengths around the closed ring; 0 for fewer than 2 points."""
    if len(points) < 2:
        return 0.0
    xy = _coords(points)
    edges = np.roll(xy, -1, axis=0) - xy
    return float(np.hypot(edges[:, 0], edges[:, 1]).sum())


def polyline_length(points: Sequence[Point]) -> float:
    """Length of an open chain of points (no closing segment)."""
    if len(points) < 2:
        return 0.0
    xy = _coords(points)
    segments = np.diff(xy, axis=0)
    return float(np.hypot(segments[:, 0], segments[:, 1]).sum())


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    """Axis-aligned extents. An empty polygon yields an all-zero box."""
    if len(points) == 0:
        return BoundingBox()

    xy = _coords(points)
    min_x, min_y = (float(v) for v in xy.min(axis=0))
    max_x, max_y = (float(v) for v in xy.max(axis=0))

    return BoundingBox(
        min_x=min_x,
        min_y=min_y,
        max_x=max_x,
        max_y=max_y,
        center_x=(min_x + max_x) / 2,
        center_y=(min_y + max_y) / 2,
        width=max_x - min_x,
        height=max_y - min_y,
    )


def polygon_centroid(points: Sequence[Point]) -> Point:
    """Area-weighted centroid.

    0 points -> origin, 1-2 points -> their mean. A degenerate ring
    (collinear or zero-area) falls back to the plain vertex average.
    """
    n = len(points)
    if n == 0:
        return Point(x=0.0, y=0.0)

    xy = _coords(points)
    if n <= 2:
        mean = xy.mean(axis=0)
        return Point(x=float(mean[0]), y=float(mean[1]))

    x, y = xy[:, 0], xy[:, 1]
    x1, y1 = np.roll(x, -1), np.roll(y, -1)
    cross = x * y1 - x1 * y
    signed_area = cross.sum() / 2

    if abs(signed_area) < DEGENERATE_AREA_EPSILON:
        mean = xy.mean(axis=0)
        return Point(x=float(mean[0]), y=float(mean[1]))

    cx = ((x + x1) * cross).sum() / (6 * signed_area)
    cy = ((y + y1) * cross).sum() / (6 * signed_area)
    return Point(x=float(cx), y=float(cy))


def closest_point_on_segment(p1: Point, p2: Point, p: Point) -> Point:
    """Project p onto segment p1-p2, clamped so the result stays on the segment."""
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return Point(x=p1.x, y=p1.y)

    t = ((p.x - p1.x) * dx + (p.y - p1.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))

    return Point(x=p1.x + t * dx, y=p1.y + t * dy)


def find_closest_edge(points: Sequence[Point], click: Point) -> EdgeHit:
    """Find the edge nearest to a click and the projected point on it.

    Edge i runs from vertex i to vertex (i + 1) % n. Ties keep the
    lowest edge index.
    """
    if len(points) < 2:
        return EdgeHit(edge_index=0, point=click, distance=math.inf)

    best = EdgeHit(edge_index=0, point=click, distance=math.inf)
    n = len(points)
    for i in range(n):
        candidate = closest_point_on_segment(points[i], points[(i + 1) % n], click)
        dist = _distance(candidate, click)
        if dist < best.distance:
            best = EdgeHit(edge_index=i, point=candidate, distance=dist)

    return best


def insert_vertex(points: Sequence[Point], click: Point, max_distance: Optional[float] = None) -> List[Point]:
    """Insert a vertex on the edge nearest to `click`.

    The new vertex is the projection of the click onto that edge. When
    `max_distance` is given and the click is farther than that from every
    edge, the polygon is returned unchanged.
    """
    hit = find_closest_edge(points, click)
    if math.isinf(hit.distance):
        return list(points)
    if max_distance is not None and hit.distance > max_distance:
        return list(points)

    result = list(points)
    result.insert(hit.edge_index + 1, hit.point)
    return result


def is_valid_polygon(points: Sequence[Point]) -> bool:
    return len(points) >= 3


def can_remove_point(points: Sequence[Point]) -> bool:
    """Removing a vertex must leave at least a triangle."""
    return len(points) > 3


def remove_vertex(points: Sequence[Point], index: int) -> List[Point]:
    if not can_remove_point(points) or not 0 <= index < len(points):
        return list(points)
    return [p for i, p in enumerate(points) if i != index]


def area_in_feet(points: Sequence[Point], scale_ratio: float) -> float:
    """Area in square feet; scale_ratio is pixels per foot."""
    return polygon_area(points) / (scale_ratio * scale_ratio)


def perimeter_in_feet(points: Sequence[Point], scale_ratio: float) -> float:
    """Perimeter in linear feet; scale_ratio is pixels per foot."""
    return polygon_perimeter(points) / scale_ratio


def polygon_measurements(points: Sequence[Point], scale_ratio: float) -> PolygonMeasurements:
    """Bounding box fields plus real-world area, perimeter and size.

    The pixel fields mirror the legacy center-based rectangle so a polygon
    edit can keep them in sync.
    """
    bbox = bounding_box(points)
    return PolygonMeasurements(
        pixel_x=bbox.center_x,
        pixel_y=bbox.center_y,
        pixel_width=bbox.width,
        pixel_height=bbox.height,
        area_sf=area_in_feet(points, scale_ratio),
        perimeter_lf=perimeter_in_feet(points, scale_ratio),
        real_width_ft=bbox.width / scale_ratio,
        real_height_ft=bbox.height / scale_ratio,
    )
