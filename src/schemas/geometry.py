"""Geometry primitives shared by the polygon math and measurement code.

Polygons arrive in two shapes:
- a plain list of points (the common case)
- an outer boundary plus optional holes (detections that were split)

Both are accepted everywhere; `geometry.polygon.outer_ring` reduces either
shape to the outer list of points before any math runs.
"""
from pydantic import BaseModel, Field
from typing import List, Union


class Point(BaseModel):
    """A vertex in page-pixel space (origin top-left, y grows downward)."""
    x: float = Field(description="Horizontal pixel coordinate")
    y: float = Field(description="Vertical pixel coordinate")


class PolygonWithHoles(BaseModel):
    """Polygon with an outer boundary and optional inner holes."""
    outer: List[Point] = Field(description="Outer boundary (clockwise)")
    holes: List[List[Point]] = Field(default_factory=list, description="Inner holes (counter-clockwise)")


PolygonPoints = Union[List[Point], PolygonWithHoles]


class BoundingBox(BaseModel):
    """Axis-aligned bounding box of a polygon, in pixels."""
    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class EdgeHit(BaseModel):
    """Closest edge to a click: edge i runs from vertex i to vertex i+1 (cyclic)."""
    edge_index: int
    point: Point
    distance: float


class PolygonMeasurements(BaseModel):
    """Pixel bounding box plus real-world size of a polygon."""
    pixel_x: float = Field(description="Bounding box center X")
    pixel_y: float = Field(description="Bounding box center Y")
    pixel_width: float
    pixel_height: float
    area_sf: float
    perimeter_lf: float
    real_width_ft: float
    real_height_ft: float
