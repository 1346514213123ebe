"""Geometry - Pure polygon math for detection outlines.

Public API:
    polygon_area / polygon_perimeter: Shoelace area and closed perimeter (pixels)
    bounding_box / polygon_centroid: Extents and area-weighted center
    find_closest_edge: Edge hit testing for vertex insertion
    rect_to_polygon: Legacy center rectangle to 4-point polygon
    area_in_feet / perimeter_in_feet: Real-world conversion by scale ratio
"""

from .polygon import (
    outer_ring,
    rect_to_polygon,
    polygon_area,
    polygon_perimeter,
    polyline_length,
    bounding_box,
    polygon_centroid,
    closest_point_on_segment,
    find_closest_edge,
    insert_vertex,
    remove_vertex,
    is_valid_polygon,
    can_remove_point,
    area_in_feet,
    perimeter_in_feet,
    polygon_measurements,
)

__all__ = [
    "outer_ring",
    "rect_to_polygon",
    "polygon_area",
    "polygon_perimeter",
    "polyline_length",
    "bounding_box",
    "polygon_centroid",
    "closest_point_on_segment",
    "find_closest_edge",
    "insert_vertex",
    "remove_vertex",
    "is_valid_polygon",
    "can_remove_point",
    "area_in_feet",
    "perimeter_in_feet",
    "polygon_measurements",
]
