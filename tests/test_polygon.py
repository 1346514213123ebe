"""Tests for polygon math."""
import math
import pytest

from geometry.polygon import (
    rect_to_polygon,
    outer_ring,
    polygon_area,
    polygon_perimeter,
    polyline_length,
    bounding_box,
    polygon_centroid,
    closest_point_on_segment,
    find_closest_edge,
    insert_vertex,
    is_valid_polygon,
    can_remove_point,
    remove_vertex,
    area_in_feet,
    perimeter_in_feet,
    polygon_measurements,
)
from schemas.geometry import Point, PolygonWithHoles
from conftest import pts


class TestRectToPolygon:
    def test_corners_clockwise_from_top_left(self):
        corners = rect_to_polygon(10, 20, 4, 6)
        assert [(p.x, p.y) for p in corners] == [(8, 17), (12, 17), (12, 23), (8, 23)]

    def test_area_and_perimeter(self):
        corners = rect_to_polygon(50, 50, 30, 12)
        assert polygon_area(corners) == pytest.approx(360)
        assert polygon_perimeter(corners) == pytest.approx(84)


class TestOuterRing:
    def test_none(self):
        assert outer_ring(None) == []

    def test_holes_are_dropped(self, unit_square):
        polygon = PolygonWithHoles(outer=unit_square, holes=[pts((0.2, 0.2), (0.4, 0.2), (0.4, 0.4))])
        assert outer_ring(polygon) == unit_square

    def test_raw_dict_and_pairs(self):
        raw = {"outer": [{"x": 0, "y": 0}, {"x": 2, "y": 0}, {"x": 2, "y": 2}], "holes": []}
        assert [(p.x, p.y) for p in outer_ring(raw)] == [(0, 0), (2, 0), (2, 2)]
        assert [(p.x, p.y) for p in outer_ring([[1, 2], [3, 4]])] == [(1, 2), (3, 4)]


class TestArea:
    def test_triangle(self):
        assert polygon_area(pts((0, 0), (10, 0), (5, 10))) == pytest.approx(50)

    def test_too_few_points(self):
        assert polygon_area([]) == 0
        assert polygon_area(pts((0, 0), (5, 5))) == 0

    def test_orientation_and_rotation_invariant(self):
        shape = pts((0, 0), (8, 0), (10, 4), (3, 9), (-2, 5))
        area = polygon_area(shape)
        assert polygon_area(list(reversed(shape))) == pytest.approx(area)
        assert polygon_area(shape[2:] + shape[:2]) == pytest.approx(area)

    def test_holes_are_not_subtracted(self):
        outer = pts((0, 0), (10, 0), (10, 10), (0, 10))
        polygon = PolygonWithHoles(outer=outer, holes=[pts((2, 2), (4, 2), (4, 4), (2, 4))])
        assert polygon_area(outer_ring(polygon)) == pytest.approx(100)


class TestPerimeter:
    def test_triangle(self):
        expected = 10 + 2 * math.hypot(5, 10)
        assert polygon_perimeter(pts((0, 0), (10, 0), (5, 10))) == pytest.approx(expected)
        assert expected == pytest.approx(32.36, abs=0.01)

    def test_degenerate(self):
        assert polygon_perimeter([]) == 0
        assert polygon_perimeter(pts((1, 1))) == 0

    def test_reversal_invariant(self):
        shape = pts((0, 0), (8, 0), (10, 4), (3, 9))
        assert polygon_perimeter(list(reversed(shape))) == pytest.approx(polygon_perimeter(shape))

    def test_polyline_has_no_closing_segment(self):
        chain = pts((0, 0), (3, 0), (3, 4))
        assert polyline_length(chain) == pytest.approx(7)
        assert polygon_perimeter(chain) == pytest.approx(12)


class TestBoundingBox:
    def test_extents(self):
        bbox = bounding_box(pts((2, 3), (10, 1), (6, 9)))
        assert (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y) == (2, 1, 10, 9)
        assert (bbox.center_x, bbox.center_y) == (6, 5)
        assert (bbox.width, bbox.height) == (8, 8)

    def test_empty(self):
        bbox = bounding_box([])
        assert bbox.width == 0
        assert bbox.center_x == 0


class TestCentroid:
    def test_triangle(self):
        c = polygon_centroid(pts((0, 0), (10, 0), (5, 10)))
        assert c.x == pytest.approx(5)
        assert c.y == pytest.approx(10 / 3)

    def test_square_either_orientation(self, unit_square):
        for ring in (unit_square, list(reversed(unit_square))):
            c = polygon_centroid(ring)
            assert (c.x, c.y) == (pytest.approx(0.5), pytest.approx(0.5))

    def test_collinear_falls_back_to_average(self):
        c = polygon_centroid(pts((0, 0), (1, 1), (2, 2)))
        assert (c.x, c.y) == (pytest.approx(1), pytest.approx(1))

    def test_small_inputs(self):
        assert polygon_centroid([]) == Point(x=0, y=0)
        c = polygon_centroid(pts((0, 0), (4, 2)))
        assert (c.x, c.y) == (2, 1)


class TestClosestEdge:
    def test_projection_is_clamped(self):
        p = closest_point_on_segment(Point(x=0, y=0), Point(x=10, y=0), Point(x=15, y=3))
        assert (p.x, p.y) == (10, 0)

    def test_zero_length_segment(self):
        p = closest_point_on_segment(Point(x=2, y=2), Point(x=2, y=2), Point(x=5, y=5))
        assert (p.x, p.y) == (2, 2)

    def test_click_on_first_edge(self, unit_square):
        hit = find_closest_edge(unit_square, Point(x=0.5, y=0))
        assert hit.edge_index == 0
        assert (hit.point.x, hit.point.y) == (0.5, 0)
        assert hit.distance == 0

    def test_closing_edge(self, unit_square):
        hit = find_closest_edge(unit_square, Point(x=-0.2, y=0.5))
        assert hit.edge_index == 3
        assert hit.distance == pytest.approx(0.2)

    def test_tie_keeps_lowest_index(self, unit_square):
        # (0, 0) lies on edge 3 and edge 0
        hit = find_closest_edge(unit_square, Point(x=0, y=0))
        assert hit.edge_index == 0

    def test_degenerate_polygon(self):
        click = Point(x=3, y=4)
        hit = find_closest_edge(pts((0, 0)), click)
        assert hit.edge_index == 0
        assert hit.point == click
        assert math.isinf(hit.distance)


class TestVertexEditing:
    def test_insert_on_nearest_edge(self, unit_square):
        result = insert_vertex(unit_square, Point(x=1.1, y=0.5))
        assert len(result) == 5
        assert (result[2].x, result[2].y) == (1, 0.5)
        assert polygon_area(result) == pytest.approx(1)

    def test_insert_respects_max_distance(self, unit_square):
        result = insert_vertex(unit_square, Point(x=5, y=5), max_distance=1)
        assert result == unit_square

    def test_remove_keeps_triangle(self, unit_square):
        assert can_remove_point(unit_square)
        triangle = remove_vertex(unit_square, 1)
        assert len(triangle) == 3
        assert not can_remove_point(triangle)
        assert remove_vertex(triangle, 0) == triangle

    def test_remove_out_of_range(self, unit_square):
        assert remove_vertex(unit_square, 7) == unit_square

    def test_is_valid_polygon(self, unit_square):
        assert is_valid_polygon(unit_square)
        assert not is_valid_polygon(unit_square[:2])


class TestRealWorldUnits:
    def test_area_scales_by_square(self):
        rect = rect_to_polygon(0, 0, 40, 20)
        assert area_in_feet(rect, 10) == pytest.approx(8)
        assert perimeter_in_feet(rect, 10) == pytest.approx(12)

    def test_polygon_measurements(self, window_rect):
        m = polygon_measurements(window_rect, 2)
        assert (m.pixel_x, m.pixel_y) == (2, 1.5)
        assert (m.pixel_width, m.pixel_height) == (4, 3)
        assert m.area_sf == pytest.approx(3)
        assert m.perimeter_lf == pytest.approx(7)
        assert (m.real_width_ft, m.real_height_ft) == (2, 1.5)
