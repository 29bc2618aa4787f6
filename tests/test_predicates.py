"""Tests for intersects(), crosses(), covers() and coveredby()."""

import numpy as np
import pytest
from shapely.geometry import LineString, MultiPoint, Point, Polygon

from clipforge import NotImplementedOperationError, coveredby, covers, crosses, intersects


def _box(x0, y0, x1, y1) -> Polygon:
    return Polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


BIG = _box(0, 0, 10, 10)
SMALL = _box(2, 2, 4, 4)


class TestIntersects:
    """Tests for intersects()."""

    def test_overlapping_polygons(self):
        """Test polygons sharing area."""
        assert intersects(_box(0, 0, 2, 2), _box(1, 1, 3, 3))

    def test_touching_polygons(self):
        """Test that an edge contact counts."""
        assert intersects(_box(0, 0, 1, 1), _box(1, 0, 2, 1))

    def test_corner_contact(self):
        """Test that a single shared vertex counts."""
        assert intersects(_box(0, 0, 1, 1), _box(1, 1, 2, 2))

    def test_nested_polygons(self):
        """Test a polygon inside another without boundary contact."""
        assert intersects(BIG, SMALL)
        assert intersects(SMALL, BIG)

    def test_disjoint_polygons(self):
        """Test polygons far apart."""
        assert not intersects(BIG, _box(20, 20, 21, 21))

    def test_point_in_polygon(self):
        """Test points inside, on and outside a polygon."""
        assert intersects(Point(5, 5), BIG)
        assert intersects(Point(10, 5), BIG)
        assert not intersects(Point(11, 5), BIG)

    def test_point_in_hole(self):
        """Test that a point in a hole does not intersect."""
        holed = Polygon(BIG.exterior.coords, holes=[SMALL.exterior.coords])
        assert not intersects(Point(3, 3), holed)

    def test_line_and_polygon(self):
        """Test a line crossing a polygon and one inside it."""
        assert intersects(LineString([(-1, 5), (11, 5)]), BIG)
        assert intersects(LineString([(1, 1), (2, 3)]), BIG)
        assert not intersects(LineString([(-1, -1), (-5, 5)]), BIG)

    def test_lines(self):
        """Test crossing and parallel lines."""
        assert intersects(LineString([(0, 0), (2, 2)]), LineString([(0, 2), (2, 0)]))
        assert not intersects(LineString([(0, 0), (2, 0)]), LineString([(0, 1), (2, 1)]))

    def test_float32(self):
        """Test computing in single precision."""
        assert intersects(BIG, SMALL, dtype=np.float32)


class TestCrosses:
    """Tests for crosses()."""

    def test_lines_cross(self):
        """Test two lines crossing in their interiors."""
        assert crosses(LineString([(0, 0), (2, 2)]), LineString([(0, 2), (2, 0)]))

    def test_lines_meeting_at_end(self):
        """Test that lines meeting only at an endpoint do not cross."""
        assert not crosses(LineString([(0, 0), (1, 1)]), LineString([(1, 1), (2, 0)]))

    def test_overlapping_lines(self):
        """Test that collinear overlapping lines do not cross."""
        assert not crosses(LineString([(0, 0), (2, 0)]), LineString([(1, 0), (3, 0)]))

    def test_line_through_polygon(self):
        """Test a line entering and leaving a polygon."""
        assert crosses(LineString([(-1, 5), (11, 5)]), BIG)

    def test_polygon_and_line_swapped(self):
        """Test that argument order does not matter."""
        assert crosses(BIG, LineString([(5, 5), (15, 5)]))

    def test_line_inside_polygon(self):
        """Test a line fully inside a polygon."""
        assert not crosses(LineString([(1, 1), (2, 3)]), BIG)

    def test_line_along_boundary(self):
        """Test a line running along the boundary and outside only."""
        assert not crosses(LineString([(0, 0), (10, 0), (12, 0)]), BIG)

    def test_multipoint_and_line(self):
        """Test points partly on a line's interior."""
        line = LineString([(0, 0), (2, 2)])
        assert crosses(MultiPoint([(1, 1), (5, 5)]), line)
        assert not crosses(MultiPoint([(5, 5), (6, 6)]), line)

    def test_multipoint_on_line_end_only(self):
        """Test that line endpoints are not part of the interior."""
        line = LineString([(0, 0), (2, 2)])
        assert not crosses(MultiPoint([(0, 0), (5, 5)]), line)

    def test_multipoint_and_polygon(self):
        """Test points partly inside a polygon."""
        assert crosses(MultiPoint([(5, 5), (20, 20)]), BIG)
        assert not crosses(MultiPoint([(5, 5), (6, 6)]), BIG)

    def test_polygons_not_implemented(self):
        """Test that polygon pairs are rejected."""
        with pytest.raises(NotImplementedOperationError):
            crosses(BIG, SMALL)


class TestCovers:
    """Tests for covers() and coveredby()."""

    def test_big_covers_small(self):
        """Test a polygon covering a nested polygon."""
        assert covers(BIG, SMALL)
        assert not covers(SMALL, BIG)

    def test_coveredby_is_reverse(self):
        """Test that coveredby swaps the arguments of covers."""
        assert coveredby(SMALL, BIG)
        assert not coveredby(BIG, SMALL)

    def test_covers_itself(self):
        """Test that a polygon covers an identical copy."""
        assert covers(BIG, _box(0, 0, 10, 10))

    def test_partial_overlap(self):
        """Test that overlapping polygons do not cover each other."""
        assert not covers(_box(0, 0, 2, 2), _box(1, 1, 3, 3))

    def test_point_on_boundary(self):
        """Test that boundary points are covered."""
        assert covers(BIG, Point(10, 5))
        assert not covers(BIG, Point(11, 5))

    def test_line_inside_and_outside(self):
        """Test lines partly and fully inside a polygon."""
        assert covers(BIG, LineString([(0, 0), (10, 0)]))
        assert covers(BIG, LineString([(1, 1), (9, 9)]))
        assert not covers(BIG, LineString([(5, 5), (15, 5)]))

    def test_line_across_hole(self):
        """Test that a line crossing a hole is not covered."""
        holed = Polygon(BIG.exterior.coords, holes=[SMALL.exterior.coords])
        assert not covers(holed, LineString([(1, 3), (5, 3)]))

    def test_lower_dimension_never_covers(self):
        """Test that a line cannot cover a polygon."""
        assert not covers(LineString([(0, 0), (10, 10)]), BIG)

    def test_line_covers_point(self):
        """Test a point on a line."""
        assert covers(LineString([(0, 0), (10, 10)]), Point(5, 5))
