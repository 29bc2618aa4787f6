"""Tests for multipolygon corrections."""

import pytest
from shapely.geometry import MultiPolygon, Polygon

from clipforge import (
    ClipConfig,
    CorrectionStrategy,
    CorrectionWarning,
    DiffIntersectingPolygons,
    NotImplementedOperationError,
    UnionIntersectingPolygons,
    diff_correct,
    fix,
    union_correct,
)


def _box(x0, y0, x1, y1) -> Polygon:
    return Polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


def _overlapping_pair() -> MultiPolygon:
    """Two squares overlapping in a unit square."""
    return MultiPolygon([_box(0, 0, 2, 2), _box(1, 1, 3, 3)])


def _bar_across() -> MultiPolygon:
    """Wide bar with a narrower, taller bar across its middle."""
    return MultiPolygon([_box(0, 0, 6, 2), _box(2, -1, 4, 3)])


class TestUnionCorrect:
    """Tests for union_correct()."""

    def test_duplicate_parts_merge(self):
        """Test that two identical parts become one."""
        square = _box(0, 0, 1, 1)
        result = union_correct(MultiPolygon([square, square]))
        assert len(result.geoms) == 1
        assert result.geoms[0].area == pytest.approx(1.0)

    def test_overlapping_parts_merge(self):
        """Test merging two overlapping squares."""
        result = union_correct(_overlapping_pair())
        assert len(result.geoms) == 1
        assert result.area == pytest.approx(7.0)

    def test_chain_merges_through_middle_part(self):
        """Test that a merge pulling in a later part rescans the others."""
        chain = MultiPolygon([_box(0, 0, 2, 1), _box(4, 0, 6, 1), _box(1, 0, 5, 1)])
        result = union_correct(chain)
        assert len(result.geoms) == 1
        assert result.area == pytest.approx(6.0)

    def test_disjoint_parts_unchanged(self):
        """Test that disjoint parts are left alone."""
        parts = MultiPolygon([_box(0, 0, 1, 1), _box(5, 5, 6, 6)])
        result = union_correct(parts)
        assert len(result.geoms) == 2
        assert result.area == pytest.approx(2.0)

    def test_touching_parts_stay_separate(self):
        """Test that parts sharing an edge are not merged."""
        parts = MultiPolygon([_box(0, 0, 1, 1), _box(1, 0, 2, 1)])
        assert len(union_correct(parts).geoms) == 2

    def test_result_is_valid(self):
        """Test that the corrected multipolygon is valid."""
        assert union_correct(_overlapping_pair()).is_valid

    def test_iteration_limit_warns(self):
        """Test the warning when max_iterations stops the correction early."""
        parts = MultiPolygon([_box(0, 0, 2, 2), _box(1, 1, 3, 3), _box(0.5, 0.5, 2.5, 2.5)])
        with pytest.warns(CorrectionWarning):
            union_correct(parts, config=ClipConfig(max_iterations=1))

    def test_verbose(self, capsys):
        """Test that verbose mode reports merges."""
        union_correct(_overlapping_pair(), verbose=True)
        assert "Merged part 1 into part 0" in capsys.readouterr().out


class TestDiffCorrect:
    """Tests for diff_correct()."""

    def test_split_earlier_part(self):
        """Test that an earlier part cut in two keeps both fragments."""
        result = diff_correct(_bar_across())
        assert len(result.geoms) == 3
        assert sorted(p.area for p in result.geoms) == pytest.approx([4.0, 4.0, 8.0])

    def test_later_part_keeps_full_area(self):
        """Test that the last part is never trimmed."""
        result = diff_correct(_overlapping_pair())
        assert len(result.geoms) == 2
        assert sorted(p.area for p in result.geoms) == pytest.approx([3.0, 4.0])

    def test_covered_part_dropped(self):
        """Test that a part covered by a later part disappears."""
        parts = MultiPolygon([_box(1, 1, 2, 2), _box(0, 0, 3, 3)])
        result = diff_correct(parts)
        assert len(result.geoms) == 1
        assert result.area == pytest.approx(9.0)

    def test_parts_disjoint_afterwards(self):
        """Test that no two corrected parts share area."""
        result = diff_correct(_bar_across())
        geoms = list(result.geoms)
        for i in range(len(geoms)):
            for j in range(i + 1, len(geoms)):
                assert geoms[i].intersection(geoms[j]).area == pytest.approx(0.0)

    def test_band_sharing_a_side(self):
        """Test a later part that runs along a side of the earlier one."""
        result = diff_correct(MultiPolygon([_box(0, 0, 3, 3), _box(0, 1, 4, 2)]))
        geoms = list(result.geoms)
        assert len(geoms) == 3
        assert all(polygon.is_valid for polygon in geoms)
        assert sorted(p.area for p in geoms) == pytest.approx([3.0, 3.0, 4.0])
        for i in range(len(geoms)):
            for j in range(i + 1, len(geoms)):
                assert geoms[i].intersection(geoms[j]).area == pytest.approx(0.0)


class TestFix:
    """Tests for fix() and the correction classes."""

    def test_default_is_union(self):
        """Test that fix() merges overlapping parts by default."""
        assert len(fix(_overlapping_pair()).geoms) == 1

    def test_strategy_by_name(self):
        """Test selecting a strategy by its string value."""
        result = fix(_bar_across(), corrections=['diff_intersecting_polygons'])
        assert len(result.geoms) == 3

    def test_strategy_enum(self):
        """Test selecting a strategy by enum."""
        result = fix(_bar_across(), corrections=[CorrectionStrategy.DIFF_INTERSECTING_POLYGONS])
        assert len(result.geoms) == 3

    def test_correction_instance(self):
        """Test passing a configured correction object."""
        correction = UnionIntersectingPolygons(ClipConfig(tree_threshold=0))
        assert len(fix(_overlapping_pair(), corrections=[correction]).geoms) == 1

    def test_polygon_passes_through(self):
        """Test that corrections skip geometries of other kinds."""
        square = _box(0, 0, 1, 1)
        assert fix(square) is square

    def test_unknown_strategy(self):
        """Test that an unknown strategy name is rejected."""
        with pytest.raises(ValueError):
            fix(_overlapping_pair(), corrections=['simplify'])

    def test_call_on_wrong_kind(self):
        """Test that calling a correction directly checks the geometry kind."""
        with pytest.raises(NotImplementedOperationError):
            DiffIntersectingPolygons()(_box(0, 0, 1, 1))

    def test_repr(self):
        """Test correction repr."""
        assert repr(UnionIntersectingPolygons()) == "UnionIntersectingPolygons()"
