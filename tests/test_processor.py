"""Tests for intersection lists, entry/exit flags and ring tracing."""

import pytest

from clipforge.clipping import build_intersection_lists, flag_entry_exit, split_ring, trace_polynodes
from clipforge.config import ClipConfig
from clipforge.core.errors import DegenerateIntersectionError
from clipforge.core.geometry_utils import ring_signed_area
from clipforge.core.types import ClipOperation


def _square(x0, y0, size):
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


def _traced(ring_a, ring_b, operation, config=None):
    a_list, b_list, a_idx = build_intersection_lists(ring_a, ring_b, config)
    flag_entry_exit(a_list, b_list, ring_a, ring_b)
    return trace_polynodes(a_list, b_list, a_idx, operation)


def _total_area(rings):
    return sum(abs(ring_signed_area(ring)) for ring in rings)


A = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]
B = [(1.0, 1.0), (3.0, 1.0), (3.0, 3.0), (1.0, 3.0)]


class TestBuildIntersectionLists:
    """Tests for build_intersection_lists()."""

    def test_crossings_spliced_after_edge_start(self):
        """Test that crossing nodes follow the start vertex of their edge."""
        a_list, b_list, a_idx = build_intersection_lists(A, B)
        assert a_idx == [2, 4]
        assert [node.point for node in a_list] == [
            (0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (2.0, 2.0), (1.0, 2.0), (0.0, 2.0),
        ]
        assert len(b_list) == 6

    def test_original_vertices_keep_their_index(self):
        """Test that original vertices keep their ring index."""
        a_list, _, _ = build_intersection_lists(A, B)
        assert [node.idx for node in a_list if not node.inter] == [0, 1, 2, 3]
        assert all(node.idx == -1 for node in a_list if node.inter)

    def test_neighbors_link_both_ways(self):
        """Test that partner nodes point at each other."""
        a_list, b_list, a_idx = build_intersection_lists(A, B)
        for pos in a_idx:
            partner = a_list[pos].neighbor
            assert b_list[partner].inter
            assert b_list[partner].neighbor == pos
            assert b_list[partner].point == a_list[pos].point

    def test_alpha_recorded(self):
        """Test the parametric position of each crossing."""
        a_list, _, a_idx = build_intersection_lists(A, B)
        assert [a_list[i].alpha for i in a_idx] == pytest.approx([0.5, 0.5])

    def test_disjoint_rings_have_no_crossings(self):
        """Test that rings far apart add no nodes."""
        a_list, b_list, a_idx = build_intersection_lists(A, _square(5.0, 5.0, 1.0))
        assert a_idx == []
        assert len(a_list) == 4
        assert len(b_list) == 4

    def test_touch_point_is_dropped(self):
        """A vertex touching the other ring without crossing adds no node."""
        diamond = [(1.0, 2.0), (2.0, 3.0), (1.0, 4.0), (0.0, 3.0)]
        a_list, b_list, a_idx = build_intersection_lists(A, diamond)
        assert a_idx == []
        assert not any(node.inter for node in a_list)
        assert not any(node.inter for node in b_list)

    def test_vertex_crossing_recorded_once(self):
        """A crossing through a vertex of A is found from both adjacent edges but kept once."""
        triangle = [(1.0, 1.0), (3.0, 3.0), (3.0, 1.0)]
        a_list, _, a_idx = build_intersection_lists(A, triangle)
        assert [a_list[i].point for i in a_idx] == [(2.0, 1.0), (2.0, 2.0)]

    def test_vertex_crossing_traces(self):
        """Test tracing through a crossing on a vertex."""
        triangle = [(1.0, 1.0), (3.0, 3.0), (3.0, 1.0)]
        rings = _traced(A, triangle, ClipOperation.INTERSECTION)
        assert _total_area(rings) == pytest.approx(0.5)

    def test_corner_touches_are_not_crossings(self):
        """A ring touching every corner of the other from outside has no crossings."""
        diamond = [(1.0, -1.0), (3.0, 1.0), (1.0, 3.0), (-1.0, 1.0)]
        _, _, a_idx = build_intersection_lists(A, diamond)
        assert a_idx == []

    def test_tree_query_matches_all_pairs(self):
        """Forcing the dual-tree candidate search changes nothing."""
        forced = ClipConfig(tree_threshold=0, node_capacity=2)
        a_list, b_list, a_idx = build_intersection_lists(A, B)
        tree_a_list, tree_b_list, tree_a_idx = build_intersection_lists(A, B, forced)
        assert tree_a_idx == a_idx
        assert [n.point for n in tree_a_list] == [n.point for n in a_list]
        assert [n.point for n in tree_b_list] == [n.point for n in b_list]


class TestFlagEntryExit:
    """Tests for flag_entry_exit()."""

    def test_flags_alternate(self):
        """Test that entry and exit alternate along A."""
        a_list, b_list, a_idx = build_intersection_lists(A, B)
        flag_entry_exit(a_list, b_list, A, B)
        assert [a_list[i].entry for i in a_idx] == [True, False]

    def test_partner_flags_on_b(self):
        """Test the flags along B."""
        a_list, b_list, a_idx = build_intersection_lists(A, B)
        flag_entry_exit(a_list, b_list, A, B)
        # B starts inside A, so its first crossing leaves A
        b_flags = [node.entry for node in b_list if node.inter]
        assert b_flags == [False, True]


class TestTracePolynodes:
    """Tests for trace_polynodes()."""

    def test_intersection(self):
        """Test tracing the overlap of two squares."""
        rings = _traced(A, B, ClipOperation.INTERSECTION)
        assert len(rings) == 1
        assert _total_area(rings) == pytest.approx(1.0)
        assert set(rings[0]) == {(2.0, 1.0), (2.0, 2.0), (1.0, 2.0), (1.0, 1.0)}

    def test_union(self):
        """Test tracing the outline of two squares."""
        rings = _traced(A, B, ClipOperation.UNION)
        assert len(rings) == 1
        assert _total_area(rings) == pytest.approx(7.0)

    def test_difference(self):
        """Test tracing the part of A outside B."""
        rings = _traced(A, B, ClipOperation.DIFFERENCE)
        assert len(rings) == 1
        assert _total_area(rings) == pytest.approx(3.0)

    def test_rings_are_open(self):
        """Test that traced rings do not repeat their first point."""
        for operation in ClipOperation:
            for ring in _traced(A, B, operation):
                assert ring[0] != ring[-1]

    def test_shifted_rectangle_with_shared_edges(self):
        """Test tracing squares that share their top and bottom lines."""
        ring_a = _square(0.0, 0.0, 10.0)
        ring_b = [(5.0, 0.0), (15.0, 0.0), (15.0, 10.0), (5.0, 10.0)]
        assert _total_area(_traced(ring_a, ring_b, ClipOperation.INTERSECTION)) == pytest.approx(50.0)
        assert _total_area(_traced(ring_a, ring_b, ClipOperation.UNION)) == pytest.approx(150.0)
        assert _total_area(_traced(ring_a, ring_b, ClipOperation.DIFFERENCE)) == pytest.approx(50.0)

    def test_difference_with_two_pieces(self):
        """Test that one difference can trace two rings."""
        square = [(1.0, 1.0), (5.0, 1.0), (5.0, 4.0), (1.0, 4.0)]
        triangle = [(0.0, 0.0), (6.0, 0.0), (3.0, 6.0)]
        rings = _traced(square, triangle, ClipOperation.DIFFERENCE)
        assert len(rings) == 2
        assert _total_area(rings) == pytest.approx(2.0)

    def test_no_crossings_raises(self):
        """Test that tracing without crossings raises."""
        a_list, b_list, a_idx = build_intersection_lists(A, _square(5.0, 5.0, 1.0))
        with pytest.raises(DegenerateIntersectionError):
            trace_polynodes(a_list, b_list, a_idx, ClipOperation.INTERSECTION)


class TestSplitRing:
    """Tests for split_ring()."""

    def test_simple_ring_unchanged(self):
        """Test that a ring without self contact comes back as is."""
        assert split_ring(A) == [(A, [])]

    def test_ring_doubling_back_along_its_side(self):
        """Test splitting a walk that returns along a stretch of its own side."""
        ring = [(0.0, 0.0), (0.0, 3.0), (3.0, 3.0), (3.0, 2.0), (0.0, 2.0), (0.0, 1.0), (3.0, 1.0), (3.0, 0.0)]
        pieces = split_ring(ring)
        assert len(pieces) == 2
        assert [holes for _, holes in pieces] == [[], []]
        assert {frozenset(exterior) for exterior, _ in pieces} == {
            frozenset([(0.0, 2.0), (0.0, 3.0), (3.0, 3.0), (3.0, 2.0)]),
            frozenset([(0.0, 0.0), (0.0, 1.0), (3.0, 1.0), (3.0, 0.0)]),
        }

    def test_pinched_loop_becomes_hole(self):
        """Test that a loop wound against the outer loop is a hole of it."""
        outer = [(2.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0), (0.0, 0.0)]
        inner = [(2.0, 0.0), (1.0, 2.0), (3.0, 2.0)]
        pieces = split_ring(outer + inner)
        assert pieces == [(outer, [inner])]

    def test_back_and_forth_run_is_dropped(self):
        """Test that a walk enclosing no area gives no pieces."""
        assert split_ring([(0.0, 0.0), (2.0, 0.0), (1.0, 0.0)]) == []

    def test_tree_query_matches(self):
        """Test that a tiny tree node capacity gives the same pieces."""
        ring = [(0.0, 0.0), (0.0, 3.0), (3.0, 3.0), (3.0, 2.0), (0.0, 2.0), (0.0, 1.0), (3.0, 1.0), (3.0, 0.0)]
        assert split_ring(ring, ClipConfig(node_capacity=2)) == split_ring(ring)
