"""Tests for the edge tree and the dual-tree query."""

import itertools

import pytest

from clipforge.core.errors import ConfigurationError
from clipforge.primitives import Extent, ring_edges
from clipforge.tree import EdgeTree, STRLeafNode, STRNode, dual_query


def _grid_edges(n, offset=0.0):
    """Short diagonal edges laid out on an n x n grid."""
    return [
        ((i + offset, j + offset), (i + offset + 0.6, j + offset + 0.6))
        for i in range(n)
        for j in range(n)
    ]


def _brute_force(edges_a, edges_b):
    result = []
    for i, edge_a in enumerate(edges_a):
        extent_a = Extent.of_segment(*edge_a)
        hits = [j for j, edge_b in enumerate(edges_b) if extent_a.intersects(Extent.of_segment(*edge_b))]
        if hits:
            result.append((i, hits))
    return result


def _leaves(node):
    if isinstance(node, STRLeafNode):
        return [node]
    return list(itertools.chain.from_iterable(_leaves(child) for child in node.children))


class TestEdgeTree:
    """Tests for EdgeTree construction."""

    def test_empty_tree(self):
        """Test a tree without edges."""
        tree = EdgeTree([])
        assert tree.rootnode is None
        assert len(tree) == 0

    def test_small_tree_is_single_leaf(self):
        """Test that few edges fit in one leaf."""
        tree = EdgeTree([((0, 0), (1, 1)), ((2, 2), (3, 3))])
        assert isinstance(tree.rootnode, STRLeafNode)
        assert tree.rootnode.indices == [0, 1]

    def test_every_edge_in_exactly_one_leaf(self):
        """Test that leaves partition the edges."""
        edges = _grid_edges(12)
        tree = EdgeTree(edges, node_capacity=4)
        indices = sorted(i for leaf in _leaves(tree.rootnode) for i in leaf.indices)
        assert indices == list(range(len(edges)))

    def test_node_capacity_respected(self):
        """Test that no node holds more than node_capacity children."""
        tree = EdgeTree(_grid_edges(10), node_capacity=5)
        assert isinstance(tree.rootnode, STRNode)
        for leaf in _leaves(tree.rootnode):
            assert len(leaf.indices) <= 5

    def test_node_extent_covers_children(self):
        """Test that node extents enclose their children."""
        tree = EdgeTree(_grid_edges(6), node_capacity=3)
        root = tree.rootnode
        for child in root.children:
            assert root.extent.union(child.extent) == root.extent

    def test_invalid_capacity(self):
        """Test that a capacity below 2 is rejected."""
        with pytest.raises(ConfigurationError):
            EdgeTree(_grid_edges(2), node_capacity=1)


class TestDualQuery:
    """Tests for dual_query()."""

    def test_matches_brute_force(self):
        """Pruned traversal finds exactly the overlapping extent pairs."""
        edges_a = _grid_edges(8)
        edges_b = _grid_edges(7, offset=0.5)
        result = dual_query(EdgeTree(edges_a, 3), EdgeTree(edges_b, 4))
        assert result == _brute_force(edges_a, edges_b)

    def test_output_sorted_and_unique(self):
        """Test that the overlap map is sorted and free of duplicates."""
        edges_a = _grid_edges(5)
        edges_b = _grid_edges(5, offset=0.3)
        result = dual_query(EdgeTree(edges_a, 2), EdgeTree(edges_b, 2))
        keys = [key for key, _ in result]
        assert keys == sorted(keys)
        for _, candidates in result:
            assert candidates == sorted(set(candidates))

    def test_disjoint_squares_give_empty_map(self):
        """Test that squares far apart have no candidates."""
        square_a = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
        square_b = [(5.0, 5.0), (6.0, 5.0), (6.0, 6.0), (5.0, 6.0)]
        tree_a = EdgeTree(ring_edges(square_a))
        tree_b = EdgeTree(ring_edges(square_b))
        assert dual_query(tree_a, tree_b) == []

    def test_empty_tree(self):
        """Test a tree without edges."""
        assert dual_query(EdgeTree([]), EdgeTree(_grid_edges(2))) == []
        assert dual_query(EdgeTree(_grid_edges(2)), EdgeTree([])) == []

    def test_single_overlap(self):
        """Test a single overlapping pair."""
        tree_a = EdgeTree([((0.0, 0.0), (1.0, 1.0))])
        tree_b = EdgeTree([((0.5, 0.5), (1.5, 1.5)), ((5.0, 5.0), (6.0, 6.0))])
        assert dual_query(tree_a, tree_b) == [(0, [0])]

    def test_tree_shared_between_queries(self):
        """A built tree is read-only and gives the same answer every time."""
        tree_a = EdgeTree(_grid_edges(6), 3)
        tree_b = EdgeTree(_grid_edges(6, offset=0.2), 3)
        assert dual_query(tree_a, tree_b) == dual_query(tree_a, tree_b)
