"""Sort-tile-recursive edge trees and dual-tree overlap queries.

shapely's ``STRtree`` answers one query geometry at a time and does not expose
its nodes, so pairing every edge of one ring against every edge of another
would still cost one query per edge. The tree here is bulk loaded the same
way (sort-tile-recursive) but keeps its nodes visible, which lets
:func:`dual_query` descend both trees at once and prune whole subtrees whose
boxes are apart.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import DEFAULT_NODE_CAPACITY
from .core.errors import ConfigurationError
from .primitives import Extent, Segment

OverlapMap = List[Tuple[int, List[int]]]


@dataclass
class STRLeafNode:
    """Leaf holding a batch of edge indices and their extents."""

    indices: List[int]
    extents: List[Extent]

    @property
    def extent(self) -> Extent:
        return reduce(Extent.union, self.extents)


@dataclass
class STRNode:
    """Internal node with up to ``node_capacity`` children."""

    children: List[Union["STRNode", STRLeafNode]]
    extent: Extent


TreeNode = Union[STRNode, STRLeafNode]


def _str_groups(centers: np.ndarray, capacity: int) -> List[np.ndarray]:
    """Partition entries into groups of at most ``capacity`` by sort-tile-recursive.

    Entries are sorted by x center and cut into vertical slices, each slice is
    sorted by y center and cut into groups.
    """
    n = len(centers)
    n_groups = math.ceil(n / capacity)
    n_slices = math.ceil(math.sqrt(n_groups))
    slice_size = n_slices * capacity

    order = np.argsort(centers[:, 0], kind='stable')
    groups = []
    for start in range(0, n, slice_size):
        tile = order[start:start + slice_size]
        tile = tile[np.argsort(centers[tile, 1], kind='stable')]
        for group_start in range(0, len(tile), capacity):
            groups.append(tile[group_start:group_start + capacity])
    return groups


def _centers(extents: Sequence[Extent]) -> np.ndarray:
    return np.array(
        [((e.xmin + e.xmax) / 2, (e.ymin + e.ymax) / 2) for e in extents],
        dtype=float,
    )


class EdgeTree:
    """Bounding-volume hierarchy over a list of edges.

    The tree is built once and never modified afterwards, so one instance can
    be shared by concurrent queries.

    Attributes:
        edges: The indexed edges, in input order (indices refer to this list)
        extents: Extent of each edge
        node_capacity: Maximum fan-out of every node
        rootnode: Root node, or None for an empty tree

    Examples:
        >>> tree = EdgeTree([((0, 0), (1, 1)), ((2, 2), (3, 3))])
        >>> tree.rootnode.indices
        [0, 1]
    """

    def __init__(self, edges: Sequence[Segment], node_capacity: int = DEFAULT_NODE_CAPACITY):
        if node_capacity < 2:
            raise ConfigurationError("node_capacity must be at least 2")
        self.edges = list(edges)
        self.extents = [Extent.of_segment(start, end) for start, end in self.edges]
        self.node_capacity = node_capacity
        self.rootnode: Optional[TreeNode] = self._bulk_load()

    def __len__(self) -> int:
        return len(self.edges)

    def _bulk_load(self) -> Optional[TreeNode]:
        if not self.edges:
            return None

        nodes: List[TreeNode] = []
        for group in _str_groups(_centers(self.extents), self.node_capacity):
            indices = sorted(group.tolist())
            nodes.append(STRLeafNode(indices, [self.extents[i] for i in indices]))

        while len(nodes) > 1:
            node_extents = [node.extent for node in nodes]
            parents: List[TreeNode] = []
            for group in _str_groups(_centers(node_extents), self.node_capacity):
                children = [nodes[i] for i in group]
                extent = reduce(Extent.union, (node_extents[i] for i in group))
                parents.append(STRNode(children, extent))
            nodes = parents

        return nodes[0]


def dual_query(
    tree_a: EdgeTree,
    tree_b: EdgeTree,
    edges_a: Optional[Sequence[Segment]] = None,
    edges_b: Optional[Sequence[Segment]] = None,
) -> OverlapMap:
    """Find, for every edge of ``tree_a``, the edges of ``tree_b`` whose boxes overlap.

    Args:
        tree_a: Tree over the first edge set
        tree_b: Tree over the second edge set
        edges_a: Edges used for the final per-edge box test (defaults to the
            edges the tree was built from)
        edges_b: Same for ``tree_b``

    Returns:
        List of ``(index_a, [index_b, ...])`` pairs sorted by ``index_a``, each
        candidate list sorted ascending. Edges of A without candidates are
        left out.

    Examples:
        >>> tree_a = EdgeTree([((0.0, 0.0), (1.0, 1.0))])
        >>> tree_b = EdgeTree([((0.5, 0.5), (1.5, 1.5)), ((5.0, 5.0), (6.0, 6.0))])
        >>> dual_query(tree_a, tree_b)
        [(0, [0])]
    """
    if tree_a.rootnode is None or tree_b.rootnode is None:
        return []

    extents_a = tree_a.extents if edges_a is None else [Extent.of_segment(*e) for e in edges_a]
    extents_b = tree_b.extents if edges_b is None else [Extent.of_segment(*e) for e in edges_b]

    overlap_map: Dict[int, List[int]] = {}
    _dual_tree_traverse(overlap_map, tree_a.rootnode, tree_b.rootnode, extents_a, extents_b)
    return [(idx_a, sorted(set(overlap_map[idx_a]))) for idx_a in sorted(overlap_map)]


def _dual_tree_traverse(
    overlap_map: Dict[int, List[int]],
    node_a: TreeNode,
    node_b: TreeNode,
    extents_a: Sequence[Extent],
    extents_b: Sequence[Extent],
) -> None:
    if not node_a.extent.intersects(node_b.extent):
        return

    a_is_leaf = isinstance(node_a, STRLeafNode)
    b_is_leaf = isinstance(node_b, STRLeafNode)

    if a_is_leaf and b_is_leaf:
        for idx_a in node_a.indices:
            extent_a = extents_a[idx_a]
            for idx_b in node_b.indices:
                if extent_a.intersects(extents_b[idx_b]):
                    overlap_map.setdefault(idx_a, []).append(idx_b)
        return

    if a_is_leaf:
        for child_b in node_b.children:
            _dual_tree_traverse(overlap_map, node_a, child_b, extents_a, extents_b)
        return

    if b_is_leaf:
        for child_a in node_a.children:
            _dual_tree_traverse(overlap_map, child_a, node_b, extents_a, extents_b)
        return

    for child_a in node_a.children:
        for child_b in node_b.children:
            _dual_tree_traverse(overlap_map, child_a, child_b, extents_a, extents_b)


__all__ = [
    'EdgeTree',
    'STRNode',
    'STRLeafNode',
    'OverlapMap',
    'dual_query',
]
