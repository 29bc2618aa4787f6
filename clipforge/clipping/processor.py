"""Intersection lists, entry/exit flags and ring tracing.

The two input rings are expanded into node lists: every original vertex plus
one node per crossing point, spliced in after the start vertex of the edge it
lies on. Crossing nodes of both lists are linked through ``neighbor`` (an
index into the other list), so the tracer can hop between rings while
walking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..config import ClipConfig
from ..core.errors import DegenerateIntersectionError
from ..core.geometry_utils import Point, Ring, clean_ring, is_degenerate_ring, remove_spikes
from ..core.types import ClipOperation, PointRingRelation, SegmentRelation
from ..primitives import midpoint, point_in_ring, ring_edges, segment_intersection
from ..tree import EdgeTree, dual_query


@dataclass
class PolyNode:
    """One entry of an intersection list.

    Attributes:
        point: Node coordinates
        idx: Index of the original ring vertex, -1 for crossing nodes
        inter: True for crossing nodes
        neighbor: Index of the partner node in the other list (crossings only)
        entry: True if walking forward from here moves into the other ring
        alpha: Position of a crossing along the edge it was inserted into
    """

    point: Point
    idx: int = -1
    inter: bool = False
    neighbor: int = -1
    entry: bool = False
    alpha: float = 0.0


class _Crossing(NamedTuple):
    point: Point
    edge_a: int
    alpha: float
    edge_b: int
    beta: float


def _parameter_tolerance(dtype) -> float:
    return float(np.finfo(dtype).eps) * 64


def _normalize(edge: int, t, n_edges: int) -> Tuple[int, float]:
    # A crossing at the end of an edge belongs to the start of the next one
    if t == 1:
        return (edge + 1) % n_edges, type(t)(0)
    return edge, t


def _candidate_pairs(ring_a: Ring, ring_b: Ring, config: ClipConfig):
    edges_a = ring_edges(ring_a)
    edges_b = ring_edges(ring_b)
    if len(ring_a) + len(ring_b) < config.tree_threshold:
        all_b = list(range(len(edges_b)))
        return edges_a, edges_b, [(i, all_b) for i in range(len(edges_a))]
    tree_a = EdgeTree(edges_a, config.node_capacity)
    tree_b = EdgeTree(edges_b, config.node_capacity)
    return edges_a, edges_b, dual_query(tree_a, tree_b)


def _find_crossings(ring_a: Ring, ring_b: Ring, config: ClipConfig) -> List[_Crossing]:
    edges_a, edges_b, candidates = _candidate_pairs(ring_a, ring_b, config)
    tolerance = _parameter_tolerance(config.dtype)
    n_a = len(edges_a)
    n_b = len(edges_b)

    crossings: List[_Crossing] = []
    seen = set()
    for i, js in candidates:
        a1, a2 = edges_a[i]
        for j in js:
            b1, b2 = edges_b[j]
            result = segment_intersection(a1, a2, b1, b2, tolerance)
            if result.kind is not SegmentRelation.CROSSING:
                continue
            edge_a, alpha = _normalize(i, result.alpha, n_a)
            edge_b, beta = _normalize(j, result.beta, n_b)
            key = (edge_a, alpha, edge_b, beta)
            if key in seen:
                continue
            seen.add(key)
            if alpha == 0:
                point = ring_a[edge_a]
            elif beta == 0:
                point = ring_b[edge_b]
            else:
                point = result.point
            crossings.append(_Crossing(point, edge_a, alpha, edge_b, beta))
    return crossings


def _splice(ring: Ring, crossings: Sequence[_Crossing], on_a: bool):
    by_edge: Dict[int, List[int]] = {}
    for k, crossing in enumerate(crossings):
        edge = crossing.edge_a if on_a else crossing.edge_b
        by_edge.setdefault(edge, []).append(k)

    nodes: List[PolyNode] = []
    positions = [0] * len(crossings)
    for i, point in enumerate(ring):
        nodes.append(PolyNode(point, idx=i))
        if i not in by_edge:
            continue
        if on_a:
            order = sorted(by_edge[i], key=lambda k: crossings[k].alpha)
        else:
            order = sorted(by_edge[i], key=lambda k: crossings[k].beta)
        for k in order:
            crossing = crossings[k]
            positions[k] = len(nodes)
            alpha = crossing.alpha if on_a else crossing.beta
            nodes.append(PolyNode(crossing.point, inter=True, alpha=alpha))
    return nodes, positions


def _assemble(ring_a: Ring, ring_b: Ring, crossings: Sequence[_Crossing]):
    a_list, a_positions = _splice(ring_a, crossings, on_a=True)
    b_list, b_positions = _splice(ring_b, crossings, on_a=False)
    for pos_a, pos_b in zip(a_positions, b_positions):
        a_list[pos_a].neighbor = pos_b
        b_list[pos_b].neighbor = pos_a
    return a_list, b_list, a_positions


def _sub_edge_relations(nodes: Sequence[PolyNode], other_ring: Ring) -> List[Optional[PointRingRelation]]:
    """Relation of each sub-edge ``i -> i + 1`` to ``other_ring`` (None if zero length)."""
    n = len(nodes)
    relations: List[Optional[PointRingRelation]] = []
    for i in range(n):
        p = nodes[i].point
        q = nodes[(i + 1) % n].point
        relations.append(None if p == q else point_in_ring(midpoint(p, q), other_ring))
    return relations


def _is_real_crossing(pos: int, relations: Sequence[Optional[PointRingRelation]]) -> bool:
    """Check whether ring A passes from one side of ring B to the other at ``pos``.

    The side after the node is taken from the first non-empty sub-edge
    following it; if that sub-edge runs along B the node is not where A
    leaves the boundary, so it is not the crossing. The side before is
    taken from the nearest preceding sub-edge that is off B's boundary.
    """
    n = len(relations)
    after = None
    for step in range(n):
        after = relations[(pos + step) % n]
        if after is not None:
            break
    if after is None or after is PointRingRelation.ON_BOUNDARY:
        return False

    for step in range(1, n + 1):
        before = relations[(pos - step) % n]
        if before is not None and before is not PointRingRelation.ON_BOUNDARY:
            return before is not after
    return False


def build_intersection_lists(
    ring_a: Ring,
    ring_b: Ring,
    config: Optional[ClipConfig] = None,
) -> Tuple[List[PolyNode], List[PolyNode], List[int]]:
    """Build the linked node lists of two rings.

    Candidate edge pairs come from testing all pairs for small inputs and
    from :func:`~clipforge.tree.dual_query` once the combined vertex count
    reaches ``config.tree_threshold``. A crossing at the end of an edge is
    recorded at the start of the next one, so a crossing on a vertex appears
    exactly once. Collinear overlaps produce no node, and points where ring A
    only touches ring B are dropped together with their partner.

    Args:
        ring_a: First ring (implicitly closed)
        ring_b: Second ring (implicitly closed)
        config: Engine settings

    Returns:
        Tuple of (a_list, b_list, a_idx_list) where a_idx_list holds the
        positions of the crossing nodes in a_list, in ring order.

    Examples:
        >>> a = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]
        >>> b = [(1.0, 1.0), (3.0, 1.0), (3.0, 3.0), (1.0, 3.0)]
        >>> a_list, b_list, a_idx = build_intersection_lists(a, b)
        >>> [a_list[i].point for i in a_idx]
        [(2.0, 1.0), (1.0, 2.0)]
    """
    config = config if config is not None else ClipConfig()
    crossings = _find_crossings(ring_a, ring_b, config)
    a_list, b_list, a_positions = _assemble(ring_a, ring_b, crossings)

    relations = _sub_edge_relations(a_list, ring_b)
    keep = [_is_real_crossing(pos, relations) for pos in a_positions]
    if not all(keep):
        crossings = [c for c, kept in zip(crossings, keep) if kept]
        a_list, b_list, a_positions = _assemble(ring_a, ring_b, crossings)

    return a_list, b_list, sorted(a_positions)


def _flag_list(nodes: List[PolyNode], other_ring: Ring) -> None:
    n = len(nodes)
    relations = _sub_edge_relations(nodes, other_ring)
    for seed, relation in enumerate(relations):
        if relation is None or relation is PointRingRelation.ON_BOUNDARY:
            continue
        inside = relation is PointRingRelation.INSIDE
        for step in range(1, n + 1):
            node = nodes[(seed + step) % n]
            if node.inter:
                node.entry = not inside
                inside = not inside
        return

    # The whole ring runs along the other ring's boundary
    entry = True
    for node in nodes:
        if node.inter:
            node.entry = entry
            entry = not entry


def flag_entry_exit(
    a_list: List[PolyNode],
    b_list: List[PolyNode],
    ring_a: Ring,
    ring_b: Ring,
) -> None:
    """Mark every crossing node as an entry or an exit, in place.

    A node is an entry when walking forward along its own list moves into
    the other ring. Flags alternate along each list starting from the first
    sub-edge that lies strictly inside or outside the other ring.
    """
    _flag_list(a_list, ring_b)
    _flag_list(b_list, ring_a)


StepRule = Callable[[bool, bool], int]

_STEP_RULES: Dict[ClipOperation, StepRule] = {
    ClipOperation.INTERSECTION: lambda entry, on_a: 1 if entry else -1,
    ClipOperation.UNION: lambda entry, on_a: -1 if entry else 1,
    ClipOperation.DIFFERENCE: lambda entry, on_a: 1 if entry != on_a else -1,
}


def trace_polynodes(
    a_list: List[PolyNode],
    b_list: List[PolyNode],
    a_idx_list: Sequence[int],
    operation: ClipOperation,
) -> List[Ring]:
    """Walk the linked lists into the output rings of ``operation``.

    Every walk starts at a crossing of A that has not been passed yet and
    moves in the direction given by the operation's step rule. At each
    crossing it switches to the partner node on the other list. The walk
    ends when it comes back to its start node (or the start's partner).

    Args:
        a_list: Nodes of ring A (flags set)
        b_list: Nodes of ring B (flags set)
        a_idx_list: Positions of the crossing nodes in a_list
        operation: Boolean operation deciding the step directions

    Returns:
        Closed rings without repeated points; zero-area rings are dropped.

    Raises:
        DegenerateIntersectionError: If the crossings cannot be traced
            (fewer than two, an odd count, or a walk that never closes)
    """
    n_crossings = len(a_idx_list)
    if n_crossings < 2 or n_crossings % 2:
        raise DegenerateIntersectionError(
            f"Cannot trace {n_crossings} crossing point(s) into closed rings"
        )

    step_rule = _STEP_RULES[operation]
    max_steps = len(a_list) + len(b_list)
    processed = set()
    rings: List[Ring] = []

    for start in a_idx_list:
        if start in processed:
            continue
        processed.add(start)
        start_partner = a_list[start].neighbor

        on_a = True
        idx = start
        node = a_list[start]
        points = [node.point]
        steps = 0
        while True:
            nodes = a_list if on_a else b_list
            step = step_rule(node.entry, on_a)
            while True:
                steps += 1
                if steps > max_steps:
                    raise DegenerateIntersectionError("Ring walk did not return to its start")
                idx = (idx + step) % len(nodes)
                node = nodes[idx]
                points.append(node.point)
                if node.inter:
                    break

            if (on_a and idx == start) or (not on_a and idx == start_partner):
                break
            processed.add(idx if on_a else node.neighbor)
            idx = node.neighbor
            on_a = not on_a
            node = (a_list if on_a else b_list)[idx]

        ring = remove_spikes(clean_ring(points))
        if not is_degenerate_ring(ring):
            rings.append(ring)

    return rings


__all__ = [
    'PolyNode',
    'build_intersection_lists',
    'flag_entry_exit',
    'trace_polynodes',
]
