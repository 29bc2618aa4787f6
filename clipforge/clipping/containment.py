"""Results for ring pairs whose boundaries never cross.

Without crossing points the outcome of every operation depends only on
whether one ring lies inside the other.
"""

from __future__ import annotations

import warnings
from typing import List, Optional, Sequence, Tuple

from ..core.errors import SharedEdgeWarning
from ..core.geometry_utils import PolygonRings, Ring
from ..core.types import ClipOperation, PointRingRelation
from ..primitives import midpoint, point_in_ring, point_on_segment, ring_edges
from .processor import PolyNode


def _representative_relation(ring: Ring, other: Ring) -> PointRingRelation:
    """Relation of ``ring`` to ``other`` read off its first vertex or edge midpoint off the boundary."""
    for point in ring:
        relation = point_in_ring(point, other)
        if relation is not PointRingRelation.ON_BOUNDARY:
            return relation
    for start, end in ring_edges(ring):
        relation = point_in_ring(midpoint(start, end), other)
        if relation is not PointRingRelation.ON_BOUNDARY:
            return relation
    return PointRingRelation.ON_BOUNDARY


def find_non_cross_orientation(ring_a: Ring, ring_b: Ring) -> Tuple[bool, bool]:
    """Decide containment for two rings whose boundaries do not cross.

    Args:
        ring_a: First ring
        ring_b: Second ring

    Returns:
        Tuple (a_in_b, b_in_a). Both are True for identical rings and both
        False for disjoint ones.

    Examples:
        >>> outer = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
        >>> inner = [(1.0, 1.0), (2.0, 1.0), (2.0, 2.0), (1.0, 2.0)]
        >>> find_non_cross_orientation(inner, outer)
        (True, False)
    """
    a_relation = _representative_relation(ring_a, ring_b)
    b_relation = _representative_relation(ring_b, ring_a)
    a_in_b = a_relation is not PointRingRelation.OUTSIDE and b_relation is not PointRingRelation.INSIDE
    b_in_a = b_relation is not PointRingRelation.OUTSIDE and a_relation is not PointRingRelation.INSIDE
    return a_in_b, b_in_a


def shares_boundary(ring_a: Ring, ring_b: Sequence) -> bool:
    """True if any vertex of ``ring_b`` lies on the boundary of ``ring_a``."""
    edges = ring_edges(ring_a)
    return any(point_on_segment(point, edge) for point in ring_b for edge in edges)


def resolve_no_intersections(
    ring_a: Ring,
    ring_b: Ring,
    operation: ClipOperation,
    a_list: Optional[List[PolyNode]] = None,
    b_list: Optional[List[PolyNode]] = None,
) -> List[PolygonRings]:
    """Result of ``operation`` for rings that are nested or disjoint.

    Args:
        ring_a: First ring
        ring_b: Second ring
        operation: Boolean operation to resolve
        a_list: Node list of ring A; its vertices (touch points included) are
            used for the shared boundary check when given
        b_list: Node list of ring B, same use

    Returns:
        List of (exterior, holes) pairs. Rings are fresh copies.

    Warns:
        SharedEdgeWarning: For a difference where B lies inside A but touches
            its boundary. The result is still A with B as a hole.
    """
    a_in_b, b_in_a = find_non_cross_orientation(ring_a, ring_b)

    if operation is ClipOperation.INTERSECTION:
        if a_in_b:
            return [(list(ring_a), [])]
        if b_in_a:
            return [(list(ring_b), [])]
        return []

    if operation is ClipOperation.UNION:
        if a_in_b:
            return [(list(ring_b), [])]
        if b_in_a:
            return [(list(ring_a), [])]
        return [(list(ring_a), []), (list(ring_b), [])]

    if a_in_b:
        return []
    if b_in_a:
        outer = [node.point for node in a_list] if a_list is not None else ring_a
        inner = [node.point for node in b_list] if b_list is not None else ring_b
        if shares_boundary(outer, inner):
            warnings.warn(
                "Hole shares its boundary with the exterior ring; "
                "the result polygon may be invalid",
                SharedEdgeWarning,
                stacklevel=3,
            )
        return [(list(ring_a), [list(ring_b)])]
    return [(list(ring_a), [])]


__all__ = [
    'find_non_cross_orientation',
    'resolve_no_intersections',
    'shares_boundary',
]
