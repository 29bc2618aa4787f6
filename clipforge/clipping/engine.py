"""Ring-level boolean operations shared by every polygon operation.

:func:`clip_rings` runs the full pipeline for two exterior rings: build the
intersection lists, flag entries and exits, trace the output rings, and fall
back to the containment test when there is nothing to trace.
:func:`subtract_holes` removes hole rings from a set of pieces.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..config import ClipConfig
from ..core.errors import DegenerateIntersectionError
from ..core.geometry_utils import (
    Point,
    PolygonRings,
    Ring,
    clean_ring,
    is_degenerate_ring,
    remove_spikes,
    ring_signed_area,
)
from ..core.types import BoundaryExclusion, ClipOperation
from ..primitives import Extent, point_on_segment, ring_edges
from ..tree import EdgeTree, dual_query
from .containment import find_non_cross_orientation, resolve_no_intersections
from .processor import build_intersection_lists, flag_entry_exit, trace_polynodes


def clip_rings(
    ring_a: Ring,
    ring_b: Ring,
    operation: ClipOperation,
    config: Optional[ClipConfig] = None,
) -> List[PolygonRings]:
    """Apply ``operation`` to the areas enclosed by two rings.

    Args:
        ring_a: First ring
        ring_b: Second ring
        operation: Boolean operation
        config: Engine settings

    Returns:
        List of (exterior, holes) pairs. A union of crossing rings is always a
        single pair: the largest traced loop is the exterior and every other
        loop is a hole. Traced rings that touch themselves are split by
        :func:`split_ring` first.
    """
    config = config if config is not None else ClipConfig()
    a_list, b_list, a_idx_list = build_intersection_lists(ring_a, ring_b, config)
    flag_entry_exit(a_list, b_list, ring_a, ring_b)

    try:
        traced = trace_polynodes(a_list, b_list, a_idx_list, operation)
    except DegenerateIntersectionError:
        traced = []

    pieces = [piece for ring in traced for piece in split_ring(ring, config)]
    if not pieces:
        return resolve_no_intersections(ring_a, ring_b, operation, a_list, b_list)

    if operation is ClipOperation.UNION:
        rings = [ring for exterior, holes in pieces for ring in [exterior] + holes]
        if len(rings) > 1:
            rings.sort(key=lambda ring: abs(ring_signed_area(ring)), reverse=True)
            return [(rings[0], rings[1:])]
    return pieces


def _node_ring(ring: Ring, config: ClipConfig) -> Ring:
    """Insert every vertex that lies inside another edge of the same ring into that edge."""
    edges = ring_edges(ring)
    edge_tree = EdgeTree(edges, config.node_capacity)
    vertex_tree = EdgeTree([(point, point) for point in ring], config.node_capacity)

    inserts: Dict[int, List[Point]] = {}
    for i, candidates in dual_query(edge_tree, vertex_tree):
        for j in candidates:
            if point_on_segment(ring[j], edges[i], BoundaryExclusion.BOTH):
                inserts.setdefault(i, []).append(ring[j])
    if not inserts:
        return list(ring)

    noded: List[Point] = []
    for i, (start, end) in enumerate(edges):
        noded.append(start)
        if i in inserts:
            dx, dy = end[0] - start[0], end[1] - start[1]
            along = sorted(set(inserts[i]), key=lambda p: (p[0] - start[0]) * dx + (p[1] - start[1]) * dy)
            noded.extend(along)
    return noded


def _split_at_repeats(ring: Ring) -> List[Ring]:
    """Cut a ring into loops at every vertex it visits more than once."""
    loops: List[Ring] = []
    stack: List[Point] = []
    seen: Dict[Point, int] = {}
    for point in ring:
        k = seen.get(point)
        if k is None:
            seen[point] = len(stack)
            stack.append(point)
            continue
        loops.append(stack[k:])
        for removed in stack[k + 1:]:
            del seen[removed]
        del stack[k + 1:]
    loops.append(stack)
    return loops


def split_ring(ring: Ring, config: Optional[ClipConfig] = None) -> List[PolygonRings]:
    """Split a traced ring that touches or runs along itself into simple pieces.

    Where the input rings share collinear stretches, one walk can return to a
    vertex it already passed or double back along an edge. The ring is first
    noded against itself, then cut into loops at repeated vertices. Loops
    without area (back-and-forth runs) are dropped. Loops wound like the
    largest one are exteriors; loops wound the other way are holes of the
    smallest exterior containing them.

    Args:
        ring: Open ring from the tracer
        config: Engine settings

    Returns:
        List of (exterior, holes) pairs

    Examples:
        >>> ring = [(0.0, 0.0), (0.0, 3.0), (3.0, 3.0), (3.0, 2.0), (0.0, 2.0), (0.0, 1.0), (3.0, 1.0), (3.0, 0.0)]
        >>> [exterior for exterior, _ in split_ring(ring)]
        [[(0.0, 2.0), (0.0, 3.0), (3.0, 3.0), (3.0, 2.0)], [(0.0, 0.0), (0.0, 1.0), (3.0, 1.0), (3.0, 0.0)]]
    """
    config = config if config is not None else ClipConfig()
    loops = []
    for loop in _split_at_repeats(_node_ring(clean_ring(ring), config)):
        loop = remove_spikes(clean_ring(loop))
        if not is_degenerate_ring(loop):
            loops.append(loop)
    if not loops:
        return []

    loops.sort(key=lambda loop: abs(ring_signed_area(loop)), reverse=True)
    outer_sign = ring_signed_area(loops[0]) > 0
    pieces: List[PolygonRings] = []
    for loop in loops:
        if (ring_signed_area(loop) > 0) == outer_sign:
            pieces.append((loop, []))
            continue
        containers = [piece for piece in pieces if find_non_cross_orientation(loop, piece[0])[0]]
        if containers:
            # Pieces are sorted by area, so the last container is the smallest
            containers[-1][1].append(loop)
        else:
            pieces.append((loop, []))
    return pieces


def _extents_touch(ring_a: Sequence, ring_b: Sequence) -> bool:
    return Extent.from_points(ring_a).intersects(Extent.from_points(ring_b))


def _merge_holes(exterior: Ring, holes: Sequence[Ring], config: ClipConfig) -> List[PolygonRings]:
    """Merge overlapping hole rings of one exterior.

    Returns the piece with its merged holes, plus one piece for every island
    enclosed by a merged hole (the inner ring of a union of holes).
    """
    merged: List[Ring] = []
    islands: List[Ring] = []
    for hole in holes:
        current = hole
        changed = True
        while changed:
            changed = False
            for k, other in enumerate(merged):
                if not _extents_touch(current, other):
                    continue
                pieces = clip_rings(current, other, ClipOperation.UNION, config)
                if len(pieces) == 1:
                    current, inner = pieces[0]
                    islands.extend(inner)
                    del merged[k]
                    changed = True
                    break
        merged.append(current)
    return [(exterior, merged)] + [(island, []) for island in islands]


def _subtract_ring(
    exterior: Ring,
    holes: List[Ring],
    ring: Ring,
    config: ClipConfig,
) -> List[PolygonRings]:
    if not _extents_touch(exterior, ring):
        return [(exterior, holes)]

    pieces = clip_rings(exterior, ring, ClipOperation.DIFFERENCE, config)
    if len(pieces) == 1 and not pieces[0][1] and pieces[0][0] == list(exterior):
        # Ring lies outside the exterior
        return [(exterior, holes)]

    result: List[PolygonRings] = []
    for piece_exterior, piece_holes in pieces:
        if piece_holes:
            result.extend(_merge_holes(piece_exterior, holes + piece_holes, config))
        elif holes:
            result.extend(subtract_holes([(piece_exterior, [])], holes, config))
        else:
            result.append((piece_exterior, []))
    return result


def subtract_holes(
    pieces: List[PolygonRings],
    holes: Sequence[Ring],
    config: Optional[ClipConfig] = None,
) -> List[PolygonRings]:
    """Remove every hole ring from every piece.

    A hole crossing a piece's exterior cuts the piece, a hole inside it
    becomes one of its holes (merged with overlapping existing holes), and a
    hole covering it removes the piece.

    Args:
        pieces: (exterior, holes) pairs
        holes: Rings to subtract
        config: Engine settings

    Returns:
        The remaining pieces
    """
    config = config if config is not None else ClipConfig()
    for hole in holes:
        updated: List[PolygonRings] = []
        for exterior, piece_holes in pieces:
            updated.extend(_subtract_ring(exterior, list(piece_holes), hole, config))
        pieces = updated
    return pieces


__all__ = [
    'clip_rings',
    'split_ring',
    'subtract_holes',
]
