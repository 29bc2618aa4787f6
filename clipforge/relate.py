"""Low-level spatial relations between coordinate parts.

A *part* is one of three simple shapes in engine coordinates:

* ``Part(PartKind.POINT, [p])``
* ``Part(PartKind.LINE, [p0, p1, ...])`` (open polyline)
* ``Part(PartKind.POLYGON, (exterior, holes))``

The public predicates convert shapely geometries into parts and combine the
answers; the correction loops use :func:`polygon_rings_intersect` directly.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List, NamedTuple, Sequence, Tuple

from .core.geometry_utils import Point, PolygonRings
from .core.types import PointRingRelation, SegmentRelation
from .primitives import (
    Extent,
    Segment,
    point_in_polygon,
    point_on_segment,
    ring_edges,
    segment_intersection,
)
from .tree import EdgeTree, dual_query


class PartKind(Enum):
    POINT = 'point'
    LINE = 'line'
    POLYGON = 'polygon'


class Part(NamedTuple):
    kind: PartKind
    coords: object


def part_segments(part: Part) -> List[Segment]:
    """Edges of a part (none for a point)."""
    if part.kind is PartKind.POINT:
        return []
    if part.kind is PartKind.LINE:
        points = part.coords
        return [(points[i], points[i + 1]) for i in range(len(points) - 1)]
    exterior, holes = part.coords
    segments = ring_edges(exterior)
    for hole in holes:
        segments.extend(ring_edges(hole))
    return segments


def part_vertices(part: Part) -> Sequence[Point]:
    if part.kind is PartKind.POLYGON:
        return part.coords[0]
    return part.coords


def part_extent(part: Part) -> Extent:
    return Extent.from_points(part_vertices(part))


def point_hits_part(point: Point, part: Part) -> bool:
    """True if ``point`` lies on or inside ``part``."""
    if part.kind is PartKind.POINT:
        return tuple(point) == tuple(part.coords[0])
    if part.kind is PartKind.LINE:
        return any(point_on_segment(point, segment) for segment in part_segments(part))
    exterior, holes = part.coords
    return point_in_polygon(point, exterior, holes) is not PointRingRelation.OUTSIDE


def candidate_segment_pairs(
    segments_a: Sequence[Segment],
    segments_b: Sequence[Segment],
) -> Iterator[Tuple[int, int]]:
    """Yield index pairs of segments whose extents overlap."""
    tree_a = EdgeTree(segments_a)
    tree_b = EdgeTree(segments_b)
    for idx_a, candidates in dual_query(tree_a, tree_b):
        for idx_b in candidates:
            yield idx_a, idx_b


def segments_meet(segments_a: Sequence[Segment], segments_b: Sequence[Segment]) -> bool:
    """True if any segment of the first list touches any of the second."""
    for i, j in candidate_segment_pairs(segments_a, segments_b):
        (a1, a2), (b1, b2) = segments_a[i], segments_b[j]
        if segment_intersection(a1, a2, b1, b2).kind is not SegmentRelation.NO_INTERSECTION:
            return True
        # Zero-length segments never intersect, so test their point directly
        if a1 == a2 and point_on_segment(a1, (b1, b2)):
            return True
        if b1 == b2 and point_on_segment(b1, (a1, a2)):
            return True
    return False


def parts_intersect(part_a: Part, part_b: Part) -> bool:
    """True if two parts share at least one point (boundary contact counts).

    Without any boundary contact the parts are either disjoint or one lies
    entirely within the other, which a single vertex of each decides.
    """
    if not part_extent(part_a).intersects(part_extent(part_b)):
        return False
    if segments_meet(part_segments(part_a), part_segments(part_b)):
        return True
    return (
        point_hits_part(part_vertices(part_a)[0], part_b)
        or point_hits_part(part_vertices(part_b)[0], part_a)
    )


def polygon_rings_intersect(rings_a: PolygonRings, rings_b: PolygonRings) -> bool:
    """:func:`parts_intersect` for two (exterior, holes) polygons."""
    return parts_intersect(Part(PartKind.POLYGON, rings_a), Part(PartKind.POLYGON, rings_b))


__all__ = [
    'PartKind',
    'Part',
    'part_segments',
    'part_vertices',
    'part_extent',
    'point_hits_part',
    'candidate_segment_pairs',
    'segments_meet',
    'parts_intersect',
    'polygon_rings_intersect',
]
