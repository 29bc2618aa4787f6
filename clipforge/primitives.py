"""Segment and extent primitives used by the clipping engine.

All functions operate on ``(x, y)`` tuples and never convert their inputs, so
arithmetic stays in whatever float type the caller's coordinates carry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

from .core.types import BoundaryExclusion, PointRingRelation, SegmentRelation

Point = Tuple[float, float]
Segment = Tuple[Point, Point]


@dataclass(frozen=True)
class Extent:
    """Axis-aligned bounding box.

    Attributes:
        xmin, xmax, ymin, ymax: Box limits (inclusive)
    """

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Extent":
        """Smallest extent containing all points."""
        xs, ys = zip(*points)
        return cls(min(xs), max(xs), min(ys), max(ys))

    @classmethod
    def of_segment(cls, start: Point, end: Point) -> "Extent":
        """Extent of a two-point segment."""
        x1, y1 = start
        x2, y2 = end
        return cls(min(x1, x2), max(x1, x2), min(y1, y2), max(y1, y2))

    def union(self, other: "Extent") -> "Extent":
        """Smallest extent containing both boxes."""
        return Extent(
            min(self.xmin, other.xmin),
            max(self.xmax, other.xmax),
            min(self.ymin, other.ymin),
            max(self.ymax, other.ymax),
        )

    def intersects(self, other: "Extent") -> bool:
        """True if the boxes overlap or touch."""
        return (
            self.xmin <= other.xmax
            and other.xmin <= self.xmax
            and self.ymin <= other.ymax
            and other.ymin <= self.ymax
        )


class SegmentIntersection(NamedTuple):
    """Result of :func:`segment_intersection`.

    Attributes:
        kind: How the segments relate
        point: Crossing point (None unless kind is CROSSING)
        alpha: Parametric position of the crossing along the first segment
        beta: Parametric position of the crossing along the second segment
    """

    kind: SegmentRelation
    point: Optional[Point] = None
    alpha: Optional[float] = None
    beta: Optional[float] = None


_NO_INTERSECTION = SegmentIntersection(SegmentRelation.NO_INTERSECTION)
_COLLINEAR = SegmentIntersection(SegmentRelation.COLLINEAR)


def _snap_parameter(t, tolerance):
    if -tolerance <= t <= tolerance:
        return type(t)(0)
    if 1 - tolerance <= t <= 1 + tolerance:
        return type(t)(1)
    return t


def segment_intersection(
    a1: Point,
    a2: Point,
    b1: Point,
    b2: Point,
    tolerance: float = 0.0,
) -> SegmentIntersection:
    """Intersect segment a1-a2 with segment b1-b2.

    Solves ``a1 + alpha * (a2 - a1) == b1 + beta * (b2 - b1)`` with 2D cross
    products. Endpoint hits return the endpoint itself so that crossings on a
    vertex compare equal to that vertex.

    Args:
        a1, a2: First segment
        b1, b2: Second segment
        tolerance: Parameters within this distance of 0 or 1 are snapped to
            the endpoint, so a vertex lying on the other segment is found with
            the same parameter from both edges sharing it

    Returns:
        SegmentIntersection. Parallel segments on a common line that overlap
        are COLLINEAR (no point); zero-length segments never intersect.

    Examples:
        >>> result = segment_intersection((0, 0), (2, 0), (1, -1), (1, 1))
        >>> result.kind, result.point, result.alpha, result.beta
        (<SegmentRelation.CROSSING: 'crossing'>, (1.0, 0.0), 0.5, 0.5)
    """
    ax = a2[0] - a1[0]
    ay = a2[1] - a1[1]
    bx = b2[0] - b1[0]
    by = b2[1] - b1[1]
    if (ax == 0 and ay == 0) or (bx == 0 and by == 0):
        return _NO_INTERSECTION

    dx = b1[0] - a1[0]
    dy = b1[1] - a1[1]
    denom = ax * by - ay * bx

    if denom == 0:
        if dx * ay - dy * ax != 0:
            return _NO_INTERSECTION
        # Same line: overlap if the projections of b onto a meet [0, 1]
        length_sq = ax * ax + ay * ay
        t1 = (dx * ax + dy * ay) / length_sq
        t2 = ((b2[0] - a1[0]) * ax + (b2[1] - a1[1]) * ay) / length_sq
        if max(t1, t2) < 0 or min(t1, t2) > 1:
            return _NO_INTERSECTION
        return _COLLINEAR

    alpha = (dx * by - dy * bx) / denom
    beta = (dx * ay - dy * ax) / denom
    if tolerance:
        alpha = _snap_parameter(alpha, tolerance)
        beta = _snap_parameter(beta, tolerance)
    if not (0 <= alpha <= 1 and 0 <= beta <= 1):
        return _NO_INTERSECTION

    if alpha == 0:
        point = a1
    elif alpha == 1:
        point = a2
    elif beta == 0:
        point = b1
    elif beta == 1:
        point = b2
    else:
        point = (a1[0] + alpha * ax, a1[1] + alpha * ay)
    return SegmentIntersection(SegmentRelation.CROSSING, point, alpha, beta)


def point_on_segment(
    point: Point,
    segment: Segment,
    exclude_boundary: BoundaryExclusion = BoundaryExclusion.NONE,
) -> bool:
    """Check whether ``point`` lies on ``segment``.

    The collinearity test is exact. The range test runs along the dominant
    axis of the segment and is strict at the endpoints named by
    ``exclude_boundary``.

    Args:
        point: Point to test
        segment: (start, end) pair
        exclude_boundary: Endpoints that do not count as on the segment

    Returns:
        True if the point is on the (partially open) segment. Zero-length
        segments contain only their single point, and only when no endpoint
        is excluded.
    """
    x, y = point
    (x1, y1), (x2, y2) = segment
    dx = x2 - x1
    dy = y2 - y1

    if (x - x1) * dy - (y - y1) * dx != 0:
        return False
    if dx == 0 and dy == 0:
        return exclude_boundary is BoundaryExclusion.NONE and x == x1 and y == y1

    if abs(dx) >= abs(dy):
        lo, hi, value = x1, x2, x
        ascending = dx > 0
    else:
        lo, hi, value = y1, y2, y
        ascending = dy > 0
    if not ascending:
        lo, hi = hi, lo

    strict_start = exclude_boundary in (BoundaryExclusion.START, BoundaryExclusion.BOTH)
    strict_end = exclude_boundary in (BoundaryExclusion.END, BoundaryExclusion.BOTH)
    # After the swap, lo belongs to the start only on ascending segments
    strict_lo, strict_hi = (strict_start, strict_end) if ascending else (strict_end, strict_start)

    above_lo = lo < value if strict_lo else lo <= value
    below_hi = value < hi if strict_hi else value <= hi
    return above_lo and below_hi


def point_in_ring(point: Point, ring: Sequence[Point]) -> PointRingRelation:
    """Locate a point relative to an implicitly closed ring.

    Uses even-odd ray casting towards +x, with an exact on-boundary check
    for every edge first.

    Args:
        point: Point to locate
        ring: Ring vertices (closing point optional)

    Returns:
        INSIDE, OUTSIDE or ON_BOUNDARY
    """
    x, y = point
    inside = False
    n = len(ring)
    for i in range(n):
        start = ring[i]
        end = ring[(i + 1) % n]
        if point_on_segment(point, (start, end)):
            return PointRingRelation.ON_BOUNDARY
        x1, y1 = start
        x2, y2 = end
        if (y1 > y) != (y2 > y):
            x_cross = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
            if x < x_cross:
                inside = not inside
    return PointRingRelation.INSIDE if inside else PointRingRelation.OUTSIDE


def point_in_polygon(
    point: Point,
    exterior: Sequence[Point],
    holes: Iterable[Sequence[Point]] = (),
) -> PointRingRelation:
    """Locate a point relative to a polygon with holes."""
    relation = point_in_ring(point, exterior)
    if relation is not PointRingRelation.INSIDE:
        return relation
    for hole in holes:
        hole_relation = point_in_ring(point, hole)
        if hole_relation is PointRingRelation.INSIDE:
            return PointRingRelation.OUTSIDE
        if hole_relation is PointRingRelation.ON_BOUNDARY:
            return hole_relation
    return PointRingRelation.INSIDE


def ring_edges(ring: Sequence[Point]) -> list:
    """Edges of an implicitly closed ring, edge ``i`` running from vertex ``i``."""
    n = len(ring)
    return [(ring[i], ring[(i + 1) % n]) for i in range(n)]


def midpoint(p: Point, q: Point) -> Point:
    return ((p[0] + q[0]) / 2, (p[1] + q[1]) / 2)


__all__ = [
    'Extent',
    'SegmentIntersection',
    'segment_intersection',
    'point_on_segment',
    'point_in_ring',
    'point_in_polygon',
    'ring_edges',
    'midpoint',
]
