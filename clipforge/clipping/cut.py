"""Split a polygon along a straight line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from shapely.geometry import LineString, Polygon

from ..config import ClipConfig, resolve_config
from ..core.errors import DegenerateIntersectionError, NotImplementedOperationError, ValidationError
from ..core.geometry_utils import (
    Point,
    Ring,
    as_geometry,
    clean_ring,
    geometry_kind,
    is_degenerate_ring,
    polygon_to_rings,
    rings_to_polygon,
)
from ..core.types import GeometryKind, SegmentRelation
from ..primitives import ring_edges, segment_intersection
from .engine import split_ring, subtract_holes


@dataclass
class _CutNode:
    point: Point
    inter: bool = False
    partner: int = -1


def _side(point: Point, line_start: Point, line_end: Point) -> int:
    cross = (line_end[0] - line_start[0]) * (point[1] - line_start[1]) - (
        line_end[1] - line_start[1]
    ) * (point[0] - line_start[0])
    return int(np.sign(cross))


def _line_endpoints(line, dtype) -> Tuple[Point, Point]:
    if isinstance(line, LineString):
        coords = list(line.coords)
    else:
        coords = list(line)
    if len(coords) != 2:
        raise ValidationError(f"Cut line must have exactly two points, got {len(coords)}")
    points = np.asarray([c[:2] for c in coords], dtype=dtype)
    start, end = (tuple(p) for p in points)
    if start == end:
        raise ValidationError("Cut line endpoints must differ")
    return start, end


def _line_crossings(ring: Ring, line_start: Point, line_end: Point, tolerance: float):
    """Points where the ring passes from one side of the line to the other.

    Returns (edge, alpha, beta, point) tuples. A crossing on a vertex is
    recorded at the start of the following edge. Where the ring runs along
    the line, only the end of that stretch counts.
    """
    n = len(ring)
    sides = [_side(point, line_start, line_end) for point in ring]
    found = {}
    for i, (start, end) in enumerate(ring_edges(ring)):
        result = segment_intersection(start, end, line_start, line_end, tolerance)
        if result.kind is not SegmentRelation.CROSSING:
            continue
        if result.alpha == 1:
            edge, alpha = (i + 1) % n, type(result.alpha)(0)
        else:
            edge, alpha = i, result.alpha
        if (edge, alpha) in found:
            continue
        point = ring[edge] if alpha == 0 else result.point

        after = sides[(edge + 1) % n]
        if after == 0:
            continue
        # On a vertex the side before comes from the previous vertex
        last = edge - 1 if alpha == 0 else edge
        before = 0
        for step in range(n):
            before = sides[(last - step) % n]
            if before != 0:
                break
        if before * after < 0:
            found[(edge, alpha)] = (edge, alpha, result.beta, point)
    return sorted(found.values(), key=lambda c: (c[0], c[1]))


def _walk_pieces(ring: Ring, crossings) -> List[Ring]:
    nodes: List[_CutNode] = []
    positions = []
    k = 0
    for i, point in enumerate(ring):
        nodes.append(_CutNode(point))
        while k < len(crossings) and crossings[k][0] == i:
            positions.append(len(nodes))
            nodes.append(_CutNode(crossings[k][3], inter=True))
            k += 1

    # Pair crossings that are consecutive along the line into chords
    order = sorted(range(len(crossings)), key=lambda c: crossings[c][2])
    for first, second in zip(order[0::2], order[1::2]):
        nodes[positions[first]].partner = positions[second]
        nodes[positions[second]].partner = positions[first]

    n = len(nodes)
    visited = [False] * n
    pieces: List[Ring] = []
    for start in range(n):
        if visited[start] or nodes[start].inter:
            continue
        points = []
        pos = start
        for _ in range(2 * n + 1):
            visited[pos] = True
            points.append(nodes[pos].point)
            if nodes[pos].inter:
                pos = nodes[pos].partner
                visited[pos] = True
                points.append(nodes[pos].point)
            pos = (pos + 1) % n
            if pos == start:
                break
        else:
            raise DegenerateIntersectionError("Cut walk did not return to its start")
        piece = clean_ring(points)
        if not is_degenerate_ring(piece):
            pieces.append(piece)
    return pieces


def cut(
    polygon,
    line,
    dtype: Optional[type] = None,
    config: Optional[ClipConfig] = None,
) -> List[Polygon]:
    """Cut a polygon into pieces along a straight line.

    The line must pass fully through the polygon: its two endpoints lie
    outside it. Holes are removed from every piece afterwards.

    Args:
        polygon: Polygon (or exterior coordinates) to cut
        line: LineString or pair of points
        dtype: Numpy float type for all arithmetic
        config: Engine settings

    Returns:
        The pieces, or ``[polygon]`` if the line does not cross the
        exterior at least twice

    Raises:
        NotImplementedOperationError: If ``polygon`` is not a Polygon
        ValidationError: If ``line`` is not a two-point line

    Examples:
        >>> square = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
        >>> [p.area for p in cut(square, [(5, -1), (5, 11)])]
        [50.0, 50.0]
    """
    config = resolve_config(config, dtype)
    geometry = as_geometry(polygon)
    kind = geometry_kind(geometry)
    if kind is not GeometryKind.POLYGON:
        raise NotImplementedOperationError('cut', kind.value)

    exterior, holes = polygon_to_rings(geometry, config.dtype)
    line_start, line_end = _line_endpoints(line, config.dtype)
    tolerance = float(np.finfo(config.dtype).eps) * 64

    crossings = _line_crossings(exterior, line_start, line_end, tolerance)
    if len(crossings) < 2 or len(crossings) % 2:
        return [geometry]

    try:
        rings = _walk_pieces(exterior, crossings)
    except DegenerateIntersectionError:
        return [geometry]

    pieces = [piece for ring in rings for piece in split_ring(ring, config)]
    pieces = subtract_holes(pieces, holes, config)
    return [rings_to_polygon(piece_exterior, piece_holes) for piece_exterior, piece_holes in pieces]


__all__ = ['cut']
