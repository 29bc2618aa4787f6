"""Spatial predicates built on the engine primitives.

Geometries are converted to coordinate parts (points, polylines, polygons)
in the requested numeric type; every predicate then works on those parts
without going back to shapely.
"""

from typing import Callable, List, Optional

import numpy as np
from shapely.geometry.base import BaseGeometry

from .clipping.dispatch import difference
from .config import resolve_config
from .core.errors import NotImplementedOperationError
from .core.geometry_utils import as_geometry, geometry_kind, polygon_to_rings
from .core.types import BoundaryExclusion, GeometryKind, PointRingRelation, SegmentRelation
from .metrics import area
from .primitives import (
    Point,
    Segment,
    point_in_polygon,
    point_on_segment,
    segment_intersection,
)
from .relate import Part, PartKind, parts_intersect, part_segments, candidate_segment_pairs

_POINT_KINDS = (GeometryKind.POINT, GeometryKind.MULTIPOINT)
_LINE_KINDS = (GeometryKind.LINESTRING, GeometryKind.LINEARRING, GeometryKind.MULTILINESTRING)
_POLYGON_KINDS = (GeometryKind.POLYGON, GeometryKind.MULTIPOLYGON)


def _coords(coords, dtype) -> List[Point]:
    array = np.asarray(coords, dtype=dtype)
    if array.size == 0:
        return []
    return [(x, y) for x, y in array[:, :2]]


def to_parts(geometry: BaseGeometry, dtype=np.float64) -> List[Part]:
    """Split a geometry into point, line and polygon parts.

    Raises:
        NotImplementedOperationError: For geometry kinds without parts
    """
    kind = geometry_kind(geometry)
    if geometry.is_empty:
        return []
    if kind is GeometryKind.POINT:
        return [Part(PartKind.POINT, _coords(geometry.coords, dtype))]
    if kind in (GeometryKind.LINESTRING, GeometryKind.LINEARRING):
        return [Part(PartKind.LINE, _coords(geometry.coords, dtype))]
    if kind is GeometryKind.POLYGON:
        return [Part(PartKind.POLYGON, polygon_to_rings(geometry, dtype))]
    if kind in (GeometryKind.MULTIPOINT, GeometryKind.MULTILINESTRING,
                GeometryKind.MULTIPOLYGON, GeometryKind.GEOMETRYCOLLECTION):
        parts: List[Part] = []
        for geom in geometry.geoms:
            parts.extend(to_parts(geom, dtype))
        return parts
    raise NotImplementedOperationError('to_parts', kind.value)


def intersects(geom_a, geom_b, dtype: Optional[type] = None) -> bool:
    """True if the geometries share at least one point.

    Boundary contact counts, so polygons sharing only an edge or a vertex
    intersect.

    Args:
        geom_a: Any point, line or polygon geometry (or polygon coordinates)
        geom_b: Same for the second geometry
        dtype: Numpy float type for all arithmetic

    Returns:
        Whether the geometries intersect

    Examples:
        >>> a = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> b = Polygon([(1, 0), (2, 0), (2, 1), (1, 1)])
        >>> intersects(a, b)
        True
    """
    dtype = resolve_config(dtype=dtype).dtype
    parts_a = to_parts(as_geometry(geom_a), dtype)
    parts_b = to_parts(as_geometry(geom_b), dtype)
    return any(parts_intersect(part_a, part_b) for part_a in parts_a for part_b in parts_b)


def _split_parameters(segment: Segment, cutters: List[Segment]) -> List[float]:
    """Sorted parameters along ``segment`` where it meets ``cutters``, ends included."""
    start, end = segment
    params = {0.0, 1.0}
    for c_start, c_end in cutters:
        result = segment_intersection(start, end, c_start, c_end)
        if result.kind is SegmentRelation.CROSSING:
            params.add(float(result.alpha))
        elif result.kind is SegmentRelation.COLLINEAR:
            for point in (c_start, c_end):
                t = _project(point, segment)
                if 0 < t < 1:
                    params.add(t)
    return sorted(params)


def _project(point: Point, segment: Segment) -> float:
    (x1, y1), (x2, y2) = segment
    dx, dy = x2 - x1, y2 - y1
    return float(((point[0] - x1) * dx + (point[1] - y1) * dy) / (dx * dx + dy * dy))


def _sub_segment_midpoints(segment: Segment, cutters: List[Segment]) -> List[Point]:
    (x1, y1), (x2, y2) = segment
    if x1 == x2 and y1 == y2:
        return [segment[0]]
    params = _split_parameters(segment, cutters)
    points = []
    for t0, t1 in zip(params[:-1], params[1:]):
        t = (t0 + t1) / 2
        points.append((x1 + t * (x2 - x1), y1 + t * (y2 - y1)))
    return points


def _line_interior_exclusion(index: int, n_segments: int) -> BoundaryExclusion:
    if n_segments == 1:
        return BoundaryExclusion.BOTH
    if index == 0:
        return BoundaryExclusion.START
    if index == n_segments - 1:
        return BoundaryExclusion.END
    return BoundaryExclusion.NONE


def _on_line_interior(point: Point, line: Part) -> bool:
    segments = part_segments(line)
    closed = line.coords[0] == line.coords[-1]
    return any(
        point_on_segment(
            point,
            segment,
            BoundaryExclusion.NONE if closed else _line_interior_exclusion(i, len(segments)),
        )
        for i, segment in enumerate(segments)
    )


def _polygon_relation(point: Point, polygon: Part) -> PointRingRelation:
    exterior, holes = polygon.coords
    return point_in_polygon(point, exterior, holes)


def _multipoint_crosses_line(points: List[Part], lines: List[Part]) -> bool:
    coords = [part.coords[0] for part in points]
    on_interior = [any(_on_line_interior(p, line) for line in lines) for p in coords]
    return any(on_interior) and not all(on_interior)


def _multipoint_crosses_polygon(points: List[Part], polygons: List[Part]) -> bool:
    relations = [
        [_polygon_relation(part.coords[0], polygon) for polygon in polygons] for part in points
    ]
    has_inside = any(PointRingRelation.INSIDE in rels for rels in relations)
    has_outside = any(all(r is PointRingRelation.OUTSIDE for r in rels) for rels in relations)
    return has_inside and has_outside


def _at_line_end(index: int, t, n_segments: int, closed: bool) -> bool:
    if closed:
        return False
    return (index == 0 and t == 0) or (index == n_segments - 1 and t == 1)


def _line_crosses_line(lines_a: List[Part], lines_b: List[Part]) -> bool:
    found_crossing = False
    for line_a in lines_a:
        segments_a = part_segments(line_a)
        closed_a = line_a.coords[0] == line_a.coords[-1]
        for line_b in lines_b:
            segments_b = part_segments(line_b)
            closed_b = line_b.coords[0] == line_b.coords[-1]
            for i, j in candidate_segment_pairs(segments_a, segments_b):
                result = segment_intersection(*segments_a[i], *segments_b[j])
                if result.kind is SegmentRelation.COLLINEAR:
                    return False
                if result.kind is not SegmentRelation.CROSSING:
                    continue
                if not (
                    _at_line_end(i, result.alpha, len(segments_a), closed_a)
                    or _at_line_end(j, result.beta, len(segments_b), closed_b)
                ):
                    found_crossing = True
    return found_crossing


def _line_crosses_polygon(lines: List[Part], polygons: List[Part]) -> bool:
    cutters = [segment for polygon in polygons for segment in part_segments(polygon)]
    inside = outside = False
    for line in lines:
        for segment in part_segments(line):
            for point in _sub_segment_midpoints(segment, cutters):
                relations = [_polygon_relation(point, polygon) for polygon in polygons]
                if PointRingRelation.INSIDE in relations:
                    inside = True
                elif all(r is PointRingRelation.OUTSIDE for r in relations):
                    outside = True
                if inside and outside:
                    return True
    return False


def _crosses_dispatch(kind_a: GeometryKind, kind_b: GeometryKind) -> Optional[Callable]:
    if kind_a is GeometryKind.MULTIPOINT and kind_b in _LINE_KINDS:
        return _multipoint_crosses_line
    if kind_a is GeometryKind.MULTIPOINT and kind_b in _POLYGON_KINDS:
        return _multipoint_crosses_polygon
    if kind_a in _LINE_KINDS and kind_b in _LINE_KINDS:
        return _line_crosses_line
    if kind_a in _LINE_KINDS and kind_b in _POLYGON_KINDS:
        return _line_crosses_polygon
    return None


def crosses(geom_a, geom_b, dtype: Optional[type] = None) -> bool:
    """True if the geometries cross.

    Supported pairs (in either order): multipoint/line, multipoint/polygon,
    line/line and line/polygon. Two lines cross when they meet at a point
    interior to both without overlapping; a line crosses a polygon when it
    has parts both inside and outside of it; a multipoint crosses a line or
    polygon when some of its points lie in the other geometry's interior
    and some do not.

    Raises:
        NotImplementedOperationError: For any other pair
    """
    dtype = resolve_config(dtype=dtype).dtype
    geom_a = as_geometry(geom_a)
    geom_b = as_geometry(geom_b)
    kind_a = geometry_kind(geom_a)
    kind_b = geometry_kind(geom_b)

    handler = _crosses_dispatch(kind_a, kind_b)
    if handler is None:
        handler = _crosses_dispatch(kind_b, kind_a)
        if handler is None:
            raise NotImplementedOperationError('crosses', kind_a.value, kind_b.value)
        geom_a, geom_b = geom_b, geom_a

    parts_a = to_parts(geom_a, dtype)
    parts_b = to_parts(geom_b, dtype)
    if not parts_a or not parts_b:
        return False
    return handler(parts_a, parts_b)


def _dimension(kind: GeometryKind) -> int:
    if kind in _POINT_KINDS:
        return 0
    if kind in _LINE_KINDS:
        return 1
    if kind in _POLYGON_KINDS:
        return 2
    raise NotImplementedOperationError('coveredby', kind.value)


def _point_covered(point: Point, parts_b: List[Part]) -> bool:
    for part in parts_b:
        if part.kind is PartKind.POINT and part.coords[0] == point:
            return True
        if part.kind is PartKind.LINE and any(point_on_segment(point, s) for s in part_segments(part)):
            return True
        if part.kind is PartKind.POLYGON and _polygon_relation(point, part) is not PointRingRelation.OUTSIDE:
            return True
    return False


def _line_covered(line: Part, parts_b: List[Part]) -> bool:
    cutters = [segment for part in parts_b for segment in part_segments(part)]
    for point in line.coords:
        if not _point_covered(point, parts_b):
            return False
    for segment in part_segments(line):
        for point in _sub_segment_midpoints(segment, cutters):
            if not _point_covered(point, parts_b):
                return False
    return True


def coveredby(geom_a, geom_b, dtype: Optional[type] = None) -> bool:
    """True if no point of ``geom_a`` lies outside ``geom_b``.

    A geometry is never covered by one of lower dimension (a polygon by a
    line, a line by a point). Polygons are compared through the area left
    by their difference, which is zero when ``geom_a`` is covered.

    Args:
        geom_a: Geometry that may be covered
        geom_b: Covering geometry
        dtype: Numpy float type for all arithmetic

    Raises:
        NotImplementedOperationError: For geometry kinds without a dimension
            (geometry collections)
    """
    config = resolve_config(dtype=dtype)
    geom_a = as_geometry(geom_a)
    geom_b = as_geometry(geom_b)
    kind_a = geometry_kind(geom_a)
    kind_b = geometry_kind(geom_b)
    if _dimension(kind_a) > _dimension(kind_b):
        return False

    parts_a = to_parts(geom_a, config.dtype)
    parts_b = to_parts(geom_b, config.dtype)
    if not parts_a or not parts_b:
        return False

    if kind_a in _POLYGON_KINDS:
        remaining = difference(geom_a, geom_b, config=config)
        tolerance = float(np.finfo(config.dtype).eps) * 64 * max(area(geom_a), 1.0)
        return sum(area(piece) for piece in remaining) <= tolerance

    for part in parts_a:
        if part.kind is PartKind.POINT and not _point_covered(part.coords[0], parts_b):
            return False
        if part.kind is PartKind.LINE and not _line_covered(part, parts_b):
            return False
    return True


def covers(geom_a, geom_b, dtype: Optional[type] = None) -> bool:
    """True if no point of ``geom_b`` lies outside ``geom_a``.

    Examples:
        >>> big = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
        >>> small = Polygon([(2, 2), (4, 2), (4, 4), (2, 4)])
        >>> covers(big, small), covers(small, big)
        (True, False)
    """
    return coveredby(geom_b, geom_a, dtype=dtype)


__all__ = [
    'to_parts',
    'intersects',
    'crosses',
    'coveredby',
    'covers',
]
