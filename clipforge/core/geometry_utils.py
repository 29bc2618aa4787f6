"""Conversion helpers between shapely geometries and engine coordinates.

The clipping engine works on plain rings: lists of ``(x, y)`` tuples whose
scalars have the numpy float type chosen by the caller. This module moves
geometries across that boundary in both directions.
"""

from typing import List, Sequence, Tuple, Union

import numpy as np
from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry

from .errors import ValidationError
from .types import GeometryKind

Point = Tuple[float, float]
Ring = List[Point]
PolygonRings = Tuple[Ring, List[Ring]]


def geometry_kind(geometry: BaseGeometry) -> GeometryKind:
    """Return the dispatch tag for a shapely geometry.

    Args:
        geometry: Shapely geometry

    Returns:
        Matching GeometryKind

    Raises:
        ValidationError: If the geometry type has no tag

    Examples:
        >>> geometry_kind(Polygon([(0, 0), (1, 0), (1, 1)]))
        <GeometryKind.POLYGON: 'Polygon'>
    """
    try:
        return GeometryKind(geometry.geom_type)
    except (AttributeError, ValueError):
        raise ValidationError(f"Unsupported geometry: {geometry!r}") from None


def as_geometry(obj: Union[BaseGeometry, Sequence]) -> BaseGeometry:
    """Return ``obj`` as a shapely geometry.

    Shapely geometries pass through unchanged. Any other object is read as the
    coordinate sequence of a polygon exterior.
    """
    if isinstance(obj, BaseGeometry):
        return obj
    try:
        return Polygon(obj)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Cannot interpret {obj!r} as a polygon: {e}") from e


def ring_to_points(coords, dtype=np.float64) -> Ring:
    """Convert a coordinate sequence into an open ring of points.

    A repeated closing point is dropped; Z values are ignored.

    Args:
        coords: Sequence of (x, y) or (x, y, z) coordinates
        dtype: Numpy float type used for all arithmetic on the ring

    Returns:
        List of (x, y) tuples of ``dtype`` scalars

    Raises:
        ValidationError: If the ring has fewer than 3 distinct points
    """
    vertices = np.asarray(coords, dtype=dtype)
    if vertices.ndim != 2 or vertices.shape[0] == 0 or vertices.shape[1] < 2:
        raise ValidationError("Ring must be a sequence of (x, y) coordinates")

    vertices = vertices[:, :2]
    if len(vertices) > 1 and np.array_equal(vertices[0], vertices[-1]):
        vertices = vertices[:-1]

    if len(np.unique(vertices, axis=0)) < 3:
        raise ValidationError(
            f"Ring needs at least 3 distinct points, got {len(np.unique(vertices, axis=0))}"
        )

    return [(x, y) for x, y in vertices]


def polygon_to_rings(polygon: Polygon, dtype=np.float64) -> PolygonRings:
    """Split a shapely polygon into exterior and hole rings."""
    if polygon.is_empty:
        raise ValidationError("Cannot clip an empty polygon")
    exterior = ring_to_points(polygon.exterior.coords, dtype)
    holes = [ring_to_points(interior.coords, dtype) for interior in polygon.interiors]
    return exterior, holes


def rings_to_polygon(exterior: Ring, holes: Sequence[Ring] = ()) -> Polygon:
    """Build a shapely polygon from engine rings."""
    shell = [(float(x), float(y)) for x, y in exterior]
    interiors = [[(float(x), float(y)) for x, y in hole] for hole in holes]
    return Polygon(shell, holes=interiors)


def polygon_coords(polygon: Polygon) -> List[List[Tuple[float, float]]]:
    """Return a polygon as plain nested coordinate lists.

    The first ring is the exterior, any further rings are holes. Rings are
    closed (first point repeated at the end).

    Examples:
        >>> polygon_coords(Polygon([(0, 0), (1, 0), (1, 1)]))
        [[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)]]
    """
    rings = [list(polygon.exterior.coords)]
    rings.extend(list(interior.coords) for interior in polygon.interiors)
    return [[(x, y) for x, y, *_ in ring] for ring in rings]


def polygons_of(geometry: BaseGeometry) -> List[Polygon]:
    """Return the polygon parts of a Polygon or MultiPolygon."""
    if isinstance(geometry, Polygon):
        return [] if geometry.is_empty else [geometry]
    if isinstance(geometry, MultiPolygon):
        return [p for p in geometry.geoms if not p.is_empty]
    raise ValidationError(f"Expected Polygon or MultiPolygon, got {geometry.geom_type}")


def ring_signed_area(ring: Ring):
    """Shoelace area of an implicitly closed ring (counter-clockwise positive)."""
    if len(ring) < 3:
        return 0.0
    vertices = np.asarray(ring)
    x = vertices[:, 0]
    y = vertices[:, 1]
    return (np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2


def clean_ring(points: Sequence[Point]) -> Ring:
    """Drop consecutive duplicate points, including a repeated closing point."""
    cleaned: Ring = []
    for point in points:
        if not cleaned or point != cleaned[-1]:
            cleaned.append(point)
    while len(cleaned) > 1 and cleaned[0] == cleaned[-1]:
        cleaned.pop()
    return cleaned


def remove_spikes(ring: Ring) -> Ring:
    """Drop vertices where the ring doubles back on itself.

    A vertex whose incoming and outgoing edges are collinear and point in
    opposite directions adds no area; such spikes appear when a traced ring
    runs along a shared edge and back.
    """
    ring = list(ring)
    changed = True
    while changed and len(ring) >= 3:
        changed = False
        n = len(ring)
        for i in range(n):
            px, py = ring[i - 1]
            cx, cy = ring[i]
            nx, ny = ring[(i + 1) % n]
            ux, uy = cx - px, cy - py
            vx, vy = nx - cx, ny - cy
            if ux * vy - uy * vx == 0 and ux * vx + uy * vy < 0:
                del ring[i]
                ring = clean_ring(ring)
                changed = True
                break
    return ring


def is_degenerate_ring(ring: Ring) -> bool:
    """True if the ring encloses no area or has fewer than 3 points."""
    return len(ring) < 3 or ring_signed_area(ring) == 0


__all__ = [
    'Point',
    'Ring',
    'PolygonRings',
    'geometry_kind',
    'as_geometry',
    'ring_to_points',
    'polygon_to_rings',
    'rings_to_polygon',
    'polygon_coords',
    'polygons_of',
    'ring_signed_area',
    'clean_ring',
    'remove_spikes',
    'is_degenerate_ring',
]
