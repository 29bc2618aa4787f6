"""Area measurements for clipforge geometries.

Areas are computed from the engine's own rings in the requested numeric type
rather than read from shapely, so results agree with what the clipping
engine sees.
"""

from __future__ import annotations

from typing import Iterable, Optional

from shapely.geometry import MultiPolygon
from shapely.geometry.base import BaseGeometry

from .config import resolve_config
from .core.errors import NotImplementedOperationError
from .core.geometry_utils import as_geometry, geometry_kind, polygon_to_rings, ring_signed_area
from .core.types import GeometryKind
from .correction import union_correct

_ZERO_AREA_KINDS = (
    GeometryKind.POINT,
    GeometryKind.MULTIPOINT,
    GeometryKind.LINESTRING,
    GeometryKind.LINEARRING,
    GeometryKind.MULTILINESTRING,
)


def signed_area(geometry, dtype: Optional[type] = None):
    """Signed area of a polygon, positive when the exterior runs clockwise.

    Holes always reduce the magnitude, whatever their own orientation.
    Points and lines have zero area.

    Args:
        geometry: Polygon (or exterior coordinates), point or line
        dtype: Numpy float type for the computation

    Returns:
        Scalar of ``dtype``

    Raises:
        NotImplementedOperationError: For multi-part geometries, which have
            no single orientation

    Examples:
        >>> signed_area(Polygon([(0, 0), (0, 1), (1, 1), (1, 0)]))
        1.0
        >>> signed_area(Polygon([(0, 0), (1, 0), (1, 1), (0, 1)]))
        -1.0
    """
    dtype = resolve_config(dtype=dtype).dtype
    geometry = as_geometry(geometry)
    kind = geometry_kind(geometry)
    if kind in _ZERO_AREA_KINDS or geometry.is_empty:
        return dtype(0)
    if kind is not GeometryKind.POLYGON:
        raise NotImplementedOperationError('signed_area', kind.value)

    exterior, holes = polygon_to_rings(geometry, dtype)
    exterior_area = ring_signed_area(exterior)
    magnitude = abs(exterior_area) - sum(abs(ring_signed_area(hole)) for hole in holes)
    # Shoelace is counter-clockwise positive
    return dtype(-magnitude if exterior_area > 0 else magnitude)


def area(geometry, dtype: Optional[type] = None):
    """Unsigned area of a geometry.

    Polygons contribute their exterior area minus their holes, multi-part
    geometries sum their parts, points and lines contribute zero.

    Examples:
        >>> area(Polygon([(0, 0), (2, 0), (2, 2), (0, 2)]))
        4.0
    """
    dtype = resolve_config(dtype=dtype).dtype
    geometry = as_geometry(geometry)
    kind = geometry_kind(geometry)
    if kind in _ZERO_AREA_KINDS or geometry.is_empty:
        return dtype(0)
    if kind is GeometryKind.POLYGON:
        return abs(signed_area(geometry, dtype))
    return dtype(sum(area(part, dtype) for part in geometry.geoms))


def total_overlap_area(geometries: Iterable[BaseGeometry], dtype: Optional[type] = None):
    """Area counted more than once within ``geometries``.

    Computed as the summed area of the polygons minus the area of their
    union-corrected combination.
    """
    dtype = resolve_config(dtype=dtype).dtype
    polygons = []
    for geometry in geometries:
        if geometry is None or geometry.is_empty:
            continue
        if geometry_kind(geometry) is GeometryKind.MULTIPOLYGON:
            polygons.extend(geometry.geoms)
        elif geometry_kind(geometry) is GeometryKind.POLYGON:
            polygons.append(geometry)
    if len(polygons) < 2:
        return dtype(0)
    combined = sum(area(polygon, dtype) for polygon in polygons)
    merged = union_correct(MultiPolygon(polygons), dtype=dtype)
    return dtype(max(combined - area(merged, dtype), 0))


__all__ = [
    'area',
    'signed_area',
    'total_overlap_area',
]
