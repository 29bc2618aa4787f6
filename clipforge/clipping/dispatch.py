"""Public boolean operations on shapely geometries.

Every supported combination of geometry kinds and operation has one entry in
a dispatch table; anything missing from the table raises
:class:`~clipforge.core.errors.NotImplementedOperationError` instead of
falling through to a generic method.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple, Union

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from ..config import ClipConfig, resolve_config
from ..core.errors import NotImplementedOperationError, ValidationError
from ..core.geometry_utils import (
    PolygonRings,
    as_geometry,
    geometry_kind,
    polygon_to_rings,
    polygons_of,
    rings_to_polygon,
)
from ..core.types import ClipOperation, GeometryKind
from .difference import difference_polygons
from .intersection import intersection_polygons
from .multipart import union_intersecting_parts
from .union import union_polygons

GeometryLike = Union[BaseGeometry, list, tuple]
Handler = Callable[[BaseGeometry, BaseGeometry, ClipConfig], List[PolygonRings]]


def _parts(geometry: BaseGeometry, config: ClipConfig) -> List[PolygonRings]:
    return [polygon_to_rings(polygon, config.dtype) for polygon in polygons_of(geometry)]


def _polygon_pair(operation: Callable) -> Handler:
    def handler(geom_a, geom_b, config):
        rings_a = polygon_to_rings(geom_a, config.dtype)
        rings_b = polygon_to_rings(geom_b, config.dtype)
        return operation(rings_a, rings_b, config)
    return handler


def _pairwise_intersection(geom_a, geom_b, config) -> List[PolygonRings]:
    pieces: List[PolygonRings] = []
    parts_b = _parts(geom_b, config)
    for rings_a in _parts(geom_a, config):
        for rings_b in parts_b:
            pieces.extend(intersection_polygons(rings_a, rings_b, config))
    return pieces


def _sequential_difference(geom_a, geom_b, config) -> List[PolygonRings]:
    parts_b = _parts(geom_b, config)
    result: List[PolygonRings] = []
    for rings_a in _parts(geom_a, config):
        pieces = [rings_a]
        for rings_b in parts_b:
            pieces = [
                piece
                for current in pieces
                for piece in difference_polygons(current, rings_b, config)
            ]
        result.extend(pieces)
    return result


def _corrected_union(geom_a, geom_b, config) -> List[PolygonRings]:
    return union_intersecting_parts(_parts(geom_a, config) + _parts(geom_b, config), config)


_POLYGON = GeometryKind.POLYGON
_MULTIPOLYGON = GeometryKind.MULTIPOLYGON

_DISPATCH: Dict[Tuple[GeometryKind, GeometryKind, ClipOperation], Handler] = {
    (_POLYGON, _POLYGON, ClipOperation.INTERSECTION): _polygon_pair(intersection_polygons),
    (_POLYGON, _POLYGON, ClipOperation.UNION): _polygon_pair(union_polygons),
    (_POLYGON, _POLYGON, ClipOperation.DIFFERENCE): _polygon_pair(difference_polygons),
}
for _kinds in ((_POLYGON, _MULTIPOLYGON), (_MULTIPOLYGON, _POLYGON), (_MULTIPOLYGON, _MULTIPOLYGON)):
    _DISPATCH[_kinds + (ClipOperation.INTERSECTION,)] = _pairwise_intersection
    _DISPATCH[_kinds + (ClipOperation.DIFFERENCE,)] = _sequential_difference
    _DISPATCH[_kinds + (ClipOperation.UNION,)] = _corrected_union


def clip(
    geom_a: GeometryLike,
    geom_b: GeometryLike,
    operation: ClipOperation,
    dtype: Optional[type] = None,
    config: Optional[ClipConfig] = None,
) -> List[Polygon]:
    """Apply a boolean operation to two polygonal geometries.

    Args:
        geom_a: Polygon, MultiPolygon, or exterior coordinate sequence
        geom_b: Same for the second operand
        operation: ClipOperation to apply
        dtype: Numpy float type for all arithmetic (overrides ``config.dtype``)
        config: Engine settings

    Returns:
        List of result polygons (empty if nothing remains)

    Raises:
        NotImplementedOperationError: If the kind combination is unsupported
        ValidationError: If an input is empty or has a ring with fewer than
            3 distinct points

    Examples:
        >>> a = Polygon([(0, 0), (10, 0), (10, 10), (0, 10)])
        >>> b = Polygon([(5, 0), (15, 0), (15, 10), (5, 10)])
        >>> [p.area for p in clip(a, b, ClipOperation.INTERSECTION)]
        [50.0]
    """
    config = resolve_config(config, dtype)
    operation = ClipOperation(operation)
    geom_a = as_geometry(geom_a)
    geom_b = as_geometry(geom_b)
    kind_a = geometry_kind(geom_a)
    kind_b = geometry_kind(geom_b)

    handler = _DISPATCH.get((kind_a, kind_b, operation))
    if handler is None:
        raise NotImplementedOperationError(operation.value, kind_a.value, kind_b.value)
    if geom_a.is_empty or geom_b.is_empty:
        raise ValidationError("Cannot clip an empty geometry")

    return [rings_to_polygon(exterior, holes) for exterior, holes in handler(geom_a, geom_b, config)]


def intersection(geom_a, geom_b, dtype=None, config=None) -> List[Polygon]:
    """Area covered by both geometries. See :func:`clip`."""
    return clip(geom_a, geom_b, ClipOperation.INTERSECTION, dtype=dtype, config=config)


def union(geom_a, geom_b, dtype=None, config=None) -> List[Polygon]:
    """Area covered by either geometry. See :func:`clip`."""
    return clip(geom_a, geom_b, ClipOperation.UNION, dtype=dtype, config=config)


def difference(geom_a, geom_b, dtype=None, config=None) -> List[Polygon]:
    """Area of ``geom_a`` not covered by ``geom_b``. See :func:`clip`."""
    return clip(geom_a, geom_b, ClipOperation.DIFFERENCE, dtype=dtype, config=config)


__all__ = [
    'clip',
    'intersection',
    'union',
    'difference',
]
