"""Intersection of two polygons with holes."""

from typing import List, Optional

from ..config import ClipConfig
from ..core.geometry_utils import PolygonRings
from ..core.types import ClipOperation
from .engine import clip_rings, subtract_holes


def intersection_polygons(
    rings_a: PolygonRings,
    rings_b: PolygonRings,
    config: Optional[ClipConfig] = None,
) -> List[PolygonRings]:
    """Intersect two polygons given as (exterior, holes) pairs.

    The exteriors are clipped first; every hole of either polygon is then
    subtracted from each resulting piece.

    Args:
        rings_a: First polygon
        rings_b: Second polygon
        config: Engine settings

    Returns:
        List of (exterior, holes) pairs, empty if the polygons do not overlap
    """
    exterior_a, holes_a = rings_a
    exterior_b, holes_b = rings_b
    pieces = clip_rings(exterior_a, exterior_b, ClipOperation.INTERSECTION, config)
    holes = list(holes_a) + list(holes_b)
    if pieces and holes:
        pieces = subtract_holes(pieces, holes, config)
    return pieces


__all__ = ['intersection_polygons']
