"""Difference of two polygons with holes."""

from typing import List, Optional

from ..config import ClipConfig
from ..core.geometry_utils import PolygonRings
from ..core.types import ClipOperation
from .engine import clip_rings, subtract_holes
from .intersection import intersection_polygons


def difference_polygons(
    rings_a: PolygonRings,
    rings_b: PolygonRings,
    config: Optional[ClipConfig] = None,
) -> List[PolygonRings]:
    """Subtract polygon B from polygon A.

    The holes of A are removed from every piece of ``exterior_a - exterior_b``,
    and the parts of A that sit inside a hole of B are added back.

    Args:
        rings_a: Polygon to subtract from
        rings_b: Polygon to subtract
        config: Engine settings

    Returns:
        List of (exterior, holes) pairs, empty if B covers A
    """
    exterior_a, holes_a = rings_a
    exterior_b, holes_b = rings_b
    pieces = clip_rings(exterior_a, exterior_b, ClipOperation.DIFFERENCE, config)
    if pieces and holes_a:
        pieces = subtract_holes(pieces, holes_a, config)
    for hole in holes_b:
        pieces.extend(intersection_polygons((hole, []), rings_a, config))
    return pieces


__all__ = ['difference_polygons']
