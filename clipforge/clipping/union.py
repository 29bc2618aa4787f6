"""Union of two polygons with holes."""

from typing import List, Optional, Sequence

from ..config import ClipConfig
from ..core.geometry_utils import PolygonRings, Ring
from ..core.types import ClipOperation
from .engine import clip_rings


def _copy(rings: PolygonRings) -> PolygonRings:
    exterior, holes = rings
    return list(exterior), [list(hole) for hole in holes]


def _inside_any_hole(ring: Ring, holes: Sequence[Ring], config: ClipConfig) -> bool:
    return any(not clip_rings(ring, hole, ClipOperation.DIFFERENCE, config) for hole in holes)


def union_polygons(
    rings_a: PolygonRings,
    rings_b: PolygonRings,
    config: Optional[ClipConfig] = None,
) -> List[PolygonRings]:
    """Merge two polygons given as (exterior, holes) pairs.

    Holes of the result are the parts of each polygon's holes not covered by
    the other exterior, plus the overlap of holes from both polygons.

    Args:
        rings_a: First polygon
        rings_b: Second polygon
        config: Engine settings

    Returns:
        A single (exterior, holes) pair if the polygons overlap, otherwise
        both polygons unchanged
    """
    config = config if config is not None else ClipConfig()
    exterior_a, holes_a = rings_a
    exterior_b, holes_b = rings_b

    pieces = clip_rings(exterior_a, exterior_b, ClipOperation.UNION, config)
    if (
        len(pieces) != 1
        or _inside_any_hole(exterior_b, holes_a, config)
        or _inside_any_hole(exterior_a, holes_b, config)
    ):
        return [_copy(rings_a), _copy(rings_b)]

    exterior, holes = pieces[0]
    holes = list(holes)
    if not holes_a and not holes_b:
        return [(exterior, holes)]

    for hole in holes_a:
        holes.extend(ring for ring, _ in clip_rings(hole, exterior_b, ClipOperation.DIFFERENCE, config))
    for hole in holes_b:
        holes.extend(ring for ring, _ in clip_rings(hole, exterior_a, ClipOperation.DIFFERENCE, config))
    for hole_a in holes_a:
        for hole_b in holes_b:
            holes.extend(
                ring for ring, _ in clip_rings(hole_a, hole_b, ClipOperation.INTERSECTION, config)
            )
    return [(exterior, holes)]


__all__ = ['union_polygons']
