"""Overlap diagnostics for collections of polygons.

Candidate pairs are found with a spatial index; each candidate is then
intersected with the clipping engine and counted only if the shared area
exceeds a threshold, so polygons that merely touch are not reported.
"""

from typing import Dict, List, Optional, Sequence, Set, Tuple

from shapely.geometry import Polygon

from .clipping.dispatch import intersection
from .config import ClipConfig, resolve_config
from .core.spatial_utils import find_connected_components, find_polygon_pairs
from .metrics import area

_AREA_EPS = 1e-10


def overlap_area(poly_a: Polygon, poly_b: Polygon, config: Optional[ClipConfig] = None) -> float:
    """Area shared by two polygons."""
    config = resolve_config(config)
    return float(sum(area(piece, config.dtype) for piece in intersection(poly_a, poly_b, config=config)))


def find_overlapping_pairs(
    polygons: Sequence[Polygon],
    min_area_threshold: float = _AREA_EPS,
    config: Optional[ClipConfig] = None,
) -> List[Tuple[int, int]]:
    """Find all pairs of polygons that share more than ``min_area_threshold``.

    Args:
        polygons: Polygons to check
        min_area_threshold: Minimum shared area for a pair to count
        config: Engine settings for the intersections

    Returns:
        Sorted list of (i, j) index pairs with i < j
    """
    config = resolve_config(config)
    return find_polygon_pairs(
        polygons,
        validate_func=lambda a, b: overlap_area(a, b, config) > min_area_threshold,
    )


def count_overlaps(
    polygons: Sequence[Polygon],
    min_area_threshold: float = _AREA_EPS,
    config: Optional[ClipConfig] = None,
) -> int:
    """Count the overlapping pairs in a list of polygons.

    Args:
        polygons: Polygons to check
        min_area_threshold: Minimum shared area for a pair to count
        config: Engine settings for the intersections

    Returns:
        Number of overlapping pairs
    """
    return len(find_overlapping_pairs(polygons, min_area_threshold, config))


def find_overlapping_groups(
    polygons: Sequence[Polygon],
    min_area_threshold: float = _AREA_EPS,
    config: Optional[ClipConfig] = None,
) -> List[List[int]]:
    """Find groups of mutually overlapping polygons.

    Two polygons are in the same group if a chain of overlapping pairs
    connects them. Polygons without any overlap form groups of one.

    Args:
        polygons: Polygons to analyze
        min_area_threshold: Minimum shared area for a pair to count
        config: Engine settings for the intersections

    Returns:
        List of groups, each a sorted list of polygon indices

    Examples:
        >>> find_overlapping_groups([square, shifted_square, far_away_square])
        [[0, 1], [2]]
    """
    if not polygons:
        return []

    adjacency: Dict[int, Set[int]] = {i: set() for i in range(len(polygons))}
    for i, j in find_overlapping_pairs(polygons, min_area_threshold, config):
        adjacency[i].add(j)
        adjacency[j].add(i)
    return find_connected_components(adjacency)


__all__ = [
    'overlap_area',
    'find_overlapping_pairs',
    'count_overlaps',
    'find_overlapping_groups',
]
