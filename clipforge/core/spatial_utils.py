"""Spatial indexing helpers shared by the overlap diagnostics.

Candidate pairs come from shapely's STRtree (bounding boxes only); exact
tests are left to the caller through ``validate_func``.
"""

from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from shapely.geometry import Polygon
from shapely.strtree import STRtree


def find_polygon_pairs(
    polygons: Sequence[Polygon],
    validate_func: Optional[Callable[[Polygon, Polygon], bool]] = None,
) -> List[Tuple[int, int]]:
    """Find pairs of polygons whose bounding boxes overlap.

    Returns unique pairs (i, j) with i < j, in ascending order.

    Args:
        polygons: Polygons to search
        validate_func: Optional function (poly_i, poly_j) -> bool deciding
            whether a candidate pair is kept

    Returns:
        List of (index_i, index_j) tuples

    Examples:
        >>> pairs = find_polygon_pairs(polygons)
        >>> pairs = find_polygon_pairs(polygons, validate_func=lambda a, b: intersects(a, b))
    """
    if not polygons:
        return []

    tree = STRtree(list(polygons))
    pairs = []
    for i, poly_i in enumerate(polygons):
        for j in sorted(int(j) for j in tree.query(poly_i)):
            if j <= i:
                continue
            if validate_func is None or validate_func(poly_i, polygons[j]):
                pairs.append((i, j))
    return pairs


def find_connected_components(adjacency: Dict[int, Set[int]]) -> List[List[int]]:
    """Find connected components in an adjacency graph.

    Args:
        adjacency: Adjacency graph (dict of node -> set of neighbors)

    Returns:
        List of components, each a sorted list of node indices

    Examples:
        >>> find_connected_components({0: {1}, 1: {0}, 2: set()})
        [[0, 1], [2]]
    """
    visited: Set[int] = set()
    components = []

    for node in adjacency:
        if node in visited:
            continue
        component = []
        stack = [node]
        visited.add(node)
        while stack:
            current = stack.pop()
            component.append(current)
            for neighbor in adjacency.get(current, set()):
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)
        components.append(sorted(component))

    return components


__all__ = [
    'find_polygon_pairs',
    'find_connected_components',
]
