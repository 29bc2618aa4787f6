"""Polygon boolean operations.

The engine expands two rings into linked node lists, flags each crossing as
an entry or exit, and traces the output rings. Polygons with holes, multi-part
inputs and cutting are built on top of that.
"""

from .processor import (
    PolyNode,
    build_intersection_lists,
    flag_entry_exit,
    trace_polynodes,
)

from .containment import (
    find_non_cross_orientation,
    resolve_no_intersections,
)

from .engine import clip_rings, split_ring, subtract_holes

from .intersection import intersection_polygons
from .union import union_polygons
from .difference import difference_polygons

from .dispatch import clip, intersection, union, difference
from .cut import cut

__all__ = [
    # Intersection lists and tracing
    'PolyNode',
    'build_intersection_lists',
    'flag_entry_exit',
    'trace_polynodes',

    # Containment fallback
    'find_non_cross_orientation',
    'resolve_no_intersections',

    # Ring and polygon operations
    'clip_rings',
    'split_ring',
    'subtract_holes',
    'intersection_polygons',
    'union_polygons',
    'difference_polygons',

    # Public operations
    'clip',
    'intersection',
    'union',
    'difference',
    'cut',
]
