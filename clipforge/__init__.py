"""Clipforge - Polygon boolean clipping and overlap repair.

This library computes intersections, unions and differences of polygons,
cuts polygons along lines, and repairs multipolygons whose parts overlap,
working on Shapely geometries.
"""

# Boolean operations
from .clipping import (
    clip,
    intersection,
    union,
    difference,
    cut,
)

# Multipolygon correction
from .correction import (
    GeometryCorrection,
    UnionIntersectingPolygons,
    DiffIntersectingPolygons,
    union_correct,
    diff_correct,
    fix,
)

# Predicates
from .predicates import intersects, crosses, covers, coveredby

# Measurements
from .metrics import area, signed_area, total_overlap_area

# Overlap diagnostics
from .overlap import count_overlaps, find_overlapping_groups

# Spatial index
from .tree import EdgeTree, dual_query

# Configuration
from .config import ClipConfig

# Core types (enums)
from .core import (
    ClipOperation,
    CorrectionStrategy,
    GeometryKind,
    polygon_coords,
)

# Core exceptions
from .core import (
    ClipforgeError,
    ValidationError,
    NotImplementedOperationError,
    ConfigurationError,
    ClipWarning,
    SharedEdgeWarning,
    CorrectionWarning,
)

__all__ = [

    # Boolean operations
    'clip',
    'intersection',
    'union',
    'difference',
    'cut',

    # Multipolygon correction
    'GeometryCorrection',
    'UnionIntersectingPolygons',
    'DiffIntersectingPolygons',
    'union_correct',
    'diff_correct',
    'fix',

    # Predicates
    'intersects',
    'crosses',
    'covers',
    'coveredby',

    # Measurements
    'area',
    'signed_area',
    'total_overlap_area',

    # Overlap diagnostics
    'count_overlaps',
    'find_overlapping_groups',

    # Spatial index
    'EdgeTree',
    'dual_query',

    # Configuration
    'ClipConfig',

    # Core types (enums)
    'ClipOperation',
    'CorrectionStrategy',
    'GeometryKind',
    'polygon_coords',

    # Core exceptions
    'ClipforgeError',
    'ValidationError',
    'NotImplementedOperationError',
    'ConfigurationError',
    'ClipWarning',
    'SharedEdgeWarning',
    'CorrectionWarning',
]
