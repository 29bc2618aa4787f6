"""Core types and utilities for clipforge.

This module provides the enums, exceptions and geometry conversion helpers
used throughout the library.
"""

from .types import (
    ClipOperation,
    CorrectionStrategy,
    SegmentRelation,
    PointRingRelation,
    BoundaryExclusion,
    GeometryKind,
)

from .errors import (
    ClipforgeError,
    ValidationError,
    NotImplementedOperationError,
    ConfigurationError,
    DegenerateIntersectionError,
    ClipWarning,
    SharedEdgeWarning,
    CorrectionWarning,
)

from .geometry_utils import polygon_coords

__all__ = [
    # Enums
    'ClipOperation',
    'CorrectionStrategy',
    'SegmentRelation',
    'PointRingRelation',
    'BoundaryExclusion',
    'GeometryKind',

    # Exceptions and warnings
    'ClipforgeError',
    'ValidationError',
    'NotImplementedOperationError',
    'ConfigurationError',
    'DegenerateIntersectionError',
    'ClipWarning',
    'SharedEdgeWarning',
    'CorrectionWarning',

    # Conversion
    'polygon_coords',
]
