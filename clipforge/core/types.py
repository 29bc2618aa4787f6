"""Type definitions for clipforge operations.

This module defines enums for operation selectors and predicate results
throughout the library.
"""

from enum import Enum


class ClipOperation(Enum):
    """Boolean operation applied by the clipping engine.

    Attributes:
        INTERSECTION: Area covered by both geometries
        UNION: Area covered by either geometry
        DIFFERENCE: Area covered by the first geometry but not the second

    Examples:
        >>> from clipforge import clip, ClipOperation
        >>> pieces = clip(poly1, poly2, ClipOperation.INTERSECTION)
    """
    INTERSECTION = 'intersection'
    UNION = 'union'
    DIFFERENCE = 'difference'


class CorrectionStrategy(Enum):
    """Strategy for making the sub-polygons of a multipolygon disjoint.

    Attributes:
        UNION_INTERSECTING_POLYGONS: Merge intersecting sub-polygons
        DIFF_INTERSECTING_POLYGONS: Subtract later sub-polygons from earlier ones

    Examples:
        >>> from clipforge import fix, CorrectionStrategy
        >>> fixed = fix(multipoly, corrections=[CorrectionStrategy.UNION_INTERSECTING_POLYGONS])
    """
    UNION_INTERSECTING_POLYGONS = 'union_intersecting_polygons'
    DIFF_INTERSECTING_POLYGONS = 'diff_intersecting_polygons'


class SegmentRelation(Enum):
    """Relationship between two line segments.

    Attributes:
        NO_INTERSECTION: Segments do not meet (or one is zero-length)
        CROSSING: Segments meet in a single point
        COLLINEAR: Segments are parallel and lie on the same line
    """
    NO_INTERSECTION = 'no_intersection'
    CROSSING = 'crossing'
    COLLINEAR = 'collinear'


class PointRingRelation(Enum):
    """Location of a point relative to a closed ring or polygon.

    Attributes:
        INSIDE: Point is in the interior
        OUTSIDE: Point is in the exterior
        ON_BOUNDARY: Point lies on the ring itself
    """
    INSIDE = 'inside'
    OUTSIDE = 'outside'
    ON_BOUNDARY = 'on_boundary'


class BoundaryExclusion(Enum):
    """Which segment endpoints are excluded from a point-on-segment test.

    Attributes:
        NONE: Both endpoints count as on the segment
        START: Start point is excluded
        END: End point is excluded
        BOTH: Only the open interior of the segment counts

    Examples:
        >>> from clipforge.primitives import point_on_segment
        >>> point_on_segment((0, 0), ((0, 0), (1, 0)), BoundaryExclusion.START)
        False
    """
    NONE = 'none'
    START = 'start'
    END = 'end'
    BOTH = 'both'


class GeometryKind(Enum):
    """Geometry type tag used by the operation dispatch table."""
    POINT = 'Point'
    MULTIPOINT = 'MultiPoint'
    LINESTRING = 'LineString'
    LINEARRING = 'LinearRing'
    MULTILINESTRING = 'MultiLineString'
    POLYGON = 'Polygon'
    MULTIPOLYGON = 'MultiPolygon'
    GEOMETRYCOLLECTION = 'GeometryCollection'


__all__ = [
    'ClipOperation',
    'CorrectionStrategy',
    'SegmentRelation',
    'PointRingRelation',
    'BoundaryExclusion',
    'GeometryKind',
]
