"""Corrections that make the sub-polygons of a multipolygon disjoint.

A valid multipolygon may not contain sub-polygons that overlap. The
corrections here repair that with the clipping engine, either by merging the
offending sub-polygons or by trimming earlier sub-polygons with later ones.
"""

from typing import Iterable, List, Optional, Sequence, Union

from shapely.geometry import MultiPolygon
from shapely.geometry.base import BaseGeometry

from .clipping.multipart import diff_intersecting_parts, union_intersecting_parts
from .config import ClipConfig, resolve_config
from .core.errors import NotImplementedOperationError
from .core.geometry_utils import (
    PolygonRings,
    as_geometry,
    geometry_kind,
    polygon_to_rings,
    polygons_of,
    rings_to_polygon,
)
from .core.types import CorrectionStrategy, GeometryKind


class GeometryCorrection:
    """Base class for geometry corrections.

    A correction is a callable applied to every geometry of its
    ``application_level``. Subclasses implement :meth:`apply`.

    Attributes:
        application_level: GeometryKind the correction operates on
        config: Engine settings used by the clipping calls
        verbose: Print progress messages
    """

    application_level = GeometryKind.MULTIPOLYGON

    def __init__(self, config: Optional[ClipConfig] = None, verbose: bool = False):
        self.config = resolve_config(config)
        self.verbose = verbose

    def __call__(self, geometry: BaseGeometry) -> BaseGeometry:
        kind = geometry_kind(geometry)
        if kind is not self.application_level:
            raise NotImplementedOperationError(type(self).__name__, kind.value)
        return self.apply(geometry)

    def apply(self, geometry: BaseGeometry) -> BaseGeometry:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _to_parts(multipolygon: MultiPolygon, config: ClipConfig) -> List[PolygonRings]:
    return [polygon_to_rings(polygon, config.dtype) for polygon in polygons_of(multipolygon)]


def _to_multipolygon(parts: Iterable[PolygonRings]) -> MultiPolygon:
    return MultiPolygon([rings_to_polygon(exterior, holes) for exterior, holes in parts])


class UnionIntersectingPolygons(GeometryCorrection):
    """Merge every group of intersecting sub-polygons into one.

    Examples:
        >>> correction = UnionIntersectingPolygons()
        >>> fixed = correction(MultiPolygon([square, square]))
        >>> len(fixed.geoms)
        1
    """

    def apply(self, geometry: MultiPolygon) -> MultiPolygon:
        parts = _to_parts(geometry, self.config)
        if self.verbose:
            print(f"Union correction on {len(parts)} sub-polygons")
        corrected = union_intersecting_parts(parts, self.config, verbose=self.verbose)
        if self.verbose:
            print(f"Union correction left {len(corrected)} sub-polygons")
        return _to_multipolygon(corrected)


class DiffIntersectingPolygons(GeometryCorrection):
    """Subtract later sub-polygons from the earlier ones they intersect.

    Later sub-polygons keep their full area; an earlier sub-polygon that is
    split apart contributes every remaining fragment.
    """

    def apply(self, geometry: MultiPolygon) -> MultiPolygon:
        parts = _to_parts(geometry, self.config)
        if self.verbose:
            print(f"Difference correction on {len(parts)} sub-polygons")
        corrected = diff_intersecting_parts(parts, self.config, verbose=self.verbose)
        if self.verbose:
            print(f"Difference correction left {len(corrected)} sub-polygons")
        return _to_multipolygon(corrected)


_STRATEGIES = {
    CorrectionStrategy.UNION_INTERSECTING_POLYGONS: UnionIntersectingPolygons,
    CorrectionStrategy.DIFF_INTERSECTING_POLYGONS: DiffIntersectingPolygons,
}


def union_correct(
    multipolygon: Union[MultiPolygon, BaseGeometry],
    dtype: Optional[type] = None,
    config: Optional[ClipConfig] = None,
    verbose: bool = False,
) -> MultiPolygon:
    """Merge intersecting sub-polygons of a multipolygon.

    Args:
        multipolygon: MultiPolygon to correct
        dtype: Numpy float type for all arithmetic
        config: Engine settings
        verbose: Print each merge

    Returns:
        MultiPolygon whose sub-polygons only touch along boundaries

    Warns:
        CorrectionWarning: If ``config.max_iterations`` merge steps were not
            enough

    Examples:
        >>> square = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> len(union_correct(MultiPolygon([square, square])).geoms)
        1
    """
    correction = UnionIntersectingPolygons(resolve_config(config, dtype), verbose=verbose)
    return correction(multipolygon)


def diff_correct(
    multipolygon: Union[MultiPolygon, BaseGeometry],
    dtype: Optional[type] = None,
    config: Optional[ClipConfig] = None,
    verbose: bool = False,
) -> MultiPolygon:
    """Subtract later sub-polygons of a multipolygon from earlier ones.

    Args:
        multipolygon: MultiPolygon to correct
        dtype: Numpy float type for all arithmetic
        config: Engine settings
        verbose: Print each subtraction

    Returns:
        MultiPolygon whose sub-polygons only touch along boundaries

    Warns:
        CorrectionWarning: If ``config.max_iterations`` subtraction steps were
            not enough
    """
    correction = DiffIntersectingPolygons(resolve_config(config, dtype), verbose=verbose)
    return correction(multipolygon)


def _as_correction(correction, config: Optional[ClipConfig], verbose: bool) -> GeometryCorrection:
    if isinstance(correction, GeometryCorrection):
        return correction
    strategy = CorrectionStrategy(correction)
    return _STRATEGIES[strategy](config, verbose=verbose)


def fix(
    geometry,
    corrections: Sequence = (CorrectionStrategy.UNION_INTERSECTING_POLYGONS,),
    config: Optional[ClipConfig] = None,
    verbose: bool = False,
) -> BaseGeometry:
    """Apply corrections to a geometry.

    Each correction runs on the geometry if its kind matches the
    correction's application level; other geometries pass through
    unchanged, so fixing a single Polygon returns it as is.

    Args:
        geometry: Geometry to fix
        corrections: CorrectionStrategy values (or their names) or
            GeometryCorrection instances, applied in order
        config: Engine settings for corrections built from strategies
        verbose: Print which corrections run

    Returns:
        The corrected geometry
    """
    geometry = as_geometry(geometry)
    for correction in corrections:
        correction = _as_correction(correction, config, verbose)
        if geometry_kind(geometry) is not correction.application_level:
            if verbose:
                print(f"Skipping {correction!r} for {geometry.geom_type}")
            continue
        if verbose:
            print(f"Applying {correction!r}")
        geometry = correction(geometry)
    return geometry


__all__ = [
    'GeometryCorrection',
    'UnionIntersectingPolygons',
    'DiffIntersectingPolygons',
    'union_correct',
    'diff_correct',
    'fix',
]
