"""Make the parts of a multipolygon pairwise disjoint.

Both loops keep a flag per part instead of deleting from the working list, so
part indices stay stable while the list grows.
"""

from __future__ import annotations

import warnings
from typing import List, Optional

from ..config import ClipConfig
from ..core.errors import CorrectionWarning
from ..core.geometry_utils import PolygonRings
from ..relate import polygon_rings_intersect
from .difference import difference_polygons
from .union import union_polygons


def _iteration_limit_reached(config: ClipConfig, what: str) -> None:
    warnings.warn(
        f"{what} stopped after {config.max_iterations} steps; "
        "some parts may still overlap",
        CorrectionWarning,
        stacklevel=4,
    )


def union_intersecting_parts(
    parts: List[PolygonRings],
    config: Optional[ClipConfig] = None,
    verbose: bool = False,
) -> List[PolygonRings]:
    """Merge every group of intersecting parts into one part.

    Each kept part absorbs the later parts it intersects. After any merge the
    scan over the later parts starts again, because the grown part may now
    reach parts it missed before.

    Args:
        parts: (exterior, holes) pairs, in order
        config: Engine settings (``max_iterations`` bounds the merge steps)
        verbose: Print each merge

    Returns:
        Pairwise disjoint parts (boundary contact allowed), in order of the
        first part of each merged group
    """
    config = config if config is not None else ClipConfig()
    parts = list(parts)
    keep = [True] * len(parts)
    steps = 0

    for curr in range(len(parts)):
        if not keep[curr]:
            continue
        disjoint = False
        while not disjoint:
            disjoint = True
            for nxt in range(curr + 1, len(parts)):
                if not keep[nxt] or not polygon_rings_intersect(parts[curr], parts[nxt]):
                    continue
                steps += 1
                if steps > config.max_iterations:
                    _iteration_limit_reached(config, "Union correction")
                    return [part for part, kept in zip(parts, keep) if kept]
                merged = union_polygons(parts[curr], parts[nxt], config)
                if len(merged) == 1:
                    if verbose:
                        print(f"Merged part {nxt} into part {curr}")
                    parts[curr] = merged[0]
                    keep[nxt] = False
                    disjoint = False

    return [part for part, kept in zip(parts, keep) if kept]


def diff_intersecting_parts(
    parts: List[PolygonRings],
    config: Optional[ClipConfig] = None,
    verbose: bool = False,
) -> List[PolygonRings]:
    """Subtract every later part from each earlier part it intersects.

    A subtraction that splits a part appends the extra fragments to the
    working list; they keep being trimmed by the remaining later parts. A
    part that is covered entirely is dropped.

    Args:
        parts: (exterior, holes) pairs, in order
        config: Engine settings (``max_iterations`` bounds the subtractions)
        verbose: Print each subtraction

    Returns:
        Pairwise disjoint parts (boundary contact allowed)
    """
    config = config if config is not None else ClipConfig()
    parts = list(parts)
    n_original = len(parts)
    keep = [True] * n_original
    steps = 0

    for curr in range(n_original):
        if not keep[curr]:
            continue
        family = [curr]
        for nxt in range(curr + 1, n_original):
            if not keep[nxt]:
                continue
            for piece in list(family):
                if not keep[piece] or not polygon_rings_intersect(parts[piece], parts[nxt]):
                    continue
                steps += 1
                if steps > config.max_iterations:
                    _iteration_limit_reached(config, "Difference correction")
                    return [part for part, kept in zip(parts, keep) if kept]
                remaining = difference_polygons(parts[piece], parts[nxt], config)
                if verbose:
                    print(f"Subtracted part {nxt} from part {piece}: {len(remaining)} piece(s) left")
                if not remaining:
                    keep[piece] = False
                    continue
                parts[piece] = remaining[0]
                for extra in remaining[1:]:
                    parts.append(extra)
                    keep.append(True)
                    family.append(len(parts) - 1)

    return [part for part, kept in zip(parts, keep) if kept]


__all__ = [
    'union_intersecting_parts',
    'diff_intersecting_parts',
]
