"""Runtime settings for the clipping engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .core.errors import ConfigurationError

# Below this many edges (ring A plus ring B) every edge pair is tested directly.
DEFAULT_TREE_THRESHOLD = 64
DEFAULT_NODE_CAPACITY = 10
DEFAULT_MAX_ITERATIONS = 10_000


@dataclass(frozen=True)
class ClipConfig:
    """Settings threaded through a single clipping call.

    Attributes:
        dtype: Numpy float type used for every coordinate and intermediate value
        tree_threshold: Combined edge count from which candidate edge pairs are
            found with the dual-tree query instead of testing all pairs
        node_capacity: Maximum number of entries per node of the edge tree
        max_iterations: Upper bound on merge/subtract steps in a correction
    """

    dtype: type = np.float64
    tree_threshold: int = DEFAULT_TREE_THRESHOLD
    node_capacity: int = DEFAULT_NODE_CAPACITY
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def validate(self) -> "ClipConfig":
        """Return ``self`` if all settings are usable, else raise ConfigurationError."""
        if not np.issubdtype(np.dtype(self.dtype), np.floating):
            raise ConfigurationError(f"dtype must be a floating point type, got {self.dtype!r}")
        if self.tree_threshold < 0:
            raise ConfigurationError("tree_threshold must be non-negative")
        if self.node_capacity < 2:
            raise ConfigurationError("node_capacity must be at least 2")
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")
        return self


def resolve_config(config: Optional[ClipConfig] = None, dtype: Optional[type] = None) -> ClipConfig:
    """Combine an optional config with a per-call dtype override."""
    config = config if config is not None else ClipConfig()
    if dtype is not None and dtype is not config.dtype:
        config = replace(config, dtype=dtype)
    return config.validate()


__all__ = [
    'ClipConfig',
    'resolve_config',
    'DEFAULT_TREE_THRESHOLD',
    'DEFAULT_NODE_CAPACITY',
    'DEFAULT_MAX_ITERATIONS',
]
