"""Exceptions and warnings raised by clipforge."""


class ClipforgeError(Exception):
    """Base class for all clipforge errors."""


class ValidationError(ClipforgeError):
    """Input geometry cannot be clipped (too few points, empty, malformed)."""


class NotImplementedOperationError(ValidationError, NotImplementedError):
    """No implementation exists for the requested geometry/operation pair.

    Attributes:
        kind_a: Kind of the first geometry
        kind_b: Kind of the second geometry (None for single-geometry operations)
        operation: Name of the requested operation
    """

    def __init__(self, operation, kind_a, kind_b=None):
        self.operation = operation
        self.kind_a = kind_a
        self.kind_b = kind_b
        if kind_b is None:
            message = f"{operation} of {kind_a} isn't implemented"
        else:
            message = f"{operation} between {kind_a} and {kind_b} isn't implemented"
        super().__init__(message)


class ConfigurationError(ClipforgeError):
    """Invalid engine configuration."""


class DegenerateIntersectionError(ClipforgeError):
    """Crossing points cannot be paired into closed rings.

    Raised internally by the tracer when the crossing count is odd, below two,
    or a walk never returns to its start. Callers recover by falling back to
    the containment test; it never reaches user code.
    """


class ClipWarning(UserWarning):
    """Base class for clipforge warnings."""


class SharedEdgeWarning(ClipWarning):
    """Two rings share boundary while one lies inside the other."""


class CorrectionWarning(ClipWarning):
    """A multipolygon correction stopped before all parts were disjoint."""


__all__ = [
    'ClipforgeError',
    'ValidationError',
    'NotImplementedOperationError',
    'ConfigurationError',
    'DegenerateIntersectionError',
    'ClipWarning',
    'SharedEdgeWarning',
    'CorrectionWarning',
]
