"""Exception types raised by jax_spatial.

Each error also derives from the closest builtin, so callers that only know
about ``IndexError`` or ``ValueError`` still catch them.
"""


class SpatialError(Exception):
    """Base class for every error raised by this package."""


class InvalidIndexError(SpatialError, IndexError):
    """Element, segment or block index outside the valid range."""


class MissizeError(SpatialError, ValueError):
    """Operand dimensions do not agree."""


class DataMismatchError(SpatialError, TypeError):
    """Operands have incompatible representations."""


class FrameMismatchError(SpatialError, ValueError):
    """Quantities expressed in different frames were combined."""

    def __init__(self, expected, actual, operation: str = ""):
        self.expected = expected
        self.actual = actual
        where = f" in {operation}" if operation else ""
        super().__init__(f"Frame mismatch{where}: expected {expected}, got {actual}")


class ConfigurationError(SpatialError, RuntimeError):
    """An operation was attempted before its prerequisites were set up."""
