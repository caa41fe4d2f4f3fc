"""
Error types raised by the faceanchor pipeline.

Stream states such as "no face in frame" or "pose could not be solved" are not
errors; they are reported as FrameOutcome values by the frame loop.
"""


class FaceAnchorError(Exception):
    """Base class for all faceanchor errors."""


class ConfigurationError(FaceAnchorError, ValueError):
    """Raised when tracking or filter parameters are invalid."""


class EmptyResultError(FaceAnchorError, RuntimeError):
    """Raised when a stabilized result is requested before one exists."""


class InvalidEstimateError(FaceAnchorError, ValueError):
    """Raised when an estimate cannot be fed to the filter bank."""


class ShapeMismatchError(InvalidEstimateError):
    """Raised when an estimate does not match the filter bank layout."""


class NonFiniteEstimateError(InvalidEstimateError):
    """Raised when an estimate contains NaN or infinite values."""


class SchedulingError(FaceAnchorError, RuntimeError):
    """Raised when the refresh scheduler refuses to schedule the next cycle."""
