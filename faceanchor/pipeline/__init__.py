"""
Stabilization pipeline for per-frame face landmark and head pose estimates.

This package contains:
- one_euro: Adaptive low-pass filter for a single channel
- filter_bank: One filter per landmark plus pose matrix and scale
- result_cache: Last stabilized estimate
- frame_loop: Serialized detect/estimate/filter/publish cycle
- transform: Per-landmark anchor transforms
"""

from .errors import (
    ConfigurationError,
    EmptyResultError,
    FaceAnchorError,
    InvalidEstimateError,
    NonFiniteEstimateError,
    SchedulingError,
    ShapeMismatchError,
)
from .filter_bank import FilterBank
from .frame_loop import FrameLoop, RefreshScheduler
from .interfaces import FaceDetector, FrameScheduler, GeometryConsumer, PoseEstimator
from .one_euro import OneEuroFilter
from .result_cache import ResultCache
from .transform import TransformComposer, compose_anchor_matrix
from .types import (
    CANONICAL_LANDMARK_COUNT,
    EstimateResult,
    FaceUpdate,
    FrameOutcome,
    LoopState,
    TrackingParams,
)

__all__ = [
    # Filtering
    "OneEuroFilter",
    "FilterBank",
    "ResultCache",
    # Loop
    "FrameLoop",
    "RefreshScheduler",
    "TransformComposer",
    "compose_anchor_matrix",
    # Types
    "CANONICAL_LANDMARK_COUNT",
    "EstimateResult",
    "FaceUpdate",
    "FrameOutcome",
    "LoopState",
    "TrackingParams",
    # Collaborators
    "FaceDetector",
    "PoseEstimator",
    "GeometryConsumer",
    "FrameScheduler",
    # Errors
    "FaceAnchorError",
    "ConfigurationError",
    "EmptyResultError",
    "InvalidEstimateError",
    "ShapeMismatchError",
    "NonFiniteEstimateError",
    "SchedulingError",
]
