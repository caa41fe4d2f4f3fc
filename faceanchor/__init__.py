"""
faceanchor - Temporal stabilization of face landmarks and head pose for AR anchoring
"""
__version__ = "1.0.0"

from .pipeline import (
    EstimateResult,
    FaceUpdate,
    FrameOutcome,
    LoopState,
    TrackingParams,
)
from .tracker import FaceTracker

__all__ = [
    "__version__",
    "FaceTracker",
    "TrackingParams",
    "EstimateResult",
    "FaceUpdate",
    "FrameOutcome",
    "LoopState",
]
