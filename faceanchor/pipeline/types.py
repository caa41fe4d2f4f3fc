"""
Data types shared by the faceanchor pipeline.

Landmarks are stored as (N, 3) float arrays in metric space and the head pose as
a flat, row-major 4x4 matrix of 16 values.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ConfigurationError

# MediaPipe face mesh without iris refinement
CANONICAL_LANDMARK_COUNT = 468

# One-euro defaults in seconds. Equivalent to a 0.001/ms cutoff with beta 1.
DEFAULT_MIN_CUTOFF = 1.0
DEFAULT_BETA = 1.0
DEFAULT_D_CUTOFF = 1.0

DEFAULT_REFRESH_HZ = 60.0


@dataclass(frozen=True)
class TrackingParams:
    """Construction-time configuration for a face tracker."""

    min_cutoff: float = DEFAULT_MIN_CUTOFF
    beta: float = DEFAULT_BETA
    d_cutoff: float = DEFAULT_D_CUTOFF
    mirror_input: bool = False
    num_landmarks: int = CANONICAL_LANDMARK_COUNT
    refresh_hz: float = DEFAULT_REFRESH_HZ

    def __post_init__(self):
        if not self.min_cutoff > 0:
            raise ConfigurationError(f"min_cutoff must be > 0, got {self.min_cutoff}")
        if not self.beta >= 0:
            raise ConfigurationError(f"beta must be >= 0, got {self.beta}")
        if not self.d_cutoff > 0:
            raise ConfigurationError(f"d_cutoff must be > 0, got {self.d_cutoff}")
        if self.num_landmarks < 1:
            raise ConfigurationError(
                f"num_landmarks must be positive, got {self.num_landmarks}"
            )
        if not self.refresh_hz > 0:
            raise ConfigurationError(f"refresh_hz must be > 0, got {self.refresh_hz}")


@dataclass(frozen=True)
class EstimateResult:
    """
    Output of the pose estimator for one frame, raw or stabilized.

    A missing face_matrix marks a frame whose pose could not be solved. The
    all-None value is what gets published when no face is visible.
    """

    metric_landmarks: Optional[np.ndarray]
    face_matrix: Optional[np.ndarray]
    face_scale: Optional[float]

    @classmethod
    def empty(cls) -> "EstimateResult":
        return cls(metric_landmarks=None, face_matrix=None, face_scale=None)

    @classmethod
    def from_raw(cls, metric_landmarks, face_matrix, face_scale) -> "EstimateResult":
        """
        Build a result from plain sequences, normalizing array shapes.

        Args:
            metric_landmarks: Sequence of (x, y, z) points
            face_matrix: 16 values (or a 4x4 nested sequence), or None
            face_scale: Uniform scale factor, or None

        Returns:
            EstimateResult: Result with float64 arrays
        """
        landmarks = np.asarray(metric_landmarks, dtype=np.float64).reshape(-1, 3)
        matrix = None
        if face_matrix is not None:
            matrix = np.asarray(face_matrix, dtype=np.float64).reshape(16)
        scale = None if face_scale is None else float(face_scale)
        return cls(metric_landmarks=landmarks, face_matrix=matrix, face_scale=scale)

    @property
    def is_complete(self) -> bool:
        return (
            self.metric_landmarks is not None
            and self.face_matrix is not None
            and self.face_scale is not None
        )


@dataclass(frozen=True)
class FaceUpdate:
    """Payload handed to the update sink once per publishing cycle."""

    has_face: bool
    estimate_result: EstimateResult


class FrameOutcome(enum.Enum):
    """What a single cycle did with its frame."""

    TRACKED = "tracked"
    NO_FACE = "no_face"
    DROPPED = "dropped"


class LoopState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
