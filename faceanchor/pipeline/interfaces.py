"""
Contracts for the collaborators the frame loop talks to.

Detectors, estimators and geometry consumers live outside the pipeline; any
object with the matching methods can be plugged in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .types import EstimateResult, FaceUpdate

Point3 = Tuple[float, float, float]
RawFace = Sequence[Point3]

UpdateSink = Callable[[FaceUpdate], None]
FrameSource = Callable[[], Any]
FramePreprocessor = Callable[[Any, bool], Any]


class FaceDetector(ABC):
    """
    Landmark detector adapter.

    Implementations take an image and return one list of raw (x, y, z) points
    per detected face, or an empty list when no face is found.
    """

    @abstractmethod
    async def detect(self, image) -> List[RawFace]: ...

    def close(self) -> None:
        pass


class PoseEstimator(ABC):
    """Maps raw detector landmarks to metric landmarks, head pose and scale."""

    @abstractmethod
    def estimate(self, raw_landmarks: RawFace) -> EstimateResult: ...


class GeometryConsumer(ABC):
    """Mesh or geometry that follows the unfiltered per-frame landmarks."""

    @abstractmethod
    def update_positions(self, metric_landmarks) -> None: ...


class FrameScheduler(ABC):
    """Display-refresh scheduling primitive driving the frame loop."""

    @abstractmethod
    def request_frame(self, callback: Callable[[], None]) -> Optional[Any]: ...
