"""
Face tracker facade.

Wires one filter bank, result cache, frame loop and transform composer together
for a single tracked face stream. Each FaceTracker is fully independent; run
one per camera.
"""

import logging
import time
from typing import Callable, Optional

import numpy as np

from .pipeline import (
    EstimateResult,
    FilterBank,
    FrameLoop,
    LoopState,
    ResultCache,
    TrackingParams,
    TransformComposer,
)
from .pipeline.interfaces import (
    FaceDetector,
    FramePreprocessor,
    FrameScheduler,
    FrameSource,
    GeometryConsumer,
    PoseEstimator,
    UpdateSink,
)

logger = logging.getLogger(__name__)


class FaceTracker:
    """Stabilized face tracking for one stream, driven by a frame loop."""

    def __init__(
        self,
        detector: FaceDetector,
        estimator: PoseEstimator,
        on_update: Optional[UpdateSink] = None,
        params: Optional[TrackingParams] = None,
        scheduler: Optional[FrameScheduler] = None,
        preprocessor: Optional[FramePreprocessor] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.params = params if params is not None else TrackingParams()

        if preprocessor is None and self.params.mirror_input:
            from .capture_helpers.preprocessing import mirror_frame

            preprocessor = mirror_frame

        self.filter_bank = FilterBank(self.params.num_landmarks, self.params)
        self.cache = ResultCache()
        self.loop = FrameLoop(
            detector,
            estimator,
            on_update=on_update,
            params=self.params,
            filter_bank=self.filter_bank,
            cache=self.cache,
            scheduler=scheduler,
            preprocessor=preprocessor,
            clock=clock,
        )
        self.composer = TransformComposer(self.cache)

        logger.debug(
            "FaceTracker created (min_cutoff=%s, beta=%s, mirror=%s)",
            self.params.min_cutoff,
            self.params.beta,
            self.params.mirror_input,
        )

    # --- Loop control ---

    @property
    def state(self) -> LoopState:
        return self.loop.state

    def start(self, frame_source: FrameSource) -> None:
        self.loop.start(frame_source)

    def stop(self) -> None:
        self.loop.stop()

    async def wait_idle(self) -> None:
        await self.loop.wait_idle()

    async def warm_up(self, frame) -> None:
        """Prime the detector with one frame before starting the live loop."""
        await self.loop.warm_up(frame)

    # --- Results ---

    @property
    def has_face(self) -> bool:
        return not self.cache.is_empty

    @property
    def last_result(self) -> Optional[EstimateResult]:
        return self.cache.result

    def anchor_transform(self, landmark_index: int) -> np.ndarray:
        return self.composer.anchor_transform(landmark_index)

    def add_geometry(self, geometry: GeometryConsumer) -> GeometryConsumer:
        """Register a geometry that follows the raw per-frame landmarks."""
        self.loop.geometries.append(geometry)
        return geometry

    def remove_geometry(self, geometry: GeometryConsumer) -> None:
        self.loop.geometries.remove(geometry)
