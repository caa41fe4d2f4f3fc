"""
Synthetic jitter scenario for checking stabilization quality.

Drives a real FaceTracker with a detector that reports a slowly drifting face
plus Gaussian jitter, followed by a few frames without a face. The trace is
used to compare raw and stabilized jitter and to confirm the no-face reset.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .pipeline import EstimateResult, FaceUpdate, TrackingParams
from .pipeline.interfaces import FaceDetector, FrameScheduler, PoseEstimator
from .tracker import FaceTracker

logger = logging.getLogger(__name__)


class SyntheticFaceDetector(FaceDetector):
    """Detector producing a jittered, drifting face for a fixed number of calls."""

    def __init__(
        self,
        num_landmarks: int,
        face_cycles: int,
        noise: float = 0.002,
        drift: float = 0.0002,
        seed: Optional[int] = None,
    ):
        self.rng = np.random.default_rng(seed)
        self.base = self.rng.normal(scale=0.05, size=(num_landmarks, 3))
        self.face_cycles = face_cycles
        self.noise = noise
        self.drift = drift
        self.calls = 0
        self.truth: List[np.ndarray] = []
        self.raw: List[np.ndarray] = []

    async def detect(self, image):
        await asyncio.sleep(0)
        index = self.calls
        self.calls += 1
        if index >= self.face_cycles:
            return []

        clean = self.base + np.array([self.drift * index, 0.0, 0.0])
        noisy = clean + self.rng.normal(scale=self.noise, size=clean.shape)
        self.truth.append(clean)
        self.raw.append(noisy)
        return [[tuple(point) for point in noisy]]


class CentroidPoseEstimator(PoseEstimator):
    """Identity rotation translated to the landmark centroid, unit scale."""

    def estimate(self, raw_landmarks) -> EstimateResult:
        landmarks = np.asarray(raw_landmarks, dtype=np.float64)
        matrix = np.eye(4)
        matrix[:3, 3] = landmarks.mean(axis=0)
        return EstimateResult.from_raw(landmarks, matrix, 1.0)


class SoonScheduler(FrameScheduler):
    """Requests ticks on the next event loop iteration."""

    def request_frame(self, callback):
        return asyncio.get_running_loop().call_soon(callback)


class FixedStepClock:
    """Clock advancing by a fixed step on every read."""

    def __init__(self, step: float, start: float = 0.0):
        self.step = step
        self.now = start

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@dataclass
class ScenarioTrace:
    truth: List[np.ndarray]
    raw: List[np.ndarray]
    updates: List[FaceUpdate] = field(default_factory=list)
    filters_initialized_after: bool = True
    cache_empty_after: bool = False

    @property
    def filtered(self) -> List[np.ndarray]:
        return [
            np.array(u.estimate_result.metric_landmarks)
            for u in self.updates
            if u.has_face
        ]


async def run_jitter_scenario_async(
    params: Optional[TrackingParams] = None,
    face_cycles: int = 120,
    gap_cycles: int = 1,
    noise: float = 0.002,
    drift: float = 0.0002,
    frame_rate: float = 30.0,
    seed: Optional[int] = 0,
) -> ScenarioTrace:
    """
    Run the synthetic scenario through a live frame loop.

    Args:
        params (TrackingParams, optional): Filter parameters under test
        face_cycles (int): Cycles in which a face is reported
        gap_cycles (int): Cycles without a face after that
        noise (float): Standard deviation of the landmark jitter
        drift (float): Per-frame drift along x
        frame_rate (float): Simulated camera rate used for timestamps
        seed (int, optional): Random seed

    Returns:
        ScenarioTrace: Ground truth, raw input and every published update
    """
    if params is None:
        params = TrackingParams(num_landmarks=16)

    detector = SyntheticFaceDetector(
        params.num_landmarks, face_cycles, noise=noise, drift=drift, seed=seed
    )
    updates: List[FaceUpdate] = []
    total_cycles = face_cycles + gap_cycles

    tracker: Optional[FaceTracker] = None

    def on_update(update: FaceUpdate) -> None:
        updates.append(update)
        if len(updates) >= total_cycles and tracker is not None:
            tracker.stop()

    tracker = FaceTracker(
        detector,
        CentroidPoseEstimator(),
        on_update=on_update,
        params=params,
        scheduler=SoonScheduler(),
        clock=FixedStepClock(1.0 / frame_rate),
    )

    blank = np.zeros((2, 2, 3), dtype=np.uint8)
    tracker.start(lambda: blank)
    await tracker.wait_idle()

    logger.info(
        "Scenario finished after %d detector calls and %d updates",
        detector.calls,
        len(updates),
    )
    return ScenarioTrace(
        truth=detector.truth,
        raw=detector.raw,
        updates=updates,
        filters_initialized_after=tracker.filter_bank.any_initialized,
        cache_empty_after=not tracker.has_face,
    )


def run_jitter_scenario(**kwargs) -> ScenarioTrace:
    return asyncio.run(run_jitter_scenario_async(**kwargs))


def build_report(trace: ScenarioTrace, skip: int = 5) -> dict:
    """
    Summarize a scenario trace.

    Jitter is measured as the variance of the error against the ground truth,
    and roughness as the variance of frame-to-frame differences. The first
    `skip` frames are excluded while the filters settle.

    Returns:
        dict: Statistics and pass/fail checks
    """
    filtered = trace.filtered
    count = min(len(trace.raw), len(filtered))
    if count <= skip + 1:
        raise ValueError(f"Need more than {skip + 1} tracked frames, got {count}")

    truth = np.stack(trace.truth[skip:count])
    raw = np.stack(trace.raw[skip:count])
    smooth = np.stack(filtered[skip:count])

    raw_jitter = float(np.var(raw - truth))
    filtered_jitter = float(np.var(smooth - truth))
    raw_roughness = float(np.var(np.diff(raw, axis=0)))
    filtered_roughness = float(np.var(np.diff(smooth, axis=0)))

    last = trace.updates[-1] if trace.updates else None
    no_face_published = (
        last is not None
        and not last.has_face
        and last.estimate_result == EstimateResult.empty()
    )

    return {
        "frames": count,
        "raw_jitter": raw_jitter,
        "filtered_jitter": filtered_jitter,
        "raw_roughness": raw_roughness,
        "filtered_roughness": filtered_roughness,
        "roughness_reduction": 1.0 - filtered_roughness / raw_roughness
        if raw_roughness > 0
        else 0.0,
        "no_face_published": no_face_published,
        "filters_reset": not trace.filters_initialized_after,
        "cache_cleared": trace.cache_empty_after,
    }
