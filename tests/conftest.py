"""Shared fakes for the faceanchor test suite."""

import asyncio

import numpy as np
import pytest

from faceanchor.pipeline import EstimateResult
from faceanchor.pipeline.interfaces import (
    FaceDetector,
    FrameScheduler,
    GeometryConsumer,
    PoseEstimator,
)

NUM_LANDMARKS = 4


def make_face(offset=0.0, num_landmarks=NUM_LANDMARKS):
    """Raw face as the detector would report it: a list of (x, y, z) tuples."""
    base = np.arange(num_landmarks * 3, dtype=np.float64).reshape(-1, 3) / 10.0
    return [tuple(p) for p in base + offset]


class ScriptedDetector(FaceDetector):
    """
    Detector replaying a script of results.

    Each script entry is a list of faces. Once the script runs out, the last
    entry is repeated. Tracks how many calls are in flight at once.
    """

    def __init__(self, script, delay=0.0):
        self.script = list(script)
        self.delay = delay
        self.calls = 0
        self.images = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def detect(self, image):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.images.append(image)
            index = min(self.calls, len(self.script) - 1)
            self.calls += 1
            await asyncio.sleep(self.delay)
            return self.script[index]
        finally:
            self.in_flight -= 1


class OffsetEstimator(PoseEstimator):
    """Translation-only pose at the first landmark; degenerate when asked."""

    def __init__(self, degenerate_calls=()):
        self.degenerate_calls = set(degenerate_calls)
        self.calls = 0

    def estimate(self, raw_landmarks):
        index = self.calls
        self.calls += 1
        landmarks = np.asarray(raw_landmarks, dtype=np.float64)
        if index in self.degenerate_calls:
            return EstimateResult.from_raw(landmarks, None, None)
        matrix = np.eye(4)
        matrix[:3, 3] = landmarks[0]
        return EstimateResult.from_raw(landmarks, matrix, 1.0 + landmarks[0, 0])


class ManualScheduler(FrameScheduler):
    """Collects tick callbacks so tests can fire them by hand."""

    def __init__(self):
        self.callbacks = []

    def request_frame(self, callback):
        self.callbacks.append(callback)

    def fire(self):
        callback = self.callbacks.pop(0)
        callback()


class SoonScheduler(FrameScheduler):
    def request_frame(self, callback):
        return asyncio.get_running_loop().call_soon(callback)


class ImmediateScheduler(FrameScheduler):
    """Runs the tick callback synchronously from inside request_frame."""

    def request_frame(self, callback):
        callback()


class RecordingGeometry(GeometryConsumer):
    def __init__(self):
        self.positions = []

    def update_positions(self, metric_landmarks):
        self.positions.append(np.array(metric_landmarks))


class StepClock:
    def __init__(self, step=1.0 / 30.0):
        self.step = step
        self.now = 0.0

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def blank_frame():
    return np.zeros((4, 6, 3), dtype=np.uint8)
