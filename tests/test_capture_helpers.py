"""Tests for the camera and MediaPipe adapters, using fakes for the models."""

import asyncio
from types import SimpleNamespace

import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")

from faceanchor.capture_helpers import (  # noqa: E402
    CameraFrameSource,
    MediaPipeFaceDetector,
    extract_face_landmarks,
    mirror_frame,
)


def fake_results(*faces):
    return SimpleNamespace(
        multi_face_landmarks=[
            SimpleNamespace(
                landmark=[SimpleNamespace(x=x, y=y, z=z) for x, y, z in face]
            )
            for face in faces
        ]
    )


class FakeFaceMesh:
    def __init__(self, results):
        self.results = results
        self.images = []
        self.closed = False

    def process(self, image):
        self.images.append(image)
        return self.results

    def close(self):
        self.closed = True


class FakeCapture:
    def __init__(self, frames, opened=True):
        self.frames = list(frames)
        self.opened = opened
        self.released = False

    def isOpened(self):
        return self.opened

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def get(self, prop):
        return {cv2.CAP_PROP_FRAME_WIDTH: 640.0, cv2.CAP_PROP_FRAME_HEIGHT: 480.0}[prop]

    def release(self):
        self.released = True


def test_mirror_frame_flips_horizontally():
    frame = np.arange(12, dtype=np.uint8).reshape(2, 6)
    np.testing.assert_array_equal(mirror_frame(frame, True), frame[:, ::-1])
    assert mirror_frame(frame, False) is frame


def test_extract_face_landmarks_handles_missing_results():
    assert extract_face_landmarks(None) == []
    assert extract_face_landmarks(SimpleNamespace(multi_face_landmarks=None)) == []


def test_extract_face_landmarks_returns_tuples_per_face():
    results = fake_results([(0.1, 0.2, 0.3), (0.4, 0.5, 0.6)], [(1.0, 1.0, 1.0)])
    faces = extract_face_landmarks(results)
    assert faces == [[(0.1, 0.2, 0.3), (0.4, 0.5, 0.6)], [(1.0, 1.0, 1.0)]]


def test_detector_converts_to_rgb_and_returns_faces():
    mesh = FakeFaceMesh(fake_results([(0.5, 0.5, 0.0)]))
    detector = MediaPipeFaceDetector(face_mesh=mesh)

    image = np.zeros((2, 2, 3), dtype=np.uint8)
    image[..., 0] = 255  # blue in BGR
    faces = asyncio.run(detector.detect(image))

    assert faces == [[(0.5, 0.5, 0.0)]]
    assert mesh.images[0][0, 0, 2] == 255

    detector.close()
    assert mesh.closed


def test_detector_returns_empty_list_without_face():
    detector = MediaPipeFaceDetector(face_mesh=FakeFaceMesh(SimpleNamespace()))
    image = np.zeros((2, 2, 3), dtype=np.uint8)
    assert asyncio.run(detector.detect(image)) == []
    assert asyncio.run(detector.detect(None)) == []


def test_camera_frame_source_reads_frames():
    frame = np.ones((2, 2, 3), dtype=np.uint8)
    source = CameraFrameSource(capture=FakeCapture([frame]))

    assert source.frame_size == (640, 480)
    assert source() is frame
    assert source() is None

    source.release()
    assert source.capture.released


def test_camera_frame_source_rejects_closed_capture():
    with pytest.raises(FileNotFoundError):
        CameraFrameSource(capture=FakeCapture([], opened=False))
