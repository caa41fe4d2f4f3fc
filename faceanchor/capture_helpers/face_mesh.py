"""
MediaPipe Face Mesh detector adapter.

Turns MediaPipe face mesh results into plain lists of (x, y, z) tuples, one
list per detected face, so the frame loop never sees MediaPipe types.
"""

import asyncio
from typing import List, Optional, Tuple

import cv2
import numpy as np

from ..pipeline.interfaces import FaceDetector

Point3 = Tuple[float, float, float]


def extract_face_landmarks(results) -> List[List[Point3]]:
    """
    Extract normalized face landmarks from MediaPipe results.

    Args:
        results: MediaPipe FaceMesh results object (or None)

    Returns:
        list: One list of (x, y, z) tuples per detected face, empty if none
    """
    if results is None:
        return []
    faces = getattr(results, "multi_face_landmarks", None)
    if not faces:
        return []
    return [[(lm.x, lm.y, lm.z) for lm in face.landmark] for face in faces]


class MediaPipeFaceDetector(FaceDetector):
    """
    Face detector running MediaPipe Face Mesh in a worker thread.

    Input images are expected in OpenCV's BGR channel order.
    """

    def __init__(
        self,
        max_num_faces: int = 1,
        refine_landmarks: bool = False,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        face_mesh=None,
    ):
        if face_mesh is None:
            try:
                import mediapipe as mp  # type: ignore
            except Exception as e:
                raise RuntimeError(
                    "MediaPipe is not installed. Install it with: pip install mediapipe"
                ) from e

            face_mesh = mp.solutions.face_mesh.FaceMesh(  # type: ignore[attr-defined]
                static_image_mode=False,
                max_num_faces=int(max_num_faces),
                refine_landmarks=bool(refine_landmarks),
                min_detection_confidence=float(min_detection_confidence),
                min_tracking_confidence=float(min_tracking_confidence),
            )
        self._face_mesh = face_mesh

    def _process(self, image: np.ndarray):
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        return self._face_mesh.process(rgb)

    async def detect(self, image: Optional[np.ndarray]) -> List[List[Point3]]:
        if image is None:
            return []
        results = await asyncio.to_thread(self._process, image)
        return extract_face_landmarks(results)

    def close(self) -> None:
        self._face_mesh.close()
