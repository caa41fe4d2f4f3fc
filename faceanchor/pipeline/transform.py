"""
Anchor transforms for attaching objects to individual face landmarks.

The anchor transform composes head pose, a translation to the landmark and the
uniform face scale into one row-major 4x4 matrix.
"""

import numpy as np

from .result_cache import ResultCache
from .types import EstimateResult


def compose_anchor_matrix(
    face_matrix: np.ndarray, face_scale: float, offset: np.ndarray
) -> np.ndarray:
    """
    Compose head pose, landmark offset and scale into one matrix.

    Args:
        face_matrix (np.ndarray): 16 values, row-major 4x4 head pose
        face_scale (float): Uniform scale factor
        offset (np.ndarray): Landmark position (x, y, z) in face space

    Returns:
        np.ndarray: 16 values, row-major 4x4 anchor transform
    """
    fm = np.asarray(face_matrix, dtype=np.float64).reshape(4, 4)
    t = np.asarray(offset, dtype=np.float64).reshape(3)

    anchor = np.empty((4, 4), dtype=np.float64)
    anchor[:, :3] = fm[:, :3] * face_scale
    # Offset rotated into head space, plus the existing translation
    anchor[:, 3] = fm[:, :3] @ t + fm[:, 3]
    return anchor.reshape(16)


class TransformComposer:
    """Reads the stabilized estimate and builds per-landmark anchor transforms."""

    def __init__(self, cache: ResultCache):
        self._cache = cache

    def anchor_transform(self, landmark_index: int) -> np.ndarray:
        """
        Anchor transform for one landmark of the last stabilized estimate.

        Raises:
            EmptyResultError: If no stabilized estimate is cached
            IndexError: If landmark_index is out of range
        """
        result: EstimateResult = self._cache.get()
        landmarks = result.metric_landmarks
        if not -len(landmarks) <= landmark_index < len(landmarks):
            raise IndexError(
                f"Landmark index {landmark_index} out of range for {len(landmarks)} landmarks"
            )
        return compose_anchor_matrix(
            result.face_matrix, result.face_scale, landmarks[landmark_index]
        )
