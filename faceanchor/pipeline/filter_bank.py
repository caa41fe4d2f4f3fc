"""
Bank of one-euro filters covering a full face estimate.

One filter per landmark (3 components), one for the 16-value pose matrix and
one for the scale. Channels are always reset together so that a regained face
never mixes stale and fresh temporal baselines.
"""

from typing import List, Optional

import numpy as np

from .errors import NonFiniteEstimateError, ShapeMismatchError
from .one_euro import OneEuroFilter
from .types import CANONICAL_LANDMARK_COUNT, EstimateResult, TrackingParams


class FilterBank:
    """Independent OneEuroFilter channels for landmarks, pose matrix and scale."""

    def __init__(
        self,
        num_landmarks: int = CANONICAL_LANDMARK_COUNT,
        params: Optional[TrackingParams] = None,
    ):
        if params is None:
            params = TrackingParams(num_landmarks=num_landmarks)

        def make_filter():
            return OneEuroFilter(
                min_cutoff=params.min_cutoff,
                beta=params.beta,
                d_cutoff=params.d_cutoff,
            )

        self.num_landmarks = num_landmarks
        self.landmark_filters: List[OneEuroFilter] = [
            make_filter() for _ in range(num_landmarks)
        ]
        self.matrix_filter = make_filter()
        self.scale_filter = make_filter()

    def channels(self) -> List[OneEuroFilter]:
        return [*self.landmark_filters, self.matrix_filter, self.scale_filter]

    @property
    def is_initialized(self) -> bool:
        return all(f.is_initialized for f in self.channels())

    @property
    def any_initialized(self) -> bool:
        return any(f.is_initialized for f in self.channels())

    def reset_all(self) -> None:
        for channel in self.channels():
            channel.reset()

    def _validate(self, raw: EstimateResult) -> None:
        if not raw.is_complete:
            raise ShapeMismatchError("Cannot filter an incomplete estimate")
        if raw.metric_landmarks.shape != (self.num_landmarks, 3):
            raise ShapeMismatchError(
                f"Expected {self.num_landmarks} landmarks, "
                f"got array of shape {raw.metric_landmarks.shape}"
            )
        if np.shape(raw.face_matrix) != (16,):
            raise ShapeMismatchError(
                f"Expected 16 pose matrix values, got shape {np.shape(raw.face_matrix)}"
            )
        if not (
            np.all(np.isfinite(raw.metric_landmarks))
            and np.all(np.isfinite(raw.face_matrix))
            and np.isfinite(raw.face_scale)
        ):
            raise NonFiniteEstimateError("Estimate contains NaN or infinite values")

    def filter_estimate(
        self,
        timestamp: float,
        raw: EstimateResult,
        previous: Optional[EstimateResult],
    ) -> EstimateResult:
        """
        Filter a raw estimate channel by channel.

        With no previous stabilized result the raw estimate is adopted as is and
        every channel is seeded from it. The estimate is validated before any
        channel is touched, so a rejected estimate leaves the bank unchanged.

        Args:
            timestamp (float): Shared sample time for all channels, in seconds
            raw (EstimateResult): Complete estimate from the pose estimator
            previous (EstimateResult, optional): Last stabilized result

        Returns:
            EstimateResult: Stabilized estimate

        Raises:
            ShapeMismatchError: If the estimate does not fit this bank
            NonFiniteEstimateError: If the estimate holds NaN or inf values
        """
        self._validate(raw)

        if previous is None:
            self.reset_all()

        landmarks = np.empty_like(raw.metric_landmarks)
        for i, landmark_filter in enumerate(self.landmark_filters):
            landmarks[i] = landmark_filter.filter(timestamp, raw.metric_landmarks[i])

        face_matrix = self.matrix_filter.filter(timestamp, raw.face_matrix)
        face_scale = self.scale_filter.filter(timestamp, [raw.face_scale])

        return EstimateResult(
            metric_landmarks=landmarks,
            face_matrix=face_matrix,
            face_scale=float(face_scale[0]),
        )
