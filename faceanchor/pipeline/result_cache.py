"""Holder for the most recent stabilized estimate."""

from typing import Optional

import numpy as np

from .errors import EmptyResultError
from .types import EstimateResult


def _frozen(array: np.ndarray) -> np.ndarray:
    out = np.array(array, dtype=np.float64, copy=True)
    out.flags.writeable = False
    return out


class ResultCache:
    """
    Either empty or holding one complete, stabilized EstimateResult.

    Stored arrays are read-only copies, so callers reading the cache cannot
    disturb the next filtering pass.
    """

    def __init__(self):
        self._result: Optional[EstimateResult] = None

    @property
    def is_empty(self) -> bool:
        return self._result is None

    @property
    def result(self) -> Optional[EstimateResult]:
        return self._result

    def get(self) -> EstimateResult:
        if self._result is None:
            raise EmptyResultError("No stabilized face estimate is available")
        return self._result

    def store(self, result: EstimateResult) -> EstimateResult:
        if not result.is_complete:
            raise ValueError("Only complete estimates can be cached")
        self._result = EstimateResult(
            metric_landmarks=_frozen(result.metric_landmarks),
            face_matrix=_frozen(result.face_matrix),
            face_scale=float(result.face_scale),
        )
        return self._result

    def clear(self) -> None:
        self._result = None
