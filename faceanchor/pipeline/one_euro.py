"""
One-euro adaptive low-pass filter.

The cutoff frequency rises with the estimated speed of the signal, so slow
drift is smoothed heavily while fast motion passes through with little lag.
Works on scalars and on numpy arrays (componentwise).
"""

import math
from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .types import DEFAULT_BETA, DEFAULT_D_CUTOFF, DEFAULT_MIN_CUTOFF


def smoothing_factor(elapsed, cutoff):
    """
    Exponential smoothing coefficient for a given cutoff frequency.

    Args:
        elapsed (float): Time since the previous sample, in seconds
        cutoff (float or np.ndarray): Cutoff frequency in Hz

    Returns:
        Coefficient in (0, 1); smaller cutoff gives a smaller coefficient
    """
    r = 2 * math.pi * cutoff * elapsed
    return r / (r + 1)


def exponential_smoothing(alpha, value, previous):
    return alpha * value + (1 - alpha) * previous


class OneEuroFilter:
    """Single-channel one-euro filter holding its own temporal state."""

    def __init__(
        self,
        min_cutoff: float = DEFAULT_MIN_CUTOFF,
        beta: float = DEFAULT_BETA,
        d_cutoff: float = DEFAULT_D_CUTOFF,
    ):
        if not min_cutoff > 0:
            raise ConfigurationError(f"min_cutoff must be > 0, got {min_cutoff}")
        if not beta >= 0:
            raise ConfigurationError(f"beta must be >= 0, got {beta}")
        if not d_cutoff > 0:
            raise ConfigurationError(f"d_cutoff must be > 0, got {d_cutoff}")

        self.min_cutoff = float(min_cutoff)
        self.beta = float(beta)
        self.d_cutoff = float(d_cutoff)

        self._x_prev: Optional[np.ndarray] = None
        self._dx_prev: Optional[np.ndarray] = None
        self._t_prev: Optional[float] = None

    @property
    def is_initialized(self) -> bool:
        return self._t_prev is not None

    def reset(self) -> None:
        self._x_prev = None
        self._dx_prev = None
        self._t_prev = None

    def filter(self, timestamp: float, value):
        """
        Smooth one sample.

        The first sample after construction or reset is returned unchanged and
        seeds the state. Non-increasing timestamps pass the raw value through
        and non-finite samples return the last smoothed value; neither touches
        the state.

        Args:
            timestamp (float): Sample time in seconds
            value (float or array-like): Raw sample

        Returns:
            Smoothed sample with the same shape as the input
        """
        x = np.asarray(value, dtype=np.float64)
        scalar = x.ndim == 0

        if self._t_prev is None:
            if not np.all(np.isfinite(x)):
                return _unwrap(x.copy(), scalar)
            self._x_prev = x.copy()
            self._dx_prev = np.zeros_like(x)
            self._t_prev = float(timestamp)
            return _unwrap(x.copy(), scalar)

        elapsed = float(timestamp) - self._t_prev
        if not elapsed > 0:
            return _unwrap(x.copy(), scalar)
        if x.shape != self._x_prev.shape or not np.all(np.isfinite(x)):
            return _unwrap(self._x_prev.copy(), scalar)

        alpha_d = smoothing_factor(elapsed, self.d_cutoff)
        dx = (x - self._x_prev) / elapsed
        dx_hat = exponential_smoothing(alpha_d, dx, self._dx_prev)

        cutoff = self.min_cutoff + self.beta * np.abs(dx_hat)
        alpha = smoothing_factor(elapsed, cutoff)
        x_hat = exponential_smoothing(alpha, x, self._x_prev)

        self._x_prev = x_hat
        self._dx_prev = dx_hat
        self._t_prev = float(timestamp)

        return _unwrap(x_hat.copy(), scalar)


def _unwrap(array: np.ndarray, scalar: bool):
    return float(array) if scalar else array
