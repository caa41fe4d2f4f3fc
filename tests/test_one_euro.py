"""Tests for the one-euro adaptive filter."""

import math

import numpy as np
import pytest

from faceanchor.pipeline import ConfigurationError, OneEuroFilter
from faceanchor.pipeline.one_euro import smoothing_factor

DT = 1.0 / 30.0


def test_first_sample_passes_through():
    f = OneEuroFilter()
    assert not f.is_initialized
    assert f.filter(0.0, 3.5) == 3.5
    assert f.is_initialized

    vector = OneEuroFilter()
    out = vector.filter(0.0, [1.0, -2.0, 4.0])
    np.testing.assert_array_equal(out, [1.0, -2.0, 4.0])


def test_constant_input_converges_without_overshoot():
    f = OneEuroFilter(min_cutoff=1.0, beta=1.0)
    f.filter(0.0, 0.0)

    outputs = [f.filter((i + 1) * DT, 1.0) for i in range(200)]

    assert abs(outputs[-1] - 1.0) < 1e-6
    assert all(b >= a - 1e-12 for a, b in zip(outputs, outputs[1:]))
    assert all(out <= 1.0 + 1e-12 for out in outputs)


def test_reset_makes_next_sample_a_passthrough():
    f = OneEuroFilter()
    f.filter(0.0, 0.0)
    f.filter(DT, 10.0)

    f.reset()
    assert not f.is_initialized
    assert f.filter(2 * DT, 42.0) == 42.0


def test_non_increasing_timestamp_is_passthrough_without_state_change():
    f = OneEuroFilter()
    f.filter(1.0, 0.0)

    assert f.filter(1.0, 10.0) == 10.0
    assert f.filter(0.5, 7.0) == 7.0

    # State still anchored at value 0 with zero derivative
    assert f.filter(1.0 + DT, 0.0) == 0.0


def test_nan_sample_is_contained():
    f = OneEuroFilter()
    f.filter(0.0, 2.0)

    assert f.filter(DT, float("nan")) == 2.0
    out = f.filter(2 * DT, 2.0)
    assert out == pytest.approx(2.0)
    assert math.isfinite(out)


def test_nan_first_sample_does_not_seed():
    f = OneEuroFilter()
    out = f.filter(0.0, [float("nan"), 1.0])
    assert math.isnan(out[0])
    assert not f.is_initialized


def test_output_moves_towards_raw_value():
    f = OneEuroFilter(min_cutoff=1.0, beta=0.0)
    f.filter(0.0, 0.0)
    out = f.filter(DT, 1.0)

    expected = smoothing_factor(DT, 1.0)
    assert out == pytest.approx(expected)
    assert 0.0 < out < 1.0


def test_higher_beta_reacts_faster_to_motion():
    slow = OneEuroFilter(min_cutoff=1.0, beta=0.0)
    fast = OneEuroFilter(min_cutoff=1.0, beta=10.0)
    for f in (slow, fast):
        f.filter(0.0, 0.0)

    assert fast.filter(DT, 1.0) > slow.filter(DT, 1.0)


def test_vector_components_are_independent():
    f = OneEuroFilter(beta=0.0)
    f.filter(0.0, [0.0, 5.0])
    out = f.filter(DT, [1.0, 5.0])

    assert 0.0 < out[0] < 1.0
    assert out[1] == pytest.approx(5.0)


def test_smoothing_factor_grows_with_cutoff():
    assert smoothing_factor(DT, 1.0) == pytest.approx(
        (2 * math.pi * DT) / (2 * math.pi * DT + 1)
    )
    assert smoothing_factor(DT, 0.5) < smoothing_factor(DT, 5.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_cutoff": 0.0},
        {"min_cutoff": -1.0},
        {"beta": -0.1},
        {"d_cutoff": 0.0},
    ],
)
def test_invalid_parameters_are_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        OneEuroFilter(**kwargs)
    with pytest.raises(ValueError):
        OneEuroFilter(**kwargs)
