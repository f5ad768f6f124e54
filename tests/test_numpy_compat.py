"""Tests for the NumPy-style uniform source."""

import numpy as np
import pytest

from prng_battery.engines import LCG
from prng_battery.numpy_compat import EngineGenerator


@pytest.fixture
def rng():
    """EngineGenerator over a fixed-seed LCG."""
    return EngineGenerator(LCG(seed=42))


def test_creation(rng):
    assert rng is not None
    assert isinstance(rng.bit_generator, LCG)


def test_random_floats(rng):
    vals = rng.random(10)
    assert vals.shape == (10,)
    assert np.all(vals >= 0) and np.all(vals < 1)


def test_random_scalar(rng):
    assert isinstance(rng.random(), float)


def test_random_shape(rng):
    assert rng.random((2, 3)).shape == (2, 3)


def test_uniform(rng):
    vals = rng.uniform(2.0, 3.0, size=50)
    assert np.all(vals >= 2.0) and np.all(vals < 3.0)


def test_integers(rng):
    vals = rng.integers(0, 256, size=100)
    assert vals.shape == (100,)
    assert np.all(vals >= 0) and np.all(vals < 256)


def test_integers_single_bound(rng):
    v = rng.integers(6)
    assert isinstance(v, int)
    assert 0 <= v < 6


def test_integers_empty_range(rng):
    with pytest.raises(ValueError):
        rng.integers(5, 5)


def test_draws_tracked(rng):
    rng.random(7)
    rng.random()
    assert rng.state["draws"] == 8
    assert rng.state["bit_generator"] == "LCG"


def test_matches_engine():
    a = EngineGenerator(LCG(seed=3)).random(20)
    b = LCG(seed=3).generate(20)
    np.testing.assert_array_equal(a, b)
