"""NumPy-compatible uniform source backed by a deterministic engine.

Usage::

    from prng_battery.engines import LCG
    from prng_battery.numpy_compat import EngineGenerator

    rng = EngineGenerator(LCG(seed=42))
    rng.random(10)
    rng.integers(0, 256, size=100)

Transform-based generators (Box–Muller, inversion, ...) should take one of
these instead of calling ``numpy.random`` directly, so their output stays a
pure function of the engine seed.
"""

from __future__ import annotations

import numpy as np

from prng_battery.engines.base import UniformEngine


class EngineGenerator:
    """Subset of the ``numpy.random.Generator`` interface drawn from one engine.

    Not a true numpy Generator (that requires a C-level BitGenerator), but it
    covers the uniform draws that downstream transforms need.

    Parameters
    ----------
    engine : UniformEngine
        The engine every draw advances.  It must not be shared with another
        consumer while this wrapper is in use.
    """

    def __init__(self, engine: UniformEngine):
        self._engine = engine
        self._draws = 0

    def _floats(self, size) -> np.ndarray:
        shape = () if size is None else (size,) if np.isscalar(size) else tuple(size)
        count = int(np.prod(shape)) if shape else 1
        self._draws += count
        return self._engine.generate(count).reshape(shape)

    def random(self, size=None):
        """Floats in [0, 1)."""
        out = self._floats(size)
        return float(out) if size is None else out

    def uniform(self, low=0.0, high=1.0, size=None):
        """Floats in [low, high)."""
        out = low + (high - low) * self._floats(size)
        return float(out) if size is None else out

    def integers(self, low, high=None, size=None):
        """Integers in [low, high); ``integers(n)`` means [0, n)."""
        if high is None:
            low, high = 0, low
        if high <= low:
            raise ValueError(f"high ({high}) must be greater than low ({low})")
        out = low + np.floor(self._floats(size) * (high - low)).astype(np.int64)
        out = np.minimum(out, high - 1)
        return int(out) if size is None else out

    @property
    def bit_generator(self) -> UniformEngine:
        return self._engine

    @property
    def state(self) -> dict:
        return {"bit_generator": type(self._engine).__name__, "draws": self._draws,
                **self._engine.state}
