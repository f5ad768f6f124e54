"""Abstract base class for all uniform engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class IntegerAdvance(Protocol):
    """Anything that can be stepped to its next integer state."""

    def next_int(self) -> int:
        ...


class UniformEngine(ABC):
    """Base class for a deterministic pseudorandom engine.

    Every engine declares metadata and implements ``next_int`` and
    ``next_float``.  The helpers below build sequences from those two
    primitives, so a subclass never has to deal with sample buffers.
    """

    name: str = "unnamed"
    description: str = ""

    @abstractmethod
    def next_int(self) -> int:
        """Advance the internal state and return the new integer value."""
        ...

    @abstractmethod
    def next_float(self) -> float:
        """Return the next value mapped into [0, 1)."""
        ...

    @property
    @abstractmethod
    def state(self) -> dict:
        """Snapshot of the parameters and current state."""
        ...

    # ── helpers available to subclasses ──

    def generate(self, n: int) -> np.ndarray:
        """Draw *n* floats in [0, 1).

        Parameters
        ----------
        n:
            Number of samples.  Zero yields an empty array.

        Returns
        -------
        numpy.ndarray
            1-D float64 array.  The engine state advances by *n* draws.
        """
        if n < 0:
            raise ValueError(f"Sample count must be >= 0, got {n}")
        out = np.empty(n, dtype=np.float64)
        for i in range(n):
            out[i] = self.next_float()
        return out

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self.next_float()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
