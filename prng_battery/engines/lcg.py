"""Linear congruential generator."""

from __future__ import annotations

from prng_battery.engines.base import UniformEngine
from prng_battery.errors import InvalidParameter


class LCG(UniformEngine):
    """``x' = (a·x + c) mod m``.

    The seed is reduced modulo *m*, so any integer is accepted.  Floats are
    ``next_int() / m`` and therefore never reach 1.0.
    """

    name = "lcg"
    description = "Linear congruential generator x' = (a*x + c) mod m"

    def __init__(self, seed: int = 1, a: int = 1664525, c: int = 1013904223,
                 m: int = 2**32) -> None:
        if m < 1:
            raise InvalidParameter(f"Modulus must be >= 1, got {m}")
        self._a = int(a)
        self._c = int(c)
        self._m = int(m)
        self._x = int(seed) % self._m

    @property
    def a(self) -> int:
        return self._a

    @property
    def c(self) -> int:
        return self._c

    @property
    def m(self) -> int:
        return self._m

    @property
    def x(self) -> int:
        return self._x

    def next_int(self) -> int:
        self._x = (self._a * self._x + self._c) % self._m
        return self._x

    def next_float(self) -> float:
        return self.next_int() / self._m

    @property
    def state(self) -> dict:
        return {"engine": self.name, "a": self._a, "c": self._c, "m": self._m, "x": self._x}
