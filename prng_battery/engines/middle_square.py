"""Von Neumann's middle-square method."""

from __future__ import annotations

from prng_battery.engines.base import UniformEngine
from prng_battery.errors import InvalidParameter, InvalidSeed


class MiddleSquare(UniformEngine):
    """Square the state, zero-pad to ``2·digits`` digits, keep the middle ones.

    The method degenerates quickly (often to 0 or a short cycle), which makes
    it a useful negative control for the battery and the period finder.
    """

    name = "middle_square"
    description = "Middle-square method over fixed-width decimal states"

    def __init__(self, seed: int, digits: int = 4) -> None:
        if digits < 1:
            raise InvalidParameter(f"digits must be >= 1, got {digits}")
        limit = 10 ** digits
        if not 0 <= seed < limit:
            raise InvalidSeed(f"seed must be between 0 and {limit - 1}, got {seed}")
        self._digits = int(digits)
        self._modulus = limit
        self._x = int(seed)

    @property
    def digits(self) -> int:
        return self._digits

    def next_int(self) -> int:
        squared = str(self._x ** 2).rjust(2 * self._digits, "0")
        start = (len(squared) - self._digits) // 2
        self._x = int(squared[start:start + self._digits])
        return self._x

    def next_float(self) -> float:
        return self.next_int() / self._modulus

    @property
    def state(self) -> dict:
        return {"engine": self.name, "digits": self._digits, "x": self._x}
