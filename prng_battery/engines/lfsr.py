"""Fibonacci linear-feedback shift register (m-sequence generator)."""

from __future__ import annotations

from typing import Sequence

from prng_battery.engines.base import UniformEngine
from prng_battery.errors import InvalidParameter, InvalidSeed


class LFSR(UniformEngine):
    """Right-shifting LFSR with XOR feedback into the top bit.

    Tap positions are 1-based offsets from the least significant bit, so tap
    ``t`` reads bit ``t - 1``.  A tap set whose polynomial is primitive (for
    example ``(1, 3)`` on a 5-bit register) walks all ``2**n_bits - 1``
    non-zero states.
    """

    name = "lfsr"
    description = "Linear-feedback shift register, LSB output, XOR taps"

    def __init__(self, seed: int, taps: Sequence[int], n_bits: int,
                 float_bits: int = 32) -> None:
        if seed <= 0:
            raise InvalidSeed(f"LFSR seed must be > 0, got {seed}")
        if n_bits < 1:
            raise InvalidParameter(f"Register width must be >= 1, got {n_bits}")
        if float_bits < 1:
            raise InvalidParameter(f"float_bits must be >= 1, got {float_bits}")
        taps = tuple(int(t) for t in taps)
        if not taps:
            raise InvalidParameter("At least one tap position is required")
        bad = [t for t in taps if not 1 <= t <= n_bits]
        if bad:
            raise InvalidParameter(f"Tap positions {bad} outside 1..{n_bits}")
        state = int(seed) & ((1 << n_bits) - 1)
        if state == 0:
            raise InvalidSeed(f"Seed {seed} has no bits set within {n_bits}-bit register")
        self._state = state
        self._taps = taps
        self._n_bits = int(n_bits)
        self._float_bits = int(float_bits)

    @property
    def taps(self) -> tuple[int, ...]:
        return self._taps

    @property
    def n_bits(self) -> int:
        return self._n_bits

    @property
    def register(self) -> int:
        return self._state

    def next_bit(self) -> int:
        """Shift once and return the bit that fell off the bottom."""
        bit = self._state & 1
        feedback = 0
        for t in self._taps:
            feedback ^= (self._state >> (t - 1)) & 1
        self._state = (self._state >> 1) | (feedback << (self._n_bits - 1))
        return bit

    def next_int(self) -> int:
        self.next_bit()
        return self._state

    def next_float(self, bits: int | None = None) -> float:
        """Assemble *bits* output bits (MSB first) into a float in [0, 1)."""
        bits = self._float_bits if bits is None else bits
        if bits < 1:
            raise ValueError(f"bits must be >= 1, got {bits}")
        val = 0
        for _ in range(bits):
            val = (val << 1) | self.next_bit()
        return val / (1 << bits)

    @property
    def state(self) -> dict:
        return {
            "engine": self.name,
            "taps": list(self._taps),
            "n_bits": self._n_bits,
            "float_bits": self._float_bits,
            "register": self._state,
        }
