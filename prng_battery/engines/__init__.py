"""Uniform engine implementations."""

from prng_battery.engines.base import IntegerAdvance, UniformEngine
from prng_battery.engines.lcg import LCG
from prng_battery.engines.lfsr import LFSR
from prng_battery.engines.middle_square import MiddleSquare
from prng_battery.errors import InvalidParameter

ALL_ENGINES: list[type[UniformEngine]] = [
    LCG,
    LFSR,
    MiddleSquare,
]


def build_engine(kind: str, **params) -> UniformEngine:
    """Instantiate the engine registered under *kind* with *params*."""
    registry = {cls.name: cls for cls in ALL_ENGINES}
    cls = registry.get(kind.strip().lower())
    if cls is None:
        known = ", ".join(sorted(registry))
        raise InvalidParameter(f"Unknown engine '{kind}'. Known engines: {known}")
    try:
        return cls(**params)
    except TypeError as exc:
        raise InvalidParameter(f"Bad parameters for engine '{kind}': {exc}") from exc


__all__ = [
    "ALL_ENGINES",
    "IntegerAdvance",
    "LCG",
    "LFSR",
    "MiddleSquare",
    "UniformEngine",
    "build_engine",
]
