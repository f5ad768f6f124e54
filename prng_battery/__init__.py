"""
prng-battery: empirical randomness tests for deterministic generators.

Generates samples from linear congruential, LFSR and middle-square engines,
runs the classical frequency / serial / poker / gap / correlation / runs
battery over them, and finds generator periods.
"""

__version__ = "0.3.0"

from prng_battery.engines import LCG, LFSR, MiddleSquare, UniformEngine, build_engine
from prng_battery.errors import (
    InvalidConfigurationError,
    InvalidParameter,
    InvalidSeed,
    LengthMismatch,
    PRNGBatteryError,
)
from prng_battery.period import (
    HullDobell,
    PeriodResult,
    SeedSurvey,
    analyze_seeds,
    find_period,
    hull_dobell,
)
from prng_battery.stats import chi_square_p_value, chi_square_statistic
from prng_battery.test_suite import (
    BatterySettings,
    TestResult,
    correlation_test,
    equidistribution_test,
    frequency_test,
    gap_test,
    poker_test,
    run_all_tests,
    runs_test,
    serial_test,
)

__all__ = [
    "BatterySettings",
    "HullDobell",
    "InvalidConfigurationError",
    "InvalidParameter",
    "InvalidSeed",
    "LCG",
    "LFSR",
    "LengthMismatch",
    "MiddleSquare",
    "PRNGBatteryError",
    "PeriodResult",
    "SeedSurvey",
    "TestResult",
    "UniformEngine",
    "__version__",
    "analyze_seeds",
    "build_engine",
    "chi_square_p_value",
    "chi_square_statistic",
    "correlation_test",
    "equidistribution_test",
    "find_period",
    "frequency_test",
    "gap_test",
    "hull_dobell",
    "poker_test",
    "run_all_tests",
    "runs_test",
    "serial_test",
]
