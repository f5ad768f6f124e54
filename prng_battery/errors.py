"""Exception types raised by prng-battery."""

from __future__ import annotations


class PRNGBatteryError(Exception):
    """Base error type for library specific failures."""


class InvalidSeed(PRNGBatteryError, ValueError):
    """Raised when a generator is constructed with a seed outside its domain."""


class InvalidParameter(PRNGBatteryError, ValueError):
    """Raised when a generator is constructed with invalid parameters."""


class LengthMismatch(PRNGBatteryError, ValueError):
    """Raised when observed and expected counts differ in length."""


class InvalidConfigurationError(PRNGBatteryError):
    """Raised when the configuration file is malformed or invalid."""


class MissingFileError(PRNGBatteryError):
    """Raised when a required input file could not be located."""


__all__ = [
    "InvalidConfigurationError",
    "InvalidParameter",
    "InvalidSeed",
    "LengthMismatch",
    "MissingFileError",
    "PRNGBatteryError",
]
