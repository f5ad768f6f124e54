"""Configuration parsing utilities for prng-battery."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple

from prng_battery.engines import UniformEngine, build_engine
from prng_battery.errors import InvalidConfigurationError, MissingFileError
from prng_battery.stats import P_VALUE_METHODS
from prng_battery.test_suite import ALL_TESTS, BatterySettings

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 10_000

# [generator] option -> engine keyword, per engine kind
_ENGINE_OPTIONS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "lcg": {"seed": "seed", "multiplier": "a", "increment": "c", "modulus": "m"},
    "lfsr": {"seed": "seed", "taps": "taps", "register_width": "n_bits",
             "float_bits": "float_bits"},
    "middle_square": {"seed": "seed", "digits": "digits"},
})


@dataclass(frozen=True)
class GeneratorSection:
    """Engine kind and its constructor parameters."""

    kind: str
    params: Mapping[str, object]

    def build(self) -> UniformEngine:
        return build_engine(self.kind, **dict(self.params))


@dataclass(frozen=True)
class OutputSection:
    """Options controlling run history and reports."""

    log_results: bool
    log_path: Path
    log_format: str
    log_retention: int | None
    report_path: Path | None


@dataclass(frozen=True)
class BatteryConfig:
    """Aggregate configuration container returned by :func:`load_config`."""

    generator: GeneratorSection
    samples: int
    battery: BatterySettings
    output: OutputSection
    warnings: Tuple[str, ...] = field(default_factory=tuple)


def load_config(path: Path) -> BatteryConfig:
    """Load and validate an INI configuration file."""

    parser = configparser.ConfigParser()
    try:
        with path.open("r", encoding="utf-8") as config_file:
            parser.read_file(config_file)
    except FileNotFoundError as exc:
        raise MissingFileError(f"Configuration file not found: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem guard
        raise MissingFileError(f"Could not read configuration file: {path}") from exc
    except configparser.Error as exc:
        raise InvalidConfigurationError(f"Malformed configuration file {path}: {exc}") from exc

    warnings: list[str] = []
    generator = _parse_generator(parser)
    samples, battery = _parse_battery(parser, warnings)
    output = _parse_output(parser, path)
    for message in warnings:
        logger.warning(message)

    return BatteryConfig(
        generator=generator,
        samples=samples,
        battery=battery,
        output=output,
        warnings=tuple(warnings),
    )


def _get_int(section: configparser.SectionProxy, key: str, default: int) -> int:
    if key not in section:
        return default
    try:
        return section.getint(key)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be an integer value."
        ) from exc


def _get_float(section: configparser.SectionProxy, key: str, default: float) -> float:
    if key not in section:
        return default
    try:
        return section.getfloat(key)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be numeric."
        ) from exc


def _get_int_list(section: configparser.SectionProxy, key: str,
                  default: Tuple[int, ...]) -> Tuple[int, ...]:
    if key not in section:
        return default
    raw = [item.strip() for item in section[key].split(",") if item.strip()]
    try:
        return tuple(int(item) for item in raw)
    except ValueError as exc:
        raise InvalidConfigurationError(
            f"Option '{key}' in [{section.name}] must be a comma-separated list of integers."
        ) from exc


def _section(parser: configparser.ConfigParser, name: str) -> configparser.SectionProxy:
    if not parser.has_section(name):
        parser.add_section(name)
    return parser[name]


def _parse_generator(parser: configparser.ConfigParser) -> GeneratorSection:
    if not parser.has_section("generator"):
        raise InvalidConfigurationError("Configuration missing required [generator] section.")
    section = parser["generator"]
    kind = section.get("kind", "lcg").strip().lower()
    options = _ENGINE_OPTIONS.get(kind)
    if options is None:
        known = ", ".join(sorted(_ENGINE_OPTIONS))
        raise InvalidConfigurationError(
            f"Option 'kind' in [generator] must be one of: {known}."
        )
    params: dict[str, object] = {}
    for key, keyword in options.items():
        if key not in section:
            continue
        if key == "taps":
            params[keyword] = _get_int_list(section, key, ())
        else:
            params[keyword] = _get_int(section, key, 0)
    unknown = sorted(set(section) - set(options) - {"kind"})
    if unknown:
        raise InvalidConfigurationError(
            f"Unsupported option(s) for '{kind}' in [generator]: {', '.join(unknown)}."
        )
    if kind == "lfsr":
        missing = [key for key in ("seed", "taps", "register_width") if key not in section]
        if missing:
            raise InvalidConfigurationError(
                f"LFSR generator requires option(s): {', '.join(missing)}."
            )
    if kind == "middle_square" and "seed" not in section:
        raise InvalidConfigurationError("Middle-square generator requires option 'seed'.")
    return GeneratorSection(kind=kind, params=MappingProxyType(params))


def _parse_battery(
    parser: configparser.ConfigParser, warnings: list[str]
) -> tuple[int, BatterySettings]:
    defaults = BatterySettings()
    battery = _section(parser, "battery")
    samples = _get_int(battery, "samples", DEFAULT_SAMPLES)
    if samples < 0:
        raise InvalidConfigurationError("Option 'samples' in [battery] must be >= 0.")
    alpha = _get_float(battery, "alpha", defaults.alpha)
    if not 0.0 < alpha < 1.0:
        raise InvalidConfigurationError("Option 'alpha' in [battery] must be between 0 and 1.")
    method = battery.get("method", defaults.method).strip().lower()
    if method not in P_VALUE_METHODS:
        raise InvalidConfigurationError(
            f"Option 'method' in [battery] must be one of: {', '.join(P_VALUE_METHODS)}."
        )

    enabled = list(defaults.enabled)
    if parser.has_section("tests"):
        for name, _ in parser.items("tests"):
            if name not in ALL_TESTS:
                warnings.append(f"Unknown test '{name}' in [tests] ignored.")
                continue
            try:
                is_enabled = parser.getboolean("tests", name)
            except ValueError as exc:
                raise InvalidConfigurationError(
                    f"Test '{name}' in [tests] must be a boolean value."
                ) from exc
            if not is_enabled and name in enabled:
                enabled.remove(name)
    if not enabled:
        raise InvalidConfigurationError("At least one test must be enabled in [tests] section.")

    serial = _section(parser, "serial")
    poker = _section(parser, "poker")
    gap = _section(parser, "gap")
    correlation = _section(parser, "correlation")
    equidistribution = _section(parser, "equidistribution")

    settings = BatterySettings(
        enabled=tuple(enabled),
        alpha=alpha,
        method=method,
        serial_d=_get_int(serial, "d", defaults.serial_d),
        serial_bins=_get_int(serial, "bins", defaults.serial_bins),
        poker_digits=_get_int(poker, "digits", defaults.poker_digits),
        gap_a=_get_float(gap, "a", defaults.gap_a),
        gap_b=_get_float(gap, "b", defaults.gap_b),
        gap_max_bin=_get_int(gap, "max_gap_bin", defaults.gap_max_bin),
        correlation_lags=_get_int_list(correlation, "lags", defaults.correlation_lags),
        equidistribution_bins=_get_int(equidistribution, "bins", defaults.equidistribution_bins),
    )
    if settings.serial_d < 1 or settings.serial_bins < 1:
        raise InvalidConfigurationError("Options 'd' and 'bins' in [serial] must be >= 1.")
    if not 1 <= settings.poker_digits <= 10:
        raise InvalidConfigurationError("Option 'digits' in [poker] must be between 1 and 10.")
    if settings.gap_max_bin < 0:
        raise InvalidConfigurationError("Option 'max_gap_bin' in [gap] must be >= 0.")
    if settings.equidistribution_bins < 1:
        raise InvalidConfigurationError("Option 'bins' in [equidistribution] must be >= 1.")
    return samples, settings


def _resolve(raw: str, base_dir: Path) -> Path:
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def _parse_output(parser: configparser.ConfigParser, config_path: Path) -> OutputSection:
    base_dir = config_path.resolve().parent
    log_results = False
    log_path = (base_dir / "logs" / "run_log.jsonl").resolve()
    log_format = "jsonl"
    log_retention: int | None = 100
    report_path: Path | None = None

    if parser.has_section("output"):
        section = parser["output"]
        if "log_results" in section:
            try:
                log_results = section.getboolean("log_results")
            except ValueError as exc:
                raise InvalidConfigurationError(
                    "Option 'log_results' in [output] must be a boolean value."
                ) from exc
        raw_path = section.get("log_path", "").strip()
        if raw_path:
            log_path = _resolve(raw_path, base_dir)
        if "log_format" in section:
            log_format = section["log_format"].strip().lower()
            if log_format not in {"jsonl", "csv"}:
                raise InvalidConfigurationError(
                    "Option 'log_format' in [output] must be either 'jsonl' or 'csv'."
                )
        if "log_retention" in section:
            retention = _get_int(section, "log_retention", 100)
            log_retention = retention if retention > 0 else None
        raw_report = section.get("report_path", "").strip()
        if raw_report:
            report_path = _resolve(raw_report, base_dir)

    return OutputSection(
        log_results=log_results,
        log_path=log_path,
        log_format=log_format,
        log_retention=log_retention,
        report_path=report_path,
    )


__all__ = [
    "BatteryConfig",
    "GeneratorSection",
    "OutputSection",
    "load_config",
]
