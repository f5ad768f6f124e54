"""CLI for prng-battery."""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from prng_battery import __version__
from prng_battery.engines import UniformEngine, build_engine
from prng_battery.errors import PRNGBatteryError
from prng_battery.stats import P_VALUE_METHODS
from prng_battery.test_suite import (
    ALL_TESTS,
    BatterySettings,
    TestResult,
    calculate_quality_score,
    grade_from_score,
    run_all_tests,
)

ENGINE_KINDS = ("lcg", "lfsr", "middle_square")


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log diagnostics to stderr.")
def main(verbose: bool) -> None:
    """prng-battery — empirical randomness tests for deterministic generators."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(levelname)s %(name)s: %(message)s")


# ────────────────────────────────────────────────────────────
# Shared options
# ────────────────────────────────────────────────────────────


def engine_options(fn):
    """Attach the engine selection options to a command."""
    options = [
        click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
                     default=None, help="INI configuration file (overrides engine options)."),
        click.option("--engine", "kind", type=click.Choice(ENGINE_KINDS), default="lcg",
                     show_default=True, help="Generator to test."),
        click.option("--seed", default=1, type=int, show_default=True, help="Initial state."),
        click.option("--multiplier", default=1664525, type=int, show_default=True,
                     help="LCG multiplier a."),
        click.option("--increment", default=1013904223, type=int, show_default=True,
                     help="LCG increment c."),
        click.option("--modulus", default=2**32, type=int, show_default=True,
                     help="LCG modulus m."),
        click.option("--taps", default="1,3", show_default=True,
                     help="LFSR tap positions (1-based, comma-separated)."),
        click.option("--width", default=5, type=int, show_default=True,
                     help="LFSR register width in bits."),
        click.option("--float-bits", default=32, type=int, show_default=True,
                     help="LFSR output bits per float."),
        click.option("--digits", default=4, type=int, show_default=True,
                     help="Middle-square state width in decimal digits."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _reraise_as_click(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (PRNGBatteryError, ValueError) as exc:
            raise click.ClickException(str(exc)) from exc
    return wrapper


def _engine_from_flags(kind: str, seed: int, multiplier: int, increment: int, modulus: int,
                       taps: str, width: int, float_bits: int, digits: int) -> UniformEngine:
    if kind == "lcg":
        return build_engine(kind, seed=seed, a=multiplier, c=increment, m=modulus)
    if kind == "lfsr":
        try:
            tap_list = [int(t) for t in taps.split(",") if t.strip()]
        except ValueError as exc:
            raise click.BadParameter(f"invalid tap list {taps!r}", param_hint="--taps") from exc
        return build_engine(kind, seed=seed, taps=tap_list, n_bits=width, float_bits=float_bits)
    return build_engine(kind, seed=seed, digits=digits)


def _resolve(config_path: Path | None, flags: dict):
    """Return ``(engine, samples_or_None, settings_or_None, config_or_None)``."""
    if config_path is None:
        return _engine_from_flags(**flags), None, None, None
    from prng_battery.config import load_config

    config = load_config(config_path)
    return config.generator.build(), config.samples, config.battery, config


def _log_run(engine_name: str, n: int, results: list[TestResult], config,
             log_path: Path | None, log_format: str | None,
             report_path: Path | None = None) -> None:
    """Append a run-history record when `--log` or `[output] log_results` asks for one."""
    from prng_battery.runlog import RunLogRecord, log_run

    fmt = log_format
    retention: int | None = 100
    if log_path is None and config is not None and config.output.log_results:
        log_path = config.output.log_path
        fmt = fmt or config.output.log_format
        retention = config.output.log_retention
    if log_path is None:
        return
    record = RunLogRecord.from_results(engine_name, n, results, report_path=report_path)
    written = log_run(record, log_path, fmt=fmt or "jsonl", retention=retention)
    click.echo(f"Logged run to {written}")


def _results_table(title: str, results: list[TestResult]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan",
                  border_style="bright_black")
    table.add_column("Test", style="bold", no_wrap=True)
    table.add_column("Statistic", justify="right")
    table.add_column("df", justify="right")
    table.add_column("P-Value", justify="right")
    table.add_column("Grade", justify="center")
    table.add_column("Result", justify="center")
    for r in results:
        style = "green" if r.passed else "red"
        table.add_row(r.name, f"{r.statistic:.4f}", str(r.degrees_of_freedom),
                      f"{r.p_value:.6f}", r.grade,
                      f"[{style}]{'PASS' if r.passed else 'FAIL'}[/]")
    return table


# ────────────────────────────────────────────────────────────
# Commands
# ────────────────────────────────────────────────────────────


@main.command()
@engine_options
@click.option("--count", default=10, type=int, show_default=True, help="Number of floats.")
@_reraise_as_click
def generate(config_path: Path | None, count: int, **flags) -> None:
    """Print floats in [0, 1) from the selected engine."""
    engine, _, _, _ = _resolve(config_path, flags)
    for value in engine.generate(count):
        click.echo(f"{value:.10f}")


@main.command()
@engine_options
@click.option("--samples", default=None, type=int, help="Sample size (default 10000).")
@click.option("--alpha", default=None, type=float, help="Significance level (default 0.01).")
@click.option("--method", type=click.Choice(P_VALUE_METHODS), default=None,
              help="Chi-square p-value method.")
@click.option("--tests", "test_filter", default=None,
              help=f"Comma-separated subset of: {', '.join(ALL_TESTS)}.")
@click.option("--log", "log_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Append a run record to this history file.")
@click.option("--log-format", type=click.Choice(["jsonl", "csv"]), default=None,
              help="Run history format.")
@_reraise_as_click
def battery(config_path: Path | None, samples: int | None, alpha: float | None,
            method: str | None, test_filter: str | None, log_path: Path | None,
            log_format: str | None, **flags) -> None:
    """Run the randomness test battery on one generated sample."""
    from dataclasses import replace

    engine, cfg_samples, settings, config = _resolve(config_path, flags)
    settings = settings or BatterySettings()
    if alpha is not None:
        settings = replace(settings, alpha=alpha)
    if method is not None:
        settings = replace(settings, method=method)
    if test_filter:
        settings = replace(settings, enabled=tuple(t.strip() for t in test_filter.split(",")
                                                   if t.strip()))
    n = samples if samples is not None else cfg_samples if cfg_samples is not None else 10_000

    data = engine.generate(n)
    results = run_all_tests(data, settings)
    score = calculate_quality_score(results)
    passed = sum(1 for r in results if r.passed)

    Console().print(_results_table(f"{engine.name}: {n:,} samples", results))
    click.echo(f"Score: {score:.1f}/100 ({grade_from_score(score)}), "
               f"passed {passed}/{len(results)} at alpha={settings.alpha}")

    _log_run(engine.name, n, results, config, log_path, log_format)


@main.command()
@engine_options
@click.option("--max-iterations", default=1_000_000, type=int, show_default=True,
              help="Iteration budget before giving up.")
@_reraise_as_click
def period(config_path: Path | None, max_iterations: int, **flags) -> None:
    """Find the period of the selected generator's integer sequence."""
    from prng_battery.period import find_period

    engine, _, _, _ = _resolve(config_path, flags)
    result = find_period(engine, max_iterations=max_iterations)
    if result.found:
        click.echo(f"Period: {result.period}")
        click.echo(f"Repeated value: {result.repeat_value}")
        click.echo(f"Tail length: {result.tail_length}")
    else:
        click.echo(f"No period found within {max_iterations:,} iterations.")


@main.command()
@click.option("--multiplier", default=1664525, type=int, show_default=True, help="LCG multiplier a.")
@click.option("--increment", default=1013904223, type=int, show_default=True,
              help="LCG increment c.")
@click.option("--modulus", default=2**32, type=int, show_default=True, help="LCG modulus m.")
@click.option("--seeds", "seed_limit", default=0, type=int,
              help="Also survey periods for seeds 0..N (0 = skip).")
@click.option("--max-iterations", default=1_000_000, type=int, show_default=True,
              help="Iteration budget per seed.")
@_reraise_as_click
def analyze(multiplier: int, increment: int, modulus: int, seed_limit: int,
            max_iterations: int) -> None:
    """Check the Hull–Dobell full-period conditions for an LCG."""
    from prng_battery.period import analyze_seeds, hull_dobell

    check = hull_dobell(multiplier, increment, modulus)
    factors = ", ".join(str(p) for p in check.prime_factors) or "none"
    click.echo(f"Prime factors of m: {factors}")
    click.echo(f"gcd(c, m) = 1: {'yes' if check.coprime_increment else 'no'}")
    click.echo(f"a - 1 divisible by every prime factor: "
               f"{'yes' if check.multiplier_divisible else 'no'}")
    click.echo(f"4 | m implies 4 | a - 1: {'yes' if check.multiple_of_four else 'no'}")
    click.echo(f"Full period: {'yes' if check.full_period else 'no'}")
    if seed_limit > 0:
        survey = analyze_seeds(multiplier, increment, modulus, seed_limit, max_iterations)
        if survey.max_period is None:
            click.echo(f"No period found within {max_iterations:,} iterations for any seed.")
        else:
            click.echo(f"Max period: {survey.max_period} ({survey.count_max}/"
                       f"{len(survey.periods)} seeds), mean {survey.mean_period:.2f}")


@main.command()
@engine_options
@click.option("--samples", default=None, type=int, help="Sample size (default 10000).")
@click.option("--output", "output_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Output path for report.")
@click.option("--period-budget", default=0, type=int,
              help="Also search for the period with this iteration budget (0 = skip).")
@click.option("--log", "log_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Append a run record to this history file.")
@click.option("--log-format", type=click.Choice(["jsonl", "csv"]), default=None,
              help="Run history format.")
@_reraise_as_click
def report(config_path: Path | None, samples: int | None, output_path: Path | None,
           period_budget: int, log_path: Path | None, log_format: str | None,
           **flags) -> None:
    """Full test battery with Markdown report."""
    from datetime import datetime

    from prng_battery.period import find_period
    from prng_battery.report import generate_full_report

    engine, cfg_samples, settings, config = _resolve(config_path, flags)
    n = samples if samples is not None else cfg_samples if cfg_samples is not None else 10_000
    results = run_all_tests(engine.generate(n), settings)

    period_result = None
    if period_budget > 0:
        fresh, _, _, _ = _resolve(config_path, flags)
        period_result = find_period(fresh, max_iterations=period_budget)

    if output_path is None and config is not None:
        output_path = config.output.report_path
    if output_path is None:
        output_path = Path("reports") / f"battery_{engine.name}_{datetime.now():%Y-%m-%d}.md"

    generate_full_report({engine.name: (n, results)}, output_path, period=period_result)
    click.echo(f"Report saved to: {output_path}")
    _log_run(engine.name, n, results, config, log_path, log_format, report_path=output_path)
