"""Markdown report generator for the randomness test battery."""

from __future__ import annotations

import logging
import platform
from datetime import datetime
from pathlib import Path
from typing import Sequence

from prng_battery import __version__
from prng_battery.period import PeriodResult
from prng_battery.test_suite import TestResult, calculate_quality_score, grade_from_score

logger = logging.getLogger(__name__)


def _pass_icon(passed: bool) -> str:
    return "✅" if passed else "❌"


def generate_engine_report(name: str, samples: int, results: Sequence[TestResult]) -> str:
    """Generate markdown section for a single engine."""
    score = calculate_quality_score(results)
    passed = sum(1 for r in results if r.passed)
    total = len(results)

    lines = [
        f"### {name}",
        f"**Score: {score:.1f}/100** | **Grade: {grade_from_score(score)}** "
        f"| **Passed: {passed}/{total}** | **Samples: {samples:,}**\n",
        "| Test | Result | Grade | Statistic | df | P-Value | Details |",
        "|------|--------|-------|-----------|----|---------|---------|",
    ]
    for r in results:
        lines.append(
            f"| {r.name} | {_pass_icon(r.passed)} | {r.grade} | {r.statistic:.4f} "
            f"| {r.degrees_of_freedom} | {r.p_value:.6f} | {r.details} |"
        )
    lines.append("")
    return "\n".join(lines)


def generate_full_report(
    engine_results: dict[str, tuple[int, list[TestResult]]],
    output_path: str | Path | None = None,
    *,
    period: PeriodResult | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Generate complete markdown report for one or more engines."""
    now = generated_at or datetime.now()
    ranked = sorted(
        engine_results.items(),
        key=lambda item: calculate_quality_score(item[1][1]),
        reverse=True,
    )

    lines = [
        "# PRNG Battery — Randomness Test Report",
        "",
        f"**Generated:** {now.strftime('%Y-%m-%d %H:%M:%S')}",
        f"**prng-battery:** {__version__} (Python {platform.python_version()})",
        "",
        "## Summary",
        "",
        "| Rank | Engine | Score | Grade | Passed | Samples |",
        "|------|--------|-------|-------|--------|---------|",
    ]
    for i, (name, (samples, results)) in enumerate(ranked, 1):
        score = calculate_quality_score(results)
        passed = sum(1 for r in results if r.passed)
        lines.append(
            f"| {i} | {name} | {score:.1f} | {grade_from_score(score)} "
            f"| {passed}/{len(results)} | {samples:,} |"
        )

    if period is not None:
        lines += ["", "## Period", ""]
        if period.found:
            lines.append(
                f"Period **{period.period}** (value {period.repeat_value} repeated, "
                f"tail length {period.tail_length}, {period.iterations:,} steps)."
            )
        else:
            lines.append(f"No repeat within {period.iterations:,} steps.")

    lines += ["", "---", "", "## Detailed Results", ""]
    for name, (samples, results) in ranked:
        lines.append(generate_engine_report(name, samples, results))
        lines.append("---\n")

    report = "\n".join(lines)

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report, encoding="utf-8")
        logger.info("report written to %s", path)

    return report
