"""Structured JSONL/CSV history of battery runs."""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from prng_battery.test_suite import TestResult, calculate_quality_score

logger = logging.getLogger(__name__)

LOG_FIELDNAMES = ("timestamp", "engine", "samples", "passed", "total", "score", "report_path")
"""Ordered field names used for CSV and JSON payloads."""

LOG_FORMATS = ("jsonl", "csv")


@dataclass(frozen=True)
class RunLogRecord:
    """One logged battery run."""

    timestamp: str
    engine: str
    samples: int
    passed: int
    total: int
    score: float
    report_path: str

    @classmethod
    def from_results(
        cls,
        engine: str,
        samples: int,
        results: Sequence[TestResult],
        *,
        report_path: Path | None = None,
        started_at: datetime | None = None,
    ) -> "RunLogRecord":
        started_at = started_at or datetime.now(timezone.utc)
        return cls(
            timestamp=started_at.astimezone(timezone.utc).isoformat(),
            engine=engine,
            samples=int(samples),
            passed=sum(1 for r in results if r.passed),
            total=len(results),
            score=round(calculate_quality_score(results), 2),
            report_path=str(report_path) if report_path is not None else "",
        )


def log_run(
    record: RunLogRecord,
    log_path: Path,
    *,
    fmt: str = "jsonl",
    retention: int | None = 100,
) -> Path:
    """Append *record* to *log_path* and keep at most *retention* entries."""

    fmt = fmt.lower()
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unsupported log format: {fmt}")
    target = Path(log_path).expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "jsonl":
        with target.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(record), ensure_ascii=False) + "\n")
    else:
        is_new_file = not target.exists() or target.stat().st_size == 0
        with target.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=LOG_FIELDNAMES)
            if is_new_file:
                writer.writeheader()
            writer.writerow(asdict(record))
    if retention is not None and retention > 0:
        trim_log(target, retention, fmt=fmt)
    logger.info("logged %s run (%d/%d passed) to %s", record.engine, record.passed,
                record.total, target)
    return target


def trim_log(path: Path, max_entries: int, *, fmt: str = "jsonl") -> None:
    """Trim *path* so only the last *max_entries* records remain."""

    if max_entries <= 0 or not path.exists():
        return
    with path.open("r", encoding="utf-8") as handle:
        lines = handle.readlines()
    header: list[str] = []
    if fmt == "csv" and lines:
        header, lines = lines[:1], lines[1:]
    if len(lines) <= max_entries:
        return
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.writelines(header + lines[-max_entries:])


__all__ = ["LOG_FIELDNAMES", "RunLogRecord", "log_run", "trim_log"]
