# src/reporting/json_report.py — v1
"""Machine-readable JSON report (``--report-only`` mode)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ailint.core.models import LintResult, LintSummary

logger = logging.getLogger(__name__)

DEFAULT_REPORT_FILE = ".ai-lint/report.json"


def build_report(
    results: list[LintResult],
    summary: LintSummary,
    exit_code: int,
    error: str | None = None,
) -> dict[str, Any]:
    report: dict[str, Any] = {
        "mode": "report-only",
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "exit_code": exit_code,
        "summary": summary.model_dump(mode="json"),
        "results": [r.to_json_dict() for r in results],
    }
    if error is not None:
        report["error"] = error
    return report


def write_json_report(
    report_file: Path | str,
    results: list[LintResult],
    summary: LintSummary,
    exit_code: int,
    error: str | None = None,
) -> Path:
    """Write the report, creating parent directories. Returns the absolute path."""
    path = Path(report_file).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = build_report(results, summary, exit_code, error)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.debug("Wrote JSON report to %s", path)
    return path
