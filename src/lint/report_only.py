# src/lint/report_only.py — v1
"""Silent lint run that always leaves a JSON report behind.

Used by CI: nothing is printed except the report location, and failures
that would abort a normal run are recorded in the report with exit code 2.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from ailint.lint.engine import LinterEngine
from ailint.lint.summary import EXIT_FATAL, EXIT_OK, empty_summary
from ailint.reporting.base_reporter import NullReporter
from ailint.reporting.json_report import write_json_report

if TYPE_CHECKING:
    from ailint.cache.base_cache_store import BaseCacheStore
    from ailint.config.models import LinterConfig
    from ailint.lint.judge import RemoteJudge
    from ailint.rules.matcher import RuleMatcher

logger = logging.getLogger(__name__)


async def run_report_only(
    file_paths: list[str],
    config: LinterConfig,
    report_file: Path | str,
    cache: BaseCacheStore,
    judge: RemoteJudge,
    matcher: RuleMatcher,
    log: Callable[[str], None] = print,
) -> int:
    """Run the engine with a silent reporter and write the JSON report.

    Returns:
        The engine's exit code, or 2 if the run failed.
    """
    if not file_paths:
        path = write_json_report(report_file, [], empty_summary(), EXIT_OK)
        log(f"Report written: {path}")
        return EXIT_OK

    engine = LinterEngine(cache=cache, judge=judge, matcher=matcher, reporter=NullReporter())
    try:
        run = await engine.run(file_paths, config)
    except Exception as exc:
        logger.debug("Report-only run failed", exc_info=True)
        path = write_json_report(
            report_file, [], empty_summary(), EXIT_FATAL, error=str(exc) or type(exc).__name__
        )
        log(f"Report written: {path}")
        return EXIT_FATAL

    path = write_json_report(report_file, run.results, run.summary, run.exit_code)
    log(f"Report written: {path}")
    return run.exit_code
