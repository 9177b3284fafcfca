# src/reporting/base_reporter.py — v1
"""Abstract reporter interface: the sink for one run's results."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ailint.core.models import LintResult, LintSummary


class BaseReporter(ABC):
    """Consumes the final results and summary of a lint run."""

    @abstractmethod
    def report(self, results: list[LintResult], summary: LintSummary) -> None:
        """Present the results. Called exactly once per run."""


class NullReporter(BaseReporter):
    """Discards everything (report-only and programmatic runs)."""

    def report(self, results: list[LintResult], summary: LintSummary) -> None:
        return None
