# src/reporting/console_reporter.py — v1
"""Human-readable terminal report, failures grouped by file."""

from __future__ import annotations

import sys
from typing import TextIO

from ailint.core.models import LintResult, LintSummary
from ailint.reporting.base_reporter import BaseReporter

ANSI_RESET = "\033[0m"
ANSI_BOLD = "\033[1m"
ANSI_DIM = "\033[2m"
ANSI_RED = "\033[31m"
ANSI_GREEN = "\033[32m"
ANSI_YELLOW = "\033[33m"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class ConsoleReporter(BaseReporter):
    """Write the report to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None, color: bool | None = None) -> None:
        self._stream = stream or sys.stdout
        if color is None:
            color = hasattr(self._stream, "isatty") and self._stream.isatty()
        self._color = color

    def report(self, results: list[LintResult], summary: LintSummary) -> None:
        print(self.render(results, summary), file=self._stream)

    def render(self, results: list[LintResult], summary: LintSummary) -> str:
        if not results or (summary.errors == 0 and summary.warnings == 0):
            return "\n".join(
                [self._c("All rules passed", ANSI_GREEN), self._summary_line(summary)]
            )

        lines: list[str] = []
        by_file = self._group_failures(results)
        for file, file_results in by_file.items():
            lines.append(self._c(f"  {file}", ANSI_BOLD))
            for result in file_results:
                label = (
                    self._c("error", ANSI_RED)
                    if result.severity == "error"
                    else self._c("warn", ANSI_YELLOW)
                )
                where = f"{result.line}: " if result.line is not None else ""
                lines.append(
                    f"    {label}  {self._c(result.rule_id, ANSI_DIM)}  {where}{result.message}"
                )

        lines.append("")
        lines.append(self._problems_line(summary, len(by_file)))
        lines.append(self._summary_line(summary))
        return "\n".join(lines)

    # --- Internal helpers ---

    @staticmethod
    def _group_failures(results: list[LintResult]) -> dict[str, list[LintResult]]:
        grouped: dict[str, list[LintResult]] = {}
        for result in results:
            if not result.passed:
                grouped.setdefault(result.file, []).append(result)
        return grouped

    def _problems_line(self, summary: LintSummary, file_count: int) -> str:
        total = summary.errors + summary.warnings
        parts: list[str] = []
        if summary.errors:
            parts.append(self._c(_plural(summary.errors, "error"), ANSI_RED))
        if summary.warnings:
            parts.append(self._c(_plural(summary.warnings, "warning"), ANSI_YELLOW))
        return (
            f"  {_plural(total, 'problem')} ({', '.join(parts)}) "
            f"in {_plural(file_count, 'file')}"
        )

    def _summary_line(self, summary: LintSummary) -> str:
        text = (
            f"{summary.total_files} {'file' if summary.total_files == 1 else 'files'} checked, "
            f"{summary.cached} cached, {summary.duration_ms / 1000:.1f}s"
        )
        return f"  {self._c(text, ANSI_DIM)}"

    def _c(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{color}{text}{ANSI_RESET}"
