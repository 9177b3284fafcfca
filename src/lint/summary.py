# src/lint/summary.py — v1
"""Summary counts and exit codes derived from a list of results."""

from __future__ import annotations

from ailint.core.models import LintResult, LintSummary

EXIT_OK = 0
EXIT_LINT_FAILURE = 1
EXIT_FATAL = 2


def compute_summary(
    results: list[LintResult], total_files: int, duration_ms: int
) -> LintSummary:
    """Count passed / errors / warnings / cached over ``results``.

    A failing result counts as an error or a warning by its rule severity.
    """
    passed = errors = warnings = cached = 0
    for result in results:
        if result.passed:
            passed += 1
        elif result.severity == "error":
            errors += 1
        else:
            warnings += 1
        if result.cached:
            cached += 1

    return LintSummary(
        total_files=total_files,
        total_rules_applied=len(results),
        passed=passed,
        errors=errors,
        warnings=warnings,
        cached=cached,
        duration_ms=duration_ms,
    )


def empty_summary() -> LintSummary:
    return LintSummary()


def determine_exit_code(results: list[LintResult], summary: LintSummary) -> int:
    """1 if any error-severity failure or any API failure, else 0."""
    if summary.errors > 0 or any(r.api_error for r in results):
        return EXIT_LINT_FAILURE
    return EXIT_OK
