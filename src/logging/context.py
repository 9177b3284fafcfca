# src/logging/context.py — v2
"""Contextual logging support — attach run_id, rule_id, file_path to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging. Each asyncio task started by the
# lint engine inherits a copy, so per-job values never leak between jobs.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_rule_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "rule_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    run_id: str | None = None
    rule_id: str | None = None
    file_path: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        rule_id=_rule_id.get(),
        file_path=_file_path.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per engine run)."""
    _run_id.set(run_id)


def set_job_context(rule_id: str, file_path: str) -> None:
    """Set job-level context (called inside each job's task)."""
    _rule_id.set(rule_id)
    _file_path.set(file_path)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _rule_id.set(None)
    _file_path.set(None)
