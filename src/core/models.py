# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
LintResult keeps the on-disk field name ``pass`` through an alias, since
``pass`` is a Python keyword.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["error", "warning"]

RULE_ID_PATTERN = r"^[a-z][a-z0-9_]*$"


# === RULES ===


class LintRule(BaseModel):
    """A named natural-language check applied to files matching a glob."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(pattern=RULE_ID_PATTERN)
    name: str = Field(min_length=1)
    severity: Severity
    glob: str = Field(min_length=1)
    exclude: str | None = None
    prompt: str = Field(min_length=1)
    model: str | None = None


# === EXECUTION ===


class LintJob(BaseModel):
    """One (rule, file) pairing to be judged. Never persisted."""

    model_config = ConfigDict(frozen=True)

    rule: LintRule
    file_path: str
    file_content: str
    file_hash: str
    prompt_hash: str


class LintResult(BaseModel):
    """Outcome of judging one LintJob."""

    model_config = ConfigDict(populate_by_name=True)

    rule_id: str
    rule_name: str
    file: str
    severity: Severity
    passed: bool = Field(alias="pass")
    message: str
    line: int | None = None
    duration_ms: int = 0
    cached: bool = False
    api_error: bool = False

    def to_json_dict(self) -> dict:
        """Serialize with the stable field names (``pass`` rather than ``passed``)."""
        return self.model_dump(mode="json", by_alias=True)


class LintSummary(BaseModel):
    """Aggregate counts over one batch of results."""

    total_files: int = 0
    total_rules_applied: int = 0
    passed: int = 0
    errors: int = 0
    warnings: int = 0
    cached: int = 0
    duration_ms: int = 0
