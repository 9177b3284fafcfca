# src/config/models.py — v1
"""Linter configuration model (the validated form of ``.ai-lint.yml``).

Provider-dependent defaults:
  openrouter — model ``gemini-flash``, concurrency 5
  anthropic  — model ``sonnet``, concurrency 5
  ollama     — model required, concurrency 1, provider_url http://localhost:11434/v1
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ailint.core.models import LintRule

Provider = Literal["openrouter", "ollama", "anthropic"]

DEFAULT_MODELS: dict[str, str] = {
    "openrouter": "gemini-flash",
    "anthropic": "sonnet",
}
DEFAULT_CONCURRENCY = 5
OLLAMA_CONCURRENCY = 1
OLLAMA_DEFAULT_URL = "http://localhost:11434/v1"
MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 20


class LinterConfig(BaseModel):
    """Validated lint configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: Provider = "openrouter"
    provider_url: str | None = None
    model: str = ""
    concurrency: int = Field(default=0, ge=0, le=MAX_CONCURRENCY)
    git_base: str = "main"
    rules: list[LintRule]

    @model_validator(mode="before")
    @classmethod
    def apply_provider_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        provider = data.get("provider") or "openrouter"

        if provider == "ollama":
            if not data.get("model"):
                raise ValueError("model is required when provider is ollama")
            data.setdefault("provider_url", OLLAMA_DEFAULT_URL)
            if data.get("concurrency") is None:
                data["concurrency"] = OLLAMA_CONCURRENCY
        else:
            if not data.get("model") and provider in DEFAULT_MODELS:
                data["model"] = DEFAULT_MODELS[provider]
            if data.get("concurrency") is None:
                data["concurrency"] = DEFAULT_CONCURRENCY
        return data

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:  # noqa: N805
        if v < MIN_CONCURRENCY:
            raise ValueError(f"concurrency must be >= {MIN_CONCURRENCY}")
        return v

    @field_validator("rules")
    @classmethod
    def validate_unique_rule_ids(cls, rules: list[LintRule]) -> list[LintRule]:  # noqa: N805
        seen: set[str] = set()
        duplicates: list[str] = []
        for rule in rules:
            if rule.id in seen and rule.id not in duplicates:
                duplicates.append(rule.id)
            seen.add(rule.id)
        if duplicates:
            raise ValueError(
                f"Duplicate rule IDs found: {', '.join(duplicates)}. "
                "Each rule must have a unique ID."
            )
        return rules

    def rule_ids(self) -> list[str]:
        return [r.id for r in self.rules]
