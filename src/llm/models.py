# src/llm/models.py — v2
"""LLM-specific types: Message, LLMResponse, LintVerdict."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int
    raw_response: Any = None


class LintVerdict(BaseModel):
    """Structured output a judge model must return for one (file, rule) pair."""

    model_config = ConfigDict(populate_by_name=True)

    passed: bool = Field(alias="pass")
    message: str
    line: int | None = None
