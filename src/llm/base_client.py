# src/llm/base_client.py — v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from ailint.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        response_format: type[BaseModel] | None = None,
        model: str | None = None,
    ) -> LLMResponse:
        """Text completion. ``model`` overrides the adapter's default model id."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openrouter, ollama, anthropic)."""

    @property
    @abstractmethod
    def credential_name(self) -> str:
        """Human-readable name of the credential or endpoint this client depends on."""

    @property
    def is_local(self) -> bool:
        """Whether the provider is a local inference endpoint."""
        return False
