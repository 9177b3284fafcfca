# src/llm/model_map.py — v1
"""Logical model name → provider model id resolution.

Rules and configs refer to models by short logical names (``haiku``,
``sonnet``...). Each provider with a fixed table maps those names to its own
identifiers; passthrough providers (Ollama) accept any local model name as-is.
The catalog is constructed and passed explicitly so new providers can be
added without touching the lint engine.
"""

from __future__ import annotations

from collections.abc import Mapping

OPENROUTER_MODELS: dict[str, str] = {
    "gemini-flash": "google/gemini-2.5-flash",
    "haiku": "anthropic/claude-haiku-4.5",
    "sonnet": "anthropic/claude-sonnet-4.5",
    "opus": "anthropic/claude-opus-4.6",
}

ANTHROPIC_MODELS: dict[str, str] = {
    "haiku": "claude-haiku-4-5-20251001",
    "sonnet": "claude-sonnet-4-5-20250929",
    "opus": "claude-opus-4-6",
}

DEFAULT_TABLES: dict[str, dict[str, str]] = {
    "openrouter": OPENROUTER_MODELS,
    "anthropic": ANTHROPIC_MODELS,
}

DEFAULT_PASSTHROUGH: frozenset[str] = frozenset({"ollama"})


class UnknownModelError(ValueError):
    """Raised when a logical model name has no mapping for the provider."""


class ModelCatalog:
    """Resolve logical model names per provider."""

    def __init__(
        self,
        tables: Mapping[str, Mapping[str, str]] | None = None,
        passthrough: frozenset[str] | set[str] = DEFAULT_PASSTHROUGH,
    ) -> None:
        self._tables = {p: dict(t) for p, t in (tables or DEFAULT_TABLES).items()}
        self._passthrough = frozenset(passthrough)

    def is_passthrough(self, provider: str) -> bool:
        return provider in self._passthrough

    def allowed(self, provider: str) -> list[str] | None:
        """Logical names accepted by ``provider``; None means any name."""
        if provider in self._passthrough:
            return None
        return list(self._tables.get(provider, {}))

    def is_valid(self, provider: str, model: str) -> bool:
        if provider in self._passthrough:
            return bool(model)
        return model in self._tables.get(provider, {})

    def resolve(self, provider: str, model: str) -> str:
        """Map a logical model name to the provider-specific id.

        Raises:
            UnknownModelError: If the provider has no mapping for ``model``.
        """
        if provider in self._passthrough:
            return model
        table = self._tables.get(provider)
        if table is None:
            raise UnknownModelError(f"No model table for provider {provider!r}")
        try:
            return table[model]
        except KeyError:
            raise UnknownModelError(
                f"Unknown model {model!r} for {provider} provider. "
                f"Allowed values: {', '.join(table)}"
            ) from None
