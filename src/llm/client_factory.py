# src/llm/client_factory.py — v3
"""Factory: instantiate an LLM client from a provider name.

Called by the CLI once per run; the same client serves every rule, with the
per-rule model id passed on each call.
"""

from __future__ import annotations

import importlib
import logging

from ailint.config.settings import Settings
from ailint.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openrouter": "ailint.llm.adapters.openai_adapter.OpenAIAdapter",
    "ollama": "ailint.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "ailint.llm.adapters.anthropic_adapter.AnthropicAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    settings: Settings | None = None,
    provider_url: str | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (openrouter, ollama, anthropic).
        settings: Application settings (for API keys and timeouts).
        provider_url: Endpoint override (required for ollama).
        **kwargs: Additional adapter arguments.

    Returns:
        Configured BaseLLMClient instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    init_kwargs = dict(kwargs)

    if settings is not None:
        init_kwargs.setdefault("timeout_s", settings.request_timeout_s)

    if provider == "openrouter":
        init_kwargs.setdefault("provider", "openrouter")
        init_kwargs.setdefault("credential_name", "OPEN_ROUTER_KEY")
        if settings is not None:
            init_kwargs.setdefault("api_key", settings.open_router_key)
        if provider_url:
            init_kwargs.setdefault("base_url", provider_url)
    elif provider == "ollama":
        from ailint.llm.adapters.openai_adapter import OLLAMA_BASE_URL

        base_url = provider_url or OLLAMA_BASE_URL
        init_kwargs.setdefault("provider", "ollama")
        init_kwargs.setdefault("base_url", base_url)
        init_kwargs.setdefault("credential_name", f"Ollama endpoint at {base_url}")
    elif provider == "anthropic":
        if settings is not None:
            init_kwargs.setdefault("api_key", settings.anthropic_api_key)

    logger.debug("Creating LLM client: provider=%s", provider)
    return adapter_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def registered_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
