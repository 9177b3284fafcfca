# src/llm/adapters/openai_adapter.py — v2
"""OpenAI-compatible chat adapter implementing BaseLLMClient.

Uses the official openai SDK against any OpenAI-compatible endpoint:
OpenRouter (hosted) and Ollama (local, ``/v1``). SDK-level retries are
disabled; retry and backoff are handled by llm/retry.py.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import BaseModel

from ailint.llm.base_client import BaseLLMClient
from ailint.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OLLAMA_BASE_URL = "http://localhost:11434/v1"


class OpenAIAdapter(BaseLLMClient):
    """Chat completions over the openai SDK."""

    def __init__(
        self,
        model: str = "",
        api_key: str = "",
        base_url: str | None = OPENROUTER_BASE_URL,
        provider: str = "openrouter",
        credential_name: str = "OPEN_ROUTER_KEY",
        timeout_s: float = 120.0,
        **kwargs: Any,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._provider = provider
        self._credential_name = credential_name
        self._timeout_s = timeout_s
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init AsyncOpenAI client (only on first API call)."""
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError("openai package required: pip install openai") from e
            self.__client = openai.AsyncOpenAI(
                # Ollama ignores the key but the SDK refuses an empty one.
                api_key=self._api_key or "unused",
                base_url=self._base_url,
                max_retries=0,
                timeout=self._timeout_s,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        response_format: type[BaseModel] | None = None,
        model: str | None = None,
    ) -> LLMResponse:
        """Chat completion, optionally constrained to a JSON schema."""
        model_id = model or self._model
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {
            "model": model_id,
            "messages": oai_messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if response_format is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": response_format.__name__,
                    "schema": response_format.model_json_schema(by_alias=True),
                },
            }

        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(**kwargs)
        latency = int((time.monotonic() - t0) * 1000)

        content = ""
        if resp.choices:
            content = resp.choices[0].message.content or ""
        usage = resp.usage
        return LLMResponse(
            content=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=model_id,
            provider=self._provider,
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return self._provider

    @property
    def credential_name(self) -> str:
        return self._credential_name

    @property
    def is_local(self) -> bool:
        return self._provider == "ollama"

    @property
    def base_url(self) -> str | None:
        return self._base_url
