# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides sample rules and configs, a scriptable fake LLM client, result
factories and temp project directories. No network access — every LLM call
is served by FakeLLMClient or an AsyncMock.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from ailint.config.models import LinterConfig
from ailint.core.models import LintJob, LintResult, LintRule
from ailint.llm.base_client import BaseLLMClient
from ailint.llm.models import LLMResponse, Message


def verdict_json(passed: bool, message: str, line: int | None = None) -> str:
    """Serialized judge verdict as a model would return it."""
    return json.dumps({"pass": passed, "message": message, "line": line})


class FakeLLMClient(BaseLLMClient):
    """Scriptable BaseLLMClient.

    ``responder`` receives the call record and returns the response content
    (str) or an exception instance to raise. Calls are recorded in order and
    the peak number of concurrent calls is tracked.
    """

    def __init__(
        self,
        responder: Callable[[dict[str, Any]], Any] | None = None,
        provider: str = "openrouter",
        credential: str = "OPEN_ROUTER_KEY",
        local: bool = False,
        delay_s: float = 0.0,
    ) -> None:
        self._responder = responder or (lambda call: verdict_json(True, "Looks fine"))
        self._provider = provider
        self._credential = credential
        self._local = local
        self._delay_s = delay_s
        self.calls: list[dict[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        response_format: type[BaseModel] | None = None,
        model: str | None = None,
    ) -> LLMResponse:
        call = {
            "prompt": messages[-1].content,
            "system": system,
            "temperature": temperature,
            "response_format": response_format,
            "model": model,
        }
        self.calls.append(call)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self._delay_s:
                await asyncio.sleep(self._delay_s)
            out = self._responder(call)
            if isinstance(out, BaseException):
                raise out
            return LLMResponse(
                content=out,
                model=model or "fake-model",
                provider=self._provider,
                latency_ms=1,
            )
        finally:
            self.in_flight -= 1

    @property
    def provider_name(self) -> str:
        return self._provider

    @property
    def credential_name(self) -> str:
        return self._credential

    @property
    def is_local(self) -> bool:
        return self._local


# === FIXTURES: Logging isolation ===


@pytest.fixture(autouse=True)
def _reset_ailint_logger():
    """Undo setup_logging() so caplog keeps seeing ailint records."""
    yield
    root = logging.getLogger("ailint")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)


# === FIXTURES: Sample rules ===


@pytest.fixture
def no_console_rule() -> LintRule:
    """Error-severity rule on TypeScript sources."""
    return LintRule(
        id="no_console",
        name="No console.log",
        severity="error",
        glob="src/**/*.ts",
        prompt="The file must not contain console.log calls.",
    )


@pytest.fixture
def max_length_rule() -> LintRule:
    """Warning-severity rule on the same files."""
    return LintRule(
        id="max_length",
        name="Max file length",
        severity="warning",
        glob="src/**/*.ts",
        prompt="The file must be shorter than 300 lines.",
    )


@pytest.fixture
def sample_config(no_console_rule: LintRule, max_length_rule: LintRule) -> LinterConfig:
    """openrouter config with both sample rules."""
    return LinterConfig(rules=[no_console_rule, max_length_rule])


# === FIXTURES: Factories ===


@pytest.fixture
def make_job(no_console_rule: LintRule) -> Callable[..., LintJob]:
    """Build a LintJob; hashes are derived from content and prompt."""
    from ailint.cache.fingerprint import content_hash

    def _make(
        rule: LintRule | None = None,
        file_path: str = "src/app.ts",
        content: str = "export const x = 1;\n",
    ) -> LintJob:
        rule = rule or no_console_rule
        return LintJob(
            rule=rule,
            file_path=file_path,
            file_content=content,
            file_hash=content_hash(content),
            prompt_hash=content_hash(rule.prompt),
        )

    return _make


@pytest.fixture
def make_result() -> Callable[..., LintResult]:
    """Build a LintResult with sensible defaults."""

    def _make(
        rule_id: str = "no_console",
        file: str = "src/app.ts",
        severity: str = "error",
        passed: bool = True,
        **kwargs: Any,
    ) -> LintResult:
        return LintResult(
            rule_id=rule_id,
            rule_name=kwargs.pop("rule_name", rule_id.replace("_", " ")),
            file=file,
            severity=severity,
            passed=passed,
            message=kwargs.pop("message", "ok" if passed else "violation"),
            **kwargs,
        )

    return _make


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard passing verdict."""
    return LLMResponse(
        content=verdict_json(True, "No console.log found"),
        input_tokens=100,
        output_tokens=20,
        model="google/gemini-2.5-flash",
        provider="openrouter",
        latency_ms=300,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "openrouter"
    client.credential_name = "OPEN_ROUTER_KEY"
    client.is_local = False
    return client


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    """FakeLLMClient that passes every job."""
    return FakeLLMClient()


@pytest.fixture
def fake_llm_cls() -> type[FakeLLMClient]:
    """The FakeLLMClient class, for tests that script their own responses."""
    return FakeLLMClient


@pytest.fixture
def verdict() -> Callable[..., str]:
    """verdict_json helper."""
    return verdict_json


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Backoff sleep replacement; records requested delays."""
    return AsyncMock(return_value=None)


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory (not created)."""
    return tmp_path / ".ai-lint"


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temp project with two TypeScript sources; cwd is switched into it."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.ts").write_text('console.log("debug");\nexport const a = 1;\n', encoding="utf-8")
    (src / "util.ts").write_text("export const b = 2;\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("# project\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path
