# src/lint/judge.py — v1
"""Remote judge: turn one LintJob into one LLM compliance judgment.

The outcome is explicit at this boundary:
  Judged(result) — anything the engine treats as data, including degraded
                   ``api_error`` results after retries run out
  Fatal(error)   — a session-wide failure (bad credential, unreachable local
                   endpoint) that will recur on every job; the run must stop
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Union

from ailint.core.models import LintJob, LintResult
from ailint.llm.base_client import BaseLLMClient
from ailint.llm.model_map import ModelCatalog
from ailint.llm.models import LintVerdict, Message
from ailint.llm.retry import (
    DEFAULT_RETRY_POLICY,
    LLMAuthenticationError,
    LLMEmptyResponseError,
    LLMEndpointUnreachableError,
    LLMFatalError,
    LLMRetryExhausted,
    RetryPolicy,
    with_retry,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a code linter. Analyze the given file against the provided rule.
Respond ONLY with a JSON object of the form {"pass": boolean, "message": string, "line": number | null}.
- If the file complies, set pass=true and confirm briefly.
- If it violates the rule, set pass=false, describe the violation in 1-3 sentences, \
and set line to the approximate line number of the first violation."""

DEFAULT_MAX_TOKENS = 1024


@dataclass(frozen=True)
class Judged:
    """A judgment (genuine or degraded) to be treated as data."""

    result: LintResult


@dataclass(frozen=True)
class Fatal:
    """A failure that must abort the whole run."""

    error: LLMFatalError


JudgeOutcome = Union[Judged, Fatal]


def build_user_message(job: LintJob) -> str:
    """Rule name and prompt, then the file in a fenced block."""
    ext = PurePosixPath(job.file_path.replace("\\", "/")).suffix.lstrip(".") or "txt"
    return (
        f"## Rule: {job.rule.name}\n"
        f"{job.rule.prompt}\n\n"
        f"## File: {job.file_path}\n"
        f"```{ext}\n"
        f"{job.file_content}\n"
        f"```"
    )


class RemoteJudge:
    """Ask a language model whether one file complies with one rule.

    Args:
        client: Provider adapter.
        default_model: Logical model used when a rule has no override.
        catalog: Logical name → provider model id resolution.
        retry_policy: Attempt budget and backoff (3 attempts, 1s/2s).
        max_tokens: Output token budget per request.
        sleep: Awaitable used for backoff delays.
    """

    def __init__(
        self,
        client: BaseLLMClient,
        default_model: str,
        catalog: ModelCatalog | None = None,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._default_model = default_model
        self._catalog = catalog or ModelCatalog()
        self._policy = retry_policy
        self._max_tokens = max_tokens
        self._sleep = sleep

    def resolve_model_id(self, job: LintJob) -> str:
        """Rule override if present, else the default; mapped for the provider."""
        logical = job.rule.model or self._default_model
        return self._catalog.resolve(self._client.provider_name, logical)

    async def judge(self, job: LintJob) -> JudgeOutcome:
        """Judge one job. Never raises for per-job failures."""
        t0 = time.monotonic()
        label = f"{job.rule.id}:{job.file_path}"
        model_id = self.resolve_model_id(job)
        message = build_user_message(job)

        try:
            verdict: LintVerdict = await with_retry(
                self._ask,
                model_id,
                message,
                label=label,
                policy=self._policy,
                sleep=self._sleep,
            )
        except LLMAuthenticationError as e:
            logger.error("Authentication failed for %s: %s", self._client.credential_name, e)
            return Fatal(
                LLMAuthenticationError(f"{self._client.credential_name} is invalid or missing")
            )
        except LLMRetryExhausted as e:
            if e.error_type == "connection" and self._client.is_local:
                return Fatal(
                    LLMEndpointUnreachableError(
                        f"Cannot connect to {self._client.credential_name}: {e.last_error}"
                    )
                )
            logger.warning("Giving up on %s after %d attempt(s): %s", label, e.attempts, e.last_error)
            return Judged(
                self._result(
                    job,
                    t0,
                    passed=False,
                    message=f"API error: {e.last_error or e.error_type}",
                    api_error=True,
                )
            )

        return Judged(
            self._result(job, t0, passed=verdict.passed, message=verdict.message, line=verdict.line)
        )

    async def lint(self, job: LintJob) -> LintResult:
        """Judge one job, raising the error of a Fatal outcome."""
        outcome = await self.judge(job)
        if isinstance(outcome, Fatal):
            raise outcome.error
        return outcome.result

    async def _ask(self, model_id: str, user_message: str) -> LintVerdict:
        """One attempt: request, then validate the structured answer."""
        response = await self._client.complete(
            messages=[Message(role="user", content=user_message)],
            system=SYSTEM_PROMPT,
            max_tokens=self._max_tokens,
            temperature=0.0,
            response_format=LintVerdict,
            model=model_id,
        )
        if not response.content.strip():
            raise LLMEmptyResponseError("AI returned no content")

        verdict = LintVerdict.model_validate_json(_strip_fences(response.content))
        if not verdict.message.strip():
            raise LLMEmptyResponseError("AI returned empty content")
        return verdict

    @staticmethod
    def _result(
        job: LintJob,
        t0: float,
        *,
        passed: bool,
        message: str,
        line: int | None = None,
        api_error: bool = False,
    ) -> LintResult:
        return LintResult(
            rule_id=job.rule.id,
            rule_name=job.rule.name,
            file=job.file_path,
            severity=job.rule.severity,
            passed=passed,
            message=message,
            line=line,
            duration_ms=int((time.monotonic() - t0) * 1000),
            cached=False,
            api_error=api_error,
        )


def _strip_fences(content: str) -> str:
    """Remove a surrounding ```json fence some models add despite instructions."""
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
