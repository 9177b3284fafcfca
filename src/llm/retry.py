# src/llm/retry.py — v2
"""Retry policy with exponential backoff and error classification.

Error classes:
  auth            — never retried, raised as LLMAuthenticationError
  rate_limit, server_error, timeout, connection, empty_response
                  — retried up to the attempt budget
  anything else   — attempted once
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

logger = logging.getLogger(__name__)

RETRYABLE_ERROR_TYPES: frozenset[str] = frozenset(
    {"rate_limit", "server_error", "timeout", "connection", "empty_response"}
)

_AUTH_RE = re.compile(r"\b401\b|unauthorized|api key", re.IGNORECASE)
_RATE_LIMIT_RE = re.compile(r"\b429\b|rate.limit", re.IGNORECASE)
_SERVER_RE = re.compile(r"\b5\d{2}\b|server.error", re.IGNORECASE)
_TIMEOUT_RE = re.compile(r"timeout|timed out", re.IGNORECASE)
_CONNECTION_RE = re.compile(
    r"econnreset|econnrefused|enotfound|eai_again|network|fetch failed"
    r"|socket hang up|connection (?:error|refused|reset)",
    re.IGNORECASE,
)


class LLMFatalError(Exception):
    """A failure that recurs on every call and must abort the whole run."""


class LLMAuthenticationError(LLMFatalError):
    """Credential rejected by the provider. Never retried."""


class LLMEndpointUnreachableError(LLMFatalError):
    """A local inference endpoint cannot be reached."""


class LLMEmptyResponseError(Exception):
    """The provider answered without usable content."""


class LLMRetryExhausted(Exception):
    """All attempts failed, or the failure was not retryable."""

    def __init__(self, label: str, error_type: str, attempts: int, last_error: Exception):
        self.label = label
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"'{label}' failed after {attempts} attempt(s) ({error_type}): {last_error}"
        )


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and backoff schedule."""

    max_attempts: int = 3
    base_delay_s: float = 1.0
    backoff_factor: float = 2.0
    jitter: bool = False
    retryable: frozenset[str] = RETRYABLE_ERROR_TYPES


DEFAULT_RETRY_POLICY = RetryPolicy()


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type."""
    if isinstance(error, LLMAuthenticationError):
        return "auth"
    if isinstance(error, LLMEmptyResponseError):
        return "empty_response"
    if isinstance(error, ValidationError):
        return "parse_error"

    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        if status == 401:
            return "auth"
        if status == 429:
            return "rate_limit"
        if 500 <= status <= 599:
            return "server_error"
        if 400 <= status <= 499:
            return "client_error"

    msg = str(error)
    name = type(error).__name__.lower()

    if "timeout" in name or isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return "timeout"
    if "connection" in name or isinstance(error, ConnectionError):
        return "connection"
    if _AUTH_RE.search(msg) or "authentication" in name:
        return "auth"
    if _RATE_LIMIT_RE.search(msg) or "ratelimit" in name:
        return "rate_limit"
    if _SERVER_RE.search(msg):
        return "server_error"
    if _TIMEOUT_RE.search(msg):
        return "timeout"
    if _CONNECTION_RE.search(msg):
        return "connection"
    if "json" in msg.lower() or "decode" in msg.lower():
        return "parse_error"
    return "unknown"


def compute_delay(policy: RetryPolicy, attempt: int) -> float:
    """Delay before the attempt following ``attempt`` (1-based): 1s, 2s, 4s, ..."""
    delay = policy.base_delay_s * (policy.backoff_factor ** (attempt - 1))
    if policy.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    label: str = "llm",
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Execute an async function with retry logic.

    Raises:
        LLMAuthenticationError: Immediately, on a credential failure.
        LLMRetryExhausted: When the budget is spent or the error is not retryable.
    """
    policy = policy or DEFAULT_RETRY_POLICY
    attempt = 0

    while True:
        attempt += 1
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            error_type = classify_error(e)

            if error_type == "auth":
                if isinstance(e, LLMAuthenticationError):
                    raise
                raise LLMAuthenticationError(str(e)) from e

            if error_type not in policy.retryable or attempt >= policy.max_attempts:
                raise LLMRetryExhausted(label, error_type, attempt, e) from e

            delay = compute_delay(policy, attempt)
            logger.warning(
                "%s: %s (attempt %d/%d), retrying in %.1fs",
                label, error_type, attempt, policy.max_attempts, delay,
            )
            await sleep(delay)
