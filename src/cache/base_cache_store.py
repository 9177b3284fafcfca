# src/cache/base_cache_store.py — v2
"""Abstract cache store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ailint.cache.fingerprint import content_hash
from ailint.cache.models import CacheStatus
from ailint.core.models import LintResult


class BaseCacheStore(ABC):
    """Content-addressed memoization of lint results keyed by rule and file."""

    @staticmethod
    def hash(content: str) -> str:
        """Deterministic fixed-length digest of arbitrary text."""
        return content_hash(content)

    @abstractmethod
    def load(self) -> None:
        """Populate in-memory state from the backing store."""

    @abstractmethod
    def save(self) -> None:
        """Write the full in-memory state back to the backing store."""

    @abstractmethod
    def lookup(
        self, rule_id: str, file_path: str, file_hash: str, prompt_hash: str
    ) -> LintResult | None:
        """Return the stored result only if both hashes still match."""

    @abstractmethod
    def store(
        self,
        rule_id: str,
        file_path: str,
        file_hash: str,
        prompt_hash: str,
        result: LintResult,
    ) -> None:
        """Upsert the entry for (rule_id, file_path)."""

    @abstractmethod
    def clear(self) -> None:
        """Delete persisted state and reset memory."""

    @abstractmethod
    def status(self) -> CacheStatus:
        """Entry count and persisted size."""
