# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheDocument, CacheStatus.

CacheDocument is the on-disk layout of ``cache.json``; field names and the
version tag are read by other tooling and must stay stable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from ailint.core.models import LintResult

CACHE_FORMAT_VERSION = 1


class CacheEntry(BaseModel):
    """Last known result for one (rule, file) pair."""

    file_hash: str
    prompt_hash: str
    rule_id: str
    result: LintResult
    timestamp: datetime


class CacheDocument(BaseModel):
    """Full persisted cache store."""

    version: Literal[1] = CACHE_FORMAT_VERSION
    entries: dict[str, CacheEntry] = Field(default_factory=dict)


class CacheStatus(BaseModel):
    """Entry count and on-disk size of a cache store."""

    entries: int
    size_bytes: int
