# src/cache/fingerprint.py — v3
"""Content fingerprinting for cache keys.

A cache entry is valid only while both the file content hash and the rule
prompt hash it was stored with still match.
"""

from __future__ import annotations

import hashlib


def content_hash(text: str) -> str:
    """SHA-256 hex digest (64 chars) of UTF-8 encoded text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def cache_key(rule_id: str, file_path: str) -> str:
    """Return the ``{rule_id}:{file_path}`` store key."""
    return f"{rule_id}:{file_path}"
