# src/cache/json_store.py — v3
"""JSON file-based cache store.

The whole store lives in a single ``cache.json`` document under the cache
directory. It is read once per run by load() and written once by save();
lookups and stores in between only touch memory.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from ailint.cache.base_cache_store import BaseCacheStore
from ailint.cache.fingerprint import cache_key
from ailint.cache.models import CacheDocument, CacheEntry, CacheStatus
from ailint.core.models import LintResult

logger = logging.getLogger(__name__)

CACHE_FILENAME = "cache.json"
DEFAULT_CACHE_DIR = ".ai-lint"


class JsonCacheStore(BaseCacheStore):
    """Single-file JSON cache store."""

    def __init__(self, cache_dir: Path | str = DEFAULT_CACHE_DIR) -> None:
        self._dir = Path(cache_dir).expanduser()
        self._path = self._dir / CACHE_FILENAME
        self._document = CacheDocument()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Load the store from disk. Missing or corrupt files yield an empty store."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            self._document = CacheDocument()
            return
        except OSError as e:
            logger.warning(
                "Failed to read cache file %s (%s). Starting with empty cache.",
                self._path, e,
            )
            self._document = CacheDocument()
            return

        try:
            self._document = CacheDocument.model_validate(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                "Cache file %s is invalid (%s). Starting with empty cache.",
                self._path, e.__class__.__name__,
            )
            self._document = CacheDocument()
            return

        logger.debug("Loaded %d cache entries from %s", len(self._document.entries), self._path)

    def save(self) -> None:
        """Write the store to disk, replacing the previous file in one step."""
        self._dir.mkdir(parents=True, exist_ok=True)
        with self._lock:
            payload = self._document.model_dump_json(by_alias=True, indent=2)

        fd, tmp_name = tempfile.mkstemp(
            prefix=".cache-", suffix=".json.tmp", dir=str(self._dir)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Saved %d cache entries to %s", len(self._document.entries), self._path)

    def lookup(
        self, rule_id: str, file_path: str, file_hash: str, prompt_hash: str
    ) -> LintResult | None:
        """Return the cached result if the entry exists and both hashes match."""
        entry = self._document.entries.get(cache_key(rule_id, file_path))
        if entry is None:
            return None
        if entry.file_hash != file_hash or entry.prompt_hash != prompt_hash:
            return None
        return entry.result

    def store(
        self,
        rule_id: str,
        file_path: str,
        file_hash: str,
        prompt_hash: str,
        result: LintResult,
    ) -> None:
        """Store a result, overwriting any previous entry for the same key."""
        entry = CacheEntry(
            file_hash=file_hash,
            prompt_hash=prompt_hash,
            rule_id=rule_id,
            result=result,
            timestamp=datetime.now(timezone.utc),
        )
        with self._lock:
            self._document.entries[cache_key(rule_id, file_path)] = entry

    def clear(self) -> None:
        """Delete the cache file and reset in-memory state."""
        self._path.unlink(missing_ok=True)
        with self._lock:
            self._document = CacheDocument()

    def status(self) -> CacheStatus:
        """Return entry count and the on-disk size of the cache file."""
        try:
            size = self._path.stat().st_size
        except FileNotFoundError:
            size = 0
        return CacheStatus(entries=len(self._document.entries), size_bytes=size)
