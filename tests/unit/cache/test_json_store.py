# tests/unit/cache/test_json_store.py — v1
"""Tests for cache/json_store.py — persistence, lookup rules, corruption handling."""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from ailint.cache.json_store import CACHE_FILENAME, JsonCacheStore

FILE_HASH = "a" * 64
PROMPT_HASH = "b" * 64


@pytest.fixture
def store(tmp_cache_dir) -> JsonCacheStore:
    s = JsonCacheStore(tmp_cache_dir)
    s.load()
    return s


class TestLookup:
    def test_miss_on_empty_store(self, store):
        assert store.lookup("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH) is None

    def test_hit_when_all_keys_match(self, store, make_result):
        result = make_result()
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, result)
        assert store.lookup("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH) == result

    @pytest.mark.parametrize(
        "rule_id, file_path, file_hash, prompt_hash",
        [
            ("other_rule", "src/app.ts", FILE_HASH, PROMPT_HASH),
            ("no_console", "src/other.ts", FILE_HASH, PROMPT_HASH),
            ("no_console", "src/app.ts", "c" * 64, PROMPT_HASH),
            ("no_console", "src/app.ts", FILE_HASH, "d" * 64),
        ],
    )
    def test_miss_when_any_key_differs(self, store, make_result, rule_id, file_path, file_hash, prompt_hash):
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, make_result())
        assert store.lookup(rule_id, file_path, file_hash, prompt_hash) is None

    def test_store_overwrites_same_key(self, store, make_result):
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, make_result(passed=True))
        store.store("no_console", "src/app.ts", "c" * 64, PROMPT_HASH, make_result(passed=False))
        assert store.lookup("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH) is None
        hit = store.lookup("no_console", "src/app.ts", "c" * 64, PROMPT_HASH)
        assert hit is not None and hit.passed is False
        assert store.status().entries == 1


class TestPersistence:
    def test_save_creates_directory_and_file(self, tmp_cache_dir, store, make_result):
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, make_result(passed=False))
        store.save()
        path = tmp_cache_dir / CACHE_FILENAME
        assert path.is_file()

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        entry = data["entries"]["no_console:src/app.ts"]
        assert entry["file_hash"] == FILE_HASH
        assert entry["prompt_hash"] == PROMPT_HASH
        assert entry["rule_id"] == "no_console"
        assert entry["result"]["pass"] is False
        assert "timestamp" in entry

    def test_save_leaves_no_temp_files(self, tmp_cache_dir, store, make_result):
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, make_result())
        store.save()
        store.save()
        assert [p.name for p in tmp_cache_dir.iterdir()] == [CACHE_FILENAME]

    def test_round_trip_through_new_instance(self, tmp_cache_dir, store, make_result):
        result = make_result(passed=False, line=3, message="console.log on line 3")
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, result)
        store.save()

        reloaded = JsonCacheStore(tmp_cache_dir)
        reloaded.load()
        assert reloaded.lookup("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH) == result

    def test_missing_file_loads_empty_silently(self, tmp_cache_dir, caplog):
        store = JsonCacheStore(tmp_cache_dir)
        with caplog.at_level(logging.WARNING):
            store.load()
        assert store.status().entries == 0
        assert caplog.records == []

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            json.dumps({"version": 2, "entries": {}}),
            json.dumps({"version": 1, "entries": {"k": {"rule_id": "x"}}}),
            json.dumps(["a", "list"]),
            b'{"version": 1, "entries": {"\xff\xfe": 1}}',
        ],
        ids=["corrupt", "version-mismatch", "bad-entry", "wrong-type", "invalid-utf8"],
    )
    def test_invalid_file_loads_empty_with_warning(self, tmp_cache_dir, caplog, content):
        tmp_cache_dir.mkdir()
        raw = content if isinstance(content, bytes) else content.encode("utf-8")
        (tmp_cache_dir / CACHE_FILENAME).write_bytes(raw)
        store = JsonCacheStore(tmp_cache_dir)
        with caplog.at_level(logging.WARNING, logger="ailint.cache.json_store"):
            store.load()
        assert store.status().entries == 0
        assert any("Starting with empty cache" in r.getMessage() for r in caplog.records)


class TestClearAndStatus:
    def test_status_reports_entries_and_size(self, store, make_result):
        assert store.status().size_bytes == 0
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, make_result())
        store.save()
        status = store.status()
        assert status.entries == 1
        assert status.size_bytes == store.path.stat().st_size > 0

    def test_clear_removes_file_and_memory(self, store, make_result):
        store.store("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH, make_result())
        store.save()
        store.clear()
        assert not store.path.exists()
        assert store.status().entries == 0
        assert store.lookup("no_console", "src/app.ts", FILE_HASH, PROMPT_HASH) is None

    def test_clear_without_file_is_noop(self, store):
        store.clear()
        assert store.status().entries == 0


class TestConcurrentStores:
    def test_no_entries_lost(self, store, make_result):
        def _store(i: int) -> None:
            store.store(f"rule_{i % 7}", f"src/file_{i}.ts", FILE_HASH, PROMPT_HASH, make_result(rule_id=f"rule_{i % 7}"))

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(_store, range(500)))

        assert store.status().entries == 500
        store.save()
        reloaded = JsonCacheStore(store.path.parent)
        reloaded.load()
        assert reloaded.status().entries == 500
