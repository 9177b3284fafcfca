# tests/unit/files/test_resolver.py — v1
"""Tests for files/resolver.py — explicit, changed and --all selection."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ailint.files.resolver import FileResolutionError, FileResolver


def _touch(root: Path, rel: str, content: str = "x\n") -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for rel in [
        "src/app.ts",
        "src/lib/util.ts",
        "src/lib/util.test.ts",
        "src/styles.css",
        "docs/guide.md",
        "node_modules/pkg/index.ts",
        ".git/hooks/x.ts",
        ".hidden/secret.ts",
        "src/.generated.ts",
    ]:
        _touch(tmp_path, rel)
    return tmp_path


class TestResolveExplicit:
    def test_existing_files_kept(self, tree):
        resolver = FileResolver(cwd=tree)
        assert resolver.resolve_explicit(["src/app.ts", "./docs/guide.md"]) == [
            "src/app.ts",
            "docs/guide.md",
        ]

    def test_absolute_paths_made_relative(self, tree):
        resolver = FileResolver(cwd=tree)
        assert resolver.resolve_explicit([str(tree / "src" / "app.ts")]) == ["src/app.ts"]

    def test_missing_files_warned_and_skipped(self, tree, caplog):
        resolver = FileResolver(cwd=tree)
        with caplog.at_level(logging.WARNING):
            result = resolver.resolve_explicit(["src/app.ts", "src/gone.ts", "src"])
        assert result == ["src/app.ts"]
        messages = [r.getMessage() for r in caplog.records]
        assert "File does not exist: src/gone.ts" in messages


class TestResolveAll:
    def test_matches_globs_and_skips_ignored(self, tree):
        resolver = FileResolver(cwd=tree)
        assert resolver.resolve_all(["src/**/*.ts"]) == [
            "src/app.ts",
            "src/lib/util.test.ts",
            "src/lib/util.ts",
        ]

    def test_multiple_globs_union_without_duplicates(self, tree):
        resolver = FileResolver(cwd=tree)
        result = resolver.resolve_all(["**/*.ts", "src/**/*.ts", "**/*.md"])
        assert result == sorted(set(result), key=result.index)
        assert "docs/guide.md" in result
        assert "node_modules/pkg/index.ts" not in result
        assert ".hidden/secret.ts" not in result
        assert "src/.generated.ts" not in result

    def test_no_globs(self, tree):
        assert FileResolver(cwd=tree).resolve_all([]) == []


class TestResolveChanged:
    def test_parses_git_output(self, tree, monkeypatch):
        run = MagicMock(return_value=subprocess.CompletedProcess(
            args=[], returncode=0, stdout="src/app.ts\nsrc/deleted.ts\n\ndocs/guide.md\n", stderr="",
        ))
        monkeypatch.setattr(subprocess, "run", run)

        result = FileResolver(git_base="develop", cwd=tree).resolve_changed()

        assert result == ["src/app.ts", "docs/guide.md"]
        assert run.call_args.args[0] == ["git", "diff", "--name-only", "develop...HEAD"]
        assert run.call_args.kwargs["cwd"] == tree

    def test_base_override(self, tree, monkeypatch):
        run = MagicMock(return_value=subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr=""))
        monkeypatch.setattr(subprocess, "run", run)
        FileResolver(git_base="main", cwd=tree).resolve_changed("release/1.2")
        assert run.call_args.args[0][-1] == "release/1.2...HEAD"

    def test_git_failure(self, tree, monkeypatch):
        def _fail(*args, **kwargs):
            raise subprocess.CalledProcessError(128, args[0], stderr="fatal: not a git repository")

        monkeypatch.setattr(subprocess, "run", _fail)
        with pytest.raises(FileResolutionError, match="not a git repository"):
            FileResolver(cwd=tree).resolve_changed()

    def test_git_missing(self, tree, monkeypatch):
        def _missing(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", _missing)
        with pytest.raises(FileResolutionError, match="git not found"):
            FileResolver(cwd=tree).resolve_changed()

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_real_repository(self, tmp_path):
        def git(*args):
            subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)

        git("init", "-q", "-b", "main")
        git("config", "user.email", "dev@example.com")
        git("config", "user.name", "Dev")
        _touch(tmp_path, "src/a.ts")
        _touch(tmp_path, "src/b.ts")
        git("add", ".")
        git("commit", "-q", "-m", "init")
        git("checkout", "-q", "-b", "feature")
        _touch(tmp_path, "src/b.ts", "changed\n")
        _touch(tmp_path, "src/c.ts")
        git("add", ".")
        git("commit", "-q", "-m", "feature")

        assert sorted(FileResolver(git_base="main", cwd=tmp_path).resolve_changed()) == [
            "src/b.ts",
            "src/c.ts",
        ]
