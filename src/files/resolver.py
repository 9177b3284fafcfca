# src/files/resolver.py — v1
"""Resolve the list of files to lint.

Three sources: explicit paths, files changed against a git base branch, or
every file under the working directory matching any rule glob. All results
are cwd-relative POSIX-style paths.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from ailint.rules.globs import compile_glob, normalize_path

logger = logging.getLogger(__name__)

IGNORED_DIRS: frozenset[str] = frozenset({".git", "node_modules"})


class FileResolutionError(Exception):
    """Raised when the file list cannot be determined (git failure etc.)."""


class FileResolver:
    """Turn CLI file selections into cwd-relative paths."""

    def __init__(self, git_base: str = "main", cwd: Path | str | None = None) -> None:
        self._git_base = git_base
        self._cwd = Path(cwd) if cwd is not None else Path.cwd()

    def resolve_explicit(self, file_paths: list[str]) -> list[str]:
        """Keep the paths that exist, warning about the rest."""
        resolved: list[str] = []
        for raw in file_paths:
            path = Path(raw)
            absolute = path if path.is_absolute() else self._cwd / path
            if not absolute.is_file():
                logger.warning("File does not exist: %s", raw)
                continue
            resolved.append(self._relative(absolute))
        return resolved

    def resolve_changed(self, base: str | None = None) -> list[str]:
        """Files changed on HEAD since it diverged from ``base`` that still exist.

        Raises:
            FileResolutionError: If git fails (not a repo, unknown base...).
        """
        base_branch = base or self._git_base
        try:
            proc = subprocess.run(
                ["git", "diff", "--name-only", f"{base_branch}...HEAD"],
                cwd=self._cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise FileResolutionError("Failed to get changed files from git: git not found") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise FileResolutionError(f"Failed to get changed files from git: {detail}") from e

        changed: list[str] = []
        for line in proc.stdout.splitlines():
            line = line.strip()
            if not line:
                continue
            absolute = self._cwd / line
            if absolute.is_file():
                changed.append(self._relative(absolute))
        logger.debug("git diff %s...HEAD: %d existing changed files", base_branch, len(changed))
        return changed

    def resolve_all(self, globs: list[str]) -> list[str]:
        """Every file matching any glob, skipping dot-entries and IGNORED_DIRS."""
        if not globs:
            return []
        patterns = [compile_glob(g) for g in globs]

        found: list[str] = []
        for root, dirs, files in os.walk(self._cwd):
            dirs[:] = sorted(
                d for d in dirs if d not in IGNORED_DIRS and not d.startswith(".")
            )
            for name in sorted(files):
                if name.startswith("."):
                    continue
                rel = self._relative(Path(root) / name)
                if any(p.match(rel) for p in patterns):
                    found.append(rel)
        return found

    def _relative(self, path: Path) -> str:
        try:
            rel = os.path.relpath(path, self._cwd)
        except ValueError:
            # Different drive on Windows
            rel = str(path)
        return normalize_path(rel)
