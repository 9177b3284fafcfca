# src/rules/matcher.py — v1
"""Match file paths to lint rules by glob and exclude pattern."""

from __future__ import annotations

from ailint.core.models import LintRule
from ailint.rules.globs import match_glob, normalize_path


class RuleMatcher:
    """Select the rules that apply to a file.

    A rule applies when its ``glob`` matches the (cwd-relative) path and its
    ``exclude``, if any, does not.
    """

    def __init__(self, rules: list[LintRule]) -> None:
        self._rules = list(rules)

    @property
    def rules(self) -> list[LintRule]:
        return list(self._rules)

    def match_file(self, file_path: str) -> list[LintRule]:
        """Return every rule applying to ``file_path``, in config order."""
        path = normalize_path(file_path)
        matched: list[LintRule] = []
        for rule in self._rules:
            if not match_glob(path, rule.glob):
                continue
            if rule.exclude and match_glob(path, rule.exclude):
                continue
            matched.append(rule)
        return matched

    def match_files(self, file_paths: list[str]) -> dict[str, list[LintRule]]:
        """Batch form of match_file, keyed by the given paths."""
        return {path: self.match_file(path) for path in file_paths}

    def all_globs(self) -> list[str]:
        """Unique rule globs, first-seen order (used for --all discovery)."""
        return list(dict.fromkeys(rule.glob for rule in self._rules))
