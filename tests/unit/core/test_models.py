# tests/unit/core/test_models.py — v2
"""Tests for core/models.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ailint.core.models import LintResult, LintRule, LintSummary


class TestLintRule:
    @pytest.mark.parametrize("rule_id", ["a", "no_console", "rule_2", "x_1_y"])
    def test_valid_ids(self, rule_id):
        LintRule(id=rule_id, name="n", severity="error", glob="*", prompt="p")

    @pytest.mark.parametrize("rule_id", ["", "NoConsole", "1rule", "_rule", "no-console", "no console"])
    def test_invalid_ids(self, rule_id):
        with pytest.raises(ValidationError):
            LintRule(id=rule_id, name="n", severity="error", glob="*", prompt="p")

    def test_empty_prompt_rejected(self):
        with pytest.raises(ValidationError):
            LintRule(id="a", name="n", severity="error", glob="*", prompt="")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            LintRule(id="a", name="n", severity="error", glob="*", prompt="p", level="high")

    def test_frozen(self, no_console_rule):
        with pytest.raises(ValidationError):
            no_console_rule.prompt = "changed"


class TestLintResult:
    def test_accepts_pass_alias_and_name(self):
        by_alias = LintResult.model_validate(
            {"rule_id": "r", "rule_name": "R", "file": "f", "severity": "error", "pass": True, "message": "ok"}
        )
        by_name = LintResult(rule_id="r", rule_name="R", file="f", severity="error", passed=True, message="ok")
        assert by_alias == by_name

    def test_json_dict_uses_pass(self, make_result):
        data = make_result(passed=False, line=7).to_json_dict()
        assert data["pass"] is False
        assert "passed" not in data
        assert data["line"] == 7
        assert data["cached"] is False
        assert data["api_error"] is False


class TestLintSummary:
    def test_defaults_zero(self):
        assert all(v == 0 for v in LintSummary().model_dump().values())
