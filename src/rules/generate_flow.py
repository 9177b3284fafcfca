# src/rules/generate_flow.py — v1
"""Interactive ``generate-rule`` flow: describe, preview, confirm, append."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import yaml

from ailint.config.loader import DEFAULT_CONFIG_CONTENT
from ailint.config.settings import ConfigurationError
from ailint.core.models import LintRule
from ailint.rules.generator import RuleGenerationError, RuleGenerator

logger = logging.getLogger(__name__)


def rule_to_yaml(rule: LintRule) -> str:
    """Render a rule as a one-item YAML list, as it appears under ``rules:``."""
    data = rule.model_dump(exclude_none=True)
    return yaml.safe_dump([data], sort_keys=False, allow_unicode=True)


def append_rule(config_path: Path | str, rule: LintRule, default_content: str = DEFAULT_CONFIG_CONTENT) -> None:
    """Append ``rule`` to the config file, creating it from ``default_content``.

    Raises:
        ConfigurationError: If the existing file is not a YAML mapping or
            already holds a rule with the same id.
    """
    path = Path(config_path)
    text = path.read_text(encoding="utf-8") if path.exists() else default_content
    try:
        doc = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Config file {path} is not valid YAML: {e}") from e
    if not isinstance(doc, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    rules = doc.get("rules") or []
    if any(isinstance(r, dict) and r.get("id") == rule.id for r in rules):
        raise ConfigurationError(f"Rule '{rule.id}' already exists in {path}")
    rules.append(rule.model_dump(exclude_none=True))
    doc["rules"] = rules

    path.write_text(
        yaml.safe_dump(doc, sort_keys=False, allow_unicode=True), encoding="utf-8"
    )
    logger.info("Appended rule %s to %s", rule.id, path)


async def run_generate_rule_flow(
    config_path: Path | str,
    ask: Callable[[str], str],
    generator: RuleGenerator,
    log: Callable[[str], None] = print,
) -> int:
    """Prompt for a description, generate a rule and append it on confirmation.

    Returns:
        0 when the rule was added or the user declined.

    Raises:
        RuleGenerationError: For an empty description or an unusable rule.
    """
    description = ask("Describe what the rule should check:\n> ").strip()
    if not description:
        raise RuleGenerationError("Description cannot be empty")

    log("\nGenerating rule...\n")
    rule = await generator.generate(description)

    log("Generated rule:\n")
    log(rule_to_yaml(rule))

    answer = ask("Add this rule to your config? (y/n) ").strip().lower()
    if answer != "y":
        log("Rule discarded.")
        return 0

    if not Path(config_path).exists():
        log(f"Creating {config_path}...")
    append_rule(config_path, rule)
    log(f"Rule '{rule.id}' added to {config_path}")
    return 0
