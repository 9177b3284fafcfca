# src/config/loader.py — v1
"""Load and validate ``.ai-lint.yml``.

Validation runs in two stages: the pydantic schema (config/models.py), then
model names against the ModelCatalog the loader was constructed with.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ailint.config.models import LinterConfig
from ailint.config.settings import ConfigurationError
from ailint.llm.model_map import ModelCatalog

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".ai-lint.yml"

DEFAULT_CONFIG_CONTENT = """\
# ai-lint configuration

# provider: openrouter   # openrouter | ollama | anthropic
# model: gemini-flash    # Default AI model (gemini-flash | haiku | sonnet | opus)
# concurrency: 5         # Max parallel API calls
# git_base: main         # Base branch for --changed mode

rules: []
# Example rule:
#   - id: no_console_log
#     name: No console.log statements
#     severity: warning
#     glob: "src/**/*.ts"
#     prompt: >
#       Check that the file does not contain any console.log statements.
#       Debug logging should use a proper logger instead.
"""

_VALUE_ERROR_PREFIX = "Value error, "


class ConfigLoader:
    """Read a YAML config file into a validated LinterConfig."""

    def __init__(self, catalog: ModelCatalog | None = None) -> None:
        self._catalog = catalog or ModelCatalog()

    def load(self, path: Path | str = DEFAULT_CONFIG_PATH) -> LinterConfig:
        """Load, parse and validate a config file.

        Raises:
            ConfigurationError: If the file is missing, not YAML, or invalid.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigurationError(f"Config file not found: {path}") from None
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {path} is not valid YAML: {e}") from e

        config = self.validate(raw)
        logger.debug(
            "Loaded config %s: provider=%s model=%s rules=%d",
            path, config.provider, config.model, len(config.rules),
        )
        return config

    def validate(self, raw: Any) -> LinterConfig:
        """Validate an already-parsed config mapping."""
        if not isinstance(raw, dict):
            raise ConfigurationError(
                "Config validation failed:\n  - root: must be a mapping"
            )
        try:
            config = LinterConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(
                f"Config validation failed:\n{format_validation_errors(e)}"
            ) from e

        self._validate_models(config)
        return config

    def _validate_models(self, config: LinterConfig) -> None:
        allowed = self._catalog.allowed(config.provider)
        if allowed is None:
            return
        choices = ", ".join(allowed)
        if not self._catalog.is_valid(config.provider, config.model):
            raise ConfigurationError(
                f"Unknown model '{config.model}' for {config.provider} provider. "
                f"Allowed values: {choices}"
            )
        for rule in config.rules:
            if rule.model and not self._catalog.is_valid(config.provider, rule.model):
                raise ConfigurationError(
                    f"Unknown model '{rule.model}' in rule '{rule.id}' for "
                    f"{config.provider} provider. Allowed values: {choices}"
                )


def format_validation_errors(error: ValidationError) -> str:
    """Render pydantic errors as ``  - /path/to/field: message`` lines."""
    lines: list[str] = []
    for err in error.errors():
        loc = err.get("loc", ())
        path = "/" + "/".join(str(p) for p in loc) if loc else "root"
        msg = err.get("msg", "")
        if msg.startswith(_VALUE_ERROR_PREFIX):
            msg = msg[len(_VALUE_ERROR_PREFIX):]

        kind = err.get("type", "")
        if kind == "missing":
            msg = "is required"
        elif kind == "string_pattern_mismatch":
            msg += " (expected format: lowercase with underscores, e.g., 'my_rule_id')"
        elif kind == "extra_forbidden":
            msg = "is not an allowed property"
        lines.append(f"  - {path}: {msg}")
    return "\n".join(lines)
