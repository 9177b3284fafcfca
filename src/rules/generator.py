# src/rules/generator.py — v1
"""Generate a lint rule from a natural-language description.

The model drafts a rule; the draft is validated against the LintRule schema
and, if invalid, sent back once with the validation errors for a fix.
"""

from __future__ import annotations

import json
import logging
from typing import Literal

from pydantic import BaseModel, ValidationError

from ailint.core.models import RULE_ID_PATTERN, LintRule
from ailint.llm.base_client import BaseLLMClient
from ailint.llm.models import Message

logger = logging.getLogger(__name__)

RULE_STRUCTURE = """\
Rule YAML structure:
  id: string (snake_case, lowercase, e.g. "no_console_log")
  name: string (human-readable, e.g. "No console.log statements")
  severity: "error" | "warning"
  glob: string (file glob pattern, e.g. "src/**/*.ts")
  exclude: string (optional, exclusion glob pattern)
  prompt: string (the AI prompt that describes what to check)"""

GENERATE_SYSTEM_PROMPT = f"""\
You are a lint rule generator. Given a description of what a lint rule should do, \
generate a complete rule definition.

{RULE_STRUCTURE}

Rules for generating:
- id: must be snake_case, start with lowercase letter, only lowercase letters, digits, and underscores
- name: short, descriptive human-readable name
- severity: choose "error" for things that must be fixed, "warning" for suggestions
- glob: choose an appropriate file glob pattern based on the description
- prompt: write a clear, specific prompt that an AI linter can use to check files \
against this rule. Explain what to look for and how to determine pass/fail.

Respond ONLY with the rule object, no additional text."""

FIX_SYSTEM_PROMPT = f"""\
You are a lint rule generator. The previously generated rule failed schema \
validation. Fix the rule to match the required schema.

{RULE_STRUCTURE}

Schema constraints:
- id: must match pattern {RULE_ID_PATTERN}
- name, glob, prompt: non-empty
- severity: exactly "error" or "warning"
- No additional properties (only: id, name, severity, glob, exclude, prompt)

Respond ONLY with the fixed rule object, no additional text."""

GENERATE_TEMPERATURE = 0.7
FIX_TEMPERATURE = 0.0


class RuleGenerationError(Exception):
    """Raised when no valid rule could be produced."""


class GeneratedRule(BaseModel):
    """Loose shape requested from the model; strict validation is LintRule's."""

    id: str
    name: str
    severity: Literal["error", "warning"]
    glob: str
    exclude: str | None = None
    prompt: str


class RuleGenerator:
    """Draft, validate and (once) repair a rule with an LLM."""

    def __init__(self, client: BaseLLMClient, model_id: str, max_tokens: int = 1024) -> None:
        self._client = client
        self._model_id = model_id
        self._max_tokens = max_tokens

    async def generate(self, description: str) -> LintRule:
        """Return a validated rule for ``description``.

        Raises:
            RuleGenerationError: If the model returns nothing usable or the
                fixed draft still fails validation.
        """
        draft = await self._request(GENERATE_SYSTEM_PROMPT, description, GENERATE_TEMPERATURE)
        errors = validate_rule(draft)
        if not errors:
            return LintRule.model_validate(draft)

        logger.info("Generated rule failed validation (%d errors), asking for a fix", len(errors))
        fix_prompt = (
            "The following generated rule has validation errors:\n\n"
            f"Rule:\n{json.dumps(draft, indent=2)}\n\n"
            "Validation errors:\n"
            + "\n".join(f"- {e}" for e in errors)
            + "\n\nPlease fix the rule to pass schema validation."
        )
        fixed = await self._request(FIX_SYSTEM_PROMPT, fix_prompt, FIX_TEMPERATURE)
        fix_errors = validate_rule(fixed)
        if fix_errors:
            raise RuleGenerationError(
                "Generated rule failed schema validation after fix attempt:\n"
                + "\n".join(f"  - {e}" for e in fix_errors)
            )
        return LintRule.model_validate(fixed)

    async def _request(self, system: str, prompt: str, temperature: float) -> dict:
        response = await self._client.complete(
            messages=[Message(role="user", content=prompt)],
            system=system,
            max_tokens=self._max_tokens,
            temperature=temperature,
            response_format=GeneratedRule,
            model=self._model_id,
        )
        if not response.content.strip():
            raise RuleGenerationError("AI returned no valid response")
        try:
            data = json.loads(response.content)
        except json.JSONDecodeError as e:
            raise RuleGenerationError(f"AI response was not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RuleGenerationError("AI response was not a rule object")
        # Models sometimes emit "exclude": null for the optional field.
        return {k: v for k, v in data.items() if v is not None}


def validate_rule(data: dict) -> list[str]:
    """Validate a rule mapping; returns ``path: message`` strings (empty if valid)."""
    try:
        LintRule.model_validate(data)
    except ValidationError as e:
        return [
            f"/{'/'.join(str(p) for p in err['loc'])}: {err['msg']}" if err["loc"]
            else f"root: {err['msg']}"
            for err in e.errors()
        ]
    return []
