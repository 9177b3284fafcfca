# src/config/settings.py — v2
"""Typed environment settings loaded from .env via pydantic-settings.

Holds deployment-specific values only (credentials, cache location,
logging). Lint rules and provider choice live in the YAML config file
(see config/loader.py).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is missing, malformed, or inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Provider credentials ===
    open_router_key: str = ""
    anthropic_api_key: str = ""

    # === Remote calls ===
    request_timeout_s: float = Field(default=120.0, gt=0)

    # === Cache ===
    cache_dir: Path = Path(".ai-lint")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:  # noqa: N805
        if isinstance(v, str):
            return v.upper()
        return v


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment/.env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing).

    Returns:
        Validated Settings instance.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
