# src/__init__.py — v1
"""ai-lint: LLM-judged code linting with content-addressed caching."""

from ailint.version import __version__

__all__ = ["__version__"]
