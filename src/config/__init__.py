# src/config/__init__.py — v1
"""Environment settings and YAML lint configuration."""
