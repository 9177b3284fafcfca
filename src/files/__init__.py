# src/files/__init__.py — v1
"""File selection for a lint run."""
