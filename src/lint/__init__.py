# src/lint/__init__.py — v1
"""Lint orchestration: judge, engine, summary, report-only runner."""
