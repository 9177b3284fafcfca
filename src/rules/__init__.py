# src/rules/__init__.py — v1
"""Glob matching, rule matching and rule generation."""
