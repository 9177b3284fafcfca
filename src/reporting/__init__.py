# src/reporting/__init__.py — v1
"""Console and JSON reporting."""
