# src/llm/__init__.py — v1
"""LLM provider layer: base client, adapters, retry, model catalog."""
