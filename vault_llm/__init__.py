"""Vault-aware LLM assistant."""

__version__ = "1.0.0"
