"""Ollama adapter (local daemon HTTP API)."""

from .client import OllamaAdapter

__all__ = ["OllamaAdapter"]
