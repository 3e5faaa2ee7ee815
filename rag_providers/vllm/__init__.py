"""vLLM adapter package."""

from .client import VllmAdapter

__all__ = ["VllmAdapter"]
