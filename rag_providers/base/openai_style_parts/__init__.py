"""OpenAI-compatible adapter base and helpers."""

from .base import OpenAIStyleAdapter

__all__ = ["OpenAIStyleAdapter"]
