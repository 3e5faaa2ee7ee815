"""Cohere adapter (v2 Chat API)."""

from .client import CohereAdapter

__all__ = ["CohereAdapter"]
