"""Vertex AI adapter (Gemini models over the REST API)."""

from .client import VertexAIAdapter

__all__ = ["VertexAIAdapter"]
