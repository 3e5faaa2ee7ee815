"""Google Gemini adapter (google-generativeai SDK)."""

from .client import GoogleAdapter

__all__ = ["GoogleAdapter"]
