"""Mistral AI adapter package."""

from .client import MistralAdapter

__all__ = ["MistralAdapter"]
