"""Llama 2 adapter (Replicate predictions API)."""

from .client import Llama2Adapter

__all__ = ["Llama2Adapter"]
