"""Together AI adapter package."""

from .client import TogetherAdapter

__all__ = ["TogetherAdapter"]
