"""JinaChat adapter package."""

from .client import JinaAdapter

__all__ = ["JinaAdapter"]
