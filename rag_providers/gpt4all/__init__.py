"""GPT4All adapter package."""

from .client import Gpt4AllAdapter

__all__ = ["Gpt4AllAdapter"]
