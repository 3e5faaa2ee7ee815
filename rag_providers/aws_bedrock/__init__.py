"""AWS Bedrock adapter (Converse API)."""

from .client import BedrockAdapter

__all__ = ["BedrockAdapter"]
