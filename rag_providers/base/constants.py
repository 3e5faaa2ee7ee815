"""Base shared constants for the adapter layer.

Security
--------
Only identifiers and sentinel strings live here; no credentials.
"""
from __future__ import annotations

# Closed set of provider identifiers accepted by the registry and config.
PROVIDER_IDS = (
    "openai",
    "azure_openai",
    "google",
    "anthropic",
    "cohere",
    "together",
    "ollama",
    "vllm",
    "gpt4all",
    "jina",
    "huggingface",
    "llama2",
    "vertexai",
    "mistralai",
    "aws_bedrock",
)

# Environment variable naming a JSON/YAML file with the declarative config.
CONFIG_FILE_ENV = "RAG_PROVIDERS_CONFIG_FILE"

# Default when a provider requires an explicit output budget (Anthropic).
REQUIRED_MAX_TOKENS_DEFAULT = 1024

__all__ = ["PROVIDER_IDS", "CONFIG_FILE_ENV", "REQUIRED_MAX_TOKENS_DEFAULT"]
