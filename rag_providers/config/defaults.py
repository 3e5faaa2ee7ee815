"""rag_providers.config.defaults
=============================

Stable default values used by the adapters when the configuration leaves
them unset. Plain constants only; no imports from other package modules so
that this module can be imported from anywhere without cycles.
"""

from __future__ import annotations

# ---- Hosted APIs ----
OPENAI_DEFAULT_MODEL = "gpt-3.5-turbo"

AZURE_OPENAI_DEFAULT_API_VERSION = "2024-02-01"

TOGETHER_DEFAULT_MODEL = "mistralai/Mixtral-8x7B-Instruct-v0.1"
TOGETHER_DEFAULT_BASE_URL = "https://api.together.xyz/v1"

MISTRAL_DEFAULT_MODEL = "mistral-small-latest"
MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai/v1"

JINA_DEFAULT_MODEL = "jinachat"
JINA_DEFAULT_BASE_URL = "https://api.chat.jina.ai/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-3-haiku-20240307"

GOOGLE_DEFAULT_MODEL = "gemini-1.5-flash"

VERTEXAI_DEFAULT_MODEL = "gemini-1.5-flash"
VERTEXAI_DEFAULT_LOCATION = "us-central1"

COHERE_DEFAULT_MODEL = "command-r"
COHERE_DEFAULT_BASE_URL = "https://api.cohere.com/v2"

HUGGINGFACE_DEFAULT_MODEL = "google/flan-t5-xxl"
HUGGINGFACE_DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models"

LLAMA2_DEFAULT_MODEL = "meta/llama-2-70b-chat"
LLAMA2_DEFAULT_BASE_URL = "https://api.replicate.com/v1"

AWS_BEDROCK_DEFAULT_MODEL = "anthropic.claude-3-haiku-20240307-v1:0"
AWS_DEFAULT_REGION = "us-east-1"

# ---- Local / self-hosted ----
OLLAMA_DEFAULT_MODEL = "llama3"
OLLAMA_DEFAULT_HOST = "http://localhost:11434"

VLLM_DEFAULT_MODEL = "meta-llama/Llama-2-7b-chat-hf"
VLLM_DEFAULT_BASE_URL = "http://localhost:8000/v1"

GPT4ALL_DEFAULT_MODEL = "orca-mini-3b-gguf2-q4_0.gguf"
GPT4ALL_DEFAULT_BASE_URL = "http://localhost:4891/v1"

# Local OpenAI-compatible servers ignore the key but the SDK requires one.
LOCAL_PLACEHOLDER_API_KEY = "not-needed"  # pragma: allowlist secret


__all__ = [
    "OPENAI_DEFAULT_MODEL",
    "AZURE_OPENAI_DEFAULT_API_VERSION",
    "TOGETHER_DEFAULT_MODEL",
    "TOGETHER_DEFAULT_BASE_URL",
    "MISTRAL_DEFAULT_MODEL",
    "MISTRAL_DEFAULT_BASE_URL",
    "JINA_DEFAULT_MODEL",
    "JINA_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "GOOGLE_DEFAULT_MODEL",
    "VERTEXAI_DEFAULT_MODEL",
    "VERTEXAI_DEFAULT_LOCATION",
    "COHERE_DEFAULT_MODEL",
    "COHERE_DEFAULT_BASE_URL",
    "HUGGINGFACE_DEFAULT_MODEL",
    "HUGGINGFACE_DEFAULT_BASE_URL",
    "LLAMA2_DEFAULT_MODEL",
    "LLAMA2_DEFAULT_BASE_URL",
    "AWS_BEDROCK_DEFAULT_MODEL",
    "AWS_DEFAULT_REGION",
    "OLLAMA_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_HOST",
    "VLLM_DEFAULT_MODEL",
    "VLLM_DEFAULT_BASE_URL",
    "GPT4ALL_DEFAULT_MODEL",
    "GPT4ALL_DEFAULT_BASE_URL",
    "LOCAL_PLACEHOLDER_API_KEY",
]
