"""Adapter registry.

Purpose
-------
Map each provider identifier to its adapter class. The mapping is a closed,
explicit table; adapter modules are imported on first resolution with
``importlib`` so that importing the package does not pull in every vendor SDK.
Resolved classes are cached.

Failure modes
-------------
- Unregistered identifier: :class:`UnknownProviderError`.
- The adapter module fails to import (vendor SDK missing): the
  ``ImportError`` propagates unchanged so the cause stays visible.

No network I/O, no timeouts, no retries.
"""

from __future__ import annotations

import threading
from importlib import import_module
from typing import Any, Dict, Optional, Tuple, Type

from ..config.credentials import CredentialSource
from .adapter import LlmAdapter
from .constants import PROVIDER_IDS
from .errors import UnknownProviderError
from .models import ProviderConfig


class AdapterRegistry:
    """Identifier → adapter class lookup."""

    _ADAPTERS: Dict[str, Tuple[str, str]] = {
        "openai": ("rag_providers.openai.client", "OpenAIAdapter"),
        "azure_openai": ("rag_providers.azure_openai.client", "AzureOpenAIAdapter"),
        "google": ("rag_providers.google.client", "GoogleAdapter"),
        "anthropic": ("rag_providers.anthropic.client", "AnthropicAdapter"),
        "cohere": ("rag_providers.cohere.client", "CohereAdapter"),
        "together": ("rag_providers.together.client", "TogetherAdapter"),
        "ollama": ("rag_providers.ollama.client", "OllamaAdapter"),
        "vllm": ("rag_providers.vllm.client", "VllmAdapter"),
        "gpt4all": ("rag_providers.gpt4all.client", "Gpt4AllAdapter"),
        "jina": ("rag_providers.jina.client", "JinaAdapter"),
        "huggingface": ("rag_providers.huggingface.client", "HuggingFaceAdapter"),
        "llama2": ("rag_providers.llama2.client", "Llama2Adapter"),
        "vertexai": ("rag_providers.vertexai.client", "VertexAIAdapter"),
        "mistralai": ("rag_providers.mistralai.client", "MistralAdapter"),
        "aws_bedrock": ("rag_providers.aws_bedrock.client", "BedrockAdapter"),
    }

    _resolved: Dict[str, Type[LlmAdapter]] = {}
    _lock = threading.Lock()

    @classmethod
    def resolve(cls, identifier: str) -> Type[LlmAdapter]:
        """Return the adapter class registered for ``identifier``.

        Raises
        ------
        UnknownProviderError
            If ``identifier`` is not one of :meth:`supported`.
        """
        name = (identifier or "").strip().lower() if isinstance(identifier, str) else ""
        entry = cls._ADAPTERS.get(name)
        if entry is None:
            raise UnknownProviderError(message=f"unknown provider: {identifier!r}", provider=name or "-")
        klass = cls._resolved.get(name)
        if klass is not None:
            return klass
        with cls._lock:
            klass = cls._resolved.get(name)
            if klass is None:
                module_path, class_name = entry
                klass = getattr(import_module(module_path), class_name)
                cls._resolved[name] = klass
        return klass

    @classmethod
    def create(
        cls,
        config: ProviderConfig,
        *,
        source: Optional[CredentialSource] = None,
        client: Any = None,
    ) -> LlmAdapter:
        """Resolve and construct the adapter for ``config``."""
        return cls.resolve(config.provider)(config, source=source, client=client)

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Registered identifiers in deterministic order."""
        return tuple(cls._ADAPTERS.keys())


if set(AdapterRegistry.supported()) != set(PROVIDER_IDS):  # pragma: no cover - import-time guard
    raise RuntimeError("adapter registry and PROVIDER_IDS are out of sync")


__all__ = ["AdapterRegistry"]
