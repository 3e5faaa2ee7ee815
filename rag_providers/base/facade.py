"""Single entry point for RAG applications.

``CompletionFacade.complete(config, request)`` resolves the adapter through
the registry, constructs it once per distinct configuration, and delegates.
There is no retry and no result caching: every call reaches the provider.

Adapters are cached by ``ProviderConfig.cache_key()``. The cache is guarded
by a lock so concurrent callers construct each adapter exactly once.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, Mapping, Optional, Union

from ..config.credentials import CredentialSource
from .adapter import CompletionResult, LlmAdapter
from .models import CompletionRequest, ProviderConfig
from .registry import AdapterRegistry

ConfigLike = Union[ProviderConfig, Mapping[str, Any]]


def coerce_config(config: ConfigLike) -> ProviderConfig:
    """Accept a ``ProviderConfig``, a ``{"provider", "config"}`` record or ``{"llm": ...}``."""
    if isinstance(config, ProviderConfig):
        return config
    if "llm" in config:
        config = config["llm"]
    if "config" in config or set(config) == {"provider"}:
        return ProviderConfig.from_record(config)
    return ProviderConfig.model_validate(dict(config))


class CompletionFacade:
    """Resolve, cache and delegate."""

    def __init__(self, *, source: Optional[CredentialSource] = None) -> None:
        self._source = source
        self._adapters: Dict[str, LlmAdapter] = {}
        self._lock = threading.Lock()

    def adapter_for(self, config: ConfigLike) -> LlmAdapter:
        """Return the cached adapter for ``config``, constructing it when new."""
        config = coerce_config(config)
        key = config.cache_key()
        adapter = self._adapters.get(key)
        if adapter is not None:
            return adapter
        with self._lock:
            adapter = self._adapters.get(key)
            if adapter is None:
                adapter = AdapterRegistry.create(config, source=self._source)
                self._adapters[key] = adapter
        return adapter

    def complete(self, config: ConfigLike, request: Union[CompletionRequest, str]) -> CompletionResult:
        """Run ``request`` against the adapter for ``config``."""
        return self.adapter_for(config).generate(request)

    def clear(self) -> None:
        """Close and forget every cached adapter."""
        with self._lock:
            adapters = list(self._adapters.values())
            self._adapters.clear()
        for adapter in adapters:
            adapter.close()

    def __len__(self) -> int:
        return len(self._adapters)


_DEFAULT: Optional[CompletionFacade] = None
_DEFAULT_LOCK = threading.Lock()


def get_default_facade() -> CompletionFacade:
    global _DEFAULT  # noqa: PLW0603 - process-wide facade
    if _DEFAULT is None:
        with _DEFAULT_LOCK:
            if _DEFAULT is None:
                _DEFAULT = CompletionFacade()
    return _DEFAULT


def complete(config: ConfigLike, request: Union[CompletionRequest, str]) -> CompletionResult:
    """Module-level shortcut using the process-wide facade."""
    return get_default_facade().complete(config, request)


__all__ = ["CompletionFacade", "coerce_config", "complete", "get_default_facade"]
