"""rag_providers package

One configuration-driven surface over many LLM providers for RAG
applications.

Purpose:
    Given a declarative record such as
    ``{"provider": "openai", "config": {"model": "gpt-3.5-turbo"}}`` and a
    prompt, return either a :class:`Completion` or a lazy
    :class:`TextStream`, whichever provider serves the request.

Public API (re-exported):
    - Facade: :func:`complete`, :class:`CompletionFacade`
    - Registry: :class:`AdapterRegistry`, :class:`LlmAdapter`, :class:`Capability`
    - Models: :class:`ProviderConfig`, :class:`CompletionRequest`,
      :class:`Completion`, :class:`FunctionCall`, :class:`ProviderMetadata`
    - Streaming: :class:`TextStream`, :class:`CancellationToken`
    - Errors: :class:`ProviderError` and its subclasses, :class:`ErrorCode`
    - Config: :func:`load_app_config`, :func:`load_provider_config`
"""

from .base.adapter import LlmAdapter
from .base.cancellation import CancellationToken, CancelledError
from .base.errors import (
    AuthenticationError,
    ErrorCode,
    ProviderError,
    ProviderResponseError,
    RateLimitError,
    UnknownProviderError,
    UnsupportedParameterError,
)
from .base.facade import CompletionFacade, complete, get_default_facade
from .base.models import (
    Completion,
    CompletionRequest,
    EmbedderConfig,
    FunctionCall,
    ProviderConfig,
    ProviderMetadata,
)
from .base.parameters import Capability
from .base.registry import AdapterRegistry
from .base.resilience import RetryConfig, call_with_retry, retry
from .base.streaming import TextStream
from .config import AppConfig, load_app_config, load_provider_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AdapterRegistry",
    "AppConfig",
    "AuthenticationError",
    "CancellationToken",
    "CancelledError",
    "Capability",
    "Completion",
    "CompletionFacade",
    "CompletionRequest",
    "EmbedderConfig",
    "ErrorCode",
    "FunctionCall",
    "LlmAdapter",
    "ProviderConfig",
    "ProviderError",
    "ProviderMetadata",
    "ProviderResponseError",
    "RateLimitError",
    "RetryConfig",
    "TextStream",
    "UnknownProviderError",
    "UnsupportedParameterError",
    "call_with_retry",
    "complete",
    "get_default_facade",
    "load_app_config",
    "load_provider_config",
    "retry",
]
