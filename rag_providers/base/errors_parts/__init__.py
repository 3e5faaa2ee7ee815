"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `rag_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import (
    AuthenticationError,
    ProviderError,
    ProviderResponseError,
    RateLimitError,
    UnknownProviderError,
    UnsupportedParameterError,
)
from .classification import classify_exception, to_provider_error

__all__ = [
    "ErrorCode",
    "ProviderError",
    "UnknownProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ProviderResponseError",
    "UnsupportedParameterError",
    "classify_exception",
    "to_provider_error",
]
