"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``rag_providers.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    AuthenticationError,
    ProviderError,
    ProviderResponseError,
    RateLimitError,
    UnknownProviderError,
    UnsupportedParameterError,
)
from .errors_parts.classification import (
    classify_exception,
    extract_payload,
    extract_retry_after,
    to_provider_error,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "UnknownProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ProviderResponseError",
    "UnsupportedParameterError",
    "classify_exception",
    "extract_payload",
    "extract_retry_after",
    "to_provider_error",
]
