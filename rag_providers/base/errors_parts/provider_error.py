"""
Structured provider error exception types.

``ProviderError`` wraps vendor-specific failures with a normalized
:class:`ErrorCode`. The subclasses below are the only exception kinds the
adapter layer raises to callers:

- ``UnknownProviderError``: the provider identifier is not registered.
- ``AuthenticationError``: a credential is missing or was rejected.
- ``RateLimitError``: the provider throttled the request.
- ``ProviderResponseError``: the provider returned an error status or a
  payload that could not be parsed.
- ``UnsupportedParameterError``: a parameter or feature is not available for
  the selected provider.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        message: Human-readable error message suitable for logging.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
        code: Normalized :class:`ErrorCode` classification for the failure.
        retryable: Hint for caller-side retry logic (not authoritative).
        raw: Optional original exception for diagnostics.
        payload: Raw response body returned by the provider, when available.
    """

    message: str
    provider: str
    model: Optional[str] = None
    code: ErrorCode = ErrorCode.UNKNOWN
    retryable: bool = False
    raw: Optional[BaseException] = None
    payload: Any = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


@dataclass(eq=False)
class UnknownProviderError(ProviderError):
    """Raised when a provider identifier is not part of the registered set."""

    provider: str = "-"
    code: ErrorCode = ErrorCode.NOT_FOUND


@dataclass(eq=False)
class AuthenticationError(ProviderError):
    """Missing, malformed, or rejected credentials."""

    code: ErrorCode = ErrorCode.AUTH


@dataclass(eq=False)
class RateLimitError(ProviderError):
    """Provider throttling; ``retry_after`` carries the advised delay in seconds."""

    code: ErrorCode = ErrorCode.RATE_LIMIT
    retryable: bool = True
    retry_after: Optional[float] = None


@dataclass(eq=False)
class ProviderResponseError(ProviderError):
    """Error status or malformed response from the provider."""

    code: ErrorCode = ErrorCode.SERVER_ERROR


@dataclass(eq=False)
class UnsupportedParameterError(ProviderError):
    """A parameter, extra key, or feature is not supported by the provider."""

    code: ErrorCode = ErrorCode.UNSUPPORTED
    parameter: Optional[str] = None


__all__ = [
    "ProviderError",
    "UnknownProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ProviderResponseError",
    "UnsupportedParameterError",
]
