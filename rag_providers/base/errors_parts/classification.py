"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction (httpx responses, vendor SDK exceptions and
botocore ``ClientError`` dictionaries), status-to-code mapping, and
message-based heuristics as a fallback. ``to_provider_error`` turns any
exception raised while talking to a vendor into one of the taxonomy classes
so callers only ever handle :class:`ProviderError` subclasses.
"""
from __future__ import annotations

import contextlib
import json
from typing import Any, Dict, Optional, Type

from .error_code import ErrorCode
from .provider_error import (
    AuthenticationError,
    ProviderError,
    ProviderResponseError,
    RateLimitError,
    UnsupportedParameterError,
)


def _valid_status(val: Any) -> Optional[int]:
    if isinstance(val, bool):
        return None
    if isinstance(val, int) and 100 <= val < 600:
        return int(val)
    return None


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from a provider exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.code`` (google api_core exceptions)
    - ``exc.response.status_code`` (httpx / SDK errors)
    - ``exc.response["ResponseMetadata"]["HTTPStatusCode"]`` (botocore)
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status", "code"):
        status = _valid_status(getattr(exc, attr, None))
        if status is not None:
            return status
    resp = getattr(exc, "response", None)
    if isinstance(resp, dict):
        meta = resp.get("ResponseMetadata") or {}
        return _valid_status(meta.get("HTTPStatusCode"))
    if resp is not None:
        return _valid_status(getattr(resp, "status_code", None))
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

# botocore ``Error.Code`` values seen from bedrock-runtime.
_AWS_ERROR_MAP: Dict[str, ErrorCode] = {
    "ThrottlingException": ErrorCode.RATE_LIMIT,
    "TooManyRequestsException": ErrorCode.RATE_LIMIT,
    "ServiceQuotaExceededException": ErrorCode.RATE_LIMIT,
    "AccessDeniedException": ErrorCode.AUTH,
    "UnrecognizedClientException": ErrorCode.AUTH,
    "ExpiredTokenException": ErrorCode.AUTH,
    "InvalidSignatureException": ErrorCode.AUTH,
    "ValidationException": ErrorCode.VALIDATION,
    "ResourceNotFoundException": ErrorCode.NOT_FOUND,
    "ModelTimeoutException": ErrorCode.TIMEOUT,
    "ModelNotReadyException": ErrorCode.UNAVAILABLE,
    "ServiceUnavailableException": ErrorCode.UNAVAILABLE,
    "InternalServerException": ErrorCode.SERVER_ERROR,
    "ModelStreamErrorException": ErrorCode.SERVER_ERROR,
}

_RETRYABLE = frozenset(
    {
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.TRANSIENT,
        ErrorCode.UNAVAILABLE,
        ErrorCode.SERVER_ERROR,
    }
)

_CODE_TO_CLASS: Dict[ErrorCode, Type[ProviderError]] = {
    ErrorCode.AUTH: AuthenticationError,
    ErrorCode.RATE_LIMIT: RateLimitError,
    ErrorCode.UNSUPPORTED: UnsupportedParameterError,
}


def _aws_error_code(exc: BaseException) -> Optional[ErrorCode]:
    resp = getattr(exc, "response", None)
    if not isinstance(resp, dict):
        return None
    name = (resp.get("Error") or {}).get("Code")
    return _AWS_ERROR_MAP.get(name) if isinstance(name, str) else None


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for non-HTTP exceptions."""
    PATTERN_GROUPS = (
        (ErrorCode.RATE_LIMIT, ("rate", "limit")),
        (ErrorCode.RATE_LIMIT, ("throttl",)),
        (ErrorCode.TIMEOUT, ("timeout",)),
        (ErrorCode.TIMEOUT, ("timed out",)),
        (ErrorCode.AUTH, ("auth",)),
        (ErrorCode.AUTH, ("api key",)),
        (ErrorCode.AUTH, ("unauthorized",)),
        (ErrorCode.AUTH, ("forbidden",)),
        (ErrorCode.UNSUPPORTED, ("unsupported",)),
        (ErrorCode.UNSUPPORTED, ("not supported",)),
        (ErrorCode.NOT_FOUND, ("not found",)),
        (ErrorCode.NOT_FOUND, ("does not exist",)),
        (ErrorCode.CONFLICT, ("conflict",)),
        (ErrorCode.UNAVAILABLE, ("unavailable",)),
        (ErrorCode.UNAVAILABLE, ("connection refused",)),
        (ErrorCode.VALIDATION, ("validation",)),
        (ErrorCode.VALIDATION, ("invalid",)),
        (ErrorCode.MALFORMED, ("malformed",)),
        (ErrorCode.SERVER_ERROR, ("server error",)),
        (ErrorCode.SERVER_ERROR, ("internal error",)),
    )
    for code, patterns in PATTERN_GROUPS:
        if len(patterns) > 1:
            if all(p in msg for p in patterns):
                return code
            continue
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (builtin or named ``*Timeout*`` by the SDK).
        3. botocore error codes.
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, TimeoutError) or "timeout" in type(exc).__name__.lower():
        return ErrorCode.TIMEOUT
    aws = _aws_error_code(exc)
    if aws is not None:
        return aws
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        code = _HTTP_STATUS_MAP[status]
        # some APIs (Gemini) answer a bad key with 400 INVALID_ARGUMENT
        if code is ErrorCode.VALIDATION and "api key" in str(exc).lower():
            return ErrorCode.AUTH
        return code
    if status is not None and status >= 500:
        return ErrorCode.SERVER_ERROR
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def _parse_retry_after(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None


def extract_retry_after(exc: BaseException) -> Optional[float]:
    """Return the advised retry delay in seconds when the provider signals one.

    Reads an explicit ``retry_after`` attribute first, then the
    ``retry-after`` header of an attached HTTP response.
    """
    explicit = _parse_retry_after(getattr(exc, "retry_after", None))
    if explicit is not None:
        return explicit
    resp = getattr(exc, "response", None)
    headers = getattr(resp, "headers", None)
    if headers is None and isinstance(resp, dict):
        headers = (resp.get("ResponseMetadata") or {}).get("HTTPHeaders")
    if not headers:
        return None
    with contextlib.suppress(Exception):
        for key in ("retry-after", "Retry-After", "x-ratelimit-reset-requests"):
            value = headers.get(key)
            if value is not None:
                return _parse_retry_after(value)
    return None


def extract_payload(exc: BaseException) -> Any:
    """Return the raw error body attached to an exception, if any.

    Vendor SDKs expose it as ``exc.body``; httpx errors carry the response,
    whose JSON (or text) is returned. botocore keeps the parsed error dict in
    ``exc.response``.
    """
    body = getattr(exc, "body", None)
    if body is not None:
        return body
    resp = getattr(exc, "response", None)
    if isinstance(resp, dict):
        return resp.get("Error") or resp
    if resp is None:
        return None
    text = None
    with contextlib.suppress(Exception):
        text = resp.text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def to_provider_error(
    exc: BaseException,
    *,
    provider: str,
    model: Optional[str] = None,
    message: Optional[str] = None,
) -> ProviderError:
    """Translate an arbitrary exception into the provider error taxonomy.

    ``ProviderError`` instances are returned unchanged. Everything else is
    classified and wrapped so that ``raw`` keeps the original exception.
    """
    if isinstance(exc, ProviderError):
        return exc
    code = classify_exception(exc)
    cls = _CODE_TO_CLASS.get(code, ProviderResponseError)
    kwargs: Dict[str, Any] = {
        "message": message or str(exc) or type(exc).__name__,
        "provider": provider,
        "model": model,
        "code": code,
        "retryable": code in _RETRYABLE,
        "raw": exc,
        "payload": extract_payload(exc),
    }
    if cls is RateLimitError:
        kwargs["retry_after"] = extract_retry_after(exc)
    return cls(**kwargs)


__all__ = [
    "classify_exception",
    "extract_payload",
    "extract_retry_after",
    "to_provider_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
