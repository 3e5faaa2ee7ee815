"""Helpers for decoding model-emitted function calls."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..errors import ErrorCode, ProviderResponseError
from ..models import FunctionCall


def decode_arguments(raw: Any, *, provider: str, model: Optional[str]) -> Dict[str, Any]:
    """Return call arguments as a dict; JSON strings are decoded."""
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str):
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise ProviderResponseError(
                message="function call arguments are not valid JSON",
                provider=provider,
                model=model,
                code=ErrorCode.MALFORMED,
                raw=e,
                payload=raw,
            ) from e
        if isinstance(value, dict):
            return value
    raise ProviderResponseError(
        message="function call arguments must be a JSON object",
        provider=provider,
        model=model,
        code=ErrorCode.MALFORMED,
        payload=raw,
    )


def make_call(
    name: Any,
    arguments: Any,
    *,
    provider: str,
    model: Optional[str],
    call_id: Optional[str] = None,
) -> FunctionCall:
    if not isinstance(name, str) or not name:
        raise ProviderResponseError(
            message="function call without a name",
            provider=provider,
            model=model,
            code=ErrorCode.MALFORMED,
            payload={"name": name, "arguments": arguments},
        )
    return FunctionCall(name=name, arguments=decode_arguments(arguments, provider=provider, model=model), id=call_id)


__all__ = ["decode_arguments", "make_call"]
