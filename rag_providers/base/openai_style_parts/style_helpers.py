"""
Helper utilities for OpenAI-compatible Chat Completions adapters.

Purpose:
- Build request parameters from a request, the adapter's mapped parameters
  and normalized functions.
- Interpret SDK responses and stream chunks (text, tool calls, usage,
  finish reason) without brittle introspection.

No network I/O happens here; callers own the client.
"""

from __future__ import annotations

import typing as _t

from ..models import CompletionRequest
from ..parameters import MappedParams
from ..streaming import StreamMetrics, apply_token_usage
from ..tools import FunctionSpec
from ..utils.messages import build_messages


def to_openai_tool(spec: FunctionSpec) -> dict:
    return {"type": "function", "function": spec.to_wire()}


def build_chat_params(
    model: str,
    request: CompletionRequest,
    mapped: MappedParams,
    functions: _t.Sequence[FunctionSpec] = (),
    *,
    stream: bool = False,
) -> dict:
    """Assemble kwargs for ``client.chat.completions.create``.

    Parameters:
        model: Model (or deployment) identifier.
        request: Prompt and optional system message.
        mapped: Sampling and extra parameters already validated for the provider.
        functions: Normalized function specs exposed as ``tools``.
        stream: Whether to request a streamed response.
    """
    params: dict = {"model": model, "messages": build_messages(request)}
    mapped.apply(params)
    if functions:
        params["tools"] = [to_openai_tool(f) for f in functions]
    if stream:
        params["stream"] = True
    return params


def _get(obj: _t.Any, name: str, default: _t.Any = None) -> _t.Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def first_choice(resp: _t.Any) -> _t.Any:
    choices = _get(resp, "choices") or []
    return choices[0] if choices else None


def extract_openai_text(resp: _t.Any) -> str:
    """Assistant text of a non-streaming response ("" when absent)."""
    choice = first_choice(resp)
    message = _get(choice, "message") if choice is not None else None
    return _get(message, "content") or ""


def extract_tool_calls(resp: _t.Any) -> list[tuple[str | None, str | None, _t.Any]]:
    """Return ``(id, name, raw_arguments)`` for each tool call in a response."""
    choice = first_choice(resp)
    message = _get(choice, "message") if choice is not None else None
    out = []
    for call in _get(message, "tool_calls") or []:
        fn = _get(call, "function")
        out.append((_get(call, "id"), _get(fn, "name"), _get(fn, "arguments")))
    return out


def extract_finish_reason(resp: _t.Any) -> str | None:
    choice = first_choice(resp)
    return _get(choice, "finish_reason") if choice is not None else None


def extract_usage(resp: _t.Any) -> dict:
    usage = _get(resp, "usage")
    if usage is None:
        return {}
    out = {}
    for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
        value = _get(usage, key)
        if value is not None:
            out[key] = value
    return out


def translate_openai_delta(chunk: _t.Any) -> str | None:
    """Text delta of a streaming chunk, or ``None`` when it carries none."""
    choice = first_choice(chunk)
    if choice is None:
        return None
    delta = _get(choice, "delta")
    return _get(delta, "content") if delta is not None else None


def inspect_openai_chunk(chunk: _t.Any, metrics: StreamMetrics) -> None:
    """Record finish reason and usage from a streaming chunk."""
    reason = extract_finish_reason(chunk)
    if reason:
        metrics.finish_reason = reason
    usage = extract_usage(chunk)
    if usage:
        apply_token_usage(
            metrics,
            prompt=usage.get("prompt_tokens"),
            completion=usage.get("completion_tokens"),
            total=usage.get("total_tokens"),
        )


__all__ = [
    "build_chat_params",
    "extract_finish_reason",
    "extract_openai_text",
    "extract_tool_calls",
    "extract_usage",
    "inspect_openai_chunk",
    "to_openai_tool",
    "translate_openai_delta",
]
