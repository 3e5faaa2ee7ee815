"""Anthropic Messages API request/response helpers.

Purpose:
- Build ``messages.create`` kwargs (system prompt is a top-level field,
  ``max_tokens`` is mandatory, tools use ``input_schema``).
- Interpret responses and raw stream events.

No network I/O; the adapter owns the client.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..base.constants import REQUIRED_MAX_TOKENS_DEFAULT
from ..base.models import CompletionRequest
from ..base.parameters import MappedParams
from ..base.streaming import StreamMetrics
from ..base.tools import FunctionSpec


def build_params(
    model: str,
    request: CompletionRequest,
    mapped: MappedParams,
    functions: Sequence[FunctionSpec] = (),
    *,
    stream: bool = False,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": request.prompt}],
    }
    if request.system:
        params["system"] = request.system
    mapped.apply(params)
    params.setdefault("max_tokens", REQUIRED_MAX_TOKENS_DEFAULT)
    if functions:
        params["tools"] = [
            {"name": f.name, "description": f.description, "input_schema": f.parameters}
            for f in functions
        ]
    if stream:
        params["stream"] = True
    return params


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def extract_content(resp: Any) -> Tuple[str, List[Tuple[Optional[str], Optional[str], Any]]]:
    """Return joined text and ``(id, name, input)`` tool-use blocks."""
    texts: List[str] = []
    calls: List[Tuple[Optional[str], Optional[str], Any]] = []
    for block in _get(resp, "content") or []:
        kind = _get(block, "type")
        if kind == "text":
            texts.append(_get(block, "text") or "")
        elif kind == "tool_use":
            calls.append((_get(block, "id"), _get(block, "name"), _get(block, "input")))
    return "".join(texts), calls


def extract_usage(resp: Any) -> Dict[str, int]:
    usage = _get(resp, "usage")
    out: Dict[str, int] = {}
    for key in ("input_tokens", "output_tokens"):
        value = _get(usage, key) if usage is not None else None
        if value is not None:
            out[key] = value
    return out


def translate_event(event: Any) -> Optional[str]:
    """Text of a ``content_block_delta`` / ``text_delta`` event."""
    if _get(event, "type") != "content_block_delta":
        return None
    delta = _get(event, "delta")
    if _get(delta, "type") != "text_delta":
        return None
    return _get(delta, "text")


def inspect_event(event: Any, metrics: StreamMetrics) -> None:
    kind = _get(event, "type")
    if kind == "message_start":
        usage = _get(_get(event, "message"), "usage")
        if usage is not None:
            metrics.prompt_tokens = _get(usage, "input_tokens")
    elif kind == "message_delta":
        reason = _get(_get(event, "delta"), "stop_reason")
        if reason:
            metrics.finish_reason = reason
        usage = _get(event, "usage")
        if usage is not None and _get(usage, "output_tokens") is not None:
            metrics.completion_tokens = _get(usage, "output_tokens")
            if metrics.prompt_tokens is not None:
                metrics.total_tokens = metrics.prompt_tokens + metrics.completion_tokens


__all__ = ["build_params", "extract_content", "extract_usage", "inspect_event", "translate_event"]
