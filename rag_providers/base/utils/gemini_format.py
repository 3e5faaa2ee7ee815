"""Readers for Gemini ``generateContent`` responses.

The google-generativeai SDK returns proto-backed objects with snake_case
attributes; the Vertex AI REST API returns camelCase JSON. These helpers read
both so the google and vertexai adapters share one interpretation.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Tuple


def pick(obj: Any, snake: str, camel: Optional[str] = None) -> Any:
    """Read ``snake`` (attribute or key), falling back to ``camel``."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        value = obj.get(snake)
        if value is None and camel:
            value = obj.get(camel)
        return value
    value = getattr(obj, snake, None)
    if value is None and camel:
        value = getattr(obj, camel, None)
    return value


def to_plain(value: Any) -> Any:
    """Convert proto map/repeated composites into dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [to_plain(v) for v in value]
    return value


def first_candidate(resp: Any) -> Any:
    candidates = pick(resp, "candidates") or []
    return candidates[0] if len(candidates) else None


def candidate_parts(resp: Any) -> List[Any]:
    content = pick(first_candidate(resp), "content")
    return list(pick(content, "parts") or [])


def extract_text_and_calls(resp: Any) -> Tuple[str, List[Tuple[Optional[str], Any]]]:
    """Joined text plus ``(name, args)`` for each function call part."""
    texts: List[str] = []
    calls: List[Tuple[Optional[str], Any]] = []
    for part in candidate_parts(resp):
        call = pick(part, "function_call", "functionCall")
        if call is not None and pick(call, "name"):
            calls.append((pick(call, "name"), to_plain(pick(call, "args") or {})))
            continue
        text = pick(part, "text")
        if text:
            texts.append(text)
    return "".join(texts), calls


def extract_text(resp: Any) -> str:
    return extract_text_and_calls(resp)[0]


def finish_reason(resp: Any) -> Optional[str]:
    reason = pick(first_candidate(resp), "finish_reason", "finishReason")
    if reason is None:
        return None
    name = getattr(reason, "name", reason)
    return str(name)


def block_reason(resp: Any) -> Optional[str]:
    feedback = pick(resp, "prompt_feedback", "promptFeedback")
    reason = pick(feedback, "block_reason", "blockReason")
    if not reason:
        return None
    name = getattr(reason, "name", reason)
    if str(name) in ("0", "BLOCK_REASON_UNSPECIFIED"):
        return None
    return str(name)


def extract_usage(resp: Any) -> Dict[str, int]:
    usage = pick(resp, "usage_metadata", "usageMetadata")
    out: Dict[str, int] = {}
    for snake, camel, key in (
        ("prompt_token_count", "promptTokenCount", "prompt_tokens"),
        ("candidates_token_count", "candidatesTokenCount", "completion_tokens"),
        ("total_token_count", "totalTokenCount", "total_tokens"),
    ):
        value = pick(usage, snake, camel)
        if value:
            out[key] = int(value)
    return out


__all__ = [
    "block_reason",
    "candidate_parts",
    "extract_text",
    "extract_text_and_calls",
    "extract_usage",
    "finish_reason",
    "first_candidate",
    "pick",
    "to_plain",
]
