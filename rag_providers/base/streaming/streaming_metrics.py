"""Streaming metrics collected while a ``TextStream`` is drained."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected streaming metrics for a single provider invocation.

    Attributes:
        emitted: Number of non-empty fragments yielded to the consumer.
        time_to_first_token_ms: Latency until the first fragment.
        total_duration_ms: Wall time from start to termination.
        prompt_tokens, completion_tokens, total_tokens: Usage when reported
            by the provider (usually on the final chunk).
        finish_reason: Provider stop reason when reported.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    finish_reason: Optional[str] = None

    def tokens(self) -> Optional[Dict[str, Any]]:
        if self.prompt_tokens is None and self.completion_tokens is None and self.total_tokens is None:
            return None
        return {"prompt": self.prompt_tokens, "completion": self.completion_tokens, "total": self.total_tokens}


def apply_token_usage(
    metrics: StreamMetrics,
    *,
    prompt: Optional[int],
    completion: Optional[int],
    total: Optional[int] = None,
) -> None:
    """Populate token usage fields, deriving ``total`` when both parts are known."""
    metrics.prompt_tokens = prompt
    metrics.completion_tokens = completion
    if total is None and prompt is not None and completion is not None:
        total = prompt + completion
    metrics.total_tokens = total


__all__ = ["StreamMetrics", "apply_token_usage"]
