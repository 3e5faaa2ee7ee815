"""Terminal logging for streams.

Every ``TextStream`` ends in exactly one of ``stream.end``, ``stream.error``
or ``stream.cancelled``; this helper emits that event with the collected
metrics.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    error_code: Optional[str] = None,
    error: Optional[str] = None,
    cancelled: bool = False,
) -> None:
    """Emit the consolidated terminal log event for a stream."""
    if cancelled:
        event = "stream.cancelled"
    elif error_code is not None:
        event = "stream.error"
    else:
        event = "stream.end"
    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        tokens=metrics.tokens(),
        error_code=error_code,
        level=logging.WARNING if error_code and not cancelled else logging.INFO,
        emitted_count=metrics.emitted,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        finish_reason=metrics.finish_reason,
        error=error[:260] if error else None,
    )


__all__ = ["finalize_stream"]
