"""Streaming primitives: lazy ``TextStream``, metrics and terminal logging."""

from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics, apply_token_usage
from .text_stream import TextStream, register_stream_cleanup, translate_stream_error

__all__ = [
    "StreamMetrics",
    "TextStream",
    "apply_token_usage",
    "finalize_stream",
    "register_stream_cleanup",
    "translate_stream_error",
]
