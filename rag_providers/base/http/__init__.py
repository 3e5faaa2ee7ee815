"""HTTP transport helpers for REST-backed adapters."""

from .client import HttpTransport
from .sse import iter_json_lines, iter_sse_data, iter_sse_json

__all__ = ["HttpTransport", "iter_json_lines", "iter_sse_data", "iter_sse_json"]
