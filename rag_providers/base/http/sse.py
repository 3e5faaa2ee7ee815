"""Line decoders for streamed HTTP bodies.

``iter_sse_data`` understands the Server-Sent Events framing used by
OpenAI-style, Cohere, TGI and Vertex streams: ``data:`` fields are joined per
event, comments and other fields are skipped, and the ``[DONE]`` sentinel ends
the stream. ``iter_json_lines`` handles newline-delimited JSON (Ollama).
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Iterator, List

DONE_SENTINEL = "[DONE]"


def iter_sse_data(lines: Iterable[str]) -> Iterator[str]:
    """Yield the ``data`` payload of each SSE event."""
    buf: List[str] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if buf:
                data = "\n".join(buf)
                buf = []
                if data.strip() == DONE_SENTINEL:
                    return
                yield data
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if field != "data":
            continue
        buf.append(value[1:] if value.startswith(" ") else value)
    if buf:
        data = "\n".join(buf)
        if data.strip() != DONE_SENTINEL:
            yield data


def iter_sse_json(lines: Iterable[str]) -> Iterator[Any]:
    """Decode each SSE event payload as JSON."""
    for data in iter_sse_data(lines):
        yield json.loads(data)


def iter_json_lines(lines: Iterable[str]) -> Iterator[Any]:
    """Decode newline-delimited JSON, skipping blank lines."""
    for line in lines:
        stripped = line.strip()
        if stripped:
            yield json.loads(stripped)


__all__ = ["DONE_SENTINEL", "iter_sse_data", "iter_sse_json", "iter_json_lines"]
