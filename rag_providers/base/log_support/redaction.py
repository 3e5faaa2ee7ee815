"""Secret redaction for structured log payloads.

Any mapping key that looks like it holds a credential is replaced with a
fixed mask before the payload is serialized. Nested mappings and lists are
walked recursively.
"""
from __future__ import annotations

import re
from typing import Any, Mapping

MASK = "***"
# Matched anywhere in the key (``clientSecret``, ``db_password``).
_SECRET_MARKERS = ("secret", "password", "authorization", "credential")
# Matched as whole segments of a snake, kebab or dotted key (``api_key``,
# ``x-api-key``, ``session.token``).
_SECRET_SEGMENTS = frozenset({"key", "apikey", "token", "passwd"})
# Trailing segments of measurements (``time_to_first_token_ms``).
_METRIC_SUFFIXES = frozenset({"ms", "s", "seconds", "count"})
_ALLOWED = frozenset({"cache_key"})
_SPLIT = re.compile(r"[^a-z0-9]+")


def is_secret_key(name: str) -> bool:
    lowered = name.lower()
    if lowered in _ALLOWED:
        return False
    if any(marker in lowered for marker in _SECRET_MARKERS):
        return True
    segments = [s for s in _SPLIT.split(lowered) if s]
    if not segments or segments[-1] in _METRIC_SUFFIXES:
        return False
    return any(s in _SECRET_SEGMENTS for s in segments)


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with secret-looking mapping entries masked."""
    if isinstance(value, Mapping):
        return {
            k: (MASK if isinstance(k, str) and is_secret_key(k) and v is not None else redact(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


__all__ = ["MASK", "is_secret_key", "redact"]
