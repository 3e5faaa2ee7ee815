"""Auxiliary logging helpers (formatters, context, redaction) used by base.logging."""

from .json_formatter import JsonFormatter, ISO
from .logging_context import LogContext
from .redaction import MASK, is_secret_key, redact

__all__ = ["JsonFormatter", "ISO", "LogContext", "MASK", "is_secret_key", "redact"]
