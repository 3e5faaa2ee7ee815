"""Caller-side resilience helpers (retry with backoff)."""

from .retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry, call_with_retry

__all__ = ["DEFAULT_RETRY_CONFIG", "RetryConfig", "retry", "call_with_retry"]
