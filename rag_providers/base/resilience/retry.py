"""Retry policy for callers of the adapter layer.

Adapters never retry on their own; a request is attempted exactly once and
failures surface as :class:`ProviderError` subclasses. Applications that want
backoff wrap their call with :func:`retry` or :func:`call_with_retry`.
When the provider advertised a delay (``RateLimitError.retry_after``), that
delay is used in place of the exponential schedule, capped at
``max_delay``.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, TypeVar

from ..errors import ErrorCode, ProviderError, RateLimitError
from ..logging import get_logger, normalized_log_event

T = TypeVar("T")

_logger = get_logger("rag_providers.retry")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


def _log_attempt(
    *,
    attempt: int,
    max_attempts: int,
    delay: float | None,
    error: ProviderError | None,
) -> None:
    if error is None:
        return
    normalized_log_event(
        _logger,
        "retry.attempt",
        phase="retry",
        attempt=attempt,
        error_code=error.code.value,
        provider=error.provider,
        model=error.model,
        max_attempts=max_attempts,
        delay=delay,
    )


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    delay_base: float = 2.0  # delay before retry n is delay_base ** n
    max_delay: float = 60.0
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.UNAVAILABLE,
    )
    attempt_logger: Optional[AttemptLogger] = _log_attempt
    sleep: Callable[[float], None] = time.sleep

    def delays(self) -> Iterable[float]:
        for attempt in range(self.max_attempts - 1):
            yield min(self.delay_base**attempt, self.max_delay)

    def delay_for(self, error: ProviderError, scheduled: float) -> float:
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self.max_delay)
        return scheduled


DEFAULT_RETRY_CONFIG = RetryConfig()


def call_with_retry(func: Callable[[], T], config: RetryConfig = DEFAULT_RETRY_CONFIG) -> T:
    """Invoke ``func`` applying ``config``; re-raises the last ProviderError."""
    schedule = list(config.delays()) + [None]  # final attempt has no delay
    for attempt, scheduled in enumerate(schedule, start=1):
        try:
            return func()
        except ProviderError as e:
            retryable = e.code in config.retryable_codes and scheduled is not None
            delay = config.delay_for(e, scheduled) if retryable else None
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay=delay,
                    error=e,
                )
            if delay is None:
                raise
            config.sleep(delay)
    raise RuntimeError("retry schedule exhausted without result")  # pragma: no cover


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying :func:`call_with_retry` to the wrapped callable."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return call_with_retry(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator


__all__ = [
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "call_with_retry",
    "retry",
]
