"""Timeout configuration and start-phase guard for adapters.

Key Components
--------------
TimeoutConfig
    Frozen dataclass of timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when one of them changes. Supported environment
    variables (all optional, positive floats):
        RAG_PROVIDERS_TIMEOUT_START_SECONDS   (default 30)
        RAG_PROVIDERS_TIMEOUT_HTTP_SECONDS    (default 60)
        RAG_PROVIDERS_TIMEOUT_STREAM_SECONDS  (default 120)

    A ``ProviderConfig.timeout`` value overrides the HTTP and stream values for
    that adapter only (see :meth:`TimeoutConfig.with_request_timeout`).

operation_timeout(seconds)
    Context manager using SIGALRM where available (Unix main thread) and a
    cooperative threading.Timer fallback otherwise. Used around blocking SDK
    calls that do not accept a timeout of their own.

Failure Modes
-------------
TimeoutError raised within the guarded context if the deadline elapses. The
fallback timer mode raises only after the guarded body returns.
"""
from __future__ import annotations

from contextlib import contextmanager, suppress
from dataclasses import dataclass, replace
import os
import signal
import threading
import time
from typing import Iterator, Optional, Tuple

START_ENV = "RAG_PROVIDERS_TIMEOUT_START_SECONDS"
HTTP_ENV = "RAG_PROVIDERS_TIMEOUT_HTTP_SECONDS"
STREAM_ENV = "RAG_PROVIDERS_TIMEOUT_STREAM_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        start_timeout_seconds: Deadline for opening a streaming session or
            issuing the first SDK call.
        http_timeout_seconds: Read timeout for non-streaming requests.
        stream_timeout_seconds: Idle timeout between stream chunks.
        connect_timeout_seconds: TCP connect timeout.
    """

    start_timeout_seconds: float = 30.0
    http_timeout_seconds: float = 60.0
    stream_timeout_seconds: float = 120.0
    connect_timeout_seconds: float = 10.0

    def with_request_timeout(self, seconds: Optional[float]) -> "TimeoutConfig":
        """Return a copy whose HTTP/stream timeouts are ``seconds`` when set."""
        if seconds is None:
            return self
        return replace(self, http_timeout_seconds=seconds, stream_timeout_seconds=seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = "/".join(os.getenv(name, "") for name in (START_ENV, HTTP_ENV, STREAM_ENV))
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        start_timeout_seconds=_parse_env_float(START_ENV, 30.0),
        http_timeout_seconds=_parse_env_float(HTTP_ENV, 60.0),
        stream_timeout_seconds=_parse_env_float(STREAM_ENV, 120.0),
    )
    _ENV_GUARD = guard
    return _CACHED


def _setup_signal_timeout(seconds: float):
    """Install a SIGALRM-based timeout.

    Returns tuple (use_signal, old_handler, old_itimer, start_monotonic), or
    (False, None, None, None) when signals cannot be used from this thread.
    """
    if not (hasattr(signal, "setitimer") and threading.current_thread() is threading.main_thread()):
        return False, None, None, None

    def _raise_timeout(signum=None, frame=None):  # noqa: ARG001
        raise TimeoutError(f"operation exceeded {seconds}s")

    old_handler = signal.getsignal(signal.SIGALRM)
    signal.signal(signal.SIGALRM, _raise_timeout)
    old_itimer = signal.setitimer(signal.ITIMER_REAL, seconds)
    return True, old_handler, old_itimer, time.monotonic()


def _restore_signal_timeout(
    old_handler, old_itimer: Optional[Tuple[float, float]], start_monotonic: Optional[float]
) -> None:
    """Restore any prior alarm and handler (supports nesting)."""
    with suppress(ValueError, OSError):
        signal.setitimer(signal.ITIMER_REAL, 0)
        if old_handler is not None:
            signal.signal(signal.SIGALRM, old_handler)
        if old_itimer and old_itimer[0] > 0:
            remaining = old_itimer[0]
            if start_monotonic is not None:
                remaining = max(0.0, remaining - (time.monotonic() - start_monotonic))
            if remaining > 0:
                signal.setitimer(signal.ITIMER_REAL, remaining, old_itimer[1])


@contextmanager
def operation_timeout(seconds: float) -> Iterator[None]:
    """Context manager enforcing a wall-clock timeout.

    If ``seconds`` <= 0 the guard is inert.
    """
    if seconds <= 0:
        yield
        return

    use_signal, old_handler, old_itimer, start_monotonic = _setup_signal_timeout(seconds)
    expired = False
    timer = None

    if not use_signal:
        def _expire():  # pragma: no cover - timing sensitive
            nonlocal expired
            expired = True

        timer = threading.Timer(seconds, _expire)
        timer.daemon = True
        timer.start()

    try:
        yield
        if not use_signal and expired:
            raise TimeoutError(f"operation exceeded {seconds}s (fallback)")
    finally:
        if use_signal:
            _restore_signal_timeout(old_handler, old_itimer, start_monotonic)
        elif timer is not None:
            timer.cancel()


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "operation_timeout",
]
