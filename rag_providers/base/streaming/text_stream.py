"""Lazy, pull-driven text stream returned by streaming adapters.

``TextStream`` wraps a generator that opens the provider transport on the
first ``next()`` call, translates native chunks into text fragments, and
yields only non-empty fragments. The transport is registered on an
``ExitStack`` owned by the generator, so it is released on every path:

- normal exhaustion;
- a provider or decoding error (re-raised as a ``ProviderError``);
- ``close()`` / leaving a ``with`` block;
- ``cancel()`` or a linked ``CancellationToken`` firing (from any thread);
- garbage collection of an abandoned stream.

A stream can be iterated once. Errors are raised, never turned into a
silent end of stream.
"""
from __future__ import annotations

import json
import logging
import threading
import time
import weakref
from contextlib import ExitStack, suppress
from typing import Any, Callable, Iterable, Iterator, Optional

from ..cancellation import CancellationToken, CancelledError
from ..errors import ErrorCode, ProviderError, ProviderResponseError, to_provider_error
from ..logging import LogContext, normalized_log_event
from ..timeouts import get_timeout_config, operation_timeout
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics

Opener = Callable[[ExitStack], Iterable[Any]]
Translator = Callable[[Any], Optional[str]]
Inspector = Callable[[Any, StreamMetrics], None]


def translate_stream_error(exc: BaseException, *, provider: str, model: Optional[str]) -> ProviderError:
    """Map a mid-stream failure into the taxonomy (bad JSON becomes MALFORMED)."""
    if isinstance(exc, json.JSONDecodeError):
        return ProviderResponseError(
            message=f"malformed stream chunk: {exc}",
            provider=provider,
            model=model,
            code=ErrorCode.MALFORMED,
            raw=exc,
            payload=exc.doc,
        )
    return to_provider_error(exc, provider=provider, model=model)


def _weak_release(stream: "TextStream") -> Callable[[Optional[str]], None]:
    """Cancellation hook that does not keep ``stream`` alive."""
    ref = weakref.ref(stream)

    def hook(reason: Optional[str]) -> None:
        target = ref()
        if target is not None:
            target._release(reason)

    return hook


def register_stream_cleanup(stream: Any, stack: ExitStack) -> None:
    """Register ``stream.close()`` on ``stack`` when the object exposes one."""
    close = getattr(stream, "close", None)
    if callable(close):
        stack.callback(close)


class TextStream(Iterator[str]):
    """Non-restartable iterator of text fragments from a provider."""

    def __init__(
        self,
        *,
        provider: str,
        model: str,
        opener: Opener,
        translator: Translator,
        logger: logging.Logger,
        inspector: Optional[Inspector] = None,
        cancellation_token: Optional[CancellationToken] = None,
        start_timeout: Optional[float] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.metrics = StreamMetrics()
        self._opener = opener
        self._translator = translator
        self._inspector = inspector
        self._logger = logger
        self._ctx = LogContext(provider=provider, model=model)
        self._token = cancellation_token or CancellationToken()
        self._start_timeout = start_timeout if start_timeout is not None else get_timeout_config().start_timeout_seconds
        self._stack: Optional[ExitStack] = None
        self._lock = threading.Lock()
        self._finished = False
        self._gen = self._run()
        self._cancel_hook = _weak_release(self)
        self._token.on_cancel(self._cancel_hook)

    def __iter__(self) -> "TextStream":
        return self

    def __next__(self) -> str:
        return next(self._gen)

    def __enter__(self) -> "TextStream":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """True once the stream is exhausted, failed, closed or cancelled."""
        return self._finished

    @property
    def cancellation_token(self) -> CancellationToken:
        return self._token

    def read_all(self) -> str:
        """Drain the remaining fragments and return them concatenated."""
        return "".join(self)

    def close(self) -> None:
        """Stop the stream and release the transport."""
        self._gen.close()
        self._release(None)

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel the stream; safe to call from another thread."""
        self._token.cancel(reason or "stream cancelled by consumer")
        # a generator running in another thread observes the closed transport
        with suppress(ValueError):
            self._gen.close()

    def _release(self, _reason: Optional[str]) -> None:
        with self._lock:
            stack, self._stack = self._stack, None
            self._finished = True
        if stack is not None:
            stack.close()
        self._token.off_cancel(self._cancel_hook)

    def _run(self) -> Iterator[str]:
        t0 = time.perf_counter()
        self._token.raise_if_cancelled()
        stack = ExitStack()
        with self._lock:
            if self._finished:
                return
            self._stack = stack
        with stack:
            normalized_log_event(self._logger, "stream.start", self._ctx, phase="start")
            try:
                self._token.raise_if_cancelled()
                with operation_timeout(self._start_timeout):
                    chunks = self._opener(stack)
                for chunk in chunks:
                    self._token.raise_if_cancelled()
                    delta = self._translator(chunk)
                    if self._inspector is not None:
                        self._inspector(chunk, self.metrics)
                    if not delta:
                        continue
                    if self.metrics.time_to_first_token_ms is None:
                        self.metrics.time_to_first_token_ms = (time.perf_counter() - t0) * 1000.0
                    self.metrics.emitted += 1
                    yield delta
                self._token.raise_if_cancelled()
            except GeneratorExit:
                self._finish(t0, cancelled=True, error=self._token.reason or "closed by consumer")
                raise
            except CancelledError as ce:
                self._finish(t0, cancelled=True, error=str(ce))
                raise
            except Exception as e:
                if self._token.cancelled:
                    self._finish(t0, cancelled=True, error=self._token.reason)
                    raise CancelledError(self._token.reason or "stream cancelled") from e
                err = translate_stream_error(e, provider=self.provider, model=self.model)
                self._finish(t0, error_code=err.code.value, error=err.message)
                if err is e:
                    raise
                raise err from e
            self._finish(t0)

    def _finish(
        self,
        t0: float,
        *,
        error_code: Optional[str] = None,
        error: Optional[str] = None,
        cancelled: bool = False,
    ) -> None:
        self._finished = True
        self._token.off_cancel(self._cancel_hook)
        self.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
        finalize_stream(
            logger=self._logger,
            ctx=self._ctx,
            metrics=self.metrics,
            error_code=ErrorCode.CANCELLED.value if cancelled else error_code,
            error=error,
            cancelled=cancelled,
        )


__all__ = ["TextStream", "register_stream_cleanup", "translate_stream_error"]
