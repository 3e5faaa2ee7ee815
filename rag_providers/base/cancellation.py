"""Cooperative cancellation primitives.

``CancellationToken`` signals early termination to streaming and
long-running operations. Tokens cascade to linked children and run
registered callbacks exactly once, which is how a ``TextStream`` releases its
transport the moment a caller cancels it from another thread.
``CancelledError`` is raised by operations that observe a cancellation
request.
"""
from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinguishes cooperative cancellation from provider failures so callers
    can skip retry logic and log noise.
    """


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Thread-safe for ``cancel`` / ``raise_if_cancelled`` usage. Child tokens
    inherit cancellation when the parent is cancelled.
    """

    def __init__(self, *, parent: Optional["CancellationToken"] = None) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._callbacks: List[Callable[[Optional[str]], None]] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        """Reason string supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cooperative cancellation, run callbacks and cascade to children."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason
            children = list(self._children)
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback(reason)
        for child in children:
            child.cancel(reason)

    def on_cancel(self, callback: Callable[[Optional[str]], None]) -> None:
        """Register ``callback(reason)``; runs immediately if already cancelled."""
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return
            reason = self._reason
        callback(reason)

    def off_cancel(self, callback: Callable[[Optional[str]], None]) -> None:
        """Unregister ``callback``; a no-op if it already ran or was never added."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._cancelled
            reason = self._reason
        if should_cancel:
            token.cancel(reason)
        return token

    def child(self) -> "CancellationToken":
        """Create and link a child token."""
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if the token is cancelled."""
        if self._cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._cancelled}, "
            f"reason={self._reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken", "CancelledError"]
