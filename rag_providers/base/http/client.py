"""Per-adapter HTTP transport built on ``httpx``.

Purpose:
    Give REST-backed adapters (cohere, ollama, huggingface, llama2,
    vertexai) a single owned ``httpx.Client`` with consistent timeouts,
    headers, and error translation into the provider taxonomy.

External dependencies:
    - ``httpx`` for the synchronous client. Tests inject an
      ``httpx.MockTransport`` via the ``transport`` argument.

Timeout strategy:
    - Connect/read timeouts come from :class:`TimeoutConfig`; streaming calls
      use the stream idle timeout as read timeout.

Lifecycle & cleanup:
    - The client is created lazily on first request, so constructing an
      adapter never opens a connection. ``close()`` releases the pool.
    - ``stream_post`` is a context manager; leaving it closes the streamed
      response even when the consumer stops early.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

import httpx

from ..errors import ErrorCode, ProviderResponseError, to_provider_error
from ..timeouts import TimeoutConfig, get_timeout_config


class HttpTransport:
    """Owned ``httpx.Client`` wrapper for a single adapter instance."""

    def __init__(
        self,
        *,
        provider: str,
        base_url: str,
        headers: Optional[Mapping[str, str]] = None,
        timeouts: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self._headers = dict(headers or {})
        self._timeouts = timeouts or get_timeout_config()
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self.base_url,
                        headers=self._headers,
                        timeout=self._timeout(self._timeouts.http_timeout_seconds),
                        transport=self._transport,
                    )
        return self._client

    def _timeout(self, read: float) -> httpx.Timeout:
        return httpx.Timeout(read, connect=self._timeouts.connect_timeout_seconds)

    def post_json(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        model: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """POST ``payload`` and return the decoded JSON body.

        Raises a taxonomy error for transport failures, error statuses and
        bodies that are not JSON.
        """
        return self._decode(self._send("POST", path, json=dict(payload), headers=headers, model=model), model)

    def get_json(
        self,
        path: str,
        *,
        model: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        return self._decode(self._send("GET", path, headers=headers, model=model), model)

    def _send(self, method: str, path: str, *, model: Optional[str], **kwargs: Any) -> httpx.Response:
        try:
            resp = self.client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise to_provider_error(e, provider=self.provider, model=model) from e
        return resp

    def _decode(self, resp: httpx.Response, model: Optional[str]) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderResponseError(
                message="response body is not valid JSON",
                provider=self.provider,
                model=model,
                code=ErrorCode.MALFORMED,
                raw=e,
                payload=resp.text,
            ) from e

    @contextmanager
    def stream_post(
        self,
        path: str,
        payload: Mapping[str, Any],
        *,
        model: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Iterator[httpx.Response]:
        """Open a streamed POST; the response is closed when the block exits."""
        try:
            with self.client.stream(
                "POST",
                path,
                json=dict(payload),
                headers=headers,
                timeout=self._timeout(self._timeouts.stream_timeout_seconds),
            ) as resp:
                if resp.status_code >= 400:
                    resp.read()
                    resp.raise_for_status()
                yield resp
        except httpx.HTTPError as e:
            raise to_provider_error(e, provider=self.provider, model=model) from e

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    @property
    def closed(self) -> bool:
        return self._client is None or self._client.is_closed


__all__ = ["HttpTransport"]
