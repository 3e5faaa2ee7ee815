"""Abstract adapter contract shared by every provider.

Purpose:
- Turn a validated :class:`ProviderConfig` into a ready-to-use adapter in one
  step: credentials are resolved, the parameter table is applied, and
  capability conflicts are rejected, all without network I/O.
- Give every provider the same ``generate`` surface returning either a
  :class:`Completion` or a lazy :class:`TextStream`.

Subclasses implement:
- ``_make_client()``: build the SDK client or HTTP transport (called lazily).
- ``_complete(request, functions)``: one non-streaming call.
- ``_open_stream(request, stack)``: open the streaming transport, register
  its cleanup on ``stack`` and return an iterable of native chunks.
- ``_translate_chunk(chunk)``: text fragment of a native chunk, or ``None``.

Failure semantics:
- Every failure reaches the caller as a :class:`ProviderError` subclass.
- Nothing is retried here; see ``base.resilience.retry`` for a caller-side
  helper.
"""
from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from contextlib import ExitStack
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from ..config.credentials import CredentialSource, EnvironmentSource, resolve_credentials
from ..config.env import get_credential_spec
from .cancellation import CancelledError
from .errors import ErrorCode, ProviderError, ProviderResponseError, UnsupportedParameterError, to_provider_error
from .logging import LogContext, get_logger, normalized_log_event
from .models import Completion, CompletionRequest, ProviderConfig
from .parameters import Capability, MappedParams, ParamRule, map_parameters
from .streaming import StreamMetrics, TextStream
from .timeouts import get_timeout_config
from .tools import FunctionSpec, normalize_functions

CompletionResult = Union[Completion, TextStream]


class LlmAdapter(ABC):
    """Common contract for all provider adapters."""

    provider_name: ClassVar[str]
    capabilities: ClassVar[FrozenSet[Capability]] = frozenset({Capability.GENERATE})
    PARAMETER_MAP: ClassVar[Mapping[str, ParamRule]] = {}
    EXTRA_PARAMS: ClassVar[Mapping[str, str]] = {}
    DEFAULT_MODEL: ClassVar[Optional[str]] = None

    def __init__(
        self,
        config: ProviderConfig,
        *,
        source: Optional[CredentialSource] = None,
        client: Any = None,
    ) -> None:
        """Validate ``config`` and resolve credentials.

        Parameters:
            config: Configuration whose ``provider`` matches this adapter.
            source: Credential source; the process environment by default.
            client: Pre-built SDK client or transport (tests inject fakes).

        Raises:
            AuthenticationError: A required credential variable is missing.
            UnsupportedParameterError: A parameter, extra key, or streaming
                is not supported by this provider.
        """
        if config.provider != self.provider_name:
            raise ValueError(f"{type(self).__name__} cannot serve provider {config.provider!r}")
        self.config = config
        self._logger = get_logger(f"rag_providers.{self.provider_name}")
        source = source or EnvironmentSource()
        self.credentials = resolve_credentials(
            self.provider_name,
            source,
            provided=self._provided_credentials(config),
        )
        self.model = self._resolve_model(source)
        self._ctx = LogContext(provider=self.provider_name, model=self.model)
        if config.stream and Capability.STREAM not in self.capabilities:
            raise UnsupportedParameterError(
                message=f"{self.provider_name} does not support streaming",
                provider=self.provider_name,
                model=self.model,
                parameter="stream",
            )
        self.params: MappedParams = map_parameters(
            config,
            parameter_map=self.PARAMETER_MAP,
            extra_params=self.EXTRA_PARAMS,
            logger=self._logger,
            model=self.model,
        )
        self.timeouts = get_timeout_config().with_request_timeout(config.timeout)
        self._client = client
        self._client_lock = threading.Lock()
        normalized_log_event(
            self._logger,
            "adapter.init",
            self._ctx,
            phase="init",
            stream=config.stream,
            dropped=list(self.params.dropped) or None,
            env_vars=sorted(set(self.credentials.sources.values()) - {"config"}) or None,
        )

    # ----- construction hooks -----
    def _provided_credentials(self, config: ProviderConfig) -> Dict[str, str]:
        """Credential values supplied by the config itself, by canonical name.

        Raises:
            UnsupportedParameterError: ``api_key`` for a provider without a key
                variable, or a ``credentials`` entry this provider never reads.
        """
        spec = get_credential_spec(self.provider_name)
        provided: Dict[str, str] = {}
        for name, secret in config.credentials.items():
            canonical = spec.canonical(name)
            if canonical is None:
                raise UnsupportedParameterError(
                    message=f"{self.provider_name} does not read credential {name}",
                    provider=self.provider_name,
                    parameter="credentials",
                )
            provided[canonical] = secret.get_secret_value()
        if config.api_key is not None:
            if not spec.api_key_var:
                raise UnsupportedParameterError(
                    message=f"{self.provider_name} takes no api_key",
                    provider=self.provider_name,
                    parameter="api_key",
                )
            provided[spec.api_key_var] = config.api_key.get_secret_value()
        return provided

    def _resolve_model(self, source: CredentialSource) -> str:
        model = self.config.model
        spec = get_credential_spec(self.provider_name)
        if not model and spec.model_env:
            model = source.get(spec.model_env)
        model = model or self.DEFAULT_MODEL
        if not model:
            raise UnsupportedParameterError(
                message=f"{self.provider_name} requires an explicit model",
                provider=self.provider_name,
                parameter="model",
            )
        return model

    # ----- client lifecycle -----
    @property
    def client(self) -> Any:
        """SDK client or transport, created on first use."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = self._make_client()
        return self._client

    def close(self) -> None:
        """Release the client's connection pool, if it has one."""
        with self._client_lock:
            client, self._client = self._client, None
        close = getattr(client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "LlmAdapter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    # ----- public surface -----
    def generate(self, request: Union[CompletionRequest, str]) -> CompletionResult:
        """Run a completion; returns a ``TextStream`` when ``config.stream`` is set."""
        request = CompletionRequest.coerce(request)
        functions = self._prepare_functions(request)
        if self.config.stream:
            return TextStream(
                provider=self.provider_name,
                model=self.model,
                opener=lambda stack: self._open_stream(request, stack),
                translator=self._translate_chunk,
                inspector=self._inspect_chunk,
                logger=self._logger,
                cancellation_token=request.cancellation_token,
                start_timeout=self.timeouts.start_timeout_seconds,
            )
        return self._run_complete(request, functions)

    def _prepare_functions(self, request: CompletionRequest) -> List[FunctionSpec]:
        if not request.functions:
            return []
        if Capability.FUNCTION_CALL not in self.capabilities:
            raise UnsupportedParameterError(
                message=f"{self.provider_name} does not support function calling",
                provider=self.provider_name,
                model=self.model,
                parameter="functions",
            )
        if self.config.stream:
            raise UnsupportedParameterError(
                message="function calling requires a non-streaming request",
                provider=self.provider_name,
                model=self.model,
                parameter="functions",
            )
        return normalize_functions(request.functions)

    def _run_complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        t0 = time.perf_counter()
        normalized_log_event(
            self._logger,
            "generate.start",
            self._ctx,
            phase="start",
            functions=len(functions) or None,
        )
        try:
            completion = self._complete(request, functions)
        except CancelledError:
            raise
        except Exception as e:
            err = to_provider_error(e, provider=self.provider_name, model=self.model)
            normalized_log_event(
                self._logger,
                "generate.error",
                self._ctx,
                phase="finalize",
                error_code=err.code.value,
                emitted=False,
                error=err.message[:260],
            )
            if err is e:
                raise
            raise err from e
        completion.meta.latency_ms = (time.perf_counter() - t0) * 1000.0
        completion.meta.dropped_params = self.params.dropped
        normalized_log_event(
            self._logger,
            "generate.end",
            self._ctx,
            phase="finalize",
            emitted=bool(completion.text or completion.function_calls),
            tokens=completion.meta.usage or None,
            latency_ms=completion.meta.latency_ms,
            finish_reason=completion.meta.finish_reason,
            function_calls=len(completion.function_calls) or None,
        )
        return completion

    def _error(self, message: str, **kwargs: Any) -> ProviderError:
        """Build a ``ProviderResponseError`` for a malformed provider payload."""
        kwargs.setdefault("code", ErrorCode.MALFORMED)
        return ProviderResponseError(message=message, provider=self.provider_name, model=self.model, **kwargs)

    # ----- provider hooks -----
    @abstractmethod
    def _make_client(self) -> Any:
        """Create the SDK client or HTTP transport."""

    @abstractmethod
    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        """Perform one non-streaming call."""

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        raise UnsupportedParameterError(
            message=f"{self.provider_name} does not support streaming",
            provider=self.provider_name,
            model=self.model,
            parameter="stream",
        )

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        return None

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        """Record usage or finish reason carried by a native chunk."""


__all__ = ["Capability", "CompletionResult", "LlmAdapter"]
