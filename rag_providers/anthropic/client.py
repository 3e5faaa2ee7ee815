"""Anthropic adapter.

Uses the ``anthropic`` SDK Messages API. Streaming uses
``messages.create(stream=True)``, whose stream object is closed when the
``TextStream`` ends. The Messages API requires ``max_tokens``; when the config
leaves it unset a default of 1024 is sent.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Iterable, List, Optional

import anthropic
import httpx

from ..base.adapter import LlmAdapter
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics, register_stream_cleanup
from ..base.tools import FunctionSpec, make_call
from ..config.defaults import ANTHROPIC_DEFAULT_MODEL
from .helpers import build_params, extract_content, extract_usage, inspect_event, translate_event


class AnthropicAdapter(LlmAdapter):
    provider_name = "anthropic"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    DEFAULT_MODEL = ANTHROPIC_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("temperature"),
        "top_p": wire("top_p"),
        "top_k": wire("top_k"),
        "max_tokens": wire("max_tokens"),
    }
    EXTRA_PARAMS = {
        "stop": "stop_sequences",
        "stop_sequences": "stop_sequences",
        "metadata": "metadata",
    }

    def _make_client(self) -> Any:
        return anthropic.Anthropic(
            api_key=self.credentials.require("ANTHROPIC_API_KEY"),
            base_url=self.config.endpoint,
            timeout=httpx.Timeout(
                self.timeouts.http_timeout_seconds,
                connect=self.timeouts.connect_timeout_seconds,
            ),
            max_retries=0,
        )

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        resp = self.client.messages.create(**build_params(self.model, request, self.params, functions))
        if getattr(resp, "content", None) is None:
            raise self._error("response has no content", payload=resp)
        text, raw_calls = extract_content(resp)
        calls = [
            make_call(name, args, provider=self.provider_name, model=self.model, call_id=call_id)
            for call_id, name, args in raw_calls
        ]
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=getattr(resp, "model", None) or self.model,
            finish_reason=getattr(resp, "stop_reason", None),
            usage=extract_usage(resp),
            request_id=getattr(resp, "id", None),
        )
        return Completion(text=text, meta=meta, function_calls=calls, raw=resp)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        stream = self.client.messages.create(**build_params(self.model, request, self.params, stream=True))
        register_stream_cleanup(stream, stack)
        return stream

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        return translate_event(chunk)

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        inspect_event(chunk, metrics)


__all__ = ["AnthropicAdapter"]
