"""Shared base for adapters speaking the OpenAI Chat Completions protocol.

Purpose:
- One implementation for openai, azure_openai, together, vllm, gpt4all,
  jina and mistralai. Subclasses only declare their identifier, parameter
  tables, defaults and how the SDK client is built.

External dependencies:
- ``openai`` SDK (v1). The client is created with ``max_retries=0`` so the
  adapter performs exactly one attempt per call.

Timeout strategy:
- The SDK client receives the adapter's HTTP timeout; stream start is guarded
  by ``TextStream`` with ``operation_timeout``.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, ClassVar, Iterable, List, Optional

import httpx
import openai

from ..adapter import LlmAdapter
from ..models import Completion, CompletionRequest, ProviderMetadata
from ..parameters import DROP, Capability, wire
from ..streaming import StreamMetrics, register_stream_cleanup
from ..tools import FunctionSpec, make_call
from .style_helpers import (
    build_chat_params,
    extract_finish_reason,
    extract_openai_text,
    extract_tool_calls,
    extract_usage,
    inspect_openai_chunk,
    translate_openai_delta,
)


class OpenAIStyleAdapter(LlmAdapter):
    """Reusable base for OpenAI-compatible providers.

    Subclasses set ``provider_name`` and ``API_KEY_VAR`` and may override
    ``BASE_URL``, the tables, or :meth:`_make_client`.
    """

    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    PARAMETER_MAP = {
        "temperature": wire("temperature"),
        "top_p": wire("top_p"),
        "top_k": DROP,
        "max_tokens": wire("max_tokens"),
    }
    EXTRA_PARAMS = {
        "seed": "seed",
        "stop": "stop",
        "presence_penalty": "presence_penalty",
        "frequency_penalty": "frequency_penalty",
        "user": "user",
    }
    API_KEY_VAR: ClassVar[Optional[str]] = None
    BASE_URL: ClassVar[Optional[str]] = None
    BASE_URL_VAR: ClassVar[Optional[str]] = None

    def _api_key(self) -> Optional[str]:
        return self.credentials.get(self.API_KEY_VAR) if self.API_KEY_VAR else None

    def _base_url(self) -> Optional[str]:
        if self.config.endpoint:
            return self.config.endpoint
        if self.BASE_URL_VAR and self.credentials.get(self.BASE_URL_VAR):
            return self.credentials.get(self.BASE_URL_VAR)
        return self.BASE_URL

    def _sdk_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.timeouts.http_timeout_seconds,
            connect=self.timeouts.connect_timeout_seconds,
        )

    def _make_client(self) -> Any:
        return openai.OpenAI(
            api_key=self._api_key(),
            base_url=self._base_url(),
            timeout=self._sdk_timeout(),
            max_retries=0,
        )

    # ----- non-streaming -----
    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        params = build_chat_params(self.model, request, self.params, functions)
        resp = self.client.chat.completions.create(**params)
        calls = [
            make_call(name, args, provider=self.provider_name, model=self.model, call_id=call_id)
            for call_id, name, args in extract_tool_calls(resp)
        ]
        text = extract_openai_text(resp)
        if not text and not calls and extract_finish_reason(resp) is None:
            raise self._error("response has no choices", payload=_dump(resp))
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=getattr(resp, "model", None) or self.model,
            finish_reason=extract_finish_reason(resp),
            usage=extract_usage(resp),
            request_id=getattr(resp, "id", None),
        )
        return Completion(text=text, meta=meta, function_calls=calls, raw=resp)

    # ----- streaming -----
    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        params = build_chat_params(self.model, request, self.params, stream=True)
        stream = self.client.chat.completions.create(**params)
        register_stream_cleanup(stream, stack)
        return stream

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        return translate_openai_delta(chunk)

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        inspect_openai_chunk(chunk, metrics)


def _dump(resp: Any) -> Any:
    dump = getattr(resp, "model_dump", None)
    return dump() if callable(dump) else resp


__all__ = ["OpenAIStyleAdapter"]
