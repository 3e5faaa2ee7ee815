"""Google Gemini adapter.

Purpose:
- Serve ``provider: google`` through the ``google-generativeai`` SDK.

External dependencies:
- ``google.generativeai``: a ``GenerativeModel`` is built per request
  (system instruction, generation config and tools are model-level arguments
  in this SDK). ``configure`` is process-global, so each SDK call runs under a
  module lock right after configuring this adapter's own key.

Notes:
- The injectable ``client`` is a model factory with the signature of
  ``genai.GenerativeModel``; tests pass a fake.
- ``max_tokens`` is sent as ``generation_config.max_output_tokens``.
- The SDK's streamed response exposes no close hook; the stream is released
  when the generator is discarded.
"""

from __future__ import annotations

import threading
from contextlib import ExitStack
from typing import Any, Dict, Iterable, List, Optional

import google.generativeai as genai

from ..base.adapter import LlmAdapter
from ..base.errors import ErrorCode
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics, apply_token_usage, register_stream_cleanup
from ..base.tools import FunctionSpec, make_call
from ..base.utils.gemini_format import (
    block_reason,
    extract_text,
    extract_text_and_calls,
    extract_usage,
    finish_reason,
)
from ..config.defaults import GOOGLE_DEFAULT_MODEL

# Serializes configure() plus the call that binds the SDK client to that key.
_CONFIGURE_LOCK = threading.Lock()


class GoogleAdapter(LlmAdapter):
    provider_name = "google"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    DEFAULT_MODEL = GOOGLE_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("generation_config.temperature"),
        "top_p": wire("generation_config.top_p"),
        "top_k": wire("generation_config.top_k"),
        "max_tokens": wire("generation_config.max_output_tokens"),
    }
    EXTRA_PARAMS = {
        "stop": "generation_config.stop_sequences",
        "stop_sequences": "generation_config.stop_sequences",
        "candidate_count": "generation_config.candidate_count",
        "response_mime_type": "generation_config.response_mime_type",
        "safety_settings": "safety_settings",
    }

    def _make_client(self) -> Any:
        return genai.GenerativeModel

    def _generate(self, model: Any, prompt: str, **kwargs: Any) -> Any:
        if self.client is not genai.GenerativeModel:
            return model.generate_content(prompt, **kwargs)
        with _CONFIGURE_LOCK:
            genai.configure(api_key=self.credentials.require("GOOGLE_API_KEY"))
            return model.generate_content(prompt, **kwargs)

    def _model(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Any:
        kwargs: Dict[str, Any] = {"model_name": self.model}
        self.params.apply(kwargs)
        if request.system:
            kwargs["system_instruction"] = request.system
        if functions:
            kwargs["tools"] = [{"function_declarations": [f.to_wire() for f in functions]}]
        return self.client(**kwargs)

    def _check_blocked(self, resp: Any) -> None:
        reason = block_reason(resp)
        if reason:
            raise self._error(f"prompt blocked: {reason}", code=ErrorCode.VALIDATION, payload=resp)

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        resp = self._generate(
            self._model(request, functions),
            request.prompt,
            request_options={"timeout": self.timeouts.http_timeout_seconds},
        )
        self._check_blocked(resp)
        text, raw_calls = extract_text_and_calls(resp)
        calls = [make_call(name, args, provider=self.provider_name, model=self.model) for name, args in raw_calls]
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=self.model,
            finish_reason=finish_reason(resp),
            usage=extract_usage(resp),
        )
        return Completion(text=text, meta=meta, function_calls=calls, raw=resp)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        resp = self._generate(
            self._model(request, []),
            request.prompt,
            stream=True,
            request_options={"timeout": self.timeouts.stream_timeout_seconds},
        )
        register_stream_cleanup(resp, stack)
        return resp

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        self._check_blocked(chunk)
        return extract_text(chunk)

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        reason = finish_reason(chunk)
        if reason:
            metrics.finish_reason = reason
        usage = extract_usage(chunk)
        if usage:
            apply_token_usage(
                metrics,
                prompt=usage.get("prompt_tokens"),
                completion=usage.get("completion_tokens"),
                total=usage.get("total_tokens"),
            )


__all__ = ["GoogleAdapter"]
