"""Vertex AI adapter.

Calls the publisher-model REST endpoints directly with ``httpx``:

- ``POST .../models/{model}:generateContent`` for a single completion;
- ``POST .../models/{model}:streamGenerateContent?alt=sse`` for streaming.

Authentication is a bearer token (``VERTEXAI_ACCESS_TOKEN``, e.g. from
``gcloud auth print-access-token``); the project comes from
``GOOGLE_CLOUD_PROJECT`` and the region from ``VERTEXAI_LOCATION`` (default
``us-central1``). Sampling parameters live under ``generationConfig``.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..base.adapter import LlmAdapter
from ..base.errors import ErrorCode
from ..base.http import HttpTransport, iter_sse_json
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics, apply_token_usage
from ..base.tools import FunctionSpec, make_call
from ..base.utils.gemini_format import (
    block_reason,
    extract_text,
    extract_text_and_calls,
    extract_usage,
    finish_reason,
)
from ..config.defaults import VERTEXAI_DEFAULT_LOCATION, VERTEXAI_DEFAULT_MODEL


class VertexAIAdapter(LlmAdapter):
    provider_name = "vertexai"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    DEFAULT_MODEL = VERTEXAI_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("generationConfig.temperature"),
        "top_p": wire("generationConfig.topP"),
        "top_k": wire("generationConfig.topK"),
        "max_tokens": wire("generationConfig.maxOutputTokens"),
    }
    EXTRA_PARAMS = {
        "stop": "generationConfig.stopSequences",
        "stop_sequences": "generationConfig.stopSequences",
        "candidate_count": "generationConfig.candidateCount",
        "seed": "generationConfig.seed",
        "response_mime_type": "generationConfig.responseMimeType",
        "safety_settings": "safetySettings",
    }

    @property
    def location(self) -> str:
        return self.credentials.get("VERTEXAI_LOCATION") or VERTEXAI_DEFAULT_LOCATION

    def _base_url(self) -> str:
        if self.config.endpoint:
            return self.config.endpoint
        return f"https://{self.location}-aiplatform.googleapis.com/v1"

    def _model_path(self) -> str:
        project = self.credentials.require("GOOGLE_CLOUD_PROJECT")
        return f"/projects/{project}/locations/{self.location}/publishers/google/models/{self.model}"

    def _make_client(self) -> Any:
        return HttpTransport(
            provider=self.provider_name,
            base_url=self._base_url(),
            headers={"Authorization": f"Bearer {self.credentials.require('VERTEXAI_ACCESS_TOKEN')}"},
            timeouts=self.timeouts,
        )

    def build_payload(self, request: CompletionRequest, functions: Sequence[FunctionSpec] = ()) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
        }
        if request.system:
            payload["systemInstruction"] = {"parts": [{"text": request.system}]}
        self.params.apply(payload)
        if functions:
            payload["tools"] = [{"functionDeclarations": [f.to_wire() for f in functions]}]
        return payload

    def _check_blocked(self, body: Any) -> None:
        reason = block_reason(body)
        if reason:
            raise self._error(f"prompt blocked: {reason}", code=ErrorCode.VALIDATION, payload=body)

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        body = self.client.post_json(
            f"{self._model_path()}:generateContent",
            self.build_payload(request, functions),
            model=self.model,
        )
        if not isinstance(body, dict):
            raise self._error("response is not a JSON object", payload=body)
        self._check_blocked(body)
        if not body.get("candidates"):
            raise self._error("response has no candidates", payload=body)
        text, raw_calls = extract_text_and_calls(body)
        calls = [make_call(name, args, provider=self.provider_name, model=self.model) for name, args in raw_calls]
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=body.get("modelVersion") or self.model,
            finish_reason=finish_reason(body),
            usage=extract_usage(body),
            request_id=body.get("responseId"),
        )
        return Completion(text=text, meta=meta, function_calls=calls, raw=body)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        resp = stack.enter_context(
            self.client.stream_post(
                f"{self._model_path()}:streamGenerateContent?alt=sse",
                self.build_payload(request),
                model=self.model,
            )
        )
        return iter_sse_json(resp.iter_lines())

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


__all__ = ["VertexAIAdapter"]
