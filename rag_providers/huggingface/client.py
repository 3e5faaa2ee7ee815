"""Hugging Face Inference API adapter.

Text-generation models are called with ``POST {base}/{model}`` and a body of
``{"inputs": ..., "parameters": {...}}``. The response is a list of
``{"generated_text": ...}`` objects. With ``"stream": true`` the endpoint
answers with text-generation-inference SSE events whose ``token.text`` holds
the next fragment; special tokens are skipped.

When ``endpoint`` is set (a dedicated Inference Endpoint or a self-hosted
TGI server) requests go to that URL directly and the model id is not
appended. The API has no function calling.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Dict, Iterable, List, Optional

from ..base.adapter import LlmAdapter
from ..base.errors import ErrorCode
from ..base.http import HttpTransport, iter_sse_json
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics
from ..base.tools import FunctionSpec
from ..base.utils.messages import flatten_prompt
from ..config.defaults import HUGGINGFACE_DEFAULT_BASE_URL, HUGGINGFACE_DEFAULT_MODEL


class HuggingFaceAdapter(LlmAdapter):
    provider_name = "huggingface"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM})
    DEFAULT_MODEL = HUGGINGFACE_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("parameters.temperature"),
        "top_p": wire("parameters.top_p"),
        "top_k": wire("parameters.top_k"),
        "max_tokens": wire("parameters.max_new_tokens"),
    }
    EXTRA_PARAMS = {
        "repetition_penalty": "parameters.repetition_penalty",
        "do_sample": "parameters.do_sample",
        "seed": "parameters.seed",
        "stop": "parameters.stop",
        "return_full_text": "parameters.return_full_text",
        "wait_for_model": "options.wait_for_model",
        "use_cache": "options.use_cache",
    }

    def _make_client(self) -> Any:
        return HttpTransport(
            provider=self.provider_name,
            base_url=self.config.endpoint or HUGGINGFACE_DEFAULT_BASE_URL,
            headers={"Authorization": f"Bearer {self.credentials.require('HUGGINGFACE_ACCESS_TOKEN')}"},
            timeouts=self.timeouts,
        )

    def _path(self) -> str:
        return "" if self.config.endpoint else f"/{self.model}"

    def build_payload(self, request: CompletionRequest, *, stream: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"inputs": flatten_prompt(request)}
        self.params.apply(payload)
        payload.setdefault("parameters", {}).setdefault("return_full_text", False)
        if stream:
            payload["stream"] = True
        return payload

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        body = self.client.post_json(self._path(), self.build_payload(request), model=self.model)
        if isinstance(body, dict) and body.get("error"):
            raise self._error(str(body["error"]), code=ErrorCode.SERVER_ERROR, payload=body)
        first = body[0] if isinstance(body, list) and body else body
        if not isinstance(first, dict) or "generated_text" not in first:
            raise self._error("response has no generated_text", payload=body)
        details = first.get("details") or {}
        usage = {}
        if details.get("generated_tokens") is not None:
            usage["completion_tokens"] = int(details["generated_tokens"])
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=self.model,
            finish_reason=details.get("finish_reason"),
            usage=usage,
        )
        return Completion(text=first.get("generated_text") or "", meta=meta, raw=body)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        resp = stack.enter_context(
            self.client.stream_post(self._path(), self.build_payload(request, stream=True), model=self.model)
        )
        return iter_sse_json(resp.iter_lines())

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        if not isinstance(chunk, dict):
            return None
        if chunk.get("error"):
            raise self._error(str(chunk["error"]), code=ErrorCode.SERVER_ERROR, payload=chunk)
        token = chunk.get("token") or {}
        if token.get("special"):
            return None
        return token.get("text")

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        details = chunk.get("details") if isinstance(chunk, dict) else None
        if not details:
            return
        if details.get("finish_reason"):
            metrics.finish_reason = details["finish_reason"]
        if details.get("generated_tokens") is not None:
            metrics.completion_tokens = int(details["generated_tokens"])


__all__ = ["HuggingFaceAdapter"]
