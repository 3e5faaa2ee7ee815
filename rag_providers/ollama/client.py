"""Ollama adapter.

Purpose:
    Chat completions against the local Ollama daemon (``POST /api/chat``,
    default host ``http://localhost:11434``).

External dependencies:
    - ``httpx`` only; no API key is required.

Notes:
    - Sampling parameters are sent under ``options`` (``max_tokens`` becomes
      ``options.num_predict``).
    - Streaming bodies are newline-delimited JSON; the final object carries
      ``done: true`` with token counts. An ``error`` object mid-stream is
      raised as a provider error.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..base.adapter import LlmAdapter
from ..base.errors import ErrorCode
from ..base.http import HttpTransport, iter_json_lines
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics, apply_token_usage
from ..base.tools import FunctionSpec, make_call
from ..base.utils.messages import build_messages
from ..config.defaults import OLLAMA_DEFAULT_HOST, OLLAMA_DEFAULT_MODEL


def _usage(body: Dict[str, Any]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    if body.get("prompt_eval_count") is not None:
        out["prompt_tokens"] = int(body["prompt_eval_count"])
    if body.get("eval_count") is not None:
        out["completion_tokens"] = int(body["eval_count"])
    return out


class OllamaAdapter(LlmAdapter):
    provider_name = "ollama"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    DEFAULT_MODEL = OLLAMA_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("options.temperature"),
        "top_p": wire("options.top_p"),
        "top_k": wire("options.top_k"),
        "max_tokens": wire("options.num_predict"),
    }
    EXTRA_PARAMS = {
        "seed": "options.seed",
        "stop": "options.stop",
        "num_ctx": "options.num_ctx",
        "repeat_penalty": "options.repeat_penalty",
        "keep_alive": "keep_alive",
        "format": "format",
    }

    def _host(self) -> str:
        return self.config.endpoint or self.credentials.get("OLLAMA_HOST") or OLLAMA_DEFAULT_HOST

    def _make_client(self) -> Any:
        return HttpTransport(provider=self.provider_name, base_url=self._host(), timeouts=self.timeouts)

    def build_payload(
        self,
        request: CompletionRequest,
        functions: Sequence[FunctionSpec] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(request),
            "stream": stream,
        }
        self.params.apply(payload)
        if functions:
            payload["tools"] = [{"type": "function", "function": f.to_wire()} for f in functions]
        return payload

    def _raise_if_error(self, body: Any) -> None:
        if isinstance(body, dict) and body.get("error"):
            raise self._error(str(body["error"]), code=ErrorCode.SERVER_ERROR, payload=body)

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        body = self.client.post_json("/api/chat", self.build_payload(request, functions), model=self.model)
        self._raise_if_error(body)
        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, dict):
            raise self._error("response has no message", payload=body)
        calls = [
            make_call(
                (call.get("function") or {}).get("name"),
                (call.get("function") or {}).get("arguments"),
                provider=self.provider_name,
                model=self.model,
            )
            for call in message.get("tool_calls") or []
        ]
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=body.get("model") or self.model,
            finish_reason=body.get("done_reason"),
            usage=_usage(body),
        )
        return Completion(text=message.get("content") or "", meta=meta, function_calls=calls, raw=body)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        resp = stack.enter_context(
            self.client.stream_post("/api/chat", self.build_payload(request, stream=True), model=self.model)
        )
        return iter_json_lines(resp.iter_lines())

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        self._raise_if_error(chunk)
        message = chunk.get("message") if isinstance(chunk, dict) else None
        if not isinstance(message, dict):
            return None
        return message.get("content")

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        if not isinstance(chunk, dict) or not chunk.get("done"):
            return
        if chunk.get("done_reason"):
            metrics.finish_reason = chunk["done_reason"]
        usage = _usage(chunk)
        if usage:
            apply_token_usage(metrics, prompt=usage.get("prompt_tokens"), completion=usage.get("completion_tokens"))


__all__ = ["OllamaAdapter"]
