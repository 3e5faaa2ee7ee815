"""Cohere adapter.

Talks to the v2 Chat API (``POST /v2/chat``) with ``httpx``. Nucleus and
top-k sampling are named ``p`` and ``k`` on the wire. Streaming responses are
SSE events; text arrives in ``content-delta`` events and usage plus the
finish reason in the closing ``message-end`` event.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..base.adapter import LlmAdapter
from ..base.http import HttpTransport, iter_sse_json
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics, apply_token_usage
from ..base.tools import FunctionSpec, make_call
from ..base.utils.messages import build_messages
from ..config.defaults import COHERE_DEFAULT_BASE_URL, COHERE_DEFAULT_MODEL


def _usage(usage: Any) -> Dict[str, int]:
    if not isinstance(usage, dict):
        return {}
    tokens = usage.get("tokens") or usage.get("billed_units") or {}
    out: Dict[str, int] = {}
    for key in ("input_tokens", "output_tokens"):
        if tokens.get(key) is not None:
            out[key] = int(tokens[key])
    return out


def _content_text(message: Dict[str, Any]) -> str:
    parts = message.get("content") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict) and p.get("type") == "text")


class CohereAdapter(LlmAdapter):
    provider_name = "cohere"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    DEFAULT_MODEL = COHERE_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("temperature"),
        "top_p": wire("p"),
        "top_k": wire("k"),
        "max_tokens": wire("max_tokens"),
    }
    EXTRA_PARAMS = {
        "seed": "seed",
        "stop": "stop_sequences",
        "stop_sequences": "stop_sequences",
        "frequency_penalty": "frequency_penalty",
        "presence_penalty": "presence_penalty",
    }

    def _make_client(self) -> Any:
        return HttpTransport(
            provider=self.provider_name,
            base_url=self.config.endpoint or COHERE_DEFAULT_BASE_URL,
            headers={
                "Authorization": f"Bearer {self.credentials.require('COHERE_API_KEY')}",
                "Accept": "application/json",
            },
            timeouts=self.timeouts,
        )

    def build_payload(
        self,
        request: CompletionRequest,
        functions: Sequence[FunctionSpec] = (),
        *,
        stream: bool = False,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self.model, "messages": build_messages(request)}
        self.params.apply(payload)
        if functions:
            payload["tools"] = [{"type": "function", "function": f.to_wire()} for f in functions]
        if stream:
            payload["stream"] = True
        return payload

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        body = self.client.post_json("/chat", self.build_payload(request, functions), model=self.model)
        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, dict):
            raise self._error("response has no message", payload=body)
        calls = [
            make_call(
                (call.get("function") or {}).get("name"),
                (call.get("function") or {}).get("arguments"),
                provider=self.provider_name,
                model=self.model,
                call_id=call.get("id"),
            )
            for call in message.get("tool_calls") or []
        ]
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=self.model,
            finish_reason=body.get("finish_reason"),
            usage=_usage(body.get("usage")),
            request_id=body.get("id"),
        )
        return Completion(text=_content_text(message), meta=meta, function_calls=calls, raw=body)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        resp = stack.enter_context(
            self.client.stream_post("/chat", self.build_payload(request, stream=True), model=self.model)
        )
        return iter_sse_json(resp.iter_lines())

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        if not isinstance(chunk, dict) or chunk.get("type") != "content-delta":
            return None
        content = ((chunk.get("delta") or {}).get("message") or {}).get("content") or {}
        return content.get("text")

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        if not isinstance(chunk, dict) or chunk.get("type") != "message-end":
            return
        delta = chunk.get("delta") or {}
        if delta.get("finish_reason"):
            metrics.finish_reason = delta["finish_reason"]
        usage = _usage(delta.get("usage"))
        if usage:
            apply_token_usage(metrics, prompt=usage.get("input_tokens"), completion=usage.get("output_tokens"))


__all__ = ["CohereAdapter"]
