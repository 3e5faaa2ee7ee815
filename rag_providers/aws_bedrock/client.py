"""AWS Bedrock adapter.

Purpose:
    Serve ``provider: aws_bedrock`` through the model-agnostic Converse API of
    the ``bedrock-runtime`` service (``converse`` / ``converse_stream``).

External dependencies:
    - ``boto3`` for the client and ``botocore.config.Config`` for timeouts.
      SDK retries are disabled (``total_max_attempts=1``).

Notes:
    - ``temperature``, ``top_p`` and ``max_tokens`` go to ``inferenceConfig``;
      ``top_k`` is model specific and is sent through
      ``additionalModelRequestFields``.
    - The stream is a botocore ``EventStream``; text arrives in
      ``contentBlockDelta`` events, usage in the trailing ``metadata`` event.
      The event stream is closed when the ``TextStream`` ends.
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Dict, Iterable, List, Optional, Sequence

import boto3
from botocore.config import Config

from ..base.adapter import LlmAdapter
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.streaming import StreamMetrics, apply_token_usage, register_stream_cleanup
from ..base.tools import FunctionSpec, make_call
from ..config.defaults import AWS_BEDROCK_DEFAULT_MODEL, AWS_DEFAULT_REGION


def _usage(usage: Any) -> Dict[str, int]:
    if not isinstance(usage, dict):
        return {}
    out: Dict[str, int] = {}
    for src, key in (
        ("inputTokens", "prompt_tokens"),
        ("outputTokens", "completion_tokens"),
        ("totalTokens", "total_tokens"),
    ):
        if usage.get(src) is not None:
            out[key] = int(usage[src])
    return out


class BedrockAdapter(LlmAdapter):
    provider_name = "aws_bedrock"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM, Capability.FUNCTION_CALL})
    DEFAULT_MODEL = AWS_BEDROCK_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("inferenceConfig.temperature"),
        "top_p": wire("inferenceConfig.topP"),
        "top_k": wire("additionalModelRequestFields.top_k"),
        "max_tokens": wire("inferenceConfig.maxTokens"),
    }
    EXTRA_PARAMS = {
        "stop": "inferenceConfig.stopSequences",
        "stop_sequences": "inferenceConfig.stopSequences",
        "guardrail_config": "guardrailConfig",
    }

    @property
    def region(self) -> str:
        return self.credentials.get("AWS_REGION") or AWS_DEFAULT_REGION

    def _make_client(self) -> Any:
        return boto3.client(
            "bedrock-runtime",
            region_name=self.region,
            endpoint_url=self.config.endpoint,
            aws_access_key_id=self.credentials.require("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=self.credentials.require("AWS_SECRET_ACCESS_KEY"),
            aws_session_token=self.credentials.get("AWS_SESSION_TOKEN"),
            config=Config(
                connect_timeout=self.timeouts.connect_timeout_seconds,
                read_timeout=self.timeouts.http_timeout_seconds,
                retries={"total_max_attempts": 1},
            ),
        )

    def build_params(self, request: CompletionRequest, functions: Sequence[FunctionSpec] = ()) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "modelId": self.model,
            "messages": [{"role": "user", "content": [{"text": request.prompt}]}],
        }
        if request.system:
            params["system"] = [{"text": request.system}]
        self.params.apply(params)
        if functions:
            params["toolConfig"] = {
                "tools": [
                    {
                        "toolSpec": {
                            "name": f.name,
                            "description": f.description,
                            "inputSchema": {"json": f.parameters},
                        }
                    }
                    for f in functions
                ]
            }
        return params

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        resp = self.client.converse(**self.build_params(request, functions))
        message = ((resp or {}).get("output") or {}).get("message")
        if not isinstance(message, dict):
            raise self._error("response has no output message", payload=resp)
        texts: List[str] = []
        calls = []
        for block in message.get("content") or []:
            if "text" in block:
                texts.append(block["text"] or "")
            elif "toolUse" in block:
                use = block["toolUse"] or {}
                calls.append(
                    make_call(
                        use.get("name"),
                        use.get("input"),
                        provider=self.provider_name,
                        model=self.model,
                        call_id=use.get("toolUseId"),
                    )
                )
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=self.model,
            finish_reason=resp.get("stopReason"),
            usage=_usage(resp.get("usage")),
            request_id=(resp.get("ResponseMetadata") or {}).get("RequestId"),
        )
        return Completion(text="".join(texts), meta=meta, function_calls=calls, raw=resp)

    def _open_stream(self, request: CompletionRequest, stack: ExitStack) -> Iterable[Any]:
        resp = self.client.converse_stream(**self.build_params(request))
        stream = (resp or {}).get("stream")
        if stream is None:
            raise self._error("converse_stream returned no event stream", payload=resp)
        register_stream_cleanup(stream, stack)
        return stream

    def _translate_chunk(self, chunk: Any) -> Optional[str]:
        delta = (chunk.get("contentBlockDelta") or {}).get("delta") or {}
        return delta.get("text")

    def _inspect_chunk(self, chunk: Any, metrics: StreamMetrics) -> None:
        stop = chunk.get("messageStop")
        if stop and stop.get("stopReason"):
            metrics.finish_reason = stop["stopReason"]
        usage = _usage((chunk.get("metadata") or {}).get("usage"))
        if usage:
            apply_token_usage(
                metrics,
                prompt=usage.get("prompt_tokens"),
                completion=usage.get("completion_tokens"),
                total=usage.get("total_tokens"),
            )


__all__ = ["BedrockAdapter"]
