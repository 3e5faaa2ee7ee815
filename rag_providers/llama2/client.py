"""Llama 2 adapter served by Replicate.

Creates a prediction with ``POST /models/{owner}/{name}/predictions`` and the
``Prefer: wait`` header, so short generations return in the same response.
A prediction still running when the server stops waiting is polled through
``GET /predictions/{id}`` until it reaches a terminal status or the HTTP
timeout elapses. ``output`` is a list of text pieces joined in order.

Streaming and function calling are not offered.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List

from ..base.adapter import LlmAdapter
from ..base.errors import ErrorCode
from ..base.http import HttpTransport
from ..base.models import Completion, CompletionRequest, ProviderMetadata
from ..base.parameters import Capability, wire
from ..base.tools import FunctionSpec
from ..config.defaults import LLAMA2_DEFAULT_BASE_URL, LLAMA2_DEFAULT_MODEL

TERMINAL_STATUSES = ("succeeded", "failed", "canceled")
POLL_INTERVAL_SECONDS = 1.0


class Llama2Adapter(LlmAdapter):
    provider_name = "llama2"
    capabilities = frozenset({Capability.GENERATE})
    DEFAULT_MODEL = LLAMA2_DEFAULT_MODEL
    PARAMETER_MAP = {
        "temperature": wire("input.temperature"),
        "top_p": wire("input.top_p"),
        "top_k": wire("input.top_k"),
        "max_tokens": wire("input.max_new_tokens"),
    }
    EXTRA_PARAMS = {
        "min_new_tokens": "input.min_new_tokens",
        "repetition_penalty": "input.repetition_penalty",
        "seed": "input.seed",
        "stop": "input.stop_sequences",
        "stop_sequences": "input.stop_sequences",
    }

    sleep = staticmethod(time.sleep)

    def _make_client(self) -> Any:
        return HttpTransport(
            provider=self.provider_name,
            base_url=self.config.endpoint or LLAMA2_DEFAULT_BASE_URL,
            headers={"Authorization": f"Bearer {self.credentials.require('REPLICATE_API_TOKEN')}"},
            timeouts=self.timeouts,
        )

    def build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"input": {"prompt": request.prompt}}
        if request.system:
            payload["input"]["system_prompt"] = request.system
        self.params.apply(payload)
        return payload

    def _wait(self, prediction: Dict[str, Any]) -> Dict[str, Any]:
        deadline = time.monotonic() + self.timeouts.http_timeout_seconds
        while prediction.get("status") not in TERMINAL_STATUSES:
            if not prediction.get("id"):
                raise self._error("prediction has no id", payload=prediction)
            if time.monotonic() >= deadline:
                raise self._error(
                    f"prediction {prediction['id']} did not finish in time",
                    code=ErrorCode.TIMEOUT,
                    retryable=True,
                    payload=prediction,
                )
            self.sleep(POLL_INTERVAL_SECONDS)
            prediction = self.client.get_json(f"/predictions/{prediction['id']}", model=self.model)
        return prediction

    def _complete(self, request: CompletionRequest, functions: List[FunctionSpec]) -> Completion:
        prediction = self.client.post_json(
            f"/models/{self.model}/predictions",
            self.build_payload(request),
            model=self.model,
            headers={"Prefer": "wait"},
        )
        if not isinstance(prediction, dict):
            raise self._error("prediction is not a JSON object", payload=prediction)
        prediction = self._wait(prediction)
        if prediction["status"] != "succeeded":
            raise self._error(
                f"prediction {prediction['status']}: {prediction.get('error') or 'no detail'}",
                code=ErrorCode.SERVER_ERROR,
                payload=prediction,
            )
        output = prediction.get("output")
        if isinstance(output, list):
            text = "".join(str(piece) for piece in output)
        elif isinstance(output, str):
            text = output
        else:
            raise self._error("prediction has no output", payload=prediction)
        metrics = prediction.get("metrics") or {}
        usage = {}
        for src, key in (("input_token_count", "prompt_tokens"), ("output_token_count", "completion_tokens")):
            if metrics.get(src) is not None:
                usage[key] = int(metrics[src])
        meta = ProviderMetadata(
            provider_name=self.provider_name,
            model_name=self.model,
            finish_reason=prediction["status"],
            usage=usage,
            request_id=prediction.get("id"),
        )
        return Completion(text=text, meta=meta, raw=prediction)


__all__ = ["Llama2Adapter"]
