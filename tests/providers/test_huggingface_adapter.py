"""Hugging Face Inference API adapter tests."""

from __future__ import annotations

import json
from typing import List

import httpx
import pytest

from rag_providers.base.errors import ErrorCode, ProviderResponseError, UnsupportedParameterError
from rag_providers.base.http import HttpTransport
from rag_providers.base.models import CompletionRequest
from rag_providers.config.defaults import HUGGINGFACE_DEFAULT_BASE_URL


def _http(handler, seen: List[httpx.Request], base_url: str = HUGGINGFACE_DEFAULT_BASE_URL) -> HttpTransport:
    def record(request):
        seen.append(request)
        return handler(request)

    return HttpTransport(provider="huggingface", base_url=base_url, transport=httpx.MockTransport(record))


def test_text_generation_request(make_adapter):
    body = [{"generated_text": " Paris.", "details": {"finish_reason": "eos_token", "generated_tokens": 3}}]
    seen: List[httpx.Request] = []
    adapter = make_adapter(
        "huggingface",
        _http(lambda r: httpx.Response(200, json=body), seen),
        model="mistralai/Mistral-7B-Instruct-v0.2",
        temperature=0.7,
        max_tokens=20,
        wait_for_model=True,
    )
    completion = adapter.generate(CompletionRequest(prompt="Capital of France?", system="Answer in one word"))
    payload = json.loads(seen[0].content)
    assert seen[0].url.path == "/models/mistralai/Mistral-7B-Instruct-v0.2"  # nosec B101
    assert payload["inputs"] == "Answer in one word\n\nCapital of France?"  # nosec B101
    expected = {"temperature": 0.7, "max_new_tokens": 20, "return_full_text": False}
    assert payload["parameters"] == expected  # nosec B101 - pytest assertion
    assert payload["options"] == {"wait_for_model": True}  # nosec B101 - pytest assertion
    assert completion.text == " Paris." and completion.meta.finish_reason == "eos_token"  # nosec B101
    assert completion.meta.usage == {"completion_tokens": 3}  # nosec B101 - pytest assertion


def test_dedicated_endpoint_does_not_append_model(make_adapter):
    seen: List[httpx.Request] = []
    url = "https://xyz.endpoints.huggingface.cloud"
    http = _http(lambda r: httpx.Response(200, json=[{"generated_text": "ok"}]), seen, base_url=url)
    make_adapter("huggingface", http, endpoint=url).generate("q")
    assert seen[0].url.path == "/"  # nosec B101 - pytest assertion


def test_loading_model_error_body(make_adapter):
    error = {"error": "Model is currently loading", "estimated_time": 20.0}
    adapter = make_adapter("huggingface", _http(lambda r: httpx.Response(503, json=error), []))
    with pytest.raises(ProviderResponseError) as info:
        adapter.generate("q")
    assert info.value.code is ErrorCode.UNAVAILABLE and info.value.retryable  # nosec B101
    assert info.value.payload["estimated_time"] == 20.0  # nosec B101 - pytest assertion


def test_unexpected_body_is_malformed(make_adapter):
    adapter = make_adapter("huggingface", _http(lambda r: httpx.Response(200, json=[{"summary_text": "x"}]), []))
    with pytest.raises(ProviderResponseError) as info:
        adapter.generate("q")
    assert info.value.code is ErrorCode.MALFORMED  # nosec B101 - pytest assertion


def test_functions_not_supported(make_adapter):
    adapter = make_adapter("huggingface", object())
    with pytest.raises(UnsupportedParameterError):
        adapter.generate(CompletionRequest(prompt="q", functions=[{"name": "f"}]))


def test_tgi_stream_skips_special_tokens(make_adapter):
    events = [
        {"token": {"id": 1, "text": " Par", "special": False}},
        {"token": {"id": 2, "text": "is", "special": False}},
        {"token": {"id": 3, "text": "</s>", "special": True},
         "details": {"finish_reason": "eos_token", "generated_tokens": 3}},
    ]
    sse = "".join(f"data:{json.dumps(e)}\n\n" for e in events)
    seen: List[httpx.Request] = []
    adapter = make_adapter("huggingface", _http(lambda r: httpx.Response(200, text=sse), seen), stream=True)
    stream = adapter.generate("Capital of France?")
    assert stream.read_all() == " Paris"  # nosec B101 - pytest assertion
    assert json.loads(seen[0].content)["stream"] is True  # nosec B101 - pytest assertion
    assert (stream.metrics.finish_reason, stream.metrics.completion_tokens) == ("eos_token", 3)  # nosec B101
