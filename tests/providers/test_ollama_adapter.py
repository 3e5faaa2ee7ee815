"""Ollama adapter tests (``/api/chat`` with JSON and NDJSON bodies)."""

from __future__ import annotations

import json
from typing import List

import httpx
import pytest

from rag_providers.base.errors import ErrorCode, ProviderResponseError
from rag_providers.base.http import HttpTransport
from rag_providers.base.models import CompletionRequest, ProviderConfig
from rag_providers.config.credentials import MappingSource
from rag_providers.ollama.client import OllamaAdapter


def _http(handler, seen: List[httpx.Request]) -> HttpTransport:
    def record(request):
        seen.append(request)
        return handler(request)

    return HttpTransport(provider="ollama", base_url="http://localhost:11434", transport=httpx.MockTransport(record))


def test_options_and_response(make_adapter):
    body = {
        "model": "llama3",
        "message": {"role": "assistant", "content": "Blue."},
        "done": True,
        "done_reason": "stop",
        "prompt_eval_count": 11,
        "eval_count": 2,
    }
    seen: List[httpx.Request] = []
    adapter = make_adapter(
        "ollama",
        _http(lambda r: httpx.Response(200, json=body), seen),
        temperature=0.5,
        top_k=40,
        max_tokens=32,
        num_ctx=4096,
        keep_alive="5m",
    )
    completion = adapter.generate("Sky colour?")
    payload = json.loads(seen[0].content)
    assert seen[0].url.path == "/api/chat"  # nosec B101 - pytest assertion
    assert payload["stream"] is False and payload["keep_alive"] == "5m"  # nosec B101
    expected = {"temperature": 0.5, "top_k": 40, "num_predict": 32, "num_ctx": 4096}
    assert payload["options"] == expected  # nosec B101 - pytest assertion
    assert completion.text == "Blue." and completion.meta.finish_reason == "stop"  # nosec B101
    assert completion.meta.usage == {"prompt_tokens": 11, "completion_tokens": 2}  # nosec B101


def test_tool_call_arguments_are_objects(make_adapter):
    call = {"function": {"name": "add", "arguments": {"a": 1}}}
    message = {"role": "assistant", "content": "", "tool_calls": [call]}
    seen: List[httpx.Request] = []
    adapter = make_adapter("ollama", _http(lambda r: httpx.Response(200, json={"message": message}), seen))

    def add(a: int, b: int = 0) -> int:
        """Add two integers."""
        return a + b

    completion = adapter.generate(CompletionRequest(prompt="1+0", functions=[add]))
    assert json.loads(seen[0].content)["tools"][0]["function"]["name"] == "add"  # nosec B101
    assert completion.function_calls[0].arguments == {"a": 1}  # nosec B101 - pytest assertion


def test_model_not_pulled_is_reported(make_adapter):
    adapter = make_adapter(
        "ollama", _http(lambda r: httpx.Response(404, json={"error": "model 'x' not found"}), [])
    )
    with pytest.raises(ProviderResponseError) as info:
        adapter.generate("q")
    assert info.value.code is ErrorCode.NOT_FOUND  # nosec B101 - pytest assertion


def test_streaming_ndjson(make_adapter):
    lines = [
        {"message": {"role": "assistant", "content": "Bl"}, "done": False},
        {"message": {"role": "assistant", "content": "ue"}, "done": False},
        {"message": {"role": "assistant", "content": ""}, "done": True, "done_reason": "stop",
         "prompt_eval_count": 3, "eval_count": 2},
    ]
    body = "\n".join(json.dumps(line) for line in lines) + "\n"
    seen: List[httpx.Request] = []
    adapter = make_adapter("ollama", _http(lambda r: httpx.Response(200, text=body), seen), stream=True)
    stream = adapter.generate("Sky colour?")
    assert list(stream) == ["Bl", "ue"]  # nosec B101 - pytest assertion
    assert json.loads(seen[0].content)["stream"] is True  # nosec B101 - pytest assertion
    assert stream.metrics.total_tokens == 5 and stream.metrics.finish_reason == "stop"  # nosec B101


def test_error_object_mid_stream(make_adapter):
    body = json.dumps({"message": {"content": "a"}, "done": False}) + "\n" + json.dumps({"error": "out of memory"})
    adapter = make_adapter("ollama", _http(lambda r: httpx.Response(200, text=body), []), stream=True)
    stream = adapter.generate("q")
    assert next(stream) == "a"  # nosec B101 - pytest assertion
    with pytest.raises(ProviderResponseError) as info:
        next(stream)
    assert "out of memory" in info.value.message  # nosec B101 - pytest assertion


def test_host_resolution_order():
    source = MappingSource({"OLLAMA_HOST": "http://gpu:11434"})
    assert OllamaAdapter(ProviderConfig(provider="ollama"), source=source)._host() == "http://gpu:11434"  # nosec B101
    override = ProviderConfig(provider="ollama", endpoint="http://other:1")
    assert OllamaAdapter(override, source=source)._host() == "http://other:1"  # nosec B101
    default = OllamaAdapter(ProviderConfig(provider="ollama"), source=MappingSource({}))
    assert default._host() == "http://localhost:11434"  # nosec B101 - pytest assertion
