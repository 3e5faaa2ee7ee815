"""Record-to-result flows through the facade and real adapters.

Only the outermost I/O is faked: the OpenAI SDK client is replaced through
``_make_client`` and the Ollama daemon by an ``httpx.MockTransport``. Config
records, the registry, parameter mapping and streaming run for real.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List

import httpx
import pytest

from rag_providers.base.facade import CompletionFacade
from rag_providers.base.http import HttpTransport
from rag_providers.base.models import Completion, CompletionRequest, ProviderConfig
from rag_providers.base.streaming import TextStream
from rag_providers.config.credentials import MappingSource
from rag_providers.ollama.client import OllamaAdapter
from rag_providers.openai.client import OpenAIAdapter

DUMMY_VALUE = "test-value-123"  # pragma: allowlist secret
REPLY = ["Retrieval ", "augmented ", "generation."]


class _ScriptedCompletions:
    """``chat.completions`` answering both call shapes with the same text."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    def create(self, **params: Any) -> Any:
        self.calls.append(params)
        if params.get("stream"):
            return iter(
                SimpleNamespace(
                    choices=[SimpleNamespace(delta=SimpleNamespace(content=piece), finish_reason=None)],
                    usage=None,
                )
                for piece in REPLY
            )
        message = SimpleNamespace(content="".join(REPLY), tool_calls=None)
        return SimpleNamespace(
            id="chatcmpl-e2e",
            model=params["model"],
            choices=[SimpleNamespace(message=message, finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=4, completion_tokens=3, total_tokens=7),
        )


@pytest.fixture()
def scripted_openai(monkeypatch):
    completions = _ScriptedCompletions()
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(OpenAIAdapter, "_make_client", lambda self: client)
    return completions


@pytest.fixture()
def facade():
    instance = CompletionFacade(source=MappingSource({"OPENAI_API_KEY": DUMMY_VALUE}))
    yield instance
    instance.clear()


def test_record_to_completion_through_facade(facade, scripted_openai):
    record = {"provider": "openai", "config": {"model": "gpt-3.5-turbo", "temperature": 0.5, "stream": False}}
    result = facade.complete(record, "What is RAG?")
    assert isinstance(result, Completion)  # nosec B101 - pytest assertion
    assert result.text == "Retrieval augmented generation."  # nosec B101 - pytest assertion
    assert result.meta.provider_name == "openai"  # nosec B101 - pytest assertion
    sent = scripted_openai.calls[0]
    assert sent["model"] == "gpt-3.5-turbo" and sent["temperature"] == 0.5  # nosec B101
    assert sent["messages"] == [{"role": "user", "content": "What is RAG?"}]  # nosec B101


def test_record_to_stream_through_facade(facade, scripted_openai):
    record = {"provider": "openai", "config": {"model": "gpt-3.5-turbo", "temperature": 0.5, "stream": True}}
    result = facade.complete(record, "What is RAG?")
    assert isinstance(result, TextStream)  # nosec B101 - pytest assertion
    assert scripted_openai.calls == []  # nosec B101 - pytest assertion
    assert list(result) == REPLY  # nosec B101 - pytest assertion
    assert scripted_openai.calls[0]["stream"] is True  # nosec B101 - pytest assertion


def test_streamed_text_matches_non_streamed_text(facade, scripted_openai):
    base = {"model": "gpt-3.5-turbo", "temperature": 0.5}
    whole = facade.complete({"provider": "openai", "config": dict(base)}, "q")
    streamed = facade.complete({"provider": "openai", "config": dict(base, stream=True)}, "q")
    assert streamed.read_all() == whole.text  # nosec B101 - pytest assertion
    assert len(facade) == 2  # nosec B101 - pytest assertion


def _ndjson(pieces: List[str]) -> List[bytes]:
    lines = [{"message": {"role": "assistant", "content": p}, "done": False} for p in pieces]
    lines.append({"message": {"role": "assistant", "content": ""}, "done": True, "done_reason": "stop"})
    return [(json.dumps(line) + "\n").encode("utf-8") for line in lines]


def _ollama_handler(request: httpx.Request) -> httpx.Response:
    payload = json.loads(request.content)
    if payload["stream"]:
        return httpx.Response(200, content=b"".join(_ndjson(REPLY)))
    body = {"message": {"role": "assistant", "content": "".join(REPLY)}, "done": True, "done_reason": "stop"}
    return httpx.Response(200, json=body)


def _ollama(stream: bool, handler) -> OllamaAdapter:
    transport = HttpTransport(
        provider="ollama", base_url="http://localhost:11434", transport=httpx.MockTransport(handler)
    )
    return OllamaAdapter(ProviderConfig(provider="ollama", stream=stream), source=MappingSource({}), client=transport)


def test_http_stream_concatenation_matches_completion():
    whole = _ollama(False, _ollama_handler).generate("q")
    streamed = _ollama(True, _ollama_handler).generate("q")
    assert streamed.read_all() == whole.text == "".join(REPLY)  # nosec B101 - pytest assertion


class _ObservedBody(httpx.SyncByteStream):
    """Response body that records how far it was read and whether it was closed."""

    def __init__(self, chunks: List[bytes]) -> None:
        self._chunks = chunks
        self.served = 0
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            self.served += 1
            yield chunk

    def close(self) -> None:
        self.closed = True


def test_abandoned_http_stream_closes_response_body():
    body = _ObservedBody(_ndjson(["one ", "two ", "three ", "four "]))
    adapter = _ollama(True, lambda request: httpx.Response(200, stream=body))
    stream = adapter.generate(CompletionRequest(prompt="count"))
    assert body.served == 0  # nosec B101 - pytest assertion
    assert next(stream) == "one "  # nosec B101 - pytest assertion
    stream.close()
    assert body.closed and stream.closed  # nosec B101 - pytest assertion
    assert body.served < 5  # nosec B101 - pytest assertion
    assert list(stream) == []  # nosec B101 - pytest assertion
