"""Anthropic adapter tests with a fake ``messages.create``."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

from rag_providers.base.models import CompletionRequest


class _FakeMessages:
    def __init__(self, response: Any = None, events: List[Any] | None = None) -> None:
        self.response = response
        self.events = events or []
        self.calls: List[Dict[str, Any]] = []

    def create(self, **params: Any) -> Any:
        self.calls.append(params)
        return iter(self.events) if params.get("stream") else self.response


def _client(messages: _FakeMessages) -> Any:
    return SimpleNamespace(messages=messages)


def lookup_order(order_id: str, include_items: bool = False) -> dict:
    """Fetch an order by id."""
    return {}


def test_system_prompt_and_required_max_tokens(make_adapter):
    response = SimpleNamespace(
        id="msg_1",
        model="claude-3-haiku-20240307",
        content=[SimpleNamespace(type="text", text="Bonjour")],
        stop_reason="end_turn",
        usage=SimpleNamespace(input_tokens=9, output_tokens=2),
    )
    fake = _FakeMessages(response=response)
    adapter = make_adapter("anthropic", _client(fake), temperature=0.3, top_k=10, stop=["\n\n"])
    completion = adapter.generate(CompletionRequest(prompt="Say hi in French", system="Be terse"))
    sent = fake.calls[0]
    assert sent["system"] == "Be terse"  # nosec B101 - pytest assertion
    assert sent["messages"] == [{"role": "user", "content": "Say hi in French"}]  # nosec B101
    assert sent["max_tokens"] == 1024 and sent["top_k"] == 10  # nosec B101 - pytest assertion
    assert sent["stop_sequences"] == ["\n\n"]  # nosec B101 - pytest assertion
    assert completion.text == "Bonjour"  # nosec B101 - pytest assertion
    assert completion.meta.finish_reason == "end_turn"  # nosec B101 - pytest assertion
    assert completion.meta.usage == {"input_tokens": 9, "output_tokens": 2}  # nosec B101


def test_explicit_max_tokens_wins(make_adapter):
    fake = _FakeMessages(response=SimpleNamespace(content=[], stop_reason="max_tokens", usage=None))
    make_adapter("anthropic", _client(fake), max_tokens=50).generate("q")
    assert fake.calls[0]["max_tokens"] == 50  # nosec B101 - pytest assertion


def test_tool_use_blocks_become_function_calls(make_adapter):
    response = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Looking it up."),
            SimpleNamespace(type="tool_use", id="toolu_1", name="lookup_order", input={"order_id": "A7"}),
        ],
        stop_reason="tool_use",
        usage=None,
    )
    fake = _FakeMessages(response=response)
    adapter = make_adapter("anthropic", _client(fake))
    completion = adapter.generate(CompletionRequest(prompt="Where is A7?", functions=[lookup_order]))
    tool = fake.calls[0]["tools"][0]
    assert tool["name"] == "lookup_order" and "input_schema" in tool  # nosec B101
    assert tool["input_schema"]["required"] == ["order_id"]  # nosec B101 - pytest assertion
    assert completion.text == "Looking it up."  # nosec B101 - pytest assertion
    call = completion.function_calls[0]
    assert (call.name, call.arguments, call.id) == ("lookup_order", {"order_id": "A7"}, "toolu_1")  # nosec B101


def test_stream_events_translate_to_text(make_adapter):
    events = [
        SimpleNamespace(type="message_start", message=SimpleNamespace(usage=SimpleNamespace(input_tokens=5))),
        SimpleNamespace(type="content_block_start"),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="text_delta", text="Bon")),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="input_json_delta", partial_json="{")),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(type="text_delta", text="jour")),
        SimpleNamespace(
            type="message_delta",
            delta=SimpleNamespace(stop_reason="end_turn"),
            usage=SimpleNamespace(output_tokens=2),
        ),
        SimpleNamespace(type="message_stop"),
    ]
    fake = _FakeMessages(events=events)
    stream = make_adapter("anthropic", _client(fake), stream=True).generate("hi")
    assert stream.read_all() == "Bonjour"  # nosec B101 - pytest assertion
    assert fake.calls[0]["stream"] is True  # nosec B101 - pytest assertion
    assert (stream.metrics.prompt_tokens, stream.metrics.total_tokens) == (5, 7)  # nosec B101
    assert stream.metrics.finish_reason == "end_turn"  # nosec B101 - pytest assertion
