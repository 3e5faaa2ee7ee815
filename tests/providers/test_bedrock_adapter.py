"""AWS Bedrock Converse adapter tests with a fake bedrock-runtime client."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
from botocore.exceptions import ClientError
from pydantic import BaseModel, Field

from rag_providers.aws_bedrock.client import BedrockAdapter
from rag_providers.base.errors import AuthenticationError, ErrorCode, ProviderResponseError, RateLimitError
from rag_providers.base.models import CompletionRequest, ProviderConfig
from rag_providers.config.credentials import MappingSource


class _EventStream:
    def __init__(self, events: List[Dict[str, Any]]) -> None:
        self._events = events
        self.closed = False

    def __iter__(self):
        return iter(self._events)

    def close(self) -> None:
        self.closed = True


class _FakeRuntime:
    def __init__(
        self,
        response: Any = None,
        events: List[Dict[str, Any]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.response = response
        self.stream = _EventStream(events or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def converse(self, **params: Any) -> Any:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.response

    def converse_stream(self, **params: Any) -> Any:
        self.calls.append(params)
        return {"stream": self.stream, "ResponseMetadata": {"RequestId": "r"}}


class Translate(BaseModel):
    """Translate text."""

    text: str = Field(description="Text to translate")
    target: str = "fr"


def _converse_response(content: List[Dict[str, Any]], stop: str = "end_turn") -> Dict[str, Any]:
    return {
        "output": {"message": {"role": "assistant", "content": content}},
        "stopReason": stop,
        "usage": {"inputTokens": 10, "outputTokens": 4, "totalTokens": 14},
        "ResponseMetadata": {"RequestId": "req-9", "HTTPStatusCode": 200},
    }


def test_converse_request_shape(make_adapter):
    fake = _FakeRuntime(response=_converse_response([{"text": "Salut"}]))
    adapter = make_adapter("aws_bedrock", fake, temperature=0.2, top_p=0.8, top_k=50, max_tokens=100, stop=["\n"])
    completion = adapter.generate(CompletionRequest(prompt="Hi in French", system="Be terse"))
    sent = fake.calls[0]
    assert sent["modelId"] == "anthropic.claude-3-haiku-20240307-v1:0"  # nosec B101
    assert sent["messages"] == [{"role": "user", "content": [{"text": "Hi in French"}]}]  # nosec B101
    assert sent["system"] == [{"text": "Be terse"}]  # nosec B101 - pytest assertion
    expected = {"temperature": 0.2, "topP": 0.8, "maxTokens": 100, "stopSequences": ["\n"]}
    assert sent["inferenceConfig"] == expected  # nosec B101 - pytest assertion
    assert sent["additionalModelRequestFields"] == {"top_k": 50}  # nosec B101 - pytest assertion
    assert completion.text == "Salut" and completion.meta.finish_reason == "end_turn"  # nosec B101
    assert completion.meta.usage == {"prompt_tokens": 10, "completion_tokens": 4, "total_tokens": 14}  # nosec B101
    assert completion.meta.request_id == "req-9"  # nosec B101 - pytest assertion


def test_tool_use(make_adapter):
    content = [{"toolUse": {"toolUseId": "tu1", "name": "Translate", "input": {"text": "hello"}}}]
    fake = _FakeRuntime(response=_converse_response(content, "tool_use"))
    completion = make_adapter("aws_bedrock", fake).generate(CompletionRequest(prompt="t", functions=[Translate]))
    spec = fake.calls[0]["toolConfig"]["tools"][0]["toolSpec"]
    assert spec["name"] == "Translate" and spec["description"] == "Translate text."  # nosec B101
    assert spec["inputSchema"]["json"]["required"] == ["text"]  # nosec B101 - pytest assertion
    call = completion.function_calls[0]
    assert (call.name, call.arguments, call.id) == ("Translate", {"text": "hello"}, "tu1")  # nosec B101


def test_missing_output_is_malformed(make_adapter):
    fake = _FakeRuntime(response={"ResponseMetadata": {}})
    with pytest.raises(ProviderResponseError) as info:
        make_adapter("aws_bedrock", fake).generate("q")
    assert info.value.code is ErrorCode.MALFORMED  # nosec B101 - pytest assertion


@pytest.mark.parametrize(
    "code, status, expected",
    [
        ("ThrottlingException", 429, RateLimitError),
        ("AccessDeniedException", 403, AuthenticationError),
        ("ModelNotReadyException", 429, ProviderResponseError),
    ],
)
def test_client_errors_are_classified(make_adapter, code, status, expected):
    error = ClientError(
        {"Error": {"Code": code, "Message": "nope"}, "ResponseMetadata": {"HTTPStatusCode": status}},
        "Converse",
    )
    with pytest.raises(expected):
        make_adapter("aws_bedrock", _FakeRuntime(error=error)).generate("q")


def test_converse_stream_events(make_adapter):
    events = [
        {"messageStart": {"role": "assistant"}},
        {"contentBlockDelta": {"delta": {"text": "Sal"}, "contentBlockIndex": 0}},
        {"contentBlockDelta": {"delta": {"text": "ut"}, "contentBlockIndex": 0}},
        {"contentBlockStop": {"contentBlockIndex": 0}},
        {"messageStop": {"stopReason": "end_turn"}},
        {"metadata": {"usage": {"inputTokens": 3, "outputTokens": 2, "totalTokens": 5}}},
    ]
    fake = _FakeRuntime(events=events)
    stream = make_adapter("aws_bedrock", fake, stream=True).generate("Hi")
    assert list(stream) == ["Sal", "ut"]  # nosec B101 - pytest assertion
    assert stream.metrics.finish_reason == "end_turn" and stream.metrics.total_tokens == 5  # nosec B101
    assert fake.stream.closed  # nosec B101 - pytest assertion


def test_region_from_alias():
    source = MappingSource(
        {"AWS_ACCESS_KEY_ID": "a", "AWS_SECRET_ACCESS_KEY": "b", "AWS_DEFAULT_REGION": "eu-west-1"}
    )
    adapter = BedrockAdapter(ProviderConfig(provider="aws_bedrock"), source=source)
    assert adapter.region == "eu-west-1"  # nosec B101 - pytest assertion
    client = adapter.client
    assert client.meta.region_name == "eu-west-1"  # nosec B101 - pytest assertion
