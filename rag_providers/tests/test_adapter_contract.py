from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from pydantic import BaseModel

from rag_providers.base.errors import (
    AuthenticationError,
    ErrorCode,
    ProviderResponseError,
    RateLimitError,
    UnsupportedParameterError,
)
from rag_providers.base.models import CompletionRequest, ProviderConfig
from rag_providers.base.parameters import Capability
from rag_providers.base.registry import AdapterRegistry
from rag_providers.config.credentials import MappingSource

DUMMY_VALUE = "test-value-123"  # pragma: allowlist secret


class Lookup(BaseModel):
    """Look up a term."""

    term: str


def _create(provider, source, client=None, **config):
    return AdapterRegistry.create(ProviderConfig(provider=provider, **config), source=source, client=client)


def _openai_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_provider_mismatch_is_rejected(credentials):
    klass = AdapterRegistry.resolve("openai")
    with pytest.raises(ValueError):
        klass(ProviderConfig(provider="cohere"), source=credentials)


def test_missing_credential_fails_construction():
    with pytest.raises(AuthenticationError) as info:
        _create("anthropic", MappingSource({}))
    assert "ANTHROPIC_API_KEY" in info.value.message  # nosec B101 - pytest assertion


def test_streaming_refused_for_non_streaming_provider(credentials):
    with pytest.raises(UnsupportedParameterError) as info:
        _create("llama2", credentials, stream=True)
    assert info.value.parameter == "stream"  # nosec B101 - pytest assertion


def test_functions_refused_without_function_calling(credentials):
    adapter = _create("jina", credentials, client=object())
    assert not adapter.supports(Capability.FUNCTION_CALL)  # nosec B101 - pytest assertion
    with pytest.raises(UnsupportedParameterError):
        adapter.generate(CompletionRequest(prompt="q", functions=[Lookup]))


def test_functions_with_streaming_are_refused(credentials):
    adapter = _create("openai", credentials, client=object(), stream=True)
    with pytest.raises(UnsupportedParameterError) as info:
        adapter.generate(CompletionRequest(prompt="q", functions=[Lookup]))
    assert info.value.parameter == "functions"  # nosec B101 - pytest assertion


def test_invalid_function_descriptor_fails_before_any_call(credentials):
    def create(**params):  # pragma: no cover - must not be reached
        raise AssertionError("network call attempted")

    adapter = _create("openai", credentials, client=_openai_client(create))
    with pytest.raises(TypeError):
        adapter.generate(CompletionRequest(prompt="q", functions=[42]))


def test_model_falls_back_to_environment_then_default(credentials):
    source = MappingSource({"OPENAI_API_KEY": DUMMY_VALUE, "OPENAI_MODEL": "gpt-4o-mini"})
    assert _create("openai", source).model == "gpt-4o-mini"  # nosec B101 - pytest assertion
    assert _create("openai", credentials).model == "gpt-3.5-turbo"  # nosec B101 - pytest assertion
    assert _create("openai", credentials, model="gpt-4o").model == "gpt-4o"  # nosec B101


def test_deployment_required_for_azure(credentials):
    with pytest.raises(UnsupportedParameterError) as info:
        _create("azure_openai", credentials)
    assert info.value.parameter == "model"  # nosec B101 - pytest assertion


def test_empty_prompt_is_rejected(credentials):
    adapter = _create("openai", credentials, client=object())
    with pytest.raises(ValueError):
        adapter.generate("   ")


def test_init_event_lists_variables_not_values(credentials, log_events):
    _create("cohere", credentials, temperature=0.2)
    event = next(e for e in log_events if e.get("event") == "adapter.init")
    assert event["provider"] == "cohere" and event["env_vars"] == ["COHERE_API_KEY"]  # nosec B101
    assert DUMMY_VALUE not in json.dumps(log_events)  # nosec B101 - pytest assertion


def test_vendor_failure_is_translated_and_logged(credentials, log_events):
    class RateLimited(Exception):
        status_code = 429

    def create(**params):
        raise RateLimited("slow down")

    adapter = _create("openai", credentials, client=_openai_client(create))
    with pytest.raises(RateLimitError) as info:
        adapter.generate("q")
    assert info.value.code is ErrorCode.RATE_LIMIT and info.value.retryable  # nosec B101
    assert isinstance(info.value.raw, RateLimited)  # nosec B101 - pytest assertion
    event = next(e for e in log_events if e.get("event") == "generate.error")
    assert event["error_code"] == "rate_limit" and event["emitted"] is False  # nosec B101


def test_single_attempt_per_call(credentials):
    calls = []

    class Unavailable(Exception):
        status_code = 503

    def create(**params):
        calls.append(params)
        raise Unavailable("busy")

    adapter = _create("openai", credentials, client=_openai_client(create))
    with pytest.raises(ProviderResponseError):
        adapter.generate("q")
    assert len(calls) == 1  # nosec B101 - pytest assertion


def test_close_releases_client(credentials):
    closed = []
    adapter = _create("openai", credentials, client=SimpleNamespace(close=lambda: closed.append(1)))
    with adapter:
        pass
    assert closed == [1]  # nosec B101 - pytest assertion


def test_api_key_in_config_stands_in_for_environment():
    config = ProviderConfig.from_record(
        {"provider": "openai", "config": {"model": "gpt-3.5-turbo", "api_key": "sk-inline"}}  # pragma: allowlist secret
    )
    adapter = AdapterRegistry.create(config, source=MappingSource({}), client=object())
    assert adapter.credentials.get("OPENAI_API_KEY") == "sk-inline"  # nosec B101 - pytest assertion
    assert adapter.credentials.sources["OPENAI_API_KEY"] == "config"  # nosec B101 - pytest assertion
    assert config.extra == {}  # nosec B101 - pytest assertion


def test_api_key_in_config_wins_over_environment():
    source = MappingSource({"HF_TOKEN": "from-env"})
    adapter = _create("huggingface", source, api_key="from-config")
    assert adapter.credentials.get("HUGGINGFACE_ACCESS_TOKEN") == "from-config"  # nosec B101 - pytest assertion


def test_credentials_mapping_accepts_aliases():
    adapter = _create(
        "aws_bedrock",
        MappingSource({}),
        client=object(),
        credentials={
            "AWS_ACCESS_KEY_ID": "AKIA-test",
            "AWS_SECRET_ACCESS_KEY": DUMMY_VALUE,
            "AWS_DEFAULT_REGION": "eu-west-1",
        },
    )
    assert adapter.credentials.get("AWS_REGION") == "eu-west-1"  # nosec B101 - pytest assertion
    assert set(adapter.credentials.sources.values()) == {"config"}  # nosec B101 - pytest assertion


def test_api_key_refused_for_keyless_provider():
    with pytest.raises(UnsupportedParameterError) as info:
        _create("ollama", MappingSource({}), api_key="unused")
    assert info.value.parameter == "api_key"  # nosec B101 - pytest assertion


def test_unknown_credential_name_is_refused(credentials):
    with pytest.raises(UnsupportedParameterError) as info:
        _create("openai", credentials, credentials={"COHERE_API_KEY": DUMMY_VALUE})
    assert info.value.parameter == "credentials"  # nosec B101 - pytest assertion
