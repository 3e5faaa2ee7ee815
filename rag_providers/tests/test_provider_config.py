from __future__ import annotations

import pytest
from pydantic import ValidationError

from rag_providers.base.errors import ErrorCode, UnknownProviderError
from rag_providers.base.models import ProviderConfig


def test_from_record_builds_validated_config():
    cfg = ProviderConfig.from_record(
        {"provider": "OpenAI", "config": {"model": "gpt-3.5-turbo", "temperature": 0.5, "stream": True}}
    )
    assert cfg.provider == "openai"  # nosec B101 - pytest assertion
    assert cfg.model == "gpt-3.5-turbo"  # nosec B101 - pytest assertion
    assert cfg.stream is True  # nosec B101 - pytest assertion
    assert cfg.sampling() == {"temperature": 0.5}  # nosec B101 - pytest assertion


def test_unknown_provider_is_rejected_with_taxonomy_error():
    with pytest.raises(UnknownProviderError) as info:
        ProviderConfig.from_record({"provider": "acme", "config": {}})
    assert info.value.code is ErrorCode.NOT_FOUND  # nosec B101 - pytest assertion
    assert "acme" in info.value.message  # nosec B101 - pytest assertion


@pytest.mark.parametrize(
    "field,value",
    [("temperature", 2.5), ("temperature", -0.1), ("top_p", 1.5), ("top_k", 0), ("max_tokens", 0), ("timeout", 0)],
)
def test_out_of_range_values_fail_validation(field, value):
    with pytest.raises(ValidationError):
        ProviderConfig(provider="openai", **{field: value})


def test_unknown_keys_move_into_extra():
    cfg = ProviderConfig.from_record({"provider": "openai", "config": {"seed": 7, "extra": {"user": "u1"}}})
    assert cfg.extra == {"user": "u1", "seed": 7}  # nosec B101 - pytest assertion


def test_endpoint_aliases():
    a = ProviderConfig.from_record({"provider": "ollama", "config": {"base_url": "http://h:1"}})
    b = ProviderConfig.from_record({"provider": "ollama", "config": {"endpoint_url": "http://h:1"}})
    assert a.endpoint == b.endpoint == "http://h:1"  # nosec B101 - pytest assertion
    assert a.extra == {}  # nosec B101 - pytest assertion


def test_config_is_immutable():
    cfg = ProviderConfig(provider="openai")
    with pytest.raises(ValidationError):
        cfg.model = "other"  # type: ignore[misc]


def test_cache_key_equal_for_equal_configs():
    a = ProviderConfig.from_record({"provider": "openai", "config": {"model": "m", "temperature": 0.5}})
    b = ProviderConfig(provider="openai", temperature=0.5, model="m")
    c = ProviderConfig(provider="openai", temperature=0.6, model="m")
    assert a.cache_key() == b.cache_key()  # nosec B101 - pytest assertion
    assert a.cache_key() != c.cache_key()  # nosec B101 - pytest assertion


def test_extra_is_read_only():
    cfg = ProviderConfig.from_record({"provider": "openai", "config": {"seed": 7}})
    with pytest.raises(TypeError):
        cfg.extra["seed"] = 8  # type: ignore[index]
    assert cfg.extra == {"seed": 7}  # nosec B101 - pytest assertion


def test_inline_secrets_are_masked_and_hashed_in_cache_key():
    a = ProviderConfig(provider="openai", api_key="sk-one")  # pragma: allowlist secret
    b = ProviderConfig(provider="openai", api_key="sk-two")  # pragma: allowlist secret
    c = ProviderConfig(provider="openai", api_key="sk-one")  # pragma: allowlist secret
    assert "sk-one" not in repr(a)  # nosec B101 - pytest assertion
    assert "sk-one" not in a.cache_key()  # nosec B101 - pytest assertion
    assert a.cache_key() != b.cache_key()  # nosec B101 - pytest assertion
    assert a.cache_key() == c.cache_key()  # nosec B101 - pytest assertion


def test_credentials_mapping_is_read_only():
    cfg = ProviderConfig(provider="aws_bedrock", credentials={"AWS_ACCESS_KEY_ID": "AKIA-test"})
    assert cfg.credentials["AWS_ACCESS_KEY_ID"].get_secret_value() == "AKIA-test"  # nosec B101
    with pytest.raises(TypeError):
        cfg.credentials["AWS_ACCESS_KEY_ID"] = "other"  # type: ignore[index]
