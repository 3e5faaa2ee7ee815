from __future__ import annotations

import logging

import pytest

from rag_providers.base.errors import UnsupportedParameterError
from rag_providers.base.models import ProviderConfig
from rag_providers.base.parameters import DROP, REJECT, assign_wire, map_parameters, wire

_LOGGER = logging.getLogger("rag_providers.tests.params")

TABLE = {
    "temperature": wire("options.temperature"),
    "top_p": wire("top_p"),
    "top_k": DROP,
    "max_tokens": REJECT,
}


def test_sent_parameters_use_wire_names():
    cfg = ProviderConfig(provider="ollama", temperature=0.2, top_p=0.9)
    mapped = map_parameters(cfg, parameter_map=TABLE, extra_params={}, logger=_LOGGER)
    assert mapped.values == {"options.temperature": 0.2, "top_p": 0.9}  # nosec B101 - pytest assertion
    assert mapped.apply({"model": "m"}) == {"model": "m", "options": {"temperature": 0.2}, "top_p": 0.9}  # nosec B101


def test_unset_parameters_are_omitted():
    mapped = map_parameters(ProviderConfig(provider="ollama"), parameter_map=TABLE, extra_params={}, logger=_LOGGER)
    assert mapped.values == {} and mapped.dropped == ()  # nosec B101 - pytest assertion


def test_dropped_parameter_is_logged(log_events):
    cfg = ProviderConfig(provider="openai", top_k=40)
    mapped = map_parameters(cfg, parameter_map=TABLE, extra_params={}, logger=logging.getLogger("rag_providers.x"))
    assert mapped.dropped == ("top_k",)  # nosec B101 - pytest assertion
    dropped = [e for e in log_events if e.get("event") == "param.dropped"]
    assert dropped and dropped[0]["parameter"] == "top_k"  # nosec B101 - pytest assertion
    assert dropped[0]["level"] == "DEBUG"  # nosec B101 - pytest assertion


def test_rejected_parameter_raises():
    with pytest.raises(UnsupportedParameterError) as info:
        map_parameters(ProviderConfig(provider="openai", max_tokens=5), parameter_map=TABLE, extra_params={}, logger=_LOGGER)
    assert info.value.parameter == "max_tokens"  # nosec B101 - pytest assertion


def test_parameter_missing_from_table_is_rejected():
    with pytest.raises(UnsupportedParameterError):
        map_parameters(ProviderConfig(provider="openai", top_p=0.5), parameter_map={}, extra_params={}, logger=_LOGGER)


def test_extras_follow_allow_list():
    cfg = ProviderConfig(provider="openai", extra={"seed": 3})
    mapped = map_parameters(cfg, parameter_map=TABLE, extra_params={"seed": "extra_body.seed"}, logger=_LOGGER)
    assert mapped.apply({}) == {"extra_body": {"seed": 3}}  # nosec B101 - pytest assertion
    with pytest.raises(UnsupportedParameterError) as info:
        map_parameters(ProviderConfig(provider="openai", extra={"bogus": 1}), parameter_map=TABLE, extra_params={}, logger=_LOGGER)
    assert info.value.parameter == "bogus"  # nosec B101 - pytest assertion


def test_assign_wire_merges_into_existing_objects():
    target = {"generationConfig": {"topK": 3}}
    assign_wire(target, "generationConfig.maxOutputTokens", 10)
    assert target == {"generationConfig": {"topK": 3, "maxOutputTokens": 10}}  # nosec B101 - pytest assertion
