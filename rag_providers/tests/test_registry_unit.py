from __future__ import annotations

import pytest

from rag_providers.base.adapter import LlmAdapter
from rag_providers.base.constants import PROVIDER_IDS
from rag_providers.base.errors import UnknownProviderError
from rag_providers.base.models import ProviderConfig
from rag_providers.base.registry import AdapterRegistry
from rag_providers.openai.client import OpenAIAdapter


def test_supported_is_the_closed_identifier_set():
    assert AdapterRegistry.supported() == PROVIDER_IDS  # nosec B101 - pytest assertion
    assert len(PROVIDER_IDS) == 15  # nosec B101 - pytest assertion


@pytest.mark.parametrize("identifier", PROVIDER_IDS)
def test_every_identifier_resolves_to_a_matching_adapter(identifier):
    klass = AdapterRegistry.resolve(identifier)
    assert issubclass(klass, LlmAdapter)  # nosec B101 - pytest assertion
    assert klass.provider_name == identifier  # nosec B101 - pytest assertion


def test_resolve_is_case_insensitive_and_cached():
    assert AdapterRegistry.resolve(" OpenAI ") is AdapterRegistry.resolve("openai") is OpenAIAdapter  # nosec B101


@pytest.mark.parametrize("identifier", ["acme", "", None, "open ai"])
def test_unknown_identifier_raises(identifier):
    with pytest.raises(UnknownProviderError):
        AdapterRegistry.resolve(identifier)


def test_create_constructs_without_network(credentials):
    fake_client = object()
    adapter = AdapterRegistry.create(ProviderConfig(provider="openai"), source=credentials, client=fake_client)
    assert isinstance(adapter, OpenAIAdapter)  # nosec B101 - pytest assertion
    assert adapter.client is fake_client  # nosec B101 - pytest assertion
