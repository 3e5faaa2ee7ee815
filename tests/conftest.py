"""Fixtures for the per-provider adapter tests.

Adapters are built with a ``MappingSource`` holding dummy credentials and an
injected fake client, so no test reaches the network or reads the real
environment.
"""

from __future__ import annotations

from typing import Any, Dict

import pytest

from rag_providers.base.models import ProviderConfig
from rag_providers.base.registry import AdapterRegistry
from rag_providers.config.credentials import MappingSource
from rag_providers.config.env import CREDENTIAL_SPECS

DUMMY_VALUE = "test-value-123"  # pragma: allowlist secret


@pytest.fixture()
def credentials() -> MappingSource:
    values: Dict[str, str] = {}
    for spec in CREDENTIAL_SPECS.values():
        for names in spec.required:
            values[names[0]] = DUMMY_VALUE
    values["AZURE_OPENAI_ENDPOINT"] = "https://example.openai.azure.com"
    return MappingSource(values)


@pytest.fixture()
def make_adapter(credentials):
    """Return ``build(provider, client=None, **config)`` creating an adapter."""

    def build(provider: str, client: Any = None, **config: Any):
        return AdapterRegistry.create(ProviderConfig(provider=provider, **config), source=credentials, client=client)

    return build
