"""Shared fixtures for the unit test suite.

- ``credentials``: a ``MappingSource`` holding dummy values for every
  provider's required variables, so adapters resolve without touching the
  real environment.
- ``log_events``: captures the structured payloads emitted on the shared
  ``rag_providers`` logger (which does not propagate to the root logger, so
  pytest's ``caplog`` does not see them).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from rag_providers.base.logging import BASE_LOGGER_NAME, get_logger
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


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            payload = {"msg": record.getMessage()}
        payload.setdefault("level", record.levelname)
        self.events.append(payload)


@pytest.fixture()
def log_events(monkeypatch: pytest.MonkeyPatch) -> Iterator[List[Dict[str, Any]]]:
    """Yield the list of structured events logged during the test (DEBUG and up)."""
    monkeypatch.setenv("RAG_PROVIDERS_LOG_LEVEL", "DEBUG")
    base = get_logger(BASE_LOGGER_NAME)
    handler = _CaptureHandler()
    base.addHandler(handler)
    try:
        yield handler.events
    finally:
        base.removeHandler(handler)
