"""Configuration layer for the adapter package.

Goals
-----
* Parse the declarative record used by RAG applications::

      {"llm": {"provider": "openai", "config": {"model": "gpt-3.5-turbo"}},
       "embedder": {"provider": "openai", "config": {}}}

  into a validated :class:`ProviderConfig` (plus the sibling embedder record).
* Accept the record from a mapping, a JSON file or a YAML file, or from the
  file named by ``RAG_PROVIDERS_CONFIG_FILE``.
* Apply in-code overrides last (later wins): file → overrides.

A bare ``{"provider": ..., "config": {...}}`` record is treated as the llm
record.

Public API
----------
* load_app_config(source=None, overrides=None) -> AppConfig
* load_provider_config(source=None, overrides=None) -> ProviderConfig
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..base.constants import CONFIG_FILE_ENV
from ..base.models import EmbedderConfig, ProviderConfig
from .credentials import (
    ChainSource,
    CredentialSource,
    Credentials,
    EnvironmentSource,
    MappingSource,
    resolve_credentials,
)
from .env import CREDENTIAL_SPECS, CredentialSpec, get_credential_spec, required_variable_names

ConfigSource = Union[Mapping[str, Any], str, os.PathLike, None]


@dataclass(frozen=True)
class AppConfig:
    """Parsed declarative configuration."""

    llm: Optional[ProviderConfig] = None
    embedder: Optional[EmbedderConfig] = None


def _read_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping at the top level")
    return data


def _coerce_source(source: ConfigSource) -> Dict[str, Any]:
    if source is None:
        path = os.getenv(CONFIG_FILE_ENV)
        if not path:
            return {}
        return _read_file(Path(path).expanduser())
    if isinstance(source, Mapping):
        return dict(source)
    return _read_file(Path(source).expanduser())


def _merge_record(record: Optional[Mapping[str, Any]], overrides: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    if not overrides:
        return dict(record) if record is not None else None
    out = dict(record or {})
    overrides = dict(overrides)
    if "provider" in overrides:
        out["provider"] = overrides.pop("provider")
    cfg = dict(out.get("config") or {})
    cfg.update(overrides)
    out["config"] = cfg
    return out


def load_app_config(source: ConfigSource = None, overrides: Optional[Mapping[str, Any]] = None) -> AppConfig:
    """Load and validate the declarative configuration.

    Parameters
    ----------
    source:
        Mapping, path to a JSON/YAML file, or ``None`` to read the file named
        by ``RAG_PROVIDERS_CONFIG_FILE`` (empty config when unset).
    overrides:
        Keys merged into the llm ``config`` block (``provider`` switches the
        provider).

    Raises
    ------
    UnknownProviderError
        When the llm provider identifier is not registered.
    pydantic.ValidationError
        When a parameter is out of range or has the wrong type.
    """
    data = _coerce_source(source)
    if "llm" not in data and "embedder" not in data and "provider" in data:
        data = {"llm": data}
    llm_record = _merge_record(data.get("llm"), overrides)
    embedder_record = data.get("embedder")
    return AppConfig(
        llm=ProviderConfig.from_record(llm_record) if llm_record is not None else None,
        embedder=EmbedderConfig.from_record(embedder_record) if embedder_record is not None else None,
    )


def load_provider_config(source: ConfigSource = None, overrides: Optional[Mapping[str, Any]] = None) -> ProviderConfig:
    """Return the llm :class:`ProviderConfig`; raises ``ValueError`` when absent."""
    cfg = load_app_config(source, overrides).llm
    if cfg is None:
        raise ValueError("configuration has no 'llm' record")
    return cfg


__all__ = [
    "AppConfig",
    "CREDENTIAL_SPECS",
    "ChainSource",
    "CredentialSource",
    "CredentialSpec",
    "Credentials",
    "EnvironmentSource",
    "MappingSource",
    "get_credential_spec",
    "load_app_config",
    "load_provider_config",
    "required_variable_names",
    "resolve_credentials",
]
