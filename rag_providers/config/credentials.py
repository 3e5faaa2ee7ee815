"""Credential resolution from an injectable source.

Adapters never read ``os.environ`` directly. They receive a
:class:`CredentialSource` (the process environment by default, or an explicit
mapping in tests) and resolve the variables named by their
:class:`~rag_providers.config.env.CredentialSpec` once, at construction.

Resolved values are wrapped in ``pydantic.SecretStr`` so ``repr()``, ``str()``
and structured logs only ever show a mask.
"""
from __future__ import annotations

import os
from typing import Dict, Iterable, Mapping, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel, ConfigDict, SecretStr

from ..base.errors import AuthenticationError
from .env import CredentialSpec, VarNames, get_credential_spec


@runtime_checkable
class CredentialSource(Protocol):
    """Anything that can look a variable up by name."""

    def get(self, name: str) -> Optional[str]: ...


class EnvironmentSource:
    """Reads from ``os.environ`` (or a provided environ mapping)."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    def get(self, name: str) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(name)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return "EnvironmentSource()"


class MappingSource:
    """Explicit in-memory mapping (tests, secret stores already loaded)."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"MappingSource(keys={sorted(self._values)})"


class ChainSource:
    """First source with a non-empty value wins."""

    def __init__(self, *sources: CredentialSource) -> None:
        self._sources: Tuple[CredentialSource, ...] = sources

    def get(self, name: str) -> Optional[str]:
        for source in self._sources:
            value = source.get(name)
            if value is not None and str(value).strip():
                return value
        return None


class Credentials(BaseModel):
    """Resolved credential values keyed by canonical variable name."""

    model_config = ConfigDict(frozen=True)

    provider: str
    values: Dict[str, SecretStr] = {}
    sources: Dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        secret = self.values.get(name)
        return secret.get_secret_value() if secret is not None else None

    def require(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise AuthenticationError(
                message=f"missing credential variable {name}",
                provider=self.provider,
            )
        return value

    def __contains__(self, name: object) -> bool:
        return name in self.values


def _lookup(source: CredentialSource, names: VarNames) -> Tuple[Optional[str], Optional[str]]:
    for name in names:
        value = source.get(name)
        if value is not None and str(value).strip():
            return str(value).strip(), name
    return None, None


def resolve_credentials(
    provider: str,
    source: Optional[CredentialSource] = None,
    *,
    spec: Optional[CredentialSpec] = None,
    provided: Optional[Mapping[str, str]] = None,
) -> Credentials:
    """Resolve ``provider``'s variables from ``source``.

    ``provided`` carries values already supplied by the config (for example an
    endpoint override standing in for ``AZURE_OPENAI_ENDPOINT``); they take
    precedence over the source.

    Raises:
        AuthenticationError: naming every missing required variable. Values
            are never included in the message.
    """
    source = source or EnvironmentSource()
    spec = spec or get_credential_spec(provider)
    provided = {k: v for k, v in (provided or {}).items() if v}
    values: Dict[str, SecretStr] = {}
    used: Dict[str, str] = {}
    missing = []
    for names, required in _iter_names(spec):
        canonical = names[0]
        if canonical in provided:
            values[canonical] = SecretStr(provided[canonical])
            used[canonical] = "config"
            continue
        value, var = _lookup(source, names)
        if value is not None:
            values[canonical] = SecretStr(value)
            used[canonical] = var or canonical
        elif required:
            missing.append(" or ".join(names))
    if missing:
        raise AuthenticationError(
            message="missing required credential variable(s): " + ", ".join(missing),
            provider=provider,
        )
    return Credentials(provider=provider, values=values, sources=used)


def _iter_names(spec: CredentialSpec) -> Iterable[Tuple[VarNames, bool]]:
    for names in spec.required:
        yield names, True
    for names in spec.optional:
        yield names, False


__all__ = [
    "ChainSource",
    "CredentialSource",
    "Credentials",
    "EnvironmentSource",
    "MappingSource",
    "resolve_credentials",
]
