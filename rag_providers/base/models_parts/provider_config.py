"""
Validated, immutable provider configuration.

``ProviderConfig`` is the typed form of the declarative record
``{"provider": ..., "config": {...}}``. It is built once, never mutated, and
used both to construct an adapter and as the key of the facade's adapter
cache.

Unknown keys are not discarded: anything that is not a recognized field is
moved into ``extra`` so the selected adapter can accept it (allow-listed) or
reject it with ``UnsupportedParameterError``.

Credentials may be given inline (``api_key`` or a ``credentials`` mapping of
variable name to value). They are held as ``SecretStr`` and enter
``cache_key()`` only as SHA-256 digests.
"""
from __future__ import annotations

import hashlib
import json
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_serializer,
    field_validator,
    model_validator,
)

from ..constants import PROVIDER_IDS
from ..errors import UnknownProviderError

SAMPLING_PARAMS = ("temperature", "top_p", "top_k", "max_tokens")


class ProviderConfig(BaseModel):
    """Provider selection plus sampling and connection parameters.

    Attributes
    ----------
    provider:
        One of the registered identifiers (case-insensitive).
    model:
        Model (or deployment) name; ``None`` selects the provider default.
    temperature, top_p, top_k, max_tokens:
        Optional sampling parameters. Unset values are omitted from the
        request so the provider's own default applies.
    stream:
        Return a lazy ``TextStream`` instead of a ``Completion``.
    endpoint:
        Endpoint override for self-hosted or proxied deployments. Also
        accepted as ``base_url`` or ``endpoint_url``.
    api_version:
        API version for providers that require one (Azure OpenAI).
    timeout:
        Per-provider request timeout in seconds.
    api_key:
        Inline value for the provider's key variable (``OPENAI_API_KEY`` for
        ``openai``); takes precedence over the environment.
    credentials:
        Inline values keyed by credential variable name (canonical or alias),
        for providers needing more than a key, such as ``aws_bedrock``.
    extra:
        Provider-specific parameters, validated by the adapter. Read-only.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    provider: str
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=None, gt=0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    stream: bool = False
    endpoint: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("endpoint", "base_url", "endpoint_url")
    )
    api_version: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    api_key: Optional[SecretStr] = None
    credentials: Mapping[str, SecretStr] = Field(default_factory=dict, validate_default=True)
    extra: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def _collect_extra(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        known = set(cls.model_fields) | {"base_url", "endpoint_url"}
        out = {k: v for k, v in data.items() if k in known}
        extra = dict(out.get("extra") or {})
        for k, v in data.items():
            if k not in known:
                extra[k] = v
        out["extra"] = extra
        return out

    @field_validator("provider", mode="before")
    @classmethod
    def _known_provider(cls, value: Any) -> str:
        name = str(value or "").strip().lower()
        if name not in PROVIDER_IDS:
            raise UnknownProviderError(message=f"unknown provider: {value!r}", provider=name or "-")
        return name

    @field_validator("credentials", "extra", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("credentials", "extra")
    def _plain_mapping(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ProviderConfig":
        """Build from ``{"provider": ..., "config": {...}}``."""
        body = dict(record.get("config") or {})
        body["provider"] = record.get("provider")
        return cls.model_validate(body)

    def sampling(self) -> Dict[str, Any]:
        """Return the sampling parameters that were explicitly set."""
        return {k: getattr(self, k) for k in SAMPLING_PARAMS if getattr(self, k) is not None}

    def cache_key(self) -> str:
        """Stable identity used to reuse adapters for equal configurations."""
        data = self.model_dump(mode="json", exclude={"api_key", "credentials"})
        secrets = dict(self.credentials)
        if self.api_key is not None:
            secrets["api_key"] = self.api_key
        data["credentials"] = {
            name: hashlib.sha256(secret.get_secret_value().encode("utf-8")).hexdigest()
            for name, secret in secrets.items()
        }
        return json.dumps(data, sort_keys=True, default=str)


__all__ = ["ProviderConfig", "SAMPLING_PARAMS"]
