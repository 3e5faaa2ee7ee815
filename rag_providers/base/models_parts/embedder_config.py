"""
Embedder record carried alongside the LLM record.

The embedding subsystem lives outside this package; the record is parsed and
validated for shape only so a single config file can describe both.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmbedderConfig(BaseModel):
    """``{"provider": ..., "config": {...}}`` for the embedding backend."""

    model_config = ConfigDict(frozen=True)

    provider: str
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("provider")
    @classmethod
    def _normalize(cls, value: str) -> str:
        name = value.strip().lower()
        if not name:
            raise ValueError("embedder provider must be non-empty")
        return name

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EmbedderConfig":
        return cls.model_validate(dict(record))


__all__ = ["EmbedderConfig"]
