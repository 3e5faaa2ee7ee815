"""
Provider call metadata model.

Diagnostic metadata attached to each ``Completion`` (resolved model, finish
reason, token usage, latency and request identifiers).
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional


@dataclass
class ProviderMetadata:
    """Execution metadata for a provider call.

    Attributes:
        provider_name: Canonical provider key (e.g., ``"openai"``).
        model_name: Resolved model name used for the call.
        finish_reason: Provider stop reason, when reported.
        usage: Token usage mapping (provider-specific keys).
        request_id: Provider-specific response identifier when available.
        latency_ms: End-to-end latency for the operation, in milliseconds.
        dropped_params: Sampling parameters dropped by the adapter's mapping.
        extra: JSON-serializable map for adapter-specific diagnostics.
    """

    provider_name: str
    model_name: str
    finish_reason: Optional[str] = None
    usage: Dict[str, Any] = field(default_factory=dict)
    request_id: Optional[str] = None
    latency_ms: Optional[float] = None
    dropped_params: tuple = ()
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary of the metadata fields."""
        data = asdict(self)
        data["dropped_params"] = list(self.dropped_params)
        return data


__all__ = ["ProviderMetadata"]
