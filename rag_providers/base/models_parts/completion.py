"""
Non-streaming completion result.

``raw`` keeps the native SDK/HTTP payload for debugging and is excluded from
``to_dict`` so large objects are not logged or persisted by accident.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .function_call import FunctionCall
from .provider_metadata import ProviderMetadata


@dataclass
class Completion:
    """Text (and any function calls) returned by a provider."""

    text: str
    meta: ProviderMetadata
    function_calls: List[FunctionCall] = field(default_factory=list)
    raw: Optional[Any] = field(default=None, repr=False)

    def __str__(self) -> str:
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary excluding raw provider objects."""
        return {
            "text": self.text,
            "function_calls": [c.model_dump() for c in self.function_calls],
            "meta": self.meta.to_dict(),
        }


__all__ = ["Completion"]
