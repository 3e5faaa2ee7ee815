"""
Provider-agnostic completion request.

A request is a single prompt plus an optional system instruction and optional
function descriptors in any of the accepted shapes (pydantic model class,
raw wire dict, or plain callable). Descriptors are normalized by the adapter
before any network call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from ..cancellation import CancellationToken


@dataclass
class CompletionRequest:
    """Input to ``LlmAdapter.generate``.

    Attributes:
        prompt: User prompt text; must be non-empty.
        system: Optional system instruction.
        functions: Optional function descriptors the model may call.
        cancellation_token: Optional token observed while streaming.
    """

    prompt: str
    system: Optional[str] = None
    functions: Optional[List[Any]] = None
    cancellation_token: Optional[CancellationToken] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.prompt, str) or not self.prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        if self.functions is not None:
            self.functions = list(self.functions)

    @classmethod
    def coerce(cls, value: Union["CompletionRequest", str]) -> "CompletionRequest":
        """Accept either a request or a bare prompt string."""
        if isinstance(value, CompletionRequest):
            return value
        return cls(prompt=value)


__all__ = ["CompletionRequest"]
