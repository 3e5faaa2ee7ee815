"""Function call emitted by a model.

Holds the function name and decoded JSON arguments. ``id`` is the provider's
call identifier when one is returned (OpenAI, Anthropic, Bedrock).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class FunctionCall(BaseModel):
    """A function invocation requested by the model."""

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[str] = None


__all__ = ["FunctionCall"]
