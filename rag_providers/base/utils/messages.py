"""Message list construction shared by chat-style adapters."""
from __future__ import annotations

from typing import Dict, List

from ..models import CompletionRequest


def build_messages(request: CompletionRequest, *, system_role: str = "system") -> List[Dict[str, str]]:
    """Return ``[{"role": "system", ...}, {"role": "user", ...}]`` for a request.

    The system message is omitted when the request has none.
    """
    messages: List[Dict[str, str]] = []
    if request.system:
        messages.append({"role": system_role, "content": request.system})
    messages.append({"role": "user", "content": request.prompt})
    return messages


def flatten_prompt(request: CompletionRequest) -> str:
    """Single-string prompt for text-generation endpoints without roles."""
    if request.system:
        return f"{request.system}\n\n{request.prompt}"
    return request.prompt


__all__ = ["build_messages", "flatten_prompt"]
