"""JinaChat adapter.

JinaChat serves an OpenAI-compatible chat API at ``https://api.chat.jina.ai/v1``
authenticated with ``JINACHAT_API_KEY``. It has no function calling and no
``top_k``.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..base.parameters import Capability
from ..config.defaults import JINA_DEFAULT_BASE_URL, JINA_DEFAULT_MODEL


class JinaAdapter(OpenAIStyleAdapter):
    provider_name = "jina"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM})
    DEFAULT_MODEL = JINA_DEFAULT_MODEL
    API_KEY_VAR = "JINACHAT_API_KEY"
    BASE_URL = JINA_DEFAULT_BASE_URL
    EXTRA_PARAMS = {"stop": "stop"}


__all__ = ["JinaAdapter"]
