"""GPT4All adapter.

Talks to the GPT4All desktop application's local API server, which exposes
an OpenAI-compatible ``/v1`` endpoint (default ``http://localhost:4891/v1``).
No credentials are needed. The local server has no tool calling, and
``top_k`` is not accepted by its chat endpoint, so it is dropped.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..base.parameters import Capability
from ..config.defaults import GPT4ALL_DEFAULT_BASE_URL, GPT4ALL_DEFAULT_MODEL, LOCAL_PLACEHOLDER_API_KEY


class Gpt4AllAdapter(OpenAIStyleAdapter):
    provider_name = "gpt4all"
    capabilities = frozenset({Capability.GENERATE, Capability.STREAM})
    DEFAULT_MODEL = GPT4ALL_DEFAULT_MODEL
    BASE_URL = GPT4ALL_DEFAULT_BASE_URL
    BASE_URL_VAR = "GPT4ALL_BASE_URL"
    EXTRA_PARAMS = {"stop": "stop", "n": "n"}

    def _api_key(self):
        return LOCAL_PLACEHOLDER_API_KEY


__all__ = ["Gpt4AllAdapter"]
