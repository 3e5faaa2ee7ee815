"""Mistral AI adapter.

La Plateforme's chat endpoint is OpenAI-compatible. Mistral rejects unknown
sampling fields, so ``top_k`` is refused at construction instead of being
forwarded. ``random_seed`` and ``safe_prompt`` are Mistral's own extras.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..base.parameters import REJECT, wire
from ..config.defaults import MISTRAL_DEFAULT_BASE_URL, MISTRAL_DEFAULT_MODEL


class MistralAdapter(OpenAIStyleAdapter):
    provider_name = "mistralai"
    DEFAULT_MODEL = MISTRAL_DEFAULT_MODEL
    API_KEY_VAR = "MISTRAL_API_KEY"
    BASE_URL = MISTRAL_DEFAULT_BASE_URL
    PARAMETER_MAP = {
        "temperature": wire("temperature"),
        "top_p": wire("top_p"),
        "top_k": REJECT,
        "max_tokens": wire("max_tokens"),
    }
    EXTRA_PARAMS = {
        "random_seed": "extra_body.random_seed",
        "safe_prompt": "extra_body.safe_prompt",
        "stop": "stop",
        "presence_penalty": "presence_penalty",
        "frequency_penalty": "frequency_penalty",
    }


__all__ = ["MistralAdapter"]
