"""Together AI adapter (OpenAI-compatible endpoint).

``top_k`` and ``repetition_penalty`` are Together extensions and travel in
the request body outside the standard OpenAI fields.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..base.parameters import wire
from ..config.defaults import TOGETHER_DEFAULT_BASE_URL, TOGETHER_DEFAULT_MODEL


class TogetherAdapter(OpenAIStyleAdapter):
    provider_name = "together"
    DEFAULT_MODEL = TOGETHER_DEFAULT_MODEL
    API_KEY_VAR = "TOGETHER_API_KEY"
    BASE_URL = TOGETHER_DEFAULT_BASE_URL
    PARAMETER_MAP = {
        **OpenAIStyleAdapter.PARAMETER_MAP,
        "top_k": wire("extra_body.top_k"),
    }
    EXTRA_PARAMS = {
        **OpenAIStyleAdapter.EXTRA_PARAMS,
        "repetition_penalty": "extra_body.repetition_penalty",
    }


__all__ = ["TogetherAdapter"]
