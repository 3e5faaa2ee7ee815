"""vLLM adapter for a self-hosted OpenAI-compatible server.

The server URL comes from the config ``endpoint``, then ``VLLM_BASE_URL``,
then ``http://localhost:8000/v1``. ``VLLM_API_KEY`` is sent when the server
was started with ``--api-key``. vLLM's sampling extensions (``top_k``,
``min_p``, ``repetition_penalty``, ``use_beam_search``) go in the request body.
"""

from __future__ import annotations

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..base.parameters import wire
from ..config.defaults import LOCAL_PLACEHOLDER_API_KEY, VLLM_DEFAULT_BASE_URL, VLLM_DEFAULT_MODEL


class VllmAdapter(OpenAIStyleAdapter):
    provider_name = "vllm"
    DEFAULT_MODEL = VLLM_DEFAULT_MODEL
    API_KEY_VAR = "VLLM_API_KEY"
    BASE_URL = VLLM_DEFAULT_BASE_URL
    BASE_URL_VAR = "VLLM_BASE_URL"
    PARAMETER_MAP = {
        **OpenAIStyleAdapter.PARAMETER_MAP,
        "top_k": wire("extra_body.top_k"),
    }
    EXTRA_PARAMS = {
        **OpenAIStyleAdapter.EXTRA_PARAMS,
        "min_p": "extra_body.min_p",
        "repetition_penalty": "extra_body.repetition_penalty",
        "use_beam_search": "extra_body.use_beam_search",
    }

    def _api_key(self):
        return super()._api_key() or LOCAL_PLACEHOLDER_API_KEY


__all__ = ["VllmAdapter"]
