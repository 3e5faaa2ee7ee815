"""OpenAI adapter.

Uses the ``openai`` SDK against api.openai.com, or against
``OPENAI_BASE_URL`` / the config endpoint when set (proxies, gateways).
``top_k`` has no OpenAI equivalent and is dropped.
"""

from __future__ import annotations

import openai

from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import OPENAI_DEFAULT_MODEL


class OpenAIAdapter(OpenAIStyleAdapter):
    provider_name = "openai"
    DEFAULT_MODEL = OPENAI_DEFAULT_MODEL
    API_KEY_VAR = "OPENAI_API_KEY"
    BASE_URL_VAR = "OPENAI_BASE_URL"
    EXTRA_PARAMS = {
        **OpenAIStyleAdapter.EXTRA_PARAMS,
        "response_format": "response_format",
        "logit_bias": "logit_bias",
        "n": "n",
    }

    def _make_client(self):
        return openai.OpenAI(
            api_key=self._api_key(),
            base_url=self._base_url(),
            organization=self.credentials.get("OPENAI_ORGANIZATION"),
            timeout=self._sdk_timeout(),
            max_retries=0,
        )


__all__ = ["OpenAIAdapter"]
