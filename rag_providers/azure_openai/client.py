"""Azure OpenAI adapter.

Requires ``AZURE_OPENAI_API_KEY`` and an endpoint (``AZURE_OPENAI_ENDPOINT``
or the config ``endpoint``). ``model`` is the deployment name; the API version
comes from ``api_version`` in the config, then ``OPENAI_API_VERSION``, then a
pinned default.
"""

from __future__ import annotations

from typing import Any, Dict

import openai

from ..base.models import ProviderConfig
from ..base.openai_style_parts import OpenAIStyleAdapter
from ..config.defaults import AZURE_OPENAI_DEFAULT_API_VERSION


class AzureOpenAIAdapter(OpenAIStyleAdapter):
    provider_name = "azure_openai"
    API_KEY_VAR = "AZURE_OPENAI_API_KEY"
    EXTRA_PARAMS = {
        **OpenAIStyleAdapter.EXTRA_PARAMS,
        "response_format": "response_format",
    }

    def _provided_credentials(self, config: ProviderConfig) -> Dict[str, str]:
        provided = super()._provided_credentials(config)
        if config.endpoint:
            provided["AZURE_OPENAI_ENDPOINT"] = config.endpoint
        return provided

    def api_version(self) -> str:
        return (
            self.config.api_version
            or self.credentials.get("OPENAI_API_VERSION")
            or AZURE_OPENAI_DEFAULT_API_VERSION
        )

    def _make_client(self) -> Any:
        return openai.AzureOpenAI(
            api_key=self._api_key(),
            azure_endpoint=self.credentials.require("AZURE_OPENAI_ENDPOINT"),
            api_version=self.api_version(),
            timeout=self._sdk_timeout(),
            max_retries=0,
        )


__all__ = ["AzureOpenAIAdapter"]
