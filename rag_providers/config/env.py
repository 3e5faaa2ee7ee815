"""rag_providers.config.env
========================

Provider → environment variable mapping for credentials.

Purpose
-------
- Single source of truth for which variables each provider needs, which are
  optional, and which alias names are accepted (canonical name first).
- The mapping is data only; reading values is done through a
  :class:`~rag_providers.config.credentials.CredentialSource` so tests never
  touch the real process environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

# Each entry is (canonical, *aliases).
VarNames = Tuple[str, ...]


@dataclass(frozen=True)
class CredentialSpec:
    """Variables a provider reads at construction.

    Attributes:
        required: Variables that must resolve to a non-empty value.
        optional: Variables read when present.
        model_env: Variable consulted for the model when config leaves it unset.
        api_key_var: Variable that a config-level ``api_key`` stands in for.
    """

    required: Tuple[VarNames, ...] = ()
    optional: Tuple[VarNames, ...] = ()
    model_env: Optional[str] = None
    api_key_var: Optional[str] = None

    def all_names(self) -> Iterable[VarNames]:
        yield from self.required
        yield from self.optional

    def canonical(self, name: str) -> Optional[str]:
        """Canonical name for ``name`` or one of its aliases, else ``None``."""
        for names in self.all_names():
            if name in names:
                return names[0]
        return None


CREDENTIAL_SPECS: Dict[str, CredentialSpec] = {
    "openai": CredentialSpec(
        required=(("OPENAI_API_KEY",),),
        optional=(("OPENAI_BASE_URL",), ("OPENAI_ORGANIZATION",)),
        model_env="OPENAI_MODEL",
        api_key_var="OPENAI_API_KEY",
    ),
    "azure_openai": CredentialSpec(
        required=(("AZURE_OPENAI_API_KEY",), ("AZURE_OPENAI_ENDPOINT",)),
        optional=(("OPENAI_API_VERSION", "AZURE_OPENAI_API_VERSION"),),
        model_env="AZURE_OPENAI_DEPLOYMENT",
        api_key_var="AZURE_OPENAI_API_KEY",
    ),
    "google": CredentialSpec(
        required=(("GOOGLE_API_KEY", "GEMINI_API_KEY"),),
        model_env="GOOGLE_MODEL",
        api_key_var="GOOGLE_API_KEY",
    ),
    "anthropic": CredentialSpec(
        required=(("ANTHROPIC_API_KEY",),),
        model_env="ANTHROPIC_MODEL",
        api_key_var="ANTHROPIC_API_KEY",
    ),
    "cohere": CredentialSpec(
        required=(("COHERE_API_KEY", "CO_API_KEY"),),
        model_env="COHERE_MODEL",
        api_key_var="COHERE_API_KEY",
    ),
    "together": CredentialSpec(
        required=(("TOGETHER_API_KEY",),),
        model_env="TOGETHER_MODEL",
        api_key_var="TOGETHER_API_KEY",
    ),
    "ollama": CredentialSpec(
        optional=(("OLLAMA_HOST",),),
        model_env="OLLAMA_MODEL",
    ),
    "vllm": CredentialSpec(
        optional=(("VLLM_API_KEY",), ("VLLM_BASE_URL",)),
        model_env="VLLM_MODEL",
        api_key_var="VLLM_API_KEY",
    ),
    "gpt4all": CredentialSpec(
        optional=(("GPT4ALL_BASE_URL",),),
        model_env="GPT4ALL_MODEL",
    ),
    "jina": CredentialSpec(
        required=(("JINACHAT_API_KEY",),),
        api_key_var="JINACHAT_API_KEY",
    ),
    "huggingface": CredentialSpec(
        required=(("HUGGINGFACE_ACCESS_TOKEN", "HF_TOKEN"),),
        model_env="HUGGINGFACE_MODEL",
        api_key_var="HUGGINGFACE_ACCESS_TOKEN",
    ),
    "llama2": CredentialSpec(
        required=(("REPLICATE_API_TOKEN",),),
        api_key_var="REPLICATE_API_TOKEN",
    ),
    "vertexai": CredentialSpec(
        required=(("GOOGLE_CLOUD_PROJECT",), ("VERTEXAI_ACCESS_TOKEN",)),
        optional=(("VERTEXAI_LOCATION", "GOOGLE_CLOUD_REGION"),),
        model_env="VERTEXAI_MODEL",
        api_key_var="VERTEXAI_ACCESS_TOKEN",
    ),
    "mistralai": CredentialSpec(
        required=(("MISTRAL_API_KEY",),),
        model_env="MISTRAL_MODEL",
        api_key_var="MISTRAL_API_KEY",
    ),
    "aws_bedrock": CredentialSpec(
        required=(("AWS_ACCESS_KEY_ID",), ("AWS_SECRET_ACCESS_KEY",)),
        optional=(("AWS_REGION", "AWS_DEFAULT_REGION"), ("AWS_SESSION_TOKEN",)),
        model_env="AWS_BEDROCK_MODEL",
    ),
}


def get_credential_spec(provider: str) -> CredentialSpec:
    """Return the spec for ``provider`` (empty spec when it needs nothing)."""
    return CREDENTIAL_SPECS.get((provider or "").lower(), CredentialSpec())


def required_variable_names(provider: str) -> Tuple[str, ...]:
    """Canonical names of the variables ``provider`` requires."""
    return tuple(names[0] for names in get_credential_spec(provider).required)


__all__ = [
    "CREDENTIAL_SPECS",
    "CredentialSpec",
    "VarNames",
    "get_credential_spec",
    "required_variable_names",
]
