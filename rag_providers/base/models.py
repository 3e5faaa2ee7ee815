"""Core data models for the adapter layer.

Re-exports the one-class-per-file implementations in ``models_parts``.
"""

from .models_parts.completion import Completion
from .models_parts.completion_request import CompletionRequest
from .models_parts.embedder_config import EmbedderConfig
from .models_parts.function_call import FunctionCall
from .models_parts.provider_config import SAMPLING_PARAMS, ProviderConfig
from .models_parts.provider_metadata import ProviderMetadata

__all__ = [
    "Completion",
    "CompletionRequest",
    "EmbedderConfig",
    "FunctionCall",
    "ProviderConfig",
    "ProviderMetadata",
    "SAMPLING_PARAMS",
]
