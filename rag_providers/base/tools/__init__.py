"""Function-calling support: descriptor normalization and call decoding."""

from .calls import decode_arguments, make_call
from .introspect import model_from_callable
from .normalize import normalize_function, normalize_functions
from .schema import FunctionSpec, normalize_schema

__all__ = [
    "FunctionSpec",
    "decode_arguments",
    "make_call",
    "model_from_callable",
    "normalize_function",
    "normalize_functions",
    "normalize_schema",
]
