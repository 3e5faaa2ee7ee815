"""Single entry point that turns any function descriptor into a ``FunctionSpec``.

Accepted shapes:

(a) a ``pydantic.BaseModel`` subclass: the name is ``__function_name__`` when
    defined, else the class name; the description is the class docstring;
    fields become parameters;
(b) a raw mapping ``{"name", "description", "parameters"}``, optionally
    wrapped in OpenAI's ``{"type": "function", "function": {...}}``;
(c) a plain callable (see :mod:`.introspect`).

Shapes (a) and (c) are reduced to a JSON schema first; all three then pass
through :func:`normalize_schema`, so the same logical function produces the
same ``wire_bytes()`` regardless of how it was described.
"""
from __future__ import annotations

import inspect
from typing import Any, Iterable, List, Mapping, Optional, Type

from pydantic import BaseModel

from .introspect import docstring_summary, model_from_callable
from .schema import FunctionSpec, normalize_schema


def _from_model(model: Type[BaseModel], name: Optional[str] = None, description: Optional[str] = None) -> FunctionSpec:
    schema = model.model_json_schema()
    fn_name = name or getattr(model, "__function_name__", None) or model.__name__
    if description is None:
        # pydantic copies the class docstring into the schema description
        doc = model.__doc__ if model.__doc__ != BaseModel.__doc__ else None
        description = docstring_summary(doc) or schema.get("description", "")
    return FunctionSpec(name=fn_name, description=description, parameters=normalize_schema(schema))


def _from_mapping(raw: Mapping[str, Any]) -> FunctionSpec:
    if raw.get("type") == "function" and isinstance(raw.get("function"), Mapping):
        raw = raw["function"]
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("function descriptor requires a non-empty 'name'")
    params = raw.get("parameters")
    if params is None:
        params = raw.get("input_schema")
    return FunctionSpec(
        name=name.strip(),
        description=str(raw.get("description") or "").strip(),
        parameters=normalize_schema(params),
    )


def normalize_function(descriptor: Any) -> FunctionSpec:
    """Normalize one function descriptor of any accepted shape."""
    if isinstance(descriptor, FunctionSpec):
        return descriptor
    if inspect.isclass(descriptor) and issubclass(descriptor, BaseModel):
        return _from_model(descriptor)
    if isinstance(descriptor, Mapping):
        return _from_mapping(descriptor)
    if callable(descriptor) and not inspect.isclass(descriptor):
        name, description, model = model_from_callable(descriptor)
        return _from_model(model, name=name, description=description)
    raise TypeError(
        "function descriptors must be a pydantic model class, a JSON schema mapping, "
        f"or a callable; got {type(descriptor).__name__}"
    )


def normalize_functions(descriptors: Optional[Iterable[Any]]) -> List[FunctionSpec]:
    """Normalize a list of descriptors; duplicate names are rejected."""
    specs = [normalize_function(d) for d in descriptors or ()]
    seen = set()
    for spec in specs:
        if spec.name in seen:
            raise ValueError(f"duplicate function name: {spec.name}")
        seen.add(spec.name)
    return specs


__all__ = ["normalize_function", "normalize_functions"]
