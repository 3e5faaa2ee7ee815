"""Canonical function specification and JSON-schema normalization.

``normalize_schema`` rewrites a JSON schema object into the canonical wire
form shared by every descriptor shape:

- ``title`` and ``default`` keywords are removed;
- ``$ref`` pointers into ``$defs`` / ``definitions`` are inlined;
- ``anyOf: [X, {"type": "null"}]`` (an ``Optional[X]``) collapses to ``X``;
- ``required`` is ordered by property declaration order.

Property names are never touched, so a parameter literally called ``title``
survives.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

_DROP_KEYWORDS = frozenset({"title", "default", "$defs", "definitions"})
_SCHEMA_MAP_KEYWORDS = frozenset({"properties", "patternProperties"})
_SCHEMA_KEYWORDS = frozenset({"items", "additionalProperties", "not", "contains"})
_SCHEMA_LIST_KEYWORDS = frozenset({"anyOf", "oneOf", "allOf", "prefixItems"})


@dataclass(frozen=True)
class FunctionSpec:
    """A normalized function the model may call.

    Attributes:
        name: Function name exposed to the model.
        description: One-paragraph description.
        parameters: JSON schema object with ``type``, ``properties`` and
            ``required``.
    """

    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "parameters": self.parameters}

    def wire_bytes(self) -> bytes:
        """Canonical encoding; equal for logically identical functions."""
        return json.dumps(self.to_wire(), sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _resolve_ref(ref: str, defs: Mapping[str, Any]) -> Dict[str, Any]:
    name = ref.rsplit("/", 1)[-1]
    target = defs.get(name)
    if not isinstance(target, Mapping):
        raise ValueError(f"unresolvable schema reference: {ref}")
    return dict(target)


def _is_null(node: Any) -> bool:
    return isinstance(node, Mapping) and node.get("type") == "null" and len(node) == 1


def _normalize_node(node: Any, defs: Mapping[str, Any], seen: tuple) -> Any:
    if not isinstance(node, Mapping):
        return node
    node = dict(node)
    ref = node.pop("$ref", None)
    if isinstance(ref, str):
        if ref in seen:
            raise ValueError(f"recursive schema reference not supported: {ref}")
        merged = _resolve_ref(ref, defs)
        merged.update(node)
        return _normalize_node(merged, defs, seen + (ref,))

    variants = node.get("anyOf")
    if isinstance(variants, list):
        non_null = [v for v in variants if not _is_null(v)]
        if len(non_null) == 1 and len(non_null) != len(variants):
            node.pop("anyOf")
            inner = _normalize_node(non_null[0], defs, seen)
            node = {**inner, **node}

    all_of = node.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1:
        node.pop("allOf")
        inner = _normalize_node(all_of[0], defs, seen)
        node = {**inner, **node}

    out: Dict[str, Any] = {}
    for key, value in node.items():
        if key in _DROP_KEYWORDS:
            continue
        if key in _SCHEMA_MAP_KEYWORDS and isinstance(value, Mapping):
            out[key] = {name: _normalize_node(sub, defs, seen) for name, sub in value.items()}
        elif key in _SCHEMA_KEYWORDS and isinstance(value, Mapping):
            out[key] = _normalize_node(value, defs, seen)
        elif key in _SCHEMA_LIST_KEYWORDS and isinstance(value, list):
            out[key] = [_normalize_node(sub, defs, seen) for sub in value]
        else:
            out[key] = value
    return out


def normalize_schema(schema: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return the canonical parameters object for a function schema."""
    schema = dict(schema or {})
    defs: Dict[str, Any] = {}
    for key in ("definitions", "$defs"):
        if isinstance(schema.get(key), Mapping):
            defs.update(schema[key])
    body = _normalize_node(schema, defs, ())
    body.pop("description", None)
    if body.get("type", "object") != "object":
        raise ValueError("function parameters must be a JSON schema object")
    properties = dict(body.get("properties") or {})
    declared: List[str] = list(body.get("required") or [])
    unknown = [name for name in declared if name not in properties]
    if unknown:
        raise ValueError(f"required parameters without a property: {unknown}")
    body["type"] = "object"
    body["properties"] = properties
    body["required"] = [name for name in properties if name in declared]
    return body


__all__ = ["FunctionSpec", "normalize_schema"]
