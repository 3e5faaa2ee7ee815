"""Callable introspection for function descriptors.

Turns a plain Python function into a pydantic model so it can share the
schema path used by model-class descriptors:

- the name is ``func.__name__``;
- the description is the docstring text before the first section header;
- parameter types come from the annotations (unannotated means ``Any``);
- parameter descriptions come from a Google-style ``Args:`` section;
- parameters without a default are required.

``*args``/``**kwargs`` cannot be expressed as a JSON schema object and are
rejected.
"""
from __future__ import annotations

import inspect
import re
import typing
from typing import Any, Callable, Dict, Tuple, Type

from pydantic import BaseModel, Field, create_model

_SECTION_RE = re.compile(r"^(Args|Arguments|Parameters|Params|Returns|Return|Yields|Raises|Examples?|Notes?)\s*:\s*$")
_ARG_RE = re.compile(r"^(\*{0,2}\w+)\s*(\([^)]*\))?\s*:\s*(.*)$")
_ARGS_HEADERS = frozenset({"Args", "Arguments", "Parameters", "Params"})


def docstring_summary(doc: str | None) -> str:
    """Text preceding the first Google-style section header, whitespace-collapsed."""
    if not doc:
        return ""
    lines = []
    for line in inspect.cleandoc(doc).splitlines():
        if _SECTION_RE.match(line.strip()):
            break
        lines.append(line.strip())
    return " ".join(part for part in lines if part).strip()


def docstring_arg_descriptions(doc: str | None) -> Dict[str, str]:
    """Parse ``name (type): description`` entries of the ``Args:`` section."""
    if not doc:
        return {}
    out: Dict[str, str] = {}
    in_args = False
    current: str | None = None
    arg_indent = 0
    for raw in inspect.cleandoc(doc).splitlines():
        stripped = raw.strip()
        header = _SECTION_RE.match(stripped)
        if header and not raw.startswith((" ", "\t")):
            in_args = header.group(1) in _ARGS_HEADERS
            current = None
            continue
        if not in_args or not stripped:
            continue
        match = _ARG_RE.match(stripped)
        indent = len(raw) - len(raw.lstrip())
        if match and (current is None or indent <= arg_indent):
            current = match.group(1).lstrip("*")
            arg_indent = indent
            out[current] = match.group(3).strip()
        elif current is not None:
            out[current] = f"{out[current]} {stripped}".strip()
    return out


def model_from_callable(func: Callable[..., Any]) -> Tuple[str, str, Type[BaseModel]]:
    """Return ``(name, description, model)`` for ``func``."""
    name = getattr(func, "__name__", None)
    if not name or name == "<lambda>":
        raise ValueError("function descriptors must be named functions")
    sig = inspect.signature(func)
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError):
        hints = {}
    arg_docs = docstring_arg_descriptions(func.__doc__)
    fields: Dict[str, Any] = {}
    for param in sig.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            raise ValueError(f"{name}: variadic parameter '{param.name}' cannot be described")
        if param.name in ("self", "cls"):
            continue
        annotation = hints.get(param.name, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, Field(default, description=arg_docs.get(param.name)))
    model = create_model(name, **fields)
    return name, docstring_summary(func.__doc__), model


__all__ = ["docstring_arg_descriptions", "docstring_summary", "model_from_callable"]
