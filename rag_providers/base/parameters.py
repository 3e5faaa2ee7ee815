"""Per-provider parameter mapping tables.

Each adapter declares, for every sampling parameter, one rule:

- ``wire("name")``: send the value under ``name``. Dotted names place the value
  in a nested object (``"generationConfig.topK"``, ``"options.num_predict"``,
  ``"extra_body.top_k"``);
- ``DROP``: the provider has no equivalent; the value is dropped and a
  ``param.dropped`` debug event is logged;
- ``REJECT``: the value cannot be honoured; construction fails with
  ``UnsupportedParameterError``.

A parameter missing from the table is rejected. ``extra`` keys must be listed
in the adapter's ``EXTRA_PARAMS`` allow-list (config key → wire name); any
other key is rejected. Mapping happens once, at adapter construction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, MutableMapping, Tuple

from .errors import UnsupportedParameterError
from .logging import LogContext, normalized_log_event
from .models import ProviderConfig


class Capability(str, Enum):
    """Features an adapter may support."""

    GENERATE = "generate"
    STREAM = "stream"
    FUNCTION_CALL = "function_call"


@dataclass(frozen=True)
class ParamRule:
    action: str
    wire: str | None = None


def wire(name: str) -> ParamRule:
    return ParamRule("send", name)


DROP = ParamRule("drop")
REJECT = ParamRule("reject")


@dataclass(frozen=True)
class MappedParams:
    """Result of applying a mapping table to a ``ProviderConfig``.

    ``values`` maps (possibly dotted) wire names to values, sampling
    parameters first, then allow-listed extras.
    """

    values: Dict[str, Any] = field(default_factory=dict)
    dropped: Tuple[str, ...] = ()

    def apply(self, target: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Write every mapped value into ``target`` (nested for dotted names)."""
        for name, value in self.values.items():
            assign_wire(target, name, value)
        return target


def assign_wire(target: MutableMapping[str, Any], name: str, value: Any) -> None:
    """Set ``target[a][b] = value`` for ``name == "a.b"``, creating objects."""
    *parents, leaf = name.split(".")
    node = target
    for part in parents:
        child = node.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            node[part] = child
        node = child
    node[leaf] = value


def map_parameters(
    config: ProviderConfig,
    *,
    parameter_map: Mapping[str, ParamRule],
    extra_params: Mapping[str, str],
    logger: logging.Logger,
    model: str | None = None,
) -> MappedParams:
    """Validate ``config`` against an adapter's tables and return wire values."""
    provider = config.provider
    values: Dict[str, Any] = {}
    dropped = []
    for name, value in config.sampling().items():
        rule = parameter_map.get(name, REJECT)
        if rule.action == "send" and rule.wire:
            values[rule.wire] = value
        elif rule.action == "drop":
            dropped.append(name)
            normalized_log_event(
                logger,
                "param.dropped",
                LogContext(provider=provider, model=model),
                phase="init",
                level=logging.DEBUG,
                parameter=name,
            )
        else:
            raise UnsupportedParameterError(
                message=f"parameter '{name}' is not supported by {provider}",
                provider=provider,
                model=model,
                parameter=name,
            )
    for key, value in config.extra.items():
        wire_name = extra_params.get(key)
        if wire_name is None:
            raise UnsupportedParameterError(
                message=f"extra parameter '{key}' is not supported by {provider}",
                provider=provider,
                model=model,
                parameter=key,
            )
        values[wire_name] = value
    return MappedParams(values=values, dropped=tuple(dropped))


__all__ = [
    "Capability",
    "DROP",
    "MappedParams",
    "ParamRule",
    "REJECT",
    "assign_wire",
    "map_parameters",
    "wire",
]
