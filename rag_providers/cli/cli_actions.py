"""Subcommand handlers for the ``rag-providers`` CLI.

Error semantics:
    - Configuration and credential problems (``AuthenticationError``,
      ``UnsupportedParameterError``, unknown provider) print a JSON hint to
      stderr and return 2.
    - Any other ``ProviderError`` prints a JSON error to stderr and returns 1.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Optional, TextIO

from ..base.errors import AuthenticationError, ProviderError, UnknownProviderError, UnsupportedParameterError
from ..base.facade import CompletionFacade
from ..base.models import CompletionRequest, ProviderConfig
from ..base.registry import AdapterRegistry
from ..base.streaming import TextStream
from ..config import load_provider_config
from ..config.credentials import CredentialSource
from ..config.env import get_credential_spec

EXIT_OK = 0
EXIT_PROVIDER_ERROR = 1
EXIT_CONFIG_ERROR = 2


def handle_providers(out: Optional[TextIO] = None) -> int:
    """Print one JSON object per provider: identifier, required and optional variables."""
    out = out or sys.stdout
    for provider in AdapterRegistry.supported():
        spec = get_credential_spec(provider)
        row = {
            "provider": provider,
            "required": [" | ".join(names) for names in spec.required],
            "optional": [" | ".join(names) for names in spec.optional],
        }
        out.write(json.dumps(row) + "\n")
    return EXIT_OK


def _config_from_args(args: argparse.Namespace) -> ProviderConfig:
    overrides: Dict[str, Any] = {}
    if args.model:
        overrides["model"] = args.model
    if args.stream:
        overrides["stream"] = True
    if args.config:
        return load_provider_config(args.config, overrides=overrides)
    return ProviderConfig.from_record({"provider": args.provider, "config": overrides})


def _hint(err: ProviderError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": err.code.value, "provider": err.provider, "message": err.message}
    if isinstance(err, AuthenticationError):
        body["hint"] = "set the missing credential variable(s) and retry"
    elif isinstance(err, UnsupportedParameterError):
        body["parameter"] = err.parameter
        body["hint"] = "remove or change the parameter for this provider"
    elif isinstance(err, UnknownProviderError):
        body["hint"] = "one of: " + ", ".join(AdapterRegistry.supported())
    return body


def handle_run(
    args: argparse.Namespace,
    *,
    source: Optional[CredentialSource] = None,
    out: Optional[TextIO] = None,
    err_out: Optional[TextIO] = None,
) -> int:
    """Execute one completion described by ``args``."""
    out = out or sys.stdout
    err_out = err_out or sys.stderr
    facade = CompletionFacade(source=source)
    try:
        config = _config_from_args(args)
        result = facade.complete(config, CompletionRequest(prompt=args.prompt, system=args.system))
        if isinstance(result, TextStream):
            with result:
                for fragment in result:
                    out.write(fragment)
                    out.flush()
            out.write("\n")
        elif args.json:
            out.write(json.dumps(result.to_dict(), default=str) + "\n")
        else:
            out.write(result.text + "\n")
    except (AuthenticationError, UnsupportedParameterError, UnknownProviderError) as e:
        err_out.write(json.dumps(_hint(e)) + "\n")
        return EXIT_CONFIG_ERROR
    except ProviderError as e:
        err_out.write(json.dumps(_hint(e)) + "\n")
        return EXIT_PROVIDER_ERROR
    except ValueError as e:
        err_out.write(json.dumps({"error": "invalid_config", "message": str(e)}) + "\n")
        return EXIT_CONFIG_ERROR
    finally:
        facade.clear()
    return EXIT_OK


__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_OK",
    "EXIT_PROVIDER_ERROR",
    "handle_providers",
    "handle_run",
]
