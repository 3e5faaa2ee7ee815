"""Command-line entry point (``rag-providers`` / ``python -m rag_providers``).

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ..base.logging import configure_logger
from .cli_actions import handle_providers, handle_run
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, 1 provider error, 2 configuration error).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.log_level:
        configure_logger(level=args.log_level)
    if args.cmd == "providers":
        return handle_providers()
    if args.cmd == "run":
        return handle_run(args)
    p.print_help()
    return 2


__all__ = ["main"]
