"""CLI parser construction for ``rag-providers``.

Wires subparsers only; handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``providers`` and ``run`` subcommands.

    No I/O happens here.
    """
    p = argparse.ArgumentParser(
        prog="rag-providers",
        description="Run a completion through any configured LLM provider",
    )
    p.add_argument("--log-level", default=None, help="override RAG_PROVIDERS_LOG_LEVEL")
    sub = p.add_subparsers(dest="cmd")

    sub.add_parser("providers", help="List provider identifiers and their credential variables")

    p_run = sub.add_parser("run", help="Execute a single completion")
    src = p_run.add_mutually_exclusive_group(required=True)
    src.add_argument("--config", help="JSON or YAML file with an 'llm' record")
    src.add_argument("--provider", help="provider identifier, e.g. openai")
    p_run.add_argument("--model", default=None)
    p_run.add_argument("--prompt", required=True)
    p_run.add_argument("--system", default=None)
    p_run.add_argument("--stream", action="store_true", help="print fragments as they arrive")
    p_run.add_argument("--json", action="store_true", help="print the completion as JSON")
    return p


__all__ = ["build_parser"]
