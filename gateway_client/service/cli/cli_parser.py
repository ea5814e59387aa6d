"""CLI parser construction for gateway-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse


def _add_db_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db", default=None, help="Access database path (defaults to GATEWAY_DB_PATH)")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``chat``, ``models``, ``quota`` and ``seed`` subcommands.
        No I/O happens here.
    """
    p = argparse.ArgumentParser(prog="gateway-cli", description="Gateway streaming chat debugging CLI")
    p.add_argument("--log-level", default=None, help="Override GATEWAY_LOG_LEVEL (e.g. DEBUG)")
    p.add_argument("--log-file", default=None, help="Also write JSON logs to this rotating file")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_chat = sub.add_parser("chat", help="Stream one chat completion to stdout")
    p_chat.add_argument("--model", required=True)
    p_chat.add_argument("--prompt", required=True)
    p_chat.add_argument("--system", default=None, help="Optional system message")
    p_chat.add_argument("--temperature", type=float, default=None)
    p_chat.add_argument("--max-tokens", type=int, default=None)
    p_chat.add_argument("--conversation-id", default=None)
    p_chat.add_argument("--base-url", default=None, help="Override GATEWAY_BASE_URL")
    p_chat.add_argument("--json", action="store_true", help="Print a JSON summary instead of live text")

    p_models = sub.add_parser("models", help="List models available to a user")
    p_models.add_argument("--user", default=None, help="User id (omitted = anonymous, free tier)")
    _add_db_flag(p_models)

    p_quota = sub.add_parser("quota", help="Show a user's remaining credits")
    p_quota.add_argument("--user", required=True)
    _add_db_flag(p_quota)

    p_seed = sub.add_parser("seed", help="Import models and user tiers from a JSON/YAML file")
    p_seed.add_argument("--file", required=True)
    _add_db_flag(p_seed)

    return p
