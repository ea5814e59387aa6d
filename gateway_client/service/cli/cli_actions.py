"""CLI action handlers for gateway-cli.

Purpose
-------
Subcommand handlers kept apart from the parser so they can be unit tested
with injected clients. No top-level side effects.

Exit codes
----------
``0`` success, ``1`` stream or lookup error, ``2`` usage error (invalid
arguments, missing database), ``130`` interrupted by the user.

Errors are printed as JSON objects to stderr; results go to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ...access import AccessGate, UnknownTierPolicy
from ...base.errors import GatewayError
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.models import UsageReport
from ...client import GatewayClient
from ...config import get_gateway_config
from ...persistence.sqlite import UnitOfWorkSqlite, get_uow, import_seed_data

ClientFactory = Callable[[Dict[str, Any]], GatewayClient]


def _print_error(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, default=str), file=sys.stderr)


def _default_client_factory(overrides: Dict[str, Any]) -> GatewayClient:
    return GatewayClient.from_config(overrides)


def handle_chat(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    """Stream one completion; deltas are printed as they arrive unless ``--json``.

    Ctrl-C cancels the session: the transport is closed and no further
    output is produced.
    """
    client = (client_factory or _default_client_factory)({"base_url": args.base_url})
    messages: List[Dict[str, str]] = []
    if args.system:
        messages.append({"role": "system", "content": args.system})
    messages.append({"role": "user", "content": args.prompt})

    logger = get_logger("gateway_client.cli")
    ctx = LogContext(model=args.model, conversation_id=args.conversation_id)
    parts: List[str] = []
    outcome: Dict[str, Any] = {}

    def on_update(text: str) -> None:
        parts.append(text)
        if not args.json:
            sys.stdout.write(text)
            sys.stdout.flush()

    def on_finish(usage: Optional[UsageReport]) -> None:
        outcome["usage"] = usage

    def on_error(err: GatewayError) -> None:
        outcome["error"] = err

    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=1)
    try:
        handle = client.stream_chat(
            args.model,
            messages,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            conversation_id=args.conversation_id,
            on_update=on_update,
            on_finish=on_finish,
            on_error=on_error,
            background=True,
        )
    except ValidationError as exc:
        _print_error({"error": "invalid request", "details": exc.errors(include_url=False)})
        return 2

    try:
        while not handle.join(0.1):
            pass
    except KeyboardInterrupt:
        handle.cancel("interrupted")
        handle.join()
        _print_error({"error": "interrupted"})
        return 130

    if "error" in outcome:
        err: GatewayError = outcome["error"]
        normalized_log_event(
            logger, "cli.error", ctx, phase="finalize", emitted=bool(parts), error_code=err.code.value, level=logging.ERROR
        )
        if parts and not args.json:
            sys.stdout.write("\n")
        _print_error({"error": err.message, "code": err.code.value, "status_code": err.status_code})
        return 1

    usage: Optional[UsageReport] = outcome.get("usage")
    normalized_log_event(logger, "cli.finalize", ctx, phase="finalize", emitted=bool(parts), tokens=usage)
    if args.json:
        print(
            json.dumps(
                {
                    "model": args.model,
                    "text": "".join(parts),
                    "usage": usage.to_dict() if usage else None,
                    "session_id": handle.session.session_id,
                }
            )
        )
    else:
        sys.stdout.write("\n")
    return 0


def _open_uow(db: Optional[str]) -> Tuple[Optional[UnitOfWorkSqlite], Dict[str, Any]]:
    cfg = get_gateway_config({"db_path": db})
    if not cfg.get("db_path"):
        _print_error({"error": "no access database; pass --db or set GATEWAY_DB_PATH"})
        return None, cfg
    return get_uow(str(cfg["db_path"])), cfg


def _open_gate(db: Optional[str]) -> Tuple[Optional[UnitOfWorkSqlite], Optional[AccessGate]]:
    """Open the access database and a gate on it; ``(None, None)`` on a usage error."""
    cfg = get_gateway_config({"db_path": db})
    try:
        policy = UnknownTierPolicy.parse(cfg.get("unknown_tier_policy"))
    except ValueError:
        _print_error(
            {
                "error": "invalid unknown_tier_policy; expected 'permissive' or 'restrictive'",
                "value": cfg.get("unknown_tier_policy"),
            }
        )
        return None, None
    uow, _cfg = _open_uow(db)
    if uow is None:
        return None, None
    return uow, AccessGate(uow, unknown_tier_policy=policy)


def handle_models(args: argparse.Namespace) -> int:
    """Print the models available to ``--user`` as a JSON list."""
    uow, gate = _open_gate(args.db)
    if uow is None or gate is None:
        return 2
    try:
        models = gate.list_available_models(args.user)
    finally:
        uow.close()
    print(json.dumps([m.to_dict() for m in models]))
    return 0


def handle_quota(args: argparse.Namespace) -> int:
    """Print the quota of ``--user`` as JSON; exit 1 when it cannot be determined."""
    uow, gate = _open_gate(args.db)
    if uow is None or gate is None:
        return 2
    try:
        status = gate.get_quota_status(args.user)
    finally:
        uow.close()
    if status is None:
        _print_error({"error": f"quota unavailable for user '{args.user}'"})
        return 1
    print(json.dumps(status.to_dict()))
    return 0


def handle_seed(args: argparse.Namespace) -> int:
    """Import a seed document into the access database."""
    uow, _cfg = _open_uow(args.db)
    if uow is None:
        return 2
    try:
        counts = import_seed_data(uow, args.file)
    except (OSError, ValueError) as exc:
        # pydantic.ValidationError is a ValueError
        _print_error({"error": f"seed import failed: {exc}"})
        return 1
    finally:
        uow.close()
    print(json.dumps(counts))
    return 0
