"""Gateway debugging CLI (package entrypoint).

Wires argument parsing to action handlers; performs no streaming logic
directly.
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from .cli_actions import handle_chat, handle_models, handle_quota, handle_seed
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
        Process exit code (see ``cli_actions``).
    """
    p = build_parser()
    try:
        args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as exc:  # argparse exits 2 on usage errors, 0 on --help
        return int(exc.code or 0)

    if args.log_level or args.log_file:
        configure_logger(level=args.log_level, file_path=args.log_file)

    if args.cmd == "chat":
        return handle_chat(args)
    if args.cmd == "models":
        return handle_models(args)
    if args.cmd == "quota":
        return handle_quota(args)
    return handle_seed(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
