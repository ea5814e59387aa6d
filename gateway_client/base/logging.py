"""Structured logging for the gateway client.

Every module logs through a child of the shared ``gateway_client`` logger,
which owns exactly one console handler (JSON lines on stderr by default) and
does not propagate to the root logger. Events are emitted with ``log_event``
or ``normalized_log_event`` so that each line is a single JSON object:

    {"ts": ..., "level": "INFO", "logger": "gateway_client.base.streaming...",
     "event": "stream.session.end", "session_id": ..., "phase": "finalize", ...}

``normalized_log_event`` always carries the canonical keys listed in
``REQUIRED_NORMALIZED_KEYS`` (``error_code`` only when there is one).
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterator, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "gateway_client"
LOG_LEVEL_ENV = "GATEWAY_LOG_LEVEL"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_READY_FLAG = "_gateway_ready"
_CONSOLE_FLAG = "_gateway_console"
_FILE_FLAG = "_gateway_file"


def _level_from_name(name: Optional[str], fallback: int) -> int:
    """``"debug"`` -> ``logging.DEBUG``; blank or unknown names give ``fallback``."""
    if not name or not name.strip():
        return fallback
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else fallback


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _console_handlers(logger: logging.Logger) -> Iterator[logging.Handler]:
    return (h for h in logger.handlers if getattr(h, _CONSOLE_FLAG, False))


def _refresh_console(handler: logging.Handler, json_mode: bool) -> None:
    # pytest's capsys swaps sys.stderr per test; follow it.
    if isinstance(handler, logging.StreamHandler) and handler.stream is not sys.stderr:
        try:
            handler.setStream(sys.stderr)
        except ValueError:
            handler.stream = sys.stderr
    if json_mode != isinstance(handler.formatter, JsonFormatter):
        handler.setFormatter(_make_formatter(json_mode))


def _base_logger(json_mode: bool, level: int) -> logging.Logger:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = os.getenv(LOG_LEVEL_ENV)
    if not getattr(logger, _READY_FLAG, False):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_make_formatter(json_mode))
        setattr(console, _CONSOLE_FLAG, True)
        logger.handlers[:] = [console]
        logger.setLevel(_level_from_name(env_level, level))
        logger.propagate = False
        setattr(logger, _READY_FLAG, True)
        return logger
    if env_level:
        logger.setLevel(_level_from_name(env_level, logger.level))
    for handler in _console_handlers(logger):
        _refresh_console(handler, json_mode)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the base logger, or a handler-less child of it.

    Names outside the ``gateway_client`` namespace are prefixed so that
    every logger funnels into the single base handler.
    """
    base = _base_logger(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return base
    if not name.startswith(f"{BASE_LOGGER_NAME}."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level, numeric or by name. ``None`` leaves the level alone.
    file_path: Optional[str]
        Path of a rotating log file to write to. ``None`` detaches the file
        handler installed by an earlier call. Handlers added by other code
        are never touched.
    json_mode: bool
        Formatter for the file handler.
    """
    logger = get_logger(json_mode=json_mode)
    if level is not None:
        logger.setLevel(_level_from_name(level, logger.level) if isinstance(level, str) else level)
        for handler in logger.handlers:
            handler.setLevel(logger.level)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for handler in [h for h in logger.handlers if getattr(h, _FILE_FLAG, False)]:
        if target is not None and getattr(handler, "baseFilename", None) == target:
            handler.setFormatter(_make_formatter(json_mode))
            return logger
        logger.removeHandler(handler)
        with contextlib.suppress(OSError):
            handler.close()
    if target is None:
        return logger

    os.makedirs(os.path.dirname(target), exist_ok=True)
    file_handler = RotatingFileHandler(
        target, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    file_handler.setLevel(logger.level)
    file_handler.setFormatter(_make_formatter(json_mode))
    setattr(file_handler, _FILE_FLAG, True)
    logger.addHandler(file_handler)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as one JSON object.

    ``ctx`` fields come first, then ``fields``. ``None`` values are dropped
    unless ``keep_none`` is set. Values that are not JSON-native are
    stringified.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    for key, value in fields.items():
        if value is not None or keep_none:
            payload[key] = value
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "attempt", "error_code", "emitted", "tokens")


def _tokens_payload(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    to_dict = getattr(tokens, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """``log_event`` with the canonical keys always present.

    Unknown canonical values are written as ``null``; ``error_code`` is left
    out entirely when there is no error. Extra fields cannot overwrite a
    canonical key that has a value.
    """
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _tokens_payload(tokens),
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is None or fields.get(key) is not None:
            continue
        fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
