"""Pytest configuration for the gateway client test suite.

Every test starts from a clean configuration: ``GATEWAY_*`` variables are
removed and cached config files forgotten, so the developer's shell cannot
leak into assertions.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterator, List

import pytest

from gateway_client.base.logging import BASE_LOGGER_NAME, get_logger
from gateway_client.config import clear_config_cache


class _RecordingHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class LogCapture:
    """Structured view over records emitted on the ``gateway_client`` logger."""

    def __init__(self, handler: _RecordingHandler) -> None:
        self._handler = handler

    @property
    def records(self) -> List[logging.LogRecord]:
        return self._handler.records

    def events(self, name: str | None = None) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for record in self._handler.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if not isinstance(payload, dict):
                continue
            payload["_level"] = record.levelno
            if name is None or payload.get("event") == name:
                out.append(payload)
        return out


@pytest.fixture(autouse=True)
def clean_gateway_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove ``GATEWAY_*`` env vars and config caches for the duration of a test."""

    for name in list(os.environ):
        if name.startswith("GATEWAY_"):
            monkeypatch.delenv(name, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture()
def log_capture() -> Iterator[LogCapture]:
    """Attach a recording handler to the shared logger at DEBUG level."""

    base = get_logger(BASE_LOGGER_NAME)
    handler = _RecordingHandler()
    previous = base.level
    base.setLevel(logging.DEBUG)
    base.addHandler(handler)
    try:
        yield LogCapture(handler)
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)


@pytest.fixture()
def uow():
    """A fresh in-memory access database with the schema applied."""

    from gateway_client.persistence.sqlite import MEMORY_DB, get_uow

    unit = get_uow(MEMORY_DB)
    try:
        yield unit
    finally:
        unit.close()
