"""Mutable state behind a ``CancellationToken``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional


@dataclass
class State:
    cancelled: bool = False
    reason: Optional[str] = None
    hooks: List[Callable[[Optional[str]], None]] = field(default_factory=list)


__all__ = ["State"]
