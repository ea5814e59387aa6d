"""Per-session streaming metrics.

Collected by the controller while a stream runs and written once, in the
terminal log event.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models import UsageReport


@dataclass
class StreamMetrics:
    """Counters and timings for one stream session.

    Attributes:
        emitted: Number of content deltas delivered to ``on_update``.
        chunks: Network chunks read.
        bytes_received: Total body bytes read.
        malformed_frames: Frames skipped because they could not be parsed.
        time_to_first_token_ms: Delay from open to the first delta.
        total_duration_ms: Delay from open to the terminal signal.
        usage: Last usage report seen, if any.
    """

    emitted: int = 0
    chunks: int = 0
    bytes_received: int = 0
    malformed_frames: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    usage: Optional[UsageReport] = None


def build_token_usage(usage: Optional[UsageReport]) -> Optional[Dict[str, Optional[int]]]:
    """Return the canonical ``{prompt, completion, total}`` mapping for logs."""
    if usage is None:
        return None
    return {
        "prompt": usage.prompt_tokens,
        "completion": usage.completion_tokens,
        "total": usage.total_tokens,
    }


__all__ = ["StreamMetrics", "build_token_usage"]
