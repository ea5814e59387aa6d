"""
Token usage reported by the gateway at the end of a stream.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class UsageReport:
    """Final token accounting for one stream.

    Attributes:
        prompt_tokens: Tokens consumed by the request messages.
        completion_tokens: Tokens generated by the model.
        total_tokens: Gateway-reported total (prompt + completion when the
            gateway omitted it).
    """

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


__all__ = ["UsageReport"]
