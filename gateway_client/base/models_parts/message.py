"""
Message value used in chat requests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """A role-tagged chat message with plain text content."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


__all__ = ["Message", "Role"]
