"""DTO validation package."""

from .catalog import ModelDescriptorDTO, UserTierDTO
from .chat import ChatRequestDTO, MessageDTO, Role
from .usage import UsageCountsDTO

__all__ = [
    "Role",
    "MessageDTO",
    "ChatRequestDTO",
    "UsageCountsDTO",
    "ModelDescriptorDTO",
    "UserTierDTO",
]
