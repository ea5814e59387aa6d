"""One-class-per-file model implementations; import from ``base.models``."""

from .message import Message, Role
from .chat_request import ChatRequest
from .usage_report import UsageReport
from .model_descriptor import ModelDescriptor
from .quota_status import QuotaStatus

__all__ = [
    "Message",
    "Role",
    "ChatRequest",
    "UsageReport",
    "ModelDescriptor",
    "QuotaStatus",
]
