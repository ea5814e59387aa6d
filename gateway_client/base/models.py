"""
Domain models public surface.

Re-exports the one-class-per-file implementations under
``gateway_client.base.models_parts``.
"""

from .models_parts.message import Message, Role
from .models_parts.chat_request import ChatRequest
from .models_parts.usage_report import UsageReport
from .models_parts.model_descriptor import ModelDescriptor
from .models_parts.quota_status import QuotaStatus

__all__ = [
    "Message",
    "Role",
    "ChatRequest",
    "UsageReport",
    "ModelDescriptor",
    "QuotaStatus",
]
