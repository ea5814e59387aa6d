"""Caller-facing entry point.

``GatewayClient`` wires configuration, credentials, the HTTP opener and the
stream controller together, and validates caller input before a session is
created.

Example::

    client = GatewayClient.from_config()
    client.stream_chat(
        "gpt-4o-mini",
        [{"role": "user", "content": "hello"}],
        on_update=lambda text: print(text, end=""),
        on_finish=lambda usage: print(),
        on_error=lambda err: print("error:", err),
    )
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .access import AccessGate, UnknownTierPolicy
from .base.cancellation import CancellationToken
from .base.credentials import EnvCredentialProvider, StaticCredentialProvider
from .base.dto import ChatRequestDTO
from .base.errors import GatewayError, LookupFailure
from .base.http import HttpxStreamOpener
from .base.interfaces import CredentialProvider, StreamOpener
from .base.logging import get_logger
from .base.models import Message, ModelDescriptor, QuotaStatus, UsageReport
from .base.streaming import StreamCallbacks, StreamController, StreamHandle, StreamSession
from .config import get_chat_endpoint, get_gateway_config
from .config.env import is_placeholder

MessageLike = Union[Message, Mapping[str, Any]]


def _message_dict(m: MessageLike) -> Dict[str, Any]:
    return m.to_dict() if isinstance(m, Message) else dict(m)


class GatewayClient:
    """Streams chat completions and answers access questions for one gateway.

    Args:
        credentials: Bearer token source.
        opener: Streaming HTTP opener (httpx-backed by default).
        endpoint: Chat endpoint URL (from config by default).
        access_gate: Optional gate for model/quota lookups.
        logger: Optional logger shared by the controller.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        *,
        opener: Optional[StreamOpener] = None,
        endpoint: Optional[str] = None,
        access_gate: Optional[AccessGate] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._controller = StreamController(
            credentials,
            opener or HttpxStreamOpener(),
            endpoint=endpoint or get_chat_endpoint(),
            logger=logger or get_logger(__name__),
        )
        self._gate = access_gate

    @classmethod
    def from_config(
        cls,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        credentials: Optional[CredentialProvider] = None,
        opener: Optional[StreamOpener] = None,
    ) -> "GatewayClient":
        """Build a client from merged configuration.

        A configured ``access_token`` (file, env or override) becomes a static
        credential; otherwise the environment is consulted per session. An
        access gate is attached when ``db_path`` is configured.
        """
        cfg = get_gateway_config(overrides)
        if credentials is None:
            token = cfg.get("access_token")
            if token and not is_placeholder(token):
                credentials = StaticCredentialProvider(str(token))
            else:
                credentials = EnvCredentialProvider()
        gate = None
        if cfg.get("db_path"):
            # Imported lazily so callers without an access database never touch sqlite.
            from .persistence.sqlite import get_uow

            gate = AccessGate(
                get_uow(str(cfg["db_path"])),
                unknown_tier_policy=UnknownTierPolicy.parse(cfg.get("unknown_tier_policy")),
            )
        return cls(credentials, opener=opener, endpoint=get_chat_endpoint(cfg), access_gate=gate)

    @property
    def controller(self) -> StreamController:
        return self._controller

    def stream_chat(  # noqa: PLR0913
        self,
        model: str,
        messages: Iterable[MessageLike],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        conversation_id: Optional[str] = None,
        on_update: Optional[Callable[[str], None]] = None,
        on_finish: Optional[Callable[[Optional[UsageReport]], None]] = None,
        on_error: Optional[Callable[[GatewayError], None]] = None,
        cancellation_token: Optional[CancellationToken] = None,
        background: bool = False,
    ) -> Union[StreamSession, StreamHandle]:
        """Validate the request and run one stream session.

        Raises ``pydantic.ValidationError`` for invalid input before any
        session exists. Everything after that is reported via the callbacks.
        With ``background=True`` the session runs on a worker thread and a
        :class:`StreamHandle` is returned.
        """
        request = ChatRequestDTO(
            model=model,
            messages=[_message_dict(m) for m in messages],
            temperature=temperature,
            max_tokens=max_tokens,
            conversation_id=conversation_id,
        ).to_request()
        callbacks = StreamCallbacks(on_update=on_update, on_finish=on_finish, on_error=on_error)
        if background:
            return self._controller.open_in_background(request, callbacks, cancellation_token)
        return self._controller.open(request, callbacks, cancellation_token)

    def list_available_models(self, user_id: Optional[str]) -> List[ModelDescriptor]:
        return self._require_gate().list_available_models(user_id)

    def get_quota_status(self, user_id: str) -> Optional[QuotaStatus]:
        return self._require_gate().get_quota_status(user_id)

    def _require_gate(self) -> AccessGate:
        if self._gate is None:
            raise LookupFailure(message="no access database configured (set GATEWAY_DB_PATH)")
        return self._gate


__all__ = ["GatewayClient"]
