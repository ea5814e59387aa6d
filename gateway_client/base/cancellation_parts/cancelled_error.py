"""Signal raised inside a session loop once its token is cancelled."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Unwinds a stream session after a cancel request.

    The controller catches it and ends the session as ``CANCELLED``. It is
    never delivered through ``on_error``.
    """


__all__ = ["CancelledError"]
