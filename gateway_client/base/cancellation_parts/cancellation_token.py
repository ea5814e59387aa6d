"""Cooperative cancellation token.

A caller hands a ``CancellationToken`` to the stream controller and may
cancel it from any thread. The controller checks it at every step of the
session loop and also registers a hook that closes the transport, so a read
blocked on the socket returns at once instead of at the next chunk.
"""

from __future__ import annotations

from contextlib import suppress
from threading import Lock
from typing import Callable, Optional

from .cancelled_error import CancelledError
from .state import State

CancelHook = Callable[[Optional[str]], None]


class CancellationToken:
    """Thread-safe, one-shot cancellation flag with hooks."""

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()

    @property
    def cancelled(self) -> bool:
        return self._state.cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._state.reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Set the flag and run the registered hooks.

        Only the first call has an effect; it returns ``True``, later calls
        return ``False``. A hook that raises does not stop the others.
        """
        with self._lock:
            if self._state.cancelled:
                return False
            self._state.cancelled = True
            self._state.reason = reason
            hooks, self._state.hooks = self._state.hooks, []
        for hook in hooks:
            with suppress(Exception):
                hook(reason)
        return True

    def on_cancel(self, hook: CancelHook) -> Callable[[], None]:
        """Run ``hook(reason)`` on cancellation; immediately if already cancelled.

        Returns a function that removes the hook again.
        """
        with self._lock:
            fire_now = self._state.cancelled
            if not fire_now:
                self._state.hooks.append(hook)
        if fire_now:
            with suppress(Exception):
                hook(self._state.reason)

        def _remove() -> None:
            with self._lock, suppress(ValueError):
                self._state.hooks.remove(hook)

        return _remove

    def raise_if_cancelled(self) -> None:
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "stream cancelled")

    def __repr__(self) -> str:  # pragma: no cover
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancelHook", "CancellationToken"]
