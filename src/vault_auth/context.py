"""Cancellation and deadline carrier threaded through every auth call."""

from __future__ import annotations

import threading
import time

from vault_auth.errors import AuthCancelledError, AuthTimeoutError


class Context:
    """A cancellable operation scope with an optional deadline.

    ``Context()`` never expires.  ``Context(timeout=5)`` expires five seconds
    after creation.  ``cancel()`` may be called from another thread.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_done(self) -> None:
        if self.cancelled:
            raise AuthCancelledError("operation cancelled")
        if self.expired:
            raise AuthTimeoutError("operation deadline exceeded")
