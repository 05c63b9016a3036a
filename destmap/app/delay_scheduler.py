"""Scheduler helper that owns deferred UI callbacks.

The runtime passes ``schedule`` and ``cancel`` callables into this class
(NiceGUI one-shot timers in the web page, ``threading.Timer`` elsewhere) so
pending callbacks are tracked in one place and replaced or canceled safely.
"""

from __future__ import annotations


import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


ScheduleFn = Callable[[int, Callable[[], None]], Any]
CancelFn = Callable[[Any], None]


@dataclass
class DelayHandle:
    """Timer token associated with a single callback channel.

    Attributes:
        key: Channel key (for example ``upload-complete``).
        token: Token returned by the underlying scheduler implementation.
    """
    key: str
    token: Any


class DelayScheduler:
    """Manage keyed one-shot timers using a pluggable scheduler."""

    def __init__(self, schedule: ScheduleFn, cancel: CancelFn) -> None:
        """Store schedule/cancel functions and initialize handle registry.

        Args:
            schedule: Function compatible with ``after(delay_ms, callback)``.
            cancel: Function that stops the token returned by ``schedule``.
        """
        self._schedule = schedule
        self._cancel = cancel
        self._handles: Dict[str, DelayHandle] = {}

    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` on ``key``, replacing any pending one.

        Args:
            key: Channel key.
            delay_ms: Delay in milliseconds before callback execution.
            callback: Callback to execute once.
        """
        delay = max(0, int(delay_ms))
        self.cancel(key)

        def fire() -> None:
            handle = self._handles.get(key)
            if handle is not None and handle.token is token_box["token"]:
                del self._handles[key]
            callback()

        token_box: Dict[str, Any] = {"token": None}
        token = self._schedule(delay, fire)
        token_box["token"] = token
        self._handles[key] = DelayHandle(key=key, token=token)

    def cancel(self, key: str) -> None:
        """Cancel a pending callback for a key.

        Args:
            key: Channel key to cancel.
        """
        handle = self._handles.pop(key, None)
        if not handle:
            return
        self._cancel(handle.token)

    def cancel_all(self) -> None:
        """Cancel all pending callbacks across all keys."""
        for key in list(self._handles.keys()):
            self.cancel(key)

    def handle_for(self, key: str) -> Optional[DelayHandle]:
        """Return the current handle for a key, if scheduled."""
        return self._handles.get(key)


def threading_scheduler() -> DelayScheduler:
    """Build a scheduler running callbacks on daemon ``threading.Timer`` threads."""

    def schedule(delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(timer: threading.Timer) -> None:
        timer.cancel()

    return DelayScheduler(schedule, cancel)


__all__ = ["DelayHandle", "DelayScheduler", "threading_scheduler"]
