"""
Background Builder Host Lifecycle Hooks.

Named host events (reload finished, leaving a transient mode) that
embedded components can attach callbacks to.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from utils.logger import LoggerMixin


class UnsubscribeFailedError(Exception):
    """A best-effort detach from a host hook did not succeed."""


class HostEvent(str, Enum):
    """Host lifecycle events."""

    RELOAD_COMPLETED = "reload_completed"
    EXITING_TRANSIENT_MODE = "exiting_transient_mode"


class HostHooks(Protocol):
    """Attach/detach host lifecycle callbacks. Detach reports failure as a value."""

    def attach(self, event: HostEvent, callback: Callable[[], None]) -> None:
        ...

    def detach(self, event: HostEvent, callback: Callable[[], None]) -> UnsubscribeFailedError | None:
        ...


class HookRegistry(LoggerMixin):
    """
    In-process HostHooks implementation.

    Attach and detach are idempotent. After `close()` (host teardown) the
    registry refuses further changes and detach returns an error.
    """

    def __init__(self) -> None:
        self._hooks: dict[HostEvent, list[Callable[[], None]]] = {event: [] for event in HostEvent}
        self._lock = threading.Lock()
        self._closed = False

    def attach(self, event: HostEvent, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._closed:
                self.log.warning("attach_after_close", hook_event=event.value)
                return
            if callback not in self._hooks[event]:
                self._hooks[event].append(callback)

    def detach(self, event: HostEvent, callback: Callable[[], None]) -> UnsubscribeFailedError | None:
        with self._lock:
            if self._closed:
                return UnsubscribeFailedError(f"hook registry closed, cannot detach from {event.value}")
            if callback in self._hooks[event]:
                self._hooks[event].remove(callback)
        return None

    def is_attached(self, event: HostEvent, callback: Callable[[], None]) -> bool:
        with self._lock:
            return callback in self._hooks[event]

    def fire(self, event: HostEvent) -> None:
        """Invoke every callback attached to event, on the calling thread."""
        with self._lock:
            callbacks = list(self._hooks[event])

        self.log.debug("host_event", hook_event=event.value, callbacks=len(callbacks))
        for callback in callbacks:
            callback()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            for callbacks in self._hooks.values():
                callbacks.clear()
