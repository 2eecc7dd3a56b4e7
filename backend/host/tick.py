"""
Background Builder Main Loop Tick Registry.

Per-iteration callback list for the host's main loop, plus an asyncio
driver for hosts that do not have a loop of their own.
Requires Python 3.11+.
"""

import asyncio
import threading
from collections.abc import Callable
from typing import Protocol

from utils.logger import LoggerMixin


class TickSource(Protocol):
    """Main-loop subscription primitive. Both operations are idempotent."""

    def subscribe(self, callback: Callable[[], None]) -> None:
        ...

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        ...


class TickRegistry(LoggerMixin):
    """
    Thread-safe, idempotent per-tick callback registry.

    `subscribe` and `unsubscribe` may be called from any thread. Callbacks
    only ever run on the thread calling `run_once`, which is the host's
    main execution context.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []
        self._lock = threading.Lock()
        self._ticks = 0

    def subscribe(self, callback: Callable[[], None]) -> None:
        """Add callback to the tick list. No-op if already present."""
        with self._lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        """Remove callback from the tick list. No-op if absent."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def is_subscribed(self, callback: Callable[[], None]) -> bool:
        with self._lock:
            return callback in self._callbacks

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    @property
    def ticks(self) -> int:
        """Number of completed main-loop iterations."""
        return self._ticks

    def run_once(self) -> None:
        """Run one main-loop iteration: invoke every current subscriber once."""
        with self._lock:
            callbacks = list(self._callbacks)

        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                self.log.error("tick_callback_failed", callback=repr(callback), error=str(e))

        self._ticks += 1


async def run_main_loop(
    registry: TickRegistry,
    interval_ms: int = 100,
    stop_event: asyncio.Event | None = None,
) -> int:
    """
    Drive a TickRegistry from an asyncio event loop.

    Args:
        registry: Registry to tick
        interval_ms: Delay between iterations in milliseconds
        stop_event: Loop exits once this is set; runs forever if None

    Returns:
        Number of ticks performed
    """
    interval = interval_ms / 1000.0
    performed = 0
    while stop_event is None or not stop_event.is_set():
        registry.run_once()
        performed += 1
        await asyncio.sleep(interval)
    return performed
