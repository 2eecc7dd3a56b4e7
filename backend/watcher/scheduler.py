"""
Background Builder Main Thread Scheduler.

Coalesces change signals from notification threads into a single
rebuild serviced on the main loop.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from typing import Any

from host.tick import TickSource
from utils.logger import LoggerMixin
from watcher.errors import RebuildActionFailedError


class MainThreadScheduler(LoggerMixin):
    """
    Runs the rebuild action at most once per main-loop tick.

    `signal_change` marks a rebuild as pending and subscribes `tick` to the
    main loop. The next tick clears the flag, unsubscribes and runs the
    rebuild, so nothing polls while idle. Signals that arrive once a tick has
    claimed the pending flag start the next burst.
    """

    def __init__(
        self,
        tick_source: TickSource,
        rebuild_action: Callable[[], Any],
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            tick_source: Main-loop per-tick subscription registry
            rebuild_action: Zero-argument callable, main context only
        """
        self._tick_source = tick_source
        self._rebuild_action = rebuild_action
        self._pending = False
        # Guards the pending flag together with the subscription it implies
        self._lock = threading.Lock()
        self._rebuild_count = 0
        self.last_error: RebuildActionFailedError | None = None

    @property
    def is_pending(self) -> bool:
        """Check if a rebuild has been requested and not yet serviced."""
        return self._pending

    @property
    def rebuild_count(self) -> int:
        """Number of rebuilds serviced so far."""
        return self._rebuild_count

    def signal_change(self) -> None:
        """Request a rebuild. Callable from any thread, any number of times."""
        with self._lock:
            if self._pending:
                return
            self._pending = True
            self._tick_source.subscribe(self.tick)

    def tick(self) -> None:
        """Service a pending rebuild. Must run on the main execution context."""
        with self._lock:
            if not self._pending:
                return
            self._pending = False
            self._tick_source.unsubscribe(self.tick)

        self._rebuild_count += 1
        self.log.debug("rebuild_started", count=self._rebuild_count)
        try:
            self._rebuild_action()
        except Exception as e:
            self.last_error = RebuildActionFailedError(str(e))
            self.log.error("rebuild_failed", error=str(e), exc_info=True)
