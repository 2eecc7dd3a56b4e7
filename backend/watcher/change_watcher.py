"""
Background Builder Change Watcher.

Owns one directory watch and forwards every qualifying event as a
"change detected" signal.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from utils.logger import LoggerMixin
from watcher.errors import PathInvalidError, PermissionDeniedError
from watcher.file_watcher import WatchProvider, WatchdogProvider


class ChangeWatcher(LoggerMixin):
    """
    Wraps a single recursive watch filtered to one file extension.

    Batching is left to the receiver of `on_change`; the watcher calls it
    once per event, from the provider's notification thread.
    """

    def __init__(
        self,
        on_change: Callable[[], None],
        extension: str,
        project_root: Path,
        provider: WatchProvider | None = None,
    ) -> None:
        """
        Initialize the change watcher.

        Args:
            on_change: Signal invoked for each modified tracked file
            extension: Tracked file suffix, including the dot
            project_root: Directory canonical paths are relative to
            provider: Watch primitive; defaults to watchdog
        """
        self._on_change = on_change
        self._extension = extension
        self._project_root = Path(project_root)
        self._provider = provider or WatchdogProvider()
        self._handle: Any = None
        self._path: str | None = None
        self._active = False
        self._lock = threading.Lock()

    @property
    def path(self) -> str | None:
        """Canonical path being watched, if any."""
        return self._path

    @property
    def is_active(self) -> bool:
        """Check if a live watch handle is held."""
        return self._active

    def initialize(self, canonical_path: str) -> None:
        """
        Start watching canonical_path and its children.

        Any handle from a previous call is disposed first.

        Raises:
            PermissionDeniedError: If the directory cannot be watched
            PathInvalidError: If the directory disappeared
        """
        self.destroy()

        try:
            handle = self._provider.create_watch(
                self._project_root / canonical_path,
                self._extension,
                self._forward,
            )
        except PermissionError as e:
            self.log.warning("watch_permission_denied", path=canonical_path, error=str(e))
            raise PermissionDeniedError(canonical_path) from e
        except (FileNotFoundError, NotADirectoryError) as e:
            # Directory removed after the existence check
            self.log.warning("watch_path_vanished", path=canonical_path, error=str(e))
            raise PathInvalidError(canonical_path) from e

        with self._lock:
            self._handle = handle
            self._path = canonical_path
            self._active = True

        self.log.info("watch_started", path=canonical_path, extension=self._extension)

    def destroy(self) -> None:
        """Release the watch. Safe to call repeatedly or before initialize."""
        with self._lock:
            if not self._active:
                return
            handle = self._handle
            path = self._path
            self._active = False
            self._handle = None

        self._provider.dispose(handle)
        self.log.info("watch_stopped", path=path)

    def _forward(self, file_path: str) -> None:
        """Provider callback; drops events that race with destroy()."""
        if not self._active:
            return
        self._on_change()
