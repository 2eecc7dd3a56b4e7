"""
Background Builder Directory Watch Primitive.

Recursive, extension-filtered "last write" watches built on watchdog.
Requires Python 3.11+.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.events import (
    FileSystemEventHandler,
    FileModifiedEvent,
    DirModifiedEvent,
)

from utils.logger import LoggerMixin


class WatchProvider(Protocol):
    """
    Creates and disposes OS-level directory watches.

    `on_event` is invoked with the changed file's path on a thread the
    provider chooses. `create_watch` raises PermissionError when the
    directory cannot be watched.
    """

    def create_watch(
        self,
        path: Path,
        extension: str,
        on_event: Callable[[str], None],
    ) -> Any:
        ...

    def dispose(self, handle: Any) -> None:
        ...


class SourceFileHandler(FileSystemEventHandler, LoggerMixin):
    """
    Handles modification events for files with one extension.

    Creation, deletion and moves are not reported; a new file triggers on
    its next write.
    """

    def __init__(self, extension: str, on_event: Callable[[str], None]) -> None:
        """
        Initialize the file handler.

        Args:
            extension: Tracked suffix, including the dot (".cs")
            on_event: Called with the file path of every qualifying event
        """
        super().__init__()
        self._extension = extension
        self._on_event = on_event

    def _is_tracked_file(self, path: str) -> bool:
        """Check if path carries the tracked extension."""
        return Path(path).suffix.lower() == self._extension.lower()

    def on_modified(self, event: FileModifiedEvent | DirModifiedEvent) -> None:
        """Handle file modification."""
        if isinstance(event, DirModifiedEvent):
            return

        path = event.src_path
        if isinstance(path, bytes):
            path = path.decode()
        if not self._is_tracked_file(path):
            return

        self.log.debug("file_modified", path=path)
        try:
            self._on_event(path)
        except Exception as e:
            # Raising here would kill the observer's dispatch thread
            self.log.error("change_callback_failed", path=path, error=str(e))


class WatchdogProvider(LoggerMixin):
    """
    WatchProvider backed by one watchdog Observer per watch.

    A dedicated observer keeps handles independent: disposing one stops its
    emitter thread without affecting any other watch.
    """

    def __init__(self, join_timeout: float = 5.0) -> None:
        self._join_timeout = join_timeout

    def create_watch(
        self,
        path: Path,
        extension: str,
        on_event: Callable[[str], None],
    ) -> BaseObserver:
        """
        Start a recursive watch on path.

        Raises:
            PermissionError: If the directory cannot be read
            FileNotFoundError: If the directory does not exist
            NotADirectoryError: If the path is not a directory
        """
        handler = SourceFileHandler(extension=extension, on_event=on_event)
        observer = Observer()
        try:
            observer.schedule(handler, str(path), recursive=True)
            observer.start()
        except OSError:
            self._stop(observer)
            raise

        self.log.info("observer_started", path=str(path), extension=extension)
        return observer

    def dispose(self, handle: BaseObserver) -> None:
        """Stop the observer and wait for its threads to exit."""
        self._stop(handle)
        self.log.info("observer_stopped")

    def _stop(self, observer: BaseObserver) -> None:
        observer.unschedule_all()
        if observer.is_alive():
            observer.stop()
            observer.join(timeout=self._join_timeout)
