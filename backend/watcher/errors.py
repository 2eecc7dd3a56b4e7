"""
Background Builder Watcher Errors.

Lifecycle errors map onto a WatchState; servicing errors are only logged.
Requires Python 3.11+.
"""

from host.hooks import UnsubscribeFailedError
from watcher.models import WatchState


class WatcherError(Exception):
    """Base class for all watcher errors."""

    state: WatchState | None = None


class NoPathSpecifiedError(WatcherError):
    """The configured path is empty or resolves to the bare asset root."""

    state = WatchState.NO_PATH_SPECIFIED


class PathInvalidError(WatcherError):
    """The canonical path does not denote an existing directory."""

    state = WatchState.PATH_INVALID

    def __init__(self, path: str) -> None:
        super().__init__(f"Directory does not exist: {path}")
        self.path = path


class PermissionDeniedError(WatcherError):
    """The watch primitive refused to watch the directory."""

    state = WatchState.PERMISSION_DENIED

    def __init__(self, path: str) -> None:
        super().__init__(f"Permission denied watching: {path}")
        self.path = path


class RebuildActionFailedError(WatcherError):
    """The rebuild action raised while being serviced on a tick."""


__all__ = [
    "WatcherError",
    "NoPathSpecifiedError",
    "PathInvalidError",
    "PermissionDeniedError",
    "RebuildActionFailedError",
    "UnsubscribeFailedError",
]
