"""
Background Builder Watcher Package.

Watches a source folder and schedules one rebuild per burst of changes
on the main loop.
Requires Python 3.11+.
"""

from watcher.change_watcher import ChangeWatcher
from watcher.file_watcher import WatchdogProvider, WatchProvider
from watcher.lifecycle import WatcherLifecycleController
from watcher.models import ResolvedPath, WatcherConfig, WatchState, WatchStatus
from watcher.path_resolver import PathResolver
from watcher.scheduler import MainThreadScheduler

__all__ = [
    "ChangeWatcher",
    "WatchdogProvider",
    "WatchProvider",
    "WatcherLifecycleController",
    "ResolvedPath",
    "WatcherConfig",
    "WatchState",
    "WatchStatus",
    "PathResolver",
    "MainThreadScheduler",
]
