"""
Background Builder Host Interfaces Package.

Main-loop ticks, lifecycle hooks and preference storage the watcher
is embedded with.
Requires Python 3.11+.
"""

from host.config_store import ConfigStore, InMemoryConfigStore, JsonFileConfigStore
from host.hooks import HookRegistry, HostEvent, HostHooks, UnsubscribeFailedError
from host.tick import TickRegistry, TickSource, run_main_loop

__all__ = [
    "ConfigStore",
    "InMemoryConfigStore",
    "JsonFileConfigStore",
    "HookRegistry",
    "HostEvent",
    "HostHooks",
    "UnsubscribeFailedError",
    "TickRegistry",
    "TickSource",
    "run_main_loop",
]
