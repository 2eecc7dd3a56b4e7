"""
Background Builder Watcher Preferences.

Maps WatcherConfig onto namespaced ConfigStore keys.
Requires Python 3.11+.
"""

from host.config_store import ConfigStore
from watcher.models import WatcherConfig


class WatcherPreferences:
    """Reads and writes a WatcherConfig under a key prefix."""

    ENABLED_KEY = "enabled"
    PATH_KEY = "script_path"

    def __init__(self, store: ConfigStore, prefix: str) -> None:
        self._store = store
        self._prefix = prefix

    def key(self, name: str) -> str:
        return self._prefix + name

    def load(self) -> WatcherConfig:
        return WatcherConfig(
            enabled=self._store.get_bool(self.key(self.ENABLED_KEY)),
            path=self._store.get_string(self.key(self.PATH_KEY)),
        )

    def save(self, config: WatcherConfig) -> None:
        self._store.set_bool(self.key(self.ENABLED_KEY), config.enabled)
        self._store.set_string(self.key(self.PATH_KEY), config.path)
