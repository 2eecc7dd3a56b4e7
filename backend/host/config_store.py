"""
Background Builder Preference Storage.

Key-value persistence for the watcher configuration.
Requires Python 3.11+.
"""

import json
import threading
from pathlib import Path
from typing import Any, Protocol

from utils.logger import LoggerMixin


class ConfigStore(Protocol):
    """Persisted key-value preferences. Missing keys read as False / ""."""

    def get_bool(self, key: str) -> bool:
        ...

    def set_bool(self, key: str, value: bool) -> None:
        ...

    def get_string(self, key: str) -> str:
        ...

    def set_string(self, key: str, value: str) -> None:
        ...


class InMemoryConfigStore:
    """ConfigStore that lives for the duration of the process."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def get_bool(self, key: str) -> bool:
        return bool(self._values.get(key, False))

    def set_bool(self, key: str, value: bool) -> None:
        self._values[key] = bool(value)

    def get_string(self, key: str) -> str:
        return str(self._values.get(key, ""))

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)


class JsonFileConfigStore(InMemoryConfigStore, LoggerMixin):
    """
    ConfigStore backed by a JSON file, rewritten on every set.

    An unreadable or corrupt file is treated as empty so a bad preferences
    file never prevents startup.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._write_lock = threading.Lock()
        super().__init__(self._read())

    def _read(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            self.log.warning("prefs_read_failed", path=str(self._file_path), error=str(e))
            return {}
        if not isinstance(data, dict):
            self.log.warning("prefs_not_a_mapping", path=str(self._file_path))
            return {}
        return data

    def _write(self) -> None:
        with self._write_lock:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self._file_path)

    def set_bool(self, key: str, value: bool) -> None:
        super().set_bool(key, value)
        self._write()

    def set_string(self, key: str, value: str) -> None:
        super().set_string(key, value)
        self._write()
