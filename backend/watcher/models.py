"""
Background Builder Watcher Data Models.

Configuration, watch state and resolved path structures.
Requires Python 3.11+.
"""

from dataclasses import dataclass
from enum import Enum


class WatchState(str, Enum):
    """States of the watcher lifecycle. Only WATCHING holds a live watch."""

    DISABLED = "disabled"
    NO_PATH_SPECIFIED = "no_path_specified"
    PATH_INVALID = "path_invalid"
    PERMISSION_DENIED = "permission_denied"
    WATCHING = "watching"


@dataclass(slots=True)
class WatcherConfig:
    """User-editable watcher configuration, persisted through a ConfigStore."""

    enabled: bool = False
    path: str = ""


@dataclass(frozen=True, slots=True)
class WatchStatus:
    """A watch state paired with its human-readable status line."""

    state: WatchState
    message: str

    @classmethod
    def disabled(cls) -> "WatchStatus":
        return cls(WatchState.DISABLED, "Disabled")

    @classmethod
    def no_path_specified(cls) -> "WatchStatus":
        return cls(WatchState.NO_PATH_SPECIFIED, "Disabled: No path specified")

    @classmethod
    def path_invalid(cls) -> "WatchStatus":
        return cls(WatchState.PATH_INVALID, "Disabled: Path does not exist")

    @classmethod
    def permission_denied(cls, path: str) -> "WatchStatus":
        return cls(WatchState.PERMISSION_DENIED, f'No permission to access folder "{path}"')

    @classmethod
    def watching(cls, path: str) -> "WatchStatus":
        return cls(WatchState.WATCHING, f'Watching "{path}" and its children')

    @property
    def is_watching(self) -> bool:
        return self.state is WatchState.WATCHING


@dataclass(frozen=True, slots=True)
class ResolvedPath:
    """
    A canonical watch path.

    `path` is project-relative, uses "/" separators and always ends with
    exactly one "/". `root_prepended` records that the asset root was added
    by normalization rather than typed by the user.
    """

    path: str
    root_prepended: bool = False
