"""
Background Builder Path Resolver.

Turns a user-typed folder into the canonical path handed to the watcher.
Requires Python 3.11+.
"""

from collections.abc import Callable
from pathlib import Path

from utils.config import BuilderSettings, get_settings
from utils.logger import LoggerMixin
from watcher.errors import NoPathSpecifiedError, PathInvalidError
from watcher.models import ResolvedPath

SEPARATOR = "/"


class PathResolver(LoggerMixin):
    """
    Normalizes and validates watch paths against the project's asset root.

    Examples (asset root "Assets"):
        - "Scripts"          -> "Assets/Scripts/"
        - "/Scripts/Editor"  -> "Assets/Scripts/Editor/"
        - "Assets/Scripts/"  -> "Assets/Scripts/"
        - "Assets"           -> "Assets/" (explicit, watches the whole root)
        - "", ".", "/"       -> NoPathSpecifiedError
    """

    def __init__(
        self,
        settings: BuilderSettings | None = None,
        exists: Callable[[str], bool] | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            settings: Builder settings (asset root, project root)
            exists: Predicate telling whether a canonical path is an existing
                directory. Defaults to a check under the project root.
        """
        self._settings = settings or get_settings().builder
        self._exists = exists or self._directory_exists

    @property
    def root(self) -> str:
        """The bare asset root, with its trailing separator."""
        return self._settings.asset_root + SEPARATOR

    def _directory_exists(self, canonical: str) -> bool:
        return (Path(self._settings.project_root) / canonical).is_dir()

    def canonicalize(self, raw: str) -> ResolvedPath:
        """
        Apply the textual normalization rules without touching the filesystem.

        Raises:
            NoPathSpecifiedError: If raw is empty
        """
        path = raw.strip()
        if not path:
            raise NoPathSpecifiedError("No path specified")

        if path == ".":
            path = SEPARATOR

        if path.startswith(SEPARATOR):
            path = path[1:]

        if not path.endswith(SEPARATOR):
            path += SEPARATOR

        root_prepended = False
        if not path.startswith(self.root):
            root_prepended = True
            # "/" reduces to "" above; avoid producing "Assets//"
            path = self._settings.asset_root + ("" if path.startswith(SEPARATOR) else SEPARATOR) + path

        return ResolvedPath(path=path, root_prepended=root_prepended)

    def normalize(self, raw: str) -> ResolvedPath:
        """
        Normalize and validate a raw path.

        Args:
            raw: Path as typed by the user, relative to the asset root

        Returns:
            The canonical path

        Raises:
            NoPathSpecifiedError: Empty input, or input that only reaches
                the asset root because it was prepended implicitly
            PathInvalidError: The canonical path is not an existing directory
        """
        resolved = self.canonicalize(raw)

        if not self._exists(resolved.path):
            self.log.debug("watch_path_missing", raw=raw, path=resolved.path)
            raise PathInvalidError(resolved.path)

        if self.is_implicit_root(resolved):
            raise NoPathSpecifiedError("Refusing to watch the whole asset root implicitly")

        return resolved

    def is_implicit_root(self, resolved: ResolvedPath) -> bool:
        """True when the path is the bare asset root and the user did not ask for it."""
        return resolved.path == self.root and resolved.root_prepended
