"""
Background Builder Test Configuration.

Pytest fixtures and substitute host collaborators.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable
from pathlib import Path

import pytest

from host.config_store import InMemoryConfigStore
from host.hooks import HookRegistry
from host.tick import TickRegistry
from utils.config import BuilderSettings
from watcher.lifecycle import WatcherLifecycleController


class FakeWatchProvider:
    """
    Counting WatchProvider substitute.

    `emit` delivers an event to every callback ever registered, including
    disposed ones, the way a late OS notification would.
    """

    def __init__(self) -> None:
        self.created: list[tuple[Path, str]] = []
        self.disposed: list[int] = []
        self.calls: list[str] = []
        self.denied: set[Path] = set()
        self.missing: set[Path] = set()
        self._callbacks: list[Callable[[str], None]] = []

    def create_watch(self, path: Path, extension: str, on_event: Callable[[str], None]) -> int:
        if path in self.denied:
            raise PermissionError(13, "Permission denied", str(path))
        if path in self.missing:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        handle = len(self.created)
        self.created.append((path, extension))
        self._callbacks.append(on_event)
        self.calls.append(f"create:{handle}")
        return handle

    def dispose(self, handle: int) -> None:
        self.disposed.append(handle)
        self.calls.append(f"dispose:{handle}")

    def emit(self, file_path: str = "Assets/Scripts/Player.cs") -> None:
        for callback in list(self._callbacks):
            callback(file_path)

    def emit_to(self, handle: int, file_path: str = "Assets/Scripts/Player.cs") -> None:
        self._callbacks[handle](file_path)

    @property
    def live_count(self) -> int:
        return len(self.created) - len(self.disposed)


class RecordingRebuild:
    """Rebuild action that records how often and on which thread it ran."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self.threads: list[threading.Thread] = []
        self.error = error

    def __call__(self) -> None:
        self.calls += 1
        self.threads.append(threading.current_thread())
        if self.error is not None:
            raise self.error


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a project with an asset root containing a Scripts folder."""
    (tmp_path / "Assets" / "Scripts" / "Editor").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def builder_settings(project_root: Path) -> BuilderSettings:
    """Builder settings rooted at the temporary project."""
    return BuilderSettings(
        project_root=project_root,
        asset_root="Assets",
        extension=".cs",
        settings_prefix="test.builder.",
    )


@pytest.fixture
def store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def ticks() -> TickRegistry:
    return TickRegistry()


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def provider() -> FakeWatchProvider:
    return FakeWatchProvider()


@pytest.fixture
def rebuild() -> RecordingRebuild:
    return RecordingRebuild()


@pytest.fixture
def controller(
    store: InMemoryConfigStore,
    ticks: TickRegistry,
    hooks: HookRegistry,
    provider: FakeWatchProvider,
    rebuild: RecordingRebuild,
    builder_settings: BuilderSettings,
) -> WatcherLifecycleController:
    """Controller wired to in-memory substitutes for every host collaborator."""
    return WatcherLifecycleController(
        store=store,
        tick_source=ticks,
        rebuild_action=rebuild,
        hooks=hooks,
        provider=provider,
        settings=builder_settings,
    )


def set_config(store: InMemoryConfigStore, enabled: bool, path: str) -> None:
    """Write a watcher configuration the way the settings panel would."""
    store.set_bool("test.builder.enabled", enabled)
    store.set_string("test.builder.script_path", path)
