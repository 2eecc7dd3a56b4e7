"""
Tests for Change Watcher.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest

from conftest import FakeWatchProvider
from watcher.change_watcher import ChangeWatcher
from watcher.errors import PathInvalidError, PermissionDeniedError


class SignalCounter:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


class TestChangeWatcher:
    """Test cases for ChangeWatcher."""

    @pytest.fixture
    def signals(self) -> SignalCounter:
        return SignalCounter()

    @pytest.fixture
    def watcher(self, signals: SignalCounter, provider: FakeWatchProvider, project_root: Path) -> ChangeWatcher:
        """Create a watcher on the fake provider."""
        return ChangeWatcher(
            on_change=signals,
            extension=".cs",
            project_root=project_root,
            provider=provider,
        )

    def test_initialize_creates_one_recursive_watch(
        self, watcher: ChangeWatcher, provider: FakeWatchProvider, project_root: Path
    ):
        """Test the watch targets the canonical path with the tracked extension."""
        watcher.initialize("Assets/Scripts/")

        assert provider.created == [(project_root / "Assets/Scripts/", ".cs")]
        assert watcher.is_active is True
        assert watcher.path == "Assets/Scripts/"

    def test_every_event_signals(self, watcher: ChangeWatcher, provider: FakeWatchProvider, signals: SignalCounter):
        """Test the watcher forwards each event without batching."""
        watcher.initialize("Assets/Scripts/")

        provider.emit("Assets/Scripts/Player.cs")
        provider.emit("Assets/Scripts/Enemy.cs")
        provider.emit("Assets/Scripts/Player.cs")

        assert signals.count == 3

    def test_no_signals_after_destroy(
        self, watcher: ChangeWatcher, provider: FakeWatchProvider, signals: SignalCounter
    ):
        """Test late OS events for a destroyed watch are dropped."""
        watcher.initialize("Assets/Scripts/")
        watcher.destroy()

        provider.emit()

        assert signals.count == 0
        assert provider.disposed == [0]
        assert watcher.is_active is False

    def test_destroy_is_idempotent(self, watcher: ChangeWatcher, provider: FakeWatchProvider):
        """Test repeated destroy disposes the handle once."""
        watcher.initialize("Assets/Scripts/")
        watcher.destroy()
        watcher.destroy()

        assert provider.disposed == [0]

    def test_destroy_before_initialize(self, watcher: ChangeWatcher, provider: FakeWatchProvider):
        """Test destroy on an unused watcher is a no-op."""
        watcher.destroy()

        assert provider.disposed == []

    def test_reinitialize_disposes_previous_handle(self, watcher: ChangeWatcher, provider: FakeWatchProvider):
        """Test a second initialize never leaves two live handles."""
        watcher.initialize("Assets/Scripts/")
        watcher.initialize("Assets/Scripts/Editor/")

        assert provider.calls == ["create:0", "dispose:0", "create:1"]
        assert provider.live_count == 1
        assert watcher.path == "Assets/Scripts/Editor/"

    def test_permission_denied(
        self, watcher: ChangeWatcher, provider: FakeWatchProvider, project_root: Path, signals: SignalCounter
    ):
        """Test a refused watch raises and holds no handle."""
        provider.denied.add(project_root / "Assets/Scripts/")

        with pytest.raises(PermissionDeniedError) as exc_info:
            watcher.initialize("Assets/Scripts/")

        assert exc_info.value.path == "Assets/Scripts/"
        assert watcher.is_active is False
        assert provider.live_count == 0

        watcher.destroy()
        assert provider.disposed == []

    def test_vanished_directory(self, watcher: ChangeWatcher, provider: FakeWatchProvider, project_root: Path):
        """Test a directory removed after validation reports an invalid path."""
        provider.missing.add(project_root / "Assets/Scripts/")

        with pytest.raises(PathInvalidError):
            watcher.initialize("Assets/Scripts/")

        assert watcher.is_active is False
