"""
Background Builder Watcher Lifecycle.

State machine owning the single active watch, driven by configuration
edits and host lifecycle events.
Requires Python 3.11+.
"""

from collections.abc import Callable
from typing import Any

from host.config_store import ConfigStore
from host.hooks import HostEvent, HostHooks, UnsubscribeFailedError
from host.tick import TickSource
from utils.config import BuilderSettings, get_settings
from utils.logger import LoggerMixin
from watcher.change_watcher import ChangeWatcher
from watcher.errors import NoPathSpecifiedError, PathInvalidError, PermissionDeniedError
from watcher.file_watcher import WatchProvider
from watcher.models import WatchState, WatchStatus, WatcherConfig
from watcher.path_resolver import PathResolver
from watcher.preferences import WatcherPreferences
from watcher.scheduler import MainThreadScheduler


class WatcherLifecycleController(LoggerMixin):
    """
    Owns at most one ChangeWatcher and keeps it in step with configuration.

    Every (re)initialization reloads the persisted configuration and
    destroys the current watch before deciding whether to create a new
    one, so reconfiguration can never leave two live watches. Lifecycle
    problems are reported through `status`, never raised.

    All methods run on the main execution context; only the scheduler's
    `signal_change` is called from notification threads.
    """

    def __init__(
        self,
        store: ConfigStore,
        tick_source: TickSource,
        rebuild_action: Callable[[], Any],
        hooks: HostHooks | None = None,
        provider: WatchProvider | None = None,
        settings: BuilderSettings | None = None,
        exists: Callable[[str], bool] | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            store: Persisted preferences holding the enabled flag and path
            tick_source: Main-loop tick subscription used by the scheduler
            rebuild_action: Rebuild/reimport action, main context only
            hooks: Host lifecycle hooks; reload handling is skipped if None
            provider: Directory watch primitive; defaults to watchdog
            settings: Builder settings; defaults to the cached settings
            exists: Directory existence predicate for canonical paths
        """
        self._settings = settings or get_settings().builder
        self._prefs = WatcherPreferences(store, self._settings.settings_prefix)
        self._resolver = PathResolver(self._settings, exists)
        self._scheduler = MainThreadScheduler(tick_source, rebuild_action)
        self._hooks = hooks
        self._provider = provider

        self._config = WatcherConfig()
        self._watcher: ChangeWatcher | None = None
        self._status = WatchStatus.disabled()
        self._initialized = False

    @property
    def config(self) -> WatcherConfig:
        """Configuration as of the last load or edit."""
        return WatcherConfig(enabled=self._config.enabled, path=self._config.path)

    @property
    def status(self) -> WatchStatus:
        return self._status

    @property
    def state(self) -> WatchState:
        return self._status.state

    @property
    def is_initialized(self) -> bool:
        """True while a watch is live."""
        return self._initialized

    @property
    def scheduler(self) -> MainThreadScheduler:
        return self._scheduler

    @property
    def active_watch(self) -> ChangeWatcher | None:
        return self._watcher

    # Settings

    def load_settings(self) -> WatcherConfig:
        self._config = self._prefs.load()
        return self.config

    def save_settings(self) -> None:
        self._prefs.save(self._config)

    def set_enabled(self, enabled: bool) -> WatchStatus:
        """Toggle background building, persist it and re-initialize."""
        self._config.enabled = enabled
        self.save_settings()
        return self.initialize()

    def set_path(self, path: str) -> WatchStatus:
        """Change the watched folder, persist it and re-initialize."""
        self._config.path = path
        self.save_settings()
        return self.initialize()

    def configure(self, config: WatcherConfig) -> WatchStatus:
        """Replace the whole configuration, persist it and re-initialize."""
        self._config = WatcherConfig(enabled=config.enabled, path=config.path)
        self.save_settings()
        return self.initialize()

    # State machine

    def initialize(self) -> WatchStatus:
        """
        Run the transition algorithm against the persisted configuration.

        Returns:
            The resulting status
        """
        config = self.load_settings()

        self._destroy_watch()

        if not config.enabled:
            return self._set_status(WatchStatus.disabled())

        try:
            resolved = self._resolver.normalize(config.path)
        except NoPathSpecifiedError:
            return self._set_status(WatchStatus.no_path_specified())
        except PathInvalidError:
            return self._set_status(WatchStatus.path_invalid())

        watcher = ChangeWatcher(
            on_change=self._scheduler.signal_change,
            extension=self._settings.extension,
            project_root=self._settings.project_root,
            provider=self._provider,
        )
        try:
            watcher.initialize(resolved.path)
        except PermissionDeniedError:
            return self._set_status(WatchStatus.permission_denied(resolved.path))
        except PathInvalidError:
            return self._set_status(WatchStatus.path_invalid())

        self._watcher = watcher
        return self._set_status(WatchStatus.watching(resolved.path), initialized=True)

    def reinitialize_if_needed(self) -> WatchStatus:
        """Initialize again unless a watch is already live. Safe to call repeatedly."""
        if not self._initialized:
            return self.initialize()
        return self._status

    # Host lifecycle

    def start(self, config: WatcherConfig | None = None) -> WatchStatus:
        """
        Enable the controller.

        Args:
            config: Optional configuration to persist before loading
        """
        previous = self.config
        if config is not None:
            self._prefs.save(config)
        loaded = self.load_settings()

        # A new configuration must replace whatever is being watched
        if not self._initialized or (config is not None and loaded != previous):
            self.initialize()

        if self._hooks is not None:
            self._hooks.attach(HostEvent.RELOAD_COMPLETED, self.reinitialize_if_needed)

        self.log.info("controller_started", state=self.state.value)
        return self._status

    def stop(self, entering_transient_mode: bool = False) -> WatchStatus:
        """
        Disable the controller: persist settings and tear the watch down.

        Args:
            entering_transient_mode: The host is about to enter a mode it
                will later leave (e.g. play mode); re-initialize once it does
        """
        self.save_settings()

        if entering_transient_mode and self._hooks is not None:
            self._hooks.attach(HostEvent.EXITING_TRANSIENT_MODE, self._on_exiting_transient_mode)

        self._destroy_watch()
        self._detach(HostEvent.RELOAD_COMPLETED, self.reinitialize_if_needed)

        self.log.info("controller_stopped", transient=entering_transient_mode)
        return self._set_status(WatchStatus.disabled())

    def shutdown(self) -> WatchStatus:
        """Process teardown: stop and drop every host hook."""
        status = self.stop()
        self._detach(HostEvent.EXITING_TRANSIENT_MODE, self._on_exiting_transient_mode)
        return status

    def _on_exiting_transient_mode(self) -> None:
        self.reinitialize_if_needed()
        self._detach(HostEvent.EXITING_TRANSIENT_MODE, self._on_exiting_transient_mode)

    # Internals

    def _destroy_watch(self) -> None:
        if self._watcher is not None:
            self._watcher.destroy()
            self._watcher = None

    def _detach(self, event: HostEvent, callback: Callable[[], Any]) -> None:
        """Best-effort detach; failures are logged and otherwise ignored."""
        if self._hooks is None:
            return
        try:
            error = self._hooks.detach(event, callback)
        except Exception as e:
            error = UnsubscribeFailedError(str(e))
        if error is not None:
            self.log.warning("unsubscribe_failed", hook_event=event.value, error=str(error))

    def _set_status(self, status: WatchStatus, initialized: bool = False) -> WatchStatus:
        self._initialized = initialized
        self._status = status
        self.log.info("watch_state_changed", state=status.state.value, status=status.message)
        return status
