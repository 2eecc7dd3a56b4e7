#!/usr/bin/env python3
"""
Background Builder Host Script.

Runs a minimal main loop that rebuilds whenever tracked source files
under the configured folder are saved.
Requires Python 3.11+.

Usage:
    python scripts/run_builder.py --project-root . --path Scripts --enable \
        --command "dotnet build"
"""

import argparse
import asyncio
import shlex
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from host.config_store import JsonFileConfigStore
from host.hooks import HookRegistry
from host.tick import TickRegistry, run_main_loop
from utils.config import get_settings
from utils.logger import close_log_file, configure_logging, get_logger
from watcher.lifecycle import WatcherLifecycleController


configure_logging()
logger = get_logger("run_builder")


def make_rebuild_action(command: str) -> Callable[[], None]:
    """Build a zero-argument rebuild action running command as a subprocess."""
    argv = shlex.split(command)

    def rebuild() -> None:
        logger.info("rebuild_command_started", command=command)
        result = subprocess.run(argv, check=False)
        if result.returncode != 0:
            raise RuntimeError(f"{argv[0]} exited with status {result.returncode}")
        logger.info("rebuild_command_finished", command=command)

    return rebuild


async def run_builder(
    project_root: Path,
    command: str,
    path: str | None = None,
    enabled: bool | None = None,
) -> None:
    """
    Start the controller and tick it until cancelled.

    Args:
        project_root: Directory containing the asset root
        command: Rebuild command line
        path: Optional new watch folder to persist
        enabled: Optional new enabled flag to persist
    """
    settings = get_settings().builder.model_copy(update={"project_root": project_root})
    prefs_file = settings.prefs_file or project_root / ".background_builder.json"

    ticks = TickRegistry()
    hooks = HookRegistry()
    controller = WatcherLifecycleController(
        store=JsonFileConfigStore(prefs_file),
        tick_source=ticks,
        rebuild_action=make_rebuild_action(command),
        hooks=hooks,
        settings=settings,
    )

    config = controller.load_settings()
    if path is not None:
        config.path = path
    if enabled is not None:
        config.enabled = enabled

    status = controller.start(config)
    print(f"Status: {status.message}")

    try:
        await run_main_loop(ticks, interval_ms=settings.tick_interval_ms)
    finally:
        controller.shutdown()
        hooks.close()
        close_log_file()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Rebuild whenever tracked source files are saved",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Directory containing the asset root (default: current directory)",
    )
    parser.add_argument(
        "--path",
        default=None,
        help="Folder to watch, relative to the asset root",
    )
    toggle = parser.add_mutually_exclusive_group()
    toggle.add_argument("--enable", dest="enabled", action="store_true", default=None)
    toggle.add_argument("--disable", dest="enabled", action="store_false", default=None)
    parser.add_argument(
        "--command",
        required=True,
        help="Rebuild command to run on the main loop after each burst of saves",
    )

    args = parser.parse_args()

    if not args.project_root.is_dir():
        print(f"Error: Project root is not a directory: {args.project_root}")
        sys.exit(1)

    try:
        asyncio.run(run_builder(
            args.project_root.resolve(),
            args.command,
            path=args.path,
            enabled=args.enabled,
        ))
    except KeyboardInterrupt:
        print("\nStopped")


if __name__ == "__main__":
    main()
