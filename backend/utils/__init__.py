"""
Background Builder Utilities Package.

Configuration and logging shared across all backend modules.
Requires Python 3.11+.
"""

from utils.config import BuilderSettings, Settings, get_settings
from utils.logger import close_log_file, configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "BuilderSettings",
    "Settings",
    "get_settings",
    "close_log_file",
    "configure_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
