"""
Core module for yt2jellyfin.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration resolution (defaults, YAML file, environment)
    - logger: Coloured console logging with optional log file

Usage:
    from yt2jellyfin.core import (
        Config, load_config,
        setup_logging, get_logger,
        Yt2JellyfinError, ConfigError, DependencyError
    )
"""

from yt2jellyfin.core.config import Config, load_config
from yt2jellyfin.core.exceptions import (
    ConfigError,
    DependencyError,
    DownloadError,
    InstallerError,
    Yt2JellyfinError,
)
from yt2jellyfin.core.logger import (
    get_logger,
    log_step,
    log_success,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "load_config",
    # Exceptions
    "Yt2JellyfinError",
    "ConfigError",
    "DependencyError",
    "DownloadError",
    "InstallerError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_step",
    "log_success",
    "shutdown_logging",
]
