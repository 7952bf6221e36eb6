"""
Utility functions for yt2jellyfin.

This module provides common utility functions used across the application:
    - Filename sanitization (using yt-dlp's sanitize_filename)
    - Escaping literal text for yt-dlp output templates
    - Path and platform helpers

Usage:
    from yt2jellyfin.utils import (
        sanitize_filename,
        template_literal,
        ensure_directory,
        detect_platform
    )
"""

import platform
from pathlib import Path

from yt_dlp.utils import sanitize_filename as yt_dlp_sanitize


PLATFORM_MACOS = "macos"
PLATFORM_LINUX = "linux"
PLATFORM_UNKNOWN = "unknown"


def sanitize_filename(name: str, restricted: bool = False) -> str:
    """
    Sanitize a string for use as a single path component.

    Uses yt-dlp's sanitize_filename function so user-supplied folder
    names follow the same rules as the names yt-dlp generates itself.

    Args:
        name: The string to sanitize (e.g., an artist or album override).
        restricted: If True, use yt-dlp's restricted character set.

    Returns:
        Sanitized string safe for use as a directory or file name.
        Path separators never survive, so the result is always exactly
        one path level.

    Examples:
        sanitize_filename("AC/DC")         # no "/" left in the result
        sanitize_filename("Greatest Hits") # "Greatest Hits"
    """
    return yt_dlp_sanitize(name, restricted=restricted)


def template_literal(text: str) -> str:
    """
    Escape text so a yt-dlp output template reproduces it verbatim.

    yt-dlp templates use Python %-formatting, so every literal "%"
    must be doubled.

    Example:
        template_literal("100% Hits")  # "100%% Hits"
    """
    return text.replace("%", "%%")


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def detect_platform() -> str:
    """
    Identify the host platform.

    Returns:
        "macos", "linux" or "unknown".
    """
    system = platform.system()
    if system == "Darwin":
        return PLATFORM_MACOS
    if system == "Linux":
        return PLATFORM_LINUX
    return PLATFORM_UNKNOWN
