"""
Exception classes for yt2jellyfin.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, so the CLI can show a short error while the log file keeps
the full context.

Exception Hierarchy:
    Yt2JellyfinError (base)
        ConfigError - Configuration file or environment issues
        DependencyError - yt-dlp / ffmpeg / ffprobe missing or unusable
        DownloadError - yt-dlp could not be started or reported failure
        InstallerError - A setup step could not be completed
"""


class Yt2JellyfinError(Exception):
    """
    Base exception for all yt2jellyfin errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all yt2jellyfin errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (paths, commands).

    Example:
        try:
            config = load_config()
        except Yt2JellyfinError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'file_path': Path involved in the error
                     - 'command': External command that failed
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(Yt2JellyfinError):
    """
    Raised when the configuration cannot be resolved.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - An explicitly requested config file does not exist
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., zero concurrent fragments)

    Example:
        raise ConfigError(
            "'download.retries' must be a non-negative integer",
            details={'field': 'download.retries', 'value': -1}
        )
    """
    pass


class DependencyError(Yt2JellyfinError):
    """
    Raised when a required external program is not available.

    Attributes:
        missing: Names of the programs that could not be found.

    Example:
        raise DependencyError(
            "Missing dependencies. Run: yt2jellyfin --check",
            missing=["ffmpeg"]
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        missing: list[str] | None = None
    ) -> None:
        super().__init__(message, details)
        self.missing = list(missing or [])


class DownloadError(Yt2JellyfinError):
    """
    Raised when yt-dlp could not be executed at all.

    A non-zero exit status from yt-dlp is NOT an exception: it is relayed
    as a plain failure code. This error covers the cases where the process
    never ran (permission denied, broken executable).

    Example:
        raise DownloadError(
            "Failed to start yt-dlp",
            details={'command': 'yt-dlp', 'original_error': 'Permission denied'}
        )
    """
    pass


class InstallerError(Yt2JellyfinError):
    """
    Raised when a setup step cannot be completed.

    The installer treats most steps as best effort and only raises this
    for failures that leave yt2jellyfin unusable (yt-dlp still missing
    after installation).
    """
    pass
