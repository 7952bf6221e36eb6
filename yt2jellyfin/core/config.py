"""
Configuration management for yt2jellyfin.

This module resolves the application configuration ONCE at startup into a
frozen Config object that is then passed explicitly to every component.
Nothing mutates it afterwards.

Sources (lowest to highest precedence):
    1. Built-in defaults
    2. Optional YAML config file
    3. Environment variables (a .env file in the working directory is
       loaded first, without overriding variables already set)
    4. Command-line flags (applied by the CLI on top of the Config)

Configuration File Location:
    --config FILE, or $YT2JELLYFIN_CONFIG, or
    ~/.config/yt2jellyfin/config.yaml. Only an explicitly requested file
    is required to exist.

Environment Variables:
    YT2JELLYFIN_OUTPUT    Default output directory
    YT2JELLYFIN_ARCHIVE   Archive file location
    YT2JELLYFIN_CONFIG    Config file location

Example config.yaml:
    output:
      directory: "~/Music/YouTube"
      archive_file: "~/.yt2jellyfin_archive.txt"

    audio:
      format: mp3
      quality: "0"      # 0 = best VBR (~320kbps), or a bitrate like "320K"

    download:
      concurrent_fragments: 4
      retries: 3

    logging:
      file: null        # Optional: path to a log file
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import find_dotenv, load_dotenv

from yt2jellyfin.core.exceptions import ConfigError


ENV_OUTPUT = "YT2JELLYFIN_OUTPUT"
ENV_ARCHIVE = "YT2JELLYFIN_ARCHIVE"
ENV_CONFIG = "YT2JELLYFIN_CONFIG"

DEFAULT_OUTPUT_DIR = "~/Music/YouTube"
DEFAULT_ARCHIVE_FILE = "~/.yt2jellyfin_archive.txt"
DEFAULT_CONFIG_FILE = "~/.config/yt2jellyfin/config.yaml"
DEFAULT_AUDIO_FORMAT = "mp3"
DEFAULT_AUDIO_QUALITY = "0"
DEFAULT_CONCURRENT_FRAGMENTS = 4
DEFAULT_RETRIES = 3


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable (frozen dataclass).

    Attributes:
        output_dir: Root of the music library. ~ is expanded, path is absolute.
        archive_file: yt-dlp download archive (ids already downloaded).
        audio_format: Target codec handed to yt-dlp's --audio-format.
        audio_quality: yt-dlp --audio-quality value. "0" is best VBR.
        concurrent_fragments: Passed through to --concurrent-fragments.
        retries: Passed through to --retries and --fragment-retries.
        log_file: Optional log file, None disables file logging.

    Example:
        config = load_config()
        print(f"Saving to: {config.output_dir}")
    """
    output_dir: Path
    archive_file: Path
    audio_format: str = DEFAULT_AUDIO_FORMAT
    audio_quality: str = DEFAULT_AUDIO_QUALITY
    concurrent_fragments: int = DEFAULT_CONCURRENT_FRAGMENTS
    retries: int = DEFAULT_RETRIES
    log_file: Path | None = None


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None
) -> Config:
    """
    Resolve the configuration from defaults, config file and environment.

    Args:
        config_path: Optional explicit path to a YAML config file.
                     Must exist when given.
        environ: Environment mapping to read. If None, a .env file is loaded
                 into os.environ (existing variables win) and os.environ is used.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, the YAML is
                     invalid, or a field has an invalid value.

    Thread Safety:
        Not thread-safe (may touch os.environ). Call once at startup.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    raw_config = _read_config_file(_locate_config_file(config_path, environ))

    output_section = _get_section(raw_config, "output")
    audio_section = _get_section(raw_config, "audio")
    download_section = _get_section(raw_config, "download")
    logging_section = _get_section(raw_config, "logging")

    output_dir = _get_string(output_section, "directory", "output.directory", DEFAULT_OUTPUT_DIR)
    archive_file = _get_string(output_section, "archive_file", "output.archive_file", DEFAULT_ARCHIVE_FILE)

    # Environment variables override the file
    if environ.get(ENV_OUTPUT):
        output_dir = environ[ENV_OUTPUT]
    if environ.get(ENV_ARCHIVE):
        archive_file = environ[ENV_ARCHIVE]

    audio_format = _get_string(audio_section, "format", "audio.format", DEFAULT_AUDIO_FORMAT)
    audio_quality = _get_string(audio_section, "quality", "audio.quality", DEFAULT_AUDIO_QUALITY)

    concurrent_fragments = _get_int(
        download_section, "concurrent_fragments", "download.concurrent_fragments",
        DEFAULT_CONCURRENT_FRAGMENTS, minimum=1
    )
    retries = _get_int(download_section, "retries", "download.retries", DEFAULT_RETRIES, minimum=0)

    log_file = None
    raw_log_file = logging_section.get("file")
    if raw_log_file is not None:
        if not isinstance(raw_log_file, str) or not raw_log_file.strip():
            raise ConfigError(
                "'logging.file' must be a string path or null",
                details={"field": "logging.file"}
            )
        log_file = expand_path(raw_log_file)

    return Config(
        output_dir=expand_path(output_dir),
        archive_file=expand_path(archive_file),
        audio_format=audio_format,
        audio_quality=audio_quality,
        concurrent_fragments=concurrent_fragments,
        retries=retries,
        log_file=log_file,
    )


def expand_path(value: str | Path) -> Path:
    """Expand ~ and make the path absolute."""
    return Path(value).expanduser().resolve()


def _locate_config_file(config_path: Path | None, environ: Mapping[str, str]) -> Path | None:
    """
    Pick the config file to read.

    Returns:
        The path to read, or None if no explicit file was requested and
        the default file does not exist.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """
    if config_path is None and environ.get(ENV_CONFIG):
        config_path = Path(environ[ENV_CONFIG])

    if config_path is not None:
        config_path = Path(config_path).expanduser()
        if not config_path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                details={"file_path": str(config_path)}
            )
        return config_path

    default_path = Path(DEFAULT_CONFIG_FILE).expanduser()
    return default_path if default_path.is_file() else None


def _read_config_file(config_path: Path | None) -> dict[str, Any]:
    """
    Read and parse the YAML config file.

    An empty file is treated as an empty configuration.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML,
                     or does not contain a dictionary.
    """
    if config_path is None:
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _get_section(raw_config: dict[str, Any], section: str) -> dict[str, Any]:
    value = raw_config.get(section)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(
            f"Section '{section}' must be a dictionary",
            details={"section": section}
        )
    return value


def _get_string(section: dict[str, Any], key: str, field: str, default: str) -> str:
    value = section.get(key)
    if value is None:
        return default
    # YAML turns an unquoted 0 into an int; quality accepts either
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{field}' must be a non-empty string",
            details={"field": field}
        )
    return value.strip()


def _get_int(
    section: dict[str, Any],
    key: str,
    field: str,
    default: int,
    minimum: int
) -> int:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        qualifier = "a positive" if minimum == 1 else "a non-negative"
        raise ConfigError(
            f"'{field}' must be {qualifier} integer",
            details={"field": field, "value": value}
        )
    return value
