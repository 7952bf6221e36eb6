"""
yt2jellyfin: Download YouTube audio as MP3 for Jellyfin.

This package wraps yt-dlp (and the ffmpeg it drives) to download the best
available audio, convert it to MP3, embed metadata and square-cropped
artwork, and file the result in a Jellyfin-friendly layout:

    Music/
    └── Artist Name/
        └── Album or Single/
            └── Track Title.mp3

Architecture:
    All downloading, transcoding and tagging happens inside yt-dlp.
    This package only decides HOW yt-dlp is called:

    download/resolver.py: Output path template + forced metadata
                          (flat / default / playlist-folder layouts,
                          --artist / --album overrides)
    download/command.py:  Complete yt-dlp argument list
    download/runner.py:   Runs yt-dlp, relays its exit status

Modules:
    core/         - Configuration, logging, exceptions
    download/     - Request model, resolver, command builder, runner
    utils/        - Filename helpers, dependency checks, yt-dlp update
    installer.py  - Interactive setup (`yt2jellyfin-setup`)
    cli.py        - Command-line interface (`yt2jellyfin`)

Usage:
    Command Line:
        yt2jellyfin "https://youtube.com/watch?v=VIDEO_ID"
        yt2jellyfin "https://youtube.com/playlist?list=PLxyz" --playlist-folder
        yt2jellyfin "lofi hip hop" --search -n 5
        yt2jellyfin URL --artist "Rick Astley" --album "Greatest Hits"

    Python API:
        from yt2jellyfin import load_config, DownloadRequest, LayoutMode, YtDlpRunner

        config = load_config()
        request = DownloadRequest(
            input="https://youtube.com/watch?v=VIDEO_ID",
            output_dir=config.output_dir,
            layout_mode=LayoutMode.FLAT,
        )
        exit_code = YtDlpRunner().download(request, config)

Dependencies:
    - yt-dlp: Downloading, audio extraction, metadata and thumbnail embedding
    - mutagen: Used by yt-dlp for thumbnail embedding
    - rich-click / click: CLI framework and help formatting
    - pyyaml: Optional configuration file
    - python-dotenv: .env support for the environment variables
    - colorama: Coloured console output
    - ffmpeg / ffprobe: External programs used by yt-dlp
"""

__version__ = "1.0.0"
__author__ = "yt2jellyfin"
__license__ = "MIT"

# Convenience imports for common usage
from yt2jellyfin.core import (
    Config,
    ConfigError,
    DependencyError,
    DownloadError,
    InstallerError,
    Yt2JellyfinError,
    get_logger,
    load_config,
    setup_logging,
)
from yt2jellyfin.download import (
    DownloadRequest,
    LayoutMode,
    ResolvedLayout,
    YtDlpRunner,
    build_ytdlp_command,
    resolve_layout,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "Yt2JellyfinError",
    "ConfigError",
    "DependencyError",
    "DownloadError",
    "InstallerError",
    # Download
    "DownloadRequest",
    "LayoutMode",
    "ResolvedLayout",
    "resolve_layout",
    "build_ytdlp_command",
    "YtDlpRunner",
]
