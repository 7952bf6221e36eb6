"""
Download module for yt2jellyfin.

This module turns a DownloadRequest into a yt-dlp run:
    - models: LayoutMode, DownloadRequest, MetadataOverride, ResolvedLayout
    - resolver: Output path template and forced metadata
    - command: Complete yt-dlp argument list
    - runner: Executes yt-dlp and relays its exit status

Usage:
    from yt2jellyfin.download import DownloadRequest, LayoutMode, YtDlpRunner

    request = DownloadRequest(
        input="https://youtube.com/playlist?list=PLxyz",
        output_dir=config.output_dir,
        layout_mode=LayoutMode.PLAYLIST_FOLDER,
    )
    exit_code = YtDlpRunner().download(request, config)
"""

from yt2jellyfin.download.command import build_ytdlp_command
from yt2jellyfin.download.models import (
    DownloadRequest,
    LayoutMode,
    MetadataOverride,
    ResolvedLayout,
)
from yt2jellyfin.download.resolver import build_input_argument, resolve_layout
from yt2jellyfin.download.runner import YtDlpRunner, find_recent_files

__all__ = [
    # Models
    "DownloadRequest",
    "LayoutMode",
    "MetadataOverride",
    "ResolvedLayout",
    # Resolution
    "resolve_layout",
    "build_input_argument",
    "build_ytdlp_command",
    # Execution
    "YtDlpRunner",
    "find_recent_files",
]
