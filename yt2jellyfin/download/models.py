"""
Data models for a single yt2jellyfin download.

These are plain frozen dataclasses built once per invocation by the CLI
and then handed, unchanged, to the resolver and the command builder.

Models:
    LayoutMode: How files are nested into folders (flat / default / playlist).
    DownloadRequest: Everything the user asked for on the command line.
    MetadataOverride: One forced (field, value) metadata pair.
    ResolvedLayout: Output path template + metadata overrides.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class LayoutMode(Enum):
    """
    Folder layout for downloaded files.

    FLAT:            output_dir/Track.mp3
    DEFAULT:         output_dir/Artist/Album/Track.mp3
    PLAYLIST_FOLDER: output_dir/Artist/Playlist/## - Track.mp3
    """
    FLAT = "flat"
    DEFAULT = "default"
    PLAYLIST_FOLDER = "playlist-folder"


@dataclass(frozen=True)
class DownloadRequest:
    """
    A fully validated download request.

    Attributes:
        input: URL (video, playlist, channel) or free-text search query.
        output_dir: Absolute root under which files are written.
        is_search: Turn `input` into a yt-dlp search directive.
        search_count: Number of search results to fetch (>= 1).
        layout_mode: Folder layout, exactly one per request.
        custom_artist: Forces the artist folder and artist tag.
        custom_album: Forces the album folder and album tag.
        use_archive: Skip ids already listed in the download archive.
        embed_thumbnail: Embed square-cropped artwork.
        keep_video: Keep the intermediate video file.
        quiet: Suppress yt-dlp output.
        verbose: Detailed yt-dlp output (ignored when quiet).

    Raises:
        ValueError: If search_count is below 1 or input is empty.
    """
    input: str
    output_dir: Path
    is_search: bool = False
    search_count: int = 1
    layout_mode: LayoutMode = LayoutMode.DEFAULT
    custom_artist: str | None = None
    custom_album: str | None = None
    use_archive: bool = True
    embed_thumbnail: bool = True
    keep_video: bool = False
    quiet: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.input or not self.input.strip():
            raise ValueError("input must be a non-empty URL or search query")
        if self.search_count < 1:
            raise ValueError(f"search_count must be >= 1, got {self.search_count}")

        # Blank overrides mean "no override"
        for name in ("custom_artist", "custom_album"):
            value = getattr(self, name)
            object.__setattr__(self, name, value.strip() if value and value.strip() else None)


@dataclass(frozen=True)
class MetadataOverride:
    """A metadata field forced to a fixed value for every item of the batch."""
    field: str
    value: str


@dataclass(frozen=True)
class ResolvedLayout:
    """
    Output of the path/metadata resolver.

    Attributes:
        path_template: yt-dlp output template (placeholders are filled in
                       by yt-dlp per item at write time).
        metadata_overrides: Forced metadata, artist before album.
    """
    path_template: str
    metadata_overrides: tuple[MetadataOverride, ...] = field(default_factory=tuple)
