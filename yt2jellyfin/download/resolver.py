"""
Output path and metadata override resolution.

This module decides WHERE yt-dlp writes each file and WHICH metadata
fields are forced, from a DownloadRequest alone. It performs no I/O and
cannot fail: it only assembles strings.

Layouts (placeholders are yt-dlp output template fields, "a,b" means
"a, falling back to b"):

    FLAT
        output_dir/%(title)s.%(ext)s

    DEFAULT
        output_dir/%(uploader,channel)s/%(album,playlist_title)s/%(title)s.%(ext)s

    PLAYLIST_FOLDER
        output_dir/%(uploader,channel)s/%(playlist_title,album,title)s/
            %(playlist_index&{} - |)s%(title)s.%(ext)s

Overrides:
    --artist replaces the first folder level, --album the second one.
    With --album the file lands directly in that fixed folder, so the
    playlist index prefix is not used. In FLAT mode the path is never
    touched, but the metadata overrides are still emitted so the tags
    reflect them.

Usage:
    from yt2jellyfin.download.resolver import resolve_layout, build_input_argument

    layout = resolve_layout(request)
    layout.path_template          # handed to yt-dlp -o
    layout.metadata_overrides     # (MetadataOverride("artist", "X"), ...)
    build_input_argument(request) # "ytsearch5:lofi hip hop" for searches
"""

import os

from yt2jellyfin.download.models import (
    DownloadRequest,
    LayoutMode,
    MetadataOverride,
    ResolvedLayout,
)
from yt2jellyfin.utils import sanitize_filename, template_literal


SEARCH_PROVIDER = "ytsearch"

ARTIST_SEGMENT = "%(uploader,channel)s"
ALBUM_SEGMENT = "%(album,playlist_title)s"
PLAYLIST_SEGMENT = "%(playlist_title,album,title)s"
TRACK_FILENAME = "%(title)s.%(ext)s"
PLAYLIST_TRACK_FILENAME = "%(playlist_index&{} - |)s%(title)s.%(ext)s"

UNSAFE_SEGMENTS = ("", ".", "..")
SAFE_SEGMENT = "_"


def resolve_layout(request: DownloadRequest) -> ResolvedLayout:
    """
    Compute the output path template and the metadata overrides.

    Args:
        request: A validated download request.

    Returns:
        ResolvedLayout with the yt-dlp output template and the forced
        metadata pairs (artist first, then album).
    """
    output_dir = str(request.output_dir)

    if request.layout_mode is LayoutMode.FLAT:
        path_template = os.path.join(output_dir, TRACK_FILENAME)
    else:
        if request.layout_mode is LayoutMode.PLAYLIST_FOLDER:
            album_segment = PLAYLIST_SEGMENT
            filename = PLAYLIST_TRACK_FILENAME
        else:
            album_segment = ALBUM_SEGMENT
            filename = TRACK_FILENAME

        artist_segment = ARTIST_SEGMENT
        if request.custom_artist:
            artist_segment = _literal_segment(request.custom_artist)

        if request.custom_album:
            album_segment = _literal_segment(request.custom_album)
            filename = TRACK_FILENAME

        path_template = os.path.join(output_dir, artist_segment, album_segment, filename)

    return ResolvedLayout(
        path_template=path_template,
        metadata_overrides=_metadata_overrides(request),
    )


def build_input_argument(request: DownloadRequest) -> str:
    """
    Return the final positional argument for yt-dlp.

    Search requests become "ytsearch<count>:<query>"; URLs pass through
    unchanged.

    Example:
        DownloadRequest(input="lofi hip hop", is_search=True, search_count=5, ...)
        # -> "ytsearch5:lofi hip hop"
    """
    if request.is_search:
        return f"{SEARCH_PROVIDER}{request.search_count}:{request.input}"
    return request.input


def _literal_segment(value: str) -> str:
    """Turn a user-supplied name into exactly one literal template level."""
    name = sanitize_filename(value).strip()
    # "." and ".." would climb or collapse a level
    if name in UNSAFE_SEGMENTS:
        name = SAFE_SEGMENT
    return template_literal(name)


def _metadata_overrides(request: DownloadRequest) -> tuple[MetadataOverride, ...]:
    overrides = []
    if request.custom_artist:
        overrides.append(MetadataOverride("artist", request.custom_artist))
    if request.custom_album:
        overrides.append(MetadataOverride("album", request.custom_album))
    return tuple(overrides)
