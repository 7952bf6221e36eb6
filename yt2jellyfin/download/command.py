"""
yt-dlp command construction.

Builds the complete argument list for one yt-dlp run from a
DownloadRequest and the resolved Config. Like the resolver, this module
is pure: it only assembles strings.

Argument groups, in order:
    1. Audio extraction (MP3, best quality)
    2. Metadata embedding and field mapping
       (uploader/channel -> artist, playlist title -> album,
        playlist index -> track number)
    3. Thumbnail embedding, converted to PNG and cropped to a square
    4. Forced metadata (--artist / --album)
    5. Output template
    6. Download archive
    7. Misc robustness flags
    8. --keep-video
    9. Verbosity
   10. URL or search directive (always last)

Usage:
    from yt2jellyfin.download.command import build_ytdlp_command

    command = build_ytdlp_command(request, config)
    subprocess.run(command)
"""

from yt2jellyfin.core.config import Config
from yt2jellyfin.download.models import DownloadRequest, MetadataOverride
from yt2jellyfin.download.resolver import build_input_argument, resolve_layout


YTDLP_EXECUTABLE = "yt-dlp"

# Crop to the shorter side so artwork is square
THUMBNAIL_CROP_PPA = (
    "ThumbnailsConvertor+ffmpeg_o:-c:v png "
    "-vf crop=\"'if(gt(ih,iw),iw,ih)':'if(gt(iw,ih),ih,iw)'\""
)

# Matches the whole field value, so the replacement is the full new value
OVERRIDE_PATTERN = "(?s)^.*$"


def build_ytdlp_command(request: DownloadRequest, config: Config) -> list[str]:
    """
    Build the yt-dlp argument list.

    Args:
        request: The validated download request.
        config: Resolved configuration (archive, quality, fragments, retries).

    Returns:
        List starting with the yt-dlp executable and ending with the URL
        or search directive.
    """
    layout = resolve_layout(request)

    command = [YTDLP_EXECUTABLE]

    # Audio extraction
    command += [
        "--extract-audio",
        "--audio-format", config.audio_format,
        "--audio-quality", config.audio_quality,
        "-f", "bestaudio/best",
    ]

    # Metadata
    command += [
        "--embed-metadata",
        "--add-metadata",
        "--parse-metadata", "%(uploader,channel)s:%(meta_artist)s",
        "--parse-metadata", "%(playlist_title,title)s:%(meta_album)s",
        "--parse-metadata", "%(playlist_index)s:%(meta_track)s",
    ]

    if request.embed_thumbnail:
        command += [
            "--embed-thumbnail",
            "--convert-thumbnails", "png",
            "--ppa", THUMBNAIL_CROP_PPA,
        ]

    for override in layout.metadata_overrides:
        command += override_arguments(override)

    command += ["-o", layout.path_template]

    if request.use_archive:
        command += ["--download-archive", str(config.archive_file)]

    retries = str(config.retries)
    command += [
        "--no-overwrites",
        "--continue",
        "--ignore-errors",
        "--no-warnings",
        "--restrict-filenames",
        "--windows-filenames",
        "--concurrent-fragments", str(config.concurrent_fragments),
        "--retries", retries,
        "--fragment-retries", retries,
    ]

    if request.keep_video:
        command.append("--keep-video")

    if request.quiet:
        command += ["--quiet", "--no-progress"]
    elif request.verbose:
        command.append("--verbose")
    else:
        command += ["--progress", "--newline"]

    command.append(build_input_argument(request))
    return command


def override_arguments(override: MetadataOverride) -> list[str]:
    """
    Render one forced metadata pair as yt-dlp arguments.

    The base --parse-metadata mappings always set meta_artist/meta_album,
    so replacing the whole value afterwards forces the tag for every item.
    Backslashes are escaped because the value is a regex replacement.

    Example:
        override_arguments(MetadataOverride("artist", "Rick Astley"))
        # ["--replace-in-metadata", "meta_artist", "(?s)^.*$", "Rick Astley"]
    """
    replacement = override.value.replace("\\", "\\\\")
    return ["--replace-in-metadata", f"meta_{override.field}", OVERRIDE_PATTERN, replacement]
