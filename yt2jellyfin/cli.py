"""
Command-line interface for yt2jellyfin.

This module implements the `yt2jellyfin` command using Click.
rich-click is used for the help formatting and colours.

Usage:
    yt2jellyfin <url|query> [OPTIONS]

    # Download a single video
    yt2jellyfin "https://youtube.com/watch?v=dQw4w9WgXcQ"

    # Download entire playlist, organized by playlist name
    yt2jellyfin "https://youtube.com/playlist?list=PLxyz" --playlist-folder

    # Search and download top 5 results
    yt2jellyfin "lofi hip hop" --search -n 5

    # Override artist and album
    yt2jellyfin URL --artist "Rick Astley" --album "Greatest Hits"

    # Maintenance
    yt2jellyfin --check
    yt2jellyfin --update

Exit Codes:
    0    Success
    1    Usage error, missing dependency, configuration error,
         or yt-dlp reported a failure
    130  Interrupted by user
"""

import logging
from pathlib import Path
from typing import Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Use --help for usage information"
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "yt2jellyfin": [
        {
            "name": "Input",
            "options": ["--search", "--number"],
        },
        {
            "name": "Library Layout",
            "options": ["--output", "--flat", "--playlist-folder", "--artist", "--album"],
        },
        {
            "name": "Download Options",
            "options": ["--no-archive", "--no-thumbnail", "--keep-video"],
        },
        {
            "name": "Output Verbosity",
            "options": ["--quiet", "--verbose", "--log-file"],
        },
        {
            "name": "Maintenance",
            "options": ["--check", "--update", "--config", "--version", "--help"],
        },
    ],
}

from yt2jellyfin import __version__
from yt2jellyfin.core import (
    Config,
    ConfigError,
    DependencyError,
    Yt2JellyfinError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from yt2jellyfin.core.config import expand_path
from yt2jellyfin.download import DownloadRequest, LayoutMode, YtDlpRunner
from yt2jellyfin.utils import ensure_directory
from yt2jellyfin.utils.dependencies import (
    check_dependencies,
    has_required_binaries,
    install_instructions,
    update_ytdlp,
)

logger = get_logger(__name__)


USAGE_EXIT_CODE = 1
INTERRUPTED_EXIT_CODE = 130

BANNER = """
██╗   ██╗████████╗██████╗      ██╗███████╗██╗     ██╗  ██╗   ██╗███████╗██╗███╗   ██╗
╚██╗ ██╔╝╚══██╔══╝╚════██╗     ██║██╔════╝██║     ██║  ╚██╗ ██╔╝██╔════╝██║████╗  ██║
 ╚████╔╝    ██║    █████╔╝     ██║█████╗  ██║     ██║   ╚████╔╝ █████╗  ██║██╔██╗ ██║
  ╚██╔╝     ██║   ██╔═══╝ ██   ██║██╔══╝  ██║     ██║    ╚██╔╝  ██╔══╝  ██║██║╚██╗██║
   ██║      ██║   ███████╗╚█████╔╝███████╗███████╗███████╗██║   ██║     ██║██║ ╚████║
   ╚═╝      ╚═╝   ╚══════╝ ╚════╝ ╚══════╝╚══════╝╚══════╝╚═╝   ╚═╝     ╚═╝╚═╝  ╚═══╝
"""


class Yt2JellyfinCommand(click.RichCommand):
    """
    Command class that reports every usage error with exit status 1.

    Click uses 2 for usage errors; yt2jellyfin uses 1 for all failures.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = USAGE_EXIT_CODE
            raise

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = USAGE_EXIT_CODE
            raise


@click.command(
    "yt2jellyfin",
    cls=Yt2JellyfinCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("source", required=False, metavar="<url|query>")
@click.option(
    "-o", "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="DIR",
    help="Output directory (default: $YT2JELLYFIN_OUTPUT or ~/Music/YouTube)"
)
@click.option(
    "-s", "--search",
    is_flag=True,
    help="Treat input as a search query"
)
@click.option(
    "-n", "--number",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    metavar="N",
    help="Number of search results to download"
)
@click.option(
    "-f", "--flat",
    is_flag=True,
    help="Flat structure (no Artist/Album folders)"
)
@click.option(
    "-a", "--album",
    type=str,
    default=None,
    metavar="NAME",
    help="Override album name"
)
@click.option(
    "-A", "--artist",
    type=str,
    default=None,
    metavar="NAME",
    help="Override artist name"
)
@click.option(
    "-p", "--playlist-folder",
    is_flag=True,
    help="Use playlist name as album folder"
)
@click.option(
    "--no-archive",
    is_flag=True,
    help="Don't track downloads (allow re-downloading)"
)
@click.option(
    "--no-thumbnail",
    is_flag=True,
    help="Skip thumbnail embedding"
)
@click.option(
    "--keep-video",
    is_flag=True,
    help="Keep intermediate video file"
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Suppress yt-dlp output"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show detailed output"
)
@click.option(
    "--update",
    is_flag=True,
    help="Update yt-dlp to latest version"
)
@click.option(
    "--check",
    is_flag=True,
    help="Check dependencies"
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="FILE",
    help="YAML config file (default: ~/.config/yt2jellyfin/config.yaml)"
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="FILE",
    help="Also write a detailed log to FILE"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    source: Optional[str],
    output: Optional[Path],
    search: bool,
    number: int,
    flat: bool,
    album: Optional[str],
    artist: Optional[str],
    playlist_folder: bool,
    no_archive: bool,
    no_thumbnail: bool,
    keep_video: bool,
    quiet: bool,
    verbose: bool,
    update: bool,
    check: bool,
    config_path: Optional[Path],
    log_file: Optional[Path],
    version: bool
) -> None:
    """
    yt2jellyfin: Download YouTube audio as MP3 for Jellyfin.

    Downloads best quality audio, converts it to MP3, embeds metadata and
    square album art, and files it as Artist/Album/Track.mp3.

    \b
    INPUT:
        A YouTube video, playlist or channel URL, or a search query
        together with --search.

    \b
    ENVIRONMENT VARIABLES:
        YT2JELLYFIN_OUTPUT    Default output directory
        YT2JELLYFIN_ARCHIVE   Archive file location
        YT2JELLYFIN_CONFIG    Config file location

    \b
    JELLYFIN STRUCTURE:
        default            Music/Artist Name/Album or Single/Track Title.mp3
        --playlist-folder  Music/Artist Name/Playlist/01 - Track Title.mp3
        --flat             Music/Track Title.mp3
    """
    if version:
        click.echo(f"yt2jellyfin {__version__}")
        ctx.exit(0)

    console_level = _console_level(quiet, verbose)

    if check or update:
        setup_logging(console_level, log_file)
        try:
            ctx.exit(_run_check() if check else update_ytdlp())
        finally:
            shutdown_logging()

    if not source or not source.strip():
        setup_logging(console_level)
        logger.error("No URL or search query provided")
        shutdown_logging()
        click.echo()
        click.echo(ctx.get_help())
        ctx.exit(USAGE_EXIT_CODE)

    if flat and playlist_folder:
        raise click.UsageError("--flat and --playlist-folder cannot be used together", ctx=ctx)

    if flat:
        layout_mode = LayoutMode.FLAT
    elif playlist_folder:
        layout_mode = LayoutMode.PLAYLIST_FOLDER
    else:
        layout_mode = LayoutMode.DEFAULT

    options = {
        "input": source,
        "output": output,
        "search": search,
        "number": number,
        "layout_mode": layout_mode,
        "album": album,
        "artist": artist,
        "use_archive": not no_archive,
        "embed_thumbnail": not no_thumbnail,
        "keep_video": keep_video,
        "quiet": quiet,
        "verbose": verbose,
        "config_path": config_path,
        "log_file": log_file,
        "console_level": console_level,
    }

    ctx.exit(_run_download(options))


def _console_level(quiet: bool, verbose: bool) -> int:
    # --quiet silences yt-dlp only; our own progress lines stay visible
    if verbose and not quiet:
        return logging.DEBUG
    return logging.INFO


def _run_check() -> int:
    """Run the dependency check and print install hints if needed."""
    report = check_dependencies()
    if report.ok:
        return 0
    click.echo()
    click.echo(install_instructions(report.platform))
    return 1


def _run_download(options: dict) -> int:
    """
    Execute the download workflow based on CLI options.

    This is the main orchestration function that:
    1. Loads configuration
    2. Sets up logging
    3. Builds the DownloadRequest
    4. Verifies yt-dlp and ffmpeg are available
    5. Creates the output directory and runs yt-dlp

    Args:
        options: Dictionary with CLI options.

    Returns:
        Process exit code.
    """
    try:
        # Console-only logging until the config says where the log file goes
        setup_logging(options["console_level"])
        config = _load_configuration(options["config_path"])

        log_file = options["log_file"] or config.log_file
        if log_file is not None:
            setup_logging(options["console_level"], log_file)

        logger.debug(f"Configuration: {config}")

        request = _build_request(options, config)

        if not has_required_binaries():
            raise DependencyError("Missing dependencies. Run: yt2jellyfin --check")

        ensure_directory(request.output_dir)

        if not request.quiet:
            click.secho(BANNER, fg="cyan", bold=True)

        return YtDlpRunner().download(request, config)

    except ConfigError as e:
        logger.error(f"Configuration error: {e.message}")
        return 1

    except DependencyError as e:
        logger.error(e.message)
        return 1

    except Yt2JellyfinError as e:
        logger.error(f"Error: {e.message}")
        logger.debug(f"Details: {e.details}")
        return 1

    except OSError as e:
        logger.error(f"Filesystem error: {e}")
        return 1

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return INTERRUPTED_EXIT_CODE

    finally:
        shutdown_logging()


def _load_configuration(config_path: Path | None) -> Config:
    """
    Resolve configuration from file and environment.

    Raises:
        ConfigError: If configuration is invalid or an explicit file is missing.
    """
    return load_config(config_path)


def _build_request(options: dict, config: Config) -> DownloadRequest:
    """Combine CLI options with the resolved configuration."""
    output_dir = expand_path(options["output"]) if options["output"] else config.output_dir

    return DownloadRequest(
        input=options["input"],
        output_dir=output_dir,
        is_search=options["search"],
        search_count=options["number"],
        layout_mode=options["layout_mode"],
        custom_artist=options["artist"],
        custom_album=options["album"],
        use_archive=options["use_archive"],
        embed_thumbnail=options["embed_thumbnail"],
        keep_video=options["keep_video"],
        quiet=options["quiet"],
        verbose=options["verbose"],
    )


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `yt2jellyfin` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
