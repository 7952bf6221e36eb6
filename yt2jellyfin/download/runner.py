"""
yt-dlp process runner.

yt-dlp (and the ffmpeg it drives) is treated as an external collaborator
behind a narrow interface: submit an argument list, get an exit status
back. yt-dlp writes its own progress straight to the terminal; nothing
is captured or interpreted here beyond success / failure.

Usage:
    from yt2jellyfin.download.runner import YtDlpRunner

    runner = YtDlpRunner()
    exit_code = runner.download(request, config)
"""

import subprocess
import time
from pathlib import Path
from typing import Sequence

from yt2jellyfin.core.config import Config
from yt2jellyfin.core.exceptions import DependencyError, DownloadError
from yt2jellyfin.core.logger import get_logger, log_step, log_success
from yt2jellyfin.download.command import build_ytdlp_command
from yt2jellyfin.download.models import DownloadRequest
from yt2jellyfin.download.resolver import build_input_argument

logger = get_logger(__name__)


RECENT_FILES_MINUTES = 5
RECENT_FILES_LIMIT = 10


class YtDlpRunner:
    """
    Runs yt-dlp as a child process and relays its exit status.

    Single-threaded and synchronous: one process per run, the caller blocks
    until it exits. Ctrl-C reaches the child through the terminal's process
    group; no extra cancellation is done here.
    """

    def run(self, command: Sequence[str]) -> int:
        """
        Execute a command and return its exit status verbatim.

        Args:
            command: Full argument list, executable first.

        Returns:
            The process exit code.

        Raises:
            DependencyError: If the executable cannot be found.
            DownloadError: If the process cannot be started for another reason.
        """
        logger.debug(f"Executing: {' '.join(command)}")
        try:
            completed = subprocess.run(list(command), check=False)
        except FileNotFoundError as e:
            raise DependencyError(
                f"{command[0]} not found. Run: yt2jellyfin --check",
                details={"command": command[0], "original_error": str(e)},
                missing=[command[0]]
            ) from e
        except OSError as e:
            raise DownloadError(
                f"Failed to start {command[0]}: {e}",
                details={"command": command[0], "original_error": str(e)}
            ) from e
        return completed.returncode

    def download(self, request: DownloadRequest, config: Config) -> int:
        """
        Download, convert and tag everything the request describes.

        Args:
            request: The validated download request.
            config: Resolved configuration.

        Returns:
            0 if yt-dlp succeeded, 1 on any non-zero yt-dlp exit.

        Behavior:
            1. Build the yt-dlp command
            2. Log input/output (and every argument when verbose)
            3. Run yt-dlp
            4. On success list recently written MP3 files (unless quiet)
        """
        command = build_ytdlp_command(request, config)

        log_step(logger, "Starting download...")
        logger.info(f"Input: {build_input_argument(request)}")
        logger.info(f"Output: {request.output_dir}")

        if request.verbose:
            logger.info("yt-dlp arguments:")
            for argument in command[1:]:
                logger.info(f"  {argument}")

        exit_code = self.run(command)

        if exit_code != 0:
            logger.error("Download failed or partially completed")
            logger.debug(f"yt-dlp exited with status {exit_code}")
            return 1

        log_success(logger, "Download complete!")
        logger.info(f"Files saved to: {request.output_dir}")

        if not request.quiet:
            recent = find_recent_files(request.output_dir)
            if recent:
                logger.info("Recently modified files:")
                for path in recent:
                    logger.info(f"  ✓ {path.name}")

        return 0


def find_recent_files(
    directory: Path,
    minutes: int = RECENT_FILES_MINUTES,
    limit: int = RECENT_FILES_LIMIT,
    pattern: str = "*.mp3"
) -> list[Path]:
    """
    List files under `directory` modified in the last `minutes` minutes.

    Args:
        directory: Root to search recursively.
        minutes: Age limit.
        limit: Maximum number of files returned.
        pattern: Glob pattern for file names.

    Returns:
        Newest first. Empty if the directory does not exist.
    """
    if not directory.is_dir():
        return []

    cutoff = time.time() - minutes * 60
    recent = []
    for path in directory.rglob(pattern):
        try:
            mtime = path.stat().st_mtime
        except OSError:
            continue
        if path.is_file() and mtime >= cutoff:
            recent.append((mtime, path))

    recent.sort(key=lambda item: item[0], reverse=True)
    return [path for _, path in recent[:limit]]
