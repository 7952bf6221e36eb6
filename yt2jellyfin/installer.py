"""
Interactive installer for yt2jellyfin (`yt2jellyfin-setup`).

Steps:
    1. Install system dependencies (ffmpeg, python3) with the detected
       package manager: Homebrew, apt, dnf or pacman.
    2. Install yt-dlp and mutagen (Homebrew on macOS, pipx, or pip --user)
       and verify yt-dlp is reachable.
    3. Make sure ~/.local/bin is on PATH via the user's shell rc file.
    4. Ask for the Jellyfin music library path, create it and export it
       as YT2JELLYFIN_OUTPUT in the shell rc file.
    5. Write a default yt-dlp config (~/.config/yt-dlp/config) if none exists.
    6. Print usage examples.

Every edit to the shell rc file is guarded by a marker, so running the
installer twice does not duplicate anything.

Usage:
    yt2jellyfin-setup                 # interactive
    yt2jellyfin-setup --yes           # accept the default library path
    yt2jellyfin-setup --skip-system   # dependencies already installed
"""

import os
import shutil
import site
import subprocess
from pathlib import Path

import rich_click as click

from yt2jellyfin.core import (
    InstallerError,
    get_logger,
    log_success,
    setup_logging,
    shutdown_logging,
)
from yt2jellyfin.core.config import DEFAULT_OUTPUT_DIR, ENV_OUTPUT
from yt2jellyfin.utils import PLATFORM_MACOS, detect_platform, ensure_directory

logger = get_logger(__name__)


PATH_MARKER = "# yt2jellyfin PATH"
OUTPUT_MARKER = ENV_OUTPUT
PYTHON_BIN_MARKER = "Library/Python"

YTDLP_CONFIG_TEMPLATE = """\
# yt-dlp configuration
# This file is used by both yt-dlp directly and the yt2jellyfin command

# Prefer best quality
--format bestaudio/best

# Retry on errors
--retries 3
--fragment-retries 3

# Continue partial downloads
--continue

# Don't overwrite existing files
--no-overwrites

# Limit concurrent connections (be nice to servers)
--concurrent-fragments 4

# Add sponsorblock markers (optional - remove if you don't want this)
# --sponsorblock-mark all

# Cookies from browser (uncomment if you need to access age-restricted content)
# --cookies-from-browser firefox
# --cookies-from-browser chrome
"""

USAGE_EXAMPLES = """\
Usage examples:

  # Download a video
  yt2jellyfin "https://youtube.com/watch?v=VIDEO_ID"

  # Download a playlist
  yt2jellyfin "https://youtube.com/playlist?list=PLAYLIST_ID" --playlist-folder

  # Search and download
  yt2jellyfin "artist - song name" --search

  # See all options
  yt2jellyfin --help
"""


def local_bin_dir() -> Path:
    """Directory where pip --user and pipx place executables."""
    return Path.home() / ".local" / "bin"


def python_user_bin_dir() -> Path:
    """Python's user scripts directory (macOS installs pip --user scripts there)."""
    return Path(site.getuserbase()) / "bin"


def install_system_dependencies(platform: str) -> None:
    """
    Install ffmpeg and python3 with the platform's package manager.

    Failures are logged as warnings; the remaining steps still run.
    """
    if platform == PLATFORM_MACOS:
        if shutil.which("brew"):
            logger.info("Detected macOS with Homebrew")
            _run(["brew", "install", "ffmpeg", "python3"])
        else:
            logger.warning("Homebrew not found. Install it from https://brew.sh")
            logger.warning("Then run: brew install ffmpeg python3")
            return
    elif shutil.which("apt"):
        _run(["sudo", "apt", "update"])
        _run(["sudo", "apt", "install", "-y", "ffmpeg", "python3", "python3-pip", "python3-venv"])
    elif shutil.which("dnf"):
        _run(["sudo", "dnf", "install", "-y", "ffmpeg", "python3", "python3-pip"])
    elif shutil.which("pacman"):
        _run(["sudo", "pacman", "-S", "--noconfirm", "ffmpeg", "python", "python-pip"])
    else:
        logger.warning("Unknown package manager. Please install ffmpeg and python3 manually.")
        return

    log_success(logger, "System dependencies installed")


def install_ytdlp(platform: str) -> None:
    """
    Install yt-dlp and mutagen, then make sure yt-dlp is on PATH.

    Raises:
        InstallerError: If yt-dlp is still not reachable afterwards.
    """
    if platform == PLATFORM_MACOS and shutil.which("brew"):
        if _run(["brew", "install", "yt-dlp"]) != 0:
            _run(["brew", "upgrade", "yt-dlp"])
        if _run(["pip3", "install", "--user", "mutagen", "--break-system-packages"]) != 0:
            _run(["pip3", "install", "--user", "mutagen"])
    elif shutil.which("pipx"):
        if _run(["pipx", "install", "yt-dlp"]) != 0:
            _run(["pipx", "upgrade", "yt-dlp"])
        _run(["pipx", "inject", "yt-dlp", "mutagen"])
    else:
        pip_install = ["pip3", "install", "--user", "--upgrade", "yt-dlp", "mutagen"]
        if (
            _run(pip_install + ["--break-system-packages"]) != 0
            and _run(pip_install) != 0
        ):
            _run(["pip", "install", "--user", "--upgrade", "yt-dlp", "mutagen"])

    # pip --user installs to ~/.local/bin (Linux) or the Python user base (macOS)
    extra_dirs = [local_bin_dir()]
    if platform == PLATFORM_MACOS:
        user_bin = python_user_bin_dir()
        if user_bin.is_dir():
            extra_dirs.append(user_bin)
    prepend_to_process_path(extra_dirs)

    if shutil.which("yt-dlp") is None:
        logger.error("yt-dlp installation failed. Please install manually:")
        logger.info("  pip3 install --user yt-dlp mutagen")
        logger.info('  export PATH="$HOME/.local/bin:$PATH"')
        raise InstallerError("yt-dlp is not available after installation")

    log_success(logger, "yt-dlp installed")


def prepend_to_process_path(directories: list[Path]) -> None:
    """Put directories in front of this process's PATH (for verification only)."""
    current = os.environ.get("PATH", "")
    entries = [str(d) for d in directories if str(d) not in current.split(os.pathsep)]
    if entries:
        os.environ["PATH"] = os.pathsep.join(entries + ([current] if current else []))


def detect_shell_rc(
    platform: str,
    shell: str | None = None,
    home: Path | None = None,
    zsh_version: str | None = None
) -> Path:
    """
    Pick the shell configuration file to edit.

    zsh uses ~/.zshrc. bash uses ~/.bash_profile on macOS and ~/.bashrc
    elsewhere. Otherwise an existing ~/.bashrc or ~/.bash_profile is used,
    falling back to ~/.bashrc.

    Args:
        platform: Value returned by detect_platform().
        shell: Login shell, defaults to $SHELL.
        home: Home directory, defaults to Path.home().
        zsh_version: $ZSH_VERSION, set when running inside zsh.
    """
    home = home or Path.home()
    shell = shell if shell is not None else os.environ.get("SHELL", "")
    zsh_version = zsh_version if zsh_version is not None else os.environ.get("ZSH_VERSION")

    if zsh_version or "zsh" in shell:
        return home / ".zshrc"
    if "bash" in shell:
        if platform == PLATFORM_MACOS:
            return home / ".bash_profile"
        return home / ".bashrc"
    if (home / ".bashrc").is_file():
        return home / ".bashrc"
    if (home / ".bash_profile").is_file():
        return home / ".bash_profile"
    return home / ".bashrc"


def append_to_shell_rc(rc_path: Path, marker: str, lines: list[str]) -> bool:
    """
    Append a block to the shell rc file unless `marker` is already present.

    The file is created if it does not exist.

    Args:
        rc_path: Shell configuration file.
        marker: Text whose presence means the block was already added.
        lines: Lines to append (a blank separator line is added first).

    Returns:
        True if the block was written. False if it was already there or the
        file is not writable (a warning with manual instructions is logged).
    """
    try:
        rc_path.touch(exist_ok=True)
        writable = os.access(rc_path, os.W_OK)
    except OSError:
        writable = False

    if not writable:
        logger.warning(f"Cannot write to {rc_path} (permission denied)")
        logger.info("Manually add this to your shell config:")
        for line in lines:
            if not line.startswith("#"):
                logger.info(f"  {line}")
        return False

    content = rc_path.read_text(encoding="utf-8", errors="replace")
    if marker in content:
        logger.debug(f"{rc_path} already contains '{marker}'")
        return False

    with open(rc_path, "a", encoding="utf-8") as f:
        f.write("\n" + "\n".join(lines) + "\n")
    return True


def configure_path(rc_path: Path, platform: str, login_path: str | None = None) -> None:
    """
    Add ~/.local/bin (and the macOS Python user bin) to PATH in the rc file.

    Args:
        rc_path: Shell configuration file.
        platform: Value returned by detect_platform().
        login_path: PATH as the user's shell sees it. Defaults to the
                    current PATH; setup_cli passes the value from before
                    install_ytdlp() extended it.
    """
    install_dir = local_bin_dir()
    if login_path is None:
        login_path = os.environ.get("PATH", "")
    path_entries = login_path.split(os.pathsep)

    if str(install_dir) not in path_entries:
        logger.info(f"Adding {install_dir} to PATH...")
        if append_to_shell_rc(rc_path, PATH_MARKER, [PATH_MARKER, 'export PATH="$HOME/.local/bin:$PATH"']):
            logger.info(f"Added PATH to {rc_path}")
            logger.warning(f"Run 'source {rc_path}' or restart your terminal")

    if platform == PLATFORM_MACOS:
        user_bin = python_user_bin_dir()
        if user_bin.is_dir():
            append_to_shell_rc(
                rc_path,
                PYTHON_BIN_MARKER,
                ["# Python user bin (for pip packages)", f'export PATH="{user_bin}:$PATH"']
            )


def configure_output_dir(rc_path: Path, music_path: Path) -> None:
    """Create the library directory and export it as YT2JELLYFIN_OUTPUT."""
    ensure_directory(music_path)
    append_to_shell_rc(
        rc_path,
        OUTPUT_MARKER,
        ["# yt2jellyfin default output directory", f'export {ENV_OUTPUT}="{music_path}"']
    )
    log_success(logger, f"Default output: {music_path}")


def write_ytdlp_config(config_path: Path | None = None) -> bool:
    """
    Write the default yt-dlp config if none exists.

    Returns:
        True if the file was created, False if it already existed.
    """
    config_path = config_path or Path.home() / ".config" / "yt-dlp" / "config"
    if config_path.exists():
        logger.info(f"yt-dlp config already exists at {config_path}")
        return False

    ensure_directory(config_path.parent)
    config_path.write_text(YTDLP_CONFIG_TEMPLATE, encoding="utf-8")
    log_success(logger, f"Created yt-dlp config at {config_path}")
    return True


def _run(command: list[str]) -> int:
    """Run an installer command, letting its output through. 127 if it can't start."""
    logger.debug(f"Executing: {' '.join(command)}")
    try:
        return subprocess.run(command, check=False).returncode
    except OSError as e:
        logger.warning(f"Could not run {command[0]}: {e}")
        return 127


@click.command(
    "yt2jellyfin-setup",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "-y", "--yes",
    is_flag=True,
    help="Accept the default music library path without prompting"
)
@click.option(
    "--music-path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="DIR",
    help="Jellyfin music library path (skips the prompt)"
)
@click.option(
    "--skip-system",
    is_flag=True,
    help="Skip installing ffmpeg, yt-dlp and mutagen"
)
def setup_cli(yes: bool, music_path: Path | None, skip_system: bool) -> None:
    """
    Install and configure yt2jellyfin.
    """
    setup_logging()
    platform = detect_platform()
    login_path = os.environ.get("PATH", "")

    try:
        click.secho("yt2jellyfin Setup", fg="green", bold=True)
        click.echo()

        if skip_system:
            logger.info("Skipping steps 1-2 (system dependencies)")
        else:
            logger.info("Step 1: Installing system dependencies...")
            install_system_dependencies(platform)

            logger.info("Step 2: Installing yt-dlp and mutagen...")
            install_ytdlp(platform)

        logger.info("Step 3: Configuring PATH...")
        rc_path = detect_shell_rc(platform)
        configure_path(rc_path, platform, login_path)

        logger.info("Step 4: Configuration...")
        if music_path is None:
            default_path = Path(DEFAULT_OUTPUT_DIR).expanduser()
            if yes:
                music_path = default_path
            else:
                answer = click.prompt(
                    "Enter your Jellyfin music library path (or press Enter for ~/Music/YouTube)",
                    default=str(default_path),
                    show_default=False
                )
                music_path = Path(answer)
        configure_output_dir(rc_path, music_path.expanduser().resolve())

        logger.info("Step 5: Creating yt-dlp config...")
        write_ytdlp_config()

        click.echo()
        click.secho("Setup Complete!", fg="green", bold=True)
        click.echo()
        click.echo(USAGE_EXAMPLES)
        click.secho(
            f"Note: Restart your terminal or run 'source {rc_path}' to use the command",
            fg="yellow"
        )

    except InstallerError as e:
        logger.error(e.message)
        raise SystemExit(1)

    finally:
        shutdown_logging()


def main() -> None:
    """Entry point for `yt2jellyfin-setup`."""
    setup_cli()


if __name__ == "__main__":
    main()
