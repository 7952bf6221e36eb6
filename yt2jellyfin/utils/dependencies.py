"""
External dependency checks and yt-dlp updates.

yt2jellyfin delegates all real work to external programs. This module
probes for them and keeps yt-dlp current:

    Required:  yt-dlp, ffmpeg, ffprobe (usually ships with ffmpeg)
    Optional:  mutagen (better thumbnail embedding in yt-dlp)

Usage:
    from yt2jellyfin.utils.dependencies import (
        check_dependencies, has_required_binaries, update_ytdlp
    )

    report = check_dependencies()   # yt2jellyfin --check
    if not report.ok:
        print(install_instructions(report.platform))

    update_ytdlp()                  # yt2jellyfin --update
"""

import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version as package_version

from yt2jellyfin.core.logger import get_logger, log_step, log_success
from yt2jellyfin.utils import PLATFORM_MACOS, detect_platform

logger = get_logger(__name__)


REQUIRED_BINARIES = {
    "yt-dlp": "yt-dlp",
    "ffmpeg": "ffmpeg",
    "ffprobe": "ffprobe (usually comes with ffmpeg)",
}

# Probed before every download
DOWNLOAD_BINARIES = ("yt-dlp", "ffmpeg")


@dataclass
class DependencyReport:
    """
    Result of a dependency check.

    Attributes:
        platform: "macos", "linux" or "unknown".
        found: Program name -> version string (or "found").
        missing: Human-readable names of missing required programs.
        optional_missing: Missing optional components.
    """
    platform: str
    found: dict[str, str] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    optional_missing: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every required program was found."""
        return not self.missing


def has_required_binaries() -> bool:
    """Fast check that yt-dlp and ffmpeg are on PATH."""
    return all(shutil.which(name) is not None for name in DOWNLOAD_BINARIES)


def ytdlp_version() -> str | None:
    """Return `yt-dlp --version`, or None if it cannot be run."""
    try:
        completed = subprocess.run(
            ["yt-dlp", "--version"],
            capture_output=True,
            text=True,
            check=False
        )
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip() or None


def check_dependencies() -> DependencyReport:
    """
    Probe for every external dependency and log the result.

    Returns:
        DependencyReport; `report.ok` is False if anything required is missing.
    """
    report = DependencyReport(platform=detect_platform())

    log_step(logger, "Checking dependencies...")
    logger.info(f"Platform: {report.platform}")

    for binary, label in REQUIRED_BINARIES.items():
        if shutil.which(binary) is None:
            report.missing.append(label)
            continue

        if binary == "yt-dlp":
            detected = ytdlp_version() or "found"
            log_success(logger, f"yt-dlp {detected}")
        else:
            detected = "found"
            log_success(logger, f"{binary} found")
        report.found[binary] = detected

    try:
        mutagen_version = package_version("mutagen")
    except PackageNotFoundError:
        report.optional_missing.append("mutagen")
        logger.warning("mutagen not found (optional - install with: pip3 install mutagen)")
    else:
        report.found["mutagen"] = mutagen_version
        log_success(logger, "mutagen found (better thumbnail embedding)")

    if report.missing:
        logger.error("Missing required dependencies:")
        for name in report.missing:
            logger.error(f"  - {name}")
    else:
        log_success(logger, "All required dependencies found!")

    return report


def install_instructions(platform: str) -> str:
    """
    Platform-specific installation hints for missing dependencies.

    Args:
        platform: Value returned by detect_platform().

    Returns:
        Multi-line text ready to print.
    """
    if platform == PLATFORM_MACOS:
        lines = [
            "Install on macOS (using Homebrew):",
            "  brew install ffmpeg yt-dlp",
            "  pip3 install mutagen",
            "",
            "If you don't have Homebrew installed:",
            '  /bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"',
        ]
    else:
        lines = [
            "Install on Ubuntu/Debian:",
            "  sudo apt update && sudo apt install ffmpeg",
            "  pip3 install yt-dlp mutagen",
            "",
            "Install on Fedora:",
            "  sudo dnf install ffmpeg",
            "  pip3 install yt-dlp mutagen",
            "",
            "Install on Arch Linux:",
            "  sudo pacman -S ffmpeg yt-dlp python-mutagen",
        ]

    lines += [
        "",
        "Or use pipx for isolated install:",
        "  pipx install yt-dlp",
    ]
    return "\n".join(lines)


def update_ytdlp() -> int:
    """
    Update yt-dlp through whichever tool installed it.

    Order:
        1. Homebrew (macOS, if yt-dlp is a brew formula)
        2. pipx (if yt-dlp is a pipx package)
        3. pip (--break-system-packages, then --user, then plain)
        4. yt-dlp -U (self-update of the standalone binary)

    Returns:
        0 on success, 1 if the update failed.
    """
    log_step(logger, "Updating yt-dlp...")

    if (
        detect_platform() == PLATFORM_MACOS
        and shutil.which("brew")
        and _succeeds(["brew", "list", "yt-dlp"])
    ):
        # A failed upgrade usually just means "already up to date"
        _run(["brew", "upgrade", "yt-dlp"])
    elif shutil.which("pipx") and "yt-dlp" in _output(["pipx", "list"]):
        if _run(["pipx", "upgrade", "yt-dlp"]) != 0:
            logger.error("pipx upgrade yt-dlp failed")
            return 1
    elif _succeeds([sys.executable, "-m", "pip", "show", "yt-dlp"]):
        pip_install = [sys.executable, "-m", "pip", "install", "--upgrade", "yt-dlp"]
        if not (
            _succeeds(pip_install + ["--break-system-packages"])
            or _succeeds(pip_install + ["--user"])
            or _run(pip_install) == 0
        ):
            logger.error("pip could not upgrade yt-dlp")
            return 1
    else:
        logger.warning("yt-dlp not installed via brew/pip/pipx, trying yt-dlp self-update...")
        if _run(["yt-dlp", "-U"]) != 0:
            logger.error("yt-dlp self-update failed")
            return 1

    log_success(logger, f"yt-dlp updated to {ytdlp_version() or 'unknown version'}")
    return 0


def _run(command: list[str]) -> int:
    """Run a command with output going to the terminal; 127 if it can't start."""
    logger.debug(f"Executing: {' '.join(command)}")
    try:
        return subprocess.run(command, check=False).returncode
    except OSError as e:
        logger.debug(f"Failed to start {command[0]}: {e}")
        return 127


def _succeeds(command: list[str]) -> bool:
    """Run a command silently and report whether it exited with 0."""
    logger.debug(f"Executing: {' '.join(command)}")
    try:
        completed = subprocess.run(command, capture_output=True, check=False)
    except OSError:
        return False
    return completed.returncode == 0


def _output(command: list[str]) -> str:
    """Run a command silently and return its stdout ('' on failure)."""
    try:
        completed = subprocess.run(command, capture_output=True, text=True, check=False)
    except OSError:
        return ""
    return completed.stdout or ""
