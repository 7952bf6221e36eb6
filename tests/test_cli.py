"""Test the yt2jellyfin command line"""

import pytest
from unittest.mock import Mock, patch
from click.testing import CliRunner

from yt2jellyfin import __version__
from yt2jellyfin.cli import cli
from yt2jellyfin.utils.dependencies import DependencyReport

RUN_TARGET = "yt2jellyfin.download.runner.subprocess.run"


@pytest.fixture
def runner(isolated_home):
    return CliRunner()


@pytest.fixture
def library(temp_dir):
    return temp_dir / "library"


@pytest.fixture
def binaries_present():
    with patch("yt2jellyfin.cli.has_required_binaries", return_value=True):
        yield


def _value_after(command, flag):
    return command[command.index(flag) + 1]


class TestUsageErrors:
    """Test invalid invocations"""

    def test_unknown_option(self, runner):
        """Unknown options exit 1 without running yt-dlp"""
        with patch(RUN_TARGET) as mock_run:
            result = runner.invoke(cli, ["--bogus"])
        assert result.exit_code == 1
        assert "--help" in result.output
        mock_run.assert_not_called()

    def test_missing_input(self, runner):
        with patch(RUN_TARGET) as mock_run:
            result = runner.invoke(cli, [])
        assert result.exit_code == 1
        assert "No URL or search query provided" in result.output
        mock_run.assert_not_called()

    def test_blank_input(self, runner, library):
        """Whitespace is treated like a missing input"""
        with patch(RUN_TARGET) as mock_run:
            result = runner.invoke(cli, ["   ", "-o", str(library)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)
        assert "No URL or search query provided" in result.output
        mock_run.assert_not_called()

    def test_flat_and_playlist_folder(self, runner):
        """The two layout flags cannot be combined"""
        with patch(RUN_TARGET) as mock_run:
            result = runner.invoke(cli, ["URL", "--flat", "--playlist-folder"])
        assert result.exit_code == 1
        mock_run.assert_not_called()

    def test_zero_results(self, runner):
        result = runner.invoke(cli, ["query", "--search", "-n", "0"])
        assert result.exit_code == 1

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"yt2jellyfin {__version__}"


class TestDownload:
    """Test download invocations with yt-dlp replaced by a mock"""

    def test_single_video(self, runner, library, binaries_present):
        with patch(RUN_TARGET, return_value=Mock(returncode=0)) as mock_run:
            result = runner.invoke(cli, ["https://youtu.be/abc", "-o", str(library)])

        assert result.exit_code == 0, result.output
        assert library.is_dir()
        command = mock_run.call_args[0][0]
        assert command[0] == "yt-dlp"
        assert command[-1] == "https://youtu.be/abc"
        assert _value_after(command, "-o").startswith(str(library))
        assert "Download complete!" in result.output

    def test_search_with_overrides(self, runner, library, binaries_present):
        with patch(RUN_TARGET, return_value=Mock(returncode=0)) as mock_run:
            result = runner.invoke(cli, [
                "lofi hip hop", "-s", "-n", "5", "-o", str(library),
                "--artist", "Rick Astley", "--album", "Greatest Hits", "-q",
            ])

        assert result.exit_code == 0, result.output
        command = mock_run.call_args[0][0]
        assert command[-1] == "ytsearch5:lofi hip hop"
        assert _value_after(command, "-o") == f"{library}/Rick Astley/Greatest Hits/%(title)s.%(ext)s"
        assert "--quiet" in command
        # Quiet silences yt-dlp and the banner, not the summary
        assert "Download complete!" in result.output
        assert "Recently modified files" not in result.output

    def test_flat_layout(self, runner, library, binaries_present):
        with patch(RUN_TARGET, return_value=Mock(returncode=0)) as mock_run:
            result = runner.invoke(cli, ["URL", "-f", "--no-archive", "--no-thumbnail", "-o", str(library)])

        assert result.exit_code == 0, result.output
        command = mock_run.call_args[0][0]
        assert _value_after(command, "-o") == f"{library}/%(title)s.%(ext)s"
        assert "--download-archive" not in command
        assert "--embed-thumbnail" not in command

    def test_output_from_environment(self, runner, library, binaries_present, monkeypatch):
        monkeypatch.setenv("YT2JELLYFIN_OUTPUT", str(library))
        with patch(RUN_TARGET, return_value=Mock(returncode=0)) as mock_run:
            result = runner.invoke(cli, ["URL"])

        assert result.exit_code == 0, result.output
        assert _value_after(mock_run.call_args[0][0], "-o").startswith(str(library))

    def test_ytdlp_failure(self, runner, library, binaries_present):
        """A failing yt-dlp exits 1"""
        with patch(RUN_TARGET, return_value=Mock(returncode=2)):
            result = runner.invoke(cli, ["URL", "-o", str(library)])
        assert result.exit_code == 1
        assert "Download failed or partially completed" in result.output

    def test_missing_dependencies(self, runner, library):
        with patch("yt2jellyfin.cli.has_required_binaries", return_value=False), \
             patch(RUN_TARGET) as mock_run:
            result = runner.invoke(cli, ["URL", "-o", str(library)])

        assert result.exit_code == 1
        assert "Missing dependencies. Run: yt2jellyfin --check" in result.output
        mock_run.assert_not_called()

    def test_missing_config_file(self, runner, temp_dir, binaries_present):
        with patch(RUN_TARGET) as mock_run:
            result = runner.invoke(cli, ["URL", "--config", str(temp_dir / "missing.yaml")])
        assert result.exit_code == 1
        assert "Configuration error" in result.output
        mock_run.assert_not_called()

    def test_interrupted(self, runner, library, binaries_present):
        with patch(RUN_TARGET, side_effect=KeyboardInterrupt):
            result = runner.invoke(cli, ["URL", "-o", str(library)])
        assert result.exit_code == 130

    def test_log_file(self, runner, library, temp_dir, binaries_present):
        log_file = temp_dir / "run.log"
        with patch(RUN_TARGET, return_value=Mock(returncode=0)):
            result = runner.invoke(cli, ["URL", "-o", str(library), "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "Executing: yt-dlp" in log_file.read_text(encoding="utf-8")


class TestMaintenance:
    """Test --check and --update"""

    def test_check_ok(self, runner):
        with patch("yt2jellyfin.cli.check_dependencies", return_value=DependencyReport(platform="linux")):
            result = runner.invoke(cli, ["--check"])
        assert result.exit_code == 0

    def test_check_missing(self, runner):
        report = DependencyReport(platform="linux", missing=["ffmpeg"])
        with patch("yt2jellyfin.cli.check_dependencies", return_value=report):
            result = runner.invoke(cli, ["--check"])
        assert result.exit_code == 1
        assert "Install on Ubuntu/Debian:" in result.output

    def test_update(self, runner):
        with patch("yt2jellyfin.cli.update_ytdlp", return_value=0) as mock_update:
            result = runner.invoke(cli, ["--update"])
        assert result.exit_code == 0
        mock_update.assert_called_once_with()
