"""Test the setup command"""

import os
import pytest
from unittest.mock import patch
from click.testing import CliRunner

from yt2jellyfin.core.exceptions import InstallerError
from yt2jellyfin.installer import (
    PATH_MARKER,
    YTDLP_CONFIG_TEMPLATE,
    append_to_shell_rc,
    configure_output_dir,
    configure_path,
    detect_shell_rc,
    install_ytdlp,
    setup_cli,
    write_ytdlp_config,
)


@pytest.fixture
def bash_home(isolated_home, monkeypatch):
    """bash login shell on Linux with ~/.local/bin not on PATH"""
    monkeypatch.setenv("SHELL", "/bin/bash")
    monkeypatch.delenv("ZSH_VERSION", raising=False)
    monkeypatch.setenv("PATH", "/usr/bin:/bin")
    return isolated_home


class TestShellRc:
    """Test shell configuration file selection"""

    def test_zsh(self, temp_dir):
        assert detect_shell_rc("linux", "/bin/zsh", temp_dir, "") == temp_dir / ".zshrc"

    def test_running_inside_zsh(self, temp_dir):
        assert detect_shell_rc("macos", "/bin/bash", temp_dir, "5.9") == temp_dir / ".zshrc"

    def test_bash_linux(self, temp_dir):
        assert detect_shell_rc("linux", "/bin/bash", temp_dir, "") == temp_dir / ".bashrc"

    def test_bash_macos(self, temp_dir):
        assert detect_shell_rc("macos", "/bin/bash", temp_dir, "") == temp_dir / ".bash_profile"

    def test_unknown_shell_uses_existing_file(self, temp_dir):
        (temp_dir / ".bash_profile").write_text("")
        assert detect_shell_rc("linux", "/bin/fish", temp_dir, "") == temp_dir / ".bash_profile"

    def test_unknown_shell_fallback(self, temp_dir):
        assert detect_shell_rc("linux", "", temp_dir, "") == temp_dir / ".bashrc"


class TestShellRcEdits:
    """Test marker-guarded edits"""

    def test_append_is_idempotent(self, temp_dir):
        rc_path = temp_dir / ".bashrc"
        lines = [PATH_MARKER, 'export PATH="$HOME/.local/bin:$PATH"']

        assert append_to_shell_rc(rc_path, PATH_MARKER, lines) is True
        assert append_to_shell_rc(rc_path, PATH_MARKER, lines) is False
        assert rc_path.read_text().count(PATH_MARKER) == 1

    def test_append_keeps_existing_content(self, temp_dir):
        rc_path = temp_dir / ".zshrc"
        rc_path.write_text("alias ll='ls -l'\n")
        append_to_shell_rc(rc_path, "MARK", ["# MARK", "export A=1"])
        assert rc_path.read_text() == "alias ll='ls -l'\n\n# MARK\nexport A=1\n"

    def test_configure_path(self, bash_home):
        rc_path = bash_home / ".bashrc"
        configure_path(rc_path, "linux")
        assert 'export PATH="$HOME/.local/bin:$PATH"' in rc_path.read_text()

    def test_configure_path_already_on_path(self, bash_home, monkeypatch):
        monkeypatch.setenv("PATH", f"{bash_home / '.local' / 'bin'}:/usr/bin")
        rc_path = bash_home / ".bashrc"
        configure_path(rc_path, "linux")
        assert not rc_path.exists()

    def test_configure_output_dir(self, temp_dir):
        rc_path = temp_dir / ".bashrc"
        music = temp_dir / "Music" / "Jellyfin"
        configure_output_dir(rc_path, music)
        configure_output_dir(rc_path, music)

        assert music.is_dir()
        assert rc_path.read_text().count(f'export YT2JELLYFIN_OUTPUT="{music}"') == 1


class TestYtDlpConfig:
    """Test the default yt-dlp config"""

    def test_written_once(self, temp_dir):
        config_path = temp_dir / "yt-dlp" / "config"
        assert write_ytdlp_config(config_path) is True
        assert config_path.read_text() == YTDLP_CONFIG_TEMPLATE

        config_path.write_text("# mine\n")
        assert write_ytdlp_config(config_path) is False
        assert config_path.read_text() == "# mine\n"


class TestInstallYtDlp:
    """Test yt-dlp installation verification"""

    def test_fails_when_still_missing(self, bash_home):
        with patch("yt2jellyfin.installer.shutil.which", return_value=None), \
             patch("yt2jellyfin.installer._run", return_value=0):
            with pytest.raises(InstallerError):
                install_ytdlp("linux")

    def test_local_bin_added_to_process_path(self, bash_home):
        with patch("yt2jellyfin.installer.shutil.which", return_value="/usr/bin/yt-dlp"), \
             patch("yt2jellyfin.installer._run", return_value=0):
            install_ytdlp("linux")
        assert os.environ["PATH"].split(os.pathsep)[0] == str(bash_home / ".local" / "bin")


class TestSetupCommand:
    """Test yt2jellyfin-setup end to end without system packages"""

    def test_default_library(self, bash_home):
        with patch("yt2jellyfin.installer.detect_platform", return_value="linux"):
            result = CliRunner().invoke(setup_cli, ["--skip-system", "--yes"])

        assert result.exit_code == 0, result.output
        assert "Setup Complete!" in result.output

        music = (bash_home / "Music" / "YouTube").resolve()
        rc_text = (bash_home / ".bashrc").read_text()
        assert PATH_MARKER in rc_text
        assert f'export YT2JELLYFIN_OUTPUT="{music}"' in rc_text
        assert music.is_dir()
        assert (bash_home / ".config" / "yt-dlp" / "config").is_file()

    def test_prompted_library(self, bash_home, temp_dir):
        library = temp_dir / "jellyfin" / "music"
        with patch("yt2jellyfin.installer.detect_platform", return_value="linux"):
            result = CliRunner().invoke(setup_cli, ["--skip-system"], input=f"{library}\n")

        assert result.exit_code == 0, result.output
        assert library.is_dir()
        assert f'YT2JELLYFIN_OUTPUT="{library}"' in (bash_home / ".bashrc").read_text()

    def test_rerun_does_not_duplicate(self, bash_home):
        with patch("yt2jellyfin.installer.detect_platform", return_value="linux"):
            CliRunner().invoke(setup_cli, ["--skip-system", "--yes"])
            result = CliRunner().invoke(setup_cli, ["--skip-system", "--yes"])

        assert result.exit_code == 0, result.output
        rc_text = (bash_home / ".bashrc").read_text()
        assert rc_text.count(PATH_MARKER) == 1
        assert rc_text.count("YT2JELLYFIN_OUTPUT") == 1

    def test_full_install_writes_path_block(self, bash_home):
        """Installing yt-dlp into ~/.local/bin still records it in the rc file"""
        def which(name):
            return "/usr/bin/yt-dlp" if name == "yt-dlp" else None

        with patch("yt2jellyfin.installer.detect_platform", return_value="linux"), \
             patch("yt2jellyfin.installer.shutil.which", side_effect=which), \
             patch("yt2jellyfin.installer._run", return_value=0):
            result = CliRunner().invoke(setup_cli, ["--yes"])

        assert result.exit_code == 0, result.output
        rc_text = (bash_home / ".bashrc").read_text()
        assert PATH_MARKER in rc_text
        assert 'export PATH="$HOME/.local/bin:$PATH"' in rc_text

    def test_install_failure_exits_one(self, bash_home):
        with patch("yt2jellyfin.installer.detect_platform", return_value="linux"), \
             patch("yt2jellyfin.installer.install_system_dependencies"), \
             patch("yt2jellyfin.installer.install_ytdlp", side_effect=InstallerError("no yt-dlp")):
            result = CliRunner().invoke(setup_cli, ["--yes"])

        assert result.exit_code == 1
