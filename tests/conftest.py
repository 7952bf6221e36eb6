"""Test configuration and fixtures"""

import pytest
from pathlib import Path

from yt2jellyfin.core.config import Config, ENV_ARCHIVE, ENV_CONFIG, ENV_OUTPUT
from yt2jellyfin.download.models import DownloadRequest


@pytest.fixture
def temp_dir(tmp_path):
    """Resolved temporary directory for tests"""
    return tmp_path.resolve()


@pytest.fixture
def isolated_home(temp_dir, monkeypatch):
    """Point HOME at an empty directory and clear yt2jellyfin variables"""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (ENV_OUTPUT, ENV_ARCHIVE, ENV_CONFIG):
        # setenv first so teardown also removes values loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(temp_dir)
    return home


@pytest.fixture
def sample_config():
    """Configuration with fixed, absolute paths"""
    return Config(
        output_dir=Path("/music"),
        archive_file=Path("/data/archive.txt"),
    )


@pytest.fixture
def make_request():
    """Factory for download requests rooted at /music"""
    def _make(**overrides):
        values = {
            "input": "https://youtube.com/watch?v=dQw4w9WgXcQ",
            "output_dir": Path("/music"),
        }
        values.update(overrides)
        return DownloadRequest(**values)
    return _make
