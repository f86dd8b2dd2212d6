"""Test the command line interface"""

import json
import logging
import pytest
import yaml
from click.testing import CliRunner
from unittest.mock import patch

from musicverse import __version__
from musicverse.download.downloader import DownloadResult
from musicverse.main import cli


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """The CLI points console logging at the runner's stream; drop it afterwards"""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(temp_dir, music_dir):
    path = temp_dir / "test-config.yaml"
    path.write_text(yaml.safe_dump({
        "library": {
            "music_directory": str(music_dir),
            "manifest_file": str(temp_dir / "music_list.json"),
        },
        "download": {"batch_file": str(temp_dir / "downloads.json")},
        "logging": {"colored_output": False},
    }), encoding="utf-8")
    return str(path)


def read_manifest(temp_dir):
    return json.loads((temp_dir / "music_list.json").read_text(encoding="utf-8"))


class TestCli:
    """Commands end to end, with yt-dlp mocked out"""

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_config_file(self, runner, temp_dir):
        result = runner.invoke(cli, ['--config', str(temp_dir / "nope.yaml"), 'generate'])
        assert result.exit_code == 1

    def test_generate(self, runner, config_file, temp_dir):
        result = runner.invoke(cli, ['--config', config_file, 'generate'])

        assert result.exit_code == 0
        data = read_manifest(temp_dir)
        assert sorted(data["songs"]) == ["a.mp3", "c.wav"]
        assert data["stats"]["totalSize"] == "30 B"

    def test_generate_flat_sorted(self, runner, config_file, temp_dir, music_dir):
        (music_dir / "B.ogg").write_bytes(b"z")

        result = runner.invoke(cli, ['--config', config_file, 'generate', '--flat', '--sort'])

        assert result.exit_code == 0
        assert read_manifest(temp_dir) == ["a.mp3", "B.ogg", "c.wav"]

    def test_library_lists_songs(self, runner, config_file):
        runner.invoke(cli, ['--config', config_file, 'generate', '--sort'])

        result = runner.invoke(cli, ['--config', config_file, 'library'])

        assert result.exit_code == 0
        assert "a" in result.output
        assert "2 songs" in result.output
        assert "Now loaded: a · Music Verse Library" in result.output

    def test_library_search(self, runner, config_file):
        runner.invoke(cli, ['--config', config_file, 'generate'])

        result = runner.invoke(cli, ['--config', config_file, 'library', '--search', 'C.W'])

        assert result.exit_code == 0
        assert "1 song" in result.output

    def test_library_without_manifest(self, runner, config_file):
        result = runner.invoke(cli, ['--config', config_file, 'library'])

        assert result.exit_code == 1
        assert "Failed to load music list." in result.output

    def test_download_rejects_invalid_url(self, runner, config_file):
        with patch("musicverse.main.AudioDownloader") as downloader_class:
            result = runner.invoke(cli, ['--config', config_file, 'download', 'not-a-url'])

        assert result.exit_code == 1
        assert "Usage" in result.output
        downloader_class.assert_not_called()

    def test_download_playlist(self, runner, config_file):
        url = "https://www.youtube.com/playlist?list=PL123"
        with patch("musicverse.main.AudioDownloader") as downloader_class:
            downloader_class.return_value.download.return_value = DownloadResult(url=url, playlist=True, success=True)
            result = runner.invoke(cli, ['--config', config_file, 'download', url, '--playlist'])

        assert result.exit_code == 0
        downloader_class.return_value.download.assert_called_once_with(url, playlist=True)

    def test_download_failure_keeps_exit_status(self, runner, config_file):
        url = "https://www.youtube.com/watch?v=gone"
        with patch("musicverse.main.AudioDownloader") as downloader_class:
            downloader_class.return_value.download.return_value = DownloadResult(
                url=url, playlist=False, success=False, error_message="Video unavailable"
            )
            result = runner.invoke(cli, ['--config', config_file, 'download', url])

        assert result.exit_code == 0
        assert "Download failed" in result.output
        assert "Download complete" not in result.output

    def test_sync_without_batch_file(self, runner, config_file):
        result = runner.invoke(cli, ['--config', config_file, 'sync', '--no-progress'])
        assert result.exit_code == 1

    def test_sync_downloads_then_generates(self, runner, config_file, temp_dir):
        (temp_dir / "downloads.json").write_text(json.dumps({
            "videos": ["https://www.youtube.com/watch?v=1"],
            "playlists": [],
        }), encoding="utf-8")

        with patch("musicverse.download.batch.get_downloader") as get_downloader:
            get_downloader.return_value.download.return_value = DownloadResult(
                url="https://www.youtube.com/watch?v=1", playlist=False, success=True
            )
            result = runner.invoke(cli, ['--config', config_file, 'sync', '--no-progress'])

        assert result.exit_code == 0
        get_downloader.return_value.download.assert_called_once_with(
            "https://www.youtube.com/watch?v=1", playlist=False, batch=True
        )
        assert read_manifest(temp_dir)["stats"]["totalSongs"] == 2

    def test_config_show(self, runner, config_file):
        result = runner.invoke(cli, ['--config', config_file, 'config', 'show'])

        assert result.exit_code == 0
        assert "music_directory" in result.output
        assert "manifest_schema: enriched" in result.output
