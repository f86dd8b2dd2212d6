"""Test batch downloads from downloads.json"""

import json
import pytest
from unittest.mock import Mock, patch

from musicverse.download.batch import BatchSynchronizer, load_batch_config
from musicverse.download.downloader import DownloadResult
from musicverse.exceptions import BatchConfigError
from musicverse.library.generator import ManifestGenerator


def write_config(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


@pytest.fixture
def fake_downloader():
    downloader = Mock()
    downloader.download.side_effect = lambda url, playlist=False, batch=False: DownloadResult(
        url=url, playlist=playlist, success="broken" not in url
    )
    return downloader


@pytest.fixture
def synchronizer_factory(temp_dir, music_dir, fake_downloader):
    def _make(config_data):
        config_path = temp_dir / "downloads.json"
        if config_data is not None:
            write_config(config_path, config_data)
        generator = ManifestGenerator(music_directory=music_dir, manifest_path=temp_dir / "music_list.json")
        return BatchSynchronizer(
            config_path=config_path,
            downloader=fake_downloader,
            generator=generator,
            show_progress=False
        )
    return _make


class TestLoadBatchConfig:
    """Reading downloads.json"""

    def test_missing_keys_default_to_empty(self, temp_dir):
        config = load_batch_config(write_config(temp_dir / "downloads.json", {"videos": ["https://a"]}))

        assert config.videos == ["https://a"]
        assert config.playlists == []
        assert config.total == 1

    def test_missing_file(self, temp_dir):
        with pytest.raises(BatchConfigError, match="not found"):
            load_batch_config(temp_dir / "downloads.json")

    def test_invalid_json(self, temp_dir):
        with pytest.raises(BatchConfigError, match="Error parsing"):
            load_batch_config(write_config(temp_dir / "downloads.json", "{videos: ["))

    def test_wrong_shape(self, temp_dir):
        with pytest.raises(BatchConfigError):
            load_batch_config(write_config(temp_dir / "downloads.json", {"videos": "https://a"}))


class TestBatchSynchronizer:
    """Sequential processing and manifest refresh"""

    def test_videos_then_playlists_then_manifest(self, synchronizer_factory, fake_downloader, temp_dir):
        synchronizer = synchronizer_factory({
            "videos": ["https://v1", "https://v2"],
            "playlists": ["https://p1"],
        })

        report = synchronizer.run()

        calls = [(c.args[0], c.kwargs['playlist']) for c in fake_downloader.download.call_args_list]
        assert calls == [("https://v1", False), ("https://v2", False), ("https://p1", True)]
        assert all(c.kwargs['batch'] for c in fake_downloader.download.call_args_list)

        assert report.succeeded == 3
        assert report.manifest.stats.total_songs == 2
        data = json.loads((temp_dir / "music_list.json").read_text(encoding="utf-8"))
        assert data["stats"]["totalSongs"] == 2

    def test_failed_url_does_not_stop_batch(self, synchronizer_factory, fake_downloader):
        synchronizer = synchronizer_factory({"videos": ["https://broken", "https://ok"], "playlists": []})

        report = synchronizer.run()

        assert fake_downloader.download.call_count == 2
        assert report.failed == 1
        assert report.succeeded == 1
        assert report.manifest is not None

    def test_empty_config_downloads_nothing(self, synchronizer_factory, fake_downloader, temp_dir):
        report = synchronizer_factory({"videos": [], "playlists": []}).run()

        fake_downloader.download.assert_not_called()
        assert report.results == []
        assert report.manifest is None
        assert not (temp_dir / "music_list.json").exists()

    def test_missing_config_aborts(self, synchronizer_factory, fake_downloader):
        synchronizer = synchronizer_factory(None)

        with pytest.raises(BatchConfigError):
            synchronizer.run()
        fake_downloader.download.assert_not_called()

    def test_manifest_failure_is_reported_and_raised(self, temp_dir, fake_downloader):
        config_path = write_config(temp_dir / "downloads.json", {"videos": ["https://v1"]})
        generator = Mock()
        generator.write.side_effect = OSError("disk full")
        synchronizer = BatchSynchronizer(
            config_path=config_path, downloader=fake_downloader, generator=generator, show_progress=False
        )

        with patch("musicverse.download.batch.create_operation_logger") as create_operation:
            with pytest.raises(OSError):
                synchronizer.run()

        fake_downloader.download.assert_called_once()
        create_operation.return_value.error.assert_called_once()
