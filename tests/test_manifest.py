"""Test manifest parsing and loading"""

import pytest
import requests
from unittest.mock import Mock, patch

from musicverse.exceptions import ManifestError
from musicverse.library.manifest import LibraryStats, Manifest, parse_manifest, load_manifest


class TestParseManifest:
    """Both manifest shapes normalize to one model"""

    def test_flat_list(self):
        manifest = parse_manifest(["b.mp3", "a.ogg"])

        assert manifest.songs == ["b.mp3", "a.ogg"]
        assert manifest.stats is None

    def test_enriched_object(self):
        manifest = parse_manifest({
            "stats": {"totalSongs": 2, "totalSize": "7.4 MB", "lastUpdated": "2024-03-01 10:20:30"},
            "songs": ["b.mp3", "a.ogg"],
        })

        assert manifest.songs == ["b.mp3", "a.ogg"]
        assert manifest.stats == LibraryStats(2, "7.4 MB", "2024-03-01 10:20:30")

    def test_object_without_songs_is_empty(self):
        manifest = parse_manifest({"stats": {"totalSongs": 0, "totalSize": "0 B", "lastUpdated": ""}})
        assert manifest.is_empty

    def test_empty_variants(self):
        assert parse_manifest([]).is_empty
        assert parse_manifest({"songs": []}).is_empty

    @pytest.mark.parametrize("data", ["music.mp3", 42, None, {"songs": "a.mp3"}, ["a.mp3", 3]])
    def test_rejects_other_shapes(self, data):
        with pytest.raises(ManifestError):
            parse_manifest(data)

    def test_enriched_round_trip_keeps_order(self):
        manifest = Manifest(songs=["z.mp3", "a.mp3"], stats=LibraryStats(2, "1 KB", "now"))
        assert parse_manifest(manifest.to_enriched()) == manifest


class TestLoadManifest:
    """Loading from disk and over HTTP"""

    def test_load_from_file(self, write_manifest):
        path = write_manifest(["Artist - Title.mp3"])
        assert load_manifest(path).songs == ["Artist - Title.mp3"]

    def test_missing_file(self, temp_dir):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "music_list.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ManifestError, match="not valid JSON"):
            load_manifest(path)

    @patch("musicverse.library.manifest.requests.get")
    def test_load_from_url(self, mock_get):
        response = Mock()
        response.json.return_value = {"songs": ["a.mp3"], "stats": None}
        mock_get.return_value = response

        manifest = load_manifest("https://example.com/music_list.json", timeout=5)

        mock_get.assert_called_once_with("https://example.com/music_list.json", timeout=5)
        assert manifest.songs == ["a.mp3"]

    @patch("musicverse.library.manifest.requests.get")
    def test_http_error(self, mock_get):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        mock_get.return_value = response

        with pytest.raises(ManifestError):
            load_manifest("https://example.com/music_list.json")

    @patch("musicverse.library.manifest.requests.get")
    def test_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(ManifestError):
            load_manifest("http://localhost:9/music_list.json")
