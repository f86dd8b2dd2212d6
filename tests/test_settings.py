"""Test settings loading and validation"""

import pytest
import yaml

from musicverse.config.settings import Settings, get_settings, reload_settings
from musicverse.exceptions import ConfigError


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestSettings:
    """YAML files and environment overrides"""

    def test_defaults(self):
        settings = Settings()

        assert settings.library.music_directory == "music"
        assert settings.library.manifest_file == "music_list.json"
        assert settings.library.manifest_schema == "enriched"
        assert settings.download.audio_format == "mp3"
        assert settings.download.batch_file == "downloads.json"
        assert settings.validate() == []

    def test_explicit_config_file(self, temp_dir):
        path = write_yaml(temp_dir / "custom.yaml", {
            "library": {"music_directory": "songs", "sort_songs": True},
            "download": {"audio_format": "m4a"},
            "unknown": {"ignored": 1},
        })

        settings = Settings(str(path))

        assert settings.library.music_directory == "songs"
        assert settings.library.sort_songs is True
        assert settings.download.audio_format == "m4a"
        assert settings.library.manifest_file == "music_list.json"

    def test_project_config_is_found(self, temp_dir):
        write_yaml(temp_dir / "config" / "config.yaml", {"player": {"album": "Home Mix"}})

        assert Settings().player.album == "Home Mix"

    def test_user_config_takes_precedence(self, temp_dir):
        write_yaml(temp_dir / "home" / ".musicverse" / "config.yaml", {"player": {"album": "User"}})
        write_yaml(temp_dir / "config.yaml", {"player": {"album": "Project"}})

        assert Settings().player.album == "User"

    def test_environment_overrides_file(self, temp_dir, monkeypatch):
        path = write_yaml(temp_dir / "custom.yaml", {"library": {"music_directory": "songs"}})
        monkeypatch.setenv("MUSICVERSE_MUSIC_DIR", "/srv/music")
        monkeypatch.setenv("MUSICVERSE_BATCH_FILE", "batch.json")

        settings = Settings(str(path))

        assert settings.library.music_directory == "/srv/music"
        assert settings.download.batch_file == "batch.json"

    def test_missing_explicit_file(self, temp_dir):
        with pytest.raises(ConfigError, match="not found"):
            Settings(str(temp_dir / "nope.yaml"))

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "broken.yaml"
        path.write_text("library: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            Settings(str(path))

    def test_validate_reports_problems(self):
        settings = Settings()
        settings.library.manifest_schema = "xml"
        settings.library.extensions = ["mp3"]
        settings.download.audio_format = "flac"
        settings.download.output_template = "%(title)s"

        problems = settings.validate()

        assert len(problems) == 4
        assert any("manifest schema" in p for p in problems)
        assert any("dot" in p for p in problems)

    def test_save_config_round_trip(self, temp_dir):
        settings = Settings()
        settings.player.subtitle = "Vinyl Rips"

        target = settings.save_config(str(temp_dir / "out" / "config.yaml"))

        assert Settings(str(target)).player.subtitle == "Vinyl Rips"

    def test_paths_expand_home(self, temp_dir):
        settings = Settings()
        assert settings.get_preferences_path() == temp_dir / "home" / ".musicverse" / "preferences.json"

    def test_reload_replaces_global_instance(self, temp_dir):
        path = write_yaml(temp_dir / "custom.yaml", {"library": {"manifest_file": "library.json"}})

        reloaded = reload_settings(str(path))

        assert get_settings() is reloaded
        assert reloaded.get_manifest_path().name == "library.json"
