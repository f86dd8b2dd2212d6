"""
Configuration management for Music Verse

Settings come from the first YAML file found and are then overridden by
``MUSICVERSE_*`` environment variables (a ``.env`` file is honoured too).

Each top-level YAML section maps onto one dataclass:
- Library settings (music directory, manifest file, allowed extensions)
- Download preferences (codec, batch configuration file)
- Player settings (labels, artwork, preferences file)
- Logging configuration

Paths are kept as strings in the dataclasses and expanded on access through
the ``get_*`` helpers, so a settings file can use ``~`` freely.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

from ..exceptions import ConfigError

# MUSICVERSE_* values may live in a .env file next to the project
load_dotenv()


MANIFEST_SCHEMAS = ('flat', 'enriched')
AUDIO_CODECS = ('mp3', 'm4a', 'wav', 'ogg')


@dataclass
class LibraryConfig:
    """
    Music directory and manifest settings

    ``extensions`` is the allow-list used when scanning the music directory.
    ``sort_songs`` is off by default so the manifest follows directory
    enumeration order.
    """
    music_directory: str = "music"
    manifest_file: str = "music_list.json"
    extensions: List[str] = field(default_factory=lambda: ['.mp3', '.m4a', '.wav', '.ogg'])
    manifest_schema: str = "enriched"  # flat, enriched
    sort_songs: bool = False


@dataclass
class DownloadConfig:
    """
    Download configuration settings

    Controls how yt-dlp is driven: the extracted audio codec, the output
    filename template and where the batch URL list lives.
    """
    audio_format: str = "mp3"
    output_template: str = "%(title)s.%(ext)s"
    batch_file: str = "downloads.json"
    socket_timeout: int = 30


@dataclass
class PlayerConfig:
    """
    Player presentation settings and preference storage
    """
    audio_base_url: str = "music"
    fallback_artist: str = "Music Verse Library"
    album: str = "Music Verse"
    subtitle: str = "Local Audio"
    artwork_url: str = "https://cdn-icons-png.flaticon.com/512/3074/3074767.png"
    preferences_file: str = "~/.musicverse/preferences.json"
    manifest_timeout: int = 10


@dataclass
class LoggingConfig:
    """
    Console and log file output
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


class Settings:
    """
    Effective configuration for one run

    Loads settings from the first YAML file found, then applies environment
    variable overrides.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Build settings from defaults, the YAML file and the environment

        Args:
            config_path: Explicit YAML file; when None the standard locations are searched
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".musicverse"

        self.library = LibraryConfig()
        self.download = DownloadConfig()
        self.player = PlayerConfig()
        self.logging = LoggingConfig()

        self._load_config()
        self._load_environment_variables()

    def _sections(self) -> Dict[str, Any]:
        return {
            'library': self.library,
            'download': self.download,
            'player': self.player,
            'logging': self.logging,
        }

    def _load_config(self) -> None:
        """
        Read the first YAML file found into the sections

        Searches for configuration files in order of precedence; the first one
        found is used. An explicitly requested file that does not exist or
        does not parse raises ConfigError.
        """
        if self.config_path and not Path(self.config_path).expanduser().exists():
            raise ConfigError(f"Config file not found: {self.config_path}",
                              details={'file_path': str(self.config_path)})

        config_paths = [
            Path(self.config_path).expanduser() if self.config_path else None,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and path.exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in {path}: {e}",
                                      details={'file_path': str(path), 'original_error': e})
                break

        if not isinstance(config_data, dict):
            raise ConfigError("Config file must contain a mapping of sections")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Copy YAML values onto the section dataclasses

        Only attributes that exist on the target dataclass are updated;
        unknown sections and keys are ignored.

        Args:
            config_data: Parsed YAML, keyed by section name
        """
        config_mapping = self._sections()

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """Environment variables take precedence over file-based configuration"""
        env_mappings = {
            'MUSICVERSE_MUSIC_DIR': lambda v: setattr(self.library, 'music_directory', v),
            'MUSICVERSE_MANIFEST': lambda v: setattr(self.library, 'manifest_file', v),
            'MUSICVERSE_BATCH_FILE': lambda v: setattr(self.download, 'batch_file', v),
            'MUSICVERSE_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def get_music_directory(self) -> Path:
        return Path(self.library.music_directory).expanduser()

    def get_manifest_path(self) -> Path:
        return Path(self.library.manifest_file).expanduser()

    def get_batch_file(self) -> Path:
        return Path(self.download.batch_file).expanduser()

    def get_preferences_path(self) -> Path:
        return Path(self.player.preferences_file).expanduser()

    def get_config_directory(self) -> Path:
        return self.config_dir

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Plain dictionary of every section, as written by save_config"""
        return {name: dict(section.__dict__) for name, section in self._sections().items()}

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to a YAML file

        Args:
            path: Destination file, defaults to ~/.musicverse/config.yaml

        Returns:
            Path the configuration was written to
        """
        target = Path(path) if path else self.get_config_directory() / "config.yaml"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {target}: {e}",
                              details={'file_path': str(target), 'original_error': e})
        return target

    def validate(self) -> List[str]:
        """
        Check values that would only fail later, deep inside a command

        Returns:
            List of human-readable problems, empty when the configuration is valid
        """
        errors = []

        if self.library.manifest_schema not in MANIFEST_SCHEMAS:
            errors.append(f"Invalid manifest schema: {self.library.manifest_schema}")

        if not self.library.extensions:
            errors.append("At least one audio extension is required")
        for ext in self.library.extensions:
            if not str(ext).startswith('.'):
                errors.append(f"Extension must start with a dot: {ext}")

        if self.download.audio_format not in AUDIO_CODECS:
            errors.append(f"Invalid audio format: {self.download.audio_format}")

        if '%(ext)s' not in self.download.output_template:
            errors.append("Output template must contain %(ext)s")

        return errors

    def __str__(self) -> str:
        sections = [
            f"Music: {self.library.music_directory}",
            f"Manifest: {self.library.manifest_file} ({self.library.manifest_schema})",
            f"Format: {self.download.audio_format}",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance for singleton pattern, created on first access
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Shared settings, built on first use

    Returns:
        The shared Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Rebuild the shared settings, e.g. after ``--config`` is given

    Args:
        config_path: Explicit YAML file to load

    Returns:
        The new shared Settings instance
    """
    global _settings
    _settings = Settings(config_path)
    return _settings
