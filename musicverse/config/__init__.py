"""
Configuration package for Music Verse

Settings are loaded from YAML files and environment variables and shared
through a lazily created singleton:

    from musicverse.config import get_settings

    settings = get_settings()
    music_dir = settings.get_music_directory()
"""

from .settings import (
    get_settings,
    reload_settings,
    Settings,
    LibraryConfig,
    DownloadConfig,
    PlayerConfig,
    LoggingConfig,
)

__all__ = [
    'get_settings',      # Factory function for singleton settings access
    'reload_settings',   # Rebuild settings from files and environment
    'Settings',
    'LibraryConfig',
    'DownloadConfig',
    'PlayerConfig',
    'LoggingConfig',
]
