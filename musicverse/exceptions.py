"""
Exception classes for Music Verse.

Exception Hierarchy:
    MusicVerseError (base)
        ConfigError - Settings file issues
        ManifestError - Manifest missing, unreachable or malformed
        BatchConfigError - downloads.json missing or malformed
        PlaybackError - Audio backend refused to start playback
"""

from typing import Any, Dict, Optional


class MusicVerseError(Exception):
    """
    Base exception for all Music Verse errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (paths, URLs,
                 the wrapped exception under 'original_error').
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(MusicVerseError):
    """Raised when the settings file cannot be read or holds invalid values."""
    pass


class ManifestError(MusicVerseError):
    """
    Raised when the song manifest cannot be loaded.

    Covers a missing file, an HTTP failure, invalid JSON and JSON that is
    neither a list of filenames nor an object with a ``songs`` list. The
    player recovers from it by showing the library error panel.
    """
    pass


class BatchConfigError(MusicVerseError):
    """
    Raised when the batch download configuration is missing or unparseable.

    This aborts the whole batch; nothing is downloaded.
    """
    pass


class PlaybackError(MusicVerseError):
    """Raised by an audio backend when playback could not be started."""
    pass
