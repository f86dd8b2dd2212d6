"""
Player package
View-agnostic player controller, its state, rendering helpers and the seams
(audio backend, view, media session) it is wired through
"""

from .controller import Player, DownloadLink
from .state import PlayerState, NO_TRACK
from .interfaces import (
    AudioBackend,
    NullAudioBackend,
    MediaSession,
    MediaMetadata,
    PlayerView,
    SongListItem,
)
from .preferences import PreferenceStore, MemoryPreferenceStore, VOLUME_KEY
from .console import ConsoleView

__all__ = [
    'Player',
    'DownloadLink',
    'PlayerState',
    'NO_TRACK',
    'AudioBackend',
    'NullAudioBackend',
    'MediaSession',
    'MediaMetadata',
    'PlayerView',
    'SongListItem',
    'PreferenceStore',
    'MemoryPreferenceStore',
    'VOLUME_KEY',
    'ConsoleView',
]
