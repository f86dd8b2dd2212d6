"""
Seams between the player controller and the outside world

The controller never touches a concrete UI or audio library. It is handed:

- an ``AudioBackend`` that plays a source URL,
- a ``PlayerView`` that displays whatever the controller tells it to,
- optionally a ``MediaSession`` that surfaces now-playing data outside the app.

``PlayerView`` methods are no-ops by default so a view only overrides what it
can actually show.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..library.manifest import LibraryStats


@dataclass
class MediaMetadata:
    """Now-playing information published to a media session"""
    title: str
    artist: str
    album: str
    artwork: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class SongListItem:
    """One rendered row of the song list"""
    index: int          # Position in the full library, not the filtered view
    filename: str
    title: str
    subtitle: str
    active: bool
    playing: bool


class AudioBackend(ABC):
    """Minimal audio element contract"""

    @abstractmethod
    def set_source(self, url: str) -> None:
        """Point the backend at a new source; does not start playback"""

    @abstractmethod
    def play(self) -> None:
        """
        Start or resume playback

        Raises:
            PlaybackError: If the backend refuses to start
        """

    @abstractmethod
    def pause(self) -> None:
        """Pause playback"""

    @abstractmethod
    def get_duration(self) -> float:
        """Duration of the current source in seconds, NaN while unknown"""

    @abstractmethod
    def seek(self, position: float) -> None:
        """Jump to a position in seconds"""

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """Apply a volume between 0 and 1"""

    @abstractmethod
    def set_muted(self, muted: bool) -> None:
        """Mute or unmute without touching the volume"""

    @abstractmethod
    def is_muted(self) -> bool:
        """Current mute flag"""


class NullAudioBackend(AudioBackend):
    """Backend that plays nothing; used where only the library view matters"""

    def __init__(self):
        self.source: Optional[str] = None
        self.volume = 1.0
        self.muted = False
        self.position = 0.0

    def set_source(self, url: str) -> None:
        self.source = url
        self.position = 0.0

    def play(self) -> None:
        pass

    def pause(self) -> None:
        pass

    def get_duration(self) -> float:
        return math.nan

    def seek(self, position: float) -> None:
        self.position = position

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def set_muted(self, muted: bool) -> None:
        self.muted = muted

    def is_muted(self) -> bool:
        return self.muted


class MediaSession(ABC):
    """OS-level now-playing integration (lock screen, media keys)"""

    @abstractmethod
    def set_metadata(self, metadata: MediaMetadata) -> None:
        """Publish now-playing metadata"""

    @abstractmethod
    def set_action_handler(self, action: str, handler: Callable[[], None]) -> None:
        """Bind a transport action ('play', 'pause', 'previoustrack', 'nexttrack')"""


class PlayerView:
    """Display surface driven by the player controller"""

    def render_song_list(self, items: List[SongListItem]) -> None:
        pass

    def show_empty_state(self, message: str) -> None:
        pass

    def show_library_error(self, message: str, hint: str) -> None:
        pass

    def update_song_count(self, count: int, text: str) -> None:
        pass

    def show_stats(self, stats: LibraryStats) -> None:
        pass

    def show_now_playing(self, title: str, artist: str) -> None:
        pass

    def update_play_button(self, is_playing: bool) -> None:
        pass

    def set_disc_spinning(self, spinning: bool) -> None:
        pass

    def update_progress(self, percent: float, elapsed: str, total: str) -> None:
        pass

    def update_volume(self, volume: float) -> None:
        pass

    def update_mute(self, muted: bool) -> None:
        pass

    def show_message(self, message: str) -> None:
        pass
