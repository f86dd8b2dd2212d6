"""
Player state container

One ``PlayerState`` instance owns everything the player knows about what is
loaded and playing. The controller mutates it; rendering reads it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..library.manifest import LibraryStats


NO_TRACK = -1


@dataclass
class PlayerState:
    """
    Mutable player state

    Attributes:
        all_songs: Full ordered library
        filtered_songs: Search-narrowed view, an order-preserving subset of all_songs
        current_index: Index into all_songs, NO_TRACK when nothing is loaded
        is_playing: Play/pause flag as last requested by the user
        query: Current search text
        stats: Library stats from an enriched manifest
        load_error: Message shown when the manifest could not be loaded
    """
    all_songs: List[str] = field(default_factory=list)
    filtered_songs: List[str] = field(default_factory=list)
    current_index: int = NO_TRACK
    is_playing: bool = False
    query: str = ""
    stats: Optional[LibraryStats] = None
    load_error: Optional[str] = None

    @property
    def has_track(self) -> bool:
        return self.current_index != NO_TRACK

    @property
    def current_song(self) -> Optional[str]:
        if 0 <= self.current_index < len(self.all_songs):
            return self.all_songs[self.current_index]
        return None

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.all_songs)

    def set_library(self, songs: List[str], stats: Optional[LibraryStats] = None) -> None:
        """Replace the library and reset the filtered view to all of it"""
        self.all_songs = list(songs)
        self.filtered_songs = list(songs)
        self.stats = stats
        self.query = ""
        self.load_error = None
        if not self.is_valid_index(self.current_index):
            self.current_index = NO_TRACK
