"""
Player controller

Owns the ``PlayerState`` and keeps the injected view, audio backend and media
session consistent with it. Every user action (list click, transport button,
key press, media key) and every media event (time update, track ended) enters
through one of the public methods below.

All calls are expected on a single thread, the way UI event loops deliver
them; the controller holds no locks.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Union
from pathlib import Path

from ..config.settings import get_settings, PlayerConfig
from ..exceptions import ManifestError, PlaybackError
from ..library.manifest import Manifest, load_manifest
from ..utils.logger import get_logger
from .interfaces import AudioBackend, MediaMetadata, MediaSession, PlayerView, SongListItem
from .preferences import PreferenceStore, VOLUME_KEY
from .render import (
    EMPTY_LIST_MESSAGE,
    audio_source_url,
    compute_progress,
    describe_track,
    filter_songs,
    render_song_list,
    song_count_text,
)
from .state import PlayerState


LIBRARY_ERROR_MESSAGE = "Failed to load music list."
LIBRARY_ERROR_HINT = "Run `musicverse sync` (or `musicverse generate`) to build it."
NO_TRACK_MESSAGE = "Play a song first!"


@dataclass
class DownloadLink:
    """Where to save the current song from; the href is deliberately not percent-encoded"""
    href: str
    filename: str


class Player:
    """
    Single source of truth for what is loaded and playing

    Args:
        audio: Backend that actually plays sources
        view: Display surface; a silent base view when omitted
        media_session: Optional OS now-playing integration
        manifest_source: Manifest path or URL, defaults to the configured manifest
        manifest_loader: Callable turning a source into a Manifest
        preferences: Store for the persisted volume
        config: Player presentation settings
    """

    def __init__(
        self,
        audio: AudioBackend,
        view: Optional[PlayerView] = None,
        media_session: Optional[MediaSession] = None,
        manifest_source: Optional[Union[str, Path]] = None,
        manifest_loader: Optional[Callable[..., Manifest]] = None,
        preferences: Optional[PreferenceStore] = None,
        config: Optional[PlayerConfig] = None
    ):
        settings = get_settings()
        self.logger = get_logger(__name__)

        self.audio = audio
        self.view = view or PlayerView()
        self.media_session = media_session
        self.config = config or settings.player
        self.manifest_source = manifest_source or settings.get_manifest_path()
        self.manifest_loader = manifest_loader or load_manifest
        self.preferences = preferences or PreferenceStore(settings.get_preferences_path())

        self.state = PlayerState()

    # --- Initialization ---

    def start(self) -> None:
        """Load the library, then restore the saved volume"""
        self.fetch_library()
        self.restore_volume()

    def fetch_library(self) -> bool:
        """
        Load the manifest into the player

        On failure the error panel replaces the list and the playback state is
        left exactly as it was.

        Returns:
            True if the library was loaded
        """
        try:
            manifest = self.manifest_loader(self.manifest_source, timeout=self.config.manifest_timeout)
        except ManifestError as e:
            self.logger.error(f"Error fetching songs: {e}")
            self.state.load_error = str(e)
            self.view.show_library_error(LIBRARY_ERROR_MESSAGE, LIBRARY_ERROR_HINT)
            return False

        self.state.set_library(manifest.songs, manifest.stats)
        if manifest.stats:
            self.view.show_stats(manifest.stats)

        self._render()
        self._update_song_count()

        if self.state.all_songs:
            self.load_track(0, autoplay=False)

        self.logger.debug(f"Library loaded: {len(self.state.all_songs)} songs")
        return True

    # --- Search ---

    def filter_library(self, query: str) -> None:
        """Narrow the visible list to songs containing the query, ignoring case"""
        query = query or ""
        filtered = filter_songs(self.state.all_songs, query)
        self.state.query = query

        if filtered == self.state.filtered_songs:
            return

        self.state.filtered_songs = filtered
        self._render()
        self._update_song_count()

    # --- Transport ---

    def load_track(self, index: int, autoplay: bool = True) -> None:
        """
        Make the song at ``index`` of the full library current

        Out-of-range indices are ignored.

        Args:
            index: Position in the full library
            autoplay: Start playback right away
        """
        if not self.state.is_valid_index(index):
            return

        self.state.current_index = index
        song = self.state.all_songs[index]
        track = describe_track(song, self.config.fallback_artist)

        self.view.show_now_playing(track.title, track.artist)
        self.audio.set_source(audio_source_url(self.config.audio_base_url, song))

        self._render()

        if autoplay:
            self.play()

        self._publish_media_session(track.title, track.artist)

    def select(self, item: SongListItem) -> None:
        """Handle a click on a rendered row"""
        self.load_track(item.index, autoplay=True)

    def play(self) -> None:
        # The flag stays True even if the backend refuses to start
        self.state.is_playing = True
        try:
            self.audio.play()
        except PlaybackError as e:
            self.logger.error(f"Playback error: {e}")
        self._update_transport()

    def pause(self) -> None:
        self.state.is_playing = False
        self.audio.pause()
        self._update_transport()

    def toggle_play(self) -> None:
        if self.state.is_playing:
            self.pause()
        elif not self.state.has_track and self.state.all_songs:
            self.load_track(0)
        elif self.state.has_track:
            self.play()

    def previous(self) -> None:
        if not self.state.all_songs:
            return
        new_index = self.state.current_index - 1
        if new_index < 0:
            new_index = len(self.state.all_songs) - 1
        self.load_track(new_index)

    def next(self) -> None:
        if not self.state.all_songs:
            return
        new_index = self.state.current_index + 1
        if new_index >= len(self.state.all_songs):
            new_index = 0
        self.load_track(new_index)

    # --- Media events ---

    def on_time_update(self, current_time: float, duration: float) -> None:
        progress = compute_progress(current_time, duration)
        if progress is None:
            return
        self.view.update_progress(progress.percent, progress.elapsed, progress.total)

    def seek(self, fraction: float) -> None:
        """
        Jump to a fraction of the current track

        Args:
            fraction: Click position divided by the progress bar width
        """
        duration = self.audio.get_duration()
        if duration is None or math.isnan(duration) or math.isinf(duration):
            return
        if fraction is None or math.isnan(fraction):
            return
        fraction = min(max(fraction, 0.0), 1.0)
        self.audio.seek(fraction * duration)

    def on_track_ended(self) -> None:
        self.next()

    # --- Volume ---

    def set_volume(self, volume: float) -> None:
        volume = min(max(float(volume), 0.0), 1.0)
        self.audio.set_volume(volume)
        self.preferences.set(VOLUME_KEY, str(volume))
        self.view.update_volume(volume)

    def restore_volume(self) -> Optional[float]:
        """
        Apply the saved volume, if any

        Returns:
            The restored volume, or None when nothing usable was saved
        """
        saved = self.preferences.get(VOLUME_KEY)
        if not saved:
            return None
        try:
            volume = float(saved)
        except ValueError:
            self.logger.warning(f"Ignoring invalid saved volume: {saved!r}")
            return None
        if math.isnan(volume):
            return None

        volume = min(max(volume, 0.0), 1.0)
        self.audio.set_volume(volume)
        self.view.update_volume(volume)
        return volume

    def toggle_mute(self) -> bool:
        muted = not self.audio.is_muted()
        self.audio.set_muted(muted)
        self.view.update_mute(muted)
        return muted

    # --- Misc UI ---

    def download_link(self) -> Optional[DownloadLink]:
        song = self.state.current_song
        if song is None:
            self.view.show_message(NO_TRACK_MESSAGE)
            return None
        return DownloadLink(href=f"{self.config.audio_base_url.rstrip('/')}/{song}", filename=song)

    def handle_key(self, code: str, in_text_input: bool = False) -> bool:
        """
        Keyboard shortcuts: Space toggles, arrows skip

        Returns:
            True if the key was handled
        """
        if in_text_input:
            return False

        actions = {
            'Space': self.toggle_play,
            'ArrowRight': self.next,
            'ArrowLeft': self.previous,
        }
        action = actions.get(code)
        if action is None:
            return False
        action()
        return True

    # --- Internals ---

    def _render(self) -> None:
        items = render_song_list(self.state, self.config.subtitle)
        if items:
            self.view.render_song_list(items)
        else:
            self.view.show_empty_state(EMPTY_LIST_MESSAGE)

    def _update_song_count(self) -> None:
        count = len(self.state.filtered_songs)
        self.view.update_song_count(count, song_count_text(count))

    def _update_transport(self) -> None:
        self.view.update_play_button(self.state.is_playing)
        self.view.set_disc_spinning(self.state.is_playing)
        self._render()

    def _publish_media_session(self, title: str, artist: str) -> None:
        if self.media_session is None:
            return

        self.media_session.set_metadata(MediaMetadata(
            title=title,
            artist=artist,
            album=self.config.album,
            artwork=[{'src': self.config.artwork_url, 'sizes': '512x512', 'type': 'image/png'}],
        ))
        self.media_session.set_action_handler('play', self.play)
        self.media_session.set_action_handler('pause', self.pause)
        self.media_session.set_action_handler('previoustrack', self.previous)
        self.media_session.set_action_handler('nexttrack', self.next)
