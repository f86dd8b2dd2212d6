"""
Pure rendering helpers for the player

Nothing here touches a view or an audio backend: every function maps player
state (or a filename) to plain values the controller hands to its view.
"""

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional
from urllib.parse import quote

from ..utils.helpers import format_time, pluralize
from .interfaces import SongListItem
from .state import PlayerState


AUDIO_EXTENSION_PATTERN = re.compile(r'\.(mp3|m4a|wav|ogg)$', re.IGNORECASE)

EMPTY_LIST_MESSAGE = "No songs found."


@dataclass
class TrackInfo:
    title: str
    artist: str


@dataclass
class ProgressInfo:
    percent: float
    elapsed: str
    total: str


def strip_audio_extension(filename: str) -> str:
    return AUDIO_EXTENSION_PATTERN.sub('', filename)


def describe_track(filename: str, fallback_artist: str) -> TrackInfo:
    """
    Derive display title and a best-effort artist from a filename

    "Artist - Title.mp3" gives title "Artist - Title" and artist "Artist";
    names without a hyphen get the fallback artist.
    """
    title = strip_audio_extension(filename)
    if '-' in title:
        artist = title.split('-')[0].strip()
    else:
        artist = fallback_artist
    return TrackInfo(title=title, artist=artist)


def encode_filename(filename: str) -> str:
    """Percent-encode a filename the way encodeURIComponent does"""
    return quote(filename, safe="-_.!~*'()")


def audio_source_url(base_url: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}/{encode_filename(filename)}"


def filter_songs(songs: Iterable[str], query: str) -> List[str]:
    """Case-insensitive substring filter; an empty query keeps everything"""
    if not query:
        return list(songs)
    lowered = query.lower()
    return [song for song in songs if lowered in song.lower()]


def song_count_text(count: int) -> str:
    return pluralize(count, 'song')


def render_song_list(state: PlayerState, subtitle: str) -> List[SongListItem]:
    """
    Build the rows for the visible (filtered) songs

    Each row carries the song's index in the full library so selecting a
    row from a filtered view still loads the right track.
    """
    # First occurrence wins for duplicate filenames
    positions = {}
    for index, song in enumerate(state.all_songs):
        positions.setdefault(song, index)

    items = []
    for song in state.filtered_songs:
        index = positions.get(song, -1)
        active = index != -1 and index == state.current_index
        items.append(SongListItem(
            index=index,
            filename=song,
            title=strip_audio_extension(song),
            subtitle=subtitle,
            active=active,
            playing=active and state.is_playing,
        ))
    return items


def compute_progress(current_time: float, duration: Optional[float]) -> Optional[ProgressInfo]:
    """
    Progress bar fill and labels, or None while the duration is unknown
    """
    if duration is None or math.isnan(duration) or math.isinf(duration) or duration <= 0:
        return None

    percent = (current_time / duration) * 100
    return ProgressInfo(
        percent=percent,
        elapsed=format_time(current_time),
        total=format_time(duration),
    )
