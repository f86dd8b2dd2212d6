"""
Music Verse: a local music library and player toolkit

Music Verse keeps a folder of audio files, a JSON manifest describing it and a
player that reads that manifest in step with each other.

## Components

**Downloader (`musicverse/download/`)**
- Wraps yt-dlp to extract audio from single videos or whole playlists
- Batch mode reads `downloads.json` (`{"videos": [...], "playlists": [...]}`)
- One URL at a time; a failing URL is logged and skipped

**Library (`musicverse/library/`)**
- Scans the music directory for `.mp3`, `.m4a`, `.wav` and `.ogg` files
- Writes `music_list.json`, either a bare list of filenames or an object
  with `songs` and aggregate `stats`
- Reads either shape back into one normalized `Manifest`

**Player (`musicverse/player/`)**
- Tracks the library, the search-filtered view, the current track and the
  play/pause flag in a single `PlayerState`
- Renders the song list as a pure function of that state
- Talks to the outside world only through an injected audio backend, view
  and optional media session
- Persists the last volume

**Configuration and utilities (`musicverse/config/`, `musicverse/utils/`)**
- YAML settings with environment variable overrides
- Colored console logging with an optional rotating log file

## Quick Start
```bash
pip install -e .

# Fetch one song, or a whole playlist
musicverse download "https://www.youtube.com/watch?v=..."
musicverse download "https://www.youtube.com/playlist?list=..." --playlist

# Or list URLs in downloads.json and process them all
musicverse sync

# Rebuild the manifest by hand and look at the library
musicverse generate
musicverse library --search artist
```
"""

__version__ = "1.0.0"

__author__ = "Music Verse contributors"

__description__ = "Download audio with yt-dlp, build a song manifest and drive a music player"

__all__ = [
    "__version__",
    "__author__",
    "__description__"
]
