"""Test configuration and fixtures"""

import json
import math
import pytest

from musicverse.config.settings import reload_settings
from musicverse.download.downloader import reset_downloader
from musicverse.exceptions import PlaybackError
from musicverse.player.interfaces import AudioBackend, MediaSession, PlayerView


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test from an empty directory with a throwaway home"""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("MUSICVERSE_MUSIC_DIR", "MUSICVERSE_MANIFEST", "MUSICVERSE_BATCH_FILE", "MUSICVERSE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_downloader()
    settings = reload_settings()
    yield settings
    reset_downloader()
    reload_settings()


@pytest.fixture
def temp_dir(tmp_path):
    return tmp_path


@pytest.fixture
def music_dir(tmp_path):
    """Music directory with two audio files and one unrelated file"""
    directory = tmp_path / "music"
    directory.mkdir()
    (directory / "a.mp3").write_bytes(b"x" * 10)
    (directory / "b.txt").write_bytes(b"not audio")
    (directory / "c.wav").write_bytes(b"y" * 20)
    return directory


@pytest.fixture
def write_manifest(tmp_path):
    def _write(data, name="music_list.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


class FakeAudio(AudioBackend):
    """Audio backend that records every call"""

    def __init__(self, duration=math.nan, fail_play=False):
        self.source = None
        self.playing = False
        self.duration = duration
        self.fail_play = fail_play
        self.position = 0.0
        self.volume = 1.0
        self.muted = False
        self.play_calls = 0

    def set_source(self, url):
        self.source = url

    def play(self):
        self.play_calls += 1
        if self.fail_play:
            raise PlaybackError("play() request was interrupted")
        self.playing = True

    def pause(self):
        self.playing = False

    def get_duration(self):
        return self.duration

    def seek(self, position):
        self.position = position

    def set_volume(self, volume):
        self.volume = volume

    def set_muted(self, muted):
        self.muted = muted

    def is_muted(self):
        return self.muted


class RecordingView(PlayerView):
    """View that keeps what the player last told it"""

    def __init__(self):
        self.items = None
        self.empty_message = None
        self.error = None
        self.count = None
        self.count_text = None
        self.stats = None
        self.now_playing = None
        self.play_button = None
        self.spinning = None
        self.progress_updates = []
        self.volume = None
        self.muted = None
        self.messages = []
        self.render_calls = 0

    def render_song_list(self, items):
        self.render_calls += 1
        self.items = items
        self.empty_message = None

    def show_empty_state(self, message):
        self.render_calls += 1
        self.items = []
        self.empty_message = message

    def show_library_error(self, message, hint):
        self.error = (message, hint)

    def update_song_count(self, count, text):
        self.count = count
        self.count_text = text

    def show_stats(self, stats):
        self.stats = stats

    def show_now_playing(self, title, artist):
        self.now_playing = (title, artist)

    def update_play_button(self, is_playing):
        self.play_button = is_playing

    def set_disc_spinning(self, spinning):
        self.spinning = spinning

    def update_progress(self, percent, elapsed, total):
        self.progress_updates.append((percent, elapsed, total))

    def update_volume(self, volume):
        self.volume = volume

    def update_mute(self, muted):
        self.muted = muted

    def show_message(self, message):
        self.messages.append(message)


class FakeMediaSession(MediaSession):
    def __init__(self):
        self.metadata = None
        self.handlers = {}

    def set_metadata(self, metadata):
        self.metadata = metadata

    def set_action_handler(self, action, handler):
        self.handlers[action] = handler


@pytest.fixture
def fake_audio():
    return FakeAudio()


@pytest.fixture
def recording_view():
    return RecordingView()


@pytest.fixture
def media_session():
    return FakeMediaSession()
