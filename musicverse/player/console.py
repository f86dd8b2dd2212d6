"""
Terminal view for the player

Keeps the latest state pushed by the controller and prints it on demand,
so a command can drive the player through several updates and show the
final picture once.
"""

from typing import List, Optional

import click

from ..library.manifest import LibraryStats
from .interfaces import PlayerView, SongListItem


class ConsoleView(PlayerView):
    """PlayerView that renders to the terminal with click"""

    def __init__(self, color: Optional[bool] = None):
        self.color = color
        self.items: List[SongListItem] = []
        self.empty_message: Optional[str] = None
        self.error: Optional[str] = None
        self.error_hint: Optional[str] = None
        self.count_text = ""
        self.stats: Optional[LibraryStats] = None
        self.now_playing: Optional[str] = None
        self.messages: List[str] = []

    def render_song_list(self, items: List[SongListItem]) -> None:
        self.items = list(items)
        self.empty_message = None

    def show_empty_state(self, message: str) -> None:
        self.items = []
        self.empty_message = message

    def show_library_error(self, message: str, hint: str) -> None:
        self.error = message
        self.error_hint = hint

    def update_song_count(self, count: int, text: str) -> None:
        self.count_text = text

    def show_stats(self, stats: LibraryStats) -> None:
        self.stats = stats

    def show_now_playing(self, title: str, artist: str) -> None:
        self.now_playing = f"{title} · {artist}"

    def show_message(self, message: str) -> None:
        self.messages.append(message)

    def echo(self) -> None:
        """Print everything the view currently holds"""
        if self.error:
            click.secho(f"⚠️  {self.error}", fg='red', color=self.color)
            if self.error_hint:
                click.echo(f"   {self.error_hint}", color=self.color)
            return

        if self.stats:
            click.echo(
                f"📚 {self.stats.total_songs} songs · {self.stats.total_size} · updated {self.stats.last_updated}",
                color=self.color
            )

        if self.empty_message:
            click.secho(self.empty_message, fg='yellow', color=self.color)
        for item in self.items:
            marker = '▶' if item.active else ' '
            line = f"{marker} {item.index + 1:>3}. {item.title}  ({item.subtitle})"
            if item.active:
                click.secho(line, fg='magenta', bold=True, color=self.color)
            else:
                click.echo(line, color=self.color)

        click.echo(self.count_text, color=self.color)
        if self.now_playing:
            click.echo(f"Now loaded: {self.now_playing}", color=self.color)
        for message in self.messages:
            click.echo(message, color=self.color)
