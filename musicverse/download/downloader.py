"""
Audio downloader built on yt-dlp

Wraps ``yt_dlp.YoutubeDL`` to extract audio from a single video or a whole
playlist into the music directory. Extraction itself is entirely yt-dlp's
business; this module only builds the options, tracks what was written and
turns failures into a ``DownloadResult`` so batch callers can move on to the
next URL.

Downloads are strictly sequential: one YoutubeDL instance per URL, no thread
pool, so nothing else writes to the music directory at the same time.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yt_dlp

from ..config.settings import get_settings
from ..utils.logger import get_logger
from ..utils.helpers import ensure_directory, format_file_size


@dataclass
class DownloadResult:
    """
    Outcome of one downloader invocation

    Attributes:
        url: Source URL that was processed
        playlist: Whether the URL was treated as a playlist
        success: True when yt-dlp finished without reporting an error
        files: Paths yt-dlp reported as finished downloads
        error_message: Failure description (None if successful)
        download_time: Wall-clock time spent in seconds
    """
    url: str
    playlist: bool
    success: bool
    files: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    download_time: Optional[float] = None

    @property
    def mode_label(self) -> str:
        return 'Playlist' if self.playlist else 'Single'


class DownloadProgressHook:
    """
    Progress hook handed to yt-dlp

    Records finished files and forwards progress to an optional callback.
    The callback receives a dict with ``url``, ``status`` and, depending on
    the status, ``progress_percent``, ``downloaded_bytes``, ``total_bytes``
    or ``file_path``.
    """

    def __init__(self, url: str, callback: Optional[Callable[[Dict[str, Any]], None]] = None):
        self.url = url
        self.callback = callback
        self.logger = get_logger(__name__)
        self.finished_files: List[str] = []
        self.status = "starting"

    def __call__(self, d: Dict[str, Any]) -> None:
        self.status = d.get('status', 'unknown')

        if self.status == 'downloading':
            total_bytes = d.get('total_bytes') or d.get('total_bytes_estimate')
            downloaded_bytes = d.get('downloaded_bytes', 0)
            progress_percent = (downloaded_bytes / total_bytes) * 100 if total_bytes else 0

            if self.callback:
                self.callback({
                    'url': self.url,
                    'status': self.status,
                    'progress_percent': progress_percent,
                    'downloaded_bytes': downloaded_bytes,
                    'total_bytes': total_bytes,
                })

        elif self.status == 'finished':
            filename = d.get('filename')
            if filename:
                self.finished_files.append(filename)
            self.logger.debug(
                f"Finished {filename} ({format_file_size(d.get('total_bytes') or 0)})"
            )
            if self.callback:
                self.callback({'url': self.url, 'status': 'finished', 'file_path': filename})

        elif self.status == 'error':
            self.logger.debug(f"yt-dlp reported an error for {self.url}")
            if self.callback:
                self.callback({'url': self.url, 'status': 'error'})


class AudioDownloader:
    """
    Downloads audio into the music directory with yt-dlp

    The single-URL mode mirrors a one-off download: playlists are ignored
    unless asked for. Batch mode additionally tells yt-dlp to skip
    unavailable entries, keep existing files and resume partial downloads.
    """

    def __init__(
        self,
        music_directory: Optional[Path] = None,
        audio_format: Optional[str] = None,
        output_template: Optional[str] = None
    ):
        settings = get_settings()
        self.logger = get_logger(__name__)

        self.music_directory = Path(music_directory) if music_directory else settings.get_music_directory()
        self.audio_format = audio_format or settings.download.audio_format
        self.output_template = output_template or settings.download.output_template
        self.socket_timeout = settings.download.socket_timeout

    def _get_ydl_options(
        self,
        playlist: bool,
        batch: bool,
        progress_hook: Optional[DownloadProgressHook] = None
    ) -> Dict[str, Any]:
        """
        Build the yt-dlp option dictionary

        Args:
            playlist: Download every entry of a playlist URL
            batch: Apply the resilient batch options
            progress_hook: Hook receiving yt-dlp progress updates

        Returns:
            Options for ``yt_dlp.YoutubeDL``
        """
        options = {
            'format': 'bestaudio/best',
            'outtmpl': str(self.music_directory / self.output_template),
            'noplaylist': not playlist,
            'postprocessors': [{
                'key': 'FFmpegExtractAudio',
                'preferredcodec': self.audio_format,
            }],
            'socket_timeout': self.socket_timeout,

            # Our own logging reports progress
            'quiet': True,
            'no_warnings': True,
            'noprogress': True,
        }

        if batch:
            options['ignoreerrors'] = True
            options['overwrites'] = False
            options['continuedl'] = True

        if progress_hook:
            options['progress_hooks'] = [progress_hook]

        return options

    def download(
        self,
        url: str,
        playlist: bool = False,
        batch: bool = False,
        progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None
    ) -> DownloadResult:
        """
        Download audio for one URL

        Never raises for yt-dlp failures: they are logged and returned as an
        unsuccessful DownloadResult.

        Args:
            url: Video or playlist URL
            playlist: Treat the URL as a playlist
            batch: Use the batch options (ignore errors, no overwrites, resume)
            progress_callback: Optional callback for progress updates

        Returns:
            DownloadResult describing the outcome
        """
        start_time = time.time()
        ensure_directory(self.music_directory)

        progress_hook = DownloadProgressHook(url, progress_callback)
        ydl_opts = self._get_ydl_options(playlist, batch, progress_hook)

        mode = 'Playlist' if playlist else 'Single'
        self.logger.debug(f"Starting {mode.lower()} download: {url}")

        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                retcode = ydl.download([url])
        except Exception as e:
            self.logger.error(f"❌ Failed to download {url}: {e}")
            return DownloadResult(
                url=url,
                playlist=playlist,
                success=False,
                files=progress_hook.finished_files,
                error_message=str(e),
                download_time=time.time() - start_time
            )

        download_time = time.time() - start_time
        if retcode:
            # ignoreerrors lets yt-dlp finish the rest of a playlist and report a non-zero code
            message = f"yt-dlp exited with code {retcode}"
            self.logger.warning(f"⚠️ {url}: {message}")
            return DownloadResult(
                url=url,
                playlist=playlist,
                success=False,
                files=progress_hook.finished_files,
                error_message=message,
                download_time=download_time
            )

        self.logger.debug(f"Download finished: {url} ({len(progress_hook.finished_files)} files, {download_time:.1f}s)")
        return DownloadResult(
            url=url,
            playlist=playlist,
            success=True,
            files=progress_hook.finished_files,
            download_time=download_time
        )


_downloader_instance: Optional[AudioDownloader] = None


def get_downloader() -> AudioDownloader:
    """Get the shared downloader built from the current settings"""
    global _downloader_instance
    if not _downloader_instance:
        _downloader_instance = AudioDownloader()
    return _downloader_instance


def reset_downloader() -> None:
    """Drop the shared downloader so the next access picks up new settings"""
    global _downloader_instance
    _downloader_instance = None
