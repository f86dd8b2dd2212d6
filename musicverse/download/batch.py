"""
Batch download of the URLs listed in downloads.json

Configuration format:

    {
      "videos": ["https://www.youtube.com/watch?v=..."],
      "playlists": ["https://www.youtube.com/playlist?list=..."]
    }

Videos are processed first, then playlists, one URL at a time. A failing URL
is logged and skipped; a missing or unreadable configuration aborts the run
before anything is downloaded. Once every URL has been tried the enriched
manifest is regenerated.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config.settings import get_settings
from ..exceptions import BatchConfigError
from ..library.generator import ManifestGenerator
from ..library.manifest import Manifest
from ..utils.logger import get_logger, create_operation_logger
from .downloader import AudioDownloader, DownloadResult, get_downloader


@dataclass
class BatchConfig:
    """URLs to fetch, split by download mode"""
    videos: List[str] = field(default_factory=list)
    playlists: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.videos and not self.playlists

    @property
    def total(self) -> int:
        return len(self.videos) + len(self.playlists)


@dataclass
class SyncReport:
    """Summary of a batch run"""
    results: List[DownloadResult] = field(default_factory=list)
    manifest: Optional[Manifest] = None

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)


def load_batch_config(path: Path) -> BatchConfig:
    """
    Read the batch configuration file

    Args:
        path: Location of downloads.json

    Returns:
        BatchConfig with missing keys defaulted to empty lists

    Raises:
        BatchConfigError: If the file is missing, is not valid JSON or has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise BatchConfigError(f"{path.name} not found! Please create it.", details={'file_path': str(path)})

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise BatchConfigError(f"Error parsing {path.name}: {e}",
                               details={'file_path': str(path), 'original_error': e})

    if not isinstance(data, dict):
        raise BatchConfigError(f"{path.name} must contain a JSON object", details={'file_path': str(path)})

    videos = data.get('videos') or []
    playlists = data.get('playlists') or []
    for key, value in (('videos', videos), ('playlists', playlists)):
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise BatchConfigError(f"'{key}' in {path.name} must be a list of URLs",
                                   details={'file_path': str(path)})

    return BatchConfig(videos=videos, playlists=playlists)


class BatchSynchronizer:
    """Runs every download in the batch configuration, then refreshes the manifest"""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        downloader: Optional[AudioDownloader] = None,
        generator: Optional[ManifestGenerator] = None,
        show_progress: bool = True
    ):
        settings = get_settings()
        self.logger = get_logger(__name__)

        self.config_path = Path(config_path) if config_path else settings.get_batch_file()
        self.downloader = downloader or get_downloader()
        self.generator = generator or ManifestGenerator()
        self.show_progress = show_progress

    def run(self) -> SyncReport:
        """
        Process the batch configuration

        Returns:
            SyncReport with one result per URL and the regenerated manifest;
            an empty report when the configuration lists no URLs

        Raises:
            BatchConfigError: If the configuration is missing or invalid
        """
        try:
            config = load_batch_config(self.config_path)
        except BatchConfigError as e:
            self.logger.error(f"❌ {e}")
            raise

        report = SyncReport()
        if config.is_empty:
            self.logger.warning(f"⚠️ No URLs found in {self.config_path.name}")
            return report

        jobs = [(url, False) for url in config.videos] + [(url, True) for url in config.playlists]

        operation = create_operation_logger(__name__, "Batch download", show_progress=self.show_progress)
        operation.start(
            len(jobs),
            f"🎵 Found {len(config.videos)} videos and {len(config.playlists)} playlists to process..."
        )

        for url, playlist in jobs:
            self.logger.console_info(f"⬇️  Processing [{'Playlist' if playlist else 'Single'}]: {url}")
            result = self.downloader.download(url, playlist=playlist, batch=True)
            report.results.append(result)
            if result.success:
                self.logger.console_info("✅ Done.")
            operation.advance(url)

        operation.complete(f"✅ {report.succeeded} of {len(jobs)} URLs downloaded")

        self.logger.console_info("📝 Updating library list...")
        try:
            report.manifest = self.generator.write('enriched')
        except (OSError, ValueError) as e:
            operation.error(f"could not update the library list: {e}", e)
            raise

        stats = report.manifest.stats
        self.logger.console_info(f"✨ Library updated with {stats.total_songs} songs ({stats.total_size})!")

        return report
