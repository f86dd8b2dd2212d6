"""
Manifest generation from the music directory

Scans the music directory (non-recursively) for files with an allowed audio
extension and writes the JSON manifest consumed by the player. Without
``sort_songs`` the order is whatever the filesystem enumerates, which is why
re-running on an unchanged directory is only guaranteed to yield the same
*set* of songs.
"""

import json
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..config.settings import get_settings, MANIFEST_SCHEMAS
from ..exceptions import ConfigError
from ..utils.logger import get_logger, log_performance
from ..utils.helpers import (
    ensure_directory,
    format_file_size,
    get_current_timestamp,
    has_extension
)
from .manifest import LibraryStats, Manifest


class ManifestGenerator:
    """Builds and writes music_list.json for a music directory"""

    def __init__(
        self,
        music_directory: Optional[Union[str, Path]] = None,
        manifest_path: Optional[Union[str, Path]] = None,
        extensions: Optional[Iterable[str]] = None,
        sort_songs: Optional[bool] = None
    ):
        """
        Any argument left as None is taken from the application settings.

        Args:
            music_directory: Directory holding the audio files
            manifest_path: Where the manifest JSON is written
            extensions: Allowed audio extensions, dot included
            sort_songs: Sort names case-insensitively instead of keeping
                        directory enumeration order
        """
        settings = get_settings()
        self.logger = get_logger(__name__)

        self.music_directory = Path(music_directory) if music_directory else settings.get_music_directory()
        self.manifest_path = Path(manifest_path) if manifest_path else settings.get_manifest_path()
        self.extensions = list(extensions) if extensions is not None else list(settings.library.extensions)
        self.sort_songs = settings.library.sort_songs if sort_songs is None else sort_songs

    @staticmethod
    def _is_utf8(name: str) -> bool:
        # Undecodable bytes come back from the OS as lone surrogates
        try:
            name.encode('utf-8')
        except UnicodeEncodeError:
            return False
        return True

    def scan(self) -> List[Tuple[str, int]]:
        """
        List audio files in the music directory

        Creates the directory when it does not exist yet. Files whose size
        cannot be read still count as songs, with a size of zero.

        Returns:
            List of (filename, size in bytes) in enumeration order
        """
        ensure_directory(self.music_directory)

        entries = []
        with os.scandir(self.music_directory) as it:
            for entry in it:
                if not self._is_utf8(entry.name):
                    self.logger.warning(f"⚠️ Skipping file with an undecodable name: {entry.name!r}")
                    continue
                if not has_extension(entry.name, self.extensions):
                    continue
                try:
                    if not entry.is_file():
                        continue
                    size = entry.stat().st_size
                except OSError as e:
                    self.logger.warning(f"Could not stat {entry.name}: {e}")
                    size = 0
                entries.append((entry.name, size))

        if self.sort_songs:
            entries.sort(key=lambda item: item[0].lower())

        self.logger.debug(f"Scanned {self.music_directory}: {len(entries)} audio files")
        return entries

    def build(self) -> Manifest:
        """Scan the directory and assemble a Manifest with stats"""
        entries = self.scan()
        total_bytes = sum(size for _, size in entries)

        stats = LibraryStats(
            total_songs=len(entries),
            total_size=format_file_size(total_bytes),
            last_updated=get_current_timestamp(),
        )
        return Manifest(songs=[name for name, _ in entries], stats=stats)

    @log_performance
    def write(self, schema: Optional[str] = None) -> Manifest:
        """
        Generate the manifest and write it to disk

        Args:
            schema: 'flat' for a bare list of filenames, 'enriched' for the
                    object with songs and stats; defaults to the configured schema

        Returns:
            The manifest that was written
        """
        schema = schema or get_settings().library.manifest_schema
        if schema not in MANIFEST_SCHEMAS:
            raise ConfigError(f"Invalid manifest schema: {schema}")

        manifest = self.build()
        payload: Any = manifest.to_flat() if schema == 'flat' else manifest.to_enriched()

        ensure_directory(self.manifest_path.parent)
        tmp_path = self.manifest_path.with_name(self.manifest_path.name + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.manifest_path)
        except (OSError, ValueError):
            # The previous manifest stays in place
            tmp_path.unlink(missing_ok=True)
            raise

        self.logger.debug(f"Wrote {schema} manifest to {self.manifest_path}")
        return manifest


def generate_manifest(schema: Optional[str] = None) -> Manifest:
    """Regenerate the configured manifest with default settings"""
    return ManifestGenerator().write(schema)
