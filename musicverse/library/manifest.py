"""
Song manifest model and loader

The manifest exists in two shapes:

    Flat (older generator):
        ["Artist - Title.mp3", "Other.m4a"]

    Enriched (batch sync):
        {
          "stats": {"totalSongs": 2, "totalSize": "7.4 MB", "lastUpdated": "..."},
          "songs": ["Artist - Title.mp3", "Other.m4a"]
        }

Both are normalized into a single ``Manifest`` by ``parse_manifest``;
consumers never look at the raw JSON.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from ..exceptions import ManifestError
from ..utils.logger import get_logger
from ..utils.validation import is_remote_source


logger = get_logger(__name__)


@dataclass
class LibraryStats:
    """Aggregate figures written by the enriched generator"""
    total_songs: int
    total_size: str
    last_updated: str

    @classmethod
    def from_manifest_data(cls, data: Dict[str, Any]) -> 'LibraryStats':
        return cls(
            total_songs=int(data.get('totalSongs', 0)),
            total_size=str(data.get('totalSize', '')),
            last_updated=str(data.get('lastUpdated', '')),
        )

    def to_manifest_data(self) -> Dict[str, Any]:
        return {
            'totalSongs': self.total_songs,
            'totalSize': self.total_size,
            'lastUpdated': self.last_updated,
        }


@dataclass
class Manifest:
    """Normalized manifest: ordered song filenames plus optional stats"""
    songs: List[str] = field(default_factory=list)
    stats: Optional[LibraryStats] = None

    @property
    def is_empty(self) -> bool:
        return not self.songs

    def to_flat(self) -> List[str]:
        return list(self.songs)

    def to_enriched(self) -> Dict[str, Any]:
        stats = self.stats or LibraryStats(len(self.songs), '', '')
        return {
            'stats': stats.to_manifest_data(),
            'songs': list(self.songs),
        }


def parse_manifest(data: Any) -> Manifest:
    """
    Normalize raw manifest JSON into a Manifest

    Args:
        data: Decoded JSON, either a list of filenames or an object with a
              ``songs`` list and optional ``stats``

    Returns:
        Manifest instance

    Raises:
        ManifestError: If the data matches neither schema
    """
    if isinstance(data, list):
        songs = data
        stats = None
    elif isinstance(data, dict):
        songs = data.get('songs') or []
        raw_stats = data.get('stats')
        if raw_stats is not None and not isinstance(raw_stats, dict):
            raise ManifestError("Manifest 'stats' must be an object")
        try:
            stats = LibraryStats.from_manifest_data(raw_stats) if raw_stats else None
        except (TypeError, ValueError) as e:
            raise ManifestError(f"Invalid manifest stats: {e}", details={'original_error': e})
    else:
        raise ManifestError(f"Unsupported manifest type: {type(data).__name__}")

    if not isinstance(songs, list):
        raise ManifestError("Manifest 'songs' must be a list")

    bad_entries = [entry for entry in songs if not isinstance(entry, str)]
    if bad_entries:
        raise ManifestError(
            f"Manifest contains {len(bad_entries)} non-string entries",
            details={'entries': bad_entries[:5]}
        )

    return Manifest(songs=list(songs), stats=stats)


def load_manifest(source: Union[str, Path], timeout: int = 10) -> Manifest:
    """
    Load a manifest from a local file or an http(s) URL

    Args:
        source: File path or URL of the manifest
        timeout: Request timeout in seconds for remote manifests

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: On any read, network or decoding failure
    """
    source_str = str(source)

    if is_remote_source(source_str):
        logger.debug(f"Fetching manifest from {source_str}")
        try:
            response = requests.get(source_str, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise ManifestError(f"Music list not found: {e}", details={'url': source_str, 'original_error': e})
        except ValueError as e:
            raise ManifestError(f"Music list is not valid JSON: {e}", details={'url': source_str, 'original_error': e})
    else:
        path = Path(source_str).expanduser()
        logger.debug(f"Reading manifest from {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ManifestError(f"Music list not found: {path}", details={'file_path': str(path), 'original_error': e})
        except OSError as e:
            raise ManifestError(f"Cannot read music list {path}: {e}", details={'file_path': str(path), 'original_error': e})
        except json.JSONDecodeError as e:
            raise ManifestError(f"Music list is not valid JSON: {e}", details={'file_path': str(path), 'original_error': e})

    manifest = parse_manifest(data)
    logger.debug(f"Manifest loaded: {len(manifest.songs)} songs, stats={'yes' if manifest.stats else 'no'}")
    return manifest
