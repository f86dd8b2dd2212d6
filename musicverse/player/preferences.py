"""
Persisted player preferences

A tiny key/value store backed by a JSON file. Values are stored as strings,
the same way a browser's local storage keeps them.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from ..utils.logger import get_logger


VOLUME_KEY = 'music_volume'


class PreferenceStore:
    """String key/value preferences saved to a JSON file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self.logger = get_logger(__name__)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            self.logger.warning(f"Could not save preference '{key}': {e}")


class MemoryPreferenceStore(PreferenceStore):
    """In-memory store for players that should not touch disk"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.path = None
        self.logger = get_logger(__name__)
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = str(value)
