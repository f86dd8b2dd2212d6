"""
Utility functions and helpers for Music Verse
Common functions for file handling, size and time formatting
"""

import math
from pathlib import Path
from typing import Iterable, Optional, Union
from datetime import datetime


SIZE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB']


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable string using binary units

    At most two decimals are kept and trailing zeros are dropped, so 1536
    bytes is "1.5 KB" and 1024 bytes is "1 KB".

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes <= 0:
        return "0 B"

    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1

    number = f"{size:.2f}".rstrip('0').rstrip('.')
    return f"{number} {SIZE_UNITS[unit_index]}"


def format_time(seconds: Optional[float]) -> str:
    """
    Format a playback position as minutes:seconds

    Minutes are not wrapped into hours; seconds are zero-padded.

    Args:
        seconds: Position in seconds

    Returns:
        Formatted time string, "0:00" for missing or negative values
    """
    if seconds is None or math.isnan(seconds) or seconds < 0:
        return "0:00"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def get_file_extension(filename: Union[str, Path]) -> str:
    """Lowercased extension including the dot, empty when there is none"""
    return Path(filename).suffix.lower()


def has_extension(filename: Union[str, Path], extensions: Iterable[str]) -> bool:
    """Check a filename against an extension allow-list, case-insensitively"""
    allowed = {ext.lower() for ext in extensions}
    return get_file_extension(filename) in allowed


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, create if necessary

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path_obj = Path(path)
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj


def format_timestamp(timestamp: Union[str, datetime]) -> str:
    """
    Format timestamp for display

    Args:
        timestamp: ISO timestamp string or datetime object

    Returns:
        Formatted timestamp string
    """
    if isinstance(timestamp, str):
        try:
            dt = datetime.fromisoformat(timestamp.replace('Z', '+00:00'))
        except ValueError:
            return timestamp
    else:
        dt = timestamp

    return dt.strftime('%Y-%m-%d %H:%M:%S')


def get_current_timestamp() -> str:
    """Current local time formatted for display"""
    return format_timestamp(datetime.now())


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"
