"""
Input validation utilities
"""
from pathlib import Path
from urllib.parse import urlparse
from typing import Optional, Tuple


def validate_source_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a video or playlist URL handed to the downloader

    Args:
        url: URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url:
        return False, "URL cannot be empty"

    if not url.startswith('http'):
        return False, "URL must start with http:// or https://"

    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return False, f"Not a valid web address: {url}"

    return True, None


def is_remote_source(source: str) -> bool:
    """True when a manifest source should be fetched over HTTP"""
    return urlparse(str(source)).scheme in ('http', 'https')


def validate_music_directory(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate music directory path

    The directory does not need to exist yet, but it must not be a file.

    Args:
        path: Directory path to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not path:
        return False, "Music directory cannot be empty"

    path_obj = Path(path).expanduser()
    if path_obj.exists() and not path_obj.is_dir():
        return False, f"Not a directory: {path_obj}"

    return True, None
