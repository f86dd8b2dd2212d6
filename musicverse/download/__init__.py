"""
Download package
yt-dlp audio extraction for single URLs and batch configuration files
"""

from .downloader import AudioDownloader, DownloadResult, DownloadProgressHook, get_downloader, reset_downloader
from .batch import BatchConfig, BatchSynchronizer, SyncReport, load_batch_config

__all__ = [
    'AudioDownloader',
    'DownloadResult',
    'DownloadProgressHook',
    'get_downloader',
    'reset_downloader',
    'BatchConfig',
    'BatchSynchronizer',
    'SyncReport',
    'load_batch_config',
]
