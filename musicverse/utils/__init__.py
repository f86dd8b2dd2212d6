# musicverse/utils/__init__.py
"""
Utilities package
Common helpers, logging, and validation functions
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    OperationLogger,
    create_operation_logger,
    log_performance
)
from .helpers import (
    format_file_size,
    format_time,
    format_timestamp,
    get_current_timestamp,
    get_file_extension,
    has_extension,
    ensure_directory,
    pluralize
)
from .validation import (
    validate_source_url,
    validate_music_directory,
    is_remote_source
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'OperationLogger',
    'create_operation_logger',
    'log_performance',

    # Helper exports
    'format_file_size',
    'format_time',
    'format_timestamp',
    'get_current_timestamp',
    'get_file_extension',
    'has_extension',
    'ensure_directory',
    'pluralize',

    # Validation exports
    'validate_source_url',
    'validate_music_directory',
    'is_remote_source',
]
