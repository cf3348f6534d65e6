"""Formatting helpers for CLI output."""

from datetime import datetime, timezone

from common.constants import WHOLE_FILE_LENGTH


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based): "512 B", "1.50 MiB".
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = size_bytes / 1024.0
    for unit in ('KiB', 'MiB', 'GiB', 'TiB'):
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_block_length(length: int) -> str:
    """Render a block length, naming the whole-file sentinel of cache-backed records."""
    if length == WHOLE_FILE_LENGTH:
        return "whole file"
    return format_file_size(length)


def format_timestamp(millis: int) -> str:
    """Render epoch milliseconds as a UTC timestamp."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
