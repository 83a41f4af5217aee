"""
Helper functions for movie probe.

This module contains utility functions used throughout the application.
"""

from pathlib import Path


def format_size(bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 GB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes < 1024.0:
            return f"{bytes:.1f} {unit}"
        bytes /= 1024.0  # type: ignore
    return f"{bytes:.1f} PB"


def format_duration(seconds: float) -> str:
    """
    Format duration as HH:MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "01:30:45")
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_bitrate(bits_per_second: int) -> str:
    """
    Format bitrate in human-readable format.

    Args:
        bits_per_second: Bitrate in bits per second

    Returns:
        Formatted bitrate string (e.g., "5.0 Mbps")
    """
    if bits_per_second >= 1000000:
        return f"{bits_per_second / 1000000:.1f} Mbps"
    elif bits_per_second >= 1000:
        return f"{bits_per_second / 1000:.1f} Kbps"
    else:
        return f"{bits_per_second} bps"


def ensure_directory(path: Path) -> Path:
    """
    Ensure directory exists, create if it doesn't.

    Args:
        path: Directory path

    Returns:
        Resolved directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path.resolve()


def get_file_size(path: Path) -> int:
    """
    Get on-disk size in bytes.

    Args:
        path: File path

    Returns:
        Size in bytes, 0 if the path doesn't exist
    """
    if path.exists():
        return path.stat().st_size
    return 0
