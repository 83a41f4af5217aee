"""Utility functions and helpers."""

from movie_probe.utils.errors import (
    ConfigurationError,
    FFmpegError,
    MalformedReportError,
    MediaInspectionError,
    MediaNotFoundError,
    MovieProbeError,
    ProbeExecutionError,
    ProcessTimeoutError,
    TranscodingError,
)
from movie_probe.utils.helpers import (
    ensure_directory,
    format_bitrate,
    format_duration,
    format_size,
    get_file_size,
)
from movie_probe.utils.logger import get_logger, log_performance, setup_logger

__all__ = [
    # Errors
    "ConfigurationError",
    "FFmpegError",
    "MalformedReportError",
    "MediaInspectionError",
    "MediaNotFoundError",
    "MovieProbeError",
    "ProbeExecutionError",
    "ProcessTimeoutError",
    "TranscodingError",
    # Helpers
    "ensure_directory",
    "format_bitrate",
    "format_duration",
    "format_size",
    "get_file_size",
    # Logging
    "get_logger",
    "log_performance",
    "setup_logger",
]
