"""
Custom exceptions for movie probe.

This module defines the exception hierarchy used throughout the application.
Media that ffprobe rejects is not an error: it is reported through the
``valid`` flag of the resulting model.
"""

from pathlib import Path
from typing import Optional, Union


class MovieProbeError(Exception):
    """Base exception for all movie probe errors."""

    pass


class MediaInspectionError(MovieProbeError):
    """Failed to inspect media file."""

    pass


class MediaNotFoundError(MediaInspectionError, FileNotFoundError):
    """The media file does not exist."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize not-found error.

        Args:
            path: Path that was requested
        """
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")

    def __str__(self) -> str:
        return f"File not found: {self.path}"


class MalformedReportError(MediaInspectionError):
    """FFprobe output could not be decoded into a report."""

    def __init__(self, message: str, output: Optional[str] = None):
        """
        Initialize malformed report error.

        Args:
            message: Error message
            output: Leading part of the offending output
        """
        super().__init__(message)
        self.output = output[:200] if output else output


class ProbeExecutionError(MediaInspectionError):
    """FFprobe could not be started."""

    pass


class ConfigurationError(MovieProbeError):
    """Configuration is invalid or missing."""

    pass


class TranscodingError(MovieProbeError):
    """Transcoding process failed."""

    pass


class FFmpegError(TranscodingError):
    """FFmpeg command execution failed."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str | None = None):
        """
        Initialize FFmpeg error with command details.

        Args:
            message: Error message
            command: FFmpeg command that failed
            stderr: Standard error output from FFmpeg
        """
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class ProcessTimeoutError(TranscodingError):
    """Process exceeded timeout threshold."""

    def __init__(self, message: str, timeout: float):
        """
        Initialize timeout error.

        Args:
            message: Error message
            timeout: Timeout value in seconds
        """
        super().__init__(message)
        self.timeout = timeout
