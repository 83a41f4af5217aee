"""Data models for movie probe."""

from movie_probe.models.media import AudioAttributes, Movie, ProgressCallback, VideoAttributes
from movie_probe.models.report import (
    FormatSection,
    ProbeErrorSection,
    RawReport,
    StreamDescriptor,
)

__all__ = [
    # Media models
    "AudioAttributes",
    "Movie",
    "ProgressCallback",
    "VideoAttributes",
    # Report schema
    "FormatSection",
    "ProbeErrorSection",
    "RawReport",
    "StreamDescriptor",
]
