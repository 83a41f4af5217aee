"""
Movie Probe

Inspect media files with ffprobe and describe their technical properties:
container, duration, resolution, frame rate, aspect ratios and audio layout.
"""

__version__ = "0.1.0"

from movie_probe.config import ProbeConfig
from movie_probe.inspector import MediaInspector, probe, probe_async
from movie_probe.models import AudioAttributes, Movie, VideoAttributes
from movie_probe.transcoder import EncodingOptions, FFmpegJobRunner, RunnerOptions
from movie_probe.utils import (
    ConfigurationError,
    MalformedReportError,
    MediaInspectionError,
    MediaNotFoundError,
    MovieProbeError,
    TranscodingError,
    get_logger,
    setup_logger,
)

__all__ = [
    "__version__",
    # Probing
    "MediaInspector",
    "ProbeConfig",
    "probe",
    "probe_async",
    # Models
    "AudioAttributes",
    "Movie",
    "VideoAttributes",
    # Jobs
    "EncodingOptions",
    "FFmpegJobRunner",
    "RunnerOptions",
    # Utils
    "ConfigurationError",
    "MalformedReportError",
    "MediaInspectionError",
    "MediaNotFoundError",
    "MovieProbeError",
    "TranscodingError",
    "get_logger",
    "setup_logger",
]
