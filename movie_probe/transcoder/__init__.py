"""
Transcode and screenshot jobs for probed movies.
"""

from .job import JobRunner, TranscodeJob
from .options import EncodingOptions, RunnerOptions
from .runner import FFmpegJobRunner

__all__ = [
    "EncodingOptions",
    "FFmpegJobRunner",
    "JobRunner",
    "RunnerOptions",
    "TranscodeJob",
]
