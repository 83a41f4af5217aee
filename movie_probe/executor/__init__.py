"""Process execution and management."""

from movie_probe.executor.subprocess import (
    AsyncFFmpegProcess,
    FFmpegCommandBuilder,
    build_probe_command,
    capture_output,
    run_ffprobe_async,
)

__all__ = [
    "AsyncFFmpegProcess",
    "FFmpegCommandBuilder",
    "build_probe_command",
    "capture_output",
    "run_ffprobe_async",
]
