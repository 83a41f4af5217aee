"""
FFmpeg-backed job runner.

Runs a TranscodeJob through ffmpeg, reports progress through the job's
callback and optionally probes the result.
"""

import asyncio
from pathlib import Path
from typing import Optional

from ..config import ProbeConfig
from ..executor import AsyncFFmpegProcess, FFmpegCommandBuilder
from ..inspector import MediaInspector
from ..models import Movie
from ..utils import FFmpegError, TranscodingError, ensure_directory, get_logger, log_performance
from .job import TranscodeJob

logger = get_logger(__name__)


class FFmpegJobRunner:
    """
    Runs transcode and screenshot jobs with ffmpeg.

    Binary paths are passed in explicitly; nothing is read from global state.
    """

    def __init__(self, ffmpeg_path: str = "ffmpeg", inspector: Optional[MediaInspector] = None):
        """
        Initialize job runner.

        Args:
            ffmpeg_path: Path to ffmpeg executable
            inspector: Inspector used to validate outputs (default ffprobe if None)
        """
        self.ffmpeg_path = ffmpeg_path
        self.inspector = inspector or MediaInspector()

    @classmethod
    def from_config(cls, config: Optional[ProbeConfig] = None) -> "FFmpegJobRunner":
        """Runner using the ffmpeg and ffprobe binaries from a configuration."""
        config = config or ProbeConfig.create_default()
        return cls(config.ffmpeg_path, MediaInspector(config))

    def build_command(self, job: TranscodeJob) -> list[str]:
        """
        Build the ffmpeg command for a job.

        Args:
            job: Job to run

        Returns:
            FFmpeg command as list of arguments
        """
        builder = FFmpegCommandBuilder(self.ffmpeg_path)
        builder.global_option("-y")
        builder.input(job.movie.path, job.options.input_args())
        builder.output(job.output, job.options.output_args())

        command = builder.build()
        logger.debug(f"Built command: {' '.join(command)}")
        return command

    def run(self, job: TranscodeJob) -> Optional[Movie]:
        """Blocking variant of run_async(); must not be called from a running event loop."""
        return asyncio.run(self.run_async(job))

    @log_performance()
    async def run_async(self, job: TranscodeJob) -> Optional[Movie]:
        """
        Run a job.

        Args:
            job: Job to run

        Returns:
            Probed output when job.runner_options.validate_output is set, else None

        Raises:
            TranscodingError: If ffmpeg fails, times out, or the output is not valid
        """
        kind = "screenshot" if job.is_screenshot else "transcode"
        logger.info(f"Starting {kind}: {job.movie.path.name} -> {job.output.name}")

        ensure_directory(job.output.parent)

        process = AsyncFFmpegProcess(
            command=self.build_command(job),
            timeout=job.runner_options.timeout,
            progress_callback=job.progress_callback,
            duration=job.options.duration or job.movie.duration,
        )

        try:
            await process.run()
        except FFmpegError as e:
            raise TranscodingError(f"Failed to {kind} {job.movie.path.name}: {e}") from e

        if job.progress_callback:
            try:
                job.progress_callback(1.0, None)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

        if not job.runner_options.validate_output:
            return None

        return await self._validate(job.output)

    async def _validate(self, output: Path) -> Movie:
        """
        Probe an output file and check it is usable.

        Raises:
            TranscodingError: If the output is missing or invalid
        """
        if not output.exists():
            raise TranscodingError(f"Encoding completed but output not found: {output}")

        result = await self.inspector.inspect(output)
        if not result.valid:
            raise TranscodingError(f"Encoding produced an invalid file: {output}")

        logger.info(f"Successfully encoded {output.name}")
        return result
