"""
Data models for probed media files.

A Movie is built once from an ffprobe report and never changes afterwards.
Only the first video and the first audio stream are described.
"""

from dataclasses import dataclass, field
from datetime import datetime
from fractions import Fraction
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from movie_probe.utils import attributes

if TYPE_CHECKING:
    from movie_probe.config import ProbeConfig
    from movie_probe.transcoder import EncodingOptions, JobRunner, RunnerOptions

ProgressCallback = Callable[[float, Optional[float]], None]


@dataclass(frozen=True)
class VideoAttributes:
    """Information about the first video stream."""

    codec: Optional[str]
    colorspace: Optional[str]
    width: Optional[int]
    height: Optional[int]
    bitrate: int
    sar: Optional[str]
    dar: Optional[str]
    frame_rate: Optional[Fraction]
    rotation: Optional[int]
    summary: str

    @property
    def resolution(self) -> Optional[str]:
        """Get resolution as string (e.g., '1920x1080')."""
        return attributes.resolution(self.width, self.height)

    @property
    def calculated_aspect_ratio(self) -> Optional[float]:
        """Display aspect ratio, falling back to width / height."""
        return attributes.calculated_aspect_ratio(self.dar, self.width, self.height)

    @property
    def calculated_pixel_aspect_ratio(self) -> float:
        """Sample aspect ratio, 1.0 when unknown."""
        return attributes.calculated_pixel_aspect_ratio(self.sar)

    @property
    def portrait(self) -> bool:
        return attributes.is_portrait(self.width, self.height)

    @property
    def landscape(self) -> bool:
        return attributes.is_landscape(self.width, self.height)


@dataclass(frozen=True)
class AudioAttributes:
    """Information about the first audio stream."""

    codec: Optional[str]
    channels: int
    sample_rate: int
    bitrate: int
    channel_layout: Optional[str]
    sample_fmt: Optional[str]
    summary: str

    @property
    def layout(self) -> str:
        """Reported channel layout, or one guessed from the channel count."""
        return attributes.channel_layout(self.channel_layout, self.channels)


@dataclass(frozen=True)
class Movie:
    """Probed media file."""

    path: Path
    valid: bool
    duration: float
    size: int
    container: Optional[str] = None
    time: Optional[float] = None
    creation_time: Optional[datetime] = None
    bitrate: Optional[int] = None
    video: Optional[VideoAttributes] = None
    audio: Optional[AudioAttributes] = None
    error_message: Optional[str] = None
    # Binaries and settings the file was probed with; reused by transcode()
    config: Optional["ProbeConfig"] = field(default=None, repr=False, compare=False)

    @property
    def has_video(self) -> bool:
        return self.video is not None

    @property
    def has_audio(self) -> bool:
        return self.audio is not None

    # Video shortcuts
    @property
    def video_codec(self) -> Optional[str]:
        return self.video.codec if self.video else None

    @property
    def colorspace(self) -> Optional[str]:
        return self.video.colorspace if self.video else None

    @property
    def width(self) -> Optional[int]:
        return self.video.width if self.video else None

    @property
    def height(self) -> Optional[int]:
        return self.video.height if self.video else None

    @property
    def video_bitrate(self) -> Optional[int]:
        return self.video.bitrate if self.video else None

    @property
    def sar(self) -> Optional[str]:
        return self.video.sar if self.video else None

    @property
    def dar(self) -> Optional[str]:
        return self.video.dar if self.video else None

    @property
    def frame_rate(self) -> Optional[Fraction]:
        return self.video.frame_rate if self.video else None

    @property
    def rotation(self) -> Optional[int]:
        return self.video.rotation if self.video else None

    @property
    def video_stream(self) -> Optional[str]:
        return self.video.summary if self.video else None

    @property
    def resolution(self) -> Optional[str]:
        return self.video.resolution if self.video else None

    @property
    def calculated_aspect_ratio(self) -> Optional[float]:
        return self.video.calculated_aspect_ratio if self.video else None

    @property
    def calculated_pixel_aspect_ratio(self) -> float:
        return self.video.calculated_pixel_aspect_ratio if self.video else 1.0

    @property
    def portrait(self) -> bool:
        return self.video.portrait if self.video else False

    @property
    def landscape(self) -> bool:
        return self.video.landscape if self.video else False

    # Audio shortcuts
    @property
    def audio_codec(self) -> Optional[str]:
        return self.audio.codec if self.audio else None

    @property
    def audio_channels(self) -> Optional[int]:
        return self.audio.channels if self.audio else None

    @property
    def audio_sample_rate(self) -> Optional[int]:
        return self.audio.sample_rate if self.audio else None

    @property
    def audio_bitrate(self) -> Optional[int]:
        return self.audio.bitrate if self.audio else None

    @property
    def audio_channel_layout(self) -> Optional[str]:
        return self.audio.layout if self.audio else None

    @property
    def audio_stream(self) -> Optional[str]:
        return self.audio.summary if self.audio else None

    def transcode(
        self,
        output: Union[str, Path],
        options: Optional["EncodingOptions"] = None,
        runner_options: Optional["RunnerOptions"] = None,
        progress_callback: Optional[ProgressCallback] = None,
        runner: Optional["JobRunner"] = None,
    ) -> Any:
        """
        Encode this file into ``output``.

        Args:
            output: Output file path
            options: Encoding options (defaults to ffmpeg's choices)
            runner_options: Runner behaviour (timeout, output validation)
            progress_callback: Called with (progress 0.0-1.0, speed)
            runner: Job runner (FFmpegJobRunner built from this movie's config if None)

        Returns:
            Whatever the runner returns (FFmpegJobRunner: the probed output)
        """
        from movie_probe.transcoder import (
            EncodingOptions,
            FFmpegJobRunner,
            RunnerOptions,
            TranscodeJob,
        )

        job = TranscodeJob(
            movie=self,
            output=Path(output),
            options=options or EncodingOptions(),
            runner_options=runner_options or RunnerOptions(),
            progress_callback=progress_callback,
        )
        return (runner or FFmpegJobRunner.from_config(self.config)).run(job)

    def screenshot(
        self,
        output: Union[str, Path],
        options: Optional["EncodingOptions"] = None,
        runner_options: Optional["RunnerOptions"] = None,
        progress_callback: Optional[ProgressCallback] = None,
        runner: Optional["JobRunner"] = None,
    ) -> Any:
        """Grab a single frame into ``output``; see transcode()."""
        from movie_probe.transcoder import EncodingOptions

        options = (options or EncodingOptions()).model_copy(update={"screenshot": True})
        return self.transcode(output, options, runner_options, progress_callback, runner)
