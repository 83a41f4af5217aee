"""
Media inspection and analysis using FFprobe.

This module runs ffprobe on a file and turns its report into a Movie:
capture output, normalize text, decode the report, classify validity and
derive the stream attributes.
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

from ..config import ProbeConfig
from ..executor import run_ffprobe_async
from ..models import AudioAttributes, Movie, RawReport, StreamDescriptor, VideoAttributes
from ..utils import MediaNotFoundError, attributes, get_file_size, get_logger
from .classifier import is_valid
from .decoder import decode_report, first_stream
from .encoding import decode_diagnostics, normalize_output

logger = get_logger(__name__)


class MediaInspector:
    """
    Inspects media files using FFprobe.

    Builds a Movie describing:
    - Container format, duration, start time, bitrate and size
    - The first video stream (codec, resolution, frame rate, aspect ratios)
    - The first audio stream (codec, channels, sample rate, layout)
    - Whether the file is usable at all
    """

    def __init__(self, config: Optional[ProbeConfig] = None, ffprobe_path: Optional[str] = None):
        """
        Initialize media inspector.

        Args:
            config: Probe configuration (defaults if None)
            ffprobe_path: Path to ffprobe executable, overrides config.ffprobe_path
        """
        self._config = config or ProbeConfig.create_default()
        if ffprobe_path:
            self._config = self._config.model_copy(update={"ffprobe_path": ffprobe_path})

    @property
    def config(self) -> ProbeConfig:
        """Configuration handed on to probed movies."""
        return self._config

    @property
    def ffprobe_path(self) -> str:
        return self._config.ffprobe_path

    async def inspect(self, input_file: Union[str, Path]) -> Movie:
        """
        Inspect media file.

        Args:
            input_file: Path to media file to inspect

        Returns:
            Movie; files ffprobe rejects come back with valid=False

        Raises:
            MediaNotFoundError: If the file doesn't exist (ffprobe is not started)
            MalformedReportError: If ffprobe output cannot be decoded
            ProbeExecutionError: If ffprobe cannot be started
        """
        path = Path(input_file)
        if not path.exists():
            raise MediaNotFoundError(path)

        logger.info(f"Inspecting media file: {path.name}")

        stdout, stderr = await self._run_ffprobe(path)

        text = normalize_output(
            stdout,
            encoding=self._config.text_encoding,
            fallback=self._config.fallback_encoding,
        )
        report = decode_report(text)
        diagnostics = decode_diagnostics(stderr, self._config.text_encoding)

        movie = self._build_movie(path, report, diagnostics)

        if movie.valid:
            logger.info(f"Successfully inspected: {path.name}")
        else:
            logger.warning(f"Media file is not usable: {path.name}")
        logger.debug(
            f"Found video={'yes' if movie.has_video else 'no'}, "
            f"audio={'yes' if movie.has_audio else 'no'}, duration={movie.duration}s"
        )

        return movie

    def inspect_sync(self, input_file: Union[str, Path]) -> Movie:
        """Blocking variant of inspect(); must not be called from a running event loop."""
        return asyncio.run(self.inspect(input_file))

    async def _run_ffprobe(self, input_file: Path) -> tuple[bytes, bytes]:
        """
        Run ffprobe and return its raw output.

        Args:
            input_file: Path to media file

        Returns:
            Tuple of (stdout, stderr) as bytes
        """
        return await run_ffprobe_async(input_file, self.ffprobe_path)

    def _build_movie(self, path: Path, report: RawReport, diagnostics: str) -> Movie:
        """
        Assemble the Movie from a decoded report and ffprobe stderr.

        Args:
            path: Probed file
            report: Decoded report
            diagnostics: ffprobe stderr as text

        Returns:
            Movie
        """
        valid = is_valid(report, diagnostics, self._config.unsupported_markers)

        if report.error is not None:
            logger.debug(f"FFprobe reported an error: {report.error.string}")
            return Movie(
                path=path,
                valid=valid,
                duration=0.0,
                size=get_file_size(path),
                error_message=report.error.string,
                config=self._config,
            )

        if not valid:
            logger.debug("FFprobe diagnostics mark the media as unsupported")

        fmt = report.format
        size = attributes.to_int(fmt.size) if fmt.size is not None else get_file_size(path)

        video_stream = first_stream(report, "video")
        audio_stream = first_stream(report, "audio")

        return Movie(
            path=path,
            valid=valid,
            duration=max(attributes.to_float(fmt.duration), 0.0),
            size=size,
            container=fmt.format_name,
            time=attributes.to_float(fmt.start_time),
            creation_time=attributes.parse_creation_time(fmt.tags.get("creation_time")),
            bitrate=attributes.to_int(fmt.bit_rate),
            video=self._parse_video_stream(video_stream) if video_stream else None,
            audio=self._parse_audio_stream(audio_stream) if audio_stream else None,
            config=self._config,
        )

    def _parse_video_stream(self, stream: StreamDescriptor) -> VideoAttributes:
        """
        Derive video attributes from a stream descriptor.

        Args:
            stream: Video stream from the report

        Returns:
            VideoAttributes
        """
        width, height = attributes.dimensions(stream.width, stream.height)
        sar = stream.sample_aspect_ratio
        dar = stream.display_aspect_ratio

        return VideoAttributes(
            codec=stream.codec_name,
            colorspace=stream.pix_fmt,
            width=width,
            height=height,
            bitrate=attributes.to_int(stream.bit_rate),
            sar=sar,
            dar=dar,
            frame_rate=attributes.parse_frame_rate(stream.avg_frame_rate),
            rotation=attributes.rotation(stream.tags),
            summary=attributes.video_summary(
                stream.codec_name,
                stream.profile,
                stream.codec_tag_string,
                stream.codec_tag,
                stream.pix_fmt,
                attributes.resolution(width, height),
                sar,
                dar,
            ),
        )

    def _parse_audio_stream(self, stream: StreamDescriptor) -> AudioAttributes:
        """
        Derive audio attributes from a stream descriptor.

        Args:
            stream: Audio stream from the report

        Returns:
            AudioAttributes
        """
        channels = attributes.to_int(stream.channels)
        sample_rate = attributes.to_int(stream.sample_rate)
        bitrate = attributes.to_int(stream.bit_rate)

        return AudioAttributes(
            codec=stream.codec_name,
            channels=channels,
            sample_rate=sample_rate,
            bitrate=bitrate,
            channel_layout=stream.channel_layout,
            sample_fmt=stream.sample_fmt,
            summary=attributes.audio_summary(
                stream.codec_name,
                stream.codec_tag_string,
                stream.codec_tag,
                sample_rate,
                attributes.channel_layout(stream.channel_layout, channels),
                stream.sample_fmt,
                bitrate,
            ),
        )


async def probe_async(input_file: Union[str, Path], config: Optional[ProbeConfig] = None) -> Movie:
    """
    Probe a media file.

    Args:
        input_file: Path to media file
        config: Probe configuration (defaults if None)

    Returns:
        Movie
    """
    return await MediaInspector(config).inspect(input_file)


def probe(input_file: Union[str, Path], config: Optional[ProbeConfig] = None) -> Movie:
    """
    Probe a media file, blocking until ffprobe has exited.

    Args:
        input_file: Path to media file
        config: Probe configuration (defaults if None)

    Returns:
        Movie
    """
    return MediaInspector(config).inspect_sync(input_file)
