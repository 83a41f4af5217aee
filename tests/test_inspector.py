"""
Tests for media inspector module.
"""

import json
from datetime import datetime, timezone
from fractions import Fraction
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from movie_probe.config import ProbeConfig
from movie_probe.inspector import MediaInspector, probe, probe_async
from movie_probe.models import Movie
from movie_probe.utils import (
    MalformedReportError,
    MediaInspectionError,
    MediaNotFoundError,
    ProbeExecutionError,
)


@pytest.fixture
def inspector():
    """Create media inspector instance."""
    return MediaInspector()


def _mock_ffprobe(stdout: bytes, stderr: bytes = b"") -> AsyncMock:
    return AsyncMock(return_value=(stdout, stderr))


class TestMediaInspector:
    """Test MediaInspector class."""

    def test_initialization(self):
        """Test inspector initialization."""
        inspector = MediaInspector()
        assert inspector.ffprobe_path == "ffprobe"

        inspector = MediaInspector(ffprobe_path="/usr/bin/ffprobe")
        assert inspector.ffprobe_path == "/usr/bin/ffprobe"

    def test_initialization_from_config(self):
        """Test ffprobe path taken from config unless overridden."""
        config = ProbeConfig(ffprobe_path="/opt/ffmpeg/bin/ffprobe")

        assert MediaInspector(config).ffprobe_path == "/opt/ffmpeg/bin/ffprobe"
        assert MediaInspector(config, ffprobe_path="probe").ffprobe_path == "probe"

    @pytest.mark.asyncio
    async def test_inspect_keeps_config(self, media_file, sample_stdout, error_stdout):
        """Test probed movies remember the binaries they were probed with."""
        config = ProbeConfig(ffmpeg_path="/opt/bin/ffmpeg")
        inspector = MediaInspector(config, ffprobe_path="/opt/bin/ffprobe")

        for stdout in (sample_stdout, error_stdout):
            with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(stdout)):
                movie = await inspector.inspect(media_file)

            assert movie.config.ffprobe_path == "/opt/bin/ffprobe"
            assert movie.config.ffmpeg_path == "/opt/bin/ffmpeg"

        assert config.ffprobe_path == "ffprobe"

    @pytest.mark.asyncio
    async def test_inspect_nonexistent_file(self, inspector):
        """Test missing file fails before ffprobe is started."""
        with patch("asyncio.create_subprocess_exec") as mock_exec:
            with pytest.raises(MediaNotFoundError, match="File not found") as exc_info:
                await inspector.inspect(Path("/nonexistent/file.mp4"))

        mock_exec.assert_not_called()
        assert exc_info.value.path == Path("/nonexistent/file.mp4")
        assert isinstance(exc_info.value, FileNotFoundError)
        assert isinstance(exc_info.value, MediaInspectionError)

    @pytest.mark.asyncio
    async def test_inspect_success(self, inspector, media_file, sample_stdout):
        """Test successful media inspection."""
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(sample_stdout)):
            movie = await inspector.inspect(media_file)

        assert isinstance(movie, Movie)
        assert movie.valid is True
        assert movie.path == media_file
        assert movie.container == "mov,mp4,m4a,3gp,3g2,mj2"
        assert movie.duration == 120.5
        assert movie.time == 0.0
        assert movie.size == 10485760
        assert movie.bitrate == 696320
        assert movie.creation_time == datetime(2015, 3, 12, 10, 20, 30, tzinfo=timezone.utc)
        assert movie.error_message is None

        # Video
        assert movie.has_video
        assert movie.video_codec == "h264"
        assert movie.colorspace == "yuv420p"
        assert movie.width == 1920
        assert movie.height == 1080
        assert movie.resolution == "1920x1080"
        assert movie.video_bitrate == 600000
        assert movie.frame_rate == Fraction(30000, 1001)
        assert movie.sar == "1:1"
        assert movie.dar == "16:9"
        assert movie.rotation == 90
        assert movie.calculated_aspect_ratio == pytest.approx(16 / 9)
        assert movie.calculated_pixel_aspect_ratio == 1.0
        assert movie.landscape
        assert not movie.portrait
        assert movie.video_stream == (
            "h264 (High) (avc1 / 0x31637661), yuv420p, 1920x1080 [SAR 1:1 DAR 16:9]"
        )

        # Audio
        assert movie.has_audio
        assert movie.audio_codec == "aac"
        assert movie.audio_channels == 2
        assert movie.audio_sample_rate == 48000
        assert movie.audio_bitrate == 128000
        assert movie.audio_channel_layout == "stereo"
        assert movie.audio_stream == (
            "aac (mp4a / 0x6134706d), 48000 Hz, stereo, fltp, 128000 bit/s"
        )

    @pytest.mark.asyncio
    async def test_inspect_accepts_string_path(self, inspector, media_file, sample_stdout):
        """Test string paths are converted."""
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(sample_stdout)) as mock_run:
            movie = await inspector.inspect(str(media_file))

        mock_run.assert_awaited_once_with(media_file)
        assert movie.path == media_file

    @pytest.mark.asyncio
    async def test_inspect_probe_error(self, inspector, media_file, error_stdout):
        """Test a report with an error section gives an invalid movie."""
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(error_stdout)):
            movie = await inspector.inspect(media_file)

        assert movie.valid is False
        assert movie.duration == 0.0
        assert movie.size == 64
        assert movie.error_message == "Invalid data found when processing input"
        assert not movie.has_video
        assert not movie.has_audio
        assert movie.container is None

    @pytest.mark.asyncio
    async def test_inspect_unsupported_codec(self, inspector, media_file, sample_stdout):
        """Test unsupported-media markers on stderr invalidate the movie."""
        stderr = b"[mov,mp4 @ 0x7f] Unsupported codec with id 0 for input stream 1\n"

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(sample_stdout, stderr)):
            movie = await inspector.inspect(media_file)

        assert movie.valid is False
        # The report itself is still used
        assert movie.duration == 120.5
        assert movie.video_codec == "h264"

    @pytest.mark.asyncio
    async def test_inspect_harmless_stderr(self, inspector, media_file, sample_stdout):
        """Test unrelated warnings on stderr leave the movie valid."""
        stderr = b"[h264 @ 0x7f] mmco: unref short failure\n"

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(sample_stdout, stderr)):
            movie = await inspector.inspect(media_file)

        assert movie.valid is True

    @pytest.mark.asyncio
    async def test_inspect_custom_markers(self, media_file, sample_stdout):
        """Test markers come from config."""
        config = ProbeConfig(unsupported_markers=("DRM protected",))
        inspector = MediaInspector(config)

        with patch.object(
            inspector,
            "_run_ffprobe",
            _mock_ffprobe(sample_stdout, b"Stream #0: DRM protected\nUnsupported codec"),
        ):
            movie = await inspector.inspect(media_file)
        assert movie.valid is False

        stderr = b"Unsupported codec with id 0"
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(sample_stdout, stderr)):
            movie = await inspector.inspect(media_file)
        assert movie.valid is True

    @pytest.mark.asyncio
    async def test_inspect_latin1_output(self, inspector, media_file, sample_ffprobe_output):
        """Test output that is not valid UTF-8 is decoded as ISO-8859-1."""
        sample_ffprobe_output["format"]["tags"]["title"] = "Café"
        stdout = json.dumps(sample_ffprobe_output, ensure_ascii=False).encode("iso-8859-1")

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(stdout)):
            movie = await inspector.inspect(media_file)

        assert movie.valid is True
        assert movie.duration == 120.5

    @pytest.mark.asyncio
    async def test_inspect_malformed_output(self, inspector, media_file):
        """Test output that is not JSON raises."""
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(b"not json")):
            with pytest.raises(MalformedReportError, match="Failed to parse"):
                await inspector.inspect(media_file)

    @pytest.mark.asyncio
    async def test_inspect_empty_output(self, inspector, media_file):
        """Test empty output raises."""
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(b"")):
            with pytest.raises(MalformedReportError):
                await inspector.inspect(media_file)

    @pytest.mark.asyncio
    async def test_inspect_first_streams_only(self, inspector, media_file, sample_ffprobe_output):
        """Test only the first video and audio stream are described."""
        streams = sample_ffprobe_output["streams"]
        streams.insert(0, {"index": 9, "codec_type": "subtitle", "codec_name": "subrip"})
        streams.append({"index": 2, "codec_type": "video", "codec_name": "mjpeg"})
        streams.append({"index": 3, "codec_type": "audio", "codec_name": "ac3", "channels": 6})
        stdout = json.dumps(sample_ffprobe_output).encode()

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(stdout)):
            movie = await inspector.inspect(media_file)

        assert movie.video_codec == "h264"
        assert movie.audio_codec == "aac"
        assert movie.audio_channels == 2

    @pytest.mark.asyncio
    async def test_inspect_audio_only(self, inspector, media_file, sample_ffprobe_output):
        """Test audio-only media."""
        sample_ffprobe_output["streams"] = [sample_ffprobe_output["streams"][1]]
        stdout = json.dumps(sample_ffprobe_output).encode()

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(stdout)):
            movie = await inspector.inspect(media_file)

        assert movie.valid is True
        assert not movie.has_video
        assert movie.width is None
        assert movie.resolution is None
        assert movie.calculated_aspect_ratio is None
        assert movie.calculated_pixel_aspect_ratio == 1.0
        assert movie.frame_rate is None
        assert movie.audio_codec == "aac"

    @pytest.mark.asyncio
    async def test_inspect_sparse_video_stream(self, inspector, media_file):
        """Test a video stream with most fields missing."""
        report = {
            "format": {"format_name": "avi"},
            "streams": [
                {
                    "index": 0,
                    "codec_type": "video",
                    "codec_name": "mpeg4",
                    "width": 640,
                    "avg_frame_rate": "0/0",
                }
            ],
        }

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(json.dumps(report).encode())):
            movie = await inspector.inspect(media_file)

        assert movie.valid is True
        assert movie.duration == 0.0
        assert movie.size == 64
        assert movie.bitrate == 0
        assert movie.creation_time is None
        assert movie.width is None
        assert movie.height is None
        assert movie.resolution is None
        assert movie.frame_rate is None
        assert movie.rotation is None
        assert movie.video_bitrate == 0
        assert movie.calculated_aspect_ratio is None
        assert movie.calculated_pixel_aspect_ratio == 1.0

    @pytest.mark.asyncio
    async def test_inspect_missing_channel_layout(self, inspector, media_file):
        """Test channel layout guessed from channel count on old ffprobe output."""
        report = {
            "format": {"format_name": "ac3", "duration": "10.0"},
            "streams": [{"codec_type": "audio", "codec_name": "ac3", "channels": 6}],
        }

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(json.dumps(report).encode())):
            movie = await inspector.inspect(media_file)

        assert movie.audio.channel_layout is None
        assert movie.audio_channel_layout == "5.1"
        assert movie.audio_sample_rate == 0


    @pytest.mark.asyncio
    async def test_inspect_empty_channel_layout(self, inspector, media_file):
        """Test an empty reported layout is kept rather than guessed."""
        report = {
            "format": {"format_name": "wav"},
            "streams": [{"codec_type": "audio", "channels": 2, "channel_layout": ""}],
        }

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(json.dumps(report).encode())):
            movie = await inspector.inspect(media_file)

        assert movie.audio.channel_layout == ""
        assert movie.audio_channel_layout == ""

    @pytest.mark.asyncio
    async def test_inspect_unexpected_value_types(self, inspector, media_file):
        """Test odd values in a well-formed report never raise."""
        report = {
            "format": {"format_name": "mpegts", "duration": "N/A", "tags": None},
            "streams": [
                {"codec_type": "video", "codec_name": "h264", "width": "N/A", "height": 720},
                {"codec_type": "audio", "channels": "N/A", "sample_rate": None},
            ],
        }

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(json.dumps(report).encode())):
            movie = await inspector.inspect(media_file)

        assert movie.valid is True
        assert movie.duration == 0.0
        assert movie.width is None
        assert movie.height is None
        assert movie.resolution is None
        assert movie.audio_channels == 0
        assert movie.audio_channel_layout == "unknown"
    @pytest.mark.asyncio
    async def test_inspect_negative_duration_clamped(self, inspector, media_file):
        """Test durations are never negative."""
        report = {"format": {"duration": "-1.5"}, "streams": []}

        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(json.dumps(report).encode())):
            movie = await inspector.inspect(media_file)

        assert movie.duration == 0.0

    @pytest.mark.asyncio
    async def test_run_ffprobe_success(self, inspector, sample_stdout):
        """Test _run_ffprobe returns raw output."""
        mock_process = AsyncMock()
        mock_process.stdout.read = AsyncMock(return_value=sample_stdout)
        mock_process.stderr.read = AsyncMock(return_value=b"warning")
        mock_process.wait = AsyncMock(return_value=0)

        with patch("asyncio.create_subprocess_exec", return_value=mock_process) as mock_exec:
            stdout, stderr = await inspector._run_ffprobe(Path("/test.mp4"))

        assert stdout == sample_stdout
        assert stderr == b"warning"
        args = mock_exec.call_args[0]
        assert args[0] == "ffprobe"
        assert "/test.mp4" in args
        assert "-show_error" in args

    @pytest.mark.asyncio
    async def test_run_ffprobe_missing_binary(self, media_file):
        """Test a missing ffprobe executable raises."""
        inspector = MediaInspector(ffprobe_path="/nonexistent/ffprobe")

        with patch(
            "asyncio.create_subprocess_exec",
            side_effect=FileNotFoundError("No such file or directory"),
        ):
            with pytest.raises(ProbeExecutionError, match="Failed to execute"):
                await inspector.inspect(media_file)

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_not_an_error(self, inspector, media_file, error_stdout):
        """Test ffprobe's exit status is ignored; the report decides."""
        mock_process = AsyncMock()
        mock_process.stdout.read = AsyncMock(return_value=error_stdout)
        mock_process.stderr.read = AsyncMock(return_value=b"")
        mock_process.wait = AsyncMock(return_value=1)

        with patch("asyncio.create_subprocess_exec", return_value=mock_process):
            movie = await inspector.inspect(media_file)

        assert movie.valid is False
        assert movie.error_message == "Invalid data found when processing input"

    def test_inspect_sync(self, inspector, media_file, sample_stdout):
        """Test blocking inspection."""
        with patch.object(inspector, "_run_ffprobe", _mock_ffprobe(sample_stdout)):
            movie = inspector.inspect_sync(media_file)

        assert movie.valid is True
        assert movie.video_codec == "h264"


class TestProbeFunctions:
    """Test module-level probe helpers."""

    def test_probe(self, media_file, sample_stdout):
        """Test blocking probe."""
        with patch.object(MediaInspector, "_run_ffprobe", _mock_ffprobe(sample_stdout)):
            movie = probe(media_file)

        assert movie.valid is True
        assert movie.resolution == "1920x1080"

    @pytest.mark.asyncio
    async def test_probe_async(self, media_file, sample_stdout):
        """Test async probe with custom config."""
        config = ProbeConfig(ffprobe_path="/usr/local/bin/ffprobe")

        with patch.object(MediaInspector, "_run_ffprobe", _mock_ffprobe(sample_stdout)):
            movie = await probe_async(media_file, config)

        assert movie.duration == 120.5

    def test_probe_missing_file(self, tmp_path):
        """Test blocking probe of a missing file."""
        with pytest.raises(MediaNotFoundError):
            probe(tmp_path / "missing.mkv")

    def test_movie_is_immutable(self, media_file, sample_stdout):
        """Test probed movies cannot be changed."""
        with patch.object(MediaInspector, "_run_ffprobe", _mock_ffprobe(sample_stdout)):
            movie = probe(media_file)

        with pytest.raises(AttributeError):
            movie.duration = 1.0  # type: ignore[misc]
