"""
Shared fixtures for movie probe tests.
"""

import json
from typing import Any

import pytest


@pytest.fixture
def sample_ffprobe_output() -> dict[str, Any]:
    """Sample ffprobe JSON output for a file with one video and one audio stream."""
    return {
        "streams": [
            {
                "index": 0,
                "codec_name": "h264",
                "codec_long_name": "H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10",
                "profile": "High",
                "codec_type": "video",
                "codec_tag_string": "avc1",
                "codec_tag": "0x31637661",
                "width": 1920,
                "height": 1080,
                "sample_aspect_ratio": "1:1",
                "display_aspect_ratio": "16:9",
                "pix_fmt": "yuv420p",
                "r_frame_rate": "30000/1001",
                "avg_frame_rate": "30000/1001",
                "bit_rate": "600000",
                "tags": {"rotate": "90", "language": "und"},
            },
            {
                "index": 1,
                "codec_name": "aac",
                "codec_long_name": "AAC (Advanced Audio Coding)",
                "profile": "LC",
                "codec_type": "audio",
                "codec_tag_string": "mp4a",
                "codec_tag": "0x6134706d",
                "sample_fmt": "fltp",
                "sample_rate": "48000",
                "channels": 2,
                "channel_layout": "stereo",
                "bit_rate": "128000",
                "tags": {"language": "eng"},
            },
        ],
        "format": {
            "filename": "/path/to/video.mp4",
            "nb_streams": 2,
            "format_name": "mov,mp4,m4a,3gp,3g2,mj2",
            "format_long_name": "QuickTime / MOV",
            "start_time": "0.000000",
            "duration": "120.500000",
            "size": "10485760",
            "bit_rate": "696320",
            "probe_score": 100,
            "tags": {
                "major_brand": "isom",
                "creation_time": "2015-03-12T10:20:30.000000Z",
            },
        },
    }


@pytest.fixture
def sample_stdout(sample_ffprobe_output) -> bytes:
    """The sample report as ffprobe would print it."""
    return json.dumps(sample_ffprobe_output, indent=4).encode("utf-8")


@pytest.fixture
def error_stdout() -> bytes:
    """ffprobe output for a file it cannot read."""
    return json.dumps(
        {
            "error": {
                "code": -1094995529,
                "string": "Invalid data found when processing input",
            }
        }
    ).encode("utf-8")


@pytest.fixture
def media_file(tmp_path):
    """An existing file for the inspector to look at."""
    path = tmp_path / "movie.mp4"
    path.write_bytes(b"\x00" * 64)
    return path
