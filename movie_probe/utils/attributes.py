"""
Derived media attributes.

Pure functions that turn raw ffprobe stream fields into the values the
model exposes: dimensions, frame rate, aspect ratios, channel layout,
rotation and summary lines. None stands for "undefined" throughout.
"""

import math
import re
from datetime import datetime
from fractions import Fraction
from typing import Any, Mapping, Optional, Union

from movie_probe.utils.logger import get_logger

logger = get_logger(__name__)

_INT_PREFIX = re.compile(r"^\s*([-+]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")

# Used only when ffprobe omits channel_layout (old ffprobe releases).
# 1 channel maps to "stereo" on purpose, see DESIGN.md.
LEGACY_CHANNEL_LAYOUTS: dict[int, str] = {
    1: "stereo",
    2: "stereo",
    6: "5.1",
}

Number = Union[int, float, str, None]


def to_int(value: Number) -> int:
    """
    Convert an ffprobe value to int, leniently.

    Uses the leading integer of a string ("128000", "90", "-90"); anything
    without one, including None and "N/A", gives 0.
    """
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else 0
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else 0


def to_float(value: Number) -> float:
    """Convert an ffprobe value to float, leniently (see to_int)."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = _FLOAT_PREFIX.match(value)
    return float(match.group(1)) if match else 0.0


def dimensions(
    width: Optional[int], height: Optional[int]
) -> tuple[Optional[int], Optional[int]]:
    """Return (width, height) when both are known, otherwise (None, None)."""
    if width is None or height is None:
        return None, None
    return width, height


def resolution(width: Optional[int], height: Optional[int]) -> Optional[str]:
    """Format dimensions as "WxH"."""
    if width is None or height is None:
        return None
    return f"{width}x{height}"


def parse_frame_rate(raw: Optional[str]) -> Optional[Fraction]:
    """
    Parse an ffprobe "num/den" rate into an exact fraction.

    "0/0" is what ffprobe reports when the rate is unknown; it yields None,
    as do missing and unparsable values.
    """
    if raw is None or raw == "0/0":
        return None
    try:
        return Fraction(raw.strip())
    except (ValueError, ZeroDivisionError):
        logger.debug(f"Ignoring unparsable frame rate: {raw!r}")
        return None


def aspect_from_ratio(raw: Optional[str]) -> Optional[float]:
    """Parse a "W:H" ratio; None when absent, zero or not finite."""
    if not raw:
        return None
    w, _, h = raw.partition(":")
    numerator, denominator = to_float(w), to_float(h)
    if denominator == 0:
        return None
    aspect = numerator / denominator
    if aspect == 0 or not math.isfinite(aspect):
        return None
    return aspect


def aspect_from_dimensions(width: Optional[int], height: Optional[int]) -> Optional[float]:
    """Width over height; None when either is missing or the ratio is not finite."""
    if width is None or height is None or height == 0:
        return None
    aspect = width / height
    return aspect if math.isfinite(aspect) else None


def calculated_aspect_ratio(
    dar: Optional[str], width: Optional[int], height: Optional[int]
) -> Optional[float]:
    """Display aspect ratio, falling back to the frame dimensions."""
    aspect = aspect_from_ratio(dar)
    if aspect is None:
        aspect = aspect_from_dimensions(width, height)
    return aspect


def calculated_pixel_aspect_ratio(sar: Optional[str]) -> float:
    """Sample aspect ratio, 1 for square pixels when unknown."""
    aspect = aspect_from_ratio(sar)
    return 1.0 if aspect is None else aspect


def channel_layout(raw: Optional[str], channels: Optional[int]) -> str:
    """Reported channel layout (even empty), or a guess from the channel count."""
    if raw is not None:
        return raw
    return LEGACY_CHANNEL_LAYOUTS.get(channels or 0, "unknown")


def rotation(tags: Mapping[str, Any]) -> Optional[int]:
    """Rotation in degrees from the stream "rotate" tag."""
    if "rotate" not in tags:
        return None
    return to_int(tags["rotate"])


def is_portrait(width: Optional[int], height: Optional[int]) -> bool:
    return width is not None and height is not None and height > width


def is_landscape(width: Optional[int], height: Optional[int]) -> bool:
    return width is not None and height is not None and width > height


def parse_creation_time(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse the container creation_time tag.

    ffprobe prints ISO-8601 timestamps such as "2015-03-12T10:20:30.000000Z".
    """
    if not raw:
        return None
    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning(f"Unparsable creation_time tag: {raw!r}")
        return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def video_summary(
    codec: Optional[str],
    profile: Optional[str],
    codec_tag_string: Optional[str],
    codec_tag: Optional[str],
    colorspace: Optional[str],
    frame_size: Optional[str],
    sar: Optional[str],
    dar: Optional[str],
) -> str:
    """One-line description of a video stream, in ffmpeg's own wording."""
    return (
        f"{_text(codec)} ({_text(profile)}) ({_text(codec_tag_string)} / {_text(codec_tag)}), "
        f"{_text(colorspace)}, {_text(frame_size)} [SAR {_text(sar)} DAR {_text(dar)}]"
    )


def audio_summary(
    codec: Optional[str],
    codec_tag_string: Optional[str],
    codec_tag: Optional[str],
    sample_rate: int,
    layout: str,
    sample_fmt: Optional[str],
    bitrate: int,
) -> str:
    """One-line description of an audio stream."""
    return (
        f"{_text(codec)} ({_text(codec_tag_string)} / {_text(codec_tag)}), "
        f"{sample_rate} Hz, {layout}, {_text(sample_fmt)}, {bitrate} bit/s"
    )
