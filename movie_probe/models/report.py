"""
Schema for the JSON report printed by ffprobe.

ffprobe prints most numeric values as strings (``"duration": "120.500000"``)
and omits keys it has no value for. The schema keeps those values as optional
strings; conversion happens when attributes are derived.

Any JSON object validates. Values of an unexpected type ("N/A" widths,
null sections, list tags) read as absent instead of failing the report.
"""

import math
import re
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def _lenient_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _lenient_int(value: Any) -> Optional[int]:
    """Leading integer of a number or numeric string, None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def _mapping_or_empty(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


def _objects_only(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, (dict, BaseModel))]


def _error_section(value: Any) -> Any:
    # ffprobe always prints an object; anything else still marks a failed probe
    if value is None or isinstance(value, (dict, BaseModel)):
        return value
    return {"string": _lenient_str(value)}


LenientStr = Annotated[Optional[str], BeforeValidator(_lenient_str)]
LenientInt = Annotated[Optional[int], BeforeValidator(_lenient_int)]
Tags = Annotated[dict[str, Any], BeforeValidator(_mapping_or_empty)]


class ReportSection(BaseModel):
    """Base for report sections: unknown keys are ignored, numbers become strings."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, frozen=True)


class ProbeErrorSection(ReportSection):
    """Top-level ``error`` object emitted with ``-show_error``."""

    code: LenientInt = None
    string: LenientStr = None


class FormatSection(ReportSection):
    """Container-level fields (``format``)."""

    format_name: LenientStr = None
    duration: LenientStr = None
    start_time: LenientStr = None
    bit_rate: LenientStr = None
    size: LenientStr = None
    tags: Tags = Field(default_factory=dict)


class StreamDescriptor(ReportSection):
    """One entry of ``streams``."""

    index: LenientInt = None
    codec_type: LenientStr = None
    codec_name: LenientStr = None
    codec_tag_string: LenientStr = None
    codec_tag: LenientStr = None
    profile: LenientStr = None
    bit_rate: LenientStr = None
    tags: Tags = Field(default_factory=dict)

    # Video
    pix_fmt: LenientStr = None
    width: LenientInt = None
    height: LenientInt = None
    sample_aspect_ratio: LenientStr = None
    display_aspect_ratio: LenientStr = None
    avg_frame_rate: LenientStr = None

    # Audio
    channels: LenientInt = None
    sample_rate: LenientStr = None
    channel_layout: LenientStr = None
    sample_fmt: LenientStr = None


class RawReport(ReportSection):
    """Decoded ffprobe output."""

    error: Annotated[Optional[ProbeErrorSection], BeforeValidator(_error_section)] = None
    format: Annotated[FormatSection, BeforeValidator(_mapping_or_empty)] = Field(
        default_factory=FormatSection
    )
    streams: Annotated[list[StreamDescriptor], BeforeValidator(_objects_only)] = Field(
        default_factory=list
    )

    @property
    def has_error(self) -> bool:
        """Whether ffprobe reported a probe-level failure."""
        return self.error is not None
