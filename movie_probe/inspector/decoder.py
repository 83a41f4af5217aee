"""
Decoding of ffprobe JSON reports.

Only syntactic problems are errors here. A report that is well formed but
describes a failed probe decodes fine and is judged by the classifier.
"""

import json
from typing import Optional

from ..models import RawReport, StreamDescriptor
from ..utils import MalformedReportError, get_logger

logger = get_logger(__name__)


def decode_report(text: str) -> RawReport:
    """
    Decode normalized ffprobe output into a typed report.

    Args:
        text: ffprobe stdout as text

    Returns:
        RawReport

    Raises:
        MalformedReportError: If the text is not JSON or not a JSON object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedReportError(f"Failed to parse FFprobe output: {e}", output=text)

    if not isinstance(data, dict):
        raise MalformedReportError(
            f"FFprobe output is not a JSON object: {type(data).__name__}", output=text
        )

    report = RawReport.model_validate(data)

    logger.debug(
        f"Decoded report: {len(report.streams)} stream(s), "
        f"error={'yes' if report.has_error else 'no'}"
    )
    return report


def first_stream(report: RawReport, codec_type: str) -> Optional[StreamDescriptor]:
    """
    Select the first stream of a given kind.

    Further streams of the same kind are ignored.

    Args:
        report: Decoded report
        codec_type: "video", "audio", ...

    Returns:
        First matching stream or None
    """
    for stream in report.streams:
        if stream.codec_type == codec_type:
            return stream
    return None
