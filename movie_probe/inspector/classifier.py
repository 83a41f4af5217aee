"""
Validity classification of probe results.

ffprobe has no structured signal for "found the container but cannot handle
the codec"; it only says so on stderr. The markers below match its current
wording, case-sensitively, and can be replaced through ProbeConfig.
"""

from typing import Iterable, Optional

from ..config import DEFAULT_UNSUPPORTED_MARKERS
from ..models import RawReport


def find_unsupported_marker(
    stderr_text: str, markers: Iterable[str] = DEFAULT_UNSUPPORTED_MARKERS
) -> Optional[str]:
    """Return the first marker contained in stderr, if any."""
    for marker in markers:
        if marker in stderr_text:
            return marker
    return None


def is_valid(
    report: RawReport,
    stderr_text: str,
    markers: Iterable[str] = DEFAULT_UNSUPPORTED_MARKERS,
) -> bool:
    """
    Decide whether the probed media is usable.

    Args:
        report: Decoded ffprobe report
        stderr_text: ffprobe stderr as text
        markers: Substrings of stderr that mark the media unsupported

    Returns:
        False if ffprobe reported an error or stderr contains a marker
    """
    if report.has_error:
        return False
    return find_unsupported_marker(stderr_text, markers) is None
