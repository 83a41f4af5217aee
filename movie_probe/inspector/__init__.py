"""Media inspection using FFprobe."""

from movie_probe.inspector.analyzer import MediaInspector, probe, probe_async
from movie_probe.inspector.classifier import find_unsupported_marker, is_valid
from movie_probe.inspector.decoder import decode_report, first_stream
from movie_probe.inspector.encoding import is_valid_text, normalize_output

__all__ = [
    "MediaInspector",
    "decode_report",
    "find_unsupported_marker",
    "first_stream",
    "is_valid",
    "is_valid_text",
    "normalize_output",
    "probe",
    "probe_async",
]
