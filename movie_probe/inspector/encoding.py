"""
Text normalization for ffprobe output.

ffprobe copies tag values (titles, filenames) into its report byte for byte,
so a file tagged in a legacy charset yields output that is not valid UTF-8.
"""

from ..utils import get_logger

logger = get_logger(__name__)

DEFAULT_ENCODING = "utf-8"
FALLBACK_ENCODING = "iso-8859-1"


def is_valid_text(data: bytes, encoding: str = DEFAULT_ENCODING) -> bool:
    """
    Check whether bytes decode cleanly in the given encoding.

    Args:
        data: Raw bytes
        encoding: Encoding to check against

    Returns:
        True if the bytes are valid text in ``encoding``
    """
    try:
        data.decode(encoding)
    except UnicodeDecodeError:
        return False
    return True


def normalize_output(
    data: bytes,
    encoding: str = DEFAULT_ENCODING,
    fallback: str = FALLBACK_ENCODING,
) -> str:
    """
    Decode ffprobe stdout, falling back to a single-byte charset.

    Never raises: with the ISO-8859-1 default every byte sequence decodes.

    Args:
        data: Raw stdout bytes
        encoding: Expected encoding
        fallback: Encoding used when ``data`` is not valid in ``encoding``

    Returns:
        Decoded text
    """
    if is_valid_text(data, encoding):
        return data.decode(encoding)

    logger.debug(f"ffprobe output is not valid {encoding}, decoding as {fallback}")
    return data.decode(fallback, errors="replace")


def decode_diagnostics(data: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    """Decode stderr for marker matching; undecodable bytes are replaced."""
    return data.decode(encoding, errors="replace")
