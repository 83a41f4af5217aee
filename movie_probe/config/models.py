"""
Configuration models using Pydantic.

This module defines the configuration structure for movie probe.
"""

from pydantic import BaseModel, Field, field_validator

DEFAULT_UNSUPPORTED_MARKERS: tuple[str, ...] = (
    "Unsupported codec",
    "is not supported",
    "could not find codec parameters",
)


class ProbeConfig(BaseModel):
    """Probe and encoder configuration."""

    ffprobe_path: str = Field(default="ffprobe", description="Path to ffprobe executable")
    ffmpeg_path: str = Field(default="ffmpeg", description="Path to ffmpeg executable")
    text_encoding: str = Field(default="utf-8", description="Expected encoding of ffprobe output")
    fallback_encoding: str = Field(
        default="iso-8859-1",
        description="Encoding used when ffprobe output is not valid in text_encoding",
    )
    unsupported_markers: tuple[str, ...] = Field(
        default=DEFAULT_UNSUPPORTED_MARKERS,
        description="Case-sensitive stderr substrings that mark media as unsupported",
    )
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("text_encoding", "fallback_encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate that the codec is known to Python."""
        import codecs

        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"unknown encoding: {v}")
        return v

    @field_validator("unsupported_markers")
    @classmethod
    def validate_markers(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject empty markers, which would match every stderr."""
        if any(not marker for marker in v):
            raise ValueError("unsupported_markers must not contain empty strings")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @classmethod
    def create_default(cls) -> "ProbeConfig":
        """Create default configuration."""
        return cls()
