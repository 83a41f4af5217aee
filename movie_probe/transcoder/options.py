"""
Encoding and runner options.

EncodingOptions maps friendly option names to ffmpeg arguments;
RunnerOptions controls how a job is executed.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EncodingOptions(BaseModel):
    """Options for one encode or screenshot."""

    model_config = ConfigDict(frozen=True)

    video_codec: Optional[str] = Field(default=None, description="Video codec (e.g., libx264)")
    audio_codec: Optional[str] = Field(default=None, description="Audio codec (e.g., aac)")
    video_bitrate: Optional[str] = Field(default=None, description="Video bitrate (e.g., 2000k)")
    audio_bitrate: Optional[str] = Field(default=None, description="Audio bitrate (e.g., 128k)")
    resolution: Optional[str] = Field(default=None, description="Output size as WxH")
    frame_rate: Optional[Union[int, float, str]] = Field(
        default=None, description="Output frame rate (e.g., 25 or 30000/1001)"
    )
    audio_channels: Optional[int] = Field(default=None, ge=1, le=8)
    audio_sample_rate: Optional[int] = Field(default=None, ge=1)
    seek_time: Optional[float] = Field(default=None, ge=0, description="Start offset in seconds")
    duration: Optional[float] = Field(default=None, gt=0, description="Output length in seconds")
    screenshot: bool = Field(default=False, description="Write a single frame as an image")
    quality: Optional[int] = Field(
        default=None, ge=1, le=31, description="Image quality for screenshots (-q:v)"
    )
    custom: list[str] = Field(default_factory=list, description="Extra raw output arguments")

    @field_validator("resolution")
    @classmethod
    def validate_resolution(cls, v: Optional[str]) -> Optional[str]:
        """Validate WxH resolution."""
        if v is None:
            return v
        width, sep, height = v.partition("x")
        if not sep or not width.isdigit() or not height.isdigit():
            raise ValueError("resolution must look like 1280x720")
        return v

    def input_args(self) -> list[str]:
        """Arguments placed before the input file."""
        # Seeking before -i is fast and exact enough for a single frame
        if self.screenshot and self.seek_time is not None:
            return ["-ss", str(self.seek_time)]
        return []

    def output_args(self) -> list[str]:
        """Arguments placed before the output file."""
        args: list[str] = []

        if self.seek_time is not None and not self.screenshot:
            args.extend(["-ss", str(self.seek_time)])
        if self.duration is not None:
            args.extend(["-t", str(self.duration)])
        if self.video_codec:
            args.extend(["-c:v", self.video_codec])
        if self.video_bitrate:
            args.extend(["-b:v", self.video_bitrate])
        if self.frame_rate is not None:
            args.extend(["-r", str(self.frame_rate)])
        if self.resolution:
            args.extend(["-s", self.resolution])
        if self.audio_codec:
            args.extend(["-c:a", self.audio_codec])
        if self.audio_bitrate:
            args.extend(["-b:a", self.audio_bitrate])
        if self.audio_sample_rate is not None:
            args.extend(["-ar", str(self.audio_sample_rate)])
        if self.audio_channels is not None:
            args.extend(["-ac", str(self.audio_channels)])
        if self.screenshot:
            args.extend(["-vframes", "1", "-f", "image2"])
            if self.quality is not None:
                args.extend(["-q:v", str(self.quality)])

        args.extend(self.custom)
        return args


class RunnerOptions(BaseModel):
    """How a job is executed."""

    model_config = ConfigDict(frozen=True)

    timeout: Optional[float] = Field(
        default=None, gt=0, description="Maximum encoding time in seconds (None = no timeout)"
    )
    validate_output: bool = Field(
        default=True, description="Probe the output and fail if it is not a valid media file"
    )
