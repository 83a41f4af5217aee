"""
Async subprocess wrappers for FFprobe and FFmpeg execution.

This module runs the external tools: a raw capture for ffprobe, and an
FFmpeg process wrapper with progress tracking and timeout handling.
"""

import asyncio
import codecs
import re
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

from ..utils import FFmpegError, ProbeExecutionError, ProcessTimeoutError, get_logger

logger = get_logger(__name__)


def build_probe_command(ffprobe_path: str, input_file: Path) -> list[str]:
    """
    Build the ffprobe command for a full JSON report.

    Args:
        ffprobe_path: Path to ffprobe executable
        input_file: Media file to probe

    Returns:
        Command as list of arguments
    """
    return [
        ffprobe_path,
        "-i",
        str(input_file),
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        "-show_error",
    ]


async def capture_output(command: list[str]) -> tuple[bytes, bytes]:
    """
    Run a command and capture its output without interpreting it.

    stdout and stderr are drained by two concurrent readers before waiting
    for exit, so a full pipe on one side cannot stall the child. The exit
    status is not checked.

    Args:
        command: Command as list of arguments

    Returns:
        Tuple of (stdout, stderr) as bytes

    Raises:
        ProbeExecutionError: If the executable cannot be started
    """
    logger.debug(f"Running: {' '.join(command)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProbeExecutionError(f"Failed to execute {command[0]}: {e}") from e

    async def _drain(stream: Optional[asyncio.StreamReader]) -> bytes:
        return await stream.read() if stream else b""

    stdout, stderr = await asyncio.gather(_drain(process.stdout), _drain(process.stderr))
    returncode = await process.wait()
    logger.debug(f"{command[0]} exited with code {returncode}")

    return stdout, stderr


async def run_ffprobe_async(input_file: Path, ffprobe_path: str = "ffprobe") -> tuple[bytes, bytes]:
    """
    Run FFprobe on a media file.

    Args:
        input_file: Path to media file
        ffprobe_path: Path to ffprobe executable

    Returns:
        Tuple of (stdout, stderr) as bytes
    """
    return await capture_output(build_probe_command(ffprobe_path, input_file))


class AsyncFFmpegProcess:
    """
    Async wrapper for FFmpeg subprocess execution.

    Provides non-blocking process execution with:
    - Real-time stderr streaming
    - Progress parsing and callbacks
    - Timeout handling
    - Proper cleanup on errors
    """

    # Regex patterns for parsing FFmpeg output
    DURATION_PATTERN = re.compile(r"Duration: (\d{2}):(\d{2}):(\d{2}\.\d{2})")
    PROGRESS_PATTERN = re.compile(r"time=(\d{2}):(\d{2}):(\d{2}\.\d{2})")
    FPS_PATTERN = re.compile(r"fps=\s*(\d+\.?\d*)")
    SPEED_PATTERN = re.compile(r"speed=\s*(\d+\.?\d*)x")
    LINE_SEPARATOR = re.compile(r"[\r\n]")

    STDERR_CHUNK_SIZE = 4096

    def __init__(
        self,
        command: list[str],
        timeout: Optional[float] = None,
        progress_callback: Optional[Callable[[float, Optional[float]], None]] = None,
        duration: Optional[float] = None,
    ):
        """
        Initialize async FFmpeg process.

        Args:
            command: FFmpeg command as list of arguments
            timeout: Maximum execution time in seconds (None = no timeout)
            progress_callback: Callback function for progress updates (progress, speed)
                              - progress: float (0.0 to 1.0)
                              - speed: Optional[float] (fps or speed multiplier)
            duration: Known input duration in seconds; parsed from stderr if None
        """
        self.command = command
        self.timeout = timeout
        self.progress_callback = progress_callback
        self._process: Optional[asyncio.subprocess.Process] = None
        self._duration: Optional[float] = duration or None
        self._stderr_lines: list[str] = []

    async def run(self) -> tuple[str, str]:
        """
        Run FFmpeg command and wait for completion.

        Returns:
            Tuple of (stdout, stderr) as strings

        Raises:
            FFmpegError: If process fails
            ProcessTimeoutError: If process exceeds timeout
        """
        logger.info(f"Running FFmpeg command: {' '.join(self.command[:3])}...")
        logger.debug(f"Full command: {' '.join(self.command)}")

        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise FFmpegError(
                f"Failed to execute {self.command[0]}: {e}", command=self.command
            ) from e

        try:
            if self.timeout:
                stdout, stderr = await asyncio.wait_for(
                    self._communicate_with_progress(),
                    timeout=self.timeout,
                )
            else:
                stdout, stderr = await self._communicate_with_progress()

            if self._process.returncode != 0:
                error_msg = self._extract_error_message(stderr)
                raise FFmpegError(
                    f"FFmpeg failed with code {self._process.returncode}: {error_msg}",
                    command=self.command,
                    stderr=stderr,
                )

            logger.info("FFmpeg command completed successfully")
            return stdout, stderr

        except asyncio.TimeoutError:
            logger.error(f"FFmpeg process exceeded timeout of {self.timeout}s")
            await self.terminate()
            raise ProcessTimeoutError(
                f"Process exceeded timeout of {self.timeout}s",
                timeout=self.timeout or 0.0,
            )

        except Exception as e:
            logger.error(f"FFmpeg process failed: {e}")
            await self.terminate()
            raise

    async def _communicate_with_progress(self) -> tuple[str, str]:
        """
        Communicate with process and track progress.

        Returns:
            Tuple of (stdout, stderr) as strings
        """
        if not self._process:
            raise RuntimeError("Process not started")

        stdout, stderr = await asyncio.gather(self._read_stdout(), self._read_stderr())
        await self._process.wait()

        return stdout, stderr

    async def _read_stdout(self) -> str:
        """Read complete stdout from process."""
        if not self._process or not self._process.stdout:
            return ""

        stdout = await self._process.stdout.read()
        return stdout.decode(errors="replace") if stdout else ""

    async def _read_stderr(self) -> str:
        """
        Read and parse stderr for progress information.

        Returns:
            Complete stderr output as string
        """
        if not self._process or not self._process.stderr:
            return ""

        stderr_lines: list[str] = []

        async for line in self._stream_stderr():
            stderr_lines.append(line)

            if self._duration is None:
                duration_match = self.DURATION_PATTERN.search(line)
                if duration_match:
                    h, m, s = map(float, duration_match.groups())
                    self._duration = h * 3600 + m * 60 + s
                    logger.debug(f"Detected duration: {self._duration}s")

            if self._duration and self.progress_callback:
                progress_match = self.PROGRESS_PATTERN.search(line)
                if progress_match:
                    h, m, s = map(float, progress_match.groups())
                    current_time = h * 3600 + m * 60 + s
                    progress = min(current_time / self._duration, 1.0)

                    speed: Optional[float] = None
                    fps_match = self.FPS_PATTERN.search(line)
                    speed_match = self.SPEED_PATTERN.search(line)

                    if fps_match:
                        speed = float(fps_match.group(1))
                    elif speed_match:
                        speed = float(speed_match.group(1))

                    try:
                        self.progress_callback(progress, speed)
                    except Exception as e:
                        logger.warning(f"Progress callback failed: {e}")

        self._stderr_lines = stderr_lines
        return "\n".join(stderr_lines)

    async def _stream_stderr(self) -> AsyncIterator[str]:
        """
        Stream stderr line by line.

        FFmpeg ends progress lines with a bare carriage return, so stderr is
        read in fixed-size chunks and split on both separators as it arrives.

        Yields:
            Individual lines from stderr
        """
        if not self._process or not self._process.stderr:
            return

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""

        while True:
            chunk = await self._process.stderr.read(self.STDERR_CHUNK_SIZE)
            if not chunk:
                break

            *lines, pending = self.LINE_SEPARATOR.split(pending + decoder.decode(chunk))
            for part in lines:
                line = part.strip()
                if line:
                    yield line

        line = (pending + decoder.decode(b"", final=True)).strip()
        if line:
            yield line

    def _extract_error_message(self, stderr: str) -> str:
        """
        Extract meaningful error message from stderr.

        Args:
            stderr: Complete stderr output

        Returns:
            Extracted error message or truncated stderr
        """
        error_patterns = [
            r"Error while (opening|decoding|encoding)",
            r"Invalid data found",
            r"No such file or directory",
            r"Permission denied",
            r"Unknown encoder",
            r"Codec .* is not supported",
            r"Invalid argument",
        ]

        lines = stderr.split("\n")
        for pattern in error_patterns:
            regex = re.compile(pattern, re.IGNORECASE)
            for i, line in enumerate(lines):
                if regex.search(line):
                    return " | ".join(lines[i : i + 3])

        # Last 3 non-empty lines as fallback
        lines = [line for line in lines if line.strip()]
        return " | ".join(lines[-3:]) if lines else "Unknown error"

    async def terminate(self) -> None:
        """
        Terminate the process gracefully.

        Sends SIGTERM, waits briefly, then sends SIGKILL if needed.
        """
        if not self._process:
            return

        try:
            if self._process.returncode is None:
                logger.info("Terminating FFmpeg process...")
                self._process.terminate()

                try:
                    await asyncio.wait_for(self._process.wait(), timeout=5.0)
                    logger.info("Process terminated gracefully")
                except asyncio.TimeoutError:
                    logger.warning("Forcing process termination...")
                    self._process.kill()
                    await self._process.wait()
                    logger.info("Process killed")

        except ProcessLookupError:
            logger.debug("Process already exited")

    @property
    def is_running(self) -> bool:
        """Check if process is currently running."""
        return self._process is not None and self._process.returncode is None

    @property
    def returncode(self) -> Optional[int]:
        """Get process return code."""
        return self._process.returncode if self._process else None

    @property
    def stderr_output(self) -> list[str]:
        """Get captured stderr lines."""
        return self._stderr_lines.copy()


class FFmpegCommandBuilder:
    """
    Builder for constructing FFmpeg commands.

    Provides a fluent interface for building FFmpeg commands.
    """

    def __init__(self, ffmpeg_path: str = "ffmpeg"):
        """
        Initialize command builder.

        Args:
            ffmpeg_path: Path to ffmpeg executable
        """
        self._command = [ffmpeg_path, "-hide_banner"]
        self._input_options: list[str] = []
        self._output_options: list[str] = []
        self._inputs: list[str] = []
        self._outputs: list[str] = []

    def global_option(self, option: str, value: Optional[str] = None) -> "FFmpegCommandBuilder":
        """
        Add global FFmpeg option.

        Args:
            option: Option name (e.g., "-y", "-loglevel")
            value: Option value (if applicable)

        Returns:
            Self for chaining
        """
        self._command.append(option)
        if value is not None:
            self._command.append(value)
        return self

    def input(self, file: Path, args: Optional[list[str]] = None) -> "FFmpegCommandBuilder":
        """
        Add input file with options placed before it.

        Args:
            file: Input file path
            args: Input arguments (e.g., ["-ss", "5"])

        Returns:
            Self for chaining
        """
        if args:
            self._input_options.extend(args)
        self._inputs.append(str(file))
        return self

    def output(self, file: Path, args: Optional[list[str]] = None) -> "FFmpegCommandBuilder":
        """
        Add output file with options placed before it.

        Args:
            file: Output file path
            args: Output arguments (e.g., ["-c:v", "libx264"])

        Returns:
            Self for chaining
        """
        if args:
            self._output_options.extend(args)
        self._outputs.append(str(file))
        return self

    def build(self) -> list[str]:
        """
        Build final command list.

        Returns:
            Complete FFmpeg command as list
        """
        command = self._command.copy()

        for input_file in self._inputs:
            command.extend(self._input_options)
            command.extend(["-i", input_file])

        command.extend(self._output_options)
        command.extend(self._outputs)

        return command
