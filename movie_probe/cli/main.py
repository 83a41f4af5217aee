"""
CLI interface for Movie Probe.

This module provides the command-line interface using Typer and Rich
for terminal output.
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import ConfigManager
from ..inspector import MediaInspector
from ..models import Movie
from ..utils import (
    MovieProbeError,
    format_bitrate,
    format_duration,
    format_size,
    get_logger,
    setup_logger,
)

app = typer.Typer(
    name="movie-probe",
    help="Inspect media files with ffprobe",
    add_completion=False,
)

console = Console()

logger = get_logger(__name__)

EXIT_ERROR = 1
EXIT_INVALID = 2


def _movie_to_dict(movie: Movie) -> dict[str, Any]:
    """Flatten a Movie into JSON-friendly values."""
    return {
        "path": str(movie.path),
        "valid": movie.valid,
        "container": movie.container,
        "duration": movie.duration,
        "time": movie.time,
        "creation_time": movie.creation_time.isoformat() if movie.creation_time else None,
        "bitrate": movie.bitrate,
        "size": movie.size,
        "error": movie.error_message,
        "video": {
            "codec": movie.video_codec,
            "colorspace": movie.colorspace,
            "resolution": movie.resolution,
            "width": movie.width,
            "height": movie.height,
            "bitrate": movie.video_bitrate,
            "sar": movie.sar,
            "dar": movie.dar,
            "frame_rate": str(movie.frame_rate) if movie.frame_rate is not None else None,
            "rotation": movie.rotation,
            "aspect_ratio": movie.calculated_aspect_ratio,
            "pixel_aspect_ratio": movie.calculated_pixel_aspect_ratio,
            "stream": movie.video_stream,
        }
        if movie.has_video
        else None,
        "audio": {
            "codec": movie.audio_codec,
            "channels": movie.audio_channels,
            "channel_layout": movie.audio_channel_layout,
            "sample_rate": movie.audio_sample_rate,
            "bitrate": movie.audio_bitrate,
            "stream": movie.audio_stream,
        }
        if movie.has_audio
        else None,
    }


def _render_movie(movie: Movie) -> None:
    """Print a Movie as Rich tables."""
    status = "[green]✓ valid[/green]" if movie.valid else "[red]✗ invalid[/red]"
    console.print()
    title = f"[bold cyan]{escape(movie.path.name)}[/bold cyan]  {status}"
    console.print(Panel(title, border_style="cyan"))

    table = Table(title="Container", show_header=True)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Format", movie.container or "-")
    table.add_row("Duration", format_duration(movie.duration))
    table.add_row("Start time", f"{movie.time:.3f}s" if movie.time is not None else "-")
    table.add_row("Created", str(movie.creation_time) if movie.creation_time else "-")
    table.add_row("Bitrate", format_bitrate(movie.bitrate) if movie.bitrate else "-")
    table.add_row("Size", format_size(movie.size))
    if movie.error_message:
        table.add_row("Error", f"[red]{escape(movie.error_message)}[/red]")
    console.print(table)

    if movie.video:
        video = movie.video
        aspect = video.calculated_aspect_ratio
        table = Table(title="Video", show_header=True)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Stream", escape(video.summary))
        table.add_row("Resolution", video.resolution or "-")
        table.add_row("Frame rate", str(video.frame_rate) if video.frame_rate else "-")
        table.add_row("Aspect ratio", f"{aspect:.4f}" if aspect is not None else "-")
        table.add_row("Pixel aspect", f"{video.calculated_pixel_aspect_ratio:.4f}")
        table.add_row("Rotation", f"{video.rotation}°" if video.rotation is not None else "-")
        table.add_row("Bitrate", format_bitrate(video.bitrate))
        console.print(table)

    if movie.audio:
        audio = movie.audio
        table = Table(title="Audio", show_header=True)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Stream", escape(audio.summary))
        table.add_row("Channels", f"{audio.channels} ({audio.layout})")
        table.add_row("Sample rate", f"{audio.sample_rate} Hz")
        table.add_row("Bitrate", format_bitrate(audio.bitrate))
        console.print(table)

    console.print()


@app.command("inspect")
def inspect_command(
    input_file: Path = typer.Argument(..., help="Media file to inspect"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Custom configuration file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Inspect a media file and print its properties.

    Exits with 1 when the file cannot be probed and 2 when it is not usable.
    """
    try:
        config = ConfigManager(config_file).config
        setup_logger(level=config.log_level, verbose=verbose)
        movie = MediaInspector(config).inspect_sync(input_file)
    except MovieProbeError as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(EXIT_ERROR)

    if as_json:
        console.print_json(json.dumps(_movie_to_dict(movie)))
    else:
        _render_movie(movie)

    if not movie.valid:
        sys.exit(EXIT_INVALID)


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: init, show"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for 'init' action",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Manage configuration files.

    Actions:
    - init: Create a default configuration file
    - show: Display current configuration
    """
    config_manager = ConfigManager()

    if action == "init":
        output_path = output or Path(".movie-probe.yaml")

        try:
            config_manager.init_default_config(output_path, force=force)
            console.print(f"[green]✓[/green] Created config file: {output_path}")
        except MovieProbeError as e:
            console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
            sys.exit(EXIT_ERROR)

    elif action == "show":
        try:
            config = config_manager.config
        except MovieProbeError as e:
            console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
            sys.exit(EXIT_ERROR)

        console.print()
        console.print(Panel("[bold cyan]Current Configuration[/bold cyan]", border_style="cyan"))
        console.print()

        table = Table(show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("ffprobe", config.ffprobe_path)
        table.add_row("ffmpeg", config.ffmpeg_path)
        table.add_row("Text encoding", config.text_encoding)
        table.add_row("Fallback encoding", config.fallback_encoding)
        table.add_row("Log level", config.log_level)
        console.print(table)
        console.print()

        console.print("[bold]Unsupported media markers:[/bold]")
        for marker in config.unsupported_markers:
            console.print(f"  • {marker}")
        console.print()

    else:
        console.print(f"[red]✗ Unknown action:[/red] {action}")
        console.print("Valid actions: init, show")
        sys.exit(EXIT_ERROR)


@app.command("version")
def version_command() -> None:
    """
    Display version information.
    """
    from .. import __version__

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Movie Probe[/bold cyan]\n[dim]Version {__version__}[/dim]",
            border_style="cyan",
        )
    )
    console.print()


def main() -> None:
    """
    Main entry point for CLI.
    """
    app()


if __name__ == "__main__":
    main()
