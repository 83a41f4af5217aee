"""Command-line interface."""

from movie_probe.cli.main import app, main

__all__ = ["app", "main"]
