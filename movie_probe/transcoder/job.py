"""
Job description handed to a job runner.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..models import Movie, ProgressCallback
from .options import EncodingOptions, RunnerOptions


@dataclass(frozen=True)
class TranscodeJob:
    """One encode of a probed movie."""

    movie: Movie
    output: Path
    options: EncodingOptions
    runner_options: RunnerOptions
    progress_callback: Optional[ProgressCallback] = None

    @property
    def is_screenshot(self) -> bool:
        return self.options.screenshot


class JobRunner(Protocol):
    """Executes transcode jobs."""

    def run(self, job: TranscodeJob) -> Optional[Movie]:
        """Run the job; may return the probed output."""
        ...
