"""Unified CLI entrypoint for hardsub-batch."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from hardsub.cli.ui import console
from hardsub.config import setup_logging
from hardsub.encoder import ConversionRunner
from hardsub.exceptions import HardsubError
from hardsub.orchestrator import BatchOrchestrator
from hardsub.progress import ProgressTracker
from hardsub.settings import DEFAULT_SETTINGS, Settings

LOGGER = logging.getLogger(__name__)

app = typer.Typer(
    name="hardsub-batch",
    help="Burn .srt subtitles into matching videos with ffmpeg, in operator-paced batches",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    """Configure logging levels based on verbosity.

    Args:
        verbose: If True, show DEBUG logs. If False, keep per-file chatter out of the progress screen.
    """
    setup_logging()
    root = logging.getLogger()
    if verbose:
        root.setLevel(logging.DEBUG)
        for handler in root.handlers:
            handler.setLevel(logging.DEBUG)
    else:
        logging.getLogger("hardsub.encoder").setLevel(logging.WARNING)
        logging.getLogger("hardsub.matcher").setLevel(logging.WARNING)


def build_orchestrator(settings: Settings) -> BatchOrchestrator:
    """Wire the tracker, runner and orchestrator for one run."""
    tracker = ProgressTracker(console, threshold=settings.progress_threshold, recent_limit=settings.recent_results)
    runner = ConversionRunner(tracker, settings)
    return BatchOrchestrator(runner, tracker, settings, console=console)


@app.command()
def run(
    input_dir: Annotated[Path, typer.Argument(help="Folder containing videos and .srt subtitles")],
    output_dir: Annotated[Path, typer.Argument(help="Folder for the *_output.mp4 files (created if missing)")],
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """Burn each video's matching subtitle into a new MP4."""
    _configure_logging(verbose)

    if not input_dir.exists():
        console.print(f"[red]Error:[/red] Input folder does not exist: {input_dir}")
        raise typer.Exit(1)

    if not input_dir.is_dir():
        console.print(f"[red]Error:[/red] Input path is not a directory: {input_dir}")
        raise typer.Exit(1)

    orchestrator = build_orchestrator(DEFAULT_SETTINGS)
    try:
        asyncio.run(orchestrator.run(input_dir, output_dir))
    except (HardsubError, OSError) as error:
        console.print(f"[red]Processing failed:[/red] {error}")
        if verbose:
            LOGGER.exception("Full error details:")
        raise typer.Exit(1) from error


def main() -> NoReturn:
    """Main entrypoint for hardsub-batch CLI."""
    app()
    raise SystemExit(0)


if __name__ == "__main__":
    main()
