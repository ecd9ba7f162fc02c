"""Batch-by-batch orchestration of subtitle burn-in conversions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from pathlib import Path
from typing import Protocol, TypeVar

from rich.console import Console

from hardsub.cli.ui import (
    display_batch_header,
    display_batch_summary,
    display_final_summary,
    display_no_matches,
    display_run_header,
)
from hardsub.encoder import output_path_for, resolve_encoder
from hardsub.exceptions import OutputDirectoryError
from hardsub.matcher import find_matching_files
from hardsub.progress import ProgressTracker
from hardsub.settings import DEFAULT_SETTINGS, Settings
from hardsub.types import BatchResult, MatchedPair, RunSummary

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Resolves True to start the next batch, False to stop the run
BatchGate = Callable[[], Awaitable[bool]]
Matcher = Callable[[Path, Settings], list[MatchedPair]]

_HALT_ANSWERS = {"q", "quit", "n", "no", "stop"}


class Converter(Protocol):
    """Anything that can convert a pair without raising for per-file failures."""

    async def convert(self, pair: MatchedPair, output_path: str | Path) -> BatchResult: ...


def iter_batches(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``items`` of at most ``size`` elements."""
    if size < 1:
        raise ValueError(f"batch size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def console_gate(console: Console) -> BatchGate:
    """Return a gate that waits for the operator to press Enter.

    Typing ``q`` (or ``quit``/``n``/``no``/``stop``) stops the run, as does a
    closed stdin. The blocking read happens in a worker thread so encoder
    output of the finished batch is not held up.
    """

    async def wait_for_operator() -> bool:
        try:
            answer = await asyncio.to_thread(
                console.input, "\nPress Enter to continue with the next batch (q to stop)... "
            )
        except EOFError:
            LOGGER.warning("No operator input available; stopping after this batch")
            return False
        return answer.strip().lower() not in _HALT_ANSWERS

    return wait_for_operator


class BatchOrchestrator:
    """Runs matched pairs in fixed-size batches with a barrier between them."""

    def __init__(
        self,
        runner: Converter,
        tracker: ProgressTracker,
        settings: Settings = DEFAULT_SETTINGS,
        *,
        gate: BatchGate | None = None,
        console: Console | None = None,
        matcher: Matcher = find_matching_files,
    ) -> None:
        """Initialize the orchestrator with its collaborators.

        Args:
            runner: Converts one pair; must report failures as results
            tracker: Progress state shared with the runner
            settings: Batch size and encoder settings
            gate: Awaited between batches; defaults to an Enter prompt
            console: Where batch and run summaries are printed
            matcher: Finds pairs in the input folder
        """
        self._runner = runner
        self._tracker = tracker
        self._settings = settings
        self._console = console or Console()
        self._gate = gate or console_gate(self._console)
        self._matcher = matcher

    async def run(self, input_dir: str | Path, output_dir: str | Path) -> RunSummary:
        """Match, convert in batches, and report totals.

        Raises:
            OutputDirectoryError: If the output folder cannot be created
            MatchingError: If the input folder cannot be read
        """
        output_folder = Path(output_dir)
        try:
            output_folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(f"Cannot create output folder {output_folder}: {exc}") from exc

        pairs = self._matcher(Path(input_dir), self._settings)
        if not pairs:
            display_no_matches(self._console)
            return RunSummary()

        self._tracker.reset(len(pairs))
        display_run_header(
            len(pairs),
            resolve_encoder(self._settings),
            self._settings.batch_size,
            self._settings.concurrency,
            self._console,
        )
        LOGGER.debug("Matched %d pairs from %s", len(pairs), input_dir)

        batches = list(iter_batches(pairs, self._settings.batch_size))
        processed = 0
        for number, batch in enumerate(batches, start=1):
            display_batch_header(processed + 1, processed + len(batch), len(pairs), self._console)
            results = await self.process_batch(batch, output_folder)
            processed += len(batch)
            display_batch_summary(results, self._console)

            if number < len(batches) and not await self._gate():
                LOGGER.info("Stopped by operator after batch %d of %d", number, len(batches))
                break

        summary = RunSummary(
            total=len(pairs),
            succeeded=self._tracker.succeeded,
            failed=self._tracker.failed,
            skipped=len(pairs) - processed,
        )
        display_final_summary(summary, self._console)
        return summary

    async def process_batch(self, batch: Sequence[MatchedPair], output_dir: Path) -> list[BatchResult]:
        """Convert every pair in ``batch`` concurrently and wait for all of them.

        Per-file failures come back as results. Anything else raised by a
        conversion cancels the rest of the batch before it propagates.
        """
        tasks = [
            asyncio.ensure_future(self._runner.convert(pair, output_path_for(pair, output_dir))) for pair in batch
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
