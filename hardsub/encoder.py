"""Per-pair ffmpeg invocation with live progress tracking."""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import logging
import shlex
from pathlib import Path

import ffmpeg  # type: ignore[import-untyped, unused-ignore]

from hardsub.diagnostics import DiagnosticEvent, DiagnosticParser, DurationEvent, percentage
from hardsub.exceptions import ConversionError, EncoderExitError, EncoderLaunchError
from hardsub.progress import ProgressTracker
from hardsub.settings import DEFAULT_SETTINGS, OUTPUT_SUFFIX, Settings
from hardsub.types import BatchResult, MatchedPair

LOGGER = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 4096

# Fixed rate-control, tuning and muxing options applied to every conversion
_FIXED_OUTPUT_OPTIONS: dict[str, str] = {
    "c:a": "copy",
    "maxrate": "1.5M",
    "bufsize": "3M",
    "tune": "fastdecode",
    "movflags": "+faststart",
    "max_muxing_queue_size": "1024",
}


def resolve_encoder(settings: Settings = DEFAULT_SETTINGS) -> str:
    """Return the video codec used for every conversion in this run."""
    return settings.video_codec


def output_path_for(pair: MatchedPair, output_dir: str | Path) -> Path:
    return Path(output_dir) / f"{pair.stem}{OUTPUT_SUFFIX}"


# Characters with a meaning to the filter option parser, then to the graph parser
_OPTION_SPECIAL = "\\':"
_GRAPH_SPECIAL = "\\'[],;"


def _backslash_escape(value: str, special: str) -> str:
    return "".join(f"\\{char}" if char in special else char for char in value)


def escape_filter_path(path: str) -> str:
    """Make a path safe to embed as a filter option value in ``-vf``.

    Backslash separators become ``/``. The value is then escaped for the
    option parser and again for the filter graph parser, which strips one
    level of escaping before the filter sees it.
    """
    value = path.replace("\\", "/")
    return _backslash_escape(_backslash_escape(value, _OPTION_SPECIAL), _GRAPH_SPECIAL)


def _subtitle_filter(subtitle_path: Path, style: str) -> str:
    return f"subtitles={escape_filter_path(str(subtitle_path))}:force_style='{style}'"


def build_encoder_command(
    pair: MatchedPair,
    output_path: str | Path,
    settings: Settings = DEFAULT_SETTINGS,
) -> list[str]:
    """Build the full encoder argv that burns ``pair``'s subtitles into its video.

    Args:
        pair: Video and subtitle to combine
        output_path: Destination file, overwritten if present
        settings: Source of the style string and the codec/preset/crf/threads tuple

    Returns:
        Argument list starting with ``settings.encoder_command``
    """
    stream = ffmpeg.input(str(pair.video_path), hwaccel="auto")  # type: ignore[no-untyped-call]
    output_options = {
        "vf": _subtitle_filter(pair.subtitle_path, settings.subtitle_style),
        "c:v": resolve_encoder(settings),
        "preset": settings.preset,
        "crf": settings.crf,
        "threads": settings.threads,
        **_FIXED_OUTPUT_OPTIONS,
    }
    stream = ffmpeg.output(stream, str(output_path), **output_options)  # type: ignore[no-untyped-call]
    return list(ffmpeg.compile(stream, cmd=list(settings.encoder_command), overwrite_output=True))  # type: ignore[no-untyped-call]


async def _kill_and_reap(process: asyncio.subprocess.Process, label: str) -> None:
    if process.returncode is None:
        LOGGER.warning("Stopping encoder for %s", label)
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    await process.wait()


class ConversionRunner:
    """Runs the encoder for one matched pair and reports into a ProgressTracker."""

    def __init__(
        self,
        tracker: ProgressTracker,
        settings: Settings = DEFAULT_SETTINGS,
        *,
        chunk_size: int = _READ_CHUNK_SIZE,
    ) -> None:
        self._tracker = tracker
        self._settings = settings
        self._chunk_size = chunk_size

    async def convert(self, pair: MatchedPair, output_path: str | Path) -> BatchResult:
        """Convert one pair; failures come back as an unsuccessful BatchResult."""
        try:
            await self.run(pair, output_path)
        except ConversionError as error:
            return BatchResult(success=False, file=error.file, error=str(error))
        return BatchResult(success=True, file=pair.label)

    async def run(self, pair: MatchedPair, output_path: str | Path) -> None:
        """Run the encoder to completion.

        The tracker entry for the pair is started here and finished exactly
        once whatever the outcome, including errors from rendering or
        cancellation. In those cases the encoder is killed and reaped before
        the error propagates.

        Raises:
            EncoderLaunchError: If the encoder process could not be started
            EncoderExitError: If the encoder exited with a non-zero status
        """
        label = pair.label
        command = build_encoder_command(pair, output_path, self._settings)

        try:
            self._tracker.start(label)
            LOGGER.info("Starting %s", label)
            LOGGER.debug("Encoder command: %s", shlex.join(command))

            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                LOGGER.error("Could not start encoder for %s: %s", label, exc)
                self._tracker.finish(label, False)
                raise EncoderLaunchError(label, exc.strerror or str(exc)) from exc

            try:
                if process.stderr is not None:
                    await self._follow_progress(label, process.stderr)
                returncode = await process.wait()
            except BaseException:
                await _kill_and_reap(process, label)
                raise

            if returncode == 0:
                self._tracker.finish(label, True)
                LOGGER.info("Finished %s", label)
                return

            self._tracker.finish(label, False)
            LOGGER.warning("Encoder exited with code %d for %s", returncode, label)
            raise EncoderExitError(label, returncode)
        finally:
            if label not in self._tracker.results:
                self._tracker.finish(label, False)

    async def _follow_progress(self, label: str, stream: asyncio.StreamReader) -> None:
        """Consume the encoder's stderr until EOF, forwarding percentages.

        Position markers seen before the duration is known are ignored.
        """
        parser = DiagnosticParser()
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        duration: float | None = None

        def apply(events: list[DiagnosticEvent]) -> None:
            nonlocal duration
            for event in events:
                if isinstance(event, DurationEvent):
                    duration = event.seconds
                    LOGGER.debug("%s: duration %.2f s", label, duration)
                elif duration:
                    self._tracker.update(label, percentage(event.seconds, duration))

        while True:
            chunk = await stream.read(self._chunk_size)
            if not chunk:
                break
            apply(parser.feed(decoder.decode(chunk)))

        apply(parser.feed(decoder.decode(b"", final=True)) + parser.close())
