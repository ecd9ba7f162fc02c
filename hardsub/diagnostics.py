from __future__ import annotations

import re
from dataclasses import dataclass

_DURATION_PATTERN = re.compile(r"Duration: (\d{2}):(\d{2}):(\d{2}\.\d{2})")
_TIME_PATTERN = re.compile(r"time=(\d{2}):(\d{2}):(\d{2}\.\d{2})")
# ffmpeg rewrites its status line with carriage returns
_LINE_BREAK = re.compile(r"[\r\n]")


@dataclass(frozen=True, slots=True)
class DurationEvent:
    seconds: float


@dataclass(frozen=True, slots=True)
class PositionEvent:
    seconds: float


DiagnosticEvent = DurationEvent | PositionEvent


def _to_seconds(match: re.Match[str]) -> float:
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def percentage(position: float, duration: float) -> float:
    """Return ``position`` as a share of ``duration`` in [0, 100], one decimal."""
    if duration <= 0:
        return 0.0
    return round(min(100.0, max(0.0, 100.0 * position / duration)), 1)


class DiagnosticParser:
    """Incremental scraper for ffmpeg's stderr.

    Text arrives in arbitrary chunks; complete lines are scanned and a trailing
    partial line is kept until the next chunk or ``close()``. Only the first
    ``Duration:`` marker is reported.
    """

    def __init__(self) -> None:
        self._pending = ""
        self.duration: float | None = None

    def feed(self, chunk: str) -> list[DiagnosticEvent]:
        parts = _LINE_BREAK.split(self._pending + chunk)
        self._pending = parts.pop()
        events: list[DiagnosticEvent] = []
        for line in parts:
            events.extend(self._scan(line))
        return events

    def close(self) -> list[DiagnosticEvent]:
        tail, self._pending = self._pending, ""
        return self._scan(tail)

    def _scan(self, line: str) -> list[DiagnosticEvent]:
        events: list[DiagnosticEvent] = []
        if self.duration is None:
            match = _DURATION_PATTERN.search(line)
            if match:
                self.duration = _to_seconds(match)
                events.append(DurationEvent(self.duration))
        for match in _TIME_PATTERN.finditer(line):
            events.append(PositionEvent(_to_seconds(match)))
        return events
