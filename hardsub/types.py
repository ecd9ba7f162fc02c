"""Shared type definitions."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class MatchedPair:
    """A video file and the subtitle file burned into it."""

    video_path: Path
    subtitle_path: Path

    @property
    def label(self) -> str:
        return self.video_path.name

    @property
    def stem(self) -> str:
        return self.video_path.stem


@dataclass(slots=True)
class BatchResult:
    """Outcome of one conversion attempt."""

    success: bool
    file: str
    error: str | None = None


@dataclass(slots=True)
class RunSummary:
    """Final statistics for a whole run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0  # pairs left unprocessed when the operator halts
