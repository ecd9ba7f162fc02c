#!/usr/bin/env python3
"""Root-level pytest configuration and fixtures."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from hardsub.types import MatchedPair


@pytest.fixture
def quiet_console() -> Console:
    """Rich console writing to an in-memory buffer instead of the terminal."""
    return Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)


@pytest.fixture
def make_pair(tmp_path: Path):
    """Create a video/subtitle pair on disk and return it as a MatchedPair."""

    def _make(stem: str, folder: Path | None = None, subtitle_stem: str | None = None) -> MatchedPair:
        target = folder or tmp_path
        target.mkdir(parents=True, exist_ok=True)
        video = target / f"{stem}.mp4"
        subtitle = target / f"{subtitle_stem or stem}.srt"
        video.write_bytes(b"video")
        subtitle.write_text("1\n00:00:00,000 --> 00:00:01,000\nhello\n", encoding="utf-8")
        return MatchedPair(video_path=video, subtitle_path=subtitle)

    return _make
