"""Discovery of video/subtitle pairs in an input folder."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from hardsub.exceptions import MatchingError
from hardsub.settings import DEFAULT_SETTINGS, Settings
from hardsub.types import MatchedPair

LOGGER = logging.getLogger(__name__)

# Characters ignored when comparing base names
_NORMALIZE_PATTERN = re.compile(r"[\s\-_\[\]()]")


def normalize_name(file_name: str) -> str:
    """Return the comparison key for a file name.

    The extension is dropped, the rest lower-cased, and whitespace plus the
    characters ``-_[]()`` removed, so ``"My Movie (2020).mkv"`` and
    ``"my_movie_2020.srt"`` share the key ``"mymovie2020"``.
    """
    return _NORMALIZE_PATTERN.sub("", Path(file_name).stem.lower())


def _list_entries(input_dir: Path) -> list[Path]:
    try:
        entries = sorted(input_dir.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise MatchingError(f"Cannot read input folder {input_dir}: {exc.strerror or exc}") from exc
    return [entry for entry in entries if entry.is_file()]


def find_matching_files(input_dir: str | Path, settings: Settings = DEFAULT_SETTINGS) -> list[MatchedPair]:
    """Pair videos with subtitles whose normalized names are equal.

    Only the immediate entries of ``input_dir`` are considered, in name order.
    When two files of the same kind normalize to the same key the later one
    replaces the earlier one.

    Args:
        input_dir: Folder to scan
        settings: Supplies the recognized video and subtitle extensions

    Returns:
        Matched pairs in video enumeration order

    Raises:
        MatchingError: If the folder cannot be read
    """
    folder = Path(input_dir)
    videos: dict[str, Path] = {}
    subtitles: dict[str, Path] = {}

    for entry in _list_entries(folder):
        key = normalize_name(entry.name)
        if settings.is_video(entry.suffix):
            bucket = videos
        elif settings.is_subtitle(entry.suffix):
            bucket = subtitles
        else:
            continue
        if key in bucket:
            LOGGER.debug("%s replaces %s for key %r", entry.name, bucket[key].name, key)
        bucket[key] = entry

    matches = [
        MatchedPair(video_path=video_path, subtitle_path=subtitles[key])
        for key, video_path in videos.items()
        if key in subtitles
    ]
    LOGGER.debug(
        "Found %d videos, %d subtitles, %d pairs in %s",
        len(videos),
        len(subtitles),
        len(matches),
        folder,
    )
    return matches
