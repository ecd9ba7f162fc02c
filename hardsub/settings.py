"""Static settings for batch subtitle burn-in.

Values here are fixed at import time and are not read from the environment;
changing them means editing this module or passing a modified copy
(``dataclasses.replace``) into the orchestrator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final

DEFAULT_SUBTITLE_STYLE: Final = (
    "FontName=Microsoft YaHei,FontSize=24,PrimaryColour=&HFFFFFF,OutlineColour=&H000000,Outline=2"
)
DEFAULT_VIDEO_EXTENSIONS: Final = (".mp4", ".mkv", ".avi", ".mov")
DEFAULT_SUBTITLE_EXTENSIONS: Final = (".srt",)
DEFAULT_BATCH_SIZE: Final = 10
OUTPUT_SUFFIX: Final = "_output.mp4"


def _default_concurrency() -> int:
    return max(1, (os.cpu_count() or 1) - 1)


@dataclass(frozen=True, slots=True)
class Settings:
    """Encoding and batching parameters for one run."""

    # CPU count minus one; informational, batches are bounded by batch_size only
    concurrency: int = field(default_factory=_default_concurrency)
    subtitle_style: str = DEFAULT_SUBTITLE_STYLE
    video_extensions: tuple[str, ...] = DEFAULT_VIDEO_EXTENSIONS
    subtitle_extensions: tuple[str, ...] = DEFAULT_SUBTITLE_EXTENSIONS

    # argv prefix used to launch the encoder
    encoder_command: tuple[str, ...] = ("ffmpeg",)
    video_codec: str = "libx264"
    preset: str = "ultrafast"
    crf: str = "28"
    threads: str = "0"  # 0 lets the encoder pick

    batch_size: int = DEFAULT_BATCH_SIZE
    progress_threshold: float = 0.1
    recent_results: int = 5

    def is_video(self, suffix: str) -> bool:
        return suffix.lower() in self.video_extensions

    def is_subtitle(self, suffix: str) -> bool:
        return suffix.lower() in self.subtitle_extensions


DEFAULT_SETTINGS: Final = Settings()
