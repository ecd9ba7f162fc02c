from __future__ import annotations

from typing import TYPE_CHECKING, Any

# Keep imports lazy so `--help` does not pay for asyncio/ffmpeg imports.
__all__ = ["BatchOrchestrator", "ConversionRunner", "ProgressTracker", "find_matching_files"]

if TYPE_CHECKING:
    from hardsub.encoder import ConversionRunner
    from hardsub.matcher import find_matching_files
    from hardsub.orchestrator import BatchOrchestrator
    from hardsub.progress import ProgressTracker

_LOCATIONS = {
    "BatchOrchestrator": "hardsub.orchestrator",
    "ConversionRunner": "hardsub.encoder",
    "ProgressTracker": "hardsub.progress",
    "find_matching_files": "hardsub.matcher",
}


def __getattr__(name: str) -> Any:
    if name in _LOCATIONS:
        import importlib

        return getattr(importlib.import_module(_LOCATIONS[name]), name)
    raise AttributeError(f"module 'hardsub' has no attribute '{name}'")
