from __future__ import annotations

import pytest

from hardsub.progress import ProgressSnapshot, ProgressTracker


@pytest.fixture(scope="session", autouse=True)
def _disable_network_for_unit_tests() -> None:
    """Block real sockets for unit tests; allow Unix sockets for pytest and asyncio internals."""
    from pytest_socket import disable_socket

    disable_socket(allow_unix_socket=True)


@pytest.fixture
def rendered() -> list[ProgressSnapshot]:
    """Snapshots passed to the tracker renderer, in render order."""
    return []


@pytest.fixture
def tracker(rendered: list[ProgressSnapshot]) -> ProgressTracker:
    """Tracker that records snapshots instead of drawing to the terminal."""
    return ProgressTracker(renderer=rendered.append)
