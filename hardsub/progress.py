"""Run-wide progress state and its terminal snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console, Group
from rich.text import Text

LOGGER = logging.getLogger(__name__)

# Absorbs float error so that e.g. 10.1 - 10.0 still counts as a 0.1 step
_EPSILON = 1e-9


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Read-only view of the tracker at one moment."""

    total: int
    completed: int
    in_progress: tuple[tuple[str, float], ...]
    recent: tuple[tuple[str, bool], ...]

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(100.0 * self.completed / self.total, 1)


def render_snapshot(snapshot: ProgressSnapshot) -> Group:
    """Build the Rich renderable shown after every progress change."""
    lines: list[Text] = [
        Text.from_markup(f"[bold]Overall progress:[/bold] {snapshot.completed}/{snapshot.total} ({snapshot.percent}%)"),
        Text(""),
    ]
    if snapshot.in_progress:
        lines.append(Text.from_markup("[bold]Processing:[/bold]"))
        for label, percent in snapshot.in_progress:
            lines.append(Text(f"→ {label} ({percent:.1f}%)"))
    if snapshot.recent:
        lines.append(Text(""))
        lines.append(Text.from_markup("[bold]Recently finished:[/bold]"))
        for label, success in snapshot.recent:
            marker = "[green]✓[/green]" if success else "[red]✗[/red]"
            lines.append(Text.from_markup(f"{marker} ") + Text(label))
    return Group(*lines)


class ProgressTracker:
    """Totals, in-flight percentages and outcomes for one batch run.

    Every state change re-renders the snapshot synchronously. All mutation is
    expected to happen on the event loop thread, and each conversion task only
    touches its own label, so no locking is done here.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        threshold: float = 0.1,
        recent_limit: int = 5,
        renderer: Callable[[ProgressSnapshot], None] | None = None,
    ) -> None:
        self._console = console or Console()
        self._threshold = threshold
        self._recent_limit = recent_limit
        self._renderer = renderer or self._render_to_console
        self.total = 0
        self.completed = 0
        self.in_progress: dict[str, float] = {}
        self.results: dict[str, bool] = {}
        self.render_count = 0

    def reset(self, total: int) -> None:
        """Start a fresh run sized to ``total`` items."""
        self.total = total
        self.completed = 0
        self.in_progress.clear()
        self.results.clear()

    def start(self, label: str) -> None:
        self.in_progress[label] = 0.0
        self.render()

    def update(self, label: str, percent: float) -> bool:
        """Record a new percentage for an in-flight item.

        Changes smaller than the threshold are dropped without rendering.

        Returns:
            True if the value was recorded
        """
        last = self.in_progress.get(label)
        if last is None:
            return False
        value = round(percent, 1)
        if abs(value - last) + _EPSILON < self._threshold:
            return False
        self.in_progress[label] = value
        self.render()
        return True

    def finish(self, label: str, success: bool) -> None:
        if label in self.results:
            LOGGER.warning("Ignoring repeated completion for %s", label)
            return
        self.in_progress.pop(label, None)
        self.completed += 1
        self.results[label] = success
        self.render()

    @property
    def succeeded(self) -> int:
        return sum(1 for ok in self.results.values() if ok)

    @property
    def failed(self) -> int:
        return sum(1 for ok in self.results.values() if not ok)

    def snapshot(self) -> ProgressSnapshot:
        recent = list(self.results.items())[-self._recent_limit :] if self._recent_limit > 0 else []
        return ProgressSnapshot(
            total=self.total,
            completed=self.completed,
            in_progress=tuple(self.in_progress.items()),
            recent=tuple(recent),
        )

    def render(self) -> None:
        self.render_count += 1
        self._renderer(self.snapshot())

    def _render_to_console(self, snapshot: ProgressSnapshot) -> None:
        self._console.clear()
        self._console.print(render_snapshot(snapshot))
