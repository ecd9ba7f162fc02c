"""Unit tests for the progress tracker."""

from __future__ import annotations

import io

from rich.console import Console

from hardsub.progress import ProgressSnapshot, ProgressTracker, render_snapshot


class TestTrackerState:
    """Tests for start/update/finish bookkeeping."""

    def test_reset_clears_previous_run(self, tracker: ProgressTracker) -> None:
        tracker.reset(2)
        tracker.start("a.mp4")
        tracker.finish("a.mp4", True)
        tracker.start("b.mp4")

        tracker.reset(5)

        assert tracker.total == 5
        assert tracker.completed == 0
        assert tracker.in_progress == {}
        assert tracker.results == {}

    def test_start_registers_item_at_zero(self, tracker: ProgressTracker) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")

        assert tracker.in_progress == {"a.mp4": 0.0}

    def test_finish_moves_item_to_results(self, tracker: ProgressTracker) -> None:
        tracker.reset(3)
        for label in ("a.mp4", "b.mp4", "c.mp4"):
            tracker.start(label)

        tracker.finish("b.mp4", False)
        tracker.finish("a.mp4", True)

        assert tracker.completed == 2
        assert list(tracker.in_progress) == ["c.mp4"]
        assert tracker.results == {"b.mp4": False, "a.mp4": True}
        assert list(tracker.results) == ["b.mp4", "a.mp4"]

    def test_repeated_finish_is_counted_once(self, tracker: ProgressTracker) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")
        tracker.finish("a.mp4", False)
        tracker.finish("a.mp4", True)

        assert tracker.completed == 1
        assert tracker.results == {"a.mp4": False}

    def test_completed_tracks_finished_items(self, tracker: ProgressTracker) -> None:
        labels = [f"clip{i}.mp4" for i in range(7)]
        tracker.reset(len(labels))
        for label in labels:
            tracker.start(label)
            tracker.update(label, 42.0)
        for index, label in enumerate(labels):
            tracker.finish(label, index % 3 != 0)
            assert tracker.completed == index + 1
            assert tracker.completed == tracker.total - len(tracker.in_progress)

        assert tracker.results == {label: index % 3 != 0 for index, label in enumerate(labels)}
        assert tracker.succeeded == 4
        assert tracker.failed == 3


class TestUpdateThrottle:
    """Tests for the 0.1 point update threshold."""

    def test_small_changes_do_not_update_or_render(self, tracker: ProgressTracker, rendered: list) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")
        assert tracker.update("a.mp4", 10.0) is True
        renders = len(rendered)

        assert tracker.update("a.mp4", 10.04) is False
        assert tracker.update("a.mp4", 9.96) is False

        assert tracker.in_progress["a.mp4"] == 10.0
        assert len(rendered) == renders

    def test_exact_threshold_step_is_applied(self, tracker: ProgressTracker) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")
        tracker.update("a.mp4", 10.0)

        assert tracker.update("a.mp4", 10.1) is True
        assert tracker.in_progress["a.mp4"] == 10.1

    def test_value_is_stored_with_one_decimal(self, tracker: ProgressTracker) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")
        tracker.update("a.mp4", 33.333)

        assert tracker.in_progress["a.mp4"] == 33.3

    def test_renders_follow_progress_not_call_count(self, tracker: ProgressTracker, rendered: list) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")
        before = len(rendered)

        for step in range(100):
            tracker.update("a.mp4", step * 0.01)

        # 0.00 .. 0.99 only crosses 0.1-point steps ten times at most
        assert len(rendered) - before <= 10

    def test_update_for_unknown_item_is_ignored(self, tracker: ProgressTracker, rendered: list) -> None:
        tracker.reset(1)

        assert tracker.update("ghost.mp4", 50.0) is False
        assert "ghost.mp4" not in tracker.in_progress
        assert rendered == []


class TestRendering:
    """Tests for snapshots and their rendering."""

    def test_every_state_change_renders(self, tracker: ProgressTracker, rendered: list) -> None:
        tracker.reset(1)
        tracker.start("a.mp4")
        tracker.update("a.mp4", 50.0)
        tracker.finish("a.mp4", True)

        assert len(rendered) == 3
        assert tracker.render_count == 3
        assert rendered[1].in_progress == (("a.mp4", 50.0),)
        assert rendered[2].completed == 1

    def test_snapshot_keeps_last_five_results(self) -> None:
        tracker = ProgressTracker(renderer=lambda _snapshot: None)
        tracker.reset(7)
        for i in range(7):
            tracker.start(f"{i}.mp4")
            tracker.finish(f"{i}.mp4", True)

        snapshot = tracker.snapshot()

        assert [label for label, _ in snapshot.recent] == ["2.mp4", "3.mp4", "4.mp4", "5.mp4", "6.mp4"]
        assert snapshot.percent == 100.0

    def test_snapshot_percent_with_no_items(self) -> None:
        assert ProgressSnapshot(total=0, completed=0, in_progress=(), recent=()).percent == 0.0

    def test_console_output_lists_items_and_markers(self) -> None:
        console = Console(file=io.StringIO(), width=120, color_system=None)
        snapshot = ProgressSnapshot(
            total=4,
            completed=2,
            in_progress=(("[Group] ep1.mkv", 12.5),),
            recent=(("good.mp4", True), ("bad.mp4", False)),
        )

        console.print(render_snapshot(snapshot))
        output = console.file.getvalue()  # type: ignore[attr-defined]

        assert "Overall progress: 2/4 (50.0%)" in output
        assert "→ [Group] ep1.mkv (12.5%)" in output
        assert "✓ good.mp4" in output
        assert "✗ bad.mp4" in output

    def test_default_renderer_prints_to_console(self) -> None:
        console = Console(file=io.StringIO(), width=120, color_system=None)
        tracker = ProgressTracker(console)
        tracker.reset(1)
        tracker.start("movie.mp4")

        assert "→ movie.mp4 (0.0%)" in console.file.getvalue()  # type: ignore[attr-defined]
