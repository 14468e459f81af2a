"""
test_counting — the per-artifact no-return counting pass.

Tests verify:
  - Only functions with a decoded instruction at their entry are counted.
  - Progress is reported once per visited function, indeterminate first.
  - Cancellation stops the pass between functions with a partial count.
"""
from __future__ import annotations

from typing import List

from vt_preconditions.core.artifact import FunctionRecord, ProgramArtifact
from vt_preconditions.core.counting import count_no_return_functions
from vt_preconditions.core.monitor import NULL_MONITOR, CancellableMonitor
from vt_preconditions.tests.conftest import StopAfterMonitor, build_artifact


class _RecordingMonitor:
    """Logs every monitor call; cancels once *cancel_at* functions were seen."""

    def __init__(self, cancel_at: int | None = None) -> None:
        self.calls: List[tuple] = []
        self.progress = 0
        self.cancel_at = cancel_at

    def set_indeterminate(self, indeterminate: bool) -> None:
        self.calls.append(("indeterminate", indeterminate))

    def increment_progress(self, n: int = 1) -> None:
        self.calls.append(("progress", n))
        self.progress += n

    def is_cancelled(self) -> bool:
        return self.cancel_at is not None and self.progress >= self.cancel_at


class TestCountNoReturn:

    def test_counts_only_no_return(self):
        art = build_artifact("a", 100, 10)
        result = count_no_return_functions(art, NULL_MONITOR)

        assert result.n_no_return == 10
        assert result.n_visited == 100
        assert result.n_synthetic == 0
        assert result.cancelled is False
        assert result.artifact_name == "a"

    def test_synthetic_entries_excluded(self):
        art = build_artifact("a", 100, 10, n_synthetic=7, n_synthetic_no_return=7)
        result = count_no_return_functions(art, NULL_MONITOR)

        assert result.n_no_return == 10
        assert result.n_synthetic == 7
        assert result.n_visited == 107

    def test_empty_artifact(self):
        result = count_no_return_functions(build_artifact("a", 0, 0), NULL_MONITOR)
        assert result.n_no_return == 0
        assert result.n_visited == 0

    def test_only_entry_address_matters(self):
        """An instruction inside the body does not make a stub real."""
        art = ProgramArtifact(
            "a",
            [FunctionRecord(0x1000, "stub", no_return=True)],
            instruction_addresses=[0x1004, 0x1008],
        )
        result = count_no_return_functions(art, NULL_MONITOR)
        assert result.n_no_return == 0
        assert result.n_synthetic == 1


class TestProgressAndCancellation:

    def test_indeterminate_then_one_unit_per_function(self):
        monitor = _RecordingMonitor()
        count_no_return_functions(build_artifact("a", 5, 1), monitor)

        assert monitor.calls[0] == ("indeterminate", True)
        assert monitor.calls[1:] == [("progress", 1)] * 5

    def test_synthetic_entries_still_report_progress(self):
        monitor = _RecordingMonitor()
        count_no_return_functions(build_artifact("a", 3, 0, n_synthetic=2), monitor)
        assert monitor.progress == 5

    def test_cancel_mid_pass_returns_partial_count(self):
        monitor = _RecordingMonitor(cancel_at=4)
        art = build_artifact("a", 100, 100)
        result = count_no_return_functions(art, monitor)

        assert result.cancelled is True
        assert result.n_visited == 4
        assert result.n_no_return == 4

    def test_already_cancelled_visits_nothing(self):
        monitor = CancellableMonitor()
        monitor.cancel()
        result = count_no_return_functions(build_artifact("a", 10, 3), monitor)

        assert result.cancelled is True
        assert result.n_visited == 0
        assert monitor.progress == 0

    def test_cancel_after_last_function_is_not_cancelled(self):
        """Cancellation is only observed between functions."""
        monitor = StopAfterMonitor(10)
        result = count_no_return_functions(build_artifact("a", 10, 3), monitor)

        assert result.cancelled is False
        assert result.n_no_return == 3
        assert monitor.is_cancelled() is True


class TestCancellableMonitor:

    def test_progress_never_cancels_on_its_own(self):
        monitor = CancellableMonitor()
        result = count_no_return_functions(build_artifact("a", 500, 5), monitor)

        assert monitor.progress == 500
        assert monitor.is_cancelled() is False
        assert result.cancelled is False

    def test_cancel_is_sticky(self):
        monitor = CancellableMonitor()
        monitor.cancel()
        monitor.increment_progress(3)
        assert monitor.is_cancelled() is True
        assert monitor.progress == 3


class TestProgramArtifact:

    def test_functions_sorted_by_entry(self):
        art = ProgramArtifact(
            "a",
            [FunctionRecord(0x30, "c"), FunctionRecord(0x10, "a"), FunctionRecord(0x20, "b")],
            instruction_addresses=[],
        )
        assert [f.entry_va for f in art.iter_functions()] == [0x10, 0x20, 0x30]

    def test_enumeration_is_restartable(self):
        art = build_artifact("a", 4, 2)
        first = list(art.iter_functions())
        second = list(art.iter_functions())
        assert first == second
        assert len(art) == 4

    def test_has_instruction_at(self):
        art = ProgramArtifact("a", [], instruction_addresses=[0x400])
        assert art.has_instruction_at(0x400) is True
        assert art.has_instruction_at(0x401) is False
