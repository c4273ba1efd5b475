from __future__ import annotations

import pathlib
from pathlib import Path

import pytest

from dr_analyzer.errors import ScanRootError
from dr_analyzer.results.models import Error, ErrorReason, Pending, Rated
from dr_analyzer.scan import pipeline as pipeline_module
from dr_analyzer.scan.pipeline import ScanProgress, ScanRunOptions, run_scan, scan_directory

from tests.conftest import write_dr_log


def _many_logs(root: Path, count: int) -> None:
    for index in range(count):
        write_dr_log(root / f"album{index % 5}" / f"dr{index:03d}.txt", index % 15)


def test_empty_directory_emits_single_zero_tick(tmp_path: Path) -> None:
    handle = run_scan(tmp_path)

    ticks = list(handle.progress())
    batch = handle.wait(timeout=10)

    assert ticks == [ScanProgress(completed=0, total=0)]
    assert batch.results == ()
    assert ticks[0].fraction == 1.0


def test_progress_is_complete_and_ordered_under_backpressure(tmp_path: Path) -> None:
    _many_logs(tmp_path, 60)
    options = ScanRunOptions(workers=8, progress_capacity=1)

    handle = run_scan(tmp_path, options)
    ticks = list(handle.progress())
    batch = handle.wait(timeout=30)

    assert [tick.completed for tick in ticks] == list(range(1, 61))
    assert all(tick.total == 60 for tick in ticks)
    assert len(batch.results) == 60
    assert {result.outcome for result in batch.results} == {Rated(value) for value in range(15)}
    assert not batch.cancelled


def test_batch_covers_every_file(library: Path) -> None:
    batch = scan_directory(library, ScanRunOptions(workers=2))

    outcomes = {result.path.relative_to(library).as_posix(): result.outcome for result in batch.results}
    assert outcomes == {
        "Artist A/Album 1/dr.txt": Rated(12),
        "Artist A/Album 2/dr.log": Rated(8),
        "Artist B/Album 3/foo_dr.txt": Rated(14),
        "Artist B/Album 4/dr.txt": Error(),
        "Artist C/notes.txt": Error(),
    }
    assert batch.outcome_counts() == {"rated": 3, "error": 2, "pending": 0}
    assert batch.run_id.startswith("scan-run-")


def test_unreadable_file_does_not_fail_batch(library: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real_read_bytes = pathlib.Path.read_bytes

    def fake_read_bytes(self):
        if self.name == "dr.log":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_bytes(self)

    monkeypatch.setattr(pathlib.Path, "read_bytes", fake_read_bytes)

    batch = scan_directory(library)

    by_name = {result.path.relative_to(library).as_posix(): result.outcome for result in batch.results}
    assert len(by_name) == 5
    assert by_name["Artist A/Album 2/dr.log"].reason is ErrorReason.READ_FAILURE
    assert by_name["Artist A/Album 1/dr.txt"] == Rated(12)


def test_unexpected_worker_error_becomes_error_outcome(library: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real_analyze = pipeline_module.analyze_file

    def flaky_analyze(path, logger=None):
        if path.name == "foo_dr.txt":
            raise RuntimeError("boom")
        return real_analyze(path, logger=logger)

    monkeypatch.setattr(pipeline_module, "analyze_file", flaky_analyze)

    batch = scan_directory(library)

    outcome = next(result.outcome for result in batch.results if result.filename == "foo_dr.txt")
    assert isinstance(outcome, Error)
    assert len(batch.results) == 5


def test_on_progress_callback_receives_every_tick(library: Path) -> None:
    ticks: list[ScanProgress] = []

    scan_directory(library, on_progress=ticks.append)

    assert [tick.completed for tick in ticks] == [1, 2, 3, 4, 5]


def test_wait_without_draining_progress(tmp_path: Path) -> None:
    _many_logs(tmp_path, 30)

    batch = run_scan(tmp_path, ScanRunOptions(progress_capacity=2)).wait(timeout=30)

    assert len(batch.results) == 30


def test_cancel_leaves_unstarted_files_pending(tmp_path: Path) -> None:
    _many_logs(tmp_path, 40)

    handle = run_scan(tmp_path, ScanRunOptions(workers=1, progress_capacity=1))
    handle.cancel()
    ticks = list(handle.progress())
    batch = handle.wait(timeout=30)

    pending = [result for result in batch.results if isinstance(result.outcome, Pending)]
    scanned = [result for result in batch.results if not isinstance(result.outcome, Pending)]
    assert batch.cancelled
    assert len(batch.results) == 40
    assert len(scanned) == len(ticks)
    assert len(pending) == 40 - len(ticks)
    assert len(ticks) < 40


def test_missing_root_fails_before_starting(tmp_path: Path) -> None:
    with pytest.raises(ScanRootError):
        run_scan(tmp_path / "missing")


def test_failed_run_reraises_on_every_wait(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_discovery(root, extensions=(), logger=None):
        raise RuntimeError("listing exploded")

    monkeypatch.setattr(pipeline_module, "discover_targets", broken_discovery)
    handle = run_scan(tmp_path)

    with pytest.raises(RuntimeError, match="listing exploded"):
        handle.wait(timeout=5)
    with pytest.raises(RuntimeError, match="listing exploded"):
        handle.wait(timeout=5)
    assert list(handle.progress()) == []


def test_finished_run_returns_same_batch_on_every_wait(tmp_path: Path) -> None:
    _many_logs(tmp_path, 3)
    handle = run_scan(tmp_path)

    first = handle.wait(timeout=30)

    assert handle.wait(timeout=0.01) is first
