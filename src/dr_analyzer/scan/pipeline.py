"""Concurrent scan orchestration with bounded progress reporting."""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Iterator
from uuid import uuid4

from dr_analyzer.config import AppSettings
from dr_analyzer.ingest.discover import DEFAULT_EXTENSIONS, ScanTarget, discover_targets, ensure_scan_root
from dr_analyzer.ingest.extract import analyze_file
from dr_analyzer.results.models import AnalysisOutcome, Error, ErrorReason, Pending, Rated, ScanResult

LOGGER = logging.getLogger(__name__)

DEFAULT_PROGRESS_CAPACITY = 100
_END_OF_PROGRESS = object()


@dataclass(frozen=True, slots=True)
class ScanRunOptions:
    """Runtime options for one scan pass."""

    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    workers: int | None = None
    progress_capacity: int = DEFAULT_PROGRESS_CAPACITY

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ScanRunOptions":
        return cls(
            extensions=tuple(settings.scan.extensions),
            workers=settings.scan.workers,
            progress_capacity=settings.scan.progress_capacity,
        )

    def effective_workers(self) -> int:
        return max(1, self.workers or os.cpu_count() or 1)


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Files finished so far out of the discovered total."""

    completed: int
    total: int

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return self.completed / self.total


@dataclass(frozen=True, slots=True)
class ScanBatch:
    """Terminal message of a scan pass. ``results`` order is unspecified."""

    run_id: str
    root: Path
    results: tuple[ScanResult, ...]
    started_ts: datetime
    elapsed_seconds: float
    cancelled: bool = False

    def outcome_counts(self) -> dict[str, int]:
        counts = {"rated": 0, "error": 0, "pending": 0}
        for result in self.results:
            if isinstance(result.outcome, Rated):
                counts["rated"] += 1
            elif isinstance(result.outcome, Error):
                counts["error"] += 1
            else:
                counts["pending"] += 1
        return counts


class ScanHandle:
    """Consumer side of a running scan.

    Drain ``progress()`` until it is exhausted, then call ``wait()`` for the
    single result batch. ``wait()`` drains leftover progress itself, so calling
    it directly is also safe.
    """

    def __init__(
        self,
        run_id: str,
        root: Path,
        progress_queue: "queue.Queue[object]",
        batch_queue: "queue.Queue[ScanBatch | BaseException]",
        cancel_event: threading.Event,
        thread: threading.Thread | None = None,
    ) -> None:
        self.run_id = run_id
        self.root = root
        self._progress_queue = progress_queue
        self._batch_queue = batch_queue
        self._cancel_event = cancel_event
        self._thread = thread
        self._progress_done = False
        self._batch: ScanBatch | None = None
        self._failure: BaseException | None = None

    def progress(self) -> Iterator[ScanProgress]:
        while not self._progress_done:
            item = self._progress_queue.get()
            if item is _END_OF_PROGRESS:
                self._progress_done = True
                return
            yield item  # type: ignore[misc]

    def wait(self, timeout: float | None = None) -> ScanBatch:
        if self._batch is not None:
            return self._batch
        if self._failure is not None:
            raise self._failure
        for _ in self.progress():
            pass
        item = self._batch_queue.get(timeout=timeout)
        if self._thread is not None:
            self._thread.join()
        if isinstance(item, BaseException):
            self._failure = item
            raise item
        self._batch = item
        return item

    def cancel(self) -> None:
        """Ask workers to skip files they have not started yet."""

        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()


class _ScanProducer:
    """Producer side: discovery, the worker pool and both queues."""

    def __init__(
        self,
        run_id: str,
        root: Path,
        progress_queue: "queue.Queue[object]",
        batch_queue: "queue.Queue[ScanBatch | BaseException]",
        cancel_event: threading.Event,
        options: ScanRunOptions,
        logger: logging.Logger,
    ) -> None:
        self._run_id = run_id
        self._root = root
        self._progress_queue = progress_queue
        self._batch_queue = batch_queue
        self._cancel_event = cancel_event
        self._options = options
        self._logger = logger
        self._counter_lock = threading.Lock()
        self._completed = 0

    def run(self) -> None:
        run_id = self._run_id
        root = self._root
        started_ts = datetime.now(timezone.utc)
        started_mono = time.monotonic()
        try:
            targets = discover_targets(root, extensions=self._options.extensions, logger=self._logger)
            total = len(targets)
            self._logger.info(
                "scan_run.start run_id=%s root=%s total=%s workers=%s",
                run_id,
                root,
                total,
                self._options.effective_workers(),
            )
            if total == 0:
                self._progress_queue.put(ScanProgress(completed=0, total=0))
                results: tuple[ScanResult, ...] = ()
            else:
                results = self._analyze_all(targets, total)
        except Exception as exc:
            self._logger.exception("scan_run.failed run_id=%s root=%s", run_id, root)
            self._progress_queue.put(_END_OF_PROGRESS)
            self._batch_queue.put(exc)
            return

        batch = ScanBatch(
            run_id=run_id,
            root=root,
            results=results,
            started_ts=started_ts,
            elapsed_seconds=round(time.monotonic() - started_mono, 3),
            cancelled=self._cancel_event.is_set(),
        )
        self._logger.info(
            "scan_run.done run_id=%s counts=%s cancelled=%s elapsed_sec=%.3f",
            run_id,
            batch.outcome_counts(),
            batch.cancelled,
            batch.elapsed_seconds,
        )
        self._progress_queue.put(_END_OF_PROGRESS)
        self._batch_queue.put(batch)

    def _analyze_all(self, targets: list[ScanTarget], total: int) -> tuple[ScanResult, ...]:
        def job(target: ScanTarget) -> ScanResult:
            if self._cancel_event.is_set():
                return ScanResult(filename=target.filename, path=target.path, outcome=Pending())
            outcome = self._analyze_one(target)
            # Held across put so ticks leave in counter order; blocks on a full queue.
            with self._counter_lock:
                self._completed += 1
                self._progress_queue.put(ScanProgress(completed=self._completed, total=total))
            return ScanResult(filename=target.filename, path=target.path, outcome=outcome)

        with ThreadPoolExecutor(
            max_workers=self._options.effective_workers(),
            thread_name_prefix="dr-scan",
        ) as executor:
            return tuple(executor.map(job, targets))

    def _analyze_one(self, target: ScanTarget) -> AnalysisOutcome:
        try:
            return analyze_file(target.path, logger=self._logger)
        except Exception:
            self._logger.exception("scan_run.file_failed path=%s", target.path)
            return Error(ErrorReason.READ_FAILURE)


def run_scan(
    root: Path,
    options: ScanRunOptions | None = None,
    *,
    logger: logging.Logger | None = None,
) -> ScanHandle:
    """Start scanning ``root`` in the background and return the consumer handle.

    An inaccessible root raises ``ScanRootError`` here, before any thread starts.
    """

    effective_logger = logger or LOGGER
    run_options = options or ScanRunOptions()
    ensure_scan_root(root)

    run_id = f"scan-run-{uuid4().hex[:12]}"
    progress_queue: "queue.Queue[object]" = queue.Queue(maxsize=max(1, run_options.progress_capacity))
    batch_queue: "queue.Queue[ScanBatch | BaseException]" = queue.Queue(maxsize=1)
    cancel_event = threading.Event()

    producer = _ScanProducer(
        run_id,
        root,
        progress_queue,
        batch_queue,
        cancel_event,
        run_options,
        effective_logger,
    )
    thread = threading.Thread(target=producer.run, name=f"dr-scan-{run_id}", daemon=True)
    handle = ScanHandle(run_id, root, progress_queue, batch_queue, cancel_event, thread)
    thread.start()
    return handle


def scan_directory(
    root: Path,
    options: ScanRunOptions | None = None,
    *,
    on_progress: Callable[[ScanProgress], None] | None = None,
    logger: logging.Logger | None = None,
) -> ScanBatch:
    """Run a scan to completion, forwarding each progress tick to ``on_progress``."""

    handle = run_scan(root, options, logger=logger)
    for tick in handle.progress():
        if on_progress is not None:
            on_progress(tick)
    return handle.wait()


def pending_results(targets: Iterable[ScanTarget]) -> list[ScanResult]:
    """Placeholder results for files listed but not yet scanned."""

    return [ScanResult.pending(target.path, target.filename) for target in targets]
