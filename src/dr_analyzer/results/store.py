"""Lock-guarded holder of the currently published results."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable

from dr_analyzer.results.models import ResultRow, ScanResult
from dr_analyzer.results.ordering import sort_results


class ResultStore:
    """The process-wide result set.

    All access goes through one lock, held only long enough to swap or filter
    the stored tuple. Sorting and any filesystem or queue work happen outside
    it. The stored sequence is always in canonical order and paths are unique.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: tuple[ScanResult, ...] = ()

    def replace(self, batch: Iterable[ScanResult]) -> tuple[ScanResult, ...]:
        """Replace the whole set with ``batch``; later duplicates of a path win."""

        by_path: dict[Path, ScanResult] = {}
        for result in batch:
            by_path[result.path] = result
        ordered = tuple(sort_results(by_path.values()))
        with self._lock:
            self._results = ordered
        return ordered

    def snapshot(self) -> tuple[ScanResult, ...]:
        with self._lock:
            return self._results

    def rows(self) -> list[ResultRow]:
        return [result.to_row() for result in self.snapshot()]

    def remove_paths(self, paths: Iterable[Path]) -> int:
        """Drop every result whose path is in ``paths``; return how many were dropped."""

        doomed = {Path(path) for path in paths}
        with self._lock:
            kept = tuple(result for result in self._results if result.path not in doomed)
            removed = len(self._results) - len(kept)
            self._results = kept
        return removed

    def clear(self) -> None:
        with self._lock:
            self._results = ()

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
