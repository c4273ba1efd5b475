"""Canonical ordering of scan results."""

from __future__ import annotations

from typing import Iterable

from dr_analyzer.results.models import Error, Pending, Rated, ScanResult

RATED_BUCKET = 0
ERROR_BUCKET = 1
PENDING_BUCKET = 2


def result_sort_key(result: ScanResult) -> tuple[int, int, tuple[str, ...]]:
    """Sort key: rated (highest first), then errors, then pending; path breaks ties.

    Paths compare component by component, so two results with distinct paths
    never share a key.
    """

    outcome = result.outcome
    if isinstance(outcome, Rated):
        return (RATED_BUCKET, -outcome.value, result.path.parts)
    if isinstance(outcome, Error):
        return (ERROR_BUCKET, 0, result.path.parts)
    if isinstance(outcome, Pending):
        return (PENDING_BUCKET, 0, result.path.parts)
    raise TypeError(f"unknown outcome type: {type(outcome).__name__}")


def compare_results(left: ScanResult, right: ScanResult) -> int:
    """Three-way comparison consistent with ``result_sort_key``."""

    left_key = result_sort_key(left)
    right_key = result_sort_key(right)
    return (left_key > right_key) - (left_key < right_key)


def sort_results(batch: Iterable[ScanResult]) -> list[ScanResult]:
    """Return ``batch`` in canonical display order."""

    return sorted(batch, key=result_sort_key)
