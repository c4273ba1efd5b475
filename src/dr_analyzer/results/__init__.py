"""Result records, canonical ordering and the shared result store."""

from dr_analyzer.results.models import (
    ERROR_LABEL,
    MAX_RATING,
    PENDING_LABEL,
    AnalysisOutcome,
    Error,
    ErrorReason,
    Pending,
    Rated,
    ResultRow,
    ScanResult,
)
from dr_analyzer.results.ordering import compare_results, result_sort_key, sort_results
from dr_analyzer.results.store import ResultStore

__all__ = [
    "ERROR_LABEL",
    "MAX_RATING",
    "PENDING_LABEL",
    "AnalysisOutcome",
    "Error",
    "ErrorReason",
    "Pending",
    "Rated",
    "ResultRow",
    "ScanResult",
    "compare_results",
    "result_sort_key",
    "sort_results",
    "ResultStore",
]
