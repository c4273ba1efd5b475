"""Concurrent scan package."""

from dr_analyzer.scan.pipeline import (
    ScanBatch,
    ScanHandle,
    ScanProgress,
    ScanRunOptions,
    pending_results,
    run_scan,
    scan_directory,
)

__all__ = [
    "ScanBatch",
    "ScanHandle",
    "ScanProgress",
    "ScanRunOptions",
    "pending_results",
    "run_scan",
    "scan_directory",
]
