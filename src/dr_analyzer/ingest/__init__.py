"""Ingestion package for target discovery and rating extraction."""

from dr_analyzer.ingest.discover import (
    DEFAULT_EXTENSIONS,
    ScanTarget,
    discover_targets,
    ensure_scan_root,
    has_target_extension,
)
from dr_analyzer.ingest.extract import DR_PATTERN, analyze_file, classify_text

__all__ = [
    "DEFAULT_EXTENSIONS",
    "ScanTarget",
    "discover_targets",
    "ensure_scan_root",
    "has_target_extension",
    "DR_PATTERN",
    "analyze_file",
    "classify_text",
]
