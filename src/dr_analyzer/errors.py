"""Exception types raised by dr_analyzer."""

from __future__ import annotations

from pathlib import Path


class DrAnalyzerError(Exception):
    """Base class for all dr_analyzer errors."""


class ScanRootError(DrAnalyzerError):
    """Raised when a scan root is missing or is not a directory."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"{reason}: {root}")
        self.root = root
        self.reason = reason


class ConfirmationRequiredError(DrAnalyzerError):
    """Raised when a destructive deletion is requested without a confirmation step."""
