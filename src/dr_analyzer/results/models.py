"""Outcome and result records shared by the scan, ordering and cleanup stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

MAX_RATING = 254
ERROR_LABEL = "ERR"
PENDING_LABEL = "PENDING"


class ErrorReason(str, Enum):
    """Why a scanned file produced no usable rating.

    Every reason maps to the same ``Error`` outcome; the reason is carried for
    logs and reports only.
    """

    READ_FAILURE = "read_failure"
    NO_MATCH = "no_match"
    ERROR_TOKEN = "error_token"
    OVERFLOW = "overflow"


@dataclass(frozen=True, slots=True)
class Rated:
    """Scanned file with a rating in ``0..MAX_RATING``."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_RATING:
            raise ValueError(f"rating must be within 0..{MAX_RATING}, got {self.value}")

    @property
    def label(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Error:
    """Scanned file without a usable rating."""

    reason: ErrorReason = field(default=ErrorReason.NO_MATCH, compare=False)

    @property
    def label(self) -> str:
        return ERROR_LABEL


@dataclass(frozen=True, slots=True)
class Pending:
    """Discovered file that has not been scanned yet."""

    @property
    def label(self) -> str:
        return PENDING_LABEL


AnalysisOutcome = Union[Rated, Error, Pending]


@dataclass(frozen=True, slots=True)
class ResultRow:
    """Display-ready record published to presentation layers."""

    display_name: str
    full_path: str
    rating_label: str


@dataclass(frozen=True, slots=True)
class ScanResult:
    """One file's outcome within a scan pass."""

    filename: str
    path: Path
    outcome: AnalysisOutcome

    @property
    def rating_label(self) -> str:
        return self.outcome.label

    @property
    def rating(self) -> int | None:
        return self.outcome.value if isinstance(self.outcome, Rated) else None

    def to_row(self) -> ResultRow:
        return ResultRow(
            display_name=self.filename,
            full_path=str(self.path),
            rating_label=self.rating_label,
        )

    @classmethod
    def pending(cls, path: Path, filename: str | None = None) -> "ScanResult":
        """Build the not-yet-scanned placeholder for a discovered file."""

        return cls(filename=filename or path.name, path=path, outcome=Pending())
