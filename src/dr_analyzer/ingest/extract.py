"""Extract the DR rating from a meter log's text."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from dr_analyzer.results.models import MAX_RATING, AnalysisOutcome, Error, ErrorReason, Rated

LOGGER = logging.getLogger(__name__)

ERROR_TOKEN = "ERR"
# English and Russian labels written by DR meter tools for the same value.
# ASCII digits only; \d would also accept other Unicode decimal digits.
DR_PATTERN = re.compile(
    r"Official DR value:\s*DR([0-9]+|ERR)|Реальные значения DR:\s*DR([0-9]+|ERR)"
)


def classify_text(text: str) -> AnalysisOutcome:
    """Classify decoded file text into a rating or an error outcome."""

    match = DR_PATTERN.search(text)
    if match is None:
        return Error(ErrorReason.NO_MATCH)

    captured = match.group(1) if match.group(1) is not None else match.group(2)
    if captured == ERROR_TOKEN:
        return Error(ErrorReason.ERROR_TOKEN)

    significant = captured.lstrip("0") or "0"
    if len(significant) > len(str(MAX_RATING)):
        return Error(ErrorReason.OVERFLOW)
    value = int(significant)
    if value > MAX_RATING:
        return Error(ErrorReason.OVERFLOW)
    return Rated(value)


def analyze_file(path: Path, logger: logging.Logger | None = None) -> AnalysisOutcome:
    """Read one file fully and classify it. Never raises for I/O problems."""

    effective_logger = logger or LOGGER
    try:
        raw_bytes = path.read_bytes()
    except OSError as exc:
        effective_logger.debug("extract.read_failed path=%s error=%s", path, exc)
        return Error(ErrorReason.READ_FAILURE)

    outcome = classify_text(raw_bytes.decode("utf-8", errors="replace"))
    if isinstance(outcome, Error):
        effective_logger.debug("extract.no_rating path=%s reason=%s", path, outcome.reason.value)
    return outcome
