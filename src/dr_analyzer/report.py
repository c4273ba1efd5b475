"""Result report writers with atomic file replacement."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence
from uuid import uuid4

import polars as pl

from dr_analyzer.results.models import ScanResult

REPORT_SCHEMA: dict[str, pl.DataType] = {
    "display_name": pl.String,
    "full_path": pl.String,
    "rating_label": pl.String,
    "rating": pl.Int64,
    "error_reason": pl.String,
}


def _atomic_temp_path(target_path: Path) -> Path:
    """Create a unique temp path next to the target for atomic replacement."""

    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def results_frame(results: Sequence[ScanResult]) -> pl.DataFrame:
    """Build a report frame preserving the given result order."""

    records = []
    for result in results:
        row = result.to_row()
        reason = getattr(result.outcome, "reason", None)
        records.append(
            {
                "display_name": row.display_name,
                "full_path": row.full_path,
                "rating_label": row.rating_label,
                "rating": result.rating,
                "error_reason": reason.value if reason is not None else None,
            }
        )
    if not records:
        return pl.DataFrame(schema=REPORT_SCHEMA)
    return pl.DataFrame(records, schema=REPORT_SCHEMA)


def write_results_report(results: Sequence[ScanResult], output_path: Path) -> Path:
    """Write results as Parquet (``.parquet``) or CSV (anything else)."""

    df = results_frame(results)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _atomic_temp_path(output_path)
    try:
        if output_path.suffix.lower() == ".parquet":
            df.write_parquet(temp_path)
        else:
            df.write_csv(temp_path)
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path
