"""Remove selected results from disk and from the published result set."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from dr_analyzer.results.store import ResultStore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DeletionReport:
    """What a deletion request did on disk and in memory."""

    requested: int = 0
    files_deleted: list[Path] = field(default_factory=list)
    files_failed: list[Path] = field(default_factory=list)
    dirs_removed: list[Path] = field(default_factory=list)
    removed_from_results: int = 0


def confirmation_message(file_count: int, cascade_empty_parents: bool) -> str:
    """Prompt text shown before files are deleted from disk."""

    folders = " and their parent folders" if cascade_empty_parents else ""
    return f"This will permanently delete {file_count} file(s) from your system{folders}. Continue?"


def _directory_is_empty(directory: Path) -> bool:
    with os.scandir(directory) as entries:
        return next(entries, None) is None


def remove_empty_parent(path: Path, logger: logging.Logger | None = None) -> Path | None:
    """Remove the immediate parent of ``path`` if it has no entries left."""

    effective_logger = logger or LOGGER
    parent = path.parent
    try:
        if not _directory_is_empty(parent):
            return None
    except OSError as exc:
        effective_logger.warning("deletion.parent_unreadable dir=%s error=%s", parent, exc)
        return None
    try:
        parent.rmdir()
    except OSError as exc:
        effective_logger.warning("deletion.parent_remove_failed dir=%s error=%s", parent, exc)
        return None
    effective_logger.info("deletion.parent_removed dir=%s", parent)
    return parent


def delete_results(
    store: ResultStore,
    paths: Iterable[Path],
    *,
    delete_files: bool,
    cascade_empty_parents: bool = False,
    logger: logging.Logger | None = None,
) -> DeletionReport:
    """Delete ``paths`` and drop them from ``store``.

    Filesystem failures are logged and never stop the batch. Every requested
    path leaves the store whatever happened on disk. With ``delete_files``
    false nothing on disk is touched and ``cascade_empty_parents`` is ignored.
    """

    effective_logger = logger or LOGGER
    requested = list(dict.fromkeys(Path(path) for path in paths))
    report = DeletionReport(requested=len(requested))

    if delete_files:
        for path in requested:
            try:
                path.unlink()
            except OSError as exc:
                effective_logger.warning("deletion.file_failed path=%s error=%s", path, exc)
                report.files_failed.append(path)
                continue
            report.files_deleted.append(path)
            if cascade_empty_parents:
                removed_dir = remove_empty_parent(path, logger=effective_logger)
                if removed_dir is not None:
                    report.dirs_removed.append(removed_dir)

    report.removed_from_results = store.remove_paths(requested)
    effective_logger.info(
        "deletion.done requested=%s files_deleted=%s files_failed=%s dirs_removed=%s removed_from_results=%s",
        report.requested,
        len(report.files_deleted),
        len(report.files_failed),
        len(report.dirs_removed),
        report.removed_from_results,
    )
    return report
