"""Session facade used by front ends: select, scan, delete, clear."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from dr_analyzer.cleanup.deletion import DeletionReport, confirmation_message, delete_results
from dr_analyzer.config import AppSettings, DeletionConfig
from dr_analyzer.errors import ConfirmationRequiredError, DrAnalyzerError
from dr_analyzer.ingest.discover import discover_targets
from dr_analyzer.results.models import ResultRow, ScanResult
from dr_analyzer.results.store import ResultStore
from dr_analyzer.scan.pipeline import ScanBatch, ScanProgress, ScanRunOptions, pending_results, scan_directory

LOGGER = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class AnalyzerSession:
    """Owns the result store and the selected root for one front end."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.store = ResultStore()
        self.selected_root: Path | None = None
        self._logger = logger or LOGGER

    @property
    def scan_options(self) -> ScanRunOptions:
        return ScanRunOptions.from_settings(self.settings)

    @property
    def deletion(self) -> DeletionConfig:
        return self.settings.deletion

    def select_directory(self, root: Path) -> list[ResultRow]:
        """List ``root`` and publish every file as pending."""

        targets = discover_targets(root, extensions=self.scan_options.extensions, logger=self._logger)
        self.selected_root = root
        self.store.replace(pending_results(targets))
        self._logger.info("session.selected root=%s files=%s", root, len(targets))
        return self.store.rows()

    def scan(
        self,
        root: Path | None = None,
        *,
        on_progress: Callable[[ScanProgress], None] | None = None,
    ) -> ScanBatch:
        """Scan the selected (or given) root and publish the outcome."""

        target_root = root or self.selected_root
        if target_root is None:
            raise DrAnalyzerError("no directory selected")
        batch = scan_directory(target_root, self.scan_options, on_progress=on_progress, logger=self._logger)
        self.selected_root = target_root
        self.store.replace(batch.results)
        return batch

    def delete(
        self,
        paths: Iterable[Path],
        *,
        confirm: ConfirmCallback | None = None,
    ) -> DeletionReport | None:
        """Remove ``paths``, asking ``confirm`` first when files leave the disk.

        Returns ``None`` when the confirmation is declined.
        """

        requested = [Path(path) for path in paths]
        if not requested:
            return DeletionReport()

        delete_files = self.deletion.delete_files
        cascade = delete_files and self.deletion.delete_empty_parents
        if delete_files:
            if confirm is None:
                raise ConfirmationRequiredError("deleting files from disk requires confirmation")
            if not confirm(confirmation_message(len(requested), cascade)):
                self._logger.info("session.delete_declined count=%s", len(requested))
                return None

        return delete_results(
            self.store,
            requested,
            delete_files=delete_files,
            cascade_empty_parents=cascade,
            logger=self._logger,
        )

    def clear(self) -> None:
        self.store.clear()
        self.selected_root = None

    def results(self) -> tuple[ScanResult, ...]:
        return self.store.snapshot()

    def rows(self) -> list[ResultRow]:
        return self.store.rows()
