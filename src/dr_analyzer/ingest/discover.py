"""Discover rating log files below a root directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dr_analyzer.errors import ScanRootError

LOGGER = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = ("txt", "log")


@dataclass(frozen=True, slots=True)
class ScanTarget:
    """A discovered file eligible for analysis."""

    path: Path
    filename: str


def has_target_extension(path: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    """Case-sensitive extension check; ``.txt`` alone is a name without extension."""

    suffix = path.suffix
    return bool(suffix) and suffix[1:] in tuple(extensions)


def ensure_scan_root(root: Path) -> Path:
    """Raise ``ScanRootError`` unless ``root`` is an existing, listable directory."""

    if not root.exists():
        raise ScanRootError(root, "scan root does not exist")
    if not root.is_dir():
        raise ScanRootError(root, "scan root is not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise ScanRootError(root, "scan root is not readable") from exc
    return root


def discover_targets(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    logger: logging.Logger | None = None,
) -> list[ScanTarget]:
    """Recursively collect regular files with a recognized extension.

    Symlinks are neither returned nor followed. Entries below the root that
    fail during the walk are skipped; an unlistable root raises
    ``ScanRootError``. The returned order follows the walk, not a sort.
    """

    effective_logger = logger or LOGGER
    ensure_scan_root(root)
    wanted = tuple(extensions)

    targets: list[ScanTarget] = []
    pending_dirs: list[Path] = [root]
    while pending_dirs:
        directory = pending_dirs.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending_dirs.append(Path(entry.path))
                        elif entry.is_file(follow_symlinks=False):
                            entry_path = Path(entry.path)
                            if has_target_extension(entry_path, wanted):
                                targets.append(ScanTarget(path=entry_path, filename=entry.name))
                    except OSError as exc:
                        effective_logger.debug("discover.entry_skipped path=%s error=%s", entry.path, exc)
        except OSError as exc:
            if directory == root:
                raise ScanRootError(root, "scan root is not readable") from exc
            effective_logger.debug("discover.dir_skipped path=%s error=%s", directory, exc)

    effective_logger.debug("discover.done root=%s targets=%s", root, len(targets))
    return targets
