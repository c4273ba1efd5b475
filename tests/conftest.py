"""Shared fixtures for the dr_analyzer test suite."""

from __future__ import annotations

from pathlib import Path

import pytest


def write_dr_log(path: Path, value: str | int | None, *, russian: bool = False) -> Path:
    """Write a meter log carrying ``DR<value>``; ``None`` writes a log without a tag."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if value is None:
        body = "foobar2000 1.6\nno dynamic range summary here\n"
    elif russian:
        body = f"Анализ\nРеальные значения DR: DR{value}\n"
    else:
        body = f"--------------\nOfficial DR value: DR{value}\n\nGain: 0 dB\n"
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture
def library(tmp_path: Path) -> Path:
    """A small tree of album logs with every outcome represented."""

    root = tmp_path / "library"
    write_dr_log(root / "Artist A" / "Album 1" / "dr.txt", 12)
    write_dr_log(root / "Artist A" / "Album 2" / "dr.log", 8)
    write_dr_log(root / "Artist B" / "Album 3" / "foo_dr.txt", 14, russian=True)
    write_dr_log(root / "Artist B" / "Album 4" / "dr.txt", "ERR")
    write_dr_log(root / "Artist C" / "notes.txt", None)
    (root / "Artist C" / "cover.jpg").write_bytes(b"\xff\xd8\xff")
    return root
