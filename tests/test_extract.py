from __future__ import annotations

from pathlib import Path

import pytest

from dr_analyzer.ingest.extract import analyze_file, classify_text
from dr_analyzer.results.models import Error, ErrorReason, Pending, Rated

from tests.conftest import write_dr_log


@pytest.mark.parametrize("value", [0, 1, 9, 14, 99, 254])
def test_rated_values_in_range(tmp_path: Path, value: int) -> None:
    path = write_dr_log(tmp_path / "dr.txt", value)

    assert analyze_file(path) == Rated(value)


def test_russian_label_is_equivalent(tmp_path: Path) -> None:
    path = write_dr_log(tmp_path / "dr.txt", 11, russian=True)

    assert analyze_file(path) == Rated(11)


@pytest.mark.parametrize("russian", [False, True])
def test_error_token_in_either_language(tmp_path: Path, russian: bool) -> None:
    path = write_dr_log(tmp_path / "dr.txt", "ERR", russian=russian)

    outcome = analyze_file(path)

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorReason.ERROR_TOKEN


def test_no_tag_is_error() -> None:
    outcome = classify_text("Track 1  DR12  -0.10 dB\n")

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorReason.NO_MATCH


@pytest.mark.parametrize("digits", ["255", "1000", "99999999999999999999"])
def test_values_above_range_are_errors(digits: str) -> None:
    outcome = classify_text(f"Official DR value: DR{digits}")

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorReason.OVERFLOW


def test_first_occurrence_wins() -> None:
    text = "Реальные значения DR: DR7\n...\nOfficial DR value: DR13\n"

    assert classify_text(text) == Rated(7)


def test_match_is_case_sensitive() -> None:
    assert isinstance(classify_text("official dr value: DR10"), Error)
    assert isinstance(classify_text("Official DR value: dr10"), Error)


def test_whitespace_and_leading_zeros() -> None:
    assert classify_text("Official DR value:\n\t  DR007") == Rated(7)
    assert classify_text("prefix Official DR value:DR5 suffix") == Rated(5)


@pytest.mark.parametrize(
    "text",
    [
        "Official DR value: DR١٢",
        "Реальные значения DR: DR١٢",
        "Official DR value: DR１２",
    ],
)
def test_non_ascii_digits_are_not_ratings(text: str) -> None:
    outcome = classify_text(text)

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorReason.NO_MATCH


def test_invalid_utf8_is_replaced_not_fatal(tmp_path: Path) -> None:
    path = tmp_path / "latin1.log"
    path.write_bytes(b"K\xfcnstler \xff\xfe\nOfficial DR value: DR10\n")

    assert analyze_file(path) == Rated(10)


def test_unreadable_file_is_error(tmp_path: Path) -> None:
    outcome = analyze_file(tmp_path / "missing.txt")

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorReason.READ_FAILURE


def test_error_and_pending_stay_distinct() -> None:
    assert Error() != Pending()
    assert Error(ErrorReason.OVERFLOW) == Error(ErrorReason.ERROR_TOKEN)
    assert Error().label == "ERR"
    assert Pending().label == "PENDING"
    assert Rated(3).label == "3"


def test_rated_rejects_out_of_range() -> None:
    with pytest.raises(ValueError):
        Rated(255)
