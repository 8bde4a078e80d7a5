from __future__ import annotations

import pytest

from src.club_portal.club_portal.attendance.ingestion import decode_upload, parse_attendance_csv
from src.club_portal.club_portal.core.constants import UNKNOWN_NAME
from src.club_portal.club_portal.core.exceptions import (
    EmptyFileError,
    IngestionError,
    MissingColumnError,
    ParseError,
    ValidationError,
)


def test_parses_qid_and_name_columns_and_trims():
    text = "Student QID,Full Name,Branch\n  Q100 , Ravi Kumar ,CSE\nQ200,Meera,ECE\n"

    records = parse_attendance_csv(text)

    assert [(r.identifier, r.display_name) for r in records] == [("Q100", "Ravi Kumar"), ("Q200", "Meera")]


def test_header_match_is_case_insensitive_substring():
    records = parse_attendance_csv("Name,MY_qId_col\nRavi,Q1\n")
    assert records[0].identifier == "Q1"
    assert records[0].display_name == "Ravi"


def test_missing_name_column_uses_placeholder():
    records = parse_attendance_csv("QID\nQ1\nQ2\n")
    assert {r.display_name for r in records} == {UNKNOWN_NAME}


def test_rows_with_blank_identifier_are_dropped():
    text = "QID,Name\nQ1,A\n   ,B\n,C\nQ2,D\n"
    assert [r.identifier for r in parse_attendance_csv(text)] == ["Q1", "Q2"]


def test_one_record_per_row_even_when_identifier_repeats():
    text = "QID,Name\nQ1,A\nQ1,A again\n"
    assert len(parse_attendance_csv(text)) == 2


def test_missing_identifier_column():
    with pytest.raises(MissingColumnError):
        parse_attendance_csv("Roll,Name\n1,A\n")


def test_header_only_is_empty():
    with pytest.raises(EmptyFileError):
        parse_attendance_csv("QID,Name\n")


def test_completely_empty_is_empty():
    with pytest.raises(EmptyFileError):
        parse_attendance_csv("\n\n")


def test_malformed_csv_aborts():
    with pytest.raises(ParseError):
        parse_attendance_csv('QID,Name\nQ1,"unterminated\n')


def test_ingestion_errors_are_validation_errors():
    assert issubclass(MissingColumnError, IngestionError)
    assert issubclass(IngestionError, ValidationError)


def test_short_rows_do_not_crash():
    records = parse_attendance_csv("Name,QID\nOnlyName\nB,Q2\n")
    assert [r.identifier for r in records] == ["Q2"]


def test_decode_upload_strips_bom():
    text = decode_upload("\ufeffQID,Name\nQ1,A\n".encode("utf-8"))
    assert text.startswith("QID")


def test_decode_upload_falls_back_to_cp1252():
    raw = "QID,Name\nQ1,José\n".encode("cp1252")
    assert parse_attendance_csv(decode_upload(raw))[0].display_name == "José"
