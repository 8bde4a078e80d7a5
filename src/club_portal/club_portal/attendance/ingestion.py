"""Attendance sheet parsing.

Turns the text of an exported sign-in sheet into CandidateRecords. The sheet
only has to carry a column whose header mentions "qid"; a "name" column is
optional.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Optional, Sequence

from ..core.constants import IDENTIFIER_HEADER_TOKEN, NAME_HEADER_TOKEN, UNKNOWN_NAME
from ..core.exceptions import EmptyFileError, MissingColumnError, ParseError
from .model import CandidateRecord

logger = logging.getLogger(__name__)


def _is_blank(row: Sequence[str]) -> bool:
    return not any((cell or "").strip() for cell in row)


def _find_column(headers: Sequence[str], token: str, *, skip: Optional[int] = None) -> Optional[int]:
    for idx, header in enumerate(headers):
        if idx != skip and token in header.lower():
            return idx
    return None


def _cell(row: Sequence[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(row):
        return ""
    return (row[idx] or "").strip()


def decode_upload(raw: bytes) -> str:
    """Decode uploaded bytes; spreadsheet exports often carry a UTF-8 BOM."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        try:
            return raw.decode("cp1252")
        except UnicodeDecodeError as exc:
            raise ParseError("The file is not a readable text CSV") from exc


def parse_attendance_csv(text: str) -> list[CandidateRecord]:
    """Parse a sign-in sheet.

    Raises MissingColumnError when no header contains "qid", EmptyFileError
    when there are no data rows and ParseError on malformed CSV. Rows whose
    identifier is blank are dropped without being reported.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    try:
        rows = [row for row in csv.reader(io.StringIO(text, newline=""), strict=True) if not _is_blank(row)]
    except csv.Error as exc:
        raise ParseError(f"Malformed CSV: {exc}") from exc

    if not rows:
        raise EmptyFileError("The CSV file is empty.")

    headers = [h.strip() for h in rows[0]]
    qid_idx = _find_column(headers, IDENTIFIER_HEADER_TOKEN)
    if qid_idx is None:
        raise MissingColumnError("Could not find a column named 'QID' in the CSV.")
    name_idx = _find_column(headers, NAME_HEADER_TOKEN, skip=qid_idx)

    data_rows = rows[1:]
    if not data_rows:
        raise EmptyFileError("The CSV file is empty.")

    records: list[CandidateRecord] = []
    for row in data_rows:
        identifier = _cell(row, qid_idx)
        if not identifier:
            continue
        name = _cell(row, name_idx) if name_idx is not None else UNKNOWN_NAME
        records.append(CandidateRecord(identifier=identifier, display_name=name))

    logger.debug("Parsed %d candidate rows from %d data rows", len(records), len(data_rows))
    return records
