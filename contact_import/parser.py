"""
Line parsing and whole-file import.

parse_import_file never raises for bad data: every problem with a line is
turned into a LineError and the remaining lines are still processed.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Sequence, Union

from .detect import detect_delimiter, detect_field_order, looks_like_header
from .models import LineError, ParsedRecord, ParseResult, ParseStats
from .normalize import normalize_date, normalize_phone, parse_address, split_name
from .rules import (
    DEFAULT_PREVIEW_ROWS,
    FORMAT_DELIMITED,
    FORMAT_UNKNOWN,
    FORMAT_WITH_HEADER,
    FieldTag,
    delimiter_name,
    resolve_tag,
    trim,
)

LOGGER = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")

NO_NAME_FOUND = "No name found"
NO_NAME_EXTRACTED = "Could not extract name from line"
EMPTY_FILE = "File is empty"
UNKNOWN_PARSE_ERROR = "Unknown parse error"

Fields = Dict[str, Any]


def _assign_name(fields: Fields, value: str) -> None:
    fields["first_name"], fields["last_name"] = split_name(value)


def _assign_address(fields: Fields, value: str) -> None:
    address = parse_address(value)
    fields["street"] = address.street
    fields["street_number"] = address.street_number
    fields["plz"] = address.plz
    fields["city"] = address.city


def _assign(key: str, convert: Callable[[str], str] = str) -> Callable[[Fields, str], None]:
    def apply(fields: Fields, value: str) -> None:
        fields[key] = convert(value)

    return apply


# One entry per FieldTag except UNKNOWN, which is skipped.
_HANDLERS: Dict[FieldTag, Callable[[Fields, str], None]] = {
    FieldTag.NAME: _assign_name,
    FieldTag.FIRST_NAME: _assign("first_name"),
    FieldTag.LAST_NAME: _assign("last_name"),
    FieldTag.PHONE: _assign("phone", normalize_phone),
    FieldTag.DOB: _assign("date_of_birth", normalize_date),
    FieldTag.ADDRESS: _assign_address,
    FieldTag.STREET: _assign("street"),
    FieldTag.STREET_NUMBER: _assign("street_number"),
    FieldTag.PLZ: _assign("plz"),
    FieldTag.CITY: _assign("city"),
    FieldTag.EMAIL: _assign("email", str.lower),
}


def parse_line(
    line: str,
    delimiter: str,
    field_order: Sequence[Union[FieldTag, str]],
) -> ParsedRecord:
    """
    Parse one data line into a record using a known column order.

    ``field_order`` may hold FieldTag values or any alias resolve_tag
    understands. Columns beyond ``field_order`` are ignored, empty cells are
    skipped, and a missing name is reported in the record's parse_errors
    rather than raised.
    """
    values = [trim(value) for value in line.split(delimiter)]
    fields: Fields = {"first_name": "", "last_name": "", "raw_line": line}

    for value, tag in zip(values, field_order):
        if not value:
            continue
        handler = _HANDLERS.get(resolve_tag(tag))
        if handler is not None:
            handler(fields, value)

    parse_errors: List[str] = []
    if not fields["first_name"] and not fields["last_name"]:
        parse_errors.append(NO_NAME_FOUND)

    return ParsedRecord(**fields, parse_errors=parse_errors)


def _empty_result() -> ParseResult:
    return ParseResult(
        success=False,
        leads=[],
        errors=[LineError(line_number=0, error_message=EMPTY_FILE, raw_line="")],
        stats=ParseStats(
            total_lines=0,
            parsed_successfully=0,
            parse_errors=1,
            detected_format=FORMAT_UNKNOWN,
            detected_delimiter="",
        ),
    )


def parse_import_file(content: str) -> ParseResult:
    """
    Parse a delimited contact file into records, per-line errors and stats.

    Blank lines are dropped before anything else, so line numbers in the
    returned errors are 1-based positions among the non-blank lines (the
    header, if any, is line 1).
    """
    lines = [line for line in _LINE_SPLIT_RE.split(content or "") if trim(line)]

    if not lines:
        LOGGER.info("Import file is empty")
        return _empty_result()

    delimiter = detect_delimiter(lines)
    field_order = detect_field_order(lines[0], delimiter)
    has_header = looks_like_header(lines[0], delimiter)
    LOGGER.debug(
        "Detected delimiter=%r header=%s field_order=%s",
        delimiter,
        has_header,
        [tag.value for tag in field_order],
    )

    leads: List[ParsedRecord] = []
    errors: List[LineError] = []

    for index in range(1 if has_header else 0, len(lines)):
        line_number = index + 1
        line = trim(lines[index])

        try:
            record = parse_line(line, delimiter, field_order)
        except Exception as exc:
            LOGGER.warning("Failed to parse line %s: %s", line_number, type(exc).__name__)
            errors.append(
                LineError(
                    line_number=line_number,
                    error_message=str(exc) or UNKNOWN_PARSE_ERROR,
                    raw_line=line,
                )
            )
            continue

        if record.parse_errors:
            errors.append(
                LineError(
                    line_number=line_number,
                    error_message="; ".join(record.parse_errors),
                    raw_line=line,
                )
            )

        if record.has_name:
            leads.append(record)
        else:
            errors.append(LineError(line_number=line_number, error_message=NO_NAME_EXTRACTED, raw_line=line))

    stats = ParseStats(
        total_lines=len(lines) - (1 if has_header else 0),
        parsed_successfully=len(leads),
        parse_errors=len(errors),
        detected_format=FORMAT_WITH_HEADER if has_header else FORMAT_DELIMITED,
        detected_delimiter=delimiter_name(delimiter),
    )
    LOGGER.info(
        "Parsed import file: %s lines, %s records, %s errors",
        stats.total_lines,
        stats.parsed_successfully,
        stats.parse_errors,
    )
    return ParseResult(success=bool(leads), leads=leads, errors=errors, stats=stats)


def preview_import_file(content: str, max_rows: int = DEFAULT_PREVIEW_ROWS) -> ParseResult:
    """
    Parse the whole file but keep only the first ``max_rows`` records and errors.

    Stats are left untouched and still describe the full file.
    """
    result = parse_import_file(content)
    return result.model_copy(
        update={
            "leads": result.leads[:max_rows],
            "errors": result.errors[:max_rows],
        }
    )
