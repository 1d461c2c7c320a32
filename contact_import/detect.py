"""Delimiter and column-meaning detection for delimited contact files."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .rules import (
    DEFAULT_DELIMITER,
    DELIMITERS,
    HEADER_PREFIX_RE,
    HEADER_ROW_LITERALS,
    HEADER_SYNONYMS,
    SAMPLE_LINES,
    SHAPE_CLASSIFIERS,
    FieldTag,
    trim,
)


def _cells(line: str, delimiter: str) -> List[str]:
    return [trim(cell).lower() for cell in line.split(delimiter)]


def detect_delimiter(lines: Sequence[str]) -> str:
    """
    Pick the delimiter that occurs most often in the first non-empty lines.

    Rules:
    - Sample the first SAMPLE_LINES non-empty lines.
    - Candidates are counted in DELIMITERS order; only a strictly greater
      total replaces the current best, so ties go to the earlier candidate.
    - If no candidate occurs at all, fall back to DEFAULT_DELIMITER.

    Quoting is not understood: a comma inside a quoted field still counts.
    """
    sample = [line for line in lines if trim(line)][:SAMPLE_LINES]
    counts = {delimiter: sum(line.count(delimiter) for line in sample) for delimiter in DELIMITERS}

    best = DEFAULT_DELIMITER
    best_count = 0
    for delimiter in DELIMITERS:
        if counts[delimiter] > best_count:
            best = delimiter
            best_count = counts[delimiter]
    return best


def classify_cell(cell: str) -> Optional[FieldTag]:
    """Return the tag of the first shape rule matching ``cell``, or None."""
    for _name, predicate, tag in SHAPE_CLASSIFIERS:
        if predicate(cell):
            return tag
    return None


def _is_header_cell(cell: str) -> bool:
    return cell in HEADER_SYNONYMS or bool(HEADER_PREFIX_RE.match(cell))


def detect_field_order(line: str, delimiter: str) -> List[FieldTag]:
    """
    Infer the meaning of each column from the first line of a file.

    If any cell looks like a column label, every cell is looked up in the
    header vocabulary (unlisted labels become UNKNOWN). Otherwise each cell
    is classified by its shape; the first cell no shape rule claims is the
    name column and any later unclaimed cells are UNKNOWN.
    """
    cells = _cells(line, delimiter)

    if any(_is_header_cell(cell) for cell in cells):
        return [HEADER_SYNONYMS.get(cell, FieldTag.UNKNOWN) for cell in cells]

    order: List[FieldTag] = []
    for cell in cells:
        tag = classify_cell(cell)
        if tag is None:
            tag = FieldTag.UNKNOWN if FieldTag.NAME in order else FieldTag.NAME
        order.append(tag)
    return order


def looks_like_header(line: str, delimiter: str) -> bool:
    """
    Decide whether the first line should be skipped as a header row.

    This is a narrower test than the one detect_field_order applies: only
    a handful of literal labels count. A first line can therefore be read
    as labels for column meaning and still be parsed as data.
    """
    return any(cell in HEADER_ROW_LITERALS for cell in _cells(line, delimiter))
