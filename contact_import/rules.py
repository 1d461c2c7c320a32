"""
Fixed vocabularies for contact import.

This file exists to make the heuristics explicit and reviewable:
every lookup table and every ordering the parser depends on lives here,
as module-level constants that are never mutated.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Dict, Pattern, Tuple


class FieldTag(str, Enum):
    """Canonical column meaning shared by field-order detection and line parsing."""

    NAME = "name"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    PHONE = "phone"
    DOB = "dob"
    ADDRESS = "address"
    STREET = "street"
    STREET_NUMBER = "street_number"
    PLZ = "plz"
    CITY = "city"
    EMAIL = "email"
    UNKNOWN = "unknown"


# --- Delimiters ---

# Checked in this order; ties keep the earlier entry.
DELIMITERS: Tuple[str, ...] = ("|", ",", "\t", ";")
DEFAULT_DELIMITER = "|"
DELIMITER_NAMES: Dict[str, str] = {
    "|": "pipe",
    ",": "comma",
    "\t": "tab",
    ";": "semicolon",
}
SAMPLE_LINES = 10


def delimiter_name(delimiter: str) -> str:
    return DELIMITER_NAMES[delimiter]


# --- Text ---

# A byte-order mark counts as whitespace, so a BOM left at the start of
# decoded content never ends up inside a cell.
_SPACE = r"[\s\ufeff]"
WHITESPACE_RUN_RE = re.compile(_SPACE + "+")
_EDGE_SPACE_RE = re.compile(rf"^{_SPACE}+|{_SPACE}+$")


def trim(value: str) -> str:
    return _EDGE_SPACE_RE.sub("", value)


# --- Header vocabulary ---

HEADER_SYNONYMS: Dict[str, FieldTag] = {
    "name": FieldTag.NAME,
    "full name": FieldTag.NAME,
    "full_name": FieldTag.NAME,
    "vollständiger name": FieldTag.NAME,
    "vor- und nachname": FieldTag.NAME,
    "first name": FieldTag.FIRST_NAME,
    "first_name": FieldTag.FIRST_NAME,
    "vorname": FieldTag.FIRST_NAME,
    "last name": FieldTag.LAST_NAME,
    "last_name": FieldTag.LAST_NAME,
    "nachname": FieldTag.LAST_NAME,
    "familienname": FieldTag.LAST_NAME,
    "phone": FieldTag.PHONE,
    "telefon": FieldTag.PHONE,
    "tel": FieldTag.PHONE,
    "mobile": FieldTag.PHONE,
    "handy": FieldTag.PHONE,
    "telefonnummer": FieldTag.PHONE,
    "dob": FieldTag.DOB,
    "date of birth": FieldTag.DOB,
    "date_of_birth": FieldTag.DOB,
    "geburtsdatum": FieldTag.DOB,
    "birthday": FieldTag.DOB,
    "geburtstag": FieldTag.DOB,
    "address": FieldTag.ADDRESS,
    "adresse": FieldTag.ADDRESS,
    "anschrift": FieldTag.ADDRESS,
    "street": FieldTag.STREET,
    "strasse": FieldTag.STREET,
    "straße": FieldTag.STREET,
    "str": FieldTag.STREET,
    "street_number": FieldTag.STREET_NUMBER,
    "hausnummer": FieldTag.STREET_NUMBER,
    "hnr": FieldTag.STREET_NUMBER,
    "nr": FieldTag.STREET_NUMBER,
    "plz": FieldTag.PLZ,
    "zip": FieldTag.PLZ,
    "postal code": FieldTag.PLZ,
    "postal_code": FieldTag.PLZ,
    "postleitzahl": FieldTag.PLZ,
    "city": FieldTag.CITY,
    "stadt": FieldTag.CITY,
    "ort": FieldTag.CITY,
    "wohnort": FieldTag.CITY,
    "email": FieldTag.EMAIL,
    "e-mail": FieldTag.EMAIL,
    "mail": FieldTag.EMAIL,
}

# Cells starting with one of these also mark a header row, even when the
# cell itself is not a dictionary key (e.g. "phone 1").
HEADER_PREFIX_RE: Pattern[str] = re.compile(r"^(name|phone|email|address|dob)", re.IGNORECASE)

# Narrower literal set used to decide whether the first line is skipped.
# Kept separate from HEADER_SYNONYMS; the two checks can disagree.
HEADER_ROW_LITERALS = frozenset(
    {"name", "phone", "telefon", "email", "address", "adresse", "vorname", "nachname"}
)


# --- Line parser aliases ---

TAG_ALIASES: Dict[str, FieldTag] = {
    "full_name": FieldTag.NAME,
    "telefon": FieldTag.PHONE,
    "mobile": FieldTag.PHONE,
    "handy": FieldTag.PHONE,
    "date_of_birth": FieldTag.DOB,
    "geburtsdatum": FieldTag.DOB,
    "birthday": FieldTag.DOB,
    "adresse": FieldTag.ADDRESS,
    "strasse": FieldTag.STREET,
    "hausnummer": FieldTag.STREET_NUMBER,
    "zip": FieldTag.PLZ,
    "postal_code": FieldTag.PLZ,
    "stadt": FieldTag.CITY,
    "ort": FieldTag.CITY,
    "e-mail": FieldTag.EMAIL,
}


def resolve_tag(name: str | FieldTag) -> FieldTag:
    """Map a canonical tag or one of its aliases to a FieldTag; anything else is UNKNOWN."""
    if isinstance(name, FieldTag):
        return name
    try:
        return FieldTag(name)
    except ValueError:
        return TAG_ALIASES.get(name, FieldTag.UNKNOWN)


# --- Data-shape classification ---

PHONE_SHAPE_RE = re.compile(r"^\+?[0-9][0-9\s\-()]{8,}$")
GERMAN_DATE_SHAPE_RE = re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4}$", re.ASCII)
EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PLZ_RUN_RE = re.compile(r"\d{5}", re.ASCII)
PLZ_CITY_PREFIX_RE = re.compile(r"^[0-9]{5}\s+\S")


def _has_plz_and_separator(cell: str) -> bool:
    return bool(PLZ_RUN_RE.search(cell)) and ("," in cell or " " in cell)


# Evaluated top to bottom, first match wins. Reordering changes how
# ambiguous cells are classified (a phone-like run of digits would
# otherwise be read as an address, for instance).
SHAPE_CLASSIFIERS: Tuple[Tuple[str, Callable[[str], object], FieldTag], ...] = (
    ("phone", PHONE_SHAPE_RE.match, FieldTag.PHONE),
    ("german_date", GERMAN_DATE_SHAPE_RE.match, FieldTag.DOB),
    ("email", EMAIL_SHAPE_RE.match, FieldTag.EMAIL),
    ("plz_with_separator", _has_plz_and_separator, FieldTag.ADDRESS),
    ("plz_then_city", PLZ_CITY_PREFIX_RE.match, FieldTag.ADDRESS),
)


# --- Formats and limits ---

FORMAT_WITH_HEADER = "csv_with_header"
FORMAT_DELIMITED = "delimited_data"
FORMAT_UNKNOWN = "unknown"

DEFAULT_PREVIEW_ROWS = 5
API_PREVIEW_ROWS = 10

ACCEPTED_SUFFIXES = (".csv", ".tsv", ".txt")
# An upload is accepted if either its suffix or its content type matches.
ACCEPTED_CONTENT_TYPES = frozenset(
    {
        "text/plain",
        "text/csv",
        "application/csv",
        "text/comma-separated-values",
        "application/vnd.ms-excel",
    }
)
UPLOAD_ENCODING = "utf-8-sig"


# --- Sample import files ---

# format -> (filename, content); unknown formats fall back to "pipe".
IMPORT_TEMPLATES: Dict[str, Tuple[str, str]] = {
    "csv": (
        "import_template.csv",
        "first_name,last_name,phone,date_of_birth,street,street_number,plz,city,email\n"
        "Max,Mustermann,+491234567890,01.01.1990,Musterstr.,1,12345,Berlin,max@example.com\n"
        "Anna,Schmidt,+499876543210,15.06.1985,Hauptstr.,42,54321,München,anna@example.com",
    ),
    "pipe": (
        "import_template.txt",
        "Full Name | Phone | DOB | Address\n"
        "Max Mustermann | +491234567890 | 01.01.1990 | Musterstr. 1, 12345 Berlin\n"
        "Anna Schmidt | +499876543210 | 15.06.1985 | Hauptstr. 42, 54321 München",
    ),
}
DEFAULT_TEMPLATE_FORMAT = "pipe"
