"""
Field normalizers for German contact data.

Responsibilities:
- phone numbers -> +49 form
- DD.MM.YYYY / DD/MM/YYYY dates -> ISO
- full name -> first / last name
- free-text address -> street, number, PLZ, city

All reshaping is syntactic. Nothing here checks that a date exists on the
calendar or that a phone number is dialable.
"""

from __future__ import annotations

import re
from typing import Tuple

from .models import AddressParts
from .rules import WHITESPACE_RUN_RE, trim

_PHONE_NOISE_RE = re.compile(r"[\s\ufeff\-().]")

_GERMAN_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$", re.ASCII)
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$", re.ASCII)
_SLASH_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", re.ASCII)

_PLZ_RE = re.compile(r"\b(\d{5})\b", re.ASCII)
_PLZ_CITY_RE = re.compile(r"^([0-9]{5})\s+(.+)$")
_LEADING_PLZ_RE = re.compile(r"^[0-9]{5}\s*")
# "Lindenstr. 13", "Bahnhofstr. 2D"
_STREET_NUMBER_RE = re.compile(r"^(.+?)\s+([0-9]+[A-Za-z]?)$")


def normalize_phone(value: str) -> str:
    """
    Rewrite a German phone number to +49 form.

    Rules (first match wins, after stripping whitespace, '-', '(', ')', '.'):
    - 0049...  -> +49...
    - 49...    -> +49...
    - 0...     -> +49... (but not 00..., which is some other country)
    - anything else is returned stripped but otherwise unchanged
    """
    if not value:
        return ""

    normalized = _PHONE_NOISE_RE.sub("", value)

    if normalized.startswith("0049"):
        return "+49" + normalized[4:]
    if normalized.startswith("49") and not normalized.startswith("+"):
        return "+49" + normalized[2:]
    if normalized.startswith("0") and not normalized.startswith("00"):
        return "+49" + normalized[1:]
    return normalized


def normalize_date(value: str) -> str:
    """
    Rewrite DD.MM.YYYY or DD/MM/YYYY to YYYY-MM-DD.

    ISO input and anything unrecognised are returned as given.
    """
    if not value:
        return value

    match = _GERMAN_DATE_RE.match(value)
    if match:
        return _to_iso(*match.groups())

    if _ISO_DATE_RE.match(value):
        return value

    match = _SLASH_DATE_RE.match(value)
    if match:
        return _to_iso(*match.groups())

    return value


def _to_iso(day: str, month: str, year: str) -> str:
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def split_name(value: str) -> Tuple[str, str]:
    """
    Split a full name into (first_name, last_name).

    The last token is the last name; everything before it is the first
    name, so "Josefine Katharina Braun" -> ("Josefine Katharina", "Braun").
    A single token is taken as the first name.
    """
    parts = WHITESPACE_RUN_RE.split(trim(value or ""))

    if parts == [""]:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return " ".join(parts[:-1]), parts[-1]


def parse_address(value: str) -> AddressParts:
    """
    Parse a German address into its components.

    Handles:
    - "Lindenstr. 13, 34212 Melsungen"
    - "Lindenstr. 13, 34212 Melsungen, Röhrenfurth" (district is dropped)
    - "57629 Stein-Wingert" (PLZ + city only)

    Any standalone 5-digit run is taken as a fallback PLZ; an explicit
    "PLZ City" part overrides it.
    """
    if not value:
        return AddressParts(full_address="")

    trimmed = trim(value)
    street = street_number = plz = city = None

    plz_match = _PLZ_RE.search(trimmed)
    if plz_match:
        plz = plz_match.group(1)

    parts = [trim(part) for part in trimmed.split(",")]

    if len(parts) >= 2:
        street_part = parts[0]
        street_match = _STREET_NUMBER_RE.match(street_part)
        if street_match:
            street = trim(street_match.group(1))
            street_number = street_match.group(2)
        else:
            street = street_part

        city_part = parts[1]
        city_match = _PLZ_CITY_RE.match(city_part)
        if city_match:
            plz = city_match.group(1)
            city = trim(city_match.group(2))
        elif plz is None:
            city = city_part
        else:
            city = trim(_LEADING_PLZ_RE.sub("", city_part))

        # parts[2], when present, is usually the district; it is not merged into city.
    else:
        city_match = _PLZ_CITY_RE.match(trimmed)
        if city_match:
            plz = city_match.group(1)
            city = trim(city_match.group(2))

    return AddressParts(
        street=street,
        street_number=street_number,
        plz=plz,
        city=city,
        full_address=trimmed,
    )
