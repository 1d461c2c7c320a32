from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class AddressParts(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: Optional[str] = None
    street_number: Optional[str] = None
    plz: Optional[str] = Field(default=None, examples=["34212"])
    city: Optional[str] = None
    full_address: str = ""


class ParsedRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = Field(default=None, examples=["+49301234567"])
    date_of_birth: Optional[str] = Field(default=None, examples=["1991-05-03"])
    street: Optional[str] = None
    street_number: Optional[str] = None
    plz: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = None
    raw_line: Optional[str] = None
    parse_errors: List[str] = Field(default_factory=list)

    @property
    def has_name(self) -> bool:
        return bool(self.first_name or self.last_name)


class LineError(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_number: int
    error_message: str
    raw_line: str = ""


class ParseStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_lines: int = 0
    parsed_successfully: int = 0
    parse_errors: int = 0
    detected_format: str = Field(examples=["csv_with_header", "delimited_data"])
    detected_delimiter: str = Field(examples=["pipe", "comma", "tab", "semicolon"])


class ParseResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    leads: List[ParsedRecord] = Field(default_factory=list)
    errors: List[LineError] = Field(default_factory=list)
    stats: ParseStats

class HealthResponse(BaseModel):
    ok: bool = True
