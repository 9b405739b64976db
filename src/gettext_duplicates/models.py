"""Data models for parsed catalogs and the diagnostics reported on them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Severity(IntEnum):
    """Diagnostic severity levels, numbered as in the Language Server Protocol."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass
class SourcePosition:
    """Parser coordinates: line and column are both 1-indexed."""

    line: int
    column: int


@dataclass
class SourceSpan:
    start: SourcePosition
    end: SourcePosition  # exclusive


@dataclass
class MessageEntry:
    key: str
    key_location: SourceSpan
    translated_values: list[str] = field(default_factory=list)
    value_location: SourceSpan | None = None
    context: str | None = None
    plural_key: str | None = None


@dataclass
class Catalog:
    """All message entries of one document, in document order."""

    messages: list[MessageEntry] = field(default_factory=list)


@dataclass
class DocumentPosition:
    """Editor coordinates: line and character are both 0-indexed."""

    line: int
    character: int


@dataclass
class DocumentRange:
    start: DocumentPosition
    end: DocumentPosition


@dataclass
class RelatedLocation:
    uri: str
    range: DocumentRange
    message: str


@dataclass
class Diagnostic:
    range: DocumentRange
    severity: Severity
    message: str
    related_information: list[RelatedLocation] = field(default_factory=list)
    source: str = "gettext-duplicate-errors"
    code: str = ""
