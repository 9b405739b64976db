"""Conversion from parser coordinates (1-indexed) to editor coordinates (0-indexed)."""

from __future__ import annotations

from .models import DocumentPosition, DocumentRange, SourcePosition, SourceSpan


class InvalidLocationError(ValueError):
    """A parser location below line 1 or column 1."""


def to_position(position: SourcePosition) -> DocumentPosition:
    if position.line < 1 or position.column < 1:
        raise InvalidLocationError(
            f"Invalid source location line={position.line}, column={position.column}"
        )
    return DocumentPosition(line=position.line - 1, character=position.column - 1)


def to_range(span: SourceSpan) -> DocumentRange:
    return DocumentRange(start=to_position(span.start), end=to_position(span.end))
