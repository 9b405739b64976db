"""Smoke tests for data models."""
from gettext_duplicates.models import (
    Catalog, Diagnostic, DocumentPosition, DocumentRange, MessageEntry,
    Severity, SourcePosition, SourceSpan,
)


def test_severity_values_match_lsp():
    assert [int(s) for s in Severity] == [1, 2, 3, 4]
    assert Severity.ERROR < Severity.WARNING < Severity.INFORMATION < Severity.HINT


def test_catalog_defaults():
    assert Catalog().messages == []


def test_message_entry_defaults():
    span = SourceSpan(start=SourcePosition(1, 7), end=SourcePosition(1, 14))
    entry = MessageEntry(key="Hello", key_location=span)
    assert entry.translated_values == []
    assert entry.value_location is None
    assert entry.context is None


def test_diagnostic_creation():
    rng = DocumentRange(start=DocumentPosition(0, 6), end=DocumentPosition(0, 13))
    d = Diagnostic(range=rng, severity=Severity.ERROR, message="Duplicate message definition")
    assert d.related_information == []
    assert d.source == "gettext-duplicate-errors"
