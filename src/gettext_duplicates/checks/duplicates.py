"""Check for message entries whose msgid is defined more than once."""

from __future__ import annotations

from collections.abc import Iterable

from ..models import Catalog, Diagnostic, MessageEntry, RelatedLocation, Severity
from ..positions import to_range
from ..settings import Settings

MESSAGE = "Duplicate message definition"
CODE = "duplicate-msgid"


def group_duplicates(entries: Iterable[MessageEntry]) -> list[list[MessageEntry]]:
    """Group entries by exact key, keeping only keys defined more than once.

    Groups come out in the order their key was first seen, and members in
    document order, so ``group[0]`` is always the first definition.
    """
    seen: dict[str, list[MessageEntry]] = {}
    for entry in entries:
        seen.setdefault(entry.key, []).append(entry)
    return [group for group in seen.values() if len(group) > 1]


def _related_label(entry: MessageEntry, is_first: bool) -> str:
    label = "First definition" if is_first else "Duplicate definition"
    value = entry.translated_values[0] if entry.translated_values else ""
    return f"{label}: {value}" if value else label


def build_diagnostics(
    group: list[MessageEntry],
    uri: str,
    severity: Severity = Severity.ERROR,
) -> list[Diagnostic]:
    """Build one diagnostic per member of a duplicate group.

    Every diagnostic cross-references all members of the group, the
    reported entry itself included.
    """
    first = group[0]
    related = [
        RelatedLocation(
            uri=uri,
            range=to_range(entry.key_location),
            message=_related_label(entry, entry is first),
        )
        for entry in group
    ]
    return [
        Diagnostic(
            range=to_range(entry.key_location),
            severity=severity,
            message=MESSAGE,
            related_information=list(related),
            code=CODE,
        )
        for entry in group
    ]


def check(catalog: Catalog, uri: str, settings: Settings | None = None) -> list[Diagnostic]:
    severity = (settings or Settings()).diagnostic_severity
    diagnostics: list[Diagnostic] = []
    for group in group_duplicates(catalog.messages):
        diagnostics.extend(build_diagnostics(group, uri, severity))
    return diagnostics
