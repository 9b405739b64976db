"""Core analysis pipeline, shared by the language server and the CLI."""

from __future__ import annotations

import logging
from pathlib import Path

from .checks import ALL_CHECKS
from .models import Diagnostic
from .parser import parse_text
from .settings import Settings

logger = logging.getLogger("gettext_duplicates.analyzer")


def analyze_text(
    text: str,
    uri: str,
    settings: Settings | None = None,
    checks: list[str] | None = None,
) -> list[Diagnostic]:
    """Parse catalog text and run checks over it.

    Parameters
    ----------
    text:
        Full document text.
    uri:
        Document identifier used in related-location cross-references.
    settings:
        Options for the checks.  *None* means defaults.
    checks:
        List of check names to run.  *None* means all checks.

    Returns
    -------
    list[Diagnostic]
        Diagnostics in check order, then document order within a check.

    Raises
    ------
    ParseError
        If the text is not a well-formed catalog.
    ValueError
        If an unknown check name is provided.
    """
    if checks is None:
        checks = list(ALL_CHECKS.keys())

    unknown = set(checks) - set(ALL_CHECKS.keys())
    if unknown:
        raise ValueError(f"Unknown check(s): {', '.join(sorted(unknown))}")

    if settings is None:
        settings = Settings()

    catalog = parse_text(text)
    logger.debug("Parsed %d messages from %s", len(catalog.messages), uri)

    diagnostics: list[Diagnostic] = []
    for check_name in checks:
        diagnostics.extend(ALL_CHECKS[check_name](catalog, uri, settings))

    logger.debug("%s: %d diagnostics from %d checks", uri, len(diagnostics), len(checks))
    return diagnostics


def analyze_file(
    filepath: str,
    settings: Settings | None = None,
    checks: list[str] | None = None,
) -> list[Diagnostic]:
    """Run :func:`analyze_text` over a catalog file on disk.

    Related locations refer to the file by its ``file://`` URI.
    """
    path = Path(filepath)
    text = path.read_text(encoding="utf-8", errors="replace")
    return analyze_text(text, path.resolve().as_uri(), settings=settings, checks=checks)
