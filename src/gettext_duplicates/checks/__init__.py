"""Check modules for analyzing gettext catalogs.

Each module exports a check(catalog, uri, settings) -> list[Diagnostic] function.
"""

from . import duplicates

ALL_CHECKS = {
    "Duplicates": duplicates.check,
}
