"""Duplicate msgid diagnostics for gettext catalogs."""

__version__ = "0.1.0"
