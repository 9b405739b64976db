"""Logging configuration for gettext-duplicate-errors.

Everything goes to stderr (and optionally a file): while serving, stdout
carries the LSP stream and must stay clean.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "gettext_duplicates"

_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def _level_for(verbose: bool | None) -> int:
    if verbose is None:
        return logging.INFO
    return logging.DEBUG if verbose else logging.WARNING


def _make_handlers(level: int, log_file: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    fmt = logging.Formatter(_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
    return handlers


def setup_logging(
    verbose: bool | None = False,
    log_file: str | None = None,
    libraries: tuple[str, ...] = (),
) -> None:
    """Configure the ``gettext_duplicates`` logger hierarchy.

    Parameters
    ----------
    verbose:
        *True* for DEBUG, *False* for WARNING (quiet, for ``check``),
        *None* for INFO (for ``serve``).
    log_file:
        If given, also write log output to this file path.
    libraries:
        Third-party logger names (``"pygls"`` when serving) that share the
        same handlers.  They never log below INFO, their DEBUG output is
        a dump of every protocol message.
    """
    level = _level_for(verbose)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Called again from tests or a second command: keep the first handlers
    if logger.handlers:
        return

    handlers = _make_handlers(level, log_file)
    for handler in handlers:
        logger.addHandler(handler)

    library_level = max(level, logging.INFO)
    for name in libraries:
        library_logger = logging.getLogger(name)
        library_logger.setLevel(library_level)
        library_logger.propagate = False
        for handler in handlers:
            library_logger.addHandler(handler)
