"""Per-document validation driven by editor events (open, change, close, configuration)."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Awaitable, Callable, Iterable

from .analyzer import analyze_text
from .checks import ALL_CHECKS
from .models import Diagnostic
from .parser import ParseError
from .positions import InvalidLocationError
from .settings import Settings, SettingsCache

logger = logging.getLogger("gettext_duplicates.validation")


class DocumentValidator:
    """Runs the checks over a document and publishes the full diagnostic set.

    Parameters
    ----------
    get_text:
        Returns the current full text of a document.
    fetch_settings:
        Resolves the settings of a document; awaited once per document
        until the cache entry is evicted.
    publish:
        Report sink.  Receives the complete diagnostic list for a document,
        replacing whatever was published before.
    cache:
        Settings cache to use.  A fresh one by default.
    checks:
        Check names to run.  *None* means all checks.

    Raises
    ------
    ValueError
        If an unknown check name is provided.
    """

    def __init__(
        self,
        get_text: Callable[[str], str],
        fetch_settings: Callable[[str], Awaitable[Settings]],
        publish: Callable[[str, list[Diagnostic]], None],
        cache: SettingsCache | None = None,
        checks: list[str] | None = None,
    ) -> None:
        self._get_text = get_text
        self._fetch_settings = fetch_settings
        self._publish = publish
        if checks is not None:
            unknown = set(checks) - set(ALL_CHECKS.keys())
            if unknown:
                raise ValueError(f"Unknown check(s): {', '.join(sorted(unknown))}")
        self.cache = cache if cache is not None else SettingsCache()
        self.checks = checks
        # Newest pass token per document; older passes must not publish
        self._passes: dict[str, int] = {}
        self._tokens = itertools.count(1)

    async def validate(self, uri: str) -> list[Diagnostic] | None:
        """Validate the current snapshot of *uri* and publish the result.

        Returns the published diagnostics, or *None* when nothing was
        published: the settings lookup failed, the text could not be read
        or did not parse, or a newer pass for the same document started in
        the meantime.  The previously published diagnostics are left in
        place in all of those cases.
        """
        token = next(self._tokens)
        self._passes[uri] = token

        try:
            settings = await self.cache.get(uri, self._fetch_settings)
        except Exception:
            logger.warning("Settings lookup failed for %s", uri, exc_info=True)
            return None

        if self._passes.get(uri) != token:
            logger.debug("Dropping superseded validation of %s", uri)
            return None

        try:
            text = self._get_text(uri)
        except Exception:
            logger.error("Cannot read the text of %s", uri, exc_info=True)
            return None

        try:
            diagnostics = analyze_text(text, uri, settings=settings, checks=self.checks)
        except ParseError as exc:
            logger.info("Skipping %s: %s", uri, exc)
            return None
        except InvalidLocationError:
            logger.error("Parser reported an invalid location in %s", uri, exc_info=True)
            return None

        self._publish(uri, diagnostics)
        logger.debug("Published %d diagnostics for %s", len(diagnostics), uri)
        return diagnostics

    def close(self, uri: str) -> None:
        """Forget the document's cached settings.  Published diagnostics are kept."""
        self.cache.evict(uri)
        self._passes.pop(uri, None)

    async def configuration_changed(self, uris: Iterable[str]) -> None:
        """Drop all cached settings and revalidate every open document."""
        self.cache.clear()
        for uri in list(uris):
            await self.validate(uri)
