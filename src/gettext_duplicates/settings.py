"""Settings for the duplicate check: editor configuration section or JSON file via platformdirs."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import asdict, dataclass
from pathlib import Path

import platformdirs

from .models import Severity

logger = logging.getLogger("gettext_duplicates.settings")

_APP_NAME = "gettext-duplicate-errors"
_SETTINGS_FILE = "settings.json"

# Name of the configuration section requested from the editor
SECTION = "gettext-duplicate-errors"

# Expected types for each field, used to reject wrong-typed values
_FIELD_TYPES: dict[str, type] = {
    "severity": str,
}


def _config_path() -> Path:
    """Return the platform-appropriate config directory."""
    return Path(platformdirs.user_config_dir(_APP_NAME))


@dataclass
class Settings:
    """Per-document options of the duplicate check."""

    severity: str = "error"

    @property
    def diagnostic_severity(self) -> Severity:
        return Severity[self.severity.upper()]

    @classmethod
    def from_mapping(cls, data: object) -> Settings:
        """Build settings from an untrusted mapping, dropping unknown or invalid keys."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            logger.warning("Ignoring settings of type %s", type(data).__name__)
            return cls()

        filtered: dict[str, object] = {}
        for k, v in data.items():
            expected = _FIELD_TYPES.get(k)
            if expected is None:
                logger.debug("Ignoring unknown setting %r", k)
                continue
            if not isinstance(v, expected):
                logger.warning("Ignoring setting %r: expected %s", k, expected.__name__)
                continue
            filtered[k] = v

        severity = filtered.get("severity")
        if severity is not None and severity.upper() not in Severity.__members__:
            logger.warning("Ignoring unknown severity %r", severity)
            del filtered["severity"]
        return cls(**filtered)  # type: ignore[arg-type]

    def save(self) -> None:
        """Write settings to disk atomically.  Logs warnings on failure."""
        try:
            config_dir = _config_path()
            config_dir.mkdir(parents=True, exist_ok=True)
            filepath = config_dir / _SETTINGS_FILE
            payload = json.dumps(asdict(self), indent=2, ensure_ascii=False)
            # Atomic write: temp file in same dir, then rename
            fd, tmp = tempfile.mkstemp(dir=config_dir, prefix=".settings-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp, filepath)
            except Exception:
                with contextlib.suppress(OSError):
                    os.unlink(tmp)
                raise
        except OSError as exc:
            logger.warning("Failed to save settings: %s", exc)

    @classmethod
    def load(cls) -> Settings:
        """Load settings from disk.  Returns defaults on any failure."""
        filepath = _config_path() / _SETTINGS_FILE
        try:
            if not filepath.exists():
                return cls()
            data = json.loads(filepath.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Settings file is corrupted, using defaults: %s", filepath)
            return cls()
        except OSError as exc:
            logger.warning("Cannot read settings file: %s", exc)
            return cls()
        return cls.from_mapping(data)


class SettingsCache:
    """Pending or resolved settings lookups, one per open document.

    Entries are created on first use, evicted when the document closes
    and cleared all at once when the global configuration changes.
    """

    def __init__(self) -> None:
        self._lookups: dict[str, asyncio.Future[Settings]] = {}

    def __contains__(self, uri: str) -> bool:
        return uri in self._lookups

    def __len__(self) -> int:
        return len(self._lookups)

    async def get(self, uri: str, fetch: Callable[[str], Awaitable[Settings]]) -> Settings:
        """Return the settings for *uri*, starting *fetch* only if none is cached.

        A failed lookup is evicted before the error propagates, so the
        next call fetches again.
        """
        lookup = self._lookups.get(uri)
        if lookup is None:
            lookup = asyncio.ensure_future(fetch(uri))
            self._lookups[uri] = lookup
        try:
            return await asyncio.shield(lookup)
        except asyncio.CancelledError:
            raise
        except Exception:
            if self._lookups.get(uri) is lookup:
                del self._lookups[uri]
            raise

    def evict(self, uri: str) -> None:
        self._lookups.pop(uri, None)

    def clear(self) -> None:
        self._lookups.clear()
