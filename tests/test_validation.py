"""Tests for the per-document validation orchestrator."""

from __future__ import annotations

import asyncio
import textwrap

import pytest

from gettext_duplicates.models import Severity
from gettext_duplicates.positions import InvalidLocationError
from gettext_duplicates.settings import Settings
from gettext_duplicates.validation import DocumentValidator

URI = "file:///locale/de.po"

DUPLICATED = textwrap.dedent("""\
    msgid "Hello"
    msgstr "Hallo"

    msgid "Hello"
    msgstr "Servus"
""")

CLEAN = textwrap.dedent("""\
    msgid "Hello"
    msgstr "Hallo"
""")

BROKEN = 'msgid "Hello\nmsgstr ""\n'


class _Editor:
    """In-memory stand-in for the editor: documents, settings and the diagnostics sink."""

    def __init__(self) -> None:
        self.documents = {URI: DUPLICATED}
        self.settings = Settings()
        self.fetches: list[str] = []
        self.published: dict[str, list] = {}
        self.publish_calls: list[str] = []
        self.fail_fetch = False
        self.gate: asyncio.Event | None = None

    def get_text(self, uri: str) -> str:
        return self.documents[uri]

    async def fetch_settings(self, uri: str) -> Settings:
        self.fetches.append(uri)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_fetch:
            raise ConnectionError("no configuration")
        return self.settings

    def publish(self, uri: str, diagnostics: list) -> None:
        self.publish_calls.append(uri)
        self.published[uri] = diagnostics

    def validator(self) -> DocumentValidator:
        return DocumentValidator(self.get_text, self.fetch_settings, self.publish)


def test_validate_publishes_full_set():
    editor = _Editor()
    result = asyncio.run(editor.validator().validate(URI))
    assert len(result) == 2
    assert editor.published[URI] == result
    assert all(d.severity == Severity.ERROR for d in result)


def test_validate_clean_document_publishes_empty_list():
    editor = _Editor()
    editor.documents[URI] = CLEAN
    asyncio.run(editor.validator().validate(URI))
    assert editor.published[URI] == []


def test_parse_failure_keeps_previous_diagnostics():
    editor = _Editor()
    validator = editor.validator()

    async def run():
        await validator.validate(URI)
        before = editor.published[URI]
        editor.documents[URI] = BROKEN
        result = await validator.validate(URI)
        return before, result

    before, result = asyncio.run(run())
    assert result is None
    assert editor.published[URI] is before
    assert editor.publish_calls == [URI]


def test_parse_failure_on_first_pass_publishes_nothing():
    editor = _Editor()
    editor.documents[URI] = BROKEN
    assert asyncio.run(editor.validator().validate(URI)) is None
    assert editor.published == {}


def test_settings_failure_aborts_pass_and_retries_next_time():
    editor = _Editor()
    editor.fail_fetch = True
    validator = editor.validator()

    async def run():
        first = await validator.validate(URI)
        editor.fail_fetch = False
        second = await validator.validate(URI)
        return first, second

    first, second = asyncio.run(run())
    assert first is None
    assert len(second) == 2
    assert editor.fetches == [URI, URI]


def test_invalid_location_aborts_pass(monkeypatch):
    def _explode(*args, **kwargs):
        raise InvalidLocationError("line=0")

    monkeypatch.setattr("gettext_duplicates.validation.analyze_text", _explode)
    editor = _Editor()
    assert asyncio.run(editor.validator().validate(URI)) is None
    assert editor.published == {}


def test_settings_fetched_once_until_closed():
    editor = _Editor()
    validator = editor.validator()

    async def run():
        await validator.validate(URI)
        await validator.validate(URI)
        validator.close(URI)
        await validator.validate(URI)

    asyncio.run(run())
    assert editor.fetches == [URI, URI]


def test_close_does_not_retract_diagnostics():
    editor = _Editor()
    validator = editor.validator()
    asyncio.run(validator.validate(URI))
    validator.close(URI)
    assert URI not in validator.cache
    assert len(editor.published[URI]) == 2


def test_configuration_change_clears_cache_and_revalidates():
    other = "file:///locale/fr.po"
    editor = _Editor()
    editor.documents[other] = CLEAN
    validator = editor.validator()

    async def run():
        await validator.validate(URI)
        await validator.validate(other)
        editor.settings = Settings(severity="warning")
        await validator.configuration_changed([URI, other])

    asyncio.run(run())
    assert editor.fetches == [URI, other, URI, other]
    assert all(d.severity == Severity.WARNING for d in editor.published[URI])
    assert editor.published[other] == []


def test_rerun_publishes_identical_diagnostics():
    editor = _Editor()
    validator = editor.validator()

    async def run():
        return await validator.validate(URI), await validator.validate(URI)

    first, second = asyncio.run(run())
    assert first == second


def test_superseded_pass_does_not_publish():
    editor = _Editor()
    validator = editor.validator()

    async def run():
        editor.gate = asyncio.Event()
        stale = asyncio.ensure_future(validator.validate(URI))
        await asyncio.sleep(0)
        editor.documents[URI] = CLEAN
        fresh = asyncio.ensure_future(validator.validate(URI))
        await asyncio.sleep(0)
        editor.gate.set()
        return await asyncio.gather(stale, fresh)

    stale_result, fresh_result = asyncio.run(run())
    assert stale_result is None
    assert fresh_result == []
    assert editor.publish_calls == [URI]
    assert editor.published[URI] == []


def test_pass_in_flight_when_closed_does_not_publish():
    editor = _Editor()
    validator = editor.validator()

    async def run():
        editor.gate = asyncio.Event()
        pending = asyncio.ensure_future(validator.validate(URI))
        await asyncio.sleep(0)
        validator.close(URI)
        editor.gate.set()
        return await pending

    assert asyncio.run(run()) is None
    assert editor.published == {}


def test_unknown_check_rejected_at_construction():
    editor = _Editor()
    with pytest.raises(ValueError, match="Unknown check"):
        DocumentValidator(editor.get_text, editor.fetch_settings, editor.publish, checks=["Nope"])


def test_unreadable_text_aborts_pass():
    editor = _Editor()
    validator = editor.validator()
    missing = "file:///locale/missing.po"
    assert asyncio.run(validator.validate(missing)) is None
    assert editor.published == {}
