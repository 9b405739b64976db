"""Language server: publishes duplicate-message diagnostics for open catalogs."""

from __future__ import annotations

import logging
from collections.abc import Callable

from lsprotocol import types
from pygls.server import LanguageServer

from . import __version__
from .models import Diagnostic, DocumentRange
from .settings import SECTION, Settings
from .validation import DocumentValidator

logger = logging.getLogger("gettext_duplicates.server")


def _to_lsp_range(rng: DocumentRange) -> types.Range:
    return types.Range(
        start=types.Position(line=rng.start.line, character=rng.start.character),
        end=types.Position(line=rng.end.line, character=rng.end.character),
    )


def _unchanged(rng: types.Range) -> types.Range:
    return rng


def to_lsp_diagnostic(
    diagnostic: Diagnostic,
    to_client: Callable[[types.Range], types.Range] | None = None,
) -> types.Diagnostic:
    """Convert to lsprotocol types.

    Ranges are counted in code points.  *to_client* re-encodes each range
    (the diagnostic's own and every related one) in the units negotiated
    with the client.
    """
    if to_client is None:
        to_client = _unchanged
    return types.Diagnostic(
        range=to_client(_to_lsp_range(diagnostic.range)),
        message=diagnostic.message,
        severity=types.DiagnosticSeverity(int(diagnostic.severity)),
        code=diagnostic.code or None,
        source=diagnostic.source,
        related_information=[
            types.DiagnosticRelatedInformation(
                location=types.Location(uri=rel.uri, range=to_client(_to_lsp_range(rel.range))),
                message=rel.message,
            )
            for rel in diagnostic.related_information
        ],
    )


class CatalogLanguageServer(LanguageServer):
    """pygls server that owns one :class:`DocumentValidator`."""

    def __init__(self) -> None:
        super().__init__(name=SECTION, version=__version__)
        self.validator = DocumentValidator(
            get_text=self._document_text,
            fetch_settings=self._fetch_settings,
            publish=self._publish,
        )

    def _document_text(self, uri: str) -> str:
        return self.workspace.get_text_document(uri).source

    async def _fetch_settings(self, uri: str) -> Settings:
        result = await self.get_configuration_async(
            types.WorkspaceConfigurationParams(
                items=[types.ConfigurationItem(scope_uri=uri, section=SECTION)]
            )
        )
        return Settings.from_mapping(result[0] if result else None)

    def _publish(self, uri: str, diagnostics: list[Diagnostic]) -> None:
        doc = self.workspace.get_text_document(uri)

        def to_client(rng: types.Range) -> types.Range:
            return doc.position_codec.range_to_client_units(doc.lines, rng)

        self.publish_diagnostics(uri, [to_lsp_diagnostic(d, to_client) for d in diagnostics])


def create_server() -> CatalogLanguageServer:
    """Create the server and register its LSP feature handlers."""
    server = CatalogLanguageServer()

    @server.feature(types.INITIALIZED)
    async def initialized(ls: CatalogLanguageServer, params: types.InitializedParams) -> None:
        workspace_caps = ls.client_capabilities.workspace
        did_change = workspace_caps.did_change_configuration if workspace_caps else None
        if did_change is None or not did_change.dynamic_registration:
            return
        await ls.register_capability_async(
            types.RegistrationParams(
                registrations=[
                    types.Registration(
                        id=f"{SECTION}-configuration",
                        method=types.WORKSPACE_DID_CHANGE_CONFIGURATION,
                    )
                ]
            )
        )
        logger.info("Registered for configuration changes")

    @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
    async def did_open(ls: CatalogLanguageServer, params: types.DidOpenTextDocumentParams) -> None:
        await ls.validator.validate(params.text_document.uri)

    @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
    async def did_change(ls: CatalogLanguageServer, params: types.DidChangeTextDocumentParams) -> None:
        await ls.validator.validate(params.text_document.uri)

    @server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(ls: CatalogLanguageServer, params: types.DidCloseTextDocumentParams) -> None:
        ls.validator.close(params.text_document.uri)

    @server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def did_change_configuration(
        ls: CatalogLanguageServer, params: types.DidChangeConfigurationParams
    ) -> None:
        logger.info("Configuration changed, revalidating open documents")
        await ls.validator.configuration_changed(list(ls.workspace.text_documents))

    return server
