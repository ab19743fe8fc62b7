"""Minimal LSP server for SQL2 statements, diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from sql2scan import __version__
from sql2scan.errors import ScanError
from sql2scan.lexer import tokenize

server = LanguageServer(
    "sql2scan-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Scan the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    try:
        tokenize(doc.source)
    except ScanError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        # Underline the literal's opening quote or bracket
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="sql2scan",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
