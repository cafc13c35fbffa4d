"""Minimal LSP server for scangen grammar files: diagnostics only."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

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

from scangen import __version__
from scangen.cli import default_name
from scangen.errors import GrammarError, RegexError
from scangen.flex import GeneratorOptions, generate
from scangen.loader import parse_grammar

server = LanguageServer("scangen-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)

_TOKENS_KEY = re.compile(r'"tokens"\s*:')


def _position_of(source: str, needle: str, start: int = 0) -> Position:
    """0-based position of the first occurrence of needle at or after start.

    Falls back to the document start when needle is absent.
    """
    offset = source.find(needle, start)
    if offset < 0:
        return Position(line=0, character=0)
    line = source.count("\n", 0, offset)
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line=line, character=offset - line_start)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Load the grammar, run the generator, and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        grammar = parse_grammar(source, filename)
    except GrammarError as exc:
        line = (exc.line or 1) - 1
        col = (exc.column or 1) - 1
        message = exc.message
        if exc.where:
            message += f" (in {exc.where})"
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=message,
                severity=DiagnosticSeverity.Error,
                source="scangen",
            )
        )
    else:
        options = GeneratorOptions(name=default_name(PurePosixPath(filename)))
        try:
            generate(grammar, options)
        except RegexError as exc:
            start = Position(line=0, character=0)
            end = Position(line=0, character=1)
            if exc.token:
                needle = f'"{exc.token}"'
                tokens_key = _TOKENS_KEY.search(source)
                start = _position_of(source, needle, tokens_key.end() if tokens_key else 0)
                end = Position(line=start.line, character=start.character + len(needle))
            diagnostics.append(
                Diagnostic(
                    range=Range(start=start, end=end),
                    message=exc.message,
                    severity=DiagnosticSeverity.Warning,
                    source="scangen",
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
