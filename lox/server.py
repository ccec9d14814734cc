"""
A minimal Language Server for Lox.

It runs the static part of the pipeline (scan, parse, resolve) on every
open or changed document and publishes the diagnostics; the program is
never executed. Completion offers the keywords and the names declared at
the top level of the document.
"""

from typing import List

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
)
from pygls.server import LanguageServer

from .config import CLOCK_NATIVE_NAME, KEYWORDS
from .diagnostics import RunContext
from .interpreter import Interpreter
from .parser.core.classes import ClassDecl, FunDecl, VarDecl
from .parser.core.parser import parse
from .scanner.scanner import scan
from .semantic_analyser.core.resolver import resolve

server = LanguageServer("lox-server", "v1")


def analyse_source(source: str):
    """Runs scan, parse and (when the syntax is clean) resolve. Returns (context, statements)."""
    context = RunContext()
    statements = parse(scan(source, context), context)
    if not context.had_error:
        resolve(statements, Interpreter(context), context)
    return context, statements


def collect_diagnostics(source: str) -> List[Diagnostic]:
    context, _ = analyse_source(source)
    diagnostics = []
    for item in context.diagnostics:
        # Lox lines are 1-based; LSP lines are 0-based. Errors carry no column, so mark the whole line.
        line = max(item.line - 1, 0)
        diagnostics.append(
            Diagnostic(
                range=Range(start=Position(line=line, character=0), end=Position(line=line, character=100)),
                message=f"Error{item.where}: {item.message}",
                severity=DiagnosticSeverity.Error,
                source="lox",
            )
        )
    return diagnostics


def collect_completions(source: str) -> CompletionList:
    items = [CompletionItem(label=keyword, kind=CompletionItemKind.Keyword) for keyword in sorted(KEYWORDS)]
    items.append(CompletionItem(label=CLOCK_NATIVE_NAME, kind=CompletionItemKind.Function, detail="Native function"))

    _, statements = analyse_source(source)
    for stmt in statements:
        if isinstance(stmt, ClassDecl):
            items.append(CompletionItem(label=stmt.name.lexeme, kind=CompletionItemKind.Class))
        elif isinstance(stmt, FunDecl):
            params = ", ".join(p.lexeme for p in stmt.params)
            items.append(CompletionItem(label=stmt.name.lexeme, kind=CompletionItemKind.Function, detail=f"fun {stmt.name.lexeme}({params})"))
        elif isinstance(stmt, VarDecl):
            items.append(CompletionItem(label=stmt.name.lexeme, kind=CompletionItemKind.Variable))

    return CompletionList(is_incomplete=False, items=items)


def _validate(ls, params):
    text_doc = ls.workspace.get_document(params.text_document.uri)
    ls.publish_diagnostics(params.text_document.uri, collect_diagnostics(text_doc.source))


@server.feature(TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls, params):
    _validate(ls, params)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    _validate(ls, params)


@server.feature(TEXT_DOCUMENT_COMPLETION)
def completions(params):
    document = server.workspace.get_document(params.text_document.uri)
    return collect_completions(document.source)


def start_server():
    server.start_io()


if __name__ == "__main__":
    start_server()
