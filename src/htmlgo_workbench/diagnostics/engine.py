"""Structural well-formedness checks for both surface dialects.

Neither scanner is a parser: each tracks nesting with a single stack.
String and comment literals are not understood, so a ``)`` inside a Go
string literal counts as a real bracket and tag-like text inside a
``<script>`` body counts as a real tag. Both scans are single passes over
the content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List

from htmlgo_workbench.buffer.document import BufferDocument, Dialect
from htmlgo_workbench.runtime.telemetry import span

from .models import Diagnostic, ErrorCategory, Range, Severity

TAG_PATTERN = re.compile(
    r"<!--.*?-->"  # comments are skipped
    r"|<![^>]*>"  # doctype and friends
    r"|<(?P<closing>/)?(?P<name>[A-Za-z][\w:.-]*)"
    r"(?P<attrs>(?:\"[^\"]*\"|'[^']*'|[^'\">])*)>",
    re.DOTALL,
)

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

BRACKET_PAIRS: Dict[str, str] = {"(": ")", "{": "}", "[": "]"}
CLOSING_BRACKETS = frozenset(BRACKET_PAIRS.values())


@dataclass(slots=True)
class OpenEntry:
    """Stack entry: what was opened and where."""

    token: str
    start: int
    end: int


def _error(document: BufferDocument, message: str, start: int, end: int) -> Diagnostic:
    return Diagnostic(
        severity=Severity.ERROR,
        message=message,
        range=Range.span(document, start, end),
        category=ErrorCategory.STRUCTURE,
    )


def scan_markup(document: BufferDocument) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    stack: List[OpenEntry] = []

    for match in TAG_PATTERN.finditer(document.text):
        name = match.group("name")
        if name is None:
            continue
        if match.group("closing"):
            if not stack:
                diagnostics.append(
                    _error(
                        document,
                        f"extraneous closing tag `</{name}>`",
                        match.start(),
                        match.end(),
                    )
                )
                continue
            top = stack.pop()
            if top.token.lower() != name.lower():
                diagnostics.append(
                    _error(
                        document,
                        f"mismatched closing tag: expected `</{top.token}>`, "
                        f"found `</{name}>`",
                        match.start(),
                        match.end(),
                    )
                )
                stack.append(top)
            continue

        self_closing = match.group("attrs").rstrip().endswith("/")
        if self_closing or name.lower() in VOID_ELEMENTS:
            continue
        stack.append(OpenEntry(name, match.start(), match.end()))

    for entry in stack:
        diagnostics.append(
            _error(document, f"unclosed tag `<{entry.token}>`", entry.start, entry.end)
        )
    return diagnostics


def scan_builder(document: BufferDocument) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    stack: List[OpenEntry] = []

    for offset, char in enumerate(document.text):
        if char in BRACKET_PAIRS:
            stack.append(OpenEntry(char, offset, offset + 1))
        elif char in CLOSING_BRACKETS:
            if not stack:
                diagnostics.append(
                    _error(
                        document,
                        f"extraneous closing bracket `{char}`",
                        offset,
                        offset + 1,
                    )
                )
                continue
            top = stack.pop()
            expected = BRACKET_PAIRS[top.token]
            if expected != char:
                diagnostics.append(
                    _error(
                        document,
                        f"mismatched bracket: expected `{expected}`, found `{char}`",
                        offset,
                        offset + 1,
                    )
                )

    for entry in stack:
        diagnostics.append(
            _error(
                document, f"unclosed bracket `{entry.token}`", entry.start, entry.end
            )
        )
    return diagnostics


_SCANNERS: Dict[Dialect, Callable[[BufferDocument], List[Diagnostic]]] = {
    Dialect.MARKUP: scan_markup,
    Dialect.BUILDER: scan_builder,
}


def validate(content: str, dialect: Dialect) -> List[Diagnostic]:
    """Return structural diagnostics for ``content`` in document order."""

    document = BufferDocument.from_text(content)
    with span(name=f"diagnostics::{dialect.value}", metadata={"size": len(content)}):
        diagnostics = _SCANNERS[dialect](document)
    return sorted(diagnostics, key=lambda item: item.range.start)


__all__ = [
    "BRACKET_PAIRS",
    "TAG_PATTERN",
    "VOID_ELEMENTS",
    "scan_builder",
    "scan_markup",
    "validate",
]
