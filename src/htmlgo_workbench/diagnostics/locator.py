"""Best-effort mapping of converter error text back onto the source pane.

Rules are independent matchers tried in order; the first one that yields
diagnostics wins. The trailing whole-buffer rule always yields, so every
failed conversion leaves at least one visible diagnostic behind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from htmlgo_workbench.buffer.document import BufferDocument
from htmlgo_workbench.runtime.telemetry import span

from .models import Diagnostic, ErrorCategory, Range, Severity

LINE_PATTERN = re.compile(
    r"\bline\s+(?P<line>\d+)(?:\s*,?\s*col(?:umn)?\s+(?P<col>\d+))?", re.IGNORECASE
)
TAG_MENTION_PATTERN = re.compile(r"</?(?P<name>[A-Za-z][\w:.-]*)[^<>]*>")
UNDEFINED_PATTERN = re.compile(r"undefined:\s*`?(?P<name>[A-Za-z_][\w.]*)`?")

# Mirrors the converter's own error table; order matters.
CATEGORY_PATTERNS: Tuple[Tuple[str, ErrorCategory], ...] = (
    ("unexpected if, expected expression", ErrorCategory.SYNTAX),
    ("undefined:", ErrorCategory.UNDEFINED),
    ("cannot use", ErrorCategory.TYPE),
    ("syntax error", ErrorCategory.SYNTAX),
    ("not enough arguments", ErrorCategory.COMPILATION),
)

RuleFn = Callable[[str, BufferDocument], List[Range]]


def classify_error(message: str) -> ErrorCategory:
    for needle, category in CATEGORY_PATTERNS:
        if needle in message:
            return category
    return ErrorCategory.UNKNOWN


def match_line_reference(message: str, document: BufferDocument) -> List[Range]:
    found = LINE_PATTERN.search(message)
    if found is None:
        return []
    line = document.clamp_line(int(found.group("line")))
    end = document.line_end(line)
    column = min(max(int(found.group("col") or 1), 1), end)
    return [Range(line, column, line, end)]


def match_tag_mention(message: str, document: BufferDocument) -> List[Range]:
    found = TAG_MENTION_PATTERN.search(message)
    if found is None:
        return []
    opener = re.compile(
        rf"<{re.escape(found.group('name'))}(?=[\s/>])[^>]*>", re.IGNORECASE
    )
    return [
        Range.span(document, hit.start(), hit.end())
        for hit in opener.finditer(document.text)
    ]


def match_undefined_name(message: str, document: BufferDocument) -> List[Range]:
    found = UNDEFINED_PATTERN.search(message)
    if found is None:
        return []
    word = re.compile(rf"(?<![\w.]){re.escape(found.group('name'))}(?!\w)")
    return [
        Range.span(document, hit.start(), hit.end())
        for hit in word.finditer(document.text)
    ]


def match_whole_buffer(message: str, document: BufferDocument) -> List[Range]:
    del message
    return [Range.whole(document)]


@dataclass(frozen=True, slots=True)
class LocatorRule:
    name: str
    match: RuleFn


DEFAULT_RULES: Tuple[LocatorRule, ...] = (
    LocatorRule("line_reference", match_line_reference),
    LocatorRule("tag_mention", match_tag_mention),
    LocatorRule("undefined_name", match_undefined_name),
)

FALLBACK_RULE = LocatorRule("whole_buffer", match_whole_buffer)


class ErrorLocator:
    """Runs the ordered rule list against a failed conversion's message."""

    def __init__(self, rules: Optional[Sequence[LocatorRule]] = None) -> None:
        self.rules: Tuple[LocatorRule, ...] = tuple(
            DEFAULT_RULES if rules is None else rules
        )

    def locate(self, message: str, source: str) -> List[Diagnostic]:
        document = BufferDocument.from_text(source)
        category = classify_error(message)
        with span(name="locator::locate", metadata={"category": category}) as handle:
            ranges: List[Range] = []
            fired = FALLBACK_RULE
            for rule in self.rules:
                ranges = rule.match(message, document)
                if ranges:
                    fired = rule
                    break
            if not ranges:
                ranges = FALLBACK_RULE.match(message, document)
            handle.add_metadata("rule", fired.name)
        return [
            Diagnostic(
                severity=Severity.ERROR,
                message=message,
                range=anchor,
                category=category,
                source="converter",
            )
            for anchor in ranges
        ]


_DEFAULT_LOCATOR = ErrorLocator()


def locate(message: str, source: str) -> List[Diagnostic]:
    return _DEFAULT_LOCATOR.locate(message, source)


__all__ = [
    "CATEGORY_PATTERNS",
    "DEFAULT_RULES",
    "ErrorLocator",
    "LocatorRule",
    "classify_error",
    "locate",
    "match_line_reference",
    "match_tag_mention",
    "match_undefined_name",
]
