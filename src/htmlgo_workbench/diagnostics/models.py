"""Diagnostic records surfaced to editing panes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from htmlgo_workbench.buffer.document import BufferDocument, Position


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErrorCategory(str, Enum):
    """Coarse classification of converter failures."""

    SYNTAX = "syntax"
    UNDEFINED = "undefined"
    TYPE = "type"
    COMPILATION = "compilation"
    STRUCTURE = "structure"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ErrorCategory.SYNTAX: "Syntax error",
    ErrorCategory.UNDEFINED: "Undefined name",
    ErrorCategory.TYPE: "Type error",
    ErrorCategory.COMPILATION: "Compilation error",
    ErrorCategory.STRUCTURE: "Structure error",
    ErrorCategory.UNKNOWN: "Error",
}


@dataclass(frozen=True, slots=True)
class Range:
    """1-based source span; ``end_col`` is exclusive."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __post_init__(self) -> None:
        if self.start_line < 1 or self.start_col < 1:
            raise ValueError("Range positions are 1-based")
        if (self.end_line, self.end_col) < (self.start_line, self.start_col):
            raise ValueError("Range end precedes its start")

    @property
    def start(self) -> Position:
        return (self.start_line, self.start_col)

    @classmethod
    def span(
        cls, document: BufferDocument, start_offset: int, end_offset: int
    ) -> "Range":
        start_line, start_col = document.position_of(start_offset)
        end_line, end_col = document.position_of(end_offset)
        return cls(start_line, start_col, end_line, end_col)

    @classmethod
    def whole(cls, document: BufferDocument) -> "Range":
        last = document.line_count
        return cls(1, 1, last, document.line_end(last))


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    message: str
    range: Range
    category: Optional[ErrorCategory] = None
    source: str = "structure"

    @property
    def line(self) -> int:
        return self.range.start_line

    @property
    def column(self) -> int:
        return self.range.start_col


__all__ = ["Diagnostic", "ErrorCategory", "Range", "Severity"]
