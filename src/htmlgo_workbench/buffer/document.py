"""Core document data structures for workbench buffers."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

Position = Tuple[int, int]  # (line, column), both 1-based


class Dialect(str, Enum):
    """Surface language a buffer currently holds."""

    MARKUP = "markup"
    BUILDER = "builder"

    @property
    def label(self) -> str:
        return "HTML" if self is Dialect.MARKUP else "Go"

    @property
    def other(self) -> "Dialect":
        return Dialect.BUILDER if self is Dialect.MARKUP else Dialect.MARKUP

    def comment(self, text: str) -> str:
        """Wrap ``text`` in this dialect's comment syntax."""

        if self is Dialect.MARKUP:
            return f"<!-- {text} -->"
        return "\n".join(f"// {line}" for line in text.splitlines() or [""])


@dataclass(frozen=True, slots=True)
class BufferDocument:
    """Immutable text snapshot built on a list-of-lines model.

    Line start offsets are computed once so diagnostics can map character
    offsets back to ``(line, column)`` positions in logarithmic time.
    """

    text: str = ""
    _lines: List[str] = field(default_factory=lambda: [""], repr=False)
    _starts: List[int] = field(default_factory=lambda: [0], repr=False)

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        lines = text.split("\n")
        starts = [0]
        for line in lines[:-1]:
            starts.append(starts[-1] + len(line) + 1)
        return cls(text=text, _lines=lines, _starts=starts)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, line: int) -> str:
        """Return the 1-based ``line`` without its newline."""

        return self._lines[line - 1]

    def line_end(self, line: int) -> int:
        """Exclusive end column of ``line``."""

        return len(self.get_line(line)) + 1

    def clamp_line(self, line: int) -> int:
        return min(max(line, 1), self.line_count)

    def position_of(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self.text))
        index = bisect_right(self._starts, offset) - 1
        return (index + 1, offset - self._starts[index] + 1)

    def is_blank(self) -> bool:
        return not self.text.strip()


__all__ = ["BufferDocument", "Dialect", "Position"]
