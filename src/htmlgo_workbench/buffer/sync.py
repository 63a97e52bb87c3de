"""Adapter boundary types for syncing buffers with editor widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Protocol, Sequence

from .document import Dialect

if TYPE_CHECKING:  # pragma: no cover - typing only
    from htmlgo_workbench.diagnostics.models import Diagnostic

ContentCallback = Callable[[str], None]


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing one pane."""

    name: str
    text: str
    dialect: Dialect
    origin: str
    read_only: bool
    version: int


class EditorSurface(Protocol):
    """The four calls the workbench needs from an editing pane widget."""

    def get_content(self) -> str:
        ...

    def set_content(self, text: str) -> None:
        ...

    def on_content_changed(self, callback: ContentCallback) -> None:
        """Register ``callback`` to receive the full text after each user edit."""
        ...

    def set_diagnostics(
        self, dialect: Dialect, diagnostics: Sequence["Diagnostic"]
    ) -> None:
        ...


class InMemorySurface:
    """Headless ``EditorSurface`` used by scripts and tests.

    ``type`` simulates a user edit; ``set_content`` is a programmatic
    replacement and does not notify listeners.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._callbacks: List[ContentCallback] = []
        self.diagnostics: Dict[Dialect, list["Diagnostic"]] = {}
        self.read_only = False

    def get_content(self) -> str:
        return self._text

    def set_content(self, text: str) -> None:
        self._text = text

    def on_content_changed(self, callback: ContentCallback) -> None:
        self._callbacks.append(callback)

    def set_diagnostics(
        self, dialect: Dialect, diagnostics: Sequence["Diagnostic"]
    ) -> None:
        self.diagnostics[dialect] = list(diagnostics)

    def set_read_only(self, read_only: bool) -> None:
        self.read_only = read_only

    def type(self, text: str) -> None:
        self._text = text
        for callback in list(self._callbacks):
            callback(text)


class ReadOnlyBufferError(RuntimeError):
    """Raised when an author edit targets a read-only buffer."""

    def __init__(self, message: str, *, buffer: str | None = None) -> None:
        super().__init__(message)
        self.buffer = buffer


__all__ = [
    "BufferMirror",
    "ContentCallback",
    "EditorSurface",
    "InMemorySurface",
    "ReadOnlyBufferError",
]
