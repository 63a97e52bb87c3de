"""Pane buffers and the editor-surface boundary."""

from .buffer import Buffer, BufferChange, BufferListener, Origin, Transaction
from .document import BufferDocument, Dialect, Position
from .sync import (
    BufferMirror,
    ContentCallback,
    EditorSurface,
    InMemorySurface,
    ReadOnlyBufferError,
)

__all__ = [
    "Buffer",
    "BufferChange",
    "BufferDocument",
    "BufferListener",
    "BufferMirror",
    "ContentCallback",
    "Dialect",
    "EditorSurface",
    "InMemorySurface",
    "Origin",
    "Position",
    "ReadOnlyBufferError",
    "Transaction",
]
