"""Pane buffer: dialect-tagged text with wholesale replacement and listeners."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ContextManager, List, Optional

from htmlgo_workbench.runtime import telemetry

from .document import BufferDocument, Dialect
from .sync import BufferMirror, ReadOnlyBufferError


class Origin(str, Enum):
    """Who produced the text currently held by a buffer."""

    AUTHORED = "authored"
    CONVERTED = "converted"
    PLACEHOLDER = "placeholder"


@dataclass(slots=True)
class BufferChange:
    name: str
    version: int
    text: str
    dialect: Dialect
    origin: Origin
    label: str


BufferListener = Callable[[BufferChange], None]


class Buffer:
    def __init__(
        self,
        *,
        name: str,
        dialect: Dialect,
        text: str = "",
        origin: Origin = Origin.AUTHORED,
        read_only: bool = False,
    ) -> None:
        self.name = name
        self.dialect = dialect
        self.document = BufferDocument.from_text(text)
        self.origin = origin
        self.read_only = read_only
        self.version = 0
        self._listeners: List[BufferListener] = []

    @property
    def content(self) -> str:
        return self.document.text

    @property
    def holds_conversion(self) -> bool:
        return self.origin is Origin.CONVERTED

    def subscribe(self, listener: BufferListener) -> None:
        self._listeners.append(listener)

    def mirror(self) -> BufferMirror:
        return BufferMirror(
            name=self.name,
            text=self.content,
            dialect=self.dialect,
            origin=self.origin.value,
            read_only=self.read_only,
            version=self.version,
        )

    def replace(
        self, text: str, *, origin: Origin, label: str = "replace"
    ) -> Optional[BufferChange]:
        """Swap in ``text`` wholesale; returns ``None`` when nothing changed."""

        if text == self.content and origin is self.origin:
            return None
        with Transaction(self, label) as tx:
            self.document = BufferDocument.from_text(text)
            self.origin = origin
            self.version += 1
            tx.commit()
        return tx.change

    def author_edit(self, text: str) -> Optional[BufferChange]:
        if self.read_only:
            raise ReadOnlyBufferError(
                f"Buffer '{self.name}' is read-only", buffer=self.name
            )
        return self.replace(text, origin=Origin.AUTHORED, label="author_edit")

    def retag(self, dialect: Dialect) -> None:
        self.dialect = dialect


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one replacement in a telemetry span; listeners hear about commits."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.change: Optional[BufferChange] = None
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name, "dialect": self.buffer.dialect},
        )
        self._span_cm.__enter__()
        return self

    def commit(self) -> None:
        buffer = self.buffer
        self.change = BufferChange(
            name=buffer.name,
            version=buffer.version,
            text=buffer.content,
            dialect=buffer.dialect,
            origin=buffer.origin,
            label=self.label,
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        if exc_type is None and self.change is not None:
            for listener in list(self.buffer._listeners):
                listener(self.change)
        return False
