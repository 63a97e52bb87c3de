"""Direction, request and result types exchanged with the converter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from htmlgo_workbench.buffer.document import Dialect


class UnknownDirectionError(ValueError):
    """Raised when a direction name cannot be parsed."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown conversion direction '{name}'")
        self.name = name


class Direction(str, Enum):
    MARKUP_TO_BUILDER = "markup_to_builder"
    BUILDER_TO_MARKUP = "builder_to_markup"

    @property
    def source_dialect(self) -> Dialect:
        if self is Direction.MARKUP_TO_BUILDER:
            return Dialect.MARKUP
        return Dialect.BUILDER

    @property
    def target_dialect(self) -> Dialect:
        return self.source_dialect.other

    @property
    def wire_name(self) -> str:
        return "html2go" if self is Direction.MARKUP_TO_BUILDER else "go2html"

    @property
    def reverse(self) -> "Direction":
        if self is Direction.MARKUP_TO_BUILDER:
            return Direction.BUILDER_TO_MARKUP
        return Direction.MARKUP_TO_BUILDER

    @classmethod
    def parse(cls, name: "str | Direction") -> "Direction":
        if isinstance(name, Direction):
            return name
        key = str(name).strip().lower()
        for direction in cls:
            if key in {direction.value, direction.wire_name}:
                return direction
        raise UnknownDirectionError(str(name))


@dataclass(frozen=True, slots=True)
class MarkupToBuilderRequest:
    source: str
    name_prefix: str
    strip_declaration: bool = True

    direction = Direction.MARKUP_TO_BUILDER

    def to_payload(self) -> Dict[str, Any]:
        return {
            "html": self.source,
            "packagePrefix": self.name_prefix,
            "removePackage": self.strip_declaration,
            "direction": self.direction.wire_name,
        }


@dataclass(frozen=True, slots=True)
class BuilderToMarkupRequest:
    source: str

    direction = Direction.BUILDER_TO_MARKUP

    def to_payload(self) -> Dict[str, Any]:
        return {"goCode": self.source, "direction": self.direction.wire_name}


ConversionRequest = Union[MarkupToBuilderRequest, BuilderToMarkupRequest]


@dataclass(frozen=True, slots=True)
class ConversionOk:
    output: str


@dataclass(frozen=True, slots=True)
class ConversionErr:
    message: str


ConversionResult = Union[ConversionOk, ConversionErr]


# Fixed derived-pane texts, keyed by the dialect the derived pane holds.
EMPTY_SOURCE_PLACEHOLDERS: Dict[Dialect, str] = {
    Dialect.BUILDER: "// Enter HTML in the source pane",
    Dialect.MARKUP: "<!-- Enter htmlgo builder code in the source pane -->",
}

EMPTY_OUTPUT_PLACEHOLDERS: Dict[Dialect, str] = {
    Dialect.BUILDER: "// Conversion failed: the converter returned no code",
    Dialect.MARKUP: "<!-- Conversion failed: the converter returned no HTML -->",
}


def error_placeholder(dialect: Dialect, message: str) -> str:
    return dialect.comment(f"Conversion error: {message}")


__all__ = [
    "BuilderToMarkupRequest",
    "ConversionErr",
    "ConversionOk",
    "ConversionRequest",
    "ConversionResult",
    "Direction",
    "EMPTY_OUTPUT_PLACEHOLDERS",
    "EMPTY_SOURCE_PLACEHOLDERS",
    "MarkupToBuilderRequest",
    "UnknownDirectionError",
    "error_placeholder",
]
