from __future__ import annotations

from typing import List

import pytest

from htmlgo_workbench.buffer import (
    Buffer,
    BufferChange,
    BufferDocument,
    Dialect,
    Origin,
    ReadOnlyBufferError,
)


def make_buffer(text: str = "", **kwargs) -> Buffer:
    return Buffer(name="left", dialect=Dialect.MARKUP, text=text, **kwargs)


def test_document_positions_are_one_based() -> None:
    document = BufferDocument.from_text("ab\ncde\n")

    assert document.line_count == 3
    assert document.get_line(2) == "cde"
    assert document.line_end(2) == 4
    assert document.position_of(0) == (1, 1)
    assert document.position_of(3) == (2, 1)
    assert document.position_of(5) == (2, 3)
    assert document.position_of(99) == (3, 1)
    assert document.clamp_line(10) == 3


def test_blank_detection() -> None:
    assert BufferDocument.from_text(" \n\t").is_blank()
    assert not BufferDocument.from_text(" x ").is_blank()


def test_dialect_comment_syntax() -> None:
    assert Dialect.MARKUP.comment("oops") == "<!-- oops -->"
    assert Dialect.BUILDER.comment("one\ntwo") == "// one\n// two"
    assert Dialect.MARKUP.other is Dialect.BUILDER
    assert Dialect.BUILDER.label == "Go"


def test_replace_notifies_listeners_and_bumps_version() -> None:
    buffer = make_buffer("<p></p>")
    changes: List[BufferChange] = []
    buffer.subscribe(changes.append)

    change = buffer.replace("<div></div>", origin=Origin.CONVERTED, label="converted")

    assert change is not None
    assert buffer.version == 1
    assert buffer.holds_conversion
    assert [c.text for c in changes] == ["<div></div>"]
    assert changes[0].label == "converted"


def test_replace_with_identical_state_is_silent() -> None:
    buffer = make_buffer("<p></p>")
    changes: List[BufferChange] = []
    buffer.subscribe(changes.append)

    assert buffer.replace("<p></p>", origin=Origin.AUTHORED) is None
    assert buffer.version == 0
    assert changes == []


def test_read_only_buffer_rejects_author_edits() -> None:
    buffer = make_buffer("keep", read_only=True)

    with pytest.raises(ReadOnlyBufferError) as excinfo:
        buffer.author_edit("changed")

    assert excinfo.value.buffer == "left"
    assert buffer.content == "keep"


def test_mirror_reports_pane_state() -> None:
    buffer = make_buffer("<p></p>")
    buffer.retag(Dialect.BUILDER)

    mirror = buffer.mirror()

    assert mirror.dialect is Dialect.BUILDER
    assert mirror.origin == "authored"
    assert mirror.text == "<p></p>"
