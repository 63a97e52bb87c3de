from __future__ import annotations

import pytest

from htmlgo_workbench.buffer import Buffer, Dialect, Origin
from htmlgo_workbench.conversion import (
    Direction,
    DirectionStateMachine,
    UnknownDirectionError,
)


def make_machine(
    left: str = "<p></p>", right: str = "", *, read_only: bool = False
) -> DirectionStateMachine:
    return DirectionStateMachine(
        Buffer(name="left", dialect=Dialect.MARKUP, text=left),
        Buffer(
            name="right", dialect=Dialect.BUILDER, text=right, origin=Origin.PLACEHOLDER
        ),
        derived_read_only=read_only,
    )


def test_direction_properties() -> None:
    forward = Direction.MARKUP_TO_BUILDER

    assert forward.source_dialect is Dialect.MARKUP
    assert forward.target_dialect is Dialect.BUILDER
    assert forward.wire_name == "html2go"
    assert forward.reverse is Direction.BUILDER_TO_MARKUP
    assert Direction.BUILDER_TO_MARKUP.wire_name == "go2html"


def test_direction_parse_accepts_values_and_wire_names() -> None:
    assert Direction.parse("go2html") is Direction.BUILDER_TO_MARKUP
    assert Direction.parse(" Markup_To_Builder ") is Direction.MARKUP_TO_BUILDER
    assert Direction.parse(Direction.BUILDER_TO_MARKUP) is Direction.BUILDER_TO_MARKUP

    with pytest.raises(UnknownDirectionError) as excinfo:
        Direction.parse("sideways")
    assert excinfo.value.name == "sideways"


def test_switch_swaps_roles_but_keeps_pane_identity() -> None:
    machine = make_machine()
    left, right = machine.source, machine.derived

    transition = machine.switch(Direction.BUILDER_TO_MARKUP)

    assert transition is not None
    assert machine.source is right
    assert machine.derived is left
    assert right.dialect is Dialect.BUILDER
    assert left.dialect is Dialect.MARKUP
    assert transition.captured.source_text == "<p></p>"


def test_switch_to_current_direction_returns_none() -> None:
    machine = make_machine()

    assert machine.switch(Direction.MARKUP_TO_BUILDER) is None


def test_placeholder_derived_is_left_as_captured() -> None:
    machine = make_machine(right="// Enter HTML in the source pane")

    transition = machine.switch(Direction.BUILDER_TO_MARKUP)

    assert transition is not None
    assert transition.seeded_from == "captured"
    assert machine.source.content == "// Enter HTML in the source pane"


def test_converted_derived_seeds_new_source() -> None:
    machine = make_machine()
    machine.derived.replace("var n = h.P()", origin=Origin.CONVERTED)

    transition = machine.switch(Direction.BUILDER_TO_MARKUP)

    assert transition is not None
    assert transition.seeded_from == "converted"
    assert machine.source.content == "var n = h.P()"
    assert machine.source.origin is Origin.AUTHORED


def test_unedited_round_trip_restores_authored_text() -> None:
    machine = make_machine(left="<p>hi</p>")
    machine.derived.replace('var n = h.P("hi")', origin=Origin.CONVERTED)
    machine.switch(Direction.BUILDER_TO_MARKUP)
    machine.derived.replace("<p>\n  hi\n</p>", origin=Origin.CONVERTED)

    transition = machine.switch(Direction.MARKUP_TO_BUILDER)

    assert transition is not None
    assert transition.seeded_from == "restored"
    assert machine.source.content == "<p>hi</p>"


def test_edited_source_blocks_restore() -> None:
    machine = make_machine(left="<p>hi</p>")
    machine.derived.replace('var n = h.P("hi")', origin=Origin.CONVERTED)
    machine.switch(Direction.BUILDER_TO_MARKUP)
    machine.source.author_edit('var n = h.P("bye")')
    machine.derived.replace("<p>bye</p>", origin=Origin.CONVERTED)

    transition = machine.switch(Direction.MARKUP_TO_BUILDER)

    assert transition is not None
    assert transition.seeded_from == "converted"
    assert machine.source.content == "<p>bye</p>"


def test_derived_read_only_follows_role() -> None:
    machine = make_machine(read_only=True)
    left, right = machine.source, machine.derived

    assert not left.read_only and right.read_only

    machine.switch(Direction.BUILDER_TO_MARKUP)

    assert left.read_only and not right.read_only


def test_placeholder_source_is_never_remembered_as_authored() -> None:
    machine = make_machine(left="", right="// Enter HTML in the source pane")
    machine.switch(Direction.BUILDER_TO_MARKUP)
    machine.switch(Direction.MARKUP_TO_BUILDER)

    transition = machine.switch(Direction.BUILDER_TO_MARKUP)

    assert transition is not None
    assert transition.seeded_from == "captured"
    assert machine.source.origin is Origin.PLACEHOLDER
