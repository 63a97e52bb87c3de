"""Direction state machine: which pane is the source and in which dialect."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from htmlgo_workbench.buffer import Buffer, Dialect, Origin
from htmlgo_workbench.runtime import telemetry

from .models import Direction


@dataclass(frozen=True, slots=True)
class PaneCapture:
    source_text: str
    derived_text: str
    derived_origin: Origin


@dataclass(frozen=True, slots=True)
class DirectionTransition:
    previous: Direction
    current: Direction
    captured: PaneCapture
    seeded_from: str  # "converted", "restored" or "captured"


class DirectionStateMachine:
    """Owns the two panes and swaps their roles on explicit selection.

    Pane objects keep their identity; a switch swaps which one is the
    source and re-tags both dialects. When the pane becoming the source only
    holds a converted result and the current source has not been edited
    since the previous switch, the text last authored in that dialect is
    restored instead, so toggling back and forth is lossless.
    """

    def __init__(
        self,
        first: Buffer,
        second: Buffer,
        *,
        direction: Direction = Direction.MARKUP_TO_BUILDER,
        derived_read_only: bool = False,
    ) -> None:
        self.direction = direction
        self.source = first
        self.derived = second
        self.derived_read_only = derived_read_only
        self._authored: Dict[Dialect, str] = {}
        self._source_mark: Optional[int] = None
        self._apply_roles()

    def pane_for(self, dialect: Dialect) -> Buffer:
        return self.source if self.source.dialect is dialect else self.derived

    def switch(self, direction: Direction) -> Optional[DirectionTransition]:
        if direction is self.direction:
            return None
        previous = self.direction
        old_source, old_derived = self.source, self.derived
        captured = PaneCapture(
            source_text=old_source.content,
            derived_text=old_derived.content,
            derived_origin=old_derived.origin,
        )
        unedited = self._source_mark == old_source.version

        self.direction = direction
        self.source, self.derived = old_derived, old_source
        self._apply_roles()

        restored = self._authored.get(direction.source_dialect)
        seeded_from = "captured"
        if captured.derived_origin is Origin.CONVERTED:
            if unedited and restored is not None:
                self.source.replace(restored, origin=Origin.AUTHORED, label="restore")
                seeded_from = "restored"
            else:
                self.source.replace(
                    captured.derived_text, origin=Origin.AUTHORED, label="seed"
                )
                seeded_from = "converted"
        elif captured.derived_origin is Origin.PLACEHOLDER and restored is not None:
            self.source.replace(restored, origin=Origin.AUTHORED, label="restore")
            seeded_from = "restored"

        if old_source.origin is Origin.AUTHORED:
            self._authored[previous.source_dialect] = captured.source_text
        self._source_mark = self.source.version
        telemetry.record_event(
            "direction.switch",
            data={"from": previous, "to": direction, "seeded_from": seeded_from},
        )
        return DirectionTransition(
            previous=previous,
            current=direction,
            captured=captured,
            seeded_from=seeded_from,
        )

    def _apply_roles(self) -> None:
        self.source.retag(self.direction.source_dialect)
        self.derived.retag(self.direction.target_dialect)
        self.source.read_only = False
        self.derived.read_only = self.derived_read_only


__all__ = ["DirectionStateMachine", "DirectionTransition", "PaneCapture"]
