"""Minimal Textual adapter that wires orchestrator events into UI callbacks."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from htmlgo_workbench.conversion import ConversionOrchestrator, ConversionOutcome
from htmlgo_workbench.conversion import events
from htmlgo_workbench.conversion.direction import DirectionTransition
from htmlgo_workbench.diagnostics import Diagnostic


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class WorkbenchHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_status: Callable[[str], None]
    show_diagnostics: Callable[[str, Sequence[str]], None] = _noop
    update_titles: Callable[[str, str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


STATUS_TEXT = {
    "converted": "converted",
    "failed": "conversion failed",
    "rejected": "rejected before sending",
    "empty": "source is empty",
    "dropped": "busy, trigger dropped",
    "stale": "direction changed mid-flight",
}


class TextualWorkbenchAdapter:
    """Bridges orchestrator bus events to a Textual-friendly surface."""

    def __init__(
        self, orchestrator: ConversionOrchestrator, hooks: WorkbenchHooks
    ) -> None:
        self.orchestrator = orchestrator
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_titles()
        for pane in ("left", "right"):
            self._render_diagnostics(pane, self._pane_diagnostics(pane))

    def request_conversion(self) -> "asyncio.Task[ConversionOutcome]":
        self._log_state("convert ->")
        self.hooks.update_status("converting...")
        return self.orchestrator.request_conversion()

    def toggle_direction(self) -> "asyncio.Task[Optional[ConversionOutcome]]":
        self._log_state("toggle ->", to=self.orchestrator.direction.reverse.value)
        return self.orchestrator.toggle_direction()

    def process_timers(self) -> Optional["asyncio.Task[ConversionOutcome]"]:
        task = self.orchestrator.process_timers()
        if task is not None:
            self._log_state("debounce ->")
        return task

    def set_name_prefix(self, prefix: str) -> None:
        self.orchestrator.set_name_prefix(prefix)
        self.hooks.update_status(f"prefix: {prefix or '(none)'}")

    def _subscribe_events(self) -> None:
        bus = self.orchestrator.bus
        for event in events.ALL_EVENTS:
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)
        if name == events.DIAGNOSTICS_UPDATED and isinstance(payload, dict):
            self._render_diagnostics(str(payload["pane"]), payload["diagnostics"])
        elif name == events.DIRECTION_CHANGED and isinstance(
            payload, DirectionTransition
        ):
            self._refresh_titles()
            self.hooks.update_status(f"direction: {self._direction_label()}")
        elif name in (events.CONVERSION_SETTLED, events.CONVERSION_DROPPED):
            if isinstance(payload, ConversionOutcome):
                self.hooks.update_status(self._outcome_status(payload))

    def _outcome_status(self, outcome: ConversionOutcome) -> str:
        label = STATUS_TEXT.get(outcome.status, outcome.status)
        errors = len(self._pane_diagnostics(self.orchestrator.source.name))
        if errors:
            label = f"{label} ({errors} diagnostics)"
        return f"{self._direction_label()}: {label}"

    def _direction_label(self) -> str:
        direction = self.orchestrator.direction
        return f"{direction.source_dialect.label} -> {direction.target_dialect.label}"

    def _refresh_titles(self) -> None:
        titles: Dict[str, str] = {}
        for buffer, role in (
            (self.orchestrator.source, "source"),
            (self.orchestrator.derived, "derived"),
        ):
            suffix = " (read-only)" if buffer.read_only else ""
            titles[buffer.name] = f"{buffer.dialect.label} {role}{suffix}"
        self.hooks.update_titles(titles["left"], titles["right"])

    def _pane_diagnostics(self, pane: str) -> list[Diagnostic]:
        for buffer in (self.orchestrator.source, self.orchestrator.derived):
            if buffer.name == pane:
                return self.orchestrator.diagnostics_for(buffer)
        return []

    def _render_diagnostics(self, pane: str, diagnostics: Sequence[Diagnostic]) -> None:
        lines = []
        for item in diagnostics:
            label = item.category.label if item.category else item.severity.value
            lines.append(f"{item.line}:{item.column} {label}: {item.message}")
        self.hooks.show_diagnostics(pane, lines)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        orchestrator = self.orchestrator
        return {
            "direction": orchestrator.direction.value,
            "in_flight": orchestrator.in_flight,
            "pending": orchestrator.debouncer.pending,
            "source": orchestrator.source.name,
            "source_version": orchestrator.source.version,
        }


__all__ = ["TextualWorkbenchAdapter", "WorkbenchHooks", "STATUS_TEXT"]
