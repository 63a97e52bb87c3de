"""Event bus letting hosts observe the orchestrator."""

from __future__ import annotations

from typing import Callable, Dict

CONVERSION_STARTED = "conversion.started"
CONVERSION_SETTLED = "conversion.settled"
CONVERSION_DROPPED = "conversion.dropped"
DIRECTION_CHANGED = "direction.changed"
DIAGNOSTICS_UPDATED = "diagnostics.updated"

ALL_EVENTS = (
    CONVERSION_STARTED,
    CONVERSION_SETTLED,
    CONVERSION_DROPPED,
    DIRECTION_CHANGED,
    DIAGNOSTICS_UPDATED,
)


class WorkbenchBus:
    """Minimal synchronous pub/sub; callbacks run in emit order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = [
    "ALL_EVENTS",
    "CONVERSION_DROPPED",
    "CONVERSION_SETTLED",
    "CONVERSION_STARTED",
    "DIAGNOSTICS_UPDATED",
    "DIRECTION_CHANGED",
    "WorkbenchBus",
]
