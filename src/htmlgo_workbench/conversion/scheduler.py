"""Deadline-based debounce timer polled by the host's event loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from htmlgo_workbench.runtime import telemetry

Clock = Callable[[], float]


@dataclass
class PendingTrigger:
    deadline: float
    delay: float
    generation: int


class Debouncer:
    """Restartable quiescence window.

    Every ``arm`` pushes the deadline out and bumps the generation, so at
    most one ``fire`` happens per quiet period no matter how many edits
    arrived. The host calls ``process`` from its interval timer.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], object],
        *,
        name: str = "debounce",
        clock: Clock = time.monotonic,
    ) -> None:
        if delay < 0:
            raise ValueError("debounce delay cannot be negative")
        self.delay = delay
        self.name = name
        self._callback = callback
        self._clock = clock
        self._pending: Optional[PendingTrigger] = None
        self._generation = 0
        self.fired = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def arm(self) -> None:
        self._generation += 1
        self._pending = PendingTrigger(
            deadline=self._clock() + self.delay,
            delay=self.delay,
            generation=self._generation,
        )

    def cancel(self) -> None:
        self._pending = None

    def process(self) -> Optional[object]:
        """Fire the callback if the window has elapsed; returns its result."""

        pending = self._pending
        if pending is None or pending.deadline > self._clock():
            return None
        return self._fire(pending.generation)

    def flush(self) -> Optional[object]:
        """Fire immediately if armed, ignoring the deadline."""

        if self._pending is None:
            return None
        return self._fire(self._pending.generation)

    def _fire(self, generation: int) -> Optional[object]:
        pending = self._pending
        if pending is None or pending.generation != generation:
            return None
        self._pending = None
        self.fired += 1
        telemetry.record_event(
            "debounce.fire",
            level="debug",
            data={"timer": self.name, "generation": generation},
        )
        return self._callback()


__all__ = ["Debouncer", "PendingTrigger"]
