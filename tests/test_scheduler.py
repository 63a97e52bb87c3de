from __future__ import annotations

import pytest

from htmlgo_workbench.conversion import Debouncer


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_debouncer(delay: float = 0.5) -> tuple[Debouncer, FakeClock, list[int]]:
    clock = FakeClock()
    calls: list[int] = []
    debouncer = Debouncer(delay, lambda: calls.append(len(calls)) or "fired", clock=clock)
    return debouncer, clock, calls


def test_rearming_pushes_deadline_out() -> None:
    debouncer, clock, calls = make_debouncer()

    debouncer.arm()
    clock.now = 0.4
    debouncer.arm()
    clock.now = 0.8

    assert debouncer.process() is None
    clock.now = 1.0
    assert debouncer.process() == "fired"
    assert calls == [0]
    assert not debouncer.pending
    assert debouncer.process() is None


def test_cancel_discards_pending_trigger() -> None:
    debouncer, clock, calls = make_debouncer()

    debouncer.arm()
    debouncer.cancel()
    clock.now = 5.0

    assert debouncer.process() is None
    assert calls == []


def test_flush_fires_immediately() -> None:
    debouncer, _, calls = make_debouncer()

    assert debouncer.flush() is None
    debouncer.arm()

    assert debouncer.flush() == "fired"
    assert debouncer.fired == 1
    assert calls == [0]


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValueError):
        Debouncer(-0.1, lambda: None)
