from __future__ import annotations

import pytest

from htmlgo_workbench.runtime import telemetry


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown telemetry preset"):
        telemetry.configure(preset="verbose")


def test_get_logger_caches_until_reconfigured() -> None:
    first = telemetry.get_logger("htmlgo_workbench.tests")

    assert telemetry.get_logger("htmlgo_workbench.tests") is first

    telemetry.configure()

    assert telemetry.get_logger("htmlgo_workbench.tests") is not first


def test_span_collects_metadata_and_reraises() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with telemetry.span(name="tests::span", metadata={"size": 3}) as handle:
            handle.add_metadata("rule", "line_reference")
            assert handle.metadata == {"size": "3", "rule": "line_reference"}
            raise RuntimeError("boom")
