"""Workbench settings with ``HTMLGO_WORKBENCH_*`` environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from .telemetry import ENV_PREFIX

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class WorkbenchSettings:
    """Knobs consumed by the orchestrator and the Textual host."""

    base_url: str = "http://localhost:8080"
    name_prefix: str = "h"
    strip_declaration: bool = True
    binding_name: str = "n"
    debounce_ms: int = 500
    auto_convert: bool = True
    derived_read_only: bool = False
    request_timeout: float = 10.0
    initial_direction: str = "markup_to_builder"

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if not self.binding_name.isidentifier():
            raise ValueError(
                f"binding_name '{self.binding_name}' is not an identifier"
            )
        # conversion imports this package, so Direction is resolved lazily
        from htmlgo_workbench.conversion.models import Direction

        canonical = Direction.parse(self.initial_direction).value
        object.__setattr__(self, "initial_direction", canonical)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    def with_overrides(self, **overrides: Any) -> "WorkbenchSettings":
        cleaned = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **cleaned)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "WorkbenchSettings":
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for entry in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{entry.name.upper()}")
            if raw is None:
                continue
            kind = type(getattr(cls(), entry.name))
            values[entry.name] = _coerce(entry.name, raw, kind)
        return cls(**values)


def _coerce(name: str, raw: str, kind: type) -> Any:
    if kind is bool:
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"{ENV_PREFIX}{name.upper()} expects a boolean, got '{raw}'")
    if kind in (int, float):
        try:
            return kind(raw)
        except ValueError as exc:
            raise ValueError(
                f"{ENV_PREFIX}{name.upper()} expects {kind.__name__}, got '{raw}'"
            ) from exc
    return raw


__all__ = ["WorkbenchSettings"]
