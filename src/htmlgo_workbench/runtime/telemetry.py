"""telelog-backed logging for the workbench.

Components log through ``get_logger``, emit ``event::<name>`` lines with
``record_event`` and time blocks with ``span``. The Textual host picks a
preset through ``configure`` before it takes over the terminal; otherwise
the configuration comes from ``HTMLGO_WORKBENCH_*`` environment variables.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "HTMLGO_WORKBENCH_"
ROOT_LOGGER = "htmlgo_workbench"

# Each preset is a set of telelog ``Config.with_*`` calls.
PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {
        "min_level": "DEBUG",
        "console_output": True,
        "colored_output": True,
    },
    "production": {
        "min_level": "INFO",
        "console_output": False,
        "file_output": "htmlgo_workbench.log",
        "buffering": True,
    },
    "performance": {
        "min_level": "DEBUG",
        "console_output": False,
        "json_format": True,
        "file_output": "htmlgo_workbench-performance.log",
        "buffering": True,
    },
}

_loggers: Dict[str, Any] = {}
_config: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in {"1", "true", "yes", "on"}


def _env_options() -> Dict[str, Any]:
    console = not _env_flag("DISABLE_CONSOLE")
    options: Dict[str, Any] = {
        "min_level": (_env("LOG_LEVEL") or "INFO").upper(),
        "console_output": console,
        "colored_output": console and not _env_flag("NO_COLOR"),
        "json_format": _env_flag("LOG_JSON"),
    }
    if _env("LOG_FILE"):
        options["file_output"] = _env("LOG_FILE")
    if _env_flag("LOG_BUFFERED"):
        options["buffering"] = True
        options["buffer_size"] = int(_env("LOG_BUFFER_SIZE") or "2048")
    return options


def _build_config(options: Dict[str, Any]) -> Any:
    config = tl.Config()
    for option, value in options.items():
        getattr(config, f"with_{option}")(value)
    config.with_profiling(True)
    return config


def configure(*, preset: Optional[str] = None) -> None:
    """Rebuild the telelog config from ``preset`` or the environment.

    A preset's log file can still be redirected with ``HTMLGO_WORKBENCH_LOG_FILE``.
    Loggers handed out earlier are dropped so new ones pick the change up.
    """

    global _config
    if preset is None:
        options = _env_options()
    else:
        try:
            options = dict(PRESETS[preset.lower()])
        except KeyError:
            raise ValueError(f"Unknown telemetry preset '{preset}'.") from None
        if "file_output" in options and _env("LOG_FILE"):
            options["file_output"] = _env("LOG_FILE")
    _config = _build_config(options)
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    if _config is None:
        configure()
    key = name or ROOT_LOGGER
    if key not in _loggers:
        _loggers[key] = tl.Logger.with_config(key, _config)
    return _loggers[key]


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    # enums log as their value
    return str(getattr(value, "value", value))


def _emit(log: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    pairs: List[Tuple[str, str]] = [(key, _text(val)) for key, val in data.items()]
    structured = getattr(log, f"{level}_with", None)
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(log, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level.lower(), f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Lets the body of a ``span`` attach metadata or report a failure."""

    logger: Any
    name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.name, **self.metadata, "reason": reason}
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    component: bool = False,
    metadata: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> Iterator[SpanHandle]:
    """Profile the block; ``component=True`` also tracks it under ``name``.

    ``metadata`` rides along as logger context while the block runs.
    """

    log = get_logger(logger_name)
    handle = SpanHandle(log, name)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = ["ENV_PREFIX", "configure", "get_logger", "record_event", "span"]
