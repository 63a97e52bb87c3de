"""Conversion orchestrator: direction, debounce, single-flight, application."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from htmlgo_workbench.buffer import (
    Buffer,
    BufferChange,
    EditorSurface,
    Origin,
    ReadOnlyBufferError,
)
from htmlgo_workbench.diagnostics import Diagnostic, ErrorLocator, validate
from htmlgo_workbench.runtime import WorkbenchSettings, telemetry

from . import events
from .client import ConversionBoundary, HttpConversionClient
from .direction import DirectionStateMachine
from .models import (
    EMPTY_OUTPUT_PLACEHOLDERS,
    EMPTY_SOURCE_PLACEHOLDERS,
    BuilderToMarkupRequest,
    ConversionErr,
    ConversionOk,
    ConversionRequest,
    ConversionResult,
    Direction,
    MarkupToBuilderRequest,
    error_placeholder,
)
from .preflight import run_preflight
from .scheduler import Clock, Debouncer


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    """What a trigger ended up doing.

    ``status`` is one of ``converted``, ``failed``, ``rejected``, ``empty``,
    ``dropped`` or ``stale``.
    """

    status: str
    direction: Direction
    request: Optional[ConversionRequest] = None
    result: Optional[ConversionResult] = None
    derived_text: Optional[str] = None

    @property
    def reached_boundary(self) -> bool:
        return self.request is not None


class ConversionOrchestrator:
    """Keeps the derived pane in sync with the source pane.

    All state that changes over time (direction, in-flight latch, debounce
    timer) lives on the instance. Everything except the boundary call runs
    synchronously on the caller's event loop.
    """

    def __init__(
        self,
        left: EditorSurface,
        right: EditorSurface,
        *,
        boundary: Optional[ConversionBoundary] = None,
        settings: Optional[WorkbenchSettings] = None,
        locator: Optional[ErrorLocator] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.settings = settings or WorkbenchSettings()
        self.boundary = boundary or HttpConversionClient(
            self.settings.base_url, timeout=self.settings.request_timeout
        )
        self.locator = locator or ErrorLocator()
        self.name_prefix = self.settings.name_prefix
        self.strip_declaration = self.settings.strip_declaration
        self.bus = events.WorkbenchBus()
        self.logger = telemetry.get_logger("htmlgo_workbench.orchestrator")

        direction = Direction.parse(self.settings.initial_direction)
        left_buffer = Buffer(
            name="left", dialect=direction.source_dialect, text=left.get_content()
        )
        right_buffer = Buffer(
            name="right",
            dialect=direction.target_dialect,
            text=right.get_content(),
            origin=Origin.PLACEHOLDER,
        )
        self.machine = DirectionStateMachine(
            left_buffer,
            right_buffer,
            direction=direction,
            derived_read_only=self.settings.derived_read_only,
        )
        self._surfaces: Dict[str, EditorSurface] = {"left": left, "right": right}
        self._diagnostics: Dict[str, List[Diagnostic]] = {"left": [], "right": []}
        self._in_flight = False
        self._tasks: Set[asyncio.Task] = set()
        self.dropped = 0
        self.debouncer = Debouncer(
            self.settings.debounce_seconds,
            self._schedule_conversion,
            name="source-edit",
            clock=clock,
        )

        for buffer in (left_buffer, right_buffer):
            buffer.subscribe(self._push_to_surface)
            surface = self._surfaces[buffer.name]
            surface.on_content_changed(
                lambda text, target=buffer: self.handle_surface_edit(target, text)
            )
            self._sync_read_only(buffer)
        self.refresh_diagnostics()

    # -- state ---------------------------------------------------------

    @property
    def direction(self) -> Direction:
        return self.machine.direction

    @property
    def source(self) -> Buffer:
        return self.machine.source

    @property
    def derived(self) -> Buffer:
        return self.machine.derived

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def diagnostics_for(self, buffer: Buffer) -> List[Diagnostic]:
        return list(self._diagnostics[buffer.name])

    # -- editing surface -----------------------------------------------

    def handle_surface_edit(self, buffer: Buffer, text: str) -> None:
        if text == buffer.content:
            return
        try:
            buffer.author_edit(text)
        except ReadOnlyBufferError as exc:
            self.logger.warning(f"Rejected edit: {exc}")
            self._surfaces[buffer.name].set_content(buffer.content)
            return

        self._publish_diagnostics(buffer, self._structural(buffer))
        if buffer is self.source and self.settings.auto_convert:
            self.debouncer.arm()

    def _push_to_surface(self, change: BufferChange) -> None:
        surface = self._surfaces[change.name]
        if surface.get_content() != change.text:
            surface.set_content(change.text)

    def _sync_read_only(self, buffer: Buffer) -> None:
        setter = getattr(self._surfaces[buffer.name], "set_read_only", None)
        if setter is not None:
            setter(buffer.read_only)

    # -- diagnostics ---------------------------------------------------

    def _structural(self, buffer: Buffer) -> List[Diagnostic]:
        if buffer.origin is Origin.PLACEHOLDER:
            return []
        return validate(buffer.content, buffer.dialect)

    def _publish_diagnostics(
        self, buffer: Buffer, diagnostics: List[Diagnostic]
    ) -> None:
        self._diagnostics[buffer.name] = list(diagnostics)
        self._surfaces[buffer.name].set_diagnostics(buffer.dialect, diagnostics)
        self.bus.emit(
            events.DIAGNOSTICS_UPDATED,
            {"pane": buffer.name, "diagnostics": list(diagnostics)},
        )

    def refresh_diagnostics(self) -> None:
        for buffer in (self.source, self.derived):
            self._publish_diagnostics(buffer, self._structural(buffer))

    # -- options -------------------------------------------------------

    def set_name_prefix(self, prefix: str) -> None:
        self.name_prefix = prefix
        self._rearm_for_markup_source()

    def set_strip_declaration(self, enabled: bool) -> None:
        self.strip_declaration = enabled
        self._rearm_for_markup_source()

    def _rearm_for_markup_source(self) -> None:
        if self.direction is not Direction.MARKUP_TO_BUILDER:
            return
        if not self.source.document.is_blank():
            self.debouncer.arm()

    # -- direction -----------------------------------------------------

    async def select_direction(
        self, direction: "Direction | str"
    ) -> Optional[ConversionOutcome]:
        """Switch direction on explicit user request and reconvert."""

        transition = self.machine.switch(Direction.parse(direction))
        if transition is None:
            return None
        self.debouncer.cancel()
        for buffer in (self.source, self.derived):
            self._surfaces[buffer.name].set_diagnostics(buffer.dialect.other, [])
            self._sync_read_only(buffer)
        self.refresh_diagnostics()
        self.bus.emit(events.DIRECTION_CHANGED, transition)
        return await self.convert()

    def toggle_direction(self) -> "asyncio.Task[Optional[ConversionOutcome]]":
        return self._spawn(self.select_direction(self.direction.reverse))

    # -- conversion ----------------------------------------------------

    def build_request(self, direction: Direction, source: str) -> ConversionRequest:
        if direction is Direction.MARKUP_TO_BUILDER:
            return MarkupToBuilderRequest(
                source=source,
                name_prefix=self.name_prefix,
                strip_declaration=self.strip_declaration,
            )
        return BuilderToMarkupRequest(source=source)

    async def convert(self) -> ConversionOutcome:
        """Run one conversion for the active direction unless one is in flight."""

        direction = self.direction
        if self._in_flight:
            self.dropped += 1
            telemetry.record_event(
                "conversion.dropped", data={"direction": direction}
            )
            outcome = ConversionOutcome(status="dropped", direction=direction)
            self.bus.emit(events.CONVERSION_DROPPED, outcome)
            return outcome

        self._in_flight = True
        try:
            outcome = await self._run(direction)
        finally:
            self._in_flight = False
        self.bus.emit(events.CONVERSION_SETTLED, outcome)
        return outcome

    async def _run(self, direction: Direction) -> ConversionOutcome:
        source, target = self.source, self.derived
        source_text = source.content
        target_dialect = direction.target_dialect

        if source.document.is_blank():
            placeholder = EMPTY_SOURCE_PLACEHOLDERS[target_dialect]
            target.replace(placeholder, origin=Origin.PLACEHOLDER, label="empty")
            self._publish_diagnostics(target, [])
            telemetry.record_event(
                "conversion.short_circuit", data={"direction": direction}
            )
            return ConversionOutcome(
                status="empty", direction=direction, derived_text=placeholder
            )

        outgoing = source_text
        if direction is Direction.BUILDER_TO_MARKUP:
            preflight = run_preflight(
                source_text, binding_name=self.settings.binding_name
            )
            if preflight.rejection is not None:
                target.replace(
                    preflight.rejection, origin=Origin.PLACEHOLDER, label="rejected"
                )
                self._publish_diagnostics(target, [])
                telemetry.record_event(
                    "conversion.rejected",
                    level="warning",
                    data={"direction": direction, "rule": preflight.rule},
                )
                return ConversionOutcome(
                    status="rejected",
                    direction=direction,
                    derived_text=preflight.rejection,
                )
            outgoing = preflight.source

        request = self.build_request(direction, outgoing)
        sent_version = source.version
        self.bus.emit(events.CONVERSION_STARTED, request)
        with telemetry.span(
            name=f"conversion::{direction.value}",
            component=True,
            metadata={"size": len(outgoing)},
        ):
            result = await self._call_boundary(request)

        if self.direction is not direction:
            # A direction switch landed while the request was out; its own
            # trigger was dropped, so schedule a fresh one instead.
            self.debouncer.arm()
            return ConversionOutcome(
                status="stale", direction=direction, request=request, result=result
            )

        if source.version != sent_version and self.settings.auto_convert:
            # Edits that landed mid-flight had their trigger dropped.
            self.debouncer.arm()

        if isinstance(result, ConversionOk):
            return self._apply_ok(direction, request, result)
        return self._apply_err(direction, request, result, source_text)

    async def _call_boundary(self, request: ConversionRequest) -> ConversionResult:
        try:
            return await self.boundary.convert(request)
        except Exception as exc:
            # Boundaries are expected to return errors, not raise them.
            self.logger.error(f"Conversion boundary raised: {exc!r}")
            return ConversionErr(str(exc) or exc.__class__.__name__)

    def _apply_ok(
        self, direction: Direction, request: ConversionRequest, result: ConversionOk
    ) -> ConversionOutcome:
        target = self.derived
        if result.output:
            target.replace(result.output, origin=Origin.CONVERTED, label="converted")
        else:
            target.replace(
                EMPTY_OUTPUT_PLACEHOLDERS[direction.target_dialect],
                origin=Origin.PLACEHOLDER,
                label="empty_output",
            )
        self.refresh_diagnostics()
        telemetry.record_event(
            "conversion.ok",
            data={"direction": direction, "size": len(result.output)},
        )
        return ConversionOutcome(
            status="converted",
            direction=direction,
            request=request,
            result=result,
            derived_text=target.content,
        )

    def _apply_err(
        self,
        direction: Direction,
        request: ConversionRequest,
        result: ConversionErr,
        source_text: str,
    ) -> ConversionOutcome:
        target = self.derived
        placeholder = error_placeholder(direction.target_dialect, result.message)
        target.replace(placeholder, origin=Origin.PLACEHOLDER, label="error")
        self._publish_diagnostics(target, [])
        if self.source.content == source_text:
            located = self.locator.locate(result.message, source_text)
            self._publish_diagnostics(self.source, located)
        else:
            # The source moved on; its structural diagnostics stay current.
            self._publish_diagnostics(self.source, self._structural(self.source))
        telemetry.record_event(
            "conversion.error",
            level="warning",
            data={"direction": direction, "message": result.message},
        )
        return ConversionOutcome(
            status="failed",
            direction=direction,
            request=request,
            result=result,
            derived_text=placeholder,
        )

    # -- scheduling ----------------------------------------------------

    def request_conversion(self) -> "asyncio.Task[ConversionOutcome]":
        """Explicit trigger from a host action; cancels any pending debounce."""

        self.debouncer.cancel()
        return self._spawn(self.convert())

    def process_timers(self) -> Optional["asyncio.Task[ConversionOutcome]"]:
        """Poll the debounce window; call from the host's interval timer."""

        task = self.debouncer.process()
        return task if isinstance(task, asyncio.Task) else None

    def _schedule_conversion(self) -> "asyncio.Task[ConversionOutcome]":
        return self._spawn(self.convert())

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every spawned conversion task to finish."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks))


__all__ = ["ConversionOrchestrator", "ConversionOutcome"]
