"""Conversion requests, pre-flight repair, scheduling and orchestration."""

from .client import ConversionBoundary, HttpConversionClient
from .direction import DirectionStateMachine, DirectionTransition, PaneCapture
from .events import WorkbenchBus
from .models import (
    BuilderToMarkupRequest,
    ConversionErr,
    ConversionOk,
    ConversionRequest,
    ConversionResult,
    Direction,
    MarkupToBuilderRequest,
    UnknownDirectionError,
)
from .orchestrator import ConversionOrchestrator, ConversionOutcome
from .preflight import PreflightOutcome, run_preflight
from .scheduler import Debouncer

__all__ = [
    "BuilderToMarkupRequest",
    "ConversionBoundary",
    "ConversionErr",
    "ConversionOk",
    "ConversionOrchestrator",
    "ConversionOutcome",
    "ConversionRequest",
    "ConversionResult",
    "Debouncer",
    "Direction",
    "DirectionStateMachine",
    "DirectionTransition",
    "HttpConversionClient",
    "MarkupToBuilderRequest",
    "PaneCapture",
    "PreflightOutcome",
    "UnknownDirectionError",
    "WorkbenchBus",
    "run_preflight",
]
