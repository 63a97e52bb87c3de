"""Telemetry and settings shared by every workbench component."""

from .config import WorkbenchSettings

__all__ = ["WorkbenchSettings", "telemetry"]
