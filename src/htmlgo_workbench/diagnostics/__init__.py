"""Structural diagnostics and converter-error location."""

from .engine import scan_builder, scan_markup, validate
from .locator import ErrorLocator, LocatorRule, classify_error, locate
from .models import Diagnostic, ErrorCategory, Range, Severity

__all__ = [
    "Diagnostic",
    "ErrorCategory",
    "ErrorLocator",
    "LocatorRule",
    "Range",
    "Severity",
    "classify_error",
    "locate",
    "scan_builder",
    "scan_markup",
    "validate",
]
