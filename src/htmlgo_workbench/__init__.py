"""Two-pane HTML <-> htmlgo conversion workbench engine."""

__all__ = [
    "adapters",
    "buffer",
    "conversion",
    "diagnostics",
    "runtime",
]

__version__ = "0.1.0"
