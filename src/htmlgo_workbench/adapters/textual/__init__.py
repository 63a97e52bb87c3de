"""Textual host for the workbench; the app module imports textual lazily."""

from .controller import TextualWorkbenchAdapter, WorkbenchHooks

__all__ = ["TextualWorkbenchAdapter", "WorkbenchHooks"]
