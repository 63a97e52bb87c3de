"""Executable Textual app that hosts the conversion workbench."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use htmlgo_workbench.adapters.textual.app"
    ) from exc

from htmlgo_workbench.buffer import ContentCallback, Dialect
from htmlgo_workbench.conversion import ConversionOrchestrator, Direction
from htmlgo_workbench.diagnostics import Diagnostic
from htmlgo_workbench.runtime import WorkbenchSettings, telemetry

from .controller import TextualWorkbenchAdapter, WorkbenchHooks

DEFAULT_MARKUP = """<div class="container">
  <h1 class="text-xl font-bold">Hello World</h1>
  <p class="text-gray-600">An example paragraph</p>
</div>"""


class TextAreaSurface:
    """Makes a Textual ``TextArea`` satisfy the editor-surface contract."""

    def __init__(self, widget: TextArea) -> None:
        self.widget = widget
        self.diagnostics: List[Diagnostic] = []
        self._callbacks: List[ContentCallback] = []

    def get_content(self) -> str:
        return self.widget.text

    def set_content(self, text: str) -> None:
        self.widget.load_text(text)

    def on_content_changed(self, callback: ContentCallback) -> None:
        self._callbacks.append(callback)

    def set_diagnostics(
        self, dialect: Dialect, diagnostics: Sequence[Diagnostic]
    ) -> None:
        del dialect
        self.diagnostics = list(diagnostics)

    def set_read_only(self, read_only: bool) -> None:
        self.widget.read_only = read_only

    def notify_changed(self) -> None:
        text = self.widget.text
        for callback in list(self._callbacks):
            callback(text)


class WorkbenchApp(App[None]):
    """Two editing panes kept in sync through the remote converter."""

    CSS = """
    #panes {
        height: 1fr;
    }

    .pane {
        width: 1fr;
    }

    .pane-title {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    .pane TextArea {
        height: 1fr;
    }

    .pane-diagnostics {
        height: 5;
        overflow: auto;
        color: $error;
        padding: 0 1;
    }

    #status-line {
        height: 1;
        background: $surface-darken-2;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("ctrl+r", "convert", "Convert"),
        ("ctrl+t", "toggle_direction", "Swap direction"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        settings: Optional[WorkbenchSettings] = None,
        initial_source: str = DEFAULT_MARKUP,
    ) -> None:
        super().__init__()
        self.settings = settings or WorkbenchSettings()
        self._initial_source = initial_source
        self.orchestrator: ConversionOrchestrator | None = None
        self.adapter: TextualWorkbenchAdapter | None = None
        self._surfaces: dict[str, TextAreaSurface] = {}

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="panes"):
            for pane, text in (("left", self._initial_source), ("right", "")):
                with Vertical(classes="pane"):
                    yield Static("", id=f"{pane}-title", classes="pane-title")
                    yield TextArea(text, id=f"{pane}-editor")
                    yield Static(
                        "", id=f"{pane}-diagnostics", classes="pane-diagnostics"
                    )
        yield Static("", id="status-line")
        yield Footer()

    async def on_mount(self) -> None:
        for pane in ("left", "right"):
            editor = self.query_one(f"#{pane}-editor", TextArea)
            self._surfaces[pane] = TextAreaSurface(editor)
        self.orchestrator = ConversionOrchestrator(
            self._surfaces["left"], self._surfaces["right"], settings=self.settings
        )
        hooks = WorkbenchHooks(
            update_status=self._update_status,
            show_diagnostics=self._show_diagnostics,
            update_titles=self._update_titles,
            log=telemetry.get_logger("htmlgo_workbench.app").debug,
        )
        self.adapter = TextualWorkbenchAdapter(self.orchestrator, hooks)
        self.set_interval(0.1, self._process_timers)
        self.adapter.request_conversion()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        for surface in self._surfaces.values():
            if surface.widget is event.text_area:
                surface.notify_changed()

    def _process_timers(self) -> None:
        if self.adapter:
            self.adapter.process_timers()

    def action_convert(self) -> None:
        if self.adapter:
            self.adapter.request_conversion()

    def action_toggle_direction(self) -> None:
        if self.adapter:
            self.adapter.toggle_direction()

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _update_titles(self, left: str, right: str) -> None:
        self.query_one("#left-title", Static).update(left)
        self.query_one("#right-title", Static).update(right)

    def _show_diagnostics(self, pane: str, lines: Sequence[str]) -> None:
        self.query_one(f"#{pane}-diagnostics", Static).update("\n".join(lines))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = WorkbenchSettings.from_env()
    parser = argparse.ArgumentParser(description="Run the htmlgo conversion workbench.")
    parser.add_argument(
        "source",
        nargs="?",
        type=Path,
        help="File whose content seeds the source pane",
    )
    parser.add_argument(
        "--base-url",
        default=defaults.base_url,
        help=f"Converter base URL (default: {defaults.base_url})",
    )
    parser.add_argument(
        "--prefix",
        default=defaults.name_prefix,
        help="Package prefix used in generated builder code",
    )
    parser.add_argument(
        "--keep-package",
        action="store_true",
        help="Ask the converter to keep the leading package declaration",
    )
    parser.add_argument(
        "--direction",
        choices=[name for item in Direction for name in (item.value, item.wire_name)],
        default=defaults.initial_direction,
    )
    parser.add_argument("--debounce-ms", type=int, default=defaults.debounce_ms)
    parser.add_argument(
        "--manual",
        action="store_true",
        help="Only convert on ctrl+r; edits do not schedule conversions",
    )
    parser.add_argument(
        "--read-only-derived",
        action="store_true",
        help="Lock the derived pane instead of letting it be edited",
    )
    parser.add_argument(
        "--log-preset",
        default="production",
        choices=tuple(telemetry.PRESETS),
        help="Telemetry preset; the default logs to a file to keep the TUI clean",
    )
    args = parser.parse_args(argv)
    args.settings = defaults.with_overrides(
        base_url=args.base_url,
        name_prefix=args.prefix,
        strip_declaration=False if args.keep_package else None,
        initial_direction=args.direction,
        debounce_ms=args.debounce_ms,
        auto_convert=False if args.manual else None,
        derived_read_only=True if args.read_only_derived else None,
    )
    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    initial = DEFAULT_MARKUP
    if args.source is not None:
        initial = args.source.read_text(encoding="utf-8")
    elif args.settings.initial_direction != "markup_to_builder":
        initial = ""
    WorkbenchApp(settings=args.settings, initial_source=initial).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
