"""Executable Textual app that types through the correction engine."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Log, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use autocap_engine.adapters.textual.app"
    ) from exc

from rich.markup import escape

from autocap_engine.buffer import Buffer, BufferMirror
from autocap_engine.correction import CorrectionController
from autocap_engine.runtime import telemetry
from autocap_engine.settings import CorrectionSettings, SettingsStore

from .controller import TextualCorrectionAdapter, TextualUIHooks

CURSOR_GLYPH = "▏"


def render_mirror(mirror: BufferMirror) -> str:
    """Buffer text with a cursor glyph spliced in, escaped for Rich markup."""

    lines = mirror.text.split("\n")
    row, col = mirror.cursor
    lines[row] = lines[row][:col] + CURSOR_GLYPH + lines[row][col:]
    return escape("\n".join(lines))


class CorrectionDemoApp(App[None]):
    """Minimal editor surface showing corrections as you type."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 2fr;
		border: round $accent;
		padding: 1 1;
		overflow: auto;
	}

	#event-log {
		height: 1fr;
		border: round $secondary;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        store: SettingsStore,
        initial_text: str = "",
        show_log: bool = True,
    ) -> None:
        super().__init__()
        self._store = store
        self._initial_text = initial_text
        self._show_log = show_log
        self.adapter: TextualCorrectionAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._log_widget: Log | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
            if self._show_log:
                self._log_widget = Log(id="event-log")
                yield self._log_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        buffer = Buffer.from_text(self._initial_text, name="demo")
        last_row = buffer.line_count - 1
        buffer.set_cursor(last_row, len(buffer.get_line(last_row)))
        controller = CorrectionController(buffer, self._store.settings)
        self._store.subscribe(controller.update_settings)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            log=self._log_line,
        )
        self.adapter = TextualCorrectionAdapter(buffer, controller, hooks)
        self._update_status(self._describe_settings(self._store.settings))

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(render_mirror(mirror))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(escape(status))

    def _log_line(self, line: str) -> None:
        if self._log_widget:
            self._log_widget.write_line(line)

    @staticmethod
    def _describe_settings(settings: CorrectionSettings) -> str:
        return (
            f"lists={'on' if settings.capitalize_list_items else 'off'} "
            f"sentences={'on' if settings.capitalize_sentences else 'off'} "
            f"excluded={len(settings.exclusion_list)}"
        )

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return None
        if key in {"enter", "return"}:
            return ("ENTER", None, ())
        if key == "backspace":
            return ("BACKSPACE", None, ())
        if key in {"left", "right", "up", "down"}:
            return (key.upper(), None, ())
        if event.is_printable and event.character:
            return (event.character, event.character, ())
        return None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Type through the capitalization correction engine."
    )
    parser.add_argument(
        "--settings",
        default=os.environ.get("AUTOCAP_ENGINE_SETTINGS"),
        help="JSON settings file (created on first save)",
    )
    parser.add_argument("--file", help="Load initial text from this file")
    parser.add_argument(
        "--capitalize-lists",
        action="store_true",
        help="Capitalize the first word of list items for this run",
    )
    parser.add_argument(
        "--capitalize-sentences",
        action="store_true",
        help="Capitalize sentence beginnings for this run",
    )
    parser.add_argument("--no-log", action="store_true", help="Hide the event log pane")
    parser.add_argument(
        "--log-preset",
        choices=("development", "production"),
        help="telelog preset; production writes to AUTOCAP_ENGINE_LOG_FILE",
    )
    return parser.parse_args(argv)


def build_store(args: argparse.Namespace) -> SettingsStore:
    store = SettingsStore(args.settings)
    settings = store.load()
    overrides = {}
    if args.capitalize_lists:
        overrides["capitalize_list_items"] = True
    if args.capitalize_sentences:
        overrides["capitalize_sentences"] = True
    if overrides:
        # Flags apply to this run only, so bypass ``update`` which persists.
        return SettingsStore(settings=settings.with_changes(**overrides))
    return store


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    initial_text = Path(args.file).read_text(encoding="utf-8") if args.file else ""
    app = CorrectionDemoApp(
        store=build_store(args), initial_text=initial_text, show_log=not args.no_log
    )
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
