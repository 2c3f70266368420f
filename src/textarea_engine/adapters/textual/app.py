"""Executable Textual app that hosts the editing engine in a TextArea."""

from __future__ import annotations

import argparse
import os
import platform
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static, TextArea
    from textual.widgets.text_area import Selection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use textarea_engine.adapters.textual.app"
    ) from exc

from textarea_engine.buffer import Snapshot
from textarea_engine.buffer.scanner import cursor_from_offset, offset_for_cursor
from textarea_engine.config import EditorConfig
from textarea_engine.keymaps import PlatformClass
from textarea_engine.runtime import telemetry

from .controller import TextualEditorAdapter, TextualUIHooks


def read_snapshot(area: TextArea) -> Snapshot:  # pragma: no cover - needs a widget
    text = area.text
    start = offset_for_cursor(text, area.selection.start)
    end = offset_for_cursor(text, area.selection.end)
    return Snapshot(text, min(start, end), max(start, end))


def write_snapshot(
    area: TextArea, snapshot: Snapshot
) -> None:  # pragma: no cover - needs a widget
    if area.text != snapshot.value:
        area.replace(snapshot.value, (0, 0), area.document.end)
    area.selection = Selection(
        cursor_from_offset(snapshot.value, snapshot.selection_start),
        cursor_from_offset(snapshot.value, snapshot.selection_end),
    )


class EngineTextArea(TextArea):  # pragma: no cover - manual demo
    """TextArea whose keys go through the engine before Textual sees them."""

    adapter: TextualEditorAdapter | None = None

    async def _on_key(self, event: events.Key) -> None:
        if self.adapter is None:
            await super()._on_key(event)
            return
        result = self.adapter.handle_textual_key(
            event.key, read_snapshot(self), character=event.character
        )
        if result.consumed:
            event.prevent_default()
            event.stop()
            return
        await super()._on_key(event)

    def action_undo(self) -> None:
        if self.adapter is not None:
            self.adapter.engine.undo()

    def action_redo(self) -> None:
        if self.adapter is not None:
            self.adapter.engine.redo()


class TextareaEngineApp(App[None]):  # pragma: no cover - manual demo
    """Minimal Textual UI embedding the editing engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
		border: round $accent;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, config: EditorConfig, *, text: str = "") -> None:
        super().__init__()
        self.config = config
        self._initial_text = text
        self.adapter: TextualEditorAdapter | None = None
        self._area: EngineTextArea | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._area = EngineTextArea(self._initial_text, id="editor")
        yield self._area
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        assert self._area is not None
        area = self._area
        hooks = TextualUIHooks(
            apply_snapshot=lambda snapshot: write_snapshot(area, snapshot),
            blur=self._blur,
            update_status=self._update_status,
            log=self.log,
        )
        self.adapter = TextualEditorAdapter(hooks, read_snapshot(area), self.config)
        area.adapter = self.adapter
        area.focus()
        self._update_status(f"platform: {self.config.platform.value}")

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter is None:
            return
        snapshot = read_snapshot(event.text_area)
        # Changes pushed by the engine itself come back as this message too.
        if snapshot.value == self.adapter.engine.snapshot().value:
            return
        self.adapter.handle_text_changed(snapshot)

    def _blur(self) -> None:
        self.set_focus(None)
        self._update_status("blur")

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the textarea engine demo.")
    parser.add_argument("path", nargs="?", help="Optional file to load")
    parser.add_argument(
        "--tab-size",
        type=int,
        default=int(os.environ.get("TEXTAREA_ENGINE_TAB_SIZE", "2")),
        help="Spaces per indent unit (default: 2)",
    )
    parser.add_argument(
        "--tabs",
        action="store_true",
        help="Indent with a tab character instead of spaces",
    )
    parser.add_argument(
        "--ignore-tab-key",
        action="store_true",
        help="Leave Tab and Shift+Tab to the terminal",
    )
    parser.add_argument(
        "--platform",
        default=platform.platform(),
        help="Platform string used to pick the undo/redo chords",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.LOG_PRESETS,
        help="Named telelog preset (default: TEXTAREA_ENGINE_LOG_* variables)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    config = EditorConfig(
        tab_size=args.tab_size,
        insert_spaces=not args.tabs,
        ignore_tab_key=args.ignore_tab_key,
        platform=PlatformClass.from_platform_string(args.platform),
    )
    text = Path(args.path).read_text(encoding="utf-8") if args.path else ""
    app = TextareaEngineApp(config, text=text)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
