"""Executable Textual app: markdown editor with a live preview."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Footer, Header, Static, TextArea
from textual.widgets.text_area import Selection

from memo_engine.buffer import BufferMirror
from memo_engine.config import EditorConfig
from memo_engine.editor.session import EditorSession
from memo_engine.keymaps import Binding, KeymapRegistry, load_default_keymaps
from memo_engine.runtime import telemetry
from memo_engine.services import (
    FileExporter,
    FileStorage,
    MemoryStorage,
    RichMarkdownRenderer,
)
from memo_engine.services.storage import STORAGE_FILENAME

from .controller import TextualMemoAdapter, TextualUIHooks

TOOLBAR: Tuple[Tuple[str, str], ...] = (
    ("bold", "B"),
    ("italic", "I"),
    ("strike", "S"),
    ("inline_code", "`"),
    ("code_block", "```"),
    ("ul_dash", "-"),
    ("ul_star", "*"),
    ("quote", ">"),
    ("clear", "Clear"),
    ("save", "Save"),
)

# Terminals send Ctrl+I as Tab, so italic gets a chord Textual can see.
TEXTUAL_BINDINGS: Tuple[Binding, ...] = (
    Binding(id="textual.alt+i", stroke="alt+i", action_id="italic"),
)

# Keys the engine may claim before the TextArea applies its defaults.
ENGINE_KEYS = frozenset(
    {
        "enter",
        "tab",
        "shift+tab",
        "ctrl+b",
        "alt+i",
        "ctrl+s",
        "ctrl+shift+x",
        "ctrl+shift+c",
        "ctrl+grave_accent",
    }
)


def build_session(
    config: EditorConfig,
    *,
    storage_file: Optional[str] = None,
    in_memory: bool = False,
) -> EditorSession:
    storage = MemoryStorage() if in_memory else FileStorage(
        storage_file or _default_storage_path(config), key=config.storage_key
    )
    registry = KeymapRegistry(logger_name="memo_engine.keymaps")
    load_default_keymaps(registry, extra_bindings=TEXTUAL_BINDINGS)
    return EditorSession(
        storage=storage,
        renderer=RichMarkdownRenderer(),
        exporter=FileExporter(config.export_dir),
        config=config,
        keymap_registry=registry,
    )


def _default_storage_path(config: EditorConfig) -> Optional[Path]:
    if config.data_dir is None:
        return None
    return Path(config.data_dir) / STORAGE_FILENAME


class MemoTextArea(TextArea):
    """TextArea that lets the engine claim keys before its own handling."""

    def __init__(self, host_app: "MemoEditorApp", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._host = host_app

    def offset_selection(self) -> Tuple[int, int]:
        start = self.document.get_index_from_location(self.selection.start)
        end = self.document.get_index_from_location(self.selection.end)
        return (start, end) if start <= end else (end, start)

    def apply_mirror(self, mirror: BufferMirror) -> None:
        if self.text != mirror.text:
            self.load_text(mirror.text)
        start, end = mirror.selection
        self.selection = Selection(
            self.document.get_location_from_index(start),
            self.document.get_location_from_index(end),
        )

    async def _on_key(self, event: events.Key) -> None:
        adapter = self._host.adapter
        if adapter is not None and event.key in ENGINE_KEYS:
            result = adapter.handle_textual_key(
                event.key,
                host_text=self.text,
                host_selection=self.offset_selection(),
            )
            if result.handled:
                event.prevent_default()
                event.stop()
                return
        await super()._on_key(event)


class MemoEditorApp(App[None]):
    """Editor pane on the left, rendered preview on the right."""

    CSS = """
	#toolbar {
		height: 3;
	}

	#toolbar Button {
		min-width: 5;
		margin: 0 1 0 0;
	}

	#panes {
		height: 1fr;
	}

	#editor {
		width: 1fr;
	}

	#preview-scroll {
		width: 1fr;
		border: round $accent;
		padding: 0 1;
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

    def __init__(self, session: EditorSession) -> None:
        super().__init__()
        self.session = session
        self.adapter: TextualMemoAdapter | None = None
        self._editor: MemoTextArea | None = None
        self._preview: Static | None = None
        self._status: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Horizontal(id="toolbar"):
            for action_id, label in TOOLBAR:
                yield Button(label, id=f"action-{action_id}")
        with Horizontal(id="panes"):
            self._editor = MemoTextArea(self, id="editor", tab_behavior="indent")
            yield self._editor
            with VerticalScroll(id="preview-scroll"):
                self._preview = Static("", id="preview")
                yield self._preview
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_preview=self._update_preview,
            update_status=self._update_status,
        )
        self.adapter = TextualMemoAdapter(self.session, hooks)
        if self._editor is not None:
            self._editor.focus()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter is None or self._editor is None:
            return
        editor = self._editor
        self.adapter.push_host_edit(
            BufferMirror(text=editor.text, selection=editor.offset_selection())
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if self.adapter is None or self._editor is None or not event.button.id:
            return
        action_id = event.button.id.removeprefix("action-")
        result = self.adapter.run_toolbar_action(
            action_id,
            host_text=self._editor.text,
            host_selection=self._editor.offset_selection(),
        )
        if result.status == "exported":
            self.notify(f"Saved to {result.message}")
        elif result.status == "export_failed":
            self.notify("Export failed", severity="error")
        self._editor.focus()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._editor is not None:
            self._editor.apply_mirror(mirror)

    def _update_preview(self, renderable: Any) -> None:
        if self._preview is not None:
            self._preview.update(renderable)

    def _update_status(self, status: str) -> None:
        if self._status is not None:
            self._status.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Markdown memo editor.")
    parser.add_argument(
        "--storage-file",
        default=None,
        help="JSON file holding the persisted memo (default: user data dir)",
    )
    parser.add_argument(
        "--export-dir",
        default=None,
        help="Directory Ctrl+S writes memo.md into (default: current directory)",
    )
    parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Do not persist the memo between runs",
    )
    parser.add_argument(
        "--log-preset",
        default="quiet",
        choices=("quiet", "development", "production"),
        help="Telemetry preset (default: quiet, the terminal belongs to the UI)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    config = EditorConfig.from_env()
    if args.export_dir:
        config = replace(config, export_dir=args.export_dir)
    session = build_session(
        config, storage_file=args.storage_file, in_memory=args.in_memory
    )
    MemoEditorApp(session).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
