"""Editor session: owns the buffer, dispatches actions, notifies services."""

from __future__ import annotations

from typing import Any, Callable

from memo_engine.actions import blocks, continuation, document, inline, lines
from memo_engine.buffer import Buffer, BufferMirror
from memo_engine.config import EditorConfig
from memo_engine.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    ResolutionMatch,
    load_default_keymaps,
)
from memo_engine.runtime import telemetry
from memo_engine.services import Exporter, Renderer, Storage

from .context import EditorBus, EditorContext, EditResult, KeyInput, not_handled

Operation = Callable[[EditorContext], EditResult]


class EditorSession:
    """Single-buffer editing session.

    Every operation runs to completion synchronously. When it changed the
    buffer, the new text is persisted through ``storage``, rendered through
    ``renderer`` and announced on the bus as ``buffer.changed``.
    """

    def __init__(
        self,
        *,
        storage: Storage | None = None,
        renderer: Renderer | None = None,
        exporter: Exporter | None = None,
        config: EditorConfig | None = None,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        bus: EditorBus | None = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="memo_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="memo_engine.keymaps"
        )

        initial = self._initial_text(storage)
        self.context = EditorContext(
            buffer=Buffer.from_text(initial, selection=(len(initial), len(initial))),
            bus=bus or EditorBus(),
            config=self.config,
            renderer=renderer,
            storage=storage,
            exporter=exporter,
        )
        self.preview: Any = None
        self._render()

    @property
    def buffer(self) -> Buffer:
        return self.context.buffer

    @property
    def bus(self) -> EditorBus:
        return self.context.bus

    # --- exposed operations ------------------------------------------------
    def wrap_inline(self, kind: str) -> EditResult:
        return self._apply(f"wrap_{kind}", lambda ctx: inline.wrap_inline(ctx, kind))

    def toggle_list_marker(self, marker: str) -> EditResult:
        return self._apply(
            "toggle_list", lambda ctx: lines.toggle_list_marker(ctx, marker)
        )

    def toggle_quote(self) -> EditResult:
        return self._apply("toggle_quote", lines.toggle_quote)

    def insert_code_block(self) -> EditResult:
        return self._apply("code_block", blocks.insert_code_block)

    def indent_lines(self, outdent: bool = False) -> EditResult:
        return self._apply(
            "outdent" if outdent else "indent",
            lambda ctx: lines.indent_lines(ctx, outdent=outdent),
        )

    def handle_enter_key(self) -> bool:
        """Run list continuation; True means the host must skip its newline."""

        return self._apply("continue_list", continuation.handle_enter).handled

    def get_buffer_text(self) -> str:
        return self.buffer.text

    def set_buffer_text(self, text: str) -> EditResult:
        def replace_all(ctx: EditorContext) -> EditResult:
            ctx.buffer.set_text(text)
            return EditResult(handled=True, changed=True, status="set_text")

        return self._apply("set_text", replace_all)

    def clear(self) -> EditResult:
        return self._apply("clear", document.clear_document)

    def export(self) -> EditResult:
        return self._apply("export", document.export_document)

    def mirror(self) -> BufferMirror:
        return self.buffer.mirror()

    # --- dispatch ----------------------------------------------------------
    def run_action(self, action_id: str) -> EditResult:
        """Run a toolbar action by id; unknown ids are a silent no-op."""

        result = self.keymap_resolver.resolve_action(action_id)
        if result.status != "match" or result.match is None:
            telemetry.record_event(
                "action.unknown", level="debug", data={"action_id": action_id}
            )
            return not_handled("unknown_action")
        return self._execute(result.match)

    def handle_key(self, key: KeyInput) -> EditResult:
        stroke = KeyStroke(key=key.key, modifiers=key.modifiers)
        flags = {"has_selection": not self.buffer.state.is_caret}
        result = self.keymap_resolver.resolve(stroke, context=flags)
        if result.status != "match" or result.match is None:
            return not_handled("unbound")
        return self._execute(result.match)

    def sync_from_host(self, text: str, start: int, end: int) -> bool:
        """Adopt text/selection edited directly in the host widget.

        Returns True when the text itself changed (and was persisted).
        """

        if text == self.buffer.text:
            self.buffer.set_selection(start, end)
            return False
        self.buffer.set_text(text, selection=(start, end), label="host_edit")
        self._after_change("host_edit")
        return True

    def _execute(self, match: ResolutionMatch) -> EditResult:
        action = match.action

        def invoke(ctx: EditorContext) -> EditResult:
            outcome = action(ctx, match)
            if isinstance(outcome, EditResult):
                return outcome
            return EditResult(handled=True)

        return self._apply(action.telemetry_name or action.id, invoke)

    def _apply(self, label: str, operation: Operation) -> EditResult:
        version = self.buffer.version
        with telemetry.span(
            name=f"action::{label}",
            component="session",
            metadata={"buffer": self.buffer.name},
        ) as handle:
            result = operation(self.context)
            handle.add_metadata("status", result.status)
        if self.buffer.version != version:
            result.changed = True
            self._after_change(label)
        return result

    # --- notifications -----------------------------------------------------
    def _after_change(self, label: str) -> None:
        text = self.buffer.text
        storage = self.context.storage
        if storage is not None:
            storage.save(text)
        self._render()
        self.bus.emit("buffer.changed", self.buffer.mirror(attributes={"label": label}))

    def _render(self) -> None:
        renderer = self.context.renderer
        if renderer is None:
            return
        self.preview = renderer.render(self.buffer.text)
        self.bus.emit("preview.rendered", self.preview)

    def _initial_text(self, storage: Storage | None) -> str:
        if storage is not None:
            saved = storage.load()
            if saved is not None:
                return saved
        return self.config.default_document


__all__ = ["EditorSession"]
