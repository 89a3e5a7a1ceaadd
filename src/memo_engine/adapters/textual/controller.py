"""Thin adapter wiring an EditorSession into Textual UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from memo_engine.buffer import BufferMirror, BufferSync
from memo_engine.editor.context import EditResult, KeyInput
from memo_engine.editor.session import EditorSession

_MODIFIER_NAMES = ("ctrl", "shift", "alt", "meta", "super")


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_preview: Callable[[Any], None] = _noop
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


def split_textual_key(key: str) -> Tuple[str, Tuple[str, ...]]:
    """Split a Textual key name (``"ctrl+shift+x"``) into key and modifiers."""

    parts = key.split("+")
    modifiers: list[str] = []
    while len(parts) > 1 and parts[0] in _MODIFIER_NAMES:
        modifiers.append(parts.pop(0))
    return "+".join(parts), tuple(modifiers)


class TextualMemoAdapter(BufferSync):
    """Bridges host widget state and key events to an EditorSession.

    Implements ``BufferSync``: the host pulls mirrors after engine edits and
    pushes its own text whenever the user types directly into the widget.
    """

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        session.bus.subscribe("preview.rendered", self._on_preview)
        session.bus.subscribe("buffer.changed", self._on_buffer_changed)
        self.hooks.update_buffer(session.mirror())
        if session.preview is not None:
            self.hooks.update_preview(session.preview)

    def handle_textual_key(
        self,
        key: str,
        *,
        host_text: Optional[str] = None,
        host_selection: Optional[Tuple[int, int]] = None,
        modifiers: Iterable[str] = (),
    ) -> EditResult:
        """Dispatch a key after adopting the host's current text/selection.

        The returned ``handled`` flag tells the host to prevent its own
        default handling of the key.
        """

        self._pull_host_state(host_text, host_selection)
        name, implied = split_textual_key(key)
        key_input = KeyInput(key=name, modifiers=implied + tuple(modifiers))
        self._log_state("key ->", key=key)
        result = self.session.handle_key(key_input)
        self._after_result(result)
        return result

    def run_toolbar_action(
        self,
        action_id: str,
        *,
        host_text: Optional[str] = None,
        host_selection: Optional[Tuple[int, int]] = None,
    ) -> EditResult:
        self._pull_host_state(host_text, host_selection)
        self._log_state("action ->", action=action_id)
        result = self.session.run_action(action_id)
        self._after_result(result)
        return result

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Record text typed directly into the host widget."""

        self.session.sync_from_host(mirror.text, *mirror.selection)

    def pull_buffer(self) -> BufferMirror:
        return self.session.mirror()

    def _pull_host_state(
        self, text: Optional[str], selection: Optional[Tuple[int, int]]
    ) -> None:
        if text is None:
            return
        start, end = selection or (len(text), len(text))
        self.push_host_edit(BufferMirror(text=text, selection=(start, end)))

    def _after_result(self, result: EditResult) -> None:
        status = result.message or result.status
        if result.handled and status:
            self.hooks.update_status(status)
        self._log_state(
            "result <-",
            handled=result.handled,
            changed=result.changed,
            status=result.status,
        )

    def _on_buffer_changed(self, payload: object | None) -> None:
        if isinstance(payload, BufferMirror):
            self.hooks.update_buffer(payload)

    def _on_preview(self, payload: object | None) -> None:
        self.hooks.update_preview(payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.session.buffer
        return {
            "selection": buffer.selection,
            "version": buffer.version,
            "length": len(buffer.text),
        }


__all__ = ["TextualMemoAdapter", "TextualUIHooks", "split_textual_key"]
