from __future__ import annotations

from pathlib import Path
from typing import List

from memo_engine.config import DEFAULT_DOCUMENT, EditorConfig
from memo_engine.editor import KeyInput
from memo_engine.editor.session import EditorSession
from memo_engine.services import FileExporter, MarkdownRenderer, MemoryStorage


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls: List[str] = []

    def render(self, text: str) -> str:
        self.calls.append(text)
        return f"<rendered {len(text)}>"


def make_session(
    text: str | None = None, *, exporter: FileExporter | None = None
) -> tuple[EditorSession, MemoryStorage, RecordingRenderer]:
    storage = MemoryStorage(text)
    renderer = RecordingRenderer()
    session = EditorSession(storage=storage, renderer=renderer, exporter=exporter)
    return session, storage, renderer


def test_session_loads_saved_text_with_caret_at_end() -> None:
    session, _, renderer = make_session("saved memo")

    assert session.get_buffer_text() == "saved memo"
    assert session.buffer.selection == (10, 10)
    assert renderer.calls == ["saved memo"]


def test_session_falls_back_to_default_document() -> None:
    session, storage, _ = make_session(None)

    assert session.get_buffer_text() == DEFAULT_DOCUMENT
    assert storage.saves == 0


def test_empty_saved_text_is_not_replaced_by_default() -> None:
    session, _, _ = make_session("")

    assert session.get_buffer_text() == ""


def test_mutation_persists_and_rerenders() -> None:
    session, storage, renderer = make_session("word")
    session.buffer.set_selection(0, 4)
    changes: List[object] = []
    session.bus.subscribe("buffer.changed", changes.append)

    result = session.wrap_inline("bold")

    assert result.changed is True
    assert storage.value == "**word**"
    assert storage.saves == 1
    assert renderer.calls[-1] == "**word**"
    assert session.preview == "<rendered 8>"
    assert len(changes) == 1


def test_unhandled_enter_does_not_persist() -> None:
    session, storage, _ = make_session("plain")

    assert session.handle_enter_key() is False
    assert storage.saves == 0


def test_handle_enter_key_continues_list() -> None:
    session, storage, _ = make_session("- a")

    assert session.handle_enter_key() is True
    assert storage.value == "- a\n- "


def test_run_action_accepts_aliases() -> None:
    session, _, _ = make_session("x")
    session.buffer.set_selection(0, 1)

    result = session.run_action("inlineCode")

    assert result.handled is True
    assert session.get_buffer_text() == "`x`"


def test_run_action_unknown_id_is_noop() -> None:
    session, storage, _ = make_session("x")

    result = session.run_action("underline")

    assert result.handled is False
    assert result.status == "unknown_action"
    assert session.get_buffer_text() == "x"
    assert storage.saves == 0


def test_handle_key_dispatches_chords() -> None:
    session, _, _ = make_session("line")

    bold = session.handle_key(KeyInput(key="b", modifiers=("ctrl",)))
    tab = session.handle_key(KeyInput(key="tab"))

    assert bold.handled is True
    assert tab.handled is True
    assert session.get_buffer_text() == "  line**text**"


def test_handle_key_meta_behaves_like_ctrl() -> None:
    session, _, _ = make_session("")

    session.handle_key(KeyInput(key="x", modifiers=("meta", "shift")))

    assert session.get_buffer_text() == "~~text~~"


def test_handle_key_unbound_is_not_handled() -> None:
    session, _, _ = make_session("")

    result = session.handle_key(KeyInput(key="q", modifiers=("ctrl",)))

    assert result.handled is False
    assert result.status == "unbound"


def test_toggle_operations_through_session() -> None:
    session, storage, _ = make_session("a\nb")
    session.buffer.set_selection(0, 3)

    session.toggle_list_marker("-")
    session.toggle_quote()

    assert storage.value == "> - a\n> - b"


def test_clear_empties_and_persists() -> None:
    session, storage, renderer = make_session("something")

    result = session.clear()

    assert result.changed is True
    assert session.get_buffer_text() == ""
    assert storage.value == ""
    assert renderer.calls[-1] == ""


def test_set_buffer_text() -> None:
    session, storage, _ = make_session("old")

    session.set_buffer_text("new text")

    assert storage.value == "new text"
    assert session.buffer.selection == (8, 8)


def test_export_writes_utf8_file(tmp_path: Path) -> None:
    session, _, _ = make_session("# メモ\n", exporter=FileExporter(tmp_path))
    exported: List[object] = []
    session.bus.subscribe("document.exported", exported.append)

    result = session.run_action("save")

    target = tmp_path / "memo.md"
    assert result.status == "exported"
    assert result.message == str(target)
    assert target.read_bytes() == "# メモ\n".encode("utf-8")
    assert exported == [target]


def test_export_without_exporter() -> None:
    session, _, _ = make_session("text")

    result = session.export()

    assert result.handled is True
    assert result.status == "export_unavailable"


def test_sync_from_host_updates_text_and_selection() -> None:
    session, storage, _ = make_session("abc")

    assert session.sync_from_host("abc", 1, 2) is False
    assert session.buffer.selection == (1, 2)
    assert storage.saves == 0

    assert session.sync_from_host("abcd", 4, 4) is True
    assert storage.value == "abcd"


def test_session_with_html_renderer() -> None:
    session = EditorSession(
        storage=MemoryStorage("~~gone~~"),
        renderer=MarkdownRenderer(),
        config=EditorConfig(),
    )

    assert "<s>gone</s>" in session.preview
