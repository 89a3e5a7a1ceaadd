from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.markdown import Markdown

from memo_engine.config import STORAGE_KEY
from memo_engine.services import (
    FileExporter,
    FileStorage,
    MarkdownRenderer,
    MemoryStorage,
    RichMarkdownRenderer,
)


def test_memory_storage_round_trip() -> None:
    storage = MemoryStorage()

    assert storage.load() is None
    assert storage.save("hello") is True
    assert storage.load() == "hello"


def test_file_storage_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = FileStorage(path)

    assert storage.load() is None
    assert storage.save("メモ") is True

    assert FileStorage(path).load() == "メモ"
    assert json.loads(path.read_text(encoding="utf-8")) == {STORAGE_KEY: "メモ"}
    assert not path.with_suffix(".tmp").exists()


def test_file_storage_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"other": "value"}), encoding="utf-8")

    FileStorage(path, key="memo").save("text")

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "other": "value",
        "memo": "text",
    }


def test_file_storage_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    storage = FileStorage(path)

    assert storage.load() is None
    assert storage.save("fresh") is True
    assert storage.load() == "fresh"


def test_file_storage_ignores_non_object_json(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert FileStorage(path).load() is None


def test_file_storage_ignores_non_string_value(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({STORAGE_KEY: 42}), encoding="utf-8")

    assert FileStorage(path).load() is None


def test_markdown_renderer_gfm_features() -> None:
    renderer = MarkdownRenderer()

    html = renderer.render("| a | b |\n| - | - |\n| 1 | 2 |\n\n~~old~~\nline")

    assert "<table>" in html
    assert "<s>old</s>" in html
    assert "<br />" in html


def test_markdown_renderer_escapes_raw_html() -> None:
    html = MarkdownRenderer().render("<script>alert(1)</script>")

    assert "<script>" not in html


def test_markdown_renderer_highlights_fences() -> None:
    html = MarkdownRenderer().render("```python\nprint(1)\n```")

    assert '<pre class="highlight">' in html
    assert 'class="hljs language-python"' in html
    assert "<span" in html


def test_markdown_renderer_unknown_language_falls_back() -> None:
    html = MarkdownRenderer().render("```nosuchlang\na < b\n```")

    assert '<pre class="highlight">' in html
    assert "a &lt; b" in html


def test_markdown_renderer_without_highlighting() -> None:
    html = MarkdownRenderer(highlight=False).render("```python\nx = 1\n```")

    assert "highlight" not in html
    assert "x = 1" in html


def test_markdown_renderer_stylesheet() -> None:
    assert ".highlight" in MarkdownRenderer().stylesheet()


def test_rich_renderer_returns_renderable() -> None:
    renderable = RichMarkdownRenderer().render("# Title")

    assert isinstance(renderable, Markdown)


def test_file_exporter_writes_bytes(tmp_path: Path) -> None:
    exporter = FileExporter(tmp_path / "out")

    target = exporter.export("a\nb", "memo.md")

    assert target == tmp_path / "out" / "memo.md"
    assert target.read_bytes() == b"a\nb"


def test_file_exporter_strips_directories(tmp_path: Path) -> None:
    target = FileExporter(tmp_path).export("x", "../escape.md")

    assert target == tmp_path / "escape.md"


def test_file_exporter_rejects_empty_name(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        FileExporter(tmp_path).export("x", "")
