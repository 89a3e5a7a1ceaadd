from __future__ import annotations

import pytest

from memo_engine.buffer import (
    Buffer,
    BufferValidationError,
    is_inside_code_fence,
    line_range_around,
    map_lines,
)
from memo_engine.buffer.lines import count_fences, line_end_at, line_start_at


def test_line_range_covers_whole_lines() -> None:
    text = "one\ntwo\nthree"

    assert line_range_around(text, 5, 5) == (4, 7)
    assert line_range_around(text, 1, 10) == (0, 13)
    assert text[slice(*line_range_around(text, 9, 9))] == "three"


def test_line_range_at_line_boundaries() -> None:
    text = "ab\ncd"

    # Offset 3 sits right after the newline: it belongs to the second line.
    assert line_start_at(text, 3) == 3
    # Offset 2 sits on the newline itself: still the first line.
    assert line_range_around(text, 2, 2) == (0, 2)
    assert line_start_at(text, 0) == 0
    assert line_end_at(text, 5) == 5


def test_line_range_on_empty_text() -> None:
    assert line_range_around("", 0, 0) == (0, 0)


def test_map_lines_keeps_separators() -> None:
    assert map_lines("a\n\nb", lambda line: f"> {line}") == "> a\n> \n> b"


def test_fence_parity() -> None:
    text = "intro\n```\ncode\n```\nafter"

    assert count_fences(text) == 2
    assert is_inside_code_fence(text, text.index("code")) is True
    assert is_inside_code_fence(text, text.index("after")) is False
    assert is_inside_code_fence(text, text.index("intro")) is False


def test_fence_must_start_line() -> None:
    text = "inline ``` is not a fence\nnext"

    assert is_inside_code_fence(text, len(text)) is False


def test_replace_range_default_caret_after_insert() -> None:
    buffer = Buffer.from_text("hello world")

    delta = buffer.replace_range(6, 11, "there", label="test")

    assert buffer.text == "hello there"
    assert buffer.selection == (11, 11)
    assert delta.version == 1
    assert delta.label == "test"


def test_replace_range_explicit_selection() -> None:
    buffer = Buffer.from_text("abc")

    buffer.replace_range(1, 2, "XYZ", label="test", selection=(1, 4))

    assert buffer.selected_text() == "XYZ"


def test_invalid_selection_is_rejected() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(BufferValidationError):
        buffer.set_selection(2, 1)
    with pytest.raises(BufferValidationError):
        buffer.set_selection(0, 10)
    assert buffer.selection == (0, 0)


def test_failed_commit_leaves_state_untouched() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(BufferValidationError):
        buffer.replace_range(0, 3, "x", label="bad", selection=(0, 5))

    assert buffer.text == "abc"
    assert buffer.version == 0


def test_invalid_replacement_range() -> None:
    buffer = Buffer.from_text("abc")

    with pytest.raises(BufferValidationError) as excinfo:
        buffer.replace_range(2, 9, "", label="bad")

    assert excinfo.value.selection == (2, 9)


def test_set_text_moves_caret_to_end() -> None:
    buffer = Buffer.from_text("old", selection=(1, 1))

    buffer.set_text("brand new")

    assert buffer.text == "brand new"
    assert buffer.selection == (9, 9)


def test_mirror_carries_version_and_attributes() -> None:
    buffer = Buffer.from_text("abc", selection=(0, 3))
    buffer.insert_text("!", offset=3)

    mirror = buffer.mirror(attributes={"label": "insert"})

    assert mirror.text == "abc!"
    assert mirror.version == 1
    assert mirror.attributes == {"label": "insert"}
