"""Fenced code block insertion."""

from __future__ import annotations

from memo_engine.buffer import Buffer, BufferDelta
from memo_engine.buffer.lines import FENCE
from memo_engine.editor.context import EditorContext, EditResult, edited


def insert_fenced_block(buffer: Buffer, placeholder: str = "code") -> BufferDelta:
    """Wrap the selection between fence lines and select the content."""

    start, end = buffer.selection
    content = buffer.selected_text() or placeholder
    opening = f"{FENCE}\n"
    content_start = start + len(opening)
    return buffer.replace_range(
        start,
        end,
        f"{opening}{content}\n{FENCE}",
        label="insert_code_block",
        selection=(content_start, content_start + len(content)),
    )


def insert_code_block(context: EditorContext, match=None) -> EditResult:
    del match
    insert_fenced_block(context.buffer, placeholder=context.config.code_placeholder)
    return edited("code_block")
