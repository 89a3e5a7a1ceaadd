"""Inline markup: wrap the selection in a prefix/suffix pair."""

from __future__ import annotations

from typing import Dict, Tuple

from memo_engine.buffer import Buffer, BufferDelta
from memo_engine.editor.context import EditorContext, EditResult, edited

INLINE_MARKUP: Dict[str, Tuple[str, str]] = {
    "bold": ("**", "**"),
    "italic": ("*", "*"),
    "strike": ("~~", "~~"),
    "inline_code": ("`", "`"),
}


def wrap_selection(
    buffer: Buffer, prefix: str, suffix: str, placeholder: str = "text"
) -> BufferDelta:
    """Surround the selection (or ``placeholder``) and select the body."""

    start, end = buffer.selection
    body = buffer.selected_text() or placeholder
    body_start = start + len(prefix)
    return buffer.replace_range(
        start,
        end,
        f"{prefix}{body}{suffix}",
        label="wrap_selection",
        selection=(body_start, body_start + len(body)),
    )


def wrap_inline(context: EditorContext, kind: str) -> EditResult:
    try:
        prefix, suffix = INLINE_MARKUP[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown inline markup '{kind}'") from exc
    wrap_selection(
        context.buffer, prefix, suffix, placeholder=context.config.inline_placeholder
    )
    return edited(kind)


def bold(context: EditorContext, match) -> EditResult:
    del match
    return wrap_inline(context, "bold")


def italic(context: EditorContext, match) -> EditResult:
    del match
    return wrap_inline(context, "italic")


def strike(context: EditorContext, match) -> EditResult:
    del match
    return wrap_inline(context, "strike")


def inline_code(context: EditorContext, match) -> EditResult:
    del match
    return wrap_inline(context, "inline_code")


__all__ = [
    "INLINE_MARKUP",
    "wrap_selection",
    "wrap_inline",
    "bold",
    "italic",
    "strike",
    "inline_code",
]
