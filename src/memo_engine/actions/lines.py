"""Per-line transforms: list/quote toggles and indentation."""

from __future__ import annotations

from typing import Callable

from memo_engine.buffer import Buffer, BufferDelta, map_lines
from memo_engine.editor.context import EditorContext, EditResult, edited

LineTransform = Callable[[str], str]

LIST_MARKERS = ("-", "*")
QUOTE_MARKER = ">"


def toggle_prefix(line: str, marker: str) -> str:
    """Strip ``"<marker> "`` when present, prepend it otherwise."""

    prefix = f"{marker} "
    if line.startswith(prefix):
        return line[len(prefix) :]
    return prefix + line


def indent_line(line: str, unit: str = "  ") -> str:
    return unit + line


def outdent_line(line: str, unit: str = "  ") -> str:
    # Only spaces count; a leading tab is left alone.
    width = len(line) - len(line.lstrip(" "))
    return line[min(width, len(unit)) :]


def transform_selected_lines(
    buffer: Buffer, transform: LineTransform, *, label: str = "transform_lines"
) -> BufferDelta:
    """Rewrite every line the selection touches.

    A caret collapses to the start of its line afterwards; a real selection
    grows to cover the whole rewritten chunk so the same toggle can be
    repeated on it.
    """

    start, end = buffer.selection
    line_start, line_end = buffer.line_range()
    chunk = map_lines(buffer.text[line_start:line_end], transform)
    if start == end:
        selection = (line_start, line_start)
    else:
        selection = (line_start, line_start + len(chunk))
    return buffer.replace_range(
        line_start, line_end, chunk, label=label, selection=selection
    )


def shift_selected_lines(
    buffer: Buffer, *, outdent: bool, unit: str = "  "
) -> BufferDelta:
    """Indent or outdent the touched lines, keeping the selection on the text."""

    start, end = buffer.selection
    line_start, line_end = buffer.line_range()
    old_lines = buffer.text[line_start:line_end].split("\n")
    shift = outdent_line if outdent else indent_line
    new_lines = [shift(line, unit) for line in old_lines]
    chunk = "\n".join(new_lines)

    first_delta = len(new_lines[0]) - len(old_lines[0])
    total_delta = len(chunk) - (line_end - line_start)
    new_start = max(line_start, start + first_delta)
    new_end = max(new_start, end + total_delta)
    return buffer.replace_range(
        line_start,
        line_end,
        chunk,
        label="outdent_lines" if outdent else "indent_lines",
        selection=(new_start, new_end),
    )


def toggle_list_marker(context: EditorContext, marker: str) -> EditResult:
    if marker not in LIST_MARKERS:
        raise ValueError(f"Unsupported list marker '{marker}'")
    transform_selected_lines(
        context.buffer,
        lambda line: toggle_prefix(line, marker),
        label="toggle_list_marker",
    )
    return edited("toggle_list", message=marker)


def toggle_quote(context: EditorContext, match=None) -> EditResult:
    del match
    transform_selected_lines(
        context.buffer,
        lambda line: toggle_prefix(line, QUOTE_MARKER),
        label="toggle_quote",
    )
    return edited("toggle_quote")


def indent_lines(context: EditorContext, outdent: bool = False) -> EditResult:
    shift_selected_lines(
        context.buffer, outdent=outdent, unit=context.config.indent_unit
    )
    return edited("outdent" if outdent else "indent")


def list_dash(context: EditorContext, match) -> EditResult:
    del match
    return toggle_list_marker(context, "-")


def list_star(context: EditorContext, match) -> EditResult:
    del match
    return toggle_list_marker(context, "*")


def indent(context: EditorContext, match) -> EditResult:
    del match
    return indent_lines(context, outdent=False)


def outdent(context: EditorContext, match) -> EditResult:
    del match
    return indent_lines(context, outdent=True)


__all__ = [
    "LIST_MARKERS",
    "QUOTE_MARKER",
    "toggle_prefix",
    "indent_line",
    "outdent_line",
    "transform_selected_lines",
    "shift_selected_lines",
    "toggle_list_marker",
    "toggle_quote",
    "indent_lines",
    "list_dash",
    "list_star",
    "indent",
    "outdent",
]
