"""Smart list continuation for the Enter key.

On Enter with a bare caret the current line is classified as a task item,
an unordered item, an ordered item or plain text (in that order, since task
syntax is a superset of unordered syntax). A list item with content gets its
marker repeated on a new line; an empty list item is closed by dropping its
marker. Plain lines, real selections and carets inside an open code fence are
left to the host's default newline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from memo_engine.buffer import Buffer, is_inside_code_fence, line_range_around
from memo_engine.editor.context import EditorContext, EditResult, edited, not_handled


class LineKind(str, Enum):
    TASK = "task-item"
    UNORDERED = "unordered-item"
    ORDERED = "ordered-item"
    PLAIN = "plain"


@dataclass(frozen=True, slots=True)
class LineMatch:
    kind: LineKind
    indent: str = ""
    marker: str = ""
    content: str = ""
    number: Optional[int] = None
    checked: Optional[bool] = None

    @property
    def is_list(self) -> bool:
        return self.kind is not LineKind.PLAIN

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

    def next_marker(self) -> str:
        if self.kind is LineKind.TASK:
            return f"{self.marker} [ ]"
        if self.kind is LineKind.ORDERED:
            assert self.number is not None
            return f"{self.number + 1}."
        return self.marker


_TASK = re.compile(r"^(\s*)([-*+])\s+\[( |x|X)\]\s+(.*)$")
_UNORDERED = re.compile(r"^(\s*)([-*+])\s+(.*)$")
_ORDERED = re.compile(r"^(\s*)([0-9]+)\.\s+(.*)$")

PLAIN_LINE = LineMatch(kind=LineKind.PLAIN)


def _match_task(line: str) -> Optional[LineMatch]:
    found = _TASK.match(line)
    if found is None:
        return None
    indent, bullet, box, content = found.groups()
    return LineMatch(
        kind=LineKind.TASK,
        indent=indent,
        marker=bullet,
        content=content,
        checked=box in ("x", "X"),
    )


def _match_unordered(line: str) -> Optional[LineMatch]:
    found = _UNORDERED.match(line)
    if found is None:
        return None
    indent, bullet, content = found.groups()
    return LineMatch(
        kind=LineKind.UNORDERED, indent=indent, marker=bullet, content=content
    )


def _match_ordered(line: str) -> Optional[LineMatch]:
    found = _ORDERED.match(line)
    if found is None:
        return None
    indent, digits, content = found.groups()
    return LineMatch(
        kind=LineKind.ORDERED,
        indent=indent,
        marker=f"{digits}.",
        content=content,
        number=int(digits),
    )


_MATCHERS = (_match_task, _match_unordered, _match_ordered)


def classify_line(line: str) -> LineMatch:
    for matcher in _MATCHERS:
        found = matcher(line)
        if found is not None:
            return found
    return PLAIN_LINE


def continue_list(buffer: Buffer) -> bool:
    """Apply Enter-key continuation; return True when the buffer was edited."""

    start, end = buffer.selection
    if start != end:
        return False

    text = buffer.text
    if is_inside_code_fence(text, start):
        return False

    line_start, line_end = line_range_around(text, start, start)
    found = classify_line(text[line_start:line_end])
    if not found.is_list:
        return False

    if found.is_blank:
        caret = line_start + len(found.indent)
        buffer.replace_range(
            line_start,
            line_end,
            found.indent,
            label="close_list",
            selection=(caret, caret),
        )
        return True

    insertion = f"\n{found.indent}{found.next_marker()} "
    buffer.replace_range(start, start, insertion, label="continue_list")
    return True


def handle_enter(context: EditorContext, match=None) -> EditResult:
    del match
    buffer = context.buffer
    if not buffer.state.is_caret:
        return not_handled("selection")
    if is_inside_code_fence(buffer.text, buffer.selection[0]):
        return not_handled("code_fence")
    if continue_list(buffer):
        return edited("continue_list")
    return not_handled("plain_line")


__all__ = [
    "LineKind",
    "LineMatch",
    "PLAIN_LINE",
    "classify_line",
    "continue_list",
    "handle_enter",
]
