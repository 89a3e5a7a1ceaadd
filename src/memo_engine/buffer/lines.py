"""Pure helpers for locating and rewriting lines inside a flat text."""

from __future__ import annotations

import re
from typing import Callable, Tuple

LineRange = Tuple[int, int]

FENCE = "```"
_FENCE_LINE = re.compile(r"^```", re.MULTILINE)


def line_start_at(text: str, offset: int) -> int:
    """Offset just after the last newline strictly before ``offset``."""

    if offset <= 0:
        return 0
    return text.rfind("\n", 0, offset) + 1


def line_end_at(text: str, offset: int) -> int:
    """Offset of the first newline at or after ``offset`` (or ``len(text)``)."""

    found = text.find("\n", offset)
    return len(text) if found == -1 else found


def line_range_around(text: str, start: int, end: int) -> LineRange:
    """Return the bounds of the whole lines touched by ``[start, end]``.

    The range never splits a line: it begins at a line start and stops at a
    newline or at the end of the text, so ``line_start <= start`` and
    ``end <= line_end`` always hold.
    """

    return line_start_at(text, start), line_end_at(text, end)


def replace_range(text: str, start: int, end: int, replacement: str) -> str:
    return text[:start] + replacement + text[end:]


def map_lines(chunk: str, transform: Callable[[str], str]) -> str:
    return "\n".join(transform(line) for line in chunk.split("\n"))


def count_fences(text: str) -> int:
    return len(_FENCE_LINE.findall(text))


def is_inside_code_fence(text: str, offset: int) -> bool:
    """True when an odd number of fence lines start before ``offset``."""

    return count_fences(text[:offset]) % 2 == 1


__all__ = [
    "FENCE",
    "LineRange",
    "line_start_at",
    "line_end_at",
    "line_range_around",
    "replace_range",
    "map_lines",
    "count_fences",
    "is_inside_code_fence",
]
