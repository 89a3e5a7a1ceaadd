"""Buffer text, selection state and line-boundary primitives."""

from .buffer import Buffer, BufferDelta, Transaction
from .lines import (
    is_inside_code_fence,
    line_range_around,
    map_lines,
    replace_range,
)
from .state import EditorState, Selection
from .sync import BufferMirror, BufferSync, BufferValidationError
from .validation import ensure_selection

__all__ = [
    "Buffer",
    "BufferDelta",
    "Transaction",
    "EditorState",
    "Selection",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "ensure_selection",
    "line_range_around",
    "replace_range",
    "map_lines",
    "is_inside_code_fence",
]
