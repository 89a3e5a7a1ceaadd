"""Editing verbs bound to toolbar actions and key chords."""

from .blocks import insert_code_block, insert_fenced_block
from .continuation import (
    LineKind,
    LineMatch,
    classify_line,
    continue_list,
    handle_enter,
)
from .document import clear_document, export_document
from .inline import (
    INLINE_MARKUP,
    bold,
    inline_code,
    italic,
    strike,
    wrap_inline,
    wrap_selection,
)
from .lines import (
    indent,
    indent_lines,
    list_dash,
    list_star,
    outdent,
    shift_selected_lines,
    toggle_list_marker,
    toggle_prefix,
    toggle_quote,
    transform_selected_lines,
)

__all__ = [
    "INLINE_MARKUP",
    "wrap_selection",
    "wrap_inline",
    "bold",
    "italic",
    "strike",
    "inline_code",
    "toggle_prefix",
    "transform_selected_lines",
    "shift_selected_lines",
    "toggle_list_marker",
    "toggle_quote",
    "indent_lines",
    "list_dash",
    "list_star",
    "indent",
    "outdent",
    "insert_fenced_block",
    "insert_code_block",
    "LineKind",
    "LineMatch",
    "classify_line",
    "continue_list",
    "handle_enter",
    "clear_document",
    "export_document",
]
