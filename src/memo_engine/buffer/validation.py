"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .state import Selection
from .sync import BufferValidationError


def ensure_selection(text: str, start: int, end: int) -> Selection:
    selection = (start, end)
    if start < 0 or end > len(text):
        raise BufferValidationError("Selection out of range", selection=selection)
    if start > end:
        raise BufferValidationError("Selection is inverted", selection=selection)
    return selection


def ensure_range(text: str, start: int, end: int) -> Selection:
    """Like ``ensure_selection`` but for a replacement span."""

    try:
        return ensure_selection(text, start, end)
    except BufferValidationError as exc:
        raise BufferValidationError(
            f"Replacement range invalid: {exc}", selection=exc.selection
        ) from exc
