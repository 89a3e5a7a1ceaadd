"""Text + selection state owned by a buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Selection = Tuple[int, int]  # (start, end) offsets into the text


@dataclass(slots=True)
class EditorState:
    """Mutable text and selection offsets tied to a buffer version."""

    text: str = ""
    selection_start: int = 0
    selection_end: int = 0
    version: int = 0

    @property
    def selection(self) -> Selection:
        return (self.selection_start, self.selection_end)

    @property
    def is_caret(self) -> bool:
        return self.selection_start == self.selection_end

    def set_selection(self, start: int, end: int) -> None:
        self.selection_start = start
        self.selection_end = end
