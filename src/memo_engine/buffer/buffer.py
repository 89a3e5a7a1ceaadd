"""High-level buffer façade combining text, selection and telemetry."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional

from memo_engine.runtime import telemetry

from .lines import LineRange, line_range_around, replace_range
from .state import EditorState, Selection
from .sync import BufferMirror
from .validation import ensure_range, ensure_selection


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    selection: Selection
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "memo",
        state: Optional[EditorState] = None,
    ) -> None:
        self.name = name
        self.state = state or EditorState()
        ensure_selection(self.state.text, *self.state.selection)

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "memo", selection: Optional[Selection] = None
    ) -> "Buffer":
        start, end = selection or (0, 0)
        return cls(
            name=name,
            state=EditorState(text=text, selection_start=start, selection_end=end),
        )

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def selection(self) -> Selection:
        return self.state.selection

    @property
    def version(self) -> int:
        return self.state.version

    def selected_text(self) -> str:
        start, end = self.state.selection
        return self.state.text[start:end]

    def line_range(self) -> LineRange:
        return line_range_around(self.state.text, *self.state.selection)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.state.text,
            selection=self.state.selection,
            version=self.state.version,
            attributes=dict(attributes or {}),
        )

    def set_selection(self, start: int, end: int) -> Selection:
        ensure_selection(self.state.text, start, end)
        self.state.set_selection(start, end)
        return self.state.selection

    def replace_range(
        self,
        start: int,
        end: int,
        replacement: str,
        *,
        label: str,
        selection: Optional[Selection] = None,
    ) -> BufferDelta:
        """Replace ``text[start:end]`` and install the resulting selection.

        Without an explicit ``selection`` the caret lands right after the
        inserted text.
        """

        with Transaction(self, label) as tx:
            ensure_range(self.state.text, start, end)
            new_text = replace_range(self.state.text, start, end, replacement)
            if selection is None:
                caret = start + len(replacement)
                selection = (caret, caret)
            tx.commit(new_text, selection)

        return BufferDelta(
            version=self.state.version,
            text=self.state.text,
            selection=self.state.selection,
            label=label,
        )

    def insert_text(self, text: str, *, offset: Optional[int] = None) -> BufferDelta:
        position = self.state.selection_start if offset is None else offset
        return self.replace_range(position, position, text, label="insert_text")

    def set_text(
        self,
        text: str,
        *,
        selection: Optional[Selection] = None,
        label: str = "set_text",
    ) -> BufferDelta:
        """Replace the whole text; the caret defaults to the end."""

        if selection is None:
            selection = (len(text), len(text))
        return self.replace_range(
            0, len(self.state.text), text, label=label, selection=selection
        )


class Transaction(AbstractContextManager["Transaction"]):
    """Applies one atomic text + selection change inside a telemetry span."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def commit(self, text: str, selection: Selection) -> None:
        # Validate before touching state so a bad selection leaves the
        # previous text in place.
        ensure_selection(text, *selection)
        state = self.buffer.state
        state.text = text
        state.set_selection(*selection)
        state.version += 1
        if self._handle is not None:
            self._handle.add_metadata("version", state.version)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
