"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .state import Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot of the text and selection to display."""

    text: str
    selection: Selection
    version: int = 0
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """How adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot the host should display."""
        ...

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Submit text typed or pasted directly into the host widget."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a selection falls outside the text or is inverted."""

    def __init__(self, message: str, *, selection: Selection | None = None) -> None:
        super().__init__(message)
        self.selection = selection
