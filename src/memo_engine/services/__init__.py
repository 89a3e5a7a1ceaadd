"""Collaborators the session notifies: renderer, storage, exporter."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol

from .export import FileExporter
from .render import MarkdownRenderer, RichMarkdownRenderer
from .storage import FileStorage, MemoryStorage


class Renderer(Protocol):
    def render(self, text: str) -> Any:
        """Turn buffer text into display output."""
        ...


class Storage(Protocol):
    def load(self) -> Optional[str]:
        """Return the persisted text, or None when nothing was saved yet."""
        ...

    def save(self, text: str) -> object:
        ...


class Exporter(Protocol):
    def export(self, text: str, suggested_filename: str) -> Optional[Path]:
        """Hand the text to the user as a file; return where it went."""
        ...


__all__ = [
    "Renderer",
    "Storage",
    "Exporter",
    "MarkdownRenderer",
    "RichMarkdownRenderer",
    "MemoryStorage",
    "FileStorage",
    "FileExporter",
]
