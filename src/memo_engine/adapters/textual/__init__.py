"""Textual host for the memo engine."""

from .controller import TextualMemoAdapter, TextualUIHooks

__all__ = ["TextualMemoAdapter", "TextualUIHooks"]
