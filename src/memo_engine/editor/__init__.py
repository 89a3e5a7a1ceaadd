"""Editor context types; the session lives in ``memo_engine.editor.session``."""

from .context import (
    EditorBus,
    EditorContext,
    EditResult,
    KeyInput,
    edited,
    not_handled,
)

__all__ = [
    "EditorBus",
    "EditorContext",
    "EditResult",
    "KeyInput",
    "edited",
    "not_handled",
]
