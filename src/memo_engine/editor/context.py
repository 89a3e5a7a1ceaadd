"""Shared types every action handler receives or returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from memo_engine.buffer import Buffer
from memo_engine.config import EditorConfig

if TYPE_CHECKING:  # pragma: no cover
    from memo_engine.services import Exporter, Renderer, Storage


@dataclass(slots=True)
class KeyInput:
    """Normalized key chord passed to the dispatcher."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class EditResult:
    """Outcome of an action.

    ``handled`` tells the host whether to suppress its own default behavior
    for the key (newline insertion on Enter, focus change on Tab).
    """

    handled: bool
    changed: bool = False
    status: str = "ok"
    message: Optional[str] = None


class EditorBus:
    """Minimal event bus letting the session fan out buffer changes."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class EditorContext:
    """Buffer plus the collaborators an action may need."""

    buffer: Buffer
    bus: EditorBus = field(default_factory=EditorBus)
    config: EditorConfig = field(default_factory=EditorConfig)
    renderer: Optional["Renderer"] = None
    storage: Optional["Storage"] = None
    exporter: Optional["Exporter"] = None


def not_handled(status: str = "noop") -> EditResult:
    return EditResult(handled=False, status=status)


def edited(status: str, message: Optional[str] = None) -> EditResult:
    return EditResult(handled=True, changed=True, status=status, message=message)


__all__ = [
    "KeyInput",
    "EditResult",
    "EditorBus",
    "EditorContext",
    "not_handled",
    "edited",
]
