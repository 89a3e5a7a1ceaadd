"""Dataclasses describing key chords, bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

# Command on macOS behaves like Control everywhere else.
_MODIFIER_ALIASES = {
    "control": "ctrl",
    "meta": "ctrl",
    "cmd": "ctrl",
    "command": "ctrl",
    "super": "ctrl",
    "option": "alt",
}

_KEY_ALIASES = {
    "return": "enter",
    "esc": "escape",
    "grave_accent": "`",
    "backtick": "`",
}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = []
    for modifier in modifiers:
        cleaned = modifier.strip().lower()
        if cleaned:
            values.append(_MODIFIER_ALIASES.get(cleaned, cleaned))
    return tuple(sorted(dict.fromkeys(values)))


def _normalize_key(key: str) -> str:
    lowered = (key.strip() or key).lower()
    return _KEY_ALIASES.get(lowered, lowered)


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key chord such as ``ctrl+shift+x``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", _normalize_key(self.key))
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @classmethod
    def parse(cls, chord: str) -> "KeyStroke":
        """Parse ``"ctrl+shift+x"``; a trailing ``+`` names the plus key."""

        chord = chord.strip()
        if not chord:
            raise ValueError("chord cannot be empty")
        if chord == "+" or chord.endswith("++"):
            head, key = chord[:-1].rstrip("+"), "+"
        else:
            head, _, key = chord.rpartition("+")
        modifiers = tuple(part for part in head.split("+") if part)
        return cls(key=key, modifiers=modifiers)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Boolean condition used to gate bindings (``"has_selection"``, ``"!x"``)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        expected = True
        if expr.startswith("!"):
            expected = False
            expr = expr[1:]
        return cls(expr, expected)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    aliases: tuple[str, ...] = ()
    telemetry_name: str | None = None
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "aliases", tuple(a for a in self.aliases if a))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key chord with an action, optionally gated by flags."""

    id: str
    stroke: KeyStroke
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        stroke = self.stroke
        if isinstance(stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(stroke))
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return self.stroke.token


__all__ = [
    "KeyStroke",
    "WhenClause",
    "ActionRef",
    "Binding",
]
