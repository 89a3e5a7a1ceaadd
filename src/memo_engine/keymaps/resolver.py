"""Chord and action-id resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional

from memo_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding (if any) paired with its action."""

    action: ActionRef
    binding: Optional[Binding] = None


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver."""

    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None
    token: str = ""


class KeymapResolver:
    """Looks up chords and toolbar action ids against a registry."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: tuple[int, Dict[str, tuple[Binding, ...]]] | None = None

    def resolve(
        self,
        stroke: KeyStroke | str,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        if isinstance(stroke, str):
            stroke = KeyStroke.parse(stroke)
        token = stroke.token
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"chord": token},
        ) as handle:
            candidates = self._index().get(token, ())
            match = self._select_match(candidates, ctx)
            if match is None:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", token=token)
            handle.add_metadata("status", "match")
            handle.add_metadata("action_id", match.action.id)
            return ResolutionResult(status="match", match=match, token=token)

    def resolve_action(self, action_id: str) -> ResolutionResult:
        action = self._registry.find_action(action_id)
        if action is None:
            return ResolutionResult(status="miss", token=action_id)
        return ResolutionResult(
            status="match", match=ResolutionMatch(action=action), token=action_id
        )

    def reset(self) -> None:
        self._cache = None

    def _index(self) -> Dict[str, tuple[Binding, ...]]:
        revision = self._registry.revision()
        if self._cache and self._cache[0] == revision:
            return self._cache[1]

        grouped: Dict[str, list[Binding]] = {}
        for binding in self._registry.iter_bindings():
            grouped.setdefault(binding.key_signature, []).append(binding)
        index = {
            token: tuple(sorted(items, key=lambda b: b.id))
            for token, items in grouped.items()
        }
        self._cache = (revision, index)
        return index

    def _select_match(
        self, candidates: tuple[Binding, ...], context: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        for binding in candidates:
            if not binding.allows(context):
                continue
            action = self._registry.get_action(binding.action_id)
            return ResolutionMatch(action=action, binding=binding)
        return None


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
