"""Built-in toolbar actions and key chords."""

from __future__ import annotations

from typing import Iterable, Sequence

from memo_engine.actions import blocks as block_actions
from memo_engine.actions import continuation as continuation_actions
from memo_engine.actions import document as document_actions
from memo_engine.actions import inline as inline_actions
from memo_engine.actions import lines as line_actions

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="bold", handler=inline_actions.bold, description="Bold"),
    ActionRef(id="italic", handler=inline_actions.italic, description="Italic"),
    ActionRef(id="strike", handler=inline_actions.strike, description="Strikethrough"),
    ActionRef(
        id="inline_code",
        handler=inline_actions.inline_code,
        description="Inline code",
        aliases=("inlineCode",),
    ),
    ActionRef(
        id="code_block",
        handler=block_actions.insert_code_block,
        description="Fenced code block",
        aliases=("codeBlock",),
    ),
    ActionRef(
        id="ul_dash",
        handler=line_actions.list_dash,
        description="Toggle '-' list",
        aliases=("ulDash",),
    ),
    ActionRef(
        id="ul_star",
        handler=line_actions.list_star,
        description="Toggle '*' list",
        aliases=("ulStar",),
    ),
    ActionRef(id="quote", handler=line_actions.toggle_quote, description="Toggle quote"),
    ActionRef(id="indent", handler=line_actions.indent, description="Indent lines"),
    ActionRef(id="outdent", handler=line_actions.outdent, description="Outdent lines"),
    ActionRef(
        id="continue_list",
        handler=continuation_actions.handle_enter,
        description="Continue or close the current list item",
    ),
    ActionRef(
        id="save",
        handler=document_actions.export_document,
        description="Export the memo",
        aliases=("download", "export"),
    ),
    ActionRef(id="clear", handler=document_actions.clear_document, description="Clear"),
)


def _bind(chord: str, action_id: str, description: str = "") -> Binding:
    return Binding(
        id=f"key.{chord}",
        stroke=KeyStroke.parse(chord),
        action_id=action_id,
        description=description,
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _bind("ctrl+b", "bold"),
    _bind("ctrl+i", "italic"),
    _bind("ctrl+shift+x", "strike"),
    _bind("ctrl+shift+c", "code_block"),
    _bind("ctrl+`", "inline_code"),
    _bind("ctrl+s", "save"),
    _bind("tab", "indent"),
    _bind("shift+tab", "outdent"),
    _bind("enter", "continue_list"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    exclude_actions: Sequence[str] | None = None,
) -> None:
    """Register the built-in actions and the bindings that point at them."""

    excluded = set(exclude_actions or ())
    for action in DEFAULT_ACTIONS:
        if action.id in excluded:
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if binding.action_id in excluded:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=True)


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS"]
