import pytest

from memo_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeyStroke,
    WhenClause,
    load_default_keymaps,
)


def make_action(
    action_id: str = "test.action", aliases: tuple[str, ...] = ()
) -> ActionRef:
    return ActionRef(
        id=action_id, handler=lambda *args, **kwargs: None, aliases=aliases
    )


def make_binding(
    *,
    binding_id: str,
    chord: str = "ctrl+b",
    action_id: str = "test.action",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(chord),
        action_id=action_id,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="key.ctrl+b")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings("ctrl+b")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="second"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(
        make_binding(binding_id="with_selection", when=(WhenClause("has_selection"),))
    )
    registry.register_binding(
        make_binding(
            binding_id="caret_only", when=(WhenClause.parse("!has_selection"),)
        )
    )

    assert registry.stats().binding_count == 2


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", chord="ctrl+shift+b")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert registry.stats().chords == ("ctrl+shift+b",)


def test_register_binding_unknown_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_action_aliases_resolve_to_canonical_id() -> None:
    registry = KeymapRegistry()
    action = make_action("inline_code", aliases=("inlineCode",))
    registry.register_action(action)

    assert registry.get_action("inlineCode") is action
    assert registry.find_action("missing") is None
    with pytest.raises(KeyError):
        registry.get_action("missing")


def test_alias_clash_is_rejected() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action("first", aliases=("shared",)))

    with pytest.raises(ValueError):
        registry.register_action(make_action("second", aliases=("shared",)))
    with pytest.raises(ValueError):
        registry.register_action(make_action("first"))


def test_keystroke_normalizes_modifiers_and_aliases() -> None:
    assert KeyStroke.parse("Shift+Ctrl+X").token == "ctrl+shift+x"
    assert KeyStroke.parse("cmd+b").token == "ctrl+b"
    assert KeyStroke(key="grave_accent", modifiers=("ctrl",)).token == "ctrl+`"
    assert KeyStroke.parse("Return").token == "enter"
    assert KeyStroke.parse("ctrl++").token == "ctrl++"


def test_load_default_keymaps_registers_toolbar_actions() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    ids = {action.id for action in registry.iter_actions()}
    assert {
        "bold",
        "italic",
        "strike",
        "inline_code",
        "code_block",
        "ul_dash",
        "ul_star",
        "quote",
        "save",
        "clear",
    } <= ids
    assert registry.get_action("codeBlock").id == "code_block"
    assert registry.get_binding("key.shift+tab").action_id == "outdent"


def test_load_default_keymaps_exclude_actions() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_actions=("save",))

    assert registry.find_action("save") is None
    assert list(registry.iter_bindings("ctrl+s")) == []


def test_load_default_keymaps_extra_binding_overrides_chord() -> None:
    registry = KeymapRegistry()
    custom = Binding(id="custom.bold", stroke="ctrl+b", action_id="strike")

    load_default_keymaps(registry, extra_bindings=(custom,))

    bindings = list(registry.iter_bindings("ctrl+b"))
    assert bindings == [custom]
