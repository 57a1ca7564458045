import pytest

from jujutsu_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    load_default_keymaps,
    normalize_key,
)
from jujutsu_engine.keymaps.defaults import DEFAULT_ACTIONS, DEFAULT_KEYS


def make_action(action_id: str = "core.test", **kwargs) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kw: None, **kwargs)


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)

    binding = registry.register_binding(Binding(key="x", action_id="core.test"))

    assert list(registry.iter_bindings()) == [binding]
    assert registry.resolve("x") is action


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_action(make_action("core.other"))
    registry.register_binding(Binding(key="x", action_id="core.test"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(Binding(key="x", action_id="core.other"))

    registry.register_binding(Binding(key="x", action_id="core.other"), replace=True)
    assert registry.resolve("x").id == "core.other"


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(Binding(key="x", action_id="missing"))


def test_duplicate_action_requires_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())


def test_keys_are_case_sensitive_and_names_normalized() -> None:
    assert normalize_key("s") != normalize_key("S")
    assert normalize_key("<CR>") == "enter"
    assert normalize_key("Esc") == "escape"
    assert Binding(key="<Space>", action_id="a").key == " "


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = registry.register_binding(Binding(key="x", action_id="core.test"))

    assert registry.unregister_binding("x") == binding
    assert registry.resolve("x") is None
    assert registry.unregister_binding("x") is None


def test_load_default_keymaps_registers_every_builtin() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    bindings = list(registry.iter_bindings())
    assert {action.id for action in DEFAULT_ACTIONS} == {b.action_id for b in bindings}
    assert len(bindings) == len(DEFAULT_KEYS)
    assert all(binding.source == "default" for binding in bindings)
    assert registry.resolve("S").id == "squash_to_target"
    assert registry.resolve("s").id == "squash_change"
    assert registry.resolve("enter").id == "open_diff"


def test_load_default_keymaps_filters() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry, include_actions=["describe", "undo"])

    assert {binding.action_id for binding in registry.iter_bindings()} == {"describe", "undo"}
