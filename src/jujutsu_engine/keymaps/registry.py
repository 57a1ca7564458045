"""Action table plus the single-key bindings that point into it."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from jujutsu_engine.runtime.telemetry import span

from .models import ActionRef, Binding, normalize_key


class KeymapConflictError(RuntimeError):
    """Raised when a key is already bound to another action."""

    def __init__(self, binding: Binding, existing: Binding):
        super().__init__(
            f"Key '{binding.key}' for '{binding.action_id}' is already bound "
            f"to '{existing.action_id}'"
        )
        self.binding = binding
        self.existing = existing


class KeymapRegistry:
    """Owns action references and the key table pointing at them."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._logger_name = logger_name

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Unknown action '{action_id}'") from exc

    def binding_for(self, key: str) -> Optional[Binding]:
        return self._bindings.get(normalize_key(key))

    def resolve(self, key: str) -> Optional[ActionRef]:
        """Action bound to ``key`` or ``None`` when the key is unbound."""

        binding = self.binding_for(key)
        if binding is None:
            return None
        return self._actions.get(binding.action_id)

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Duplicate action id '{action.id}'")
            self._actions[action.id] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"key": binding.key, "action_id": binding.action_id},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Key '{binding.key}' references unknown action '{binding.action_id}'"
                )

            existing = self._bindings.get(binding.key)
            if existing is not None and existing != binding and not replace:
                handle.add_metadata("conflict", existing.action_id)
                raise KeymapConflictError(binding, existing)

            self._bindings[binding.key] = binding
            return binding

    def unregister_binding(self, key: str) -> Optional[Binding]:
        with span(
            "keymaps::unregister_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"key": key},
        ):
            return self._bindings.pop(normalize_key(key), None)

    def iter_bindings(self) -> Iterator[Binding]:
        yield from self._bindings.values()


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
]
