"""Dataclasses describing actions and the keys bound to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional

CUSTOM_GROUP = "custom"


def normalize_key(key: str) -> str:
    """Canonical spelling for a bound key.

    Single printable characters are case sensitive (``s`` and ``S`` differ);
    named keys such as ``Enter`` or ``<CR>`` are lower-cased names.
    """

    if len(key) == 1:
        return key
    name = key.strip().strip("<>").lower()
    return {
        "cr": "enter",
        "return": "enter",
        "esc": "escape",
        "space": " ",
        "question_mark": "?",
    }.get(name, name)


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named entry point plus the metadata used for help rendering."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    group: str = CUSTOM_GROUP
    order: int = 999
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates one key with an action."""

    key: str
    action_id: str
    description: str = ""
    source: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("binding key cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        object.__setattr__(self, "key", normalize_key(self.key))


__all__ = ["ActionRef", "Binding", "CUSTOM_GROUP", "normalize_key"]
