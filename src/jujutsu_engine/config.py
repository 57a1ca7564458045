"""Engine configuration: jj binary, remote, diff preset and user keymap."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jujutsu_engine.runtime import telemetry

ENV_PREFIX = "JUJUTSU_ENGINE_"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "jujutsu-engine" / "config.toml"


@dataclass(frozen=True, slots=True)
class DiffPreset:
    """How ``open_diff`` renders a change; ``args`` holds a ``{change}`` slot."""

    name: str
    args: Tuple[str, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not self.args

    def build(self, change_id: str) -> List[str]:
        return [arg.replace("{change}", change_id) for arg in self.args]


DIFF_PRESETS: Dict[str, DiffPreset] = {
    "git": DiffPreset("git", ("diff", "--git", "--color=always", "-r", "{change}")),
    "stat": DiffPreset("stat", ("diff", "--stat", "--color=always", "-r", "{change}")),
    "show": DiffPreset("show", ("show", "--color=always", "{change}")),
    "difftastic": DiffPreset(
        "difftastic", ("diff", "--tool", "difft", "--color=always", "-r", "{change}")
    ),
    "none": DiffPreset("none"),
}
DEFAULT_DIFF_PRESET = "git"
FALLBACK_DIFF_PRESET = "none"


class ConfigError(ValueError):
    """Raised when a config file cannot be parsed."""


def resolve_diff_preset(name: str | None, *, warn=None) -> DiffPreset:
    """Look up a preset by name, falling back to the no-op preset."""

    key = (name or DEFAULT_DIFF_PRESET).strip().lower()
    preset = DIFF_PRESETS.get(key)
    if preset is not None:
        return preset
    message = f"Unknown diff preset '{name}', diff preview disabled"
    telemetry.record_event(
        "config.unknown_diff_preset", level="warning", data={"preset": name}
    )
    if warn is not None:
        warn(message)
    return DIFF_PRESETS[FALLBACK_DIFF_PRESET]


@dataclass(slots=True)
class EngineConfig:
    jj_binary: str = "jj"
    remote: str = "origin"
    diff_preset: str = DEFAULT_DIFF_PRESET
    revset: Optional[str] = None
    keymap: Dict[str, Any] = field(default_factory=dict)
    source: Optional[Path] = None

    def diff(self, *, warn=None) -> DiffPreset:
        return resolve_diff_preset(self.diff_preset, warn=warn)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], *, source: Optional[Path] = None
    ) -> "EngineConfig":
        keymap = data.get("keymap", {})
        if not isinstance(keymap, Mapping):
            raise ConfigError("'keymap' must be a table")
        revset = data.get("revset")
        return cls(
            jj_binary=str(data.get("jj", "jj")),
            remote=str(data.get("remote", "origin")),
            diff_preset=str(data.get("diff_preset", DEFAULT_DIFF_PRESET)),
            revset=str(revset) if revset else None,
            keymap=dict(keymap),
            source=source,
        )


def _env(name: str) -> Optional[str]:
    value = os.environ.get(f"{ENV_PREFIX}{name}")
    return value if value else None


def load_config(path: str | os.PathLike[str] | None = None) -> EngineConfig:
    """Read the TOML config (if any) then apply environment overrides."""

    explicit = path or _env("CONFIG")
    config_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH
    data: Dict[str, Any] = {}
    if config_path.is_file():
        try:
            with config_path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc
    elif explicit:
        raise ConfigError(f"Config file not found: {config_path}")

    config = EngineConfig.from_mapping(
        data, source=config_path if data else None
    )
    config.jj_binary = _env("JJ") or config.jj_binary
    config.remote = _env("REMOTE") or config.remote
    config.diff_preset = _env("DIFF_PRESET") or config.diff_preset
    telemetry.record_event(
        "config.loaded",
        level="debug",
        data={
            "source": str(config.source or "-"),
            "diff_preset": config.diff_preset,
            "keymap_entries": len(config.keymap),
        },
    )
    return config


__all__ = [
    "DiffPreset",
    "DIFF_PRESETS",
    "EngineConfig",
    "ConfigError",
    "load_config",
    "resolve_diff_preset",
]
