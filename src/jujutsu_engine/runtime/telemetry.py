"""Structured logging for the engine, backed by telelog.

Modules log through four entry points:

``configure(...)`` -- install settings, a named preset or a raw ``telelog.Config``
``get_logger(name)`` -- cached ``telelog.Logger`` for a dotted logger name
``log`` / ``record_event`` -- plain messages and ``event::<name>`` records
``span(name, ...)`` -- profile a block, track it as a component, attach context
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "JUJUTSU_ENGINE_"
ROOT_LOGGER = "jujutsu_engine"
PRESETS = ("development", "production", "performance")

_LOGGERS: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class LogSettings:
    """What telelog should emit and where.

    The defaults stay quiet (warnings and up on stderr) because the log view
    owns the terminal while it runs.
    """

    level: str = "WARNING"
    console: bool = True
    color: bool = True
    json: bool = False
    file: str = ""
    buffered: bool = False
    buffer_size: int = 2048
    profiling: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "LogSettings":
        """Read ``JUJUTSU_ENGINE_LOG_*`` style variables."""

        env = os.environ if env is None else env
        return cls(
            level=(env.get(f"{ENV_PREFIX}LOG_LEVEL") or "WARNING").upper(),
            console=not _flag(env, "DISABLE_CONSOLE", False),
            color=not _flag(env, "NO_COLOR", False),
            json=_flag(env, "LOG_JSON", False),
            file=env.get(f"{ENV_PREFIX}LOG_FILE", ""),
            buffered=_flag(env, "LOG_BUFFERED", False),
            buffer_size=int(env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE") or "2048"),
            profiling=_flag(env, "PROFILE", False),
        )

    @classmethod
    def preset(cls, name: str, *, log_file: str = "") -> "LogSettings":
        key = name.lower()
        if key == "development":
            return cls(level="DEBUG", profiling=True)
        if key == "production":
            return cls(
                level="INFO",
                console=False,
                file=log_file or "jujutsu_engine.log",
                buffered=True,
            )
        if key == "performance":
            return cls(
                level="DEBUG",
                console=False,
                json=True,
                file=log_file or "jujutsu_engine-performance.log",
                buffered=True,
                profiling=True,
            )
        raise ValueError(f"Unknown preset '{name}'.")

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        config.with_json_format(self.json)
        if self.file:
            config.with_file_output(self.file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(self.profiling)
        return config


def configure(
    *,
    settings: Optional[LogSettings] = None,
    preset: Optional[str] = None,
    config: Optional[Any] = None,
) -> None:
    """Replace the active telelog configuration; at most one source may be given.

    With no arguments the settings are read from the environment again.
    """

    global _CONFIG
    if sum(source is not None for source in (settings, preset, config)) > 1:
        raise ValueError("Provide one of `settings`, `preset` or `config`.")

    if preset is not None:
        log_file = os.environ.get(f"{ENV_PREFIX}LOG_FILE", "")
        config = LogSettings.preset(preset, log_file=log_file).build()
    elif settings is not None:
        config = settings.build()
    elif config is None:
        config = LogSettings.from_env().build()

    _CONFIG = config
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or ROOT_LOGGER
    logger = _LOGGERS.get(logger_name)
    if logger is None:
        if _CONFIG is None:
            configure()
        logger = tl.Logger.with_config(logger_name, _CONFIG)
        _LOGGERS[logger_name] = logger
    return logger


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        # argv-style sequences read better joined
        return " ".join(value)
    return repr(value) if isinstance(value, (dict, set, list, tuple)) else str(value)


def _pairs(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _level_method(logger: Any, level: str, *, structured: bool) -> Tuple[Any, bool]:
    name = str(level).lower()
    if structured:
        method = getattr(logger, f"{name}_with", None)
        if method is not None:
            return method, True
    method = getattr(logger, name, None)
    if method is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return method, False


def _write(logger: Any, level: str, message: str, data: Optional[Mapping[str, Any]]) -> None:
    method, structured = _level_method(logger, level, structured=bool(data))
    if data and structured:
        method(message, _pairs(data))
    elif data:
        method(f"{message} {dict(data)}")
    else:
        method(message)


def log(
    level: str,
    message: str,
    *,
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _write(get_logger(logger_name), level, message, data)


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` as structured pairs."""

    payload = {"event": name, **(data or {})}
    _write(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Yielded by ``span``; collects metadata reported when the block ends early."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason)

    def cancel(self, reason: Optional[str] = None) -> None:
        self._report("info", "span::cancel", reason)

    def _report(self, level: str, message: str, reason: Optional[str]) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            payload["component"] = self.component
        if reason:
            payload["reason"] = reason
        _write(self.logger, level, message, payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block and optionally track it as a telelog component.

    ``component=True`` reuses ``name`` as the component. ``metadata`` is
    pushed as logger context while the block runs. An exception escaping
    the block is reported through ``SpanHandle.fail`` and re-raised.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}

    with ExitStack() as stack:
        for key, value in context.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))

        handle = SpanHandle(logger, name, component_name, dict(context))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "LogSettings",
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "log",
    "record_event",
    "span",
]
