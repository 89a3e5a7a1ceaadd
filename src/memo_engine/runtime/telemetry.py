"""Logging and profiling for the memo engine, backed by telelog.

Settings are plain data (``TelemetrySettings``) read from ``MEMO_ENGINE_*``
variables or picked from ``PRESETS``; ``configure`` turns them into a
``telelog.Config``. Engine code only ever calls ``record_event`` and ``span``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MEMO_ENGINE_"
DEFAULT_LOGGER_NAME = "memo_engine"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class TelemetrySettings:
    """Everything ``configure`` needs to build a telelog configuration."""

    level: str = "INFO"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: Optional[str] = None
    buffer_size: Optional[int] = None
    logger_name: str = DEFAULT_LOGGER_NAME

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "TelemetrySettings":
        env = os.environ if environ is None else environ

        def flag(name: str) -> bool:
            return env.get(f"{ENV_PREFIX}{name}", "").lower() in _TRUTHY

        buffer_size = None
        if flag("LOG_BUFFERED"):
            buffer_size = int(env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE") or "2048")
        return cls(
            level=(env.get(f"{ENV_PREFIX}LOG_LEVEL") or "INFO").upper(),
            console=not flag("DISABLE_CONSOLE"),
            colored=not flag("NO_COLOR"),
            json=flag("LOG_JSON"),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE") or None,
            buffer_size=buffer_size,
            logger_name=env.get(f"{ENV_PREFIX}LOGGER") or DEFAULT_LOGGER_NAME,
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG"),
    # The Textual app owns the terminal: nothing goes to the console.
    "quiet": TelemetrySettings(level="WARNING", console=False),
    "production": TelemetrySettings(
        level="INFO", console=False, log_file="memo_engine.log", buffer_size=2048
    ),
}


def preset_settings(
    preset: str, environ: Optional[Mapping[str, str]] = None
) -> TelemetrySettings:
    """Look up a preset; ``MEMO_ENGINE_LOG_FILE`` still redirects its file."""

    try:
        settings = PRESETS[preset.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown preset '{preset}'.") from exc
    env = os.environ if environ is None else environ
    log_file = env.get(f"{ENV_PREFIX}LOG_FILE")
    return replace(settings, log_file=log_file) if log_file else settings


_LOGGERS: MutableMapping[str, Any] = {}
_settings: TelemetrySettings = TelemetrySettings()
_config: Optional[Any] = None


def configure(
    *,
    settings: Optional[TelemetrySettings] = None,
    preset: Optional[str] = None,
    config: Optional[Any] = None,
) -> TelemetrySettings:
    """Install new telemetry settings and drop cached loggers.

    Give at most one of ``settings``, ``preset`` or a raw telelog ``config``.
    With none, settings are read from the environment.
    """

    global _settings, _config
    if sum(option is not None for option in (settings, preset, config)) > 1:
        raise ValueError("Provide only one of `settings`, `preset` or `config`.")

    if preset is not None:
        settings = preset_settings(preset)
    elif settings is None:
        settings = TelemetrySettings.from_env()

    _settings = settings
    _config = config if config is not None else settings.to_config()
    _LOGGERS.clear()
    return settings


def get_logger(name: Optional[str] = None) -> Any:
    if _config is None:
        configure()
    logger_name = name or _settings.logger_name
    logger = _LOGGERS.get(logger_name)
    if logger is None:
        logger = _LOGGERS[logger_name] = tl.Logger.with_config(logger_name, _config)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _log(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(k), _text(v)) for k, v in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _log(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Yielded by ``span`` so the block can attach results as it goes."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def warn(self, reason: str) -> None:
        self._report("warning", "span::warn", reason)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason)

    def _report(self, level: str, message: str, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            payload["component"] = self.component
        payload["reason"] = reason
        _log(self.logger, level, message, payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block of engine work.

    ``component=True`` also tracks the block as a component named ``name``;
    a string names the component explicitly. ``metadata`` is added to the
    logger context for the duration of the block. An exception escaping the
    block is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))

        handle = SpanHandle(
            logger=log, name=name, component=component_name, metadata=dict(context)
        )
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
]
