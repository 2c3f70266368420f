"""Telemetry for the editing engine, built on telelog.

Every telelog config is derived from a small settings mapping. Named
presets (``LOG_PRESETS``) are fixed mappings; the default mapping is read
from ``TEXTAREA_ENGINE_*`` environment variables, and
``TEXTAREA_ENGINE_LOG_PRESET`` selects a preset instead.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "TEXTAREA_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "textarea_engine")

_PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {"level": "DEBUG", "console": True},
    "production": {
        "level": "WARNING",
        "console": False,
        "buffered": True,
        "log_file": "textarea_engine.log",
    },
    # Keystroke paths are hot; nothing goes to the console.
    "performance": {
        "level": "DEBUG",
        "console": False,
        "json": True,
        "buffered": True,
        "log_file": "textarea_engine-performance.log",
    },
}
LOG_PRESETS = tuple(_PRESETS)

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}") or None


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _settings_from_env() -> Dict[str, Any]:
    return {
        "level": (_env("LOG_LEVEL") or "WARNING").upper(),
        "console": not _env_flag("DISABLE_CONSOLE"),
        "json": _env_flag("LOG_JSON"),
        "buffered": _env_flag("LOG_BUFFERED"),
        "buffer_size": int(_env("LOG_BUFFER_SIZE") or "2048"),
    }


def _preset_settings(preset: str) -> Dict[str, Any]:
    try:
        return dict(_PRESETS[preset.lower()])
    except KeyError:
        choices = ", ".join(LOG_PRESETS)
        raise ValueError(
            f"Unknown log preset {preset!r}; expected one of {choices}."
        ) from None


def _build_config(settings: Dict[str, Any]) -> Any:
    config = tl.Config()
    config.with_min_level(settings["level"])
    config.with_console_output(settings["console"])
    if settings["console"]:
        config.with_colored_output(not _env_flag("NO_COLOR"))
    if settings.get("json"):
        config.with_json_format(True)
    if settings.get("buffered"):
        config.with_buffering(True)
        if "buffer_size" in settings:
            config.with_buffer_size(settings["buffer_size"])
    # An explicit log file always wins over the preset's default file.
    log_file = _env("LOG_FILE") or settings.get("log_file")
    if log_file:
        config.with_file_output(log_file)
    config.with_profiling(True)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> Any:
    """Install a new telelog configuration and return it.

    ``config`` is a ready ``telelog.Config``; ``preset`` is one of
    ``LOG_PRESETS``. With neither, ``TEXTAREA_ENGINE_LOG_PRESET`` or the
    remaining environment variables decide. Cached loggers are dropped.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if config is None:
        preset = preset or _env("LOG_PRESET")
        settings = _preset_settings(preset) if preset else _settings_from_env()
        config = _build_config(settings)

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()
    return config


def active_config() -> Any:
    if _ACTIVE_CONFIG is None:
        return configure()
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached telelog logger for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    log = _LOGGER_CACHE.get(logger_name)
    if log is None:
        log = tl.Logger.with_config(logger_name, active_config())
        _LOGGER_CACHE[logger_name] = log
    return log


def _write(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    with_data = getattr(log, f"{name}_with", None)
    if with_data is not None:
        with_data(message, [(str(k), _stringify(v)) for k, v in payload.items()])
        return
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level {level!r}.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` carrying ``data`` as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _write(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Handed out by ``span`` for tagging what happened inside the block."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _payload(self, **extra: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update(extra)
        return payload

    def debug(self, message: str) -> None:
        _write(self.logger, "debug", message, self._payload())

    def fail(self, reason: str) -> None:
        _write(self.logger, "error", "span::fail", self._payload(reason=reason))


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracked as a telelog component.

    ``component=True`` tracks under ``name`` and a string names the component.
    ``metadata`` is logger context while the block runs. An exception is
    logged through ``SpanHandle.fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(log, name, component_name, dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "LOG_PRESETS",
    "SpanHandle",
    "active_config",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
