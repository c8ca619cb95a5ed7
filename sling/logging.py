"""
Sling logging: leveled console messages per module, plus JSONL record sinks.

Console side:
    log = get_logger('simulation')
    log.info("Session %d started", session_id)

Each module name has its own threshold; anything without one uses the
default level. Thresholds come from the environment on import and can be
overridden with configure_logging():

    SLING_LOG_LEVEL=DEBUG          default threshold
    SLING_LOG_REPLAY=TRACE         threshold for get_logger('replay')

Record side:
    Machine-readable records (the session event mirror) go through
    emit_record(module, record) to whatever sink is registered for that
    module. Nothing is written unless the module is switched on:

    SLING_LOGGING_SESSION_ENABLED=true
    SLING_LOGGING_SESSION_DIR=/tmp/sessions   (default: SLING_LOG_DIR,
                                               then <data dir>/logs)
"""

import json
import os
import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, IO, Optional


class LogLevel(IntEnum):
    """Thresholds, numbered like the stdlib logging levels."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    OFF = 100


_ALIASES = {'WARN': LogLevel.WARNING, 'CRITICAL': LogLevel.ERROR}


def parse_level(name: str) -> LogLevel:
    """Level from its name; unknown names mean INFO."""
    key = name.strip().upper()
    if key in _ALIASES:
        return _ALIASES[key]
    return LogLevel.__members__.get(key, LogLevel.INFO)


@dataclass
class LoggingConfig:
    """Process-wide logging settings."""
    default_level: LogLevel = LogLevel.INFO
    module_levels: Dict[str, LogLevel] = field(default_factory=dict)
    log_dir: Optional[str] = None
    modules: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def level_for(self, module: str) -> LogLevel:
        return self.module_levels.get(module, self.default_level)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_env_config(environ=None) -> LoggingConfig:
    """Build a LoggingConfig from SLING_LOG_* and SLING_LOGGING_* variables."""
    environ = os.environ if environ is None else environ
    config = LoggingConfig()

    for key, value in environ.items():
        if key == 'SLING_LOG_LEVEL':
            config.default_level = parse_level(value)
        elif key == 'SLING_LOG_DIR':
            config.log_dir = value
        elif key.startswith('SLING_LOGGING_'):
            module, _, setting = key[len('SLING_LOGGING_'):].lower().partition('_')
            if not setting:
                continue
            settings = config.modules.setdefault(module, {})
            settings[setting] = _env_flag(value) if setting == 'enabled' else value
        elif key.startswith('SLING_LOG_'):
            config.module_levels[key[len('SLING_LOG_'):].lower()] = parse_level(value)

    return config


_config = load_env_config()


def configure_logging(
    level: Optional[str] = None,
    modules: Optional[Dict[str, str]] = None,
    log_dir: Optional[str] = None,
) -> None:
    """Override thresholds or the log directory at runtime.

    Args:
        level: New default threshold name
        modules: module name -> threshold name
        log_dir: Directory for record files
    """
    if level is not None:
        _config.default_level = parse_level(level)
    for module, module_level in (modules or {}).items():
        _config.module_levels[module.lower()] = parse_level(module_level)
    if log_dir is not None:
        _config.log_dir = log_dir


def enable_module(module: str, **settings: Any) -> None:
    """Switch on record output for a module, e.g. ``enable_module('session', dir=...)``."""
    module_settings = _config.modules.setdefault(module.lower(), {})
    module_settings.update(settings, enabled=True)


def get_module_config(module: str) -> Dict[str, Any]:
    """Record settings for a module (``enabled``, ``dir``); empty if unset."""
    return _config.modules.get(module.lower(), {})


def get_data_dir() -> Path:
    """Per-user data directory for the game."""
    if sys.platform == 'darwin':
        return Path.home() / 'Library' / 'Application Support' / 'Sling'
    if sys.platform == 'win32':
        return Path(os.environ.get('APPDATA', str(Path.home()))) / 'Sling'
    base = os.environ.get('XDG_DATA_HOME') or str(Path.home() / '.local' / 'share')
    return Path(base) / 'sling'


def get_log_dir() -> Path:
    """Configured log directory, or ``logs`` under the data directory."""
    if _config.log_dir:
        return Path(_config.log_dir).expanduser()
    return get_data_dir() / 'logs'


# =============================================================================
# Console loggers
# =============================================================================

class SlingLogger:
    """Leveled console logger for one module."""

    def __init__(self, module: str):
        self.module = module
        self._key = module.lower()

    @property
    def level(self) -> LogLevel:
        return _config.level_for(self._key)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def trace(self, msg: str, *args) -> None:
        self._write(LogLevel.TRACE, msg, args)

    def debug(self, msg: str, *args) -> None:
        self._write(LogLevel.DEBUG, msg, args)

    def info(self, msg: str, *args) -> None:
        self._write(LogLevel.INFO, msg, args)

    def warning(self, msg: str, *args) -> None:
        self._write(LogLevel.WARNING, msg, args)

    def _write(self, level: LogLevel, msg: str, args: tuple) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {level.name}: {msg}")


_loggers: Dict[str, SlingLogger] = {}


def get_logger(module: str) -> SlingLogger:
    """Shared logger for ``module``."""
    if module not in _loggers:
        _loggers[module] = SlingLogger(module)
    return _loggers[module]


# =============================================================================
# Record sinks
# =============================================================================

class LogSink(ABC):
    """Destination for structured (JSON-serializable) records."""

    @abstractmethod
    def emit(self, module: str, record: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def flush(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class NullSink(LogSink):
    """Discards records."""

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


class FileSink(LogSink):
    """
    Appends records as JSON lines to ``<log_dir>/<session>_<module>.jsonl``.

    Files are opened on the first record for a module and closed by
    close(); the directory is created on demand.

    Args:
        log_dir: Target directory (default: get_log_dir())
        session_name: File name prefix (default: local timestamp)
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self.log_dir = Path(log_dir) if log_dir else get_log_dir()
        self.session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self._files: Dict[str, IO[str]] = {}

    def path_for(self, module: str) -> Path:
        return self.log_dir / f"{self.session_name}_{module}.jsonl"

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        handle = self._files.get(module)
        if handle is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            handle = open(self.path_for(module), 'a', encoding='utf-8')
            self._files[module] = handle
        handle.write(json.dumps({'wall_time': time.time(), **record}) + "\n")

    def flush(self) -> None:
        for handle in self._files.values():
            handle.flush()

    def close(self) -> None:
        for handle in self._files.values():
            handle.close()
        self._files.clear()


_sinks: Dict[str, LogSink] = {}


def register_sink(module: str, sink: LogSink) -> None:
    """Route ``module``'s records to ``sink``, replacing any previous one."""
    _sinks[module] = sink


def get_sink(module: str) -> Optional[LogSink]:
    return _sinks.get(module)


def create_sink_for_module(module: str, session_name: Optional[str] = None) -> LogSink:
    """FileSink if the module is enabled, NullSink otherwise."""
    settings = get_module_config(module)
    if not settings.get('enabled', False):
        return NullSink()
    return FileSink(log_dir=settings.get('dir'), session_name=session_name)


def emit_record(module: str, record: Dict[str, Any]) -> bool:
    """Send a record to the module's sink.

    Returns:
        False if no sink is registered for the module
    """
    sink = _sinks.get(module)
    if sink is None:
        return False
    sink.emit(module, record)
    return True


def close_all_sinks() -> None:
    """Close and unregister every sink (call on shutdown)."""
    for sink in _sinks.values():
        sink.close()
    _sinks.clear()
