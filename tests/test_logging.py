"""
Tests for the logging system: per-module levels and structured sinks.

Run with: pytest tests/test_logging.py -v
"""

import json

import pytest

import sling.logging as sling_logging
from sling.logging import (
    FileSink,
    LoggingConfig,
    LogLevel,
    NullSink,
    close_all_sinks,
    configure_logging,
    create_sink_for_module,
    emit_record,
    enable_module,
    get_logger,
    get_sink,
    load_env_config,
    parse_level,
    register_sink,
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Give each test a fresh logging configuration."""
    monkeypatch.setattr(sling_logging, '_config', LoggingConfig())
    yield
    close_all_sinks()


class TestLevels:
    """Per-module level filtering."""

    def test_default_level(self, capsys):
        log = get_logger('alpha')
        log.debug("hidden")
        log.info("shown %d", 1)
        assert capsys.readouterr().out == "[alpha] INFO: shown 1\n"

    def test_module_override(self, capsys):
        configure_logging(level='WARNING', modules={'beta': 'DEBUG'})
        get_logger('beta').debug("beta debug")
        get_logger('gamma').info("gamma info")
        out = capsys.readouterr().out
        assert "beta debug" in out
        assert "gamma info" not in out

    def test_trace_below_debug(self):
        configure_logging(level='DEBUG')
        log = get_logger('delta')
        assert not log.is_enabled_for(LogLevel.TRACE)
        assert log.is_enabled_for(LogLevel.DEBUG)

    def test_bad_format_args_do_not_raise(self, capsys):
        get_logger('epsilon').info("value %d", "not a number")
        assert "value %d" in capsys.readouterr().out

    def test_loggers_are_cached(self):
        assert get_logger('zeta') is get_logger('zeta')

    @pytest.mark.parametrize("name,level", [
        ('debug', LogLevel.DEBUG),
        ('WARN', LogLevel.WARNING),
        ('off', LogLevel.OFF),
        ('nonsense', LogLevel.INFO),
    ])
    def test_parse_level(self, name, level):
        assert parse_level(name) is level


class TestEnvironment:
    """Configuration read from SLING_* variables."""

    def test_levels_and_modules(self):
        config = load_env_config({
            'SLING_LOG_LEVEL': 'WARNING',
            'SLING_LOG_REPLAY': 'TRACE',
            'SLING_LOG_DIR': '/tmp/sling-logs',
            'SLING_LOGGING_SESSION_ENABLED': 'true',
            'SLING_LOGGING_SESSION_DIR': '/tmp/sessions',
            'UNRELATED': 'x',
        })
        assert config.default_level is LogLevel.WARNING
        assert config.level_for('replay') is LogLevel.TRACE
        assert config.level_for('simulation') is LogLevel.WARNING
        assert config.log_dir == '/tmp/sling-logs'
        assert config.modules == {'session': {'enabled': True, 'dir': '/tmp/sessions'}}

    def test_disabled_flag(self):
        config = load_env_config({'SLING_LOGGING_SESSION_ENABLED': 'no'})
        assert config.modules['session']['enabled'] is False


class TestSinks:
    """Structured record sinks."""

    def test_no_sink_means_not_emitted(self):
        assert not emit_record('nobody', {'type': 'x'})

    def test_disabled_module_gets_null_sink(self):
        assert isinstance(create_sink_for_module('session'), NullSink)

    def test_enabled_module_gets_file_sink(self, tmp_path):
        enable_module('session', dir=str(tmp_path))
        sink = create_sink_for_module('session', 'run1')
        assert isinstance(sink, FileSink)
        assert sink.path_for('session') == tmp_path / 'run1_session.jsonl'

    def test_file_sink_writes_jsonl(self, tmp_path):
        sink = FileSink(log_dir=str(tmp_path), session_name='run1')
        register_sink('session', sink)
        assert emit_record('session', {'type': 'header'})
        assert emit_record('session', {'type': 'PROJECTILE_HIT', 'points': 50})
        close_all_sinks()

        path = sink.path_for('session')
        lines = [json.loads(line) for line in path.read_text(encoding='utf-8').splitlines()]
        assert [line['type'] for line in lines] == ['header', 'PROJECTILE_HIT']
        assert lines[1]['points'] == 50
        assert 'wall_time' in lines[1]
        assert get_sink('session') is None

    def test_file_sink_creates_directory(self, tmp_path):
        sink = FileSink(log_dir=str(tmp_path / 'nested' / 'logs'), session_name='run2')
        sink.emit('session', {'type': 'header'})
        sink.close()
        assert sink.path_for('session').exists()
