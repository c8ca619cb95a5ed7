"""
Tests for last-session storage.

Run with: pytest tests/test_storage.py -v
"""

import pytest

from slingshot_models import EventType, GameSettings, LogEvent, SessionRecord, ThemeConfig
from sling.storage import SessionStore, default_store_path


@pytest.fixture
def record():
    return SessionRecord(
        session_id=1700000000000,
        start_time='2024-01-01T12:00:00',
        game_settings=GameSettings(
            canvas_width=800,
            canvas_height=600,
            theme=ThemeConfig(id='plain', name='Plain'),
        ),
        events=(
            LogEvent(type=EventType.INPUT_START, timestamp=0.0, data={'x': 1.0, 'y': 2.0}),
            LogEvent(type=EventType.PROJECTILE_HIT, timestamp=250.0, data={'score': 10, 'points': 10}),
        ),
        final_score=10,
    )


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / 'sessions' / 'last.json')


class TestSessionStore:
    """Single-slot JSON store."""

    def test_save_and_load(self, store, record):
        assert store.save(record)
        assert store.exists()
        assert store.load() == record

    def test_load_missing(self, store):
        assert store.load() is None
        assert not store.exists()

    def test_save_overwrites(self, store, record):
        store.save(record)
        store.save(record.model_copy(update={'final_score': 99}))
        assert store.load().final_score == 99

    def test_invalid_json(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('{"sessionId": ', encoding='utf-8')
        assert store.load() is None

    def test_wrong_shape(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('{"sessionId": "abc"}', encoding='utf-8')
        assert store.load() is None

    def test_unwritable_location(self, tmp_path, record):
        blocker = tmp_path / 'file'
        blocker.write_text('x', encoding='utf-8')
        assert not SessionStore(blocker / 'last.json').save(record)

    def test_clear(self, store, record):
        store.save(record)
        store.clear()
        assert not store.exists()
        store.clear()

    def test_no_temp_file_left(self, store, record):
        store.save(record)
        assert [p.name for p in store.path.parent.iterdir()] == ['last.json']

    def test_duration(self, record):
        assert record.duration_ms == 250.0


class TestDefaultPath:
    """Environment override for the store location."""

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv('SLING_STORAGE_PATH', str(tmp_path / 'custom.json'))
        assert default_store_path() == tmp_path / 'custom.json'
        assert SessionStore().path == tmp_path / 'custom.json'

    def test_default_in_data_dir(self, monkeypatch, tmp_path):
        monkeypatch.delenv('SLING_STORAGE_PATH', raising=False)
        monkeypatch.setenv('XDG_DATA_HOME', str(tmp_path))
        assert default_store_path().name == 'last_session.json'
