"""
Tests for session recording and replay.

Covers sealing, persistence and summaries in the session logger, and
determinism, cancellation and completion of the replay engine.

Run with: pytest sling/engine/recording/tests/test_recording.py -v
"""

import json
import math
import random

import pytest
from pydantic import ValidationError

import sling.logging as sling_logging
from slingshot_models import EventType, GameSettings, LogEvent, SessionRecord
from sling.engine.controller import GameController
from sling.engine.recording import NullSessionLogger, ReplayEngine, ReplayState, SessionLogger
from sling.engine.registry import default_themes
from sling.events import HitEffect
from sling.scheduling import ManualScheduler
from sling.storage import SessionStore


THEMES = default_themes()


# =============================================================================
# Fixtures
# =============================================================================

def play_session(controller: GameController) -> SessionRecord:
    """Play a short shooting-range game: two hits and one miss."""
    scheduler = controller.scheduler
    engine = controller.engine
    controller.start_game('shooting-range')
    scheduler.run_frames(10)

    for target in list(engine.state.targets)[:2]:
        projectile = engine.fire(math.pi / 2, 1.0)
        # Land on the target's centre after one frame of motion
        projectile.x = target.x + projectile.vx
        projectile.y = target.y + projectile.vy
        scheduler.run_frames(10)

    engine.fire(0.0, 20.0)
    scheduler.run_frames(40)
    scheduler.advance(3.0)
    assert not controller.is_playing
    return controller.last_session()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(scheduler):
    return GameController(scheduler, 800, 600, rng=random.Random(11), duration=3)


@pytest.fixture
def record(controller):
    return play_session(controller)


def replay_to_end(replay: ReplayEngine, scheduler: ManualScheduler, limit: int = 2000):
    """Step frames until the replay goes idle, collecting snapshots."""
    snapshots = []
    for _ in range(limit):
        if not replay.is_replaying:
            break
        scheduler.step()
        snapshots.append(replay.snapshot())
    return snapshots


class StaticSource:
    """Replay source holding one record."""

    def __init__(self, record):
        self.record = record

    def get_last_session(self):
        return self.record


# =============================================================================
# Session logger
# =============================================================================

class TestSessionLogger:
    """Recording and sealing."""

    def test_record_contents(self, record):
        types = [e.type for e in record.events]
        assert types.count(EventType.PROJECTILE_START) == 3
        assert types.count(EventType.PROJECTILE_HIT) == 2
        assert types.count(EventType.PROJECTILE_MISS) == 1
        assert types.count(EventType.TARGET_SPAWN) == 2
        assert record.final_score == 20
        assert len(record.initial_state.targets) == 3
        assert record.initial_state.shooter.x == 400

    def test_hit_events_carry_running_score(self, record):
        hits = [e for e in record.events if e.type is EventType.PROJECTILE_HIT]
        assert [h.data['score'] for h in hits] == [10, 20]

    def test_timestamps_are_milliseconds_and_ordered(self, record):
        stamps = [e.timestamp for e in record.events]
        assert stamps == sorted(stamps)
        first_shot = next(e for e in record.events if e.type is EventType.PROJECTILE_START)
        assert first_shot.timestamp == pytest.approx(10 / 60 * 1000)

    def test_json_round_trip(self, record):
        assert SessionRecord.from_json(record.to_json()) == record

    def test_json_uses_camel_case(self, record):
        text = record.to_json()
        assert '"sessionId"' in text
        assert '"finalScore"' in text
        assert '"initialState"' in text

    def test_sealed_record_is_frozen(self, record):
        with pytest.raises(ValidationError):
            record.final_score = 1000
        with pytest.raises(AttributeError):
            record.events.append(record.events[0])

    def test_sealed_record_unaffected_by_next_session(self, controller, record):
        events_before = record.to_json()
        controller.start_game('duck-hunting')
        controller.scheduler.run_frames(40)
        controller.engine.state.targets[0].x = -999
        assert record.to_json() == events_before

    def test_sealed_payloads_are_read_only(self, controller, record):
        before = record.to_json()
        hit = next(e for e in record.events if e.type is EventType.PROJECTILE_HIT)
        frame = next(e for e in record.events if e.type is EventType.GAME_FRAME)

        with pytest.raises(TypeError):
            hit.data['score'] = 99999
        with pytest.raises(TypeError):
            frame.data['targets'][0]['x'] = -1
        with pytest.raises(AttributeError):
            frame.data['targets'].append({})
        with pytest.raises(AttributeError):
            record.initial_state.targets.clear()

        assert record.to_json() == before
        assert controller.last_session().to_json() == before

    def test_payload_returns_mutable_copy(self, record):
        hit = next(e for e in record.events if e.type is EventType.PROJECTILE_HIT)
        payload = hit.payload()
        payload['score'] = 99999
        assert hit.data['score'] == 10

    def test_logged_dict_is_not_shared(self, scheduler):
        logger = SessionLogger(clock=scheduler.now)
        settings = GameSettings(canvas_width=800, canvas_height=600, theme=THEMES['shooting-range'])
        logger.start_session(settings, session_id=1)
        data = {'x': 1}
        logger._append(EventType.INPUT_START, data)
        record = logger.end_session(0)

        data['x'] = 500
        assert record.events[0].data['x'] == 1

    def test_mirror_to_jsonl_when_enabled(self, scheduler, tmp_path, monkeypatch):
        monkeypatch.setattr(sling_logging, '_config', sling_logging.LoggingConfig())
        sling_logging.enable_module('session', dir=str(tmp_path))
        logger = SessionLogger(clock=scheduler.now)
        settings = GameSettings(canvas_width=800, canvas_height=600, theme=THEMES['shooting-range'])
        try:
            logger.start_session(settings, session_id=7)
            logger.log_input_start(1, 2)
            logger.end_session(0)
        finally:
            sling_logging.close_all_sinks()

        lines = (tmp_path / '7_session.jsonl').read_text(encoding='utf-8').splitlines()
        types = [json.loads(line)['type'] for line in lines]
        assert types == ['header', 'INPUT_START', 'footer']

    def test_log_calls_without_session_are_ignored(self, scheduler):
        logger = SessionLogger(clock=scheduler.now)
        logger.log_input_start(1, 2)
        logger.log_input_move(3, 4)
        assert logger.events == []
        assert logger.end_session(10) is None
        assert logger.summarize() == {}

    def test_every_move_is_recorded(self, scheduler):
        logger = SessionLogger(clock=scheduler.now)
        logger.start_session(
            GameSettings(canvas_width=800, canvas_height=600, theme=THEMES['shooting-range']),
        )
        logger.log_input_start(0, 0)
        for i in range(25):
            logger.log_input_move(i, i)

        moves = [e for e in logger.events if e.type is EventType.INPUT_MOVE]
        assert len(moves) == 25
        assert moves[-1].data['moveCount'] == 25

    def test_timestamp_uses_session_clock(self, scheduler):
        logger = SessionLogger(clock=scheduler.now)
        logger.start_session(
            GameSettings(canvas_width=800, canvas_height=600, theme=THEMES['shooting-range']),
        )
        scheduler.advance(1.5)
        logger.log_input_start(0, 0)
        assert logger.events[0].timestamp == pytest.approx(1500.0)

    def test_summarize(self, controller, record):
        summary = controller.logger.summarize(record)
        assert summary['shots'] == 3
        assert summary['hits'] == 2
        assert summary['misses'] == 1
        assert summary['blocked'] == 0
        assert summary['accuracy'] == pytest.approx(66.7)
        assert summary['final_score'] == 20
        assert summary['theme'] == 'Shooting Range'

    def test_null_logger(self):
        logger = NullSessionLogger()
        logger.log_input_start(1, 2)
        assert logger.end_session(0) is None
        assert not logger.has_replay_data()


class TestPersistence:
    """Last-session storage through the logger."""

    def test_persisted_and_reloaded(self, scheduler, tmp_path):
        store = SessionStore(tmp_path / 'last.json')
        controller = GameController(scheduler, 800, 600, store=store, rng=random.Random(5), duration=3)
        record = play_session(controller)

        assert store.exists()
        fresh = SessionLogger(store=store)
        assert fresh.get_last_session() == record

    def test_failed_save_keeps_record_in_memory(self, scheduler, tmp_path):
        blocker_file = tmp_path / 'not-a-dir'
        blocker_file.write_text('x', encoding='utf-8')
        store = SessionStore(blocker_file / 'last.json')
        controller = GameController(scheduler, 800, 600, store=store, duration=1)

        controller.start_game('shooting-range')
        scheduler.advance(1.0)

        assert controller.last_session() is not None
        assert controller.logger.has_replay_data()

    def test_new_session_replaces_last(self, scheduler, tmp_path):
        store = SessionStore(tmp_path / 'last.json')
        controller = GameController(scheduler, 800, 600, store=store, duration=1)
        controller.start_game('shooting-range')
        scheduler.advance(1.0)
        controller.start_game('duck-hunting')
        scheduler.advance(1.0)

        assert store.load().game_settings.theme.id == 'duck-hunting'


# =============================================================================
# Replay engine
# =============================================================================

class TestReplay:
    """Playback of a sealed record."""

    def test_no_data(self, scheduler):
        replay = ReplayEngine(scheduler, StaticSource(None))
        assert not replay.start_replay()
        assert replay.state is ReplayState.IDLE
        assert scheduler.pending_frames == 0

    def test_invalid_speed(self, scheduler):
        with pytest.raises(ValueError):
            ReplayEngine(scheduler, StaticSource(None), replay_speed=0)

    def test_reaches_final_score(self, record):
        scheduler = ManualScheduler()
        completed = []
        replay = ReplayEngine(scheduler, StaticSource(record), on_complete=completed.append)

        assert replay.start_replay()
        replay_to_end(replay, scheduler)

        assert replay.state is ReplayState.IDLE
        assert completed == [20]
        assert replay.engine.state.score == 20

    def test_initial_state_restored(self, record):
        scheduler = ManualScheduler()
        replay = ReplayEngine(scheduler, StaticSource(record))
        replay.start_replay()

        ids = [t.id for t in replay.engine.state.targets]
        assert ids == [t.id for t in record.initial_state.targets]
        assert replay.engine.state.theme == record.game_settings.theme

    def test_deterministic(self, record):
        runs = []
        for _ in range(2):
            scheduler = ManualScheduler()
            replay = ReplayEngine(scheduler, StaticSource(record))
            replay.start_replay()
            runs.append(replay_to_end(replay, scheduler))
        assert runs[0] == runs[1]
        assert runs[0][-1].score == 20

    def test_does_not_share_live_entities(self, controller, record):
        controller.start_replay()
        live_targets = {id(t) for t in controller.engine.state.targets}
        replay_targets = {id(t) for t in controller.replay.engine.state.targets}
        assert not live_targets & replay_targets

    def test_replay_does_not_record(self, controller, record):
        controller.start_replay()
        replay_to_end(controller.replay, controller.scheduler)
        assert controller.last_session() is record
        assert not controller.logger.is_active

    def test_hit_effects_replayed(self, record):
        scheduler = ManualScheduler()
        effects = []
        replay = ReplayEngine(scheduler, StaticSource(record), on_effect=effects.append)
        replay.start_replay()
        replay_to_end(replay, scheduler)
        assert [e.points for e in effects if isinstance(e, HitEffect)] == [10, 10]

    def test_grace_delay_before_idle(self, record):
        scheduler = ManualScheduler()
        replay = ReplayEngine(scheduler, StaticSource(record))
        replay.start_replay()

        while replay.cursor < len(record.events):
            scheduler.step()

        assert replay.is_replaying
        assert scheduler.pending_timers == 1
        scheduler.advance(0.5)
        assert replay.is_replaying
        scheduler.advance(0.51)
        assert not replay.is_replaying

    def test_stop_cancels_callbacks(self, record):
        scheduler = ManualScheduler()
        completed = []
        replay = ReplayEngine(scheduler, StaticSource(record), on_complete=completed.append)
        replay.start_replay()
        scheduler.run_frames(5)

        replay.stop_replay()

        assert replay.state is ReplayState.IDLE
        assert scheduler.pending_frames == 0
        assert scheduler.pending_timers == 0
        scheduler.run_frames(5)
        scheduler.advance(10.0)
        assert completed == []

    def test_faster_replay_finishes_sooner(self, record):
        frames = []
        for speed in (1.0, 2.0):
            scheduler = ManualScheduler()
            replay = ReplayEngine(scheduler, StaticSource(record), replay_speed=speed)
            replay.start_replay()
            count = 0
            while replay.cursor < len(record.events):
                scheduler.step()
                count += 1
            frames.append(count)
        assert frames[1] < frames[0]

    def test_hit_applied_as_recorded(self, record):
        scheduler = ManualScheduler()
        replay = ReplayEngine(scheduler, StaticSource(record))
        replay.start_replay()
        target = replay.engine.state.targets[0]

        replay.apply_event(LogEvent(type=EventType.PROJECTILE_HIT, timestamp=0, data={
            'projectileId': 99,
            'targetId': target.id,
            'targetX': target.x,
            'targetY': target.y,
            'points': 10,
            'score': 70,
        }))

        assert replay.engine.state.score == 70
        assert not target.active

    def test_game_frame_restores_positions(self, record):
        scheduler = ManualScheduler()
        replay = ReplayEngine(scheduler, StaticSource(record))
        replay.start_replay()
        target = replay.engine.state.targets[0]

        replay.apply_event(LogEvent(type=EventType.GAME_FRAME, timestamp=0, data={
            'frame': 30,
            'score': 0,
            'timeLeft': 12,
            'targets': [{'id': target.id, 'x': 321.0, 'y': 123.0, 'active': True}],
            'projectiles': [],
            'blockers': [],
        }))

        assert (target.x, target.y) == (321.0, 123.0)
        assert replay.engine.state.time_left == 12

    def test_game_frame_restores_activity_and_score(self, record):
        scheduler = ManualScheduler()
        replay = ReplayEngine(scheduler, StaticSource(record))
        replay.start_replay()
        first, second = replay.engine.state.targets[:2]

        replay.apply_event(LogEvent(type=EventType.GAME_FRAME, timestamp=0, data={
            'frame': 30,
            'score': 40,
            'timeLeft': 12,
            'targets': [
                {'id': first.id, 'x': first.x, 'y': first.y, 'active': False},
                {'id': second.id, 'x': second.x, 'y': second.y, 'active': True},
            ],
            'projectiles': [],
            'blockers': [],
        }))

        assert not first.active
        assert second.active
        assert replay.engine.state.score == 40

    def test_guarded_session_replays_blocks(self, scheduler):
        controller = GameController(scheduler, 800, 600, rng=random.Random(2), duration=2)
        controller.start_game('football-shootout')
        blocker = controller.engine.state.blockers[0]
        projectile = controller.engine.fire(math.pi / 2, 1.0)
        projectile.x = blocker.x + projectile.vx + blocker.speed
        projectile.y = blocker.y + projectile.vy
        scheduler.run_frames(5)
        scheduler.advance(2.0)

        record = controller.last_session()
        assert [e.type for e in record.events].count(EventType.PROJECTILE_BLOCKED) == 1

        controller.start_replay()
        replay_to_end(controller.replay, scheduler)
        assert controller.replay.engine.state.score == 0
        assert len(controller.replay.engine.state.blockers) == 1
