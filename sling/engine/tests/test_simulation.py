"""
Tests for the per-frame simulation.

Covers spawning, respawn throttling, target and blocker motion,
projectile ballistics, boundary misses and periodic frame logging.

Run with: pytest sling/engine/tests/test_simulation.py -v
"""

import math
import random

import pytest

from slingshot_models import EventType, TargetConfig, ThemeConfig
from sling.engine.recording.logger import SessionLogger
from sling.engine.registry import default_themes
from sling.engine.simulation import SimulationEngine
from sling.scheduling import ManualScheduler


THEMES = default_themes()
EMPTY_THEME = ThemeConfig(id='empty', name='Empty', target_config=TargetConfig(count=0, min_count=0))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def logger(scheduler):
    return SessionLogger(clock=scheduler.now)


@pytest.fixture
def engine(logger):
    return SimulationEngine(800, 600, logger=logger, rng=random.Random(42))


def events_of(logger, event_type):
    return [e for e in logger.events if e.type is event_type]


# =============================================================================
# Session start
# =============================================================================

class TestStartSession:
    """Initial spawn and the recorded initial state."""

    def test_spawns_theme_count(self, engine):
        engine.start_session(THEMES['duck-hunting'])
        assert len(engine.state.targets) == 5
        assert engine.is_playing

    def test_initial_spawns_are_not_logged_as_events(self, engine, logger):
        engine.start_session(THEMES['duck-hunting'])
        assert events_of(logger, EventType.TARGET_SPAWN) == []

    def test_ids_are_unique(self, engine):
        engine.start_session(THEMES['balloon-shooting'])
        ids = [t.id for t in engine.state.targets]
        assert len(set(ids)) == len(ids)

    def test_random_positions_stay_in_play_area(self, engine):
        engine.start_session(THEMES['duck-hunting'])
        for _ in range(50):
            target = engine.spawn_target(log_spawn=False)
            assert 60 <= target.x <= 740
            assert 120 <= target.y <= 450
            assert 35 <= target.size <= 50

    def test_fixed_position(self, engine):
        engine.start_session(THEMES['dart-throwing'])
        target = engine.state.targets[0]
        assert target.x == pytest.approx(60 + 0.5 * 680)
        assert target.y == pytest.approx(120 + 0.35 * 330)
        assert target.size == 120

    def test_guarded_target_gets_blocker(self, engine):
        engine.start_session(THEMES['football-shootout'])
        target = engine.state.targets[0]
        assert len(engine.state.blockers) == 1
        blocker = engine.state.blockers[0]
        assert blocker.parent_id == target.id
        assert blocker.x == target.x
        assert blocker.y == pytest.approx(target.y + 90)

    def test_settings_snapshot(self, engine):
        settings = engine.start_session(THEMES['shooting-range'], input_type='touch')
        assert settings.canvas_width == 800
        assert settings.canvas_height == 600
        assert settings.input_type == 'touch'
        assert settings.theme.id == 'shooting-range'

    def test_restart_resets_state(self, engine):
        engine.start_session(THEMES['shooting-range'])
        engine.state.score = 40
        engine.start_session(THEMES['shooting-range'])
        assert engine.state.score == 0
        assert engine.state.time_left == 30
        assert [t.id for t in engine.state.targets] == [1, 2, 3]

    def test_spawn_without_session_raises(self):
        with pytest.raises(RuntimeError):
            SimulationEngine(800, 600).spawn_target()


# =============================================================================
# Respawn
# =============================================================================

class TestRespawn:
    """Respawning targets are topped up one per frame."""

    def test_one_spawn_per_frame(self, engine, logger):
        engine.start_session(THEMES['shooting-range'])
        for target in engine.state.targets:
            target.active = False

        counts = []
        for _ in range(5):
            engine.advance_frame()
            counts.append(len(engine.state.targets))

        assert counts == [1, 2, 3, 3, 3]
        assert len(events_of(logger, EventType.TARGET_SPAWN)) == 3

    def test_spawn_event_carries_target_record(self, engine, logger):
        engine.start_session(THEMES['shooting-range'])
        engine.state.targets[0].active = False
        engine.advance_frame()

        (event,) = events_of(logger, EventType.TARGET_SPAWN)
        spawned = engine.state.targets[-1]
        assert event.data['target']['id'] == spawned.id == 4
        assert event.data['target']['behavior'] == 'stationary'

    def test_non_respawning_theme_never_spawns(self, engine):
        engine.start_session(THEMES['dart-throwing'])
        engine.state.targets[0].active = False
        for _ in range(10):
            engine.advance_frame()
        assert len(engine.state.targets) == 1

    def test_guarded_respawn_is_logged_with_blocker(self, logger):
        theme = ThemeConfig(
            id='keepers', name='Keepers',
            target_config=TargetConfig(behavior='guarded', count=0, min_count=0),
        )
        engine = SimulationEngine(800, 600, logger=logger, rng=random.Random(1))
        engine.start_session(theme)
        engine.spawn_target()

        (event,) = events_of(logger, EventType.TARGET_SPAWN)
        assert event.data['blocker']['parentId'] == event.data['target']['id']


# =============================================================================
# Motion
# =============================================================================

class TestTargetMotion:
    """Bounce and float motion."""

    def test_bounce_reflects_at_walls(self, engine):
        engine.start_session(THEMES['duck-hunting'])
        target = engine.state.targets[0]
        target.x, target.y = 749.0, 112.0
        target.vx, target.vy = 5.0, -5.0

        engine.move_targets()

        assert target.x == 750
        assert target.vx == -5.0
        assert target.y == 110
        assert target.vy == 5.0

    def test_float_wraps_to_bottom(self, engine):
        engine.start_session(THEMES['balloon-shooting'])
        target = engine.state.targets[0]
        target.size = 40.0
        target.x, target.y = 400.0, -39.0
        target.vx, target.vy = 0.0, -2.0

        engine.move_targets()

        assert target.y == 640
        assert 50 <= target.x <= 750

    def test_stationary_targets_do_not_move(self, engine):
        engine.start_session(THEMES['shooting-range'])
        before = [(t.x, t.y) for t in engine.state.targets]
        engine.move_targets()
        assert [(t.x, t.y) for t in engine.state.targets] == before


class TestBlockerMotion:
    """Blockers oscillate within a range of their target."""

    @pytest.fixture
    def guarded(self, engine):
        engine.start_session(THEMES['football-shootout'])
        return engine.state.targets[0], engine.state.blockers[0]

    def test_clamps_and_turns_on_right_side(self, engine, guarded):
        target, blocker = guarded
        # max offset = 180 * 0.4
        blocker.x = target.x + 71
        blocker.direction = 1

        engine.move_blockers()

        assert blocker.x == pytest.approx(target.x + 72)
        assert blocker.direction == -1

    def test_clamps_and_turns_on_left_side(self, engine, guarded):
        target, blocker = guarded
        blocker.x = target.x - 71
        blocker.direction = -1

        engine.move_blockers()

        assert blocker.x == pytest.approx(target.x - 72)
        assert blocker.direction == 1

    def test_moves_by_speed_within_range(self, engine, guarded):
        target, blocker = guarded
        engine.move_blockers()
        assert blocker.x == pytest.approx(target.x + 3)

    def test_deactivated_with_parent(self, engine, guarded):
        target, blocker = guarded
        target.active = False

        engine.advance_frame()

        assert not blocker.active
        assert engine.state.blockers == []
        assert engine.state.targets == [target]


# =============================================================================
# Projectiles
# =============================================================================

class TestProjectiles:
    """Ballistics and boundary misses."""

    def test_fire_launches_from_shooter(self, engine, logger):
        engine.start_session(EMPTY_THEME)
        projectile = engine.fire(math.pi / 2, 1.0)

        assert (projectile.x, projectile.y) == (400, 500)
        assert projectile.vy == pytest.approx(15.0)
        (event,) = events_of(logger, EventType.PROJECTILE_START)
        assert event.data['projectileId'] == projectile.id

    def test_gravity(self, engine):
        engine.start_session(EMPTY_THEME)
        projectile = engine.fire(math.pi / 2, 1.0)

        engine.advance_frame()

        assert projectile.x == pytest.approx(400.0)
        assert projectile.y == pytest.approx(485.0)
        assert projectile.vy == pytest.approx(14.7)

        engine.advance_frame()
        assert projectile.y == pytest.approx(470.3)

    def test_weak_shot_falls_out_of_the_bottom(self, engine, logger):
        engine.start_session(EMPTY_THEME)
        engine.fire(math.pi / 2, 0.5)

        for _ in range(500):
            if not engine.state.projectiles:
                break
            engine.advance_frame()

        assert engine.state.projectiles == []
        (miss,) = events_of(logger, EventType.PROJECTILE_MISS)
        assert miss.data['reason'] == 'bottom_boundary'

    def test_fast_horizontal_shot_leaves_left(self, engine, logger):
        engine.start_session(EMPTY_THEME)
        engine.fire(0.0, 20.0)

        engine.advance_frame()
        engine.advance_frame()

        assert engine.state.projectiles == []
        (miss,) = events_of(logger, EventType.PROJECTILE_MISS)
        assert miss.data['reason'] == 'left_boundary'

    @pytest.mark.parametrize("x,y,reason", [
        (-51, 300, 'left_boundary'),
        (-60, -60, 'left_boundary'),
        (851, -60, 'right_boundary'),
        (400, -51, 'top_boundary'),
        (400, 651, 'bottom_boundary'),
        (-50, 650, None),
        (400, 300, None),
    ])
    def test_boundary_reason(self, engine, x, y, reason):
        assert engine.boundary_reason(x, y) == reason


# =============================================================================
# Frame logging and countdown
# =============================================================================

class TestFrameLogging:
    """GAME_FRAME snapshots and the countdown."""

    def test_game_frame_every_interval(self, engine, logger):
        engine.start_session(EMPTY_THEME)
        for _ in range(65):
            engine.advance_frame()

        frames = events_of(logger, EventType.GAME_FRAME)
        assert [e.data['frame'] for e in frames] == [30, 60]
        assert frames[0].data['timeLeft'] == 30

    def test_custom_interval(self, logger):
        engine = SimulationEngine(800, 600, logger=logger, frame_log_interval=10)
        engine.start_session(EMPTY_THEME)
        for _ in range(30):
            engine.advance_frame()
        assert len(events_of(logger, EventType.GAME_FRAME)) == 3

    def test_tick_second(self, logger):
        engine = SimulationEngine(800, 600, logger=logger, duration=3)
        engine.start_session(EMPTY_THEME)
        assert [engine.tick_second() for _ in range(3)] == [False, False, True]
        assert engine.state.time_left == 0

    def test_no_frames_after_end(self, engine):
        engine.start_session(EMPTY_THEME)
        engine.end_session()
        engine.advance_frame()
        assert engine.state.frame_count == 0


class TestSnapshot:
    """Renderer snapshots are detached from live state."""

    def test_snapshot_does_not_follow_state(self, engine):
        engine.start_session(THEMES['duck-hunting'])
        snapshot = engine.snapshot()
        engine.state.targets[0].x += 100
        engine.state.score = 99

        assert snapshot.targets[0].x != engine.state.targets[0].x
        assert snapshot.score == 0
        assert snapshot.entity_count == 5
        assert snapshot.shooter_glyph == THEMES['duck-hunting'].shooter

    def test_snapshot_is_frozen(self, engine):
        engine.start_session(THEMES['duck-hunting'])
        snapshot = engine.snapshot()
        with pytest.raises(AttributeError):
            snapshot.score = 10
