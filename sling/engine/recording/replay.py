"""
Replay Engine - plays back a sealed session log.

Replay never re-runs collision detection. Hits, blocks and misses are
applied as the recorded facts they are; between events the entities are
only moved, and periodic GAME_FRAME events pull their positions back to
what was recorded.

State machine:
    IDLE --start_replay()--> REPLAYING --(log exhausted + grace delay)--> IDLE
    REPLAYING --stop_replay()--> IDLE

Each replay owns a private SimulationEngine and SessionState; nothing is
shared with the live session.

Usage:
    replay = ReplayEngine(scheduler, session_logger, on_complete=show_score)
    if not replay.start_replay():
        show_notice("No replay data available")
"""

import random
from enum import Enum
from typing import Any, Callable, Dict, Optional

from slingshot_models import BlockerRecord, EventType, LogEvent, SessionRecord, TargetRecord
from sling.engine.collision import EffectListener
from sling.engine.constants import REPLAY_GRACE_DELAY
from sling.engine.entities import Blocker, Projectile, Target
from sling.engine.recording.logger import NullSessionLogger
from sling.engine.recording.snapshot import FrameSnapshot
from sling.engine.registry import BehaviorRegistry
from sling.events import BlockEffect, HitEffect
from sling.logging import get_logger
from sling.scheduling import Scheduler

log = get_logger('replay')


class ReplayState(str, Enum):
    """Replay engine states."""
    IDLE = "idle"
    REPLAYING = "replaying"


class ReplayEngine:
    """
    Replays the last sealed session against the scheduler's clock.

    Args:
        scheduler: Host scheduler driving replay frames and the grace timer
        source: Anything with ``get_last_session()`` (a SessionLogger)
        behaviors: Behavior registry for logged targets
        on_effect: Optional listener for replayed hit/block effects
        on_complete: Called with the logged final score when a replay
            finishes on its own
        replay_speed: Replay time multiplier (2.0 plays twice as fast)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        source,
        behaviors: Optional[BehaviorRegistry] = None,
        on_effect: Optional[EffectListener] = None,
        on_complete: Optional[Callable[[int], None]] = None,
        replay_speed: float = 1.0,
    ):
        if replay_speed <= 0:
            raise ValueError(f"replay_speed must be positive, got {replay_speed}")
        self.scheduler = scheduler
        self.source = source
        self.behaviors = behaviors if behaviors is not None else BehaviorRegistry()
        self.on_effect = on_effect
        self.on_complete = on_complete
        self.replay_speed = replay_speed

        self.state = ReplayState.IDLE
        self.session: Optional[SessionRecord] = None
        self.engine = None
        self.cursor = 0
        self._start = 0.0
        self._frame_handle: Optional[int] = None
        self._grace_handle: Optional[int] = None

    @property
    def is_replaying(self) -> bool:
        return self.state is ReplayState.REPLAYING

    @property
    def final_score(self) -> Optional[int]:
        return self.session.final_score if self.session is not None else None

    # -------------------------------------------------------------------------

    def start_replay(self, record: Optional[SessionRecord] = None) -> bool:
        """Start replaying ``record`` (default: the last sealed session).

        Returns:
            False if there is nothing to replay
        """
        if record is None:
            record = self.source.get_last_session()
        if record is None:
            log.info("No replay data available")
            return False

        if self.is_replaying:
            self.stop_replay()

        # Imported here: the simulation module depends on this package
        from sling.engine.simulation import SimulationEngine

        settings = record.game_settings
        self.session = record
        self.engine = SimulationEngine(
            settings.canvas_width,
            settings.canvas_height,
            behaviors=self.behaviors,
            logger=NullSessionLogger(),
            rng=random.Random(record.session_id),
            on_effect=self.on_effect,
            duration=settings.game_duration,
        )
        state = self.engine.state
        state.reset(settings.theme, settings.game_duration)
        state.is_playing = False

        initial = record.initial_state
        for target_record in initial.targets:
            self._add_target(target_record)
        for blocker_record in initial.blockers:
            self._add_blocker(blocker_record)

        self.cursor = 0
        self._start = self.scheduler.now()
        self.state = ReplayState.REPLAYING
        self._frame_handle = self.scheduler.request_frame(self.tick)

        log.info(
            "Replaying session %d: %d events, speed %.1fx",
            record.session_id, len(record.events), self.replay_speed,
        )
        return True

    def stop_replay(self) -> None:
        """Cancel the replay immediately."""
        if not self.is_replaying:
            return
        self._cancel_callbacks()
        self.state = ReplayState.IDLE
        log.info("Replay stopped at event %d", self.cursor)

    def tick(self) -> None:
        """Apply due events and move entities; one call per frame."""
        self._frame_handle = None
        if not self.is_replaying or self._grace_handle is not None:
            return

        events = self.session.events
        elapsed_ms = (self.scheduler.now() - self._start) * 1000.0 * self.replay_speed
        while self.cursor < len(events) and events[self.cursor].timestamp <= elapsed_ms:
            self.apply_event(events[self.cursor])
            self.cursor += 1

        self.engine.state.frame_count += 1
        self.engine.integrate()

        if self.cursor >= len(events):
            self._grace_handle = self.scheduler.set_timeout(self._finish, REPLAY_GRACE_DELAY)
            return
        self._frame_handle = self.scheduler.request_frame(self.tick)

    def apply_event(self, event: LogEvent) -> None:
        """Apply one recorded event to the replay state."""
        state = self.engine.state
        data = event.payload()

        if event.type is EventType.PROJECTILE_START:
            theme = state.theme
            state.projectiles.append(Projectile(
                id=data['projectileId'],
                x=data['x'],
                y=data['y'],
                vx=data['vx'],
                vy=data['vy'],
                glyph=theme.projectile if theme is not None else '',
            ))
        elif event.type is EventType.PROJECTILE_HIT:
            state.score = data['score']
            self._remove_projectile(data['projectileId'])
            target = state.find_target(data['targetId'])
            if target is not None and target.respawns:
                target.active = False
            self._emit(HitEffect(x=data['targetX'], y=data['targetY'], points=data['points']))
        elif event.type is EventType.PROJECTILE_BLOCKED:
            self._remove_projectile(data['projectileId'])
            self._emit(BlockEffect(x=data['blockerX'], y=data['blockerY']))
        elif event.type is EventType.PROJECTILE_MISS:
            self._remove_projectile(data['projectileId'])
        elif event.type is EventType.TARGET_SPAWN:
            self._add_target(TargetRecord.model_validate(data['target']))
            if data.get('blocker'):
                self._add_blocker(BlockerRecord.model_validate(data['blocker']))
        elif event.type is EventType.GAME_FRAME:
            state.score = data['score']
            state.time_left = data['timeLeft']
            self._restore_positions(data)
        # Input events carry nothing to replay

    def snapshot(self) -> Optional[FrameSnapshot]:
        """Current replay frame for the renderer."""
        if self.engine is None:
            return None
        return self.engine.snapshot()

    # -------------------------------------------------------------------------

    def _finish(self) -> None:
        self._grace_handle = None
        if not self.is_replaying:
            return
        self.state = ReplayState.IDLE
        self.engine.state.score = self.session.final_score
        log.info("Replay complete: final score %d", self.session.final_score)
        if self.on_complete is not None:
            self.on_complete(self.session.final_score)

    def _cancel_callbacks(self) -> None:
        self.scheduler.cancel(self._frame_handle)
        self.scheduler.cancel(self._grace_handle)
        self._frame_handle = None
        self._grace_handle = None

    def _add_target(self, record: TargetRecord) -> Target:
        state = self.engine.state
        target = Target.from_record(record, self.behaviors.get(record.behavior))
        state.targets.append(target)
        state.reserve_ids(target_id=target.id)
        return target

    def _add_blocker(self, record: BlockerRecord) -> Blocker:
        state = self.engine.state
        blocker = Blocker.from_record(record)
        state.blockers.append(blocker)
        state.reserve_ids(blocker_id=blocker.id)
        return blocker

    def _remove_projectile(self, projectile_id: int) -> None:
        state = self.engine.state
        state.projectiles = [p for p in state.projectiles if p.id != projectile_id]

    def _restore_positions(self, data: Dict[str, Any]) -> None:
        """Pull known entities back to their logged position and activity."""
        state = self.engine.state
        for entry in data.get('targets', []):
            target = state.find_target(entry['id'])
            if target is not None:
                target.x, target.y = entry['x'], entry['y']
                target.active = entry.get('active', target.active)
        for entry in data.get('blockers', []):
            blocker = state.find_blocker(entry['id'])
            if blocker is not None:
                blocker.x, blocker.y = entry['x'], entry['y']
                blocker.active = entry.get('active', blocker.active)
        for entry in data.get('projectiles', []):
            projectile = state.find_projectile(entry['id'])
            if projectile is not None:
                projectile.x, projectile.y = entry['x'], entry['y']
                projectile.vx, projectile.vy = entry['vx'], entry['vy']
                projectile.active = entry.get('active', projectile.active)

    def _emit(self, effect) -> None:
        if self.on_effect is not None:
            self.on_effect(effect)
