"""
Session Logger - append-only event log of one game session.

Records input, projectile, spawn and periodic frame events with a
timestamp in milliseconds since the session started. When the session
ends the log is sealed into a frozen SessionRecord whose events are
read-only, kept as the "last session" and persisted through the
SessionStore. The sealed record is the only input of the replay engine.

Events can also be mirrored as JSONL through the central sink system.
DISABLED BY DEFAULT:
    SLING_LOGGING_SESSION_ENABLED=true
    SLING_LOG_DIR=./debug_logs

Example:
    logger = SessionLogger(clock=scheduler.now, store=SessionStore())
    logger.start_session(settings)
    logger.log_initial_state(shooter, targets, blockers)
    ...
    record = logger.end_session(final_score=120)
"""

import time
from typing import Any, Callable, Dict, Iterable, List, Optional, TYPE_CHECKING

from slingshot_models import (
    BlockerRecord,
    EventType,
    GameSettings,
    InitialState,
    LogEvent,
    SessionRecord,
    ShooterRecord,
    TargetRecord,
)
from sling.engine.constants import MOVE_LOG_SAMPLE
from sling.logging import (
    create_sink_for_module,
    emit_record,
    get_logger,
    get_module_config,
    get_sink,
    register_sink,
)

if TYPE_CHECKING:
    from sling.engine.entities import Blocker, Projectile, Target
    from sling.events import ShotResult
    from sling.storage import SessionStore

# Module name for sink registry
SESSION_MODULE = 'session'

log = get_logger(SESSION_MODULE)


def _record_data(record) -> Dict[str, Any]:
    """JSON-compatible payload for an entity record."""
    return record.model_dump(mode='json', by_alias=True)


class SessionLogger:
    """
    Logs one session at a time.

    Every ``log_*`` method is a no-op when no session is active, so the
    engine can call them unconditionally.

    Args:
        clock: Seconds on the host scheduler's clock (default: time.monotonic)
        store: Where sealed sessions are persisted (default: memory only)
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        store: Optional['SessionStore'] = None,
    ):
        self._clock = clock
        self.store = store

        self._settings: Optional[GameSettings] = None
        self._session_id: Optional[int] = None
        self._start_time = ''
        self._start_clock = 0.0
        self._initial_state = InitialState()
        self._events: List[LogEvent] = []
        self._move_count = 0
        self._last_session: Optional[SessionRecord] = None
        self._mirror = False

    @property
    def is_active(self) -> bool:
        """Whether a session is being recorded."""
        return self._settings is not None

    @property
    def session_id(self) -> Optional[int]:
        return self._session_id

    @property
    def events(self) -> List[LogEvent]:
        """Copy of the live event list."""
        return list(self._events)

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    def start_session(self, settings: GameSettings, session_id: Optional[int] = None) -> int:
        """Begin a new log, discarding any unsealed one.

        Returns:
            The session id (wall-clock milliseconds unless given)
        """
        if session_id is None:
            session_id = int(time.time() * 1000)

        self._settings = settings
        self._session_id = session_id
        self._start_time = time.strftime("%Y-%m-%dT%H:%M:%S")
        self._start_clock = self._clock()
        self._initial_state = InitialState()
        self._events = []
        self._move_count = 0

        self._mirror = bool(get_module_config(SESSION_MODULE).get('enabled', False))
        if self._mirror and get_sink(SESSION_MODULE) is None:
            register_sink(SESSION_MODULE, create_sink_for_module(SESSION_MODULE, str(session_id)))
        self._emit({
            "type": "header",
            "session_id": session_id,
            "theme": settings.theme.name,
            "canvas": [settings.canvas_width, settings.canvas_height],
        })

        log.info("Session %d started: theme=%s", session_id, settings.theme.name)
        return session_id

    def log_initial_state(
        self,
        shooter: Optional[ShooterRecord],
        targets: Iterable['Target'],
        blockers: Iterable['Blocker'],
    ) -> None:
        """Snapshot the entities present right after the initial spawn."""
        if not self.is_active:
            return
        self._initial_state = InitialState(
            shooter=shooter,
            targets=[t.to_record() for t in targets],
            blockers=[b.to_record() for b in blockers],
        )
        log.debug(
            "Initial state: %d targets, %d blockers",
            len(self._initial_state.targets), len(self._initial_state.blockers),
        )

    def end_session(self, final_score: int) -> Optional[SessionRecord]:
        """Seal the log, keep it as the last session and persist it.

        Returns:
            The sealed record, or None if no session was active
        """
        if not self.is_active:
            return None

        record = SessionRecord(
            session_id=self._session_id,
            start_time=self._start_time,
            end_time=time.strftime("%Y-%m-%dT%H:%M:%S"),
            game_settings=self._settings,
            initial_state=self._initial_state,
            events=tuple(self._events),
            final_score=final_score,
        )
        self._last_session = record
        self._settings = None

        self._emit({
            "type": "footer",
            "session_id": record.session_id,
            "final_score": final_score,
            "event_count": len(record.events),
        })
        if self._mirror:
            sink = get_sink(SESSION_MODULE)
            if sink:
                sink.flush()

        log.info(
            "Session %d ended: score=%d events=%d",
            record.session_id, final_score, len(record.events),
        )

        if self.store is not None and not self.store.save(record):
            log.warning("Last session was not persisted; replay is only available until exit")
        return record

    def get_last_session(self) -> Optional[SessionRecord]:
        """Most recent sealed session, loading it from the store if needed."""
        if self._last_session is None and self.store is not None:
            self._last_session = self.store.load()
        return self._last_session

    def has_replay_data(self) -> bool:
        return self.get_last_session() is not None

    # -------------------------------------------------------------------------
    # Input events
    # -------------------------------------------------------------------------

    def log_input_start(self, x: float, y: float, input_type: str = 'mouse') -> None:
        self._move_count = 0
        self._append(EventType.INPUT_START, {'x': x, 'y': y, 'inputType': input_type})

    def log_input_move(self, x: float, y: float) -> None:
        """Append a move; only every Nth is echoed to the debug log."""
        if not self.is_active:
            return
        self._move_count += 1
        self._append(
            EventType.INPUT_MOVE,
            {'x': x, 'y': y, 'moveCount': self._move_count},
            verbose=self._move_count % MOVE_LOG_SAMPLE == 1,
        )

    def log_input_end(self, shot: 'ShotResult') -> None:
        self._append(EventType.INPUT_END, {
            'startX': shot.start_x,
            'startY': shot.start_y,
            'releaseX': shot.release_x,
            'releaseY': shot.release_y,
            'distance': shot.distance,
            'elapsed': shot.elapsed,
            'speed': shot.speed,
            'angle': shot.angle,
            'force': shot.force,
            'shotFired': shot.shot_fired,
            'moveCount': self._move_count,
        })

    # -------------------------------------------------------------------------
    # Simulation events
    # -------------------------------------------------------------------------

    def log_projectile_start(self, projectile: 'Projectile', angle: float, force: float) -> None:
        self._append(EventType.PROJECTILE_START, {
            'projectileId': projectile.id,
            'x': projectile.x,
            'y': projectile.y,
            'vx': projectile.vx,
            'vy': projectile.vy,
            'angle': angle,
            'force': force,
        })

    def log_projectile_hit(
        self,
        projectile: 'Projectile',
        target: 'Target',
        distance: float,
        points: int,
        score: int,
    ) -> None:
        """Record a scoring hit with the cumulative score after it."""
        self._append(EventType.PROJECTILE_HIT, {
            'projectileId': projectile.id,
            'targetId': target.id,
            'x': projectile.x,
            'y': projectile.y,
            'targetX': target.x,
            'targetY': target.y,
            'distance': distance,
            'points': points,
            'score': score,
        })

    def log_projectile_miss(self, projectile: 'Projectile', reason: str) -> None:
        self._append(EventType.PROJECTILE_MISS, {
            'projectileId': projectile.id,
            'x': projectile.x,
            'y': projectile.y,
            'reason': reason,
        })

    def log_projectile_blocked(self, projectile: 'Projectile', blocker: 'Blocker') -> None:
        self._append(EventType.PROJECTILE_BLOCKED, {
            'projectileId': projectile.id,
            'blockerId': blocker.id,
            'x': projectile.x,
            'y': projectile.y,
            'blockerX': blocker.x,
            'blockerY': blocker.y,
        })

    def log_target_spawn(self, target: 'Target', blocker: Optional['Blocker'] = None) -> None:
        """Record a target spawned after the initial batch."""
        data: Dict[str, Any] = {'target': _record_data(target.to_record())}
        if blocker is not None:
            data['blocker'] = _record_data(blocker.to_record())
        self._append(EventType.TARGET_SPAWN, data)

    def log_game_frame(
        self,
        frame: int,
        score: int,
        time_left: int,
        targets: Iterable['Target'],
        projectiles: Iterable['Projectile'],
        blockers: Iterable['Blocker'],
    ) -> None:
        """Periodic position snapshot between discrete events."""
        self._append(EventType.GAME_FRAME, {
            'frame': frame,
            'score': score,
            'timeLeft': time_left,
            'targets': [t.frame_data() for t in targets],
            'projectiles': [p.frame_data() for p in projectiles],
            'blockers': [b.frame_data() for b in blockers],
        })

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def summarize(self, record: Optional[SessionRecord] = None) -> Dict[str, Any]:
        """Shot statistics for a sealed session (default: the last one)."""
        record = record if record is not None else self.get_last_session()
        if record is None:
            return {}

        counts = {event_type: 0 for event_type in EventType}
        for event in record.events:
            counts[event.type] += 1

        shots = counts[EventType.PROJECTILE_START]
        hits = counts[EventType.PROJECTILE_HIT]
        summary = {
            'session_id': record.session_id,
            'theme': record.game_settings.theme.name,
            'duration_ms': record.duration_ms,
            'events': len(record.events),
            'shots': shots,
            'hits': hits,
            'misses': counts[EventType.PROJECTILE_MISS],
            'blocked': counts[EventType.PROJECTILE_BLOCKED],
            'accuracy': round(hits / shots * 100, 1) if shots else 0.0,
            'final_score': record.final_score,
        }
        log.info(
            "Summary: %d shots, %d hits, %d misses, %d blocked, %.1f%% accuracy, score %d",
            shots, hits, summary['misses'], summary['blocked'],
            summary['accuracy'], record.final_score,
        )
        return summary

    # -------------------------------------------------------------------------

    def _timestamp(self) -> float:
        return max(0.0, (self._clock() - self._start_clock) * 1000.0)

    def _append(self, event_type: EventType, data: Dict[str, Any], verbose: bool = True) -> None:
        if not self.is_active:
            return
        event = LogEvent(type=event_type, timestamp=self._timestamp(), data=data)
        self._events.append(event)
        if verbose:
            log.debug("%s @%.0fms %s", event_type.value, event.timestamp, data)
        self._emit({"type": event_type.value, "timestamp": event.timestamp, **data})

    def _emit(self, record: Dict[str, Any]) -> bool:
        """Mirror a record through the central logging system."""
        if not self._mirror:
            return False
        return emit_record(SESSION_MODULE, record)


class NullSessionLogger:
    """No-op logger for engines that must not record, such as replay.

    Provides the same interface as SessionLogger but does nothing.
    """

    is_active = False
    session_id = None

    def start_session(self, *args, **kwargs) -> None:
        return None

    def log_initial_state(self, *args, **kwargs) -> None:
        pass

    def end_session(self, *args, **kwargs) -> None:
        return None

    def get_last_session(self) -> None:
        return None

    def has_replay_data(self) -> bool:
        return False

    def log_input_start(self, *args, **kwargs) -> None:
        pass

    def log_input_move(self, *args, **kwargs) -> None:
        pass

    def log_input_end(self, *args, **kwargs) -> None:
        pass

    def log_projectile_start(self, *args, **kwargs) -> None:
        pass

    def log_projectile_hit(self, *args, **kwargs) -> None:
        pass

    def log_projectile_miss(self, *args, **kwargs) -> None:
        pass

    def log_projectile_blocked(self, *args, **kwargs) -> None:
        pass

    def log_target_spawn(self, *args, **kwargs) -> None:
        pass

    def log_game_frame(self, *args, **kwargs) -> None:
        pass

    def summarize(self, *args, **kwargs) -> Dict[str, Any]:
        return {}
