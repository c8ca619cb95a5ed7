"""
Game Controller - drives live play and replay through a host scheduler.

Owns the simulation engine, the session logger and the replay engine and
keeps live play and replay mutually exclusive: starting a replay cancels
the live frame loop and countdown, and starting a game cancels any
replay. Loops are cooperative; each tick checks its flag first and
simply stops rescheduling itself.

Usage:
    scheduler = ClockScheduler()
    controller = GameController(scheduler, 1280, 720, store=SessionStore())
    controller.start_game('duck-hunting')

    # pointer layer
    controller.handle_drag_start(x, y)
    controller.handle_drag_move(x, y)
    controller.handle_drag_end(x, y)

    # host loop
    scheduler.pump()
    draw(controller.snapshot())
"""

import random
from typing import Callable, Optional, Union

from slingshot_models import SessionRecord, ThemeConfig
from sling.engine.collision import EffectListener
from sling.engine.constants import FRAME_LOG_INTERVAL, GAME_DURATION, GRAVITY
from sling.engine.recording.logger import SessionLogger
from sling.engine.recording.replay import ReplayEngine
from sling.engine.recording.snapshot import FrameSnapshot
from sling.engine.registry import BehaviorRegistry, ThemeRegistry
from sling.engine.shot import translate_drag
from sling.engine.simulation import SimulationEngine
from sling.events import DragInput, ShotResult
from sling.logging import get_logger
from sling.scheduling import Scheduler
from sling.storage import SessionStore

log = get_logger('controller')

GameOverListener = Callable[[int, Optional[SessionRecord]], None]


class GameController:
    """
    Live game and replay coordinator for one display.

    Args:
        scheduler: Host scheduler (ClockScheduler or ManualScheduler)
        width, height: Canvas size in pixels
        behaviors: Behavior registry (default: built-ins)
        themes: Theme registry (default: built-ins)
        store: Last-session store (default: keep sessions in memory only)
        rng: Random source for spawns
        duration: Session length in seconds
        replay_speed: Replay time multiplier
        on_effect: Listener for hit/block effects, live and replayed
        on_game_over: Called with (final_score, record) when a game ends
        on_replay_complete: Called with the logged final score
    """

    def __init__(
        self,
        scheduler: Scheduler,
        width: int,
        height: int,
        behaviors: Optional[BehaviorRegistry] = None,
        themes: Optional[ThemeRegistry] = None,
        store: Optional[SessionStore] = None,
        rng: Optional[random.Random] = None,
        duration: int = GAME_DURATION,
        replay_speed: float = 1.0,
        frame_log_interval: int = FRAME_LOG_INTERVAL,
        gravity: float = GRAVITY,
        on_effect: Optional[EffectListener] = None,
        on_game_over: Optional[GameOverListener] = None,
        on_replay_complete: Optional[Callable[[int], None]] = None,
    ):
        self.scheduler = scheduler
        self.behaviors = behaviors if behaviors is not None else BehaviorRegistry()
        self.themes = themes if themes is not None else ThemeRegistry()
        self.on_game_over = on_game_over
        self.on_replay_complete = on_replay_complete

        self.logger = SessionLogger(clock=scheduler.now, store=store)
        self.engine = SimulationEngine(
            width,
            height,
            behaviors=self.behaviors,
            logger=self.logger,
            rng=rng,
            on_effect=on_effect,
            duration=duration,
            frame_log_interval=frame_log_interval,
            gravity=gravity,
        )
        self.replay = ReplayEngine(
            scheduler,
            self.logger,
            behaviors=self.behaviors,
            on_effect=on_effect,
            on_complete=self._replay_complete,
            replay_speed=replay_speed,
        )

        self.drag: Optional[DragInput] = None
        self._frame_handle: Optional[int] = None
        self._countdown_handle: Optional[int] = None

    @property
    def is_playing(self) -> bool:
        return self.engine.is_playing

    @property
    def is_replaying(self) -> bool:
        return self.replay.is_replaying

    @property
    def score(self) -> int:
        return self.engine.state.score

    @property
    def time_left(self) -> int:
        return self.engine.state.time_left

    # =========================================================================
    # Live play
    # =========================================================================

    def start_game(self, theme: Union[ThemeConfig, str], input_type: str = 'mouse') -> None:
        """Start a new live session, cancelling any replay or running game.

        Raises:
            KeyError: If ``theme`` is an unknown theme id
        """
        if isinstance(theme, str):
            theme = self.themes.get(theme)

        self.replay.stop_replay()
        self._stop_live()
        self.drag = None

        self.engine.start_session(theme, input_type=input_type)
        self._frame_handle = self.scheduler.request_frame(self._frame)
        self._countdown_handle = self.scheduler.set_interval(self._countdown, 1.0)

    def game_over(self) -> Optional[SessionRecord]:
        """End the live session, seal its log and notify the listener."""
        if not self.is_playing:
            return None
        self._stop_live()
        self.drag = None

        record = self.engine.end_session()
        score = self.engine.state.score
        log.info("Game over: score %d", score)
        if self.on_game_over is not None:
            self.on_game_over(score, record)
        return record

    def _frame(self) -> None:
        self._frame_handle = None
        if not self.is_playing:
            return
        self.engine.advance_frame()
        if self.is_playing:
            self._frame_handle = self.scheduler.request_frame(self._frame)

    def _countdown(self) -> None:
        if not self.is_playing:
            self.scheduler.cancel(self._countdown_handle)
            self._countdown_handle = None
            return
        if self.engine.tick_second():
            self.game_over()

    def _stop_live(self) -> None:
        """Cancel the live loop without sealing the session."""
        self.engine.state.is_playing = False
        self.scheduler.cancel(self._frame_handle)
        self.scheduler.cancel(self._countdown_handle)
        self._frame_handle = None
        self._countdown_handle = None

    # =========================================================================
    # Input
    # =========================================================================

    def handle_drag_start(self, x: float, y: float, input_type: str = 'mouse') -> None:
        if not self.is_playing:
            return
        self.drag = DragInput(
            start_x=x,
            start_y=y,
            current_x=x,
            current_y=y,
            start_time=self.scheduler.now(),
            input_type=input_type,
        )
        self.logger.log_input_start(x, y, input_type)

    def handle_drag_move(self, x: float, y: float) -> None:
        if self.drag is None or not self.is_playing:
            return
        self.drag = self.drag.moved_to(x, y)
        self.logger.log_input_move(x, y)

    def handle_drag_end(self, x: Optional[float] = None, y: Optional[float] = None) -> Optional[ShotResult]:
        """Release the drag and fire if it was long enough.

        Returns:
            The translated shot, or None if no drag was in progress
        """
        if self.drag is None:
            return None
        drag = self.drag if x is None or y is None else self.drag.moved_to(x, y)
        self.drag = None
        if not self.is_playing:
            return None

        shot = translate_drag(drag, self.scheduler.now())
        self.logger.log_input_end(shot)
        if shot.shot_fired:
            self.engine.fire(shot.angle, shot.force)
        return shot

    # =========================================================================
    # Replay
    # =========================================================================

    def start_replay(self) -> bool:
        """Replay the last session, cancelling live play first.

        Returns:
            False if no session has been recorded
        """
        if not self.logger.has_replay_data():
            log.info("Replay requested with no recorded session")
            return False
        self._stop_live()
        self.drag = None
        return self.replay.start_replay()

    def stop_replay(self) -> None:
        self.replay.stop_replay()

    def _replay_complete(self, final_score: int) -> None:
        if self.on_replay_complete is not None:
            self.on_replay_complete(final_score)

    # =========================================================================

    def snapshot(self) -> FrameSnapshot:
        """What to draw right now: the replay while one is running."""
        if self.replay.engine is not None and self.is_replaying:
            return self.replay.snapshot()
        return self.engine.snapshot()

    def last_session(self) -> Optional[SessionRecord]:
        return self.logger.get_last_session()
