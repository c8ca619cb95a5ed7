"""
Simulation Engine - authoritative per-frame game state.

Owns one SessionState and advances it a frame at a time. The engine never
paces itself: the game controller (or a test) calls ``advance_frame()``
once per display refresh and ``tick_second()`` once per second.

Frame order:
    1. Move targets, blockers, projectiles (misses are logged here)
    2. Resolve collisions and drop spent entities
    3. Every FRAME_LOG_INTERVAL frames, log a GAME_FRAME snapshot
    4. Spawn at most one replacement target

Coordinates are canvas pixels with y pointing down. Projectiles carry
vy > 0 for upward screen motion and are integrated as
``x -= vx; y -= vy; vy -= gravity``.

Usage:
    engine = SimulationEngine(800, 600, behaviors, logger=SessionLogger())
    engine.start_session(theme)
    engine.fire(angle, force)
    engine.advance_frame()
"""

import random
from typing import List, Optional, Tuple

from slingshot_models import BehaviorConfig, GameSettings, MotionKind, ShooterRecord, ThemeConfig
from sling.engine.collision import CollisionResolver, EffectListener
from sling.engine.constants import (
    BLOCKER_OFFSET,
    BOTTOM_PADDING,
    FRAME_LOG_INTERVAL,
    GAME_DURATION,
    GRAVITY,
    HEADER_HEIGHT,
    OFFSCREEN_MARGIN,
    SHOOTER_OFFSET,
    SPAWN_PADDING,
    WALL_PADDING,
)
from sling.engine.entities import Blocker, Projectile, Target
from sling.engine.recording.logger import NullSessionLogger
from sling.engine.recording.snapshot import FrameSnapshot
from sling.engine.registry import BehaviorRegistry
from sling.engine.shot import launch_velocity
from sling.engine.state import SessionState
from sling.logging import get_logger

log = get_logger('simulation')


class SimulationEngine:
    """
    Advances one game session frame by frame.

    Args:
        width, height: Canvas size in pixels
        behaviors: Behavior registry for resolving target behaviors
        logger: Session logger (default: records nothing)
        rng: Random source for spawns (default: a fresh random.Random)
        on_effect: Optional listener for hit/block visual effects
        duration: Session length in seconds
        frame_log_interval: Frames between GAME_FRAME snapshots
        gravity: Downward acceleration of projectiles per frame
    """

    def __init__(
        self,
        width: int,
        height: int,
        behaviors: Optional[BehaviorRegistry] = None,
        logger=None,
        rng: Optional[random.Random] = None,
        on_effect: Optional[EffectListener] = None,
        duration: int = GAME_DURATION,
        frame_log_interval: int = FRAME_LOG_INTERVAL,
        gravity: float = GRAVITY,
    ):
        self.width = width
        self.height = height
        self.behaviors = behaviors if behaviors is not None else BehaviorRegistry()
        self.logger = logger if logger is not None else NullSessionLogger()
        self.rng = rng if rng is not None else random.Random()
        self.duration = duration
        self.frame_log_interval = frame_log_interval
        self.gravity = gravity

        self.state = SessionState(time_left=duration)
        self.resolver = CollisionResolver(self.logger, on_effect)

    @property
    def on_effect(self) -> Optional[EffectListener]:
        return self.resolver.on_effect

    @on_effect.setter
    def on_effect(self, listener: Optional[EffectListener]) -> None:
        self.resolver.on_effect = listener

    @property
    def shooter_position(self) -> Tuple[float, float]:
        """Where projectiles are launched from."""
        return self.width / 2, self.height - SHOOTER_OFFSET

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def start_session(
        self,
        theme: ThemeConfig,
        input_type: str = 'mouse',
        session_id: Optional[int] = None,
    ) -> GameSettings:
        """Reset state, spawn the initial targets and log the initial state.

        Returns:
            The settings snapshot recorded in the session log
        """
        self.state.reset(theme, self.duration)
        settings = GameSettings(
            canvas_width=self.width,
            canvas_height=self.height,
            input_type=input_type,
            theme=theme,
            game_duration=self.duration,
        )
        self.logger.start_session(settings, session_id)

        for _ in range(theme.target_config.count):
            self.spawn_target(log_spawn=False)

        shooter_x, shooter_y = self.shooter_position
        self.logger.log_initial_state(
            ShooterRecord(glyph=theme.shooter, x=shooter_x, y=shooter_y),
            self.state.targets,
            self.state.blockers,
        )
        log.info(
            "Started '%s': %d targets, %d blockers",
            theme.name, len(self.state.targets), len(self.state.blockers),
        )
        return settings

    def tick_second(self) -> bool:
        """Count down one second.

        Returns:
            True once time has run out
        """
        if self.state.time_left > 0:
            self.state.time_left -= 1
        return self.state.time_left <= 0

    def end_session(self):
        """Stop playing and seal the session log.

        Returns:
            The sealed SessionRecord, or None if nothing was recorded
        """
        self.state.is_playing = False
        return self.logger.end_session(self.state.score)

    # =========================================================================
    # Frame update
    # =========================================================================

    def advance_frame(self) -> None:
        """Run one frame of live simulation."""
        if not self.state.is_playing:
            return
        state = self.state
        state.frame_count += 1

        self.move_targets()
        self.move_blockers()
        self.move_projectiles()
        self.resolver.resolve(state)

        if state.frame_count % self.frame_log_interval == 0:
            self.logger.log_game_frame(
                state.frame_count, state.score, state.time_left,
                state.targets, state.projectiles, state.blockers,
            )

        self.respawn()

    def integrate(self) -> None:
        """Move every entity without resolving collisions or respawning."""
        self.move_targets()
        self.move_blockers()
        self.move_projectiles()
        self.state.cleanup()

    def move_targets(self) -> None:
        for target in self.state.targets:
            if not target.active:
                continue
            motion = target.motion
            if motion is MotionKind.STATIONARY:
                continue
            elif motion is MotionKind.BOUNCE:
                target.x += target.vx
                target.y += target.vy
                self._bounce_horizontal(target)
                self._bounce_vertical(target)
            elif motion is MotionKind.FLOAT:
                target.x += target.vx
                target.y += target.vy
                if target.y < -target.size:
                    target.y = self.height + target.size
                    target.x = WALL_PADDING + self.rng.random() * (self.width - WALL_PADDING * 2)
                self._bounce_horizontal(target)
            else:
                raise ValueError(f"Unhandled motion kind: {motion}")

    def _bounce_horizontal(self, target: Target) -> None:
        low, high = WALL_PADDING, self.width - WALL_PADDING
        if target.x < low or target.x > high:
            target.vx = -target.vx
            target.x = max(low, min(high, target.x))

    def _bounce_vertical(self, target: Target) -> None:
        low, high = HEADER_HEIGHT + WALL_PADDING, self.height - BOTTOM_PADDING
        if target.y < low or target.y > high:
            target.vy = -target.vy
            target.y = max(low, min(high, target.y))

    def move_blockers(self) -> None:
        """Oscillate blockers in front of their targets."""
        for blocker in self.state.blockers:
            if not blocker.active:
                continue
            parent = self.state.find_target(blocker.parent_id)
            if parent is None or not parent.active:
                blocker.active = False
                continue

            blocker.x += blocker.speed * blocker.direction
            max_offset = parent.size * blocker.movement_range
            offset = blocker.x - parent.x
            if abs(offset) > max_offset:
                # Clamp on the side that was exceeded, then turn around
                side = 1 if offset > 0 else -1
                blocker.x = parent.x + max_offset * side
                blocker.direction = -side

    def move_projectiles(self) -> None:
        """Apply ballistics and retire projectiles that left the field."""
        for projectile in self.state.projectiles:
            if not projectile.active:
                continue
            projectile.x -= projectile.vx
            projectile.y -= projectile.vy
            projectile.vy -= self.gravity

            reason = self.boundary_reason(projectile.x, projectile.y)
            if reason is not None:
                self.logger.log_projectile_miss(projectile, reason)
                projectile.active = False

        self.state.projectiles = [p for p in self.state.projectiles if p.active]

    def boundary_reason(self, x: float, y: float) -> Optional[str]:
        """Which padded edge a point is past, first match wins."""
        if x < -OFFSCREEN_MARGIN:
            return 'left_boundary'
        if x > self.width + OFFSCREEN_MARGIN:
            return 'right_boundary'
        if y < -OFFSCREEN_MARGIN:
            return 'top_boundary'
        if y > self.height + OFFSCREEN_MARGIN:
            return 'bottom_boundary'
        return None

    # =========================================================================
    # Spawning
    # =========================================================================

    def respawn(self) -> Optional[Target]:
        """Spawn one target if respawning targets are below the minimum."""
        theme = self.state.theme
        if theme is None:
            return None
        config = theme.target_config
        if not self.behaviors.get(config.behavior).respawns:
            return None
        if self.state.active_respawning_targets < config.min_count:
            return self.spawn_target()
        return None

    def spawn_target(self, log_spawn: bool = True) -> Target:
        """Create a target from the current theme's target configuration.

        Args:
            log_spawn: Record a TARGET_SPAWN event (off for the initial batch)
        """
        theme = self.state.theme
        if theme is None:
            raise RuntimeError("No session started")
        config = theme.target_config
        behavior = self.behaviors.get(config.behavior)

        play_width = self.width - SPAWN_PADDING * 2
        play_height = self.height - HEADER_HEIGHT - SPAWN_PADDING - BOTTOM_PADDING
        if config.fixed_position is not None:
            fx, fy = config.fixed_position.x, config.fixed_position.y
        else:
            fx, fy = self.rng.random(), self.rng.random()
        x = SPAWN_PADDING + fx * play_width
        y = HEADER_HEIGHT + SPAWN_PADDING + fy * play_height

        size = config.size_range.lerp(self.rng.random())
        vx, vy = self._spawn_velocity(behavior)

        target = Target(
            id=self.state.next_target_id(),
            x=x,
            y=y,
            size=size,
            behavior=config.behavior,
            behavior_config=behavior,
            glyph=theme.target,
            vx=vx,
            vy=vy,
        )
        self.state.targets.append(target)

        blocker = None
        if target.has_blocker and self.state.blocker_for(target.id) is None:
            blocker = self.spawn_blocker(target)

        if log_spawn:
            self.logger.log_target_spawn(target, blocker)
        log.trace("Spawned target %d at (%.0f, %.0f)", target.id, x, y)
        return target

    def _spawn_velocity(self, behavior: BehaviorConfig) -> Tuple[float, float]:
        motion = behavior.motion
        if motion is MotionKind.STATIONARY:
            return 0.0, 0.0
        speed = behavior.speed_range.lerp(self.rng.random())
        if motion is MotionKind.FLOAT:
            # Rise with a slight drift
            return (self.rng.random() - 0.5) * speed, -speed
        if motion is MotionKind.BOUNCE:
            return (self.rng.random() - 0.5) * 2 * speed, (self.rng.random() - 0.5) * 2 * speed
        raise ValueError(f"Unhandled motion kind: {motion}")

    def spawn_blocker(self, target: Target) -> Blocker:
        """Place a blocker in front of ``target``."""
        config = target.behavior_config.blocker_config
        if config is None:
            raise ValueError(f"Behavior '{target.behavior}' has no blocker")
        blocker = Blocker(
            id=self.state.next_blocker_id(),
            x=target.x,
            y=target.y + target.size * BLOCKER_OFFSET,
            size=config.size,
            speed=config.speed,
            movement_range=config.movement_range,
            parent_id=target.id,
            glyph=config.glyph,
        )
        self.state.blockers.append(blocker)
        return blocker

    def fire(self, angle: float, force: float) -> Projectile:
        """Launch a projectile from the shooter."""
        vx, vy = launch_velocity(angle, force)
        x, y = self.shooter_position
        theme = self.state.theme
        projectile = Projectile(
            id=self.state.next_projectile_id(),
            x=x,
            y=y,
            vx=vx,
            vy=vy,
            glyph=theme.projectile if theme is not None else '',
        )
        self.state.projectiles.append(projectile)
        self.logger.log_projectile_start(projectile, angle, force)
        log.debug("Fired projectile %d: angle=%.2f force=%.2f", projectile.id, angle, force)
        return projectile

    # =========================================================================
    # Queries
    # =========================================================================

    def snapshot(self) -> FrameSnapshot:
        """Immutable copy of the state for the renderer."""
        return FrameSnapshot.from_state(self.state, self.shooter_position)

    def active_targets(self) -> List[Target]:
        return [t for t in self.state.targets if t.active]
