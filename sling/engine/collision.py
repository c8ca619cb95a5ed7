"""
Collision & scoring resolution.

Runs once per frame after motion. Every projectile is tested against the
blockers first; a blocked projectile can never score in the same frame.
Only circle-distance tests are used.
"""

from typing import Callable, Optional

from sling.engine.entities import Blocker, Projectile, Target
from sling.engine.scoring import calculate_points
from sling.engine.state import SessionState
from sling.events import BlockEffect, Effect, HitEffect
from sling.logging import get_logger

log = get_logger('collision')

EffectListener = Callable[[Effect], None]


class CollisionResolver:
    """
    Resolves projectile vs. blocker/target hits for one session.

    Args:
        logger: Session logger receiving hit and blocked events
        on_effect: Optional listener for hit/block visual effects
    """

    def __init__(self, logger, on_effect: Optional[EffectListener] = None):
        self.logger = logger
        self.on_effect = on_effect

    def resolve(self, state: SessionState) -> int:
        """Resolve every active projectile in spawn order, then clean up.

        Returns:
            Points scored this frame
        """
        scored = 0
        for projectile in state.projectiles:
            if not projectile.active:
                continue
            blocker = self._find_blocker(state, projectile)
            if blocker is not None:
                self._block(projectile, blocker)
                continue
            scored += self._hit_first_target(state, projectile)

        state.cleanup()
        return scored

    def _find_blocker(self, state: SessionState, projectile: Projectile) -> Optional[Blocker]:
        for blocker in state.blockers:
            if blocker.active and blocker.distance_to(projectile.x, projectile.y) < blocker.hit_radius:
                return blocker
        return None

    def _block(self, projectile: Projectile, blocker: Blocker) -> None:
        projectile.active = False
        self.logger.log_projectile_blocked(projectile, blocker)
        log.debug("Projectile %d blocked by %d", projectile.id, blocker.id)
        self._emit(BlockEffect(x=blocker.x, y=blocker.y))

    def _hit_first_target(self, state: SessionState, projectile: Projectile) -> int:
        """Score against the first target in range, if it awards points."""
        for target in state.targets:
            if not target.active:
                continue
            distance = target.distance_to(projectile.x, projectile.y)
            if distance >= target.hit_radius:
                continue

            points = calculate_points(target, distance)
            if points > 0:
                self._hit(state, projectile, target, distance, points)
            return points if points > 0 else 0
        return 0

    def _hit(
        self,
        state: SessionState,
        projectile: Projectile,
        target: Target,
        distance: float,
        points: int,
    ) -> None:
        state.score += points
        projectile.active = False
        # Non-respawning targets (dartboard, goal) stay up to be hit again
        if target.respawns:
            target.active = False
        self.logger.log_projectile_hit(projectile, target, distance, points, state.score)
        log.debug("Projectile %d hit target %d for %d", projectile.id, target.id, points)
        self._emit(HitEffect(x=target.x, y=target.y, points=points))

    def _emit(self, effect: Effect) -> None:
        if self.on_effect is not None:
            self.on_effect(effect)
