"""
Snapshot dataclasses handed to the renderer.

A FrameSnapshot is an immutable copy of everything needed to draw one
frame. The renderer never touches live entities, so a snapshot taken
during live play or replay stays valid after the engine moves on.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from sling.engine.entities import Blocker, Projectile, Target
    from sling.engine.state import SessionState


@dataclass(frozen=True)
class EntitySnapshot:
    """
    Drawable state of a single entity.

    ``kind`` is one of ``target``, ``blocker`` or ``projectile``.
    """
    id: int
    kind: str
    x: float
    y: float
    size: float
    glyph: str
    active: bool = True
    vx: float = 0.0
    vy: float = 0.0
    parent_id: Optional[int] = None

    @classmethod
    def from_target(cls, target: 'Target') -> 'EntitySnapshot':
        return cls(
            id=target.id,
            kind='target',
            x=target.x,
            y=target.y,
            size=target.size,
            glyph=target.glyph,
            active=target.active,
            vx=target.vx,
            vy=target.vy,
        )

    @classmethod
    def from_blocker(cls, blocker: 'Blocker') -> 'EntitySnapshot':
        return cls(
            id=blocker.id,
            kind='blocker',
            x=blocker.x,
            y=blocker.y,
            size=blocker.size,
            glyph=blocker.glyph,
            active=blocker.active,
            parent_id=blocker.parent_id,
        )

    @classmethod
    def from_projectile(cls, projectile: 'Projectile', size: float = 0.0) -> 'EntitySnapshot':
        return cls(
            id=projectile.id,
            kind='projectile',
            x=projectile.x,
            y=projectile.y,
            size=size,
            glyph=projectile.glyph,
            active=projectile.active,
            vx=projectile.vx,
            vy=projectile.vy,
        )


@dataclass(frozen=True)
class FrameSnapshot:
    """
    Everything the renderer needs for one frame.

    Attributes:
        frame: Frames advanced since the session started
        score: Current score
        time_left: Seconds left on the countdown
        is_playing: Whether the session is live
        shooter_x, shooter_y: Launch position
        shooter_glyph: Glyph drawn at the launch position
        targets, blockers, projectiles: Entity snapshots in spawn order
    """
    frame: int
    score: int
    time_left: int
    is_playing: bool
    shooter_x: float
    shooter_y: float
    shooter_glyph: str = ''
    targets: Tuple[EntitySnapshot, ...] = ()
    blockers: Tuple[EntitySnapshot, ...] = ()
    projectiles: Tuple[EntitySnapshot, ...] = ()

    @classmethod
    def from_state(
        cls,
        state: 'SessionState',
        shooter: Tuple[float, float],
        projectile_size: float = 30.0,
    ) -> 'FrameSnapshot':
        """Copy the drawable parts of ``state``."""
        theme = state.theme
        return cls(
            frame=state.frame_count,
            score=state.score,
            time_left=state.time_left,
            is_playing=state.is_playing,
            shooter_x=shooter[0],
            shooter_y=shooter[1],
            shooter_glyph=theme.shooter if theme is not None else '',
            targets=tuple(EntitySnapshot.from_target(t) for t in state.targets),
            blockers=tuple(EntitySnapshot.from_blocker(b) for b in state.blockers),
            projectiles=tuple(
                EntitySnapshot.from_projectile(p, projectile_size) for p in state.projectiles
            ),
        )

    @property
    def entity_count(self) -> int:
        return len(self.targets) + len(self.blockers) + len(self.projectiles)
