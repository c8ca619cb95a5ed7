"""
Mutable entities advanced by the simulation.

Entities are plain dataclasses mutated in place each frame, like the
game engine's GameEntity. Blockers reference their target by id rather
than holding the object, so every entity serializes without cycles.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from slingshot_models import BehaviorConfig, BlockerRecord, MotionKind, TargetRecord
from sling.engine.constants import BLOCKER_HIT_MARGIN, TARGET_HIT_MARGIN


@dataclass
class Target:
    """Something to shoot at."""
    id: int
    x: float
    y: float
    size: float
    behavior: str
    behavior_config: BehaviorConfig
    glyph: str = ''
    vx: float = 0.0
    vy: float = 0.0
    active: bool = True

    @property
    def motion(self) -> MotionKind:
        return self.behavior_config.motion

    @property
    def respawns(self) -> bool:
        """Hit targets are removed and replaced; others keep accepting hits."""
        return self.behavior_config.respawns

    @property
    def has_blocker(self) -> bool:
        return self.behavior_config.has_blocker

    @property
    def hit_radius(self) -> float:
        return self.size / 2 + TARGET_HIT_MARGIN

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)

    def to_record(self) -> TargetRecord:
        return TargetRecord(
            id=self.id,
            x=self.x,
            y=self.y,
            size=self.size,
            glyph=self.glyph,
            vx=self.vx,
            vy=self.vy,
            behavior=self.behavior,
            behavior_config=self.behavior_config,
        )

    @classmethod
    def from_record(cls, record: TargetRecord, behavior_config: BehaviorConfig) -> 'Target':
        return cls(
            id=record.id,
            x=record.x,
            y=record.y,
            size=record.size,
            behavior=record.behavior,
            behavior_config=record.behavior_config or behavior_config,
            glyph=record.glyph,
            vx=record.vx,
            vy=record.vy,
        )

    def frame_data(self) -> Dict[str, Any]:
        return {'id': self.id, 'x': self.x, 'y': self.y, 'active': self.active}


@dataclass
class Blocker:
    """Obstacle oscillating in front of its parent target."""
    id: int
    x: float
    y: float
    size: float
    speed: float
    movement_range: float
    parent_id: int
    glyph: str = ''
    direction: int = 1
    active: bool = True

    @property
    def hit_radius(self) -> float:
        return self.size / 2 + BLOCKER_HIT_MARGIN

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)

    def to_record(self) -> BlockerRecord:
        return BlockerRecord(
            id=self.id,
            x=self.x,
            y=self.y,
            size=self.size,
            glyph=self.glyph,
            speed=self.speed,
            direction=self.direction,
            movement_range=self.movement_range,
            parent_id=self.parent_id,
        )

    @classmethod
    def from_record(cls, record: BlockerRecord) -> 'Blocker':
        return cls(
            id=record.id,
            x=record.x,
            y=record.y,
            size=record.size,
            speed=record.speed,
            movement_range=record.movement_range,
            parent_id=record.parent_id,
            glyph=record.glyph,
            direction=record.direction,
        )

    def frame_data(self) -> Dict[str, Any]:
        return {'id': self.id, 'x': self.x, 'y': self.y, 'active': self.active}


@dataclass
class Projectile:
    """A launched shot."""
    id: int
    x: float
    y: float
    vx: float
    vy: float
    glyph: str = ''
    active: bool = True

    def frame_data(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'vx': self.vx,
            'vy': self.vy,
            'active': self.active,
        }
