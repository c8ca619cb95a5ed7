"""
Behavior and scoring descriptors.

A behavior is a named motion + scoring policy applied to a target. The
external descriptor format uses camelCase keys (``speedRange``,
``floatUp``, ``hasBlocker``...), which are accepted through field aliases
so theme files written for the browser version load unchanged.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .primitives import ValueRange


class MotionKind(str, Enum):
    """How a target moves each frame.

    Attributes:
        STATIONARY: Never moves
        BOUNCE: Moves freely and reflects off the play area walls
        FLOAT: Rises toward the top and wraps back to the bottom edge
    """
    STATIONARY = "stationary"
    BOUNCE = "bounce"
    FLOAT = "float"


class ScoringZone(BaseModel):
    """One ring of a zone scoring table.

    Attributes:
        radius_percent: Outer edge of the ring as a fraction of the hit radius
        points: Points awarded inside this ring
        name: Label for display (bullseye, inner...)
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    radius_percent: float = Field(alias='radiusPercent', gt=0.0)
    points: int
    name: str = ""


class UniformScoring(BaseModel):
    """Flat points for any hit, regardless of distance."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal['uniform'] = 'uniform'
    base_points: int = Field(default=10, alias='basePoints', ge=0)


class ZoneScoring(BaseModel):
    """Distance-banded points, innermost ring first.

    Examples:
        >>> ZoneScoring(zones=[
        ...     ScoringZone(radius_percent=0.5, points=20),
        ...     ScoringZone(radius_percent=1.0, points=5),
        ... ]).zones[0].points
        20
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal['zones'] = 'zones'
    zones: List[ScoringZone] = Field(min_length=1)

    @field_validator('zones')
    @classmethod
    def validate_ascending(cls, v: List[ScoringZone]) -> List[ScoringZone]:
        """Zones must be ordered by ascending radius fraction."""
        fractions = [zone.radius_percent for zone in v]
        if fractions != sorted(fractions):
            raise ValueError(f'Zones must be ordered by ascending radius, got {fractions}')
        return v


ScoringPolicy = Annotated[Union[UniformScoring, ZoneScoring], Field(discriminator='type')]


class BlockerConfig(BaseModel):
    """Obstacle that guards a target (goalkeeper in front of the goal)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    glyph: str = Field(default='🧤', alias='emoji')
    size: float = Field(default=50.0, gt=0.0)
    speed: float = Field(default=3.0, ge=0.0)
    movement_range: float = Field(default=0.4, alias='movementRange', ge=0.0)


class BehaviorConfig(BaseModel):
    """Motion and scoring parameters for a behavior.

    Attributes:
        moves: Whether the target integrates its velocity
        speed_range: Speed drawn at spawn time (pixels per frame)
        float_up: Moving targets rise and wrap instead of bouncing
        respawns: Hit targets are removed and replaced
        has_blocker: A blocker is spawned in front of each target
        blocker: Blocker parameters when ``has_blocker`` is set
        scoring: Uniform or zone scoring policy
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    moves: bool = False
    speed_range: ValueRange = Field(default=ValueRange(min=0, max=0), alias='speedRange')
    float_up: bool = Field(default=False, alias='floatUp')
    respawns: bool = True
    has_blocker: bool = Field(default=False, alias='hasBlocker')
    blocker: Optional[BlockerConfig] = Field(default=None, alias='blockerConfig')
    scoring: ScoringPolicy = Field(default_factory=UniformScoring)

    @property
    def motion(self) -> MotionKind:
        """Closed motion kind derived from the descriptor flags."""
        if not self.moves:
            return MotionKind.STATIONARY
        if self.float_up:
            return MotionKind.FLOAT
        return MotionKind.BOUNCE

    @property
    def blocker_config(self) -> Optional[BlockerConfig]:
        """Blocker parameters, defaulted when only ``hasBlocker`` is given."""
        if not self.has_blocker:
            return None
        return self.blocker if self.blocker is not None else BlockerConfig()
