"""
Session log models.

A session log is the ordered, timestamped event record of one complete
game plus the metadata needed to replay it: the settings snapshot, the
initial entity snapshot and the final score. The persisted JSON uses the
camelCase keys of the browser version (``sessionId``, ``gameSettings``...).

Sealed records are frozen all the way down: sequences are tuples and
event payloads are read-only mappings, so nothing reachable from a
record can change after the session ends.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .behaviors import BehaviorConfig
from .themes import ThemeConfig


def _freeze(value: Any) -> Any:
    """Read-only copy of a JSON-like value."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Plain dict/list copy of a frozen value."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class EventType(str, Enum):
    """Types of session log events."""
    INPUT_START = "INPUT_START"
    INPUT_MOVE = "INPUT_MOVE"
    INPUT_END = "INPUT_END"
    PROJECTILE_START = "PROJECTILE_START"
    PROJECTILE_HIT = "PROJECTILE_HIT"
    PROJECTILE_MISS = "PROJECTILE_MISS"
    PROJECTILE_BLOCKED = "PROJECTILE_BLOCKED"
    TARGET_SPAWN = "TARGET_SPAWN"
    GAME_FRAME = "GAME_FRAME"


class LogEvent(BaseModel):
    """One timestamped entry in the session log.

    Attributes:
        type: Event type
        timestamp: Milliseconds since the session started
        data: JSON-compatible payload, stored read-only (nested
            mappings become mappingproxies, lists become tuples)
    """
    model_config = ConfigDict(frozen=True)

    type: EventType
    timestamp: float = Field(ge=0.0)
    data: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator('data')
    @classmethod
    def freeze_data(cls, v):
        return _freeze(v)

    @field_serializer('data')
    def serialize_data(self, data) -> Dict[str, Any]:
        return _thaw(data)

    def payload(self) -> Dict[str, Any]:
        """Mutable copy of the payload with plain dicts and lists."""
        return _thaw(self.data)


class GameSettings(BaseModel):
    """Settings snapshot taken at session start."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    canvas_width: int = Field(alias='canvasWidth', gt=0)
    canvas_height: int = Field(alias='canvasHeight', gt=0)
    input_type: str = Field(default='mouse', alias='inputType')
    theme: ThemeConfig
    game_duration: int = Field(default=30, alias='gameDuration', gt=0)


class ShooterRecord(BaseModel):
    """Where projectiles are launched from."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    glyph: str = Field(alias='emoji')
    x: float
    y: float


class TargetRecord(BaseModel):
    """Target as recorded at spawn time."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    x: float
    y: float
    size: float
    glyph: str = Field(alias='emoji')
    vx: float = 0.0
    vy: float = 0.0
    behavior: str
    behavior_config: Optional[BehaviorConfig] = Field(default=None, alias='behaviorConfig')


class BlockerRecord(BaseModel):
    """Blocker as recorded at spawn time."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    x: float
    y: float
    size: float
    glyph: str = Field(alias='emoji')
    speed: float
    direction: int = 1
    movement_range: float = Field(alias='movementRange')
    parent_id: int = Field(alias='parentId')


class InitialState(BaseModel):
    """Entities present right after the initial spawn."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    shooter: Optional[ShooterRecord] = None
    targets: Tuple[TargetRecord, ...] = ()
    blockers: Tuple[BlockerRecord, ...] = ()


class SessionRecord(BaseModel):
    """A sealed session log, the sole input of the replay engine.

    Examples:
        >>> record = SessionRecord.model_validate_json(text)  # doctest: +SKIP
        >>> SessionRecord.model_validate_json(record.to_json()) == record  # doctest: +SKIP
        True
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    session_id: int = Field(alias='sessionId')
    start_time: str = Field(alias='startTime')
    end_time: Optional[str] = Field(default=None, alias='endTime')
    game_settings: GameSettings = Field(alias='gameSettings')
    initial_state: InitialState = Field(default_factory=InitialState, alias='initialState')
    events: Tuple[LogEvent, ...] = ()
    final_score: int = Field(default=0, alias='finalScore', ge=0)

    @property
    def duration_ms(self) -> float:
        """Timestamp of the last event, or 0 for an empty log."""
        return self.events[-1].timestamp if self.events else 0.0

    def to_json(self) -> str:
        """Serialize with the external camelCase keys."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: str) -> 'SessionRecord':
        """Parse a record produced by :meth:`to_json`."""
        return cls.model_validate_json(text)
