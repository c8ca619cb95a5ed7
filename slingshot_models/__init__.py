"""
Data models for the slingshot arcade.

This package provides the Pydantic models shared by the engine, the
replay system and the pygame front end:
- Primitives: Point2D, ValueRange, Resolution
- Behaviors: motion kind, scoring policies, blocker parameters
- Themes: theme and target configuration
- Session: session log events and the sealed session record

Usage:
    >>> from slingshot_models import ThemeConfig, BehaviorConfig
    >>> from slingshot_models.session import SessionRecord, EventType
"""

from .primitives import (
    Point2D,
    ValueRange,
    Resolution,
)

from .behaviors import (
    MotionKind,
    ScoringZone,
    UniformScoring,
    ZoneScoring,
    ScoringPolicy,
    BlockerConfig,
    BehaviorConfig,
)

from .themes import (
    FixedPosition,
    TargetConfig,
    ThemeConfig,
    BackgroundConfig,
)

from .session import (
    EventType,
    LogEvent,
    GameSettings,
    ShooterRecord,
    TargetRecord,
    BlockerRecord,
    InitialState,
    SessionRecord,
)

__all__ = [
    # Primitives
    "Point2D",
    "ValueRange",
    "Resolution",
    # Behaviors
    "MotionKind",
    "ScoringZone",
    "UniformScoring",
    "ZoneScoring",
    "ScoringPolicy",
    "BlockerConfig",
    "BehaviorConfig",
    # Themes
    "FixedPosition",
    "TargetConfig",
    "ThemeConfig",
    "BackgroundConfig",
    # Session log
    "EventType",
    "LogEvent",
    "GameSettings",
    "ShooterRecord",
    "TargetRecord",
    "BlockerRecord",
    "InitialState",
    "SessionRecord",
]
