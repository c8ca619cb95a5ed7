"""
Theme descriptors.

A theme bundles display glyphs, a background id and the target
configuration (which behavior, how many targets, how big, where).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .primitives import ValueRange


class FixedPosition(BaseModel):
    """Target position as fractions of the play area."""
    model_config = ConfigDict(frozen=True)

    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)


class TargetConfig(BaseModel):
    """How a theme populates the play area.

    Attributes:
        behavior: Behavior name looked up in the behavior registry
        count: Number of targets spawned at session start
        min_count: Respawning targets are topped up to this many
        size_range: Target size range in pixels
        fixed_position: Optional fixed placement (dartboard, goal)
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    behavior: str = 'moving'
    count: int = Field(default=3, ge=0)
    min_count: int = Field(default=3, alias='minCount', ge=0)
    size_range: ValueRange = Field(default=ValueRange(min=40, max=60), alias='sizeRange')
    fixed_position: Optional[FixedPosition] = Field(default=None, alias='fixedPosition')


class ThemeConfig(BaseModel):
    """A named bundle of glyphs, background and target configuration.

    Examples:
        >>> theme = ThemeConfig(name='Custom', target_config=TargetConfig(count=2, min_count=2))
        >>> theme.target_config.count
        2
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    name: str
    shooter: str = '🔫'
    target: str = '🎯'
    projectile: str = '⚫'
    background: str = 'range'
    hit_sound: Optional[str] = Field(default=None, alias='hitSound')
    miss_sound: Optional[str] = Field(default=None, alias='missSound')
    target_config: TargetConfig = Field(default_factory=TargetConfig, alias='targetConfig')
    is_custom: bool = Field(default=False, alias='isCustom')

    @model_validator(mode='before')
    @classmethod
    def default_missing_target_config(cls, data):
        """Themes without a target configuration get the moving default."""
        if isinstance(data, dict) and data.get('targetConfig', data.get('target_config')) is None:
            data = {k: v for k, v in data.items() if k not in ('targetConfig', 'target_config')}
        return data


class BackgroundConfig(BaseModel):
    """Background entry from the backgrounds table."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    css_class: Optional[str] = Field(default=None, alias='cssClass')
    color: Optional[str] = None
