"""
Shared primitive data types for the slingshot engine.

This module provides the basic geometric types used throughout the
codebase: positions, velocities, value ranges and canvas dimensions.
"""

from pydantic import BaseModel, Field, computed_field, model_validator, ConfigDict


class Point2D(BaseModel):
    """Immutable 2D point/vector for positions, velocities, and coordinates.

    Attributes:
        x: X coordinate (horizontal, grows to the right)
        y: Y coordinate (vertical, grows downward like a canvas)

    Examples:
        >>> pos = Point2D(x=100.0, y=200.0)
        >>> vel = Point2D(x=-3.0, y=1.5)
    """
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


class ValueRange(BaseModel):
    """Inclusive numeric range used for speeds and sizes.

    Attributes:
        min: Lower bound
        max: Upper bound (must be >= min)

    Examples:
        >>> ValueRange(min=35, max=50).span
        15.0
    """
    min: float
    max: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_order(self) -> 'ValueRange':
        """Ensure min does not exceed max."""
        if self.min > self.max:
            raise ValueError(f'Range min must not exceed max, got {self.min} > {self.max}')
        return self

    @property
    def span(self) -> float:
        """Width of the range."""
        return float(self.max - self.min)

    def lerp(self, fraction: float) -> float:
        """Value at a fraction [0, 1] of the way from min to max."""
        return self.min + fraction * (self.max - self.min)


class Resolution(BaseModel):
    """Canvas resolution in pixels.

    Attributes:
        width: Width in pixels (must be positive)
        height: Height in pixels (must be positive)

    Examples:
        >>> Resolution(width=1280, height=720).aspect_ratio
        1.7777777777777777
    """
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @computed_field
    @property
    def aspect_ratio(self) -> float:
        """Calculate aspect ratio (width / height)."""
        return self.width / self.height

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Resolution({self.width}x{self.height})"
