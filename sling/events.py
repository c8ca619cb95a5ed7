"""
Sling Event Types

Defines the plain-data events that cross the boundary between the engine
and its host:
- DragInput: normalized pointer/touch drag, produced by the input layer
- ShotResult: what the input translator computed from a released drag
- HitEffect / BlockEffect: visual-effect notifications for the renderer

The engine never sees raw pointer events, and the renderer never sees
engine internals; these models are the contract between them.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class DragInput(BaseModel):
    """
    A drag gesture in screen coordinates.

    The core is agnostic to whether it came from a mouse or a touch screen;
    ``input_type`` is only carried into the session log.
    """
    model_config = ConfigDict(frozen=True)

    start_x: float
    start_y: float
    current_x: float
    current_y: float
    start_time: float = Field(..., description="Drag start time (seconds, scheduler clock)")
    input_type: str = Field(default="mouse", description="mouse or touch")

    def moved_to(self, x: float, y: float) -> 'DragInput':
        """Copy of this drag with a new current point."""
        return self.model_copy(update={'current_x': x, 'current_y': y})


class ShotResult(BaseModel):
    """
    Outcome of translating a released drag into a shot.

    ``dx``/``dy`` are start minus release, so the launch direction is
    derived from the inverted drag vector.
    """
    model_config = ConfigDict(frozen=True)

    start_x: float
    start_y: float
    release_x: float
    release_y: float
    dx: float
    dy: float
    distance: float = Field(..., ge=0)
    elapsed: float = Field(..., description="Seconds between drag start and release")
    speed: float = Field(..., ge=0, description="Average drag speed in pixels per second")
    angle: float = Field(..., description="Launch angle in radians")
    force: float = Field(..., ge=0)
    shot_fired: bool


class HitEffect(BaseModel):
    """Show a points popup at a target."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    points: int


class BlockEffect(BaseModel):
    """Show a blocked marker at a blocker."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


Effect = Union[HitEffect, BlockEffect]
