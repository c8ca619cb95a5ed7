"""
Pointer Event - one phase of a drag gesture.

Uses Pydantic for validation and immutability.
"""
from enum import Enum

from pydantic import BaseModel, field_validator, ConfigDict

from slingshot_models import Point2D


class PointerPhase(str, Enum):
    """Where in a drag gesture an event falls."""
    START = "start"
    MOVE = "move"
    END = "end"


class PointerEvent(BaseModel):
    """Immutable pointer event from any source.

    Mouse and touch input are both converted to this format; ``input_type``
    records which one it was.

    Attributes:
        position: Screen coordinates of the pointer
        timestamp: Time of the event (seconds, monotonic clock)
        phase: START, MOVE or END
        input_type: ``mouse`` or ``touch``
    """
    position: Point2D
    timestamp: float
    phase: PointerPhase
    input_type: str = "mouse"

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v: float) -> float:
        """Validate timestamp is non-negative."""
        if v < 0:
            raise ValueError(f'Timestamp must be non-negative, got {v}')
        return v

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return (f"PointerEvent({self.phase.value} pos=({self.position.x:.2f}, {self.position.y:.2f}), "
                f"t={self.timestamp:.3f}, {self.input_type})")
