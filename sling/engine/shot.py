"""
Input-to-shot translation.

The launch vector is the drag start minus the release point, and the
force comes from how fast the drag was made. The simulation integrates
projectiles with ``x -= vx, y -= vy``, so on screen a shot travels the
way the pointer was swiped: flick upward to fire upward.

Examples:
    >>> drag = DragInput(start_x=100, start_y=100, current_x=70, current_y=140, start_time=0.0)
    >>> shot = translate_drag(drag, release_time=0.5)
    >>> shot.distance, shot.force, shot.shot_fired
    (50.0, 1.0, True)
"""

import math
from typing import Tuple

from sling.engine.constants import (
    LAUNCH_MULTIPLIER,
    MAX_FORCE,
    MIN_ELAPSED,
    MIN_SHOT_DISTANCE,
    SPEED_PER_FORCE,
)
from sling.events import DragInput, ShotResult


def translate_drag(drag: DragInput, release_time: float) -> ShotResult:
    """Turn a released drag into a launch angle and force.

    Args:
        drag: Drag gesture with its final position in ``current_x/y``
        release_time: Release time on the same clock as ``drag.start_time``

    Returns:
        ShotResult; ``shot_fired`` is False for drags of
        ``MIN_SHOT_DISTANCE`` pixels or less
    """
    dx = drag.start_x - drag.current_x
    dy = drag.start_y - drag.current_y
    distance = math.hypot(dx, dy)
    elapsed = release_time - drag.start_time
    speed = distance / max(elapsed, MIN_ELAPSED)

    return ShotResult(
        start_x=drag.start_x,
        start_y=drag.start_y,
        release_x=drag.current_x,
        release_y=drag.current_y,
        dx=dx,
        dy=dy,
        distance=distance,
        elapsed=elapsed,
        speed=speed,
        angle=math.atan2(dy, dx),
        force=min(speed / SPEED_PER_FORCE, MAX_FORCE),
        shot_fired=distance > MIN_SHOT_DISTANCE,
    )


def launch_velocity(angle: float, force: float) -> Tuple[float, float]:
    """Initial projectile velocity for a shot."""
    magnitude = force * LAUNCH_MULTIPLIER
    return magnitude * math.cos(angle), magnitude * math.sin(angle)
