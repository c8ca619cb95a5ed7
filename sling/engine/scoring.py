"""
Hit scoring.

Points for a hit depend only on the target's scoring policy and how far
from its centre the projectile landed.
"""

from typing import Sequence

from slingshot_models import ScoringZone, UniformScoring, ZoneScoring
from sling.engine.entities import Target


def zone_points(zones: Sequence[ScoringZone], hit_percent: float) -> int:
    """Points for a normalized hit distance, innermost zone first.

    Falls back to the outermost zone when nothing matches, which only
    happens when the outer zone stops short of 1.0.

    Examples:
        >>> zones = [ScoringZone(radius_percent=0.5, points=20), ScoringZone(radius_percent=1.0, points=5)]
        >>> zone_points(zones, 0.2), zone_points(zones, 0.8)
        (20, 5)
    """
    for zone in zones:
        if hit_percent <= zone.radius_percent:
            return zone.points
    return zones[-1].points


def calculate_points(target: Target, distance: float) -> int:
    """Points for a projectile ``distance`` pixels from ``target``'s centre."""
    scoring = target.behavior_config.scoring
    if isinstance(scoring, UniformScoring):
        return scoring.base_points
    if isinstance(scoring, ZoneScoring):
        hit_percent = min(distance / target.hit_radius, 1.0)
        return zone_points(scoring.zones, hit_percent)
    raise TypeError(f"Unsupported scoring policy: {type(scoring).__name__}")
