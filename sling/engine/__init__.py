"""
Slingshot game engine.

Simulation, collision resolution, input translation and the controller
that drives them. Session recording and replay live in
``sling.engine.recording``.
"""

from sling.engine.registry import BehaviorRegistry, ThemeRegistry
from sling.engine.theme_loader import ThemeLoader
from sling.engine.entities import Blocker, Projectile, Target
from sling.engine.state import SessionState
from sling.engine.shot import launch_velocity, translate_drag
from sling.engine.scoring import calculate_points, zone_points
from sling.engine.collision import CollisionResolver
from sling.engine.simulation import SimulationEngine
from sling.engine.controller import GameController

__all__ = [
    'BehaviorRegistry',
    'Blocker',
    'CollisionResolver',
    'GameController',
    'Projectile',
    'SessionState',
    'SimulationEngine',
    'Target',
    'ThemeLoader',
    'ThemeRegistry',
    'calculate_points',
    'launch_velocity',
    'translate_drag',
    'zone_points',
]
