"""
Shared pieces for the pygame front ends: the standard GameState enum and
the pointer input layer.
"""

from games.common.game_state import GameState
from games.common.input import InputManager, PointerEvent, PointerPhase

__all__ = [
    'GameState',
    'InputManager',
    'PointerEvent',
    'PointerPhase',
]
