"""
Pointer input layer.

Normalizes mouse and touch events into drag phases so game modes never
deal with raw pygame events.
"""
from games.common.input.input_event import PointerEvent, PointerPhase
from games.common.input.input_manager import InputManager

__all__ = ['InputManager', 'PointerEvent', 'PointerPhase']
