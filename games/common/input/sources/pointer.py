"""
Pointer Input Source - mouse and touch drags.

Turns pygame mouse-button and finger events into START/MOVE/END pointer
events. Only one drag is tracked at a time; a second finger is ignored
until the first lifts.
"""
import time
from typing import Callable, List, Optional, Tuple

import pygame

from slingshot_models import Point2D
from games.common.input.input_event import PointerEvent, PointerPhase
from games.common.input.sources.base import InputSource


class PointerInputSource(InputSource):
    """Mouse/touch drag source.

    Args:
        screen_size: Window size, used to scale normalized finger positions
        clock: Timestamp source (seconds)
    """

    def __init__(
        self,
        screen_size: Tuple[int, int],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.screen_size = screen_size
        self._clock = clock
        self._event_queue: List[PointerEvent] = []
        self._dragging = False
        self._finger_id: Optional[int] = None

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    def poll_events(self) -> List[PointerEvent]:
        """Get new pointer events since last poll."""
        events = self._event_queue.copy()
        self._event_queue.clear()
        return events

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Convert mouse and finger events; everything else is left alone."""
        # Touch also generates emulated mouse events; use the finger ones
        if getattr(event, 'touch', False):
            return event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEMOTION, pygame.MOUSEBUTTONUP)

        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button != 1 or self._dragging:
                return False
            self._dragging = True
            self._push(PointerPhase.START, event.pos, 'mouse')
            return True
        if event.type == pygame.MOUSEMOTION:
            if not self._dragging or self._finger_id is not None:
                return False
            self._push(PointerPhase.MOVE, event.pos, 'mouse')
            return True
        if event.type == pygame.MOUSEBUTTONUP:
            if event.button != 1 or not self._dragging or self._finger_id is not None:
                return False
            self._dragging = False
            self._push(PointerPhase.END, event.pos, 'mouse')
            return True

        if event.type == pygame.FINGERDOWN:
            if self._dragging:
                return True
            self._dragging = True
            self._finger_id = event.finger_id
            self._push(PointerPhase.START, self._finger_pos(event), 'touch')
            return True
        if event.type == pygame.FINGERMOTION:
            if event.finger_id != self._finger_id:
                return True
            self._push(PointerPhase.MOVE, self._finger_pos(event), 'touch')
            return True
        if event.type == pygame.FINGERUP:
            if event.finger_id != self._finger_id:
                return True
            self._dragging = False
            self._finger_id = None
            self._push(PointerPhase.END, self._finger_pos(event), 'touch')
            return True
        return False

    def clear(self) -> None:
        """Clear the event queue and forget any drag in progress."""
        self._event_queue.clear()
        self._dragging = False
        self._finger_id = None

    def _finger_pos(self, event: pygame.event.Event) -> Tuple[float, float]:
        width, height = self.screen_size
        return event.x * width, event.y * height

    def _push(self, phase: PointerPhase, pos, input_type: str) -> None:
        x, y = pos
        self._event_queue.append(PointerEvent(
            position=Point2D(x=float(x), y=float(y)),
            timestamp=self._clock(),
            phase=phase,
            input_type=input_type,
        ))
