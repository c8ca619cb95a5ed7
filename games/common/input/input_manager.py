"""
Input Manager - Collects pointer events from an input source.
"""
from typing import List, Optional

import pygame

from games.common.input.input_event import PointerEvent
from games.common.input.sources.base import InputSource


class InputManager:
    """Manages an input source and collects its events.

    The main loop feeds every pygame event through ``handle_event``; the
    game mode reads normalized pointer events from ``get_events``.
    """

    def __init__(self, source: Optional[InputSource] = None):
        """Initialize with an optional input source."""
        self._source = source

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Offer a pygame event to the source.

        Returns:
            True if the source consumed it
        """
        if self._source is None:
            return False
        return self._source.handle_event(event)

    def update(self, dt: float) -> None:
        """Update the active input source."""
        if self._source is not None:
            self._source.update(dt)

    def get_events(self) -> List[PointerEvent]:
        """Get collected events since last poll."""
        if self._source is None:
            return []
        return self._source.poll_events()

