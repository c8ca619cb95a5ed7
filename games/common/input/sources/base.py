"""
Base Input Source - Abstract interface for pointer backends.
"""
from abc import ABC, abstractmethod
from typing import List

import pygame

from games.common.input.input_event import PointerEvent


class InputSource(ABC):
    """Abstract base class for input sources."""

    @abstractmethod
    def handle_event(self, event: pygame.event.Event) -> bool:
        """Convert a pygame event, returning True if it was consumed."""
        pass

    @abstractmethod
    def poll_events(self) -> List[PointerEvent]:
        """Poll for new pointer events.

        Returns:
            List of PointerEvent objects since last poll.
        """
        pass

    def update(self, dt: float) -> None:
        """Per-frame hook for sources that poll hardware."""
        pass
