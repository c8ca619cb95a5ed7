"""Common GameState enum for the slingshot front end.

Games can have additional internal states, but must map them to these
standard states via the `state` property.
"""
from enum import Enum


class GameState(Enum):
    """Standard game states.

    States:
        MENU: Choosing a theme, nothing running
        PLAYING: Live session in progress
        REPLAYING: Last session being replayed
        GAME_OVER: Session ended, final score shown

    Usage in game_mode.py:
        from games.common.game_state import GameState

        class MyGameMode:
            @property
            def state(self) -> GameState:
                if self._controller.is_replaying:
                    return GameState.REPLAYING
                ...
    """
    MENU = "menu"
    PLAYING = "playing"
    REPLAYING = "replaying"
    GAME_OVER = "game_over"
