"""
Slingshot - Game Info

This file defines the game's metadata and provides the factory function
for creating game instances.
"""

# Game metadata
NAME = "Slingshot"
DESCRIPTION = "Drag and release to shoot themed targets before time runs out."
VERSION = "1.0.0"
AUTHOR = "Sling Team"

# CLI argument definitions
ARGUMENTS = [
    {
        'name': '--theme',
        'type': str,
        'default': None,
        'help': 'Theme id to start immediately (default: show the menu)'
    },
    {
        'name': '--duration',
        'type': int,
        'default': None,
        'help': 'Session length in seconds'
    },
    {
        'name': '--replay-speed',
        'type': float,
        'default': None,
        'help': 'Replay speed multiplier'
    },
    {
        'name': '--themes-dir',
        'type': str,
        'default': None,
        'help': 'Directory with built-in/ and custom/ theme files'
    },
]


def get_game_mode(**kwargs):
    """
    Factory function to create a SlingshotMode instance.

    Args:
        **kwargs: Game configuration options
            - theme: Theme id to start with
            - duration: Session length in seconds
            - replay_speed: Replay speed multiplier
            - themes_dir: Theme directory

    Returns:
        SlingshotMode instance
    """
    from games.Slingshot.game_mode import SlingshotMode

    # Filter out None values
    game_kwargs = {k: v for k, v in kwargs.items() if v is not None}

    # Map CLI arg names to constructor params
    param_map = {
        'theme': 'theme',
        'duration': 'duration',
        'replay_speed': 'replay_speed',
        'themes_dir': 'themes_dir',
        'width': 'width',
        'height': 'height',
    }

    constructor_kwargs = {}
    for cli_name, param_name in param_map.items():
        if cli_name in game_kwargs:
            constructor_kwargs[param_name] = game_kwargs[cli_name]

    return SlingshotMode(**constructor_kwargs)
