#!/usr/bin/env python3
"""
Slingshot - Standalone entry point.

Run this to play with mouse or touch input.

Usage:
    python main.py
    python main.py --theme dart-throwing
    python main.py --fullscreen
    python main.py --width 1920 --height 1080 --replay-speed 2
"""

import argparse
import os
import sys

import pygame

# Support running from any directory - add project root to path
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from games.Slingshot import config
from games.Slingshot.game_info import ARGUMENTS, get_game_mode
from games.common.game_state import GameState
from games.common.input import InputManager
from games.common.input.sources import PointerInputSource
from sling.logging import close_all_sinks, configure_logging


def main():
    """Run the Slingshot game."""
    parser = argparse.ArgumentParser(description="Slingshot Arcade")
    parser.add_argument('--width', type=int, default=config.RESOLUTION.width, help='Screen width')
    parser.add_argument('--height', type=int, default=config.RESOLUTION.height, help='Screen height')
    parser.add_argument('--fullscreen', action='store_true', help='Run fullscreen')
    parser.add_argument('--log-level', type=str, default=None, help='Log level (TRACE, DEBUG, INFO...)')
    for arg in ARGUMENTS:
        parser.add_argument(arg['name'], type=arg['type'], default=arg['default'], help=arg['help'])
    args = parser.parse_args()

    if args.log_level:
        configure_logging(level=args.log_level)

    # Initialize pygame
    pygame.init()

    # Create display
    if args.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        width, height = screen.get_size()
    else:
        width, height = args.width, args.height
        screen = pygame.display.set_mode((width, height))

    pygame.display.set_caption("Slingshot")

    input_manager = InputManager(PointerInputSource((width, height)))
    game = get_game_mode(
        theme=args.theme,
        duration=args.duration,
        replay_speed=args.replay_speed,
        themes_dir=args.themes_dir,
        width=width,
        height=height,
    )

    clock = pygame.time.Clock()
    running = True

    print("="*50)
    print("SLINGSHOT")
    print("="*50)
    print("\nDrag and release to shoot!")
    print("\nControls:")
    print("  - Drag and release to fire")
    print("  - ENTER to start, LEFT/RIGHT or 1-9 to pick a theme")
    print("  - R to replay the last session")
    print("  - ESC to stop a replay or quit")
    print("="*50)

    while running:
        dt = clock.tick(config.FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif input_manager.handle_event(event):
                continue
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE and game.state in (GameState.MENU, GameState.GAME_OVER):
                    running = False
                else:
                    game.handle_key(event.key)

        input_manager.update(dt)
        game.handle_input(input_manager.get_events())

        game.update(dt)

        game.render(screen)
        pygame.display.flip()

    close_all_sinks()
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
