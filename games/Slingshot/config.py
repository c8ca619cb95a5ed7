"""
Slingshot - Configuration loader.

Loads settings from .env file with sensible defaults.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

from slingshot_models import Resolution

GAME_DIR = Path(__file__).parent

# Load .env from game directory
_env_path = GAME_DIR / '.env'
load_dotenv(_env_path)


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


def _get_path(key: str, default: Path) -> Path:
    """Get a path from environment, relative to the game directory."""
    value = os.getenv(key)
    if not value:
        return default
    path = Path(value).expanduser()
    return path if path.is_absolute() else GAME_DIR / path


# Display
SCREEN_WIDTH = _get_int('SCREEN_WIDTH', 1280)
SCREEN_HEIGHT = _get_int('SCREEN_HEIGHT', 720)
RESOLUTION = Resolution(width=SCREEN_WIDTH, height=SCREEN_HEIGHT)
FPS = _get_int('FPS', 60)

# Session
GAME_DURATION = _get_int('GAME_DURATION', 30)  # seconds
DEFAULT_THEME = os.getenv('DEFAULT_THEME', 'duck-hunting')

# Physics
GRAVITY = _get_float('GRAVITY', 0.3)  # pixels/frame^2
FRAME_LOG_INTERVAL = _get_int('FRAME_LOG_INTERVAL', 30)  # frames between snapshots

# Replay
REPLAY_SPEED = _get_float('REPLAY_SPEED', 1.0)

# Content and storage
THEMES_DIR = _get_path('THEMES_DIR', GAME_DIR / 'themes')
# Empty = platform data directory (see sling.storage)
STORAGE_PATH = os.getenv('SLING_STORAGE_PATH', '')
PERSIST_SESSIONS = _get_bool('PERSIST_SESSIONS', True)

# Visual
PROJECTILE_RADIUS = _get_int('PROJECTILE_RADIUS', 10)
EFFECT_DURATION = _get_float('EFFECT_DURATION', 0.8)  # seconds a popup stays
SHOW_AIM_LINE = _get_bool('SHOW_AIM_LINE', True)

# Colors (RGB)
HUD_COLOR = (255, 255, 255)
TARGET_COLOR = (220, 60, 60)
TARGET_RING_COLORS = [
    (230, 40, 40),    # bullseye
    (250, 250, 250),  # inner
    (40, 40, 40),     # middle
    (30, 120, 200),   # outer
]
BLOCKER_COLOR = (255, 200, 40)
PROJECTILE_COLOR = (30, 30, 30)
SHOOTER_COLOR = (90, 60, 30)
AIM_LINE_COLOR = (255, 255, 255)
HIT_TEXT_COLOR = (255, 230, 0)
BLOCK_TEXT_COLOR = (255, 90, 90)
REPLAY_BADGE_COLOR = (156, 39, 176)
DEFAULT_BACKGROUND = (75, 79, 84)
