"""Engine tuning constants.

Units are canvas pixels and frames unless noted. Velocities are pixels
per frame; the engine is stepped once per display refresh.
"""

# Session
GAME_DURATION = 30          # seconds
FRAME_LOG_INTERVAL = 30     # frames between GAME_FRAME snapshots

# Projectile ballistics (canvas y-down, vy > 0 moves up the screen)
GRAVITY = 0.3
LAUNCH_MULTIPLIER = 15
OFFSCREEN_MARGIN = 50       # projectiles survive this far past each edge

# Input translation
MIN_SHOT_DISTANCE = 20      # drags at or below this are aim-cancels
MIN_ELAPSED = 0.1           # seconds, floor for the speed divisor
SPEED_PER_FORCE = 100       # pixels/sec of drag per unit of force
MAX_FORCE = 20

# Collision
BLOCKER_HIT_MARGIN = 10
TARGET_HIT_MARGIN = 15

# Play area
SPAWN_PADDING = 60
HEADER_HEIGHT = 60
BOTTOM_PADDING = 150
WALL_PADDING = 50
SHOOTER_OFFSET = 100        # shooter sits this far above the bottom edge

# Blocker placement, as a fraction of the parent target size
BLOCKER_OFFSET = 0.5

# Replay
REPLAY_GRACE_DELAY = 1.0    # seconds after the last event before going idle

# Input logging
MOVE_LOG_SAMPLE = 10        # echo one in N move events to the debug log
