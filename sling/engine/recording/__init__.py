"""
Session recording and replay.

Records a session as a timestamped event log, seals it when the session
ends and replays it without re-simulating hit outcomes.

Usage:
    from sling.engine.recording import SessionLogger, ReplayEngine

    logger = SessionLogger(clock=scheduler.now, store=SessionStore())
    ...
    replay = ReplayEngine(scheduler, logger)
    replay.start_replay()
"""

from .logger import NullSessionLogger, SessionLogger
from .snapshot import EntitySnapshot, FrameSnapshot
from .replay import ReplayEngine, ReplayState

__all__ = [
    'EntitySnapshot',
    'FrameSnapshot',
    'NullSessionLogger',
    'ReplayEngine',
    'ReplayState',
    'SessionLogger',
]
