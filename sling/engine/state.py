"""
Session state owned by one simulation engine.

Each live session and each replay owns its own SessionState; nothing is
shared between them.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from slingshot_models import ThemeConfig
from sling.engine.constants import GAME_DURATION
from sling.engine.entities import Blocker, Projectile, Target


@dataclass
class SessionState:
    """Authoritative mutable state of one game session.

    Attributes:
        score: Non-decreasing score
        time_left: Seconds remaining on the countdown
        is_playing: Whether the session is accepting input and ticking
        theme: Theme the session was started with
        targets, projectiles, blockers: Entity collections in spawn order
        frame_count: Frames advanced since start
    """
    score: int = 0
    time_left: int = GAME_DURATION
    is_playing: bool = False
    theme: Optional[ThemeConfig] = None
    targets: List[Target] = field(default_factory=list)
    projectiles: List[Projectile] = field(default_factory=list)
    blockers: List[Blocker] = field(default_factory=list)
    frame_count: int = 0
    _next_target_id: int = 0
    _next_projectile_id: int = 0
    _next_blocker_id: int = 0

    def reset(self, theme: Optional[ThemeConfig], duration: int = GAME_DURATION) -> None:
        """Clear everything for a new session."""
        self.score = 0
        self.time_left = duration
        self.is_playing = True
        self.theme = theme
        self.targets = []
        self.projectiles = []
        self.blockers = []
        self.frame_count = 0
        self._next_target_id = 0
        self._next_projectile_id = 0
        self._next_blocker_id = 0

    def next_target_id(self) -> int:
        self._next_target_id += 1
        return self._next_target_id

    def next_projectile_id(self) -> int:
        self._next_projectile_id += 1
        return self._next_projectile_id

    def next_blocker_id(self) -> int:
        self._next_blocker_id += 1
        return self._next_blocker_id

    def reserve_ids(self, target_id: int = 0, projectile_id: int = 0, blocker_id: int = 0) -> None:
        """Keep id counters ahead of ids restored from a log."""
        self._next_target_id = max(self._next_target_id, target_id)
        self._next_projectile_id = max(self._next_projectile_id, projectile_id)
        self._next_blocker_id = max(self._next_blocker_id, blocker_id)

    def find_target(self, target_id: int) -> Optional[Target]:
        for target in self.targets:
            if target.id == target_id:
                return target
        return None

    def find_projectile(self, projectile_id: int) -> Optional[Projectile]:
        for projectile in self.projectiles:
            if projectile.id == projectile_id:
                return projectile
        return None

    def find_blocker(self, blocker_id: int) -> Optional[Blocker]:
        for blocker in self.blockers:
            if blocker.id == blocker_id:
                return blocker
        return None

    def blocker_for(self, target_id: int) -> Optional[Blocker]:
        for blocker in self.blockers:
            if blocker.parent_id == target_id:
                return blocker
        return None

    @property
    def active_respawning_targets(self) -> int:
        """Targets that count toward the theme's minimum."""
        return sum(1 for t in self.targets if t.active and t.respawns)

    def cleanup(self) -> None:
        """Drop spent projectiles, replaced targets and orphaned blockers."""
        self.projectiles = [p for p in self.projectiles if p.active]
        self.targets = [t for t in self.targets if t.active or not t.respawns]
        self.blockers = [b for b in self.blockers if b.active]
