"""
Behavior and theme registries.

Built-in tables for the five stock behaviors (moving, dartboard, guarded,
floating, stationary), their backgrounds and the five stock themes. The
theme loader layers file-based definitions on top of these; anything it
fails to load falls back to the built-ins.
"""

from typing import Dict, Iterator, List, Optional

from slingshot_models import BackgroundConfig, BehaviorConfig, ThemeConfig
from sling.logging import get_logger

log = get_logger('registry')

DEFAULT_BEHAVIOR = 'moving'

# Descriptors use the external (camelCase) format so they read the same as
# behaviors.json / themes.json files.
_BEHAVIOR_DESCRIPTORS = {
    # Moving targets with uniform scoring (ducks)
    'moving': {
        'moves': True,
        'speedRange': {'min': 1, 'max': 3},
        'respawns': True,
        'scoring': {'type': 'uniform', 'basePoints': 10},
    },
    # Single stationary target with zone scoring
    'dartboard': {
        'moves': False,
        'speedRange': {'min': 0, 'max': 0},
        'respawns': False,
        'scoring': {
            'type': 'zones',
            'zones': [
                {'radiusPercent': 0.15, 'points': 50, 'name': 'bullseye'},
                {'radiusPercent': 0.35, 'points': 30, 'name': 'inner'},
                {'radiusPercent': 0.65, 'points': 20, 'name': 'middle'},
                {'radiusPercent': 1.0, 'points': 10, 'name': 'outer'},
            ],
        },
    },
    # Stationary target with a goalkeeper in front
    'guarded': {
        'moves': False,
        'speedRange': {'min': 0, 'max': 0},
        'respawns': False,
        'hasBlocker': True,
        'blockerConfig': {
            'emoji': '🧤',
            'size': 50,
            'speed': 3,
            'movementRange': 0.4,
        },
        'scoring': {'type': 'uniform', 'basePoints': 20},
    },
    # Balloons
    'floating': {
        'moves': True,
        'speedRange': {'min': 0.5, 'max': 1.5},
        'floatUp': True,
        'respawns': True,
        'scoring': {'type': 'uniform', 'basePoints': 10},
    },
    'stationary': {
        'moves': False,
        'speedRange': {'min': 0, 'max': 0},
        'respawns': True,
        'scoring': {'type': 'uniform', 'basePoints': 10},
    },
}

_BACKGROUND_DESCRIPTORS = {
    'range': {'name': 'Shooting Range', 'cssClass': 'bg-range', 'color': '#4b4f54'},
    'pond': {'name': 'Pond', 'cssClass': 'bg-pond', 'color': '#4a90a4'},
    'sky': {'name': 'Sky', 'cssClass': 'bg-sky', 'color': '#87ceeb'},
    'pub': {'name': 'Pub', 'cssClass': 'bg-pub', 'color': '#5c4033'},
    'stadium': {'name': 'Stadium', 'cssClass': 'bg-stadium', 'color': '#2e8b57'},
}

_THEME_DESCRIPTORS = {
    'shooting-range': {
        'name': 'Shooting Range',
        'shooter': '🔫',
        'target': '🎯',
        'projectile': '⚫',
        'background': 'range',
        'hitSound': 'hit',
        'missSound': 'miss',
        'targetConfig': {
            'behavior': 'stationary',
            'count': 3,
            'minCount': 3,
            'sizeRange': {'min': 40, 'max': 60},
        },
    },
    'duck-hunting': {
        'name': 'Duck Hunting',
        'shooter': '🏹',
        'target': '🦆',
        'projectile': '➡️',
        'background': 'pond',
        'hitSound': 'quack',
        'missSound': 'splash',
        'targetConfig': {
            'behavior': 'moving',
            'count': 5,
            'minCount': 3,
            'sizeRange': {'min': 35, 'max': 50},
        },
    },
    'balloon-shooting': {
        'name': 'Balloon Shooting',
        'shooter': '👆',
        'target': '🎈',
        'projectile': '📍',
        'background': 'sky',
        'hitSound': 'pop',
        'missSound': 'whoosh',
        'targetConfig': {
            'behavior': 'floating',
            'count': 6,
            'minCount': 4,
            'sizeRange': {'min': 30, 'max': 45},
        },
    },
    'dart-throwing': {
        'name': 'Dart Throwing',
        'shooter': '✋',
        'target': '🎯',
        'projectile': '🎯',
        'background': 'pub',
        'hitSound': 'thud',
        'missSound': 'clatter',
        'targetConfig': {
            'behavior': 'dartboard',
            'count': 1,
            'minCount': 1,
            'sizeRange': {'min': 120, 'max': 120},
            'fixedPosition': {'x': 0.5, 'y': 0.35},
        },
    },
    'football-shootout': {
        'name': 'Football Shootout',
        'shooter': '🦶',
        'target': '🥅',
        'projectile': '⚽',
        'background': 'stadium',
        'hitSound': 'goal',
        'missSound': 'crowd',
        'targetConfig': {
            'behavior': 'guarded',
            'count': 1,
            'minCount': 1,
            'sizeRange': {'min': 180, 'max': 180},
            'fixedPosition': {'x': 0.5, 'y': 0.25},
        },
    },
}


def default_behaviors() -> Dict[str, BehaviorConfig]:
    """Fresh copy of the built-in behavior table."""
    return {name: BehaviorConfig.model_validate(d) for name, d in _BEHAVIOR_DESCRIPTORS.items()}


def default_backgrounds() -> Dict[str, BackgroundConfig]:
    """Fresh copy of the built-in background table."""
    return {name: BackgroundConfig.model_validate(d) for name, d in _BACKGROUND_DESCRIPTORS.items()}


def default_themes() -> Dict[str, ThemeConfig]:
    """Fresh copy of the built-in theme table, keyed by theme id."""
    return {
        theme_id: ThemeConfig.model_validate({**d, 'id': theme_id})
        for theme_id, d in _THEME_DESCRIPTORS.items()
    }


class BehaviorRegistry:
    """
    Name -> BehaviorConfig lookup.

    Unknown names resolve to the ``moving`` behavior with a warning, so a
    theme that references a behavior nobody defined still plays.

    Args:
        behaviors: Initial table (default: the built-ins)
    """

    def __init__(self, behaviors: Optional[Dict[str, BehaviorConfig]] = None):
        self._behaviors: Dict[str, BehaviorConfig] = (
            dict(behaviors) if behaviors is not None else default_behaviors()
        )

    def get(self, name: str) -> BehaviorConfig:
        """Resolve a behavior name."""
        behavior = self._behaviors.get(name)
        if behavior is not None:
            return behavior
        log.warning("Unknown behavior '%s', using '%s'", name, DEFAULT_BEHAVIOR)
        fallback = self._behaviors.get(DEFAULT_BEHAVIOR)
        if fallback is None:
            fallback = default_behaviors()[DEFAULT_BEHAVIOR]
        return fallback

    def register(self, name: str, behavior: BehaviorConfig) -> None:
        """Add or replace a behavior."""
        self._behaviors[name] = behavior

    def names(self) -> List[str]:
        """Registered behavior names."""
        return list(self._behaviors)

    def __contains__(self, name: object) -> bool:
        return name in self._behaviors

    def __iter__(self) -> Iterator[str]:
        return iter(self._behaviors)


class ThemeRegistry:
    """
    Theme id -> ThemeConfig lookup, plus the background table.

    Built-in themes come first in listing order, custom themes after.
    """

    def __init__(
        self,
        themes: Optional[Dict[str, ThemeConfig]] = None,
        backgrounds: Optional[Dict[str, BackgroundConfig]] = None,
    ):
        self._themes: Dict[str, ThemeConfig] = dict(themes) if themes is not None else default_themes()
        self._backgrounds: Dict[str, BackgroundConfig] = (
            dict(backgrounds) if backgrounds is not None else default_backgrounds()
        )

    def get(self, theme_id: str) -> ThemeConfig:
        """Look up a theme.

        Raises:
            KeyError: If no theme has this id
        """
        try:
            return self._themes[theme_id]
        except KeyError:
            raise KeyError(f"Unknown theme '{theme_id}'. Available: {', '.join(self._themes)}") from None

    def register(self, theme: ThemeConfig) -> None:
        """Add or replace a theme under its id."""
        if not theme.id:
            raise ValueError(f"Theme '{theme.name}' has no id")
        self._themes[theme.id] = theme

    def all_themes(self) -> List[ThemeConfig]:
        """Every registered theme, built-ins before custom ones."""
        themes = list(self._themes.values())
        return [t for t in themes if not t.is_custom] + [t for t in themes if t.is_custom]

    def names(self) -> List[str]:
        """Registered theme ids."""
        return list(self._themes)

    def get_background(self, name: str) -> Optional[BackgroundConfig]:
        """Background by id, or None."""
        return self._backgrounds.get(name)

    def register_background(self, name: str, background: BackgroundConfig) -> None:
        """Add or replace a background."""
        self._backgrounds[name] = background

    def __contains__(self, theme_id: object) -> bool:
        return theme_id in self._themes
