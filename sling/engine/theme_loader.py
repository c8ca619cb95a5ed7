"""
Theme Loader - external theme and behavior definitions.

Loads behaviors, backgrounds and themes from YAML (or JSON, which YAML
parses too) and validates them with the Pydantic models. Every file is
optional: a missing or invalid file is logged as a warning and the
built-in table is used instead, so a broken theme directory never stops
a game from starting.

Directory layout:
    themes/
        built-in/
            behaviors.yaml      # name -> behavior descriptor
            backgrounds.yaml    # name -> background descriptor
            themes.yaml         # theme id -> theme descriptor
        custom/
            manifest.yaml       # optional: {themes: [file, ...]}
            space-invaders.yaml # one theme per file, id = file stem

Examples:
    >>> loader = ThemeLoader(Path("themes"))
    >>> behaviors, themes = loader.load()
    >>> themes.get("duck-hunting").name
    'Duck Hunting'
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from slingshot_models import BackgroundConfig, BehaviorConfig, ThemeConfig
from sling.engine.registry import (
    BehaviorRegistry,
    ThemeRegistry,
    default_backgrounds,
    default_behaviors,
    default_themes,
)
from sling.logging import get_logger

log = get_logger('theme_loader')

THEME_SUFFIXES = ('.yaml', '.yml', '.json')


class ThemeLoader:
    """Loads theme data from a directory with fallback to built-ins.

    Attributes:
        themes_dir: Root directory containing ``built-in/`` and ``custom/``
    """

    def __init__(self, themes_dir: Optional[Path] = None):
        self.themes_dir = Path(themes_dir) if themes_dir is not None else None

    @property
    def built_in_dir(self) -> Optional[Path]:
        return self.themes_dir / 'built-in' if self.themes_dir else None

    @property
    def custom_dir(self) -> Optional[Path]:
        return self.themes_dir / 'custom' if self.themes_dir else None

    def load(self) -> Tuple[BehaviorRegistry, ThemeRegistry]:
        """Load everything and build the registries."""
        behaviors = self.load_behaviors()
        backgrounds = self.load_backgrounds()
        themes = self.load_built_in_themes()

        theme_registry = ThemeRegistry(themes, backgrounds)
        for theme, background in self.discover_custom_themes():
            if background is not None:
                theme_registry.register_background(theme.background, background)
            theme_registry.register(theme)

        log.info(
            "Loaded %d behaviors, %d themes",
            len(behaviors), len(theme_registry.names()),
        )
        return BehaviorRegistry(behaviors), theme_registry

    def load_behaviors(self) -> Dict[str, BehaviorConfig]:
        """Behavior table from ``built-in/behaviors``, or the defaults."""
        table = self._load_table('behaviors', BehaviorConfig)
        if table is None:
            return default_behaviors()
        return table

    def load_backgrounds(self) -> Dict[str, BackgroundConfig]:
        """Background table from ``built-in/backgrounds``, or the defaults."""
        table = self._load_table('backgrounds', BackgroundConfig)
        if table is None:
            return default_backgrounds()
        return table

    def load_built_in_themes(self) -> Dict[str, ThemeConfig]:
        """Theme table from ``built-in/themes``, or the defaults."""
        raw = self._read_mapping(self._find(self.built_in_dir, 'themes'))
        if raw is None:
            return default_themes()
        try:
            return {
                theme_id: ThemeConfig.model_validate({**descriptor, 'id': theme_id})
                for theme_id, descriptor in raw.items()
            }
        except (ValidationError, TypeError) as e:
            log.warning("Invalid built-in themes, using defaults: %s", e)
            return default_themes()

    def discover_custom_themes(self) -> List[Tuple[ThemeConfig, Optional[BackgroundConfig]]]:
        """Custom themes listed in the manifest, or every theme file in ``custom/``."""
        custom_dir = self.custom_dir
        if custom_dir is None or not custom_dir.is_dir():
            return []

        manifest_path = self._find(custom_dir, 'manifest')
        if manifest_path is not None:
            manifest = self._read_mapping(manifest_path) or {}
            files = [custom_dir / name for name in manifest.get('themes', [])]
        else:
            files = sorted(
                p for p in custom_dir.iterdir()
                if p.suffix in THEME_SUFFIXES and p.stem != 'manifest'
            )

        loaded = []
        for path in files:
            result = self.load_custom_theme(path)
            if result is not None:
                loaded.append(result)
        log.debug("Loaded custom themes: %s", [t.name for t, _ in loaded])
        return loaded

    def load_custom_theme(self, path: Path) -> Optional[Tuple[ThemeConfig, Optional[BackgroundConfig]]]:
        """Load one custom theme file; the theme id is the file stem."""
        raw = self._read_mapping(path)
        if raw is None:
            return None
        try:
            theme = ThemeConfig.model_validate({**raw, 'id': path.stem, 'isCustom': True})
            background = None
            if raw.get('customBackground'):
                background = BackgroundConfig.model_validate(raw['customBackground'])
        except ValidationError as e:
            log.warning("Invalid custom theme %s: %s", path.name, e)
            return None
        return theme, background

    # -------------------------------------------------------------------------

    @staticmethod
    def _find(directory: Optional[Path], stem: str) -> Optional[Path]:
        """First existing ``stem`` file with a supported suffix."""
        if directory is None:
            return None
        for suffix in THEME_SUFFIXES:
            path = directory / f"{stem}{suffix}"
            if path.exists():
                return path
        return None

    @staticmethod
    def _read_mapping(path: Optional[Path]) -> Optional[Dict[str, Any]]:
        """Parse a YAML/JSON mapping, or None on any failure."""
        if path is None:
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            log.warning("Failed to load %s: %s", path, e)
            return None
        if not isinstance(data, dict):
            log.warning("Expected a mapping in %s, got %s", path, type(data).__name__)
            return None
        return data

    def _load_table(self, stem: str, model) -> Optional[Dict[str, Any]]:
        """Validate a name -> descriptor mapping file."""
        path = self._find(self.built_in_dir, stem)
        if path is None:
            log.debug("No %s file, using defaults", stem)
            return None
        raw = self._read_mapping(path)
        if raw is None:
            log.warning("Failed to load %s, using defaults", stem)
            return None
        try:
            return {name: model.model_validate(d) for name, d in raw.items()}
        except ValidationError as e:
            log.warning("Invalid %s in %s, using defaults: %s", stem, path, e)
            return None
