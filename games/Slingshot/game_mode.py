"""
Slingshot Game Mode

Drag and release to launch projectiles at themed targets. Score as many
points as possible before the 30 second countdown runs out, then watch
the session again from its recorded log.

The game mode is the presentation layer only: it turns pointer events
into drag calls on the GameController, pumps the host scheduler and
draws the controller's frame snapshots.
"""
import random
from typing import List, Optional, Tuple

import pygame

from slingshot_models import SessionRecord, ThemeConfig, ZoneScoring
from sling.engine import GameController, ThemeLoader
from sling.engine.recording import FrameSnapshot
from sling.events import BlockEffect, Effect, HitEffect
from sling.logging import get_logger
from sling.scheduling import ClockScheduler, Scheduler
from sling.storage import SessionStore
from games.common.game_state import GameState
from games.common.input import PointerEvent, PointerPhase
from games.Slingshot import config

log = get_logger('slingshot')


class PopupEffect:
    """Floating text shown where a projectile scored or was blocked."""

    def __init__(self, x: float, y: float, text: str, color: Tuple[int, int, int],
                 lifetime: float = config.EFFECT_DURATION):
        self.x = x
        self.y = y
        self.text = text
        self.color = color
        self.lifetime = lifetime
        self.elapsed = 0.0

    def update(self, dt: float) -> bool:
        """Update effect. Returns False when effect is done."""
        self.elapsed += dt
        return self.elapsed < self.lifetime

    def render(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        progress = min(self.elapsed / self.lifetime, 1.0)
        surface = font.render(self.text, True, self.color)
        surface.set_alpha(int(255 * (1 - progress)))
        rect = surface.get_rect(center=(int(self.x), int(self.y - 40 * progress)))
        screen.blit(surface, rect)


class SlingshotMode:
    """Slingshot game mode - themed drag-to-shoot arcade.

    States:
        MENU: pick a theme (LEFT/RIGHT or 1-9, ENTER to start)
        PLAYING: drag and release to shoot
        GAME_OVER: final score and shot summary
        REPLAYING: the last session played back from its log

    Keys: R replays the last session, ESC stops a replay, M returns to
    the menu.
    """

    def __init__(
        self,
        theme: Optional[str] = None,
        width: int = config.SCREEN_WIDTH,
        height: int = config.SCREEN_HEIGHT,
        duration: int = config.GAME_DURATION,
        replay_speed: float = config.REPLAY_SPEED,
        themes_dir=config.THEMES_DIR,
        scheduler: Optional[Scheduler] = None,
        store: Optional[SessionStore] = None,
        rng: Optional[random.Random] = None,
        **kwargs,  # Accept any additional args
    ):
        """Initialize the game.

        Args:
            theme: Theme id to start immediately (None = show the menu)
            width, height: Play area size
            duration: Session length in seconds
            replay_speed: Replay time multiplier
            themes_dir: Directory with built-in/ and custom/ theme files
            scheduler: Host scheduler (default: real-time ClockScheduler)
            store: Last-session store (default: from config)
            rng: Random source for spawns
        """
        self._width = width
        self._height = height

        behaviors, themes = ThemeLoader(themes_dir).load()
        self._behaviors = behaviors
        self._themes = themes
        self._theme_ids = [t.id for t in themes.all_themes()]

        if store is None and config.PERSIST_SESSIONS:
            store = SessionStore(config.STORAGE_PATH or None)

        self._scheduler = scheduler if scheduler is not None else ClockScheduler()
        self._controller = GameController(
            self._scheduler,
            width,
            height,
            behaviors=behaviors,
            themes=themes,
            store=store,
            rng=rng,
            duration=duration,
            replay_speed=replay_speed,
            frame_log_interval=config.FRAME_LOG_INTERVAL,
            gravity=config.GRAVITY,
            on_effect=self._on_effect,
            on_game_over=self._on_game_over,
            on_replay_complete=self._on_replay_complete,
        )

        self._selected = 0
        if config.DEFAULT_THEME in self._theme_ids:
            self._selected = self._theme_ids.index(config.DEFAULT_THEME)

        self._effects: List[PopupEffect] = []
        self._notice: Optional[str] = None
        self._notice_timer = 0.0
        self._game_over = False
        self._final_score = 0
        self._summary: dict = {}

        # Fonts (initialized lazily)
        self._font: Optional[pygame.font.Font] = None
        self._font_large: Optional[pygame.font.Font] = None

        if theme is not None:
            self.start_game(theme)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> GameState:
        if self._controller.is_replaying:
            return GameState.REPLAYING
        if self._controller.is_playing:
            return GameState.PLAYING
        if self._game_over:
            return GameState.GAME_OVER
        return GameState.MENU

    @property
    def controller(self) -> GameController:
        return self._controller

    @property
    def selected_theme(self) -> ThemeConfig:
        return self._themes.get(self._theme_ids[self._selected])

    @property
    def notice(self) -> Optional[str]:
        return self._notice

    @property
    def effects(self) -> List[PopupEffect]:
        return self._effects

    def get_score(self) -> int:
        return self._controller.score

    # =========================================================================
    # Actions
    # =========================================================================

    def start_game(self, theme_id: Optional[str] = None) -> None:
        """Start a session with ``theme_id`` (default: the selected theme)."""
        if theme_id is not None:
            self._selected = self._theme_ids.index(theme_id)
        self._game_over = False
        self._effects.clear()
        self._controller.start_game(self.selected_theme)

    def start_replay(self) -> bool:
        """Replay the last session, or show a notice if there is none."""
        self._effects.clear()
        if not self._controller.start_replay():
            self._show_notice("No replay data available")
            return False
        return True

    def stop_replay(self) -> None:
        self._controller.stop_replay()

    def show_menu(self) -> None:
        self._controller.stop_replay()
        if self._controller.is_playing:
            self._controller.game_over()
        self._game_over = False

    # =========================================================================
    # Input
    # =========================================================================

    def handle_input(self, events: List[PointerEvent]) -> None:
        """Forward drag phases to the controller while playing."""
        if self.state != GameState.PLAYING:
            return
        for event in events:
            x, y = event.position.x, event.position.y
            if event.phase == PointerPhase.START:
                self._controller.handle_drag_start(x, y, event.input_type)
            elif event.phase == PointerPhase.MOVE:
                self._controller.handle_drag_move(x, y)
            elif event.phase == PointerPhase.END:
                self._controller.handle_drag_end(x, y)

    def handle_key(self, key: int) -> None:
        state = self.state
        if state == GameState.REPLAYING:
            if key == pygame.K_ESCAPE:
                self.stop_replay()
            return
        if state == GameState.PLAYING:
            return

        if key in (pygame.K_RETURN, pygame.K_SPACE):
            self.start_game()
        elif key == pygame.K_r:
            self.start_replay()
        elif key == pygame.K_m:
            self.show_menu()
        elif state == GameState.MENU:
            if key == pygame.K_LEFT:
                self._selected = (self._selected - 1) % len(self._theme_ids)
            elif key == pygame.K_RIGHT:
                self._selected = (self._selected + 1) % len(self._theme_ids)
            elif pygame.K_1 <= key <= pygame.K_9:
                index = key - pygame.K_1
                if index < len(self._theme_ids):
                    self.start_game(self._theme_ids[index])

    # =========================================================================
    # Update
    # =========================================================================

    def update(self, dt: float) -> None:
        """Pump the scheduler and age effects.

        Args:
            dt: Delta time in seconds
        """
        self._scheduler.pump()
        self._effects = [e for e in self._effects if e.update(dt)]
        if self._notice is not None:
            self._notice_timer -= dt
            if self._notice_timer <= 0:
                self._notice = None

    def _on_effect(self, effect: Effect) -> None:
        if isinstance(effect, HitEffect):
            self._effects.append(PopupEffect(effect.x, effect.y, f"+{effect.points}", config.HIT_TEXT_COLOR))
        elif isinstance(effect, BlockEffect):
            self._effects.append(PopupEffect(effect.x, effect.y, "BLOCKED!", config.BLOCK_TEXT_COLOR))

    def _on_game_over(self, score: int, record: Optional[SessionRecord]) -> None:
        self._game_over = True
        self._final_score = score
        self._summary = self._controller.logger.summarize(record) if record is not None else {}

    def _on_replay_complete(self, final_score: int) -> None:
        self._game_over = True
        self._final_score = final_score

    def _show_notice(self, text: str, seconds: float = 2.0) -> None:
        self._notice = text
        self._notice_timer = seconds

    # =========================================================================
    # Render
    # =========================================================================

    def _get_font(self) -> pygame.font.Font:
        """Get or create font."""
        if self._font is None:
            self._font = pygame.font.Font(None, 36)
        return self._font

    def _get_font_large(self) -> pygame.font.Font:
        """Get or create large font."""
        if self._font_large is None:
            self._font_large = pygame.font.Font(None, 72)
        return self._font_large

    def _background_color(self, theme: Optional[ThemeConfig]):
        if theme is not None:
            background = self._themes.get_background(theme.background)
            if background is not None and background.color:
                try:
                    return pygame.Color(background.color)
                except ValueError:
                    log.warning("Invalid background color %s", background.color)
        return config.DEFAULT_BACKGROUND

    def render(self, screen: pygame.Surface) -> None:
        """
        Render the game.

        Args:
            screen: Pygame surface to draw on
        """
        state = self.state
        if state == GameState.MENU:
            screen.fill(self._background_color(self.selected_theme))
            self._render_menu(screen)
            self._render_notice(screen)
            return

        snapshot = self._controller.snapshot()
        theme = self._controller.replay.session.game_settings.theme \
            if state == GameState.REPLAYING else self._controller.engine.state.theme
        screen.fill(self._background_color(theme))

        self._render_snapshot(screen, snapshot, theme)
        for effect in self._effects:
            effect.render(screen, self._get_font())
        if state == GameState.PLAYING and config.SHOW_AIM_LINE:
            self._render_aim_line(screen)
        self._render_hud(screen, snapshot, theme)

        if state == GameState.REPLAYING:
            self._render_replay_badge(screen)
        elif state == GameState.GAME_OVER:
            self._render_game_over(screen)
        self._render_notice(screen)

    def _render_snapshot(self, screen: pygame.Surface, snapshot: FrameSnapshot,
                         theme: Optional[ThemeConfig]) -> None:
        zones = None
        if theme is not None:
            scoring = self._behaviors.get(theme.target_config.behavior).scoring
            if isinstance(scoring, ZoneScoring):
                zones = scoring.zones

        for target in snapshot.targets:
            if not target.active:
                continue
            center = (int(target.x), int(target.y))
            radius = max(int(target.size / 2), 1)
            if zones:
                # Outermost ring first so inner rings paint over it
                for i in reversed(range(len(zones))):
                    color = config.TARGET_RING_COLORS[i % len(config.TARGET_RING_COLORS)]
                    pygame.draw.circle(screen, color, center, max(int(radius * zones[i].radius_percent), 1))
            else:
                pygame.draw.circle(screen, config.TARGET_COLOR, center, radius)
                pygame.draw.circle(screen, config.HUD_COLOR, center, radius, 2)

        for blocker in snapshot.blockers:
            if not blocker.active:
                continue
            half = blocker.size / 2
            rect = pygame.Rect(int(blocker.x - half), int(blocker.y - half), int(blocker.size), int(blocker.size))
            pygame.draw.rect(screen, config.BLOCKER_COLOR, rect, border_radius=8)

        for projectile in snapshot.projectiles:
            if projectile.active:
                pygame.draw.circle(screen, config.PROJECTILE_COLOR,
                                   (int(projectile.x), int(projectile.y)), config.PROJECTILE_RADIUS)

        sx, sy = int(snapshot.shooter_x), int(snapshot.shooter_y)
        pygame.draw.polygon(screen, config.SHOOTER_COLOR, [(sx, sy - 25), (sx - 20, sy + 15), (sx + 20, sy + 15)])

    def _render_aim_line(self, screen: pygame.Surface) -> None:
        drag = self._controller.drag
        if drag is None:
            return
        pygame.draw.line(screen, config.AIM_LINE_COLOR,
                         (int(drag.start_x), int(drag.start_y)),
                         (int(drag.current_x), int(drag.current_y)), 2)

    def _render_hud(self, screen: pygame.Surface, snapshot: FrameSnapshot,
                    theme: Optional[ThemeConfig]) -> None:
        font = self._get_font()
        score_text = font.render(f"Score: {snapshot.score}", True, config.HUD_COLOR)
        screen.blit(score_text, (10, 10))

        time_color = (255, 100, 100) if snapshot.time_left <= 5 else config.HUD_COLOR
        time_text = font.render(f"Time: {snapshot.time_left}", True, time_color)
        screen.blit(time_text, (self._width - 150, 10))

        if theme is not None:
            name_text = font.render(theme.name, True, (200, 200, 200))
            screen.blit(name_text, name_text.get_rect(midtop=(self._width // 2, 10)))

    def _render_replay_badge(self, screen: pygame.Surface) -> None:
        font = self._get_font()
        text = font.render("REPLAY  (ESC to stop)", True, config.HUD_COLOR)
        rect = text.get_rect(center=(self._width // 2, 70))
        pygame.draw.rect(screen, config.REPLAY_BADGE_COLOR, rect.inflate(30, 14), border_radius=16)
        screen.blit(text, rect)

    def _render_overlay(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 128))
        screen.blit(overlay, (0, 0))

    def _render_menu(self, screen: pygame.Surface) -> None:
        font_large = self._get_font_large()
        font = self._get_font()
        self._render_overlay(screen)

        title = font_large.render("SLINGSHOT", True, config.HUD_COLOR)
        screen.blit(title, title.get_rect(center=(self._width // 2, self._height // 4)))

        for i, theme_id in enumerate(self._theme_ids):
            theme = self._themes.get(theme_id)
            selected = i == self._selected
            label = f"{i + 1}. {theme.name}" if i < 9 else theme.name
            color = config.HIT_TEXT_COLOR if selected else config.HUD_COLOR
            text = font.render(("> " if selected else "  ") + label, True, color)
            screen.blit(text, text.get_rect(center=(self._width // 2, self._height // 4 + 80 + i * 40)))

        hint = font.render("ENTER to play  |  R to replay last session", True, (200, 200, 200))
        screen.blit(hint, hint.get_rect(center=(self._width // 2, self._height - 60)))

    def _render_game_over(self, screen: pygame.Surface) -> None:
        font_large = self._get_font_large()
        font = self._get_font()
        self._render_overlay(screen)

        title = font_large.render("TIME'S UP!", True, (255, 80, 80))
        screen.blit(title, title.get_rect(center=(self._width // 2, self._height // 2 - 80)))

        score_text = font.render(f"Final Score: {self._final_score}", True, config.HUD_COLOR)
        screen.blit(score_text, score_text.get_rect(center=(self._width // 2, self._height // 2 - 10)))

        if self._summary:
            stats = font.render(
                f"Shots: {self._summary['shots']}  Hits: {self._summary['hits']}  "
                f"Accuracy: {self._summary['accuracy']}%",
                True, (200, 200, 200),
            )
            screen.blit(stats, stats.get_rect(center=(self._width // 2, self._height // 2 + 30)))

        hint = font.render("ENTER play again  |  R replay  |  M menu", True, (200, 200, 200))
        screen.blit(hint, hint.get_rect(center=(self._width // 2, self._height // 2 + 90)))

    def _render_notice(self, screen: pygame.Surface) -> None:
        if self._notice is None:
            return
        font = self._get_font()
        text = font.render(self._notice, True, config.HUD_COLOR)
        rect = text.get_rect(center=(self._width // 2, self._height - 120))
        pygame.draw.rect(screen, (0, 0, 0), rect.inflate(24, 12), border_radius=8)
        screen.blit(text, rect)
