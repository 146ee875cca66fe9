"""
Deep Drill
==========
How to run: pip install -e .; python -m deepdrill
Controls: Left/Right or A/D to steer, Down or S to boost, Space/Enter to drop a bomb.
Shop: Up/Down or W/S to pick an upgrade, Space/Enter to buy or start digging.
Hotkeys: 0 = Toggle controls help, ESC = Quit.
Lose condition: The drill runs out of battery (hp) after being scrolled off the top or hit by moles.
"""
from __future__ import annotations

import logging
import math
import sys
from dataclasses import replace
from enum import Enum, auto
from typing import List, Optional, Tuple

import pygame

from .constants import (
    COLOR_BACKGROUND,
    COLOR_CORE_MAGMA,
    COLOR_DIRT,
    COLOR_EARTH_CORE,
    COLOR_EARTH_START,
    COLOR_HARD_ROCK,
    COLOR_HIGHLIGHT,
    COLOR_ITEM_AMETHYST,
    COLOR_ITEM_BOMB,
    COLOR_ITEM_HEAL,
    COLOR_MAGNET,
    COLOR_MOLE,
    COLOR_PLAYER,
    COLOR_PLAYER_FEVER,
    COLOR_ROCK,
    COLOR_SKY_TOP,
    COLOR_TEXT,
    COLOR_TILE_OUTLINE,
    FPS,
    LOG_LEVEL,
    SAVE_DIR,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TILE,
    VISIBLE_ROWS,
    env_seed,
)
from .effects import ParticleSystem
from .player import InputSnapshot
from .simulation import Simulation
from .storage import JsonSaveStore, SaveStore
from .upgrades import UpgradeEconomy, UpgradeKind
from .world import Tile

logger = logging.getLogger(__name__)

FIXED_DT = 1.0 / FPS
GRADIENT_MAX_DEPTH = 1000
GAME_OVER_INPUT_DELAY = 30

TILE_COLORS = {
    Tile.DIRT: COLOR_DIRT,
    Tile.ROCK: COLOR_ROCK,
    Tile.HARD_ROCK: COLOR_HARD_ROCK,
}
ITEM_COLORS = {
    Tile.ITEM_HEAL: COLOR_ITEM_HEAL,
    Tile.ITEM_BOMB: COLOR_ITEM_BOMB,
    Tile.ITEM_AMETHYST: COLOR_ITEM_AMETHYST,
}


class GameState(Enum):
    """High level game states."""

    SHOP = auto()
    RUNNING = auto()
    GAME_OVER = auto()


def lerp_color(c1: Tuple[int, int, int], c2: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    t = max(0.0, min(1.0, t))
    return (
        round(c1[0] + (c2[0] - c1[0]) * t),
        round(c1[1] + (c2[1] - c1[1]) * t),
        round(c1[2] + (c2[2] - c1[2]) * t),
    )


def depth_gradient(score: int) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Top and bottom background colors for the current depth."""
    progress = min(score / GRADIENT_MAX_DEPTH, 1.0)
    if progress < 0.5:
        return COLOR_SKY_TOP, lerp_color(COLOR_BACKGROUND, COLOR_EARTH_START, progress * 2)
    p = (progress - 0.5) * 2
    return (
        lerp_color(COLOR_EARTH_START, COLOR_EARTH_CORE, p),
        lerp_color(COLOR_EARTH_CORE, COLOR_CORE_MAGMA, p),
    )


def snapshot_from_keys(pressed) -> InputSnapshot:
    return InputSnapshot(
        left=bool(pressed[pygame.K_LEFT] or pressed[pygame.K_a]),
        right=bool(pressed[pygame.K_RIGHT] or pressed[pygame.K_d]),
        up=bool(pressed[pygame.K_UP] or pressed[pygame.K_w]),
        down=bool(pressed[pygame.K_DOWN] or pressed[pygame.K_s]),
        action=bool(pressed[pygame.K_SPACE] or pressed[pygame.K_RETURN]),
        toggle_help=bool(pressed[pygame.K_0] or pressed[pygame.K_KP0]),
    )


# --------------------------------------------------------------------------------------
# HUD and rendering helpers
# --------------------------------------------------------------------------------------
class HUD:
    """Renders textual information and overlays."""

    def __init__(self, screen: pygame.Surface) -> None:
        self.font_small = pygame.font.Font(None, 22)
        self.font_large = pygame.font.Font(None, 30)
        self.font_title = pygame.font.Font(None, 56)
        self.screen = screen

    def draw(self, game: 'Game') -> None:
        sim = game.sim
        if sim is None:
            return
        player = sim.player
        text = self.font_large.render(f"Depth: {sim.score}m", True, COLOR_TEXT)
        self.screen.blit(text, (10, 12))
        info = f"Bombs {player.bomb_count}/{player.max_bombs} | Gems {player.money_collected}"
        text = self.font_small.render(info, True, COLOR_TEXT)
        self.screen.blit(text, (10, 38))

        for i in range(player.hp):
            cx = SCREEN_WIDTH - 20 - (player.hp - i) * 25 + 12
            body = pygame.Rect(0, 0, 14, 22)
            body.center = (cx, 28)
            pygame.draw.rect(self.screen, COLOR_ITEM_HEAL, body, border_radius=3)
            pygame.draw.rect(self.screen, COLOR_TEXT, pygame.Rect(cx - 3, body.top - 3, 6, 3))

        if game.show_controls:
            lines = ["Move: Arrows / WASD", "Boost: Down / S", "Bomb: Space", "Toggle help: 0"]
            for i, line in enumerate(lines):
                hint = self.font_small.render(line, True, COLOR_TEXT)
                hint.set_alpha(180)
                self.screen.blit(hint, (10, 62 + i * 18))

        if sim.is_fever:
            overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
            alpha = int((abs(math.sin(pygame.time.get_ticks() / 100)) * 0.3 + 0.1) * 255)
            overlay.fill((*COLOR_PLAYER_FEVER, alpha))
            self.screen.blit(overlay, (0, 0))
            banner = self.font_title.render("FEVER!!", True, COLOR_TEXT)
            self.screen.blit(banner, banner.get_rect(center=(SCREEN_WIDTH // 2, 100)))

    def draw_shop(self, game: 'Game') -> None:
        self.screen.fill(COLOR_BACKGROUND)
        title = self.font_title.render("DEEP DRILL", True, COLOR_HIGHLIGHT)
        self.screen.blit(title, title.get_rect(center=(SCREEN_WIDTH // 2, 80)))
        money = self.font_large.render(f"Gems: {game.economy.money}", True, COLOR_TEXT)
        self.screen.blit(money, money.get_rect(center=(SCREEN_WIDTH // 2, 130)))

        start_y = 190
        for idx, label in enumerate(game.menu_labels()):
            color = COLOR_HIGHLIGHT if idx == game.menu_index else COLOR_TEXT
            text = self.font_large.render(label, True, color)
            rect = text.get_rect(center=(SCREEN_WIDTH // 2, start_y + idx * 40))
            if idx == game.menu_index:
                pygame.draw.rect(self.screen, COLOR_HIGHLIGHT, rect.inflate(24, 12), width=2, border_radius=8)
            self.screen.blit(text, rect)

        hint = self.font_small.render("Up/Down to choose, Space/Enter to confirm", True, COLOR_TEXT)
        self.screen.blit(hint, hint.get_rect(center=(SCREEN_WIDTH // 2, SCREEN_HEIGHT - 40)))

    def draw_game_over(self, game: 'Game') -> None:
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 216))
        self.screen.blit(overlay, (0, 0))
        result = game.sim.result if game.sim else None
        if result is None:
            return

        title = self.font_title.render("GAME OVER", True, COLOR_PLAYER)
        self.screen.blit(title, title.get_rect(center=(SCREEN_WIDTH // 2, 100)))
        lines = [f"Final Depth: {result.depth}m", f"Gems collected: {result.money}"]
        for i, line in enumerate(lines):
            text = self.font_large.render(line, True, COLOR_TEXT)
            self.screen.blit(text, text.get_rect(center=(SCREEN_WIDTH // 2, 150 + i * 30)))

        header = self.font_large.render("--- High Scores ---", True, COLOR_HIGHLIGHT)
        self.screen.blit(header, header.get_rect(center=(SCREEN_WIDTH // 2, 240)))
        for i, score in enumerate(result.high_scores):
            color = COLOR_PLAYER if score == result.depth else COLOR_TEXT
            text = self.font_large.render(f"{i + 1}. {score}m", True, color)
            self.screen.blit(text, text.get_rect(center=(SCREEN_WIDTH // 2, 280 + i * 30)))

        prompt = self.font_small.render("Press Space to return to the shop", True, COLOR_TEXT)
        self.screen.blit(prompt, prompt.get_rect(center=(SCREEN_WIDTH // 2, 460)))


# --------------------------------------------------------------------------------------
# Main Game class
# --------------------------------------------------------------------------------------
class Game:
    """Main game loop and state management."""

    def __init__(self, store: Optional[SaveStore] = None, seed: Optional[int] = None) -> None:
        pygame.init()
        pygame.display.set_caption("Deep Drill")
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.store = store if store is not None else JsonSaveStore(SAVE_DIR)
        self.economy = UpgradeEconomy(self.store)
        self.seed = seed
        self.hud = HUD(self.screen)
        self.particles = ParticleSystem()
        self.sim: Optional[Simulation] = None
        self.game_state = GameState.SHOP
        self.menu_index = 0
        self.show_controls = True
        self.last_help_state = False
        self.waiting_for_release = False
        self.game_over_ticks = 0
        self.accumulator = 0.0
        self.running = True

    # ----------------------------------------------------------------------------------
    def menu_labels(self) -> List[str]:
        labels = []
        for kind in UpgradeKind:
            data = self.economy.config(kind)
            level = self.economy.get_level(kind)
            cost = self.economy.get_cost(kind)
            price = "MAX" if cost == math.inf else f"{cost}g"
            labels.append(f"{data['name']} Lv{level}/{data['max_level']}  {price}")
        labels.append("Start Digging")
        return labels

    def start_run(self) -> None:
        self.particles.clear()
        self.sim = Simulation(self.economy, self.store, seed=self.seed, on_effect=self.particles)
        # The key that confirmed the menu is still down on the first tick.
        self.waiting_for_release = True
        self.game_state = GameState.RUNNING

    def confirm_menu(self) -> None:
        kinds = list(UpgradeKind)
        if self.menu_index < len(kinds):
            kind = kinds[self.menu_index]
            if not self.economy.buy(kind):
                logger.debug("Cannot buy %s with %d gold", kind.value, self.economy.money)
        else:
            self.start_run()

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.accumulator += dt
            self.handle_events()
            while self.accumulator >= FIXED_DT:
                self.update()
                self.accumulator -= FIXED_DT
            self.draw()
        pygame.quit()
        sys.exit()

    def handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                    continue
                confirm = event.key in (pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER)
                if self.game_state == GameState.SHOP:
                    count = len(UpgradeKind) + 1
                    if event.key in (pygame.K_UP, pygame.K_w):
                        self.menu_index = (self.menu_index - 1) % count
                    elif event.key in (pygame.K_DOWN, pygame.K_s):
                        self.menu_index = (self.menu_index + 1) % count
                    elif confirm:
                        self.confirm_menu()
                elif self.game_state == GameState.GAME_OVER:
                    if confirm and self.game_over_ticks >= GAME_OVER_INPUT_DELAY:
                        self.game_state = GameState.SHOP

    # ----------------------------------------------------------------------------------
    def update(self) -> None:
        self.particles.update()
        if self.game_state == GameState.GAME_OVER:
            self.game_over_ticks += 1
            return
        if self.game_state != GameState.RUNNING or self.sim is None:
            return

        inputs = snapshot_from_keys(pygame.key.get_pressed())
        if inputs.toggle_help and not self.last_help_state:
            self.show_controls = not self.show_controls
        self.last_help_state = inputs.toggle_help

        if self.waiting_for_release:
            if inputs.action:
                inputs = replace(inputs, action=False)
            else:
                self.waiting_for_release = False

        self.sim.update(inputs)
        if not self.sim.running:
            self.game_state = GameState.GAME_OVER
            self.game_over_ticks = 0

    # ----------------------------------------------------------------------------------
    def draw(self) -> None:
        if self.game_state == GameState.SHOP or self.sim is None:
            self.hud.draw_shop(self)
            pygame.display.flip()
            return

        self.draw_background()
        self.draw_tiles()
        self.draw_moles()
        self.draw_particles()
        if self.game_state == GameState.RUNNING:
            self.draw_player()
        self.hud.draw(self)
        if self.game_state == GameState.GAME_OVER:
            self.hud.draw_game_over(self)
        pygame.display.flip()

    def draw_background(self) -> None:
        top, bottom = depth_gradient(self.sim.score)
        for y in range(SCREEN_HEIGHT):
            pygame.draw.line(self.screen, lerp_color(top, bottom, y / SCREEN_HEIGHT), (0, y), (SCREEN_WIDTH, y))

    def draw_tiles(self) -> None:
        sim = self.sim
        world = sim.world
        start_row = int(sim.scroll_y // TILE)
        for row in range(start_row, start_row + VISIBLE_ROWS + 1):
            screen_y = row * TILE - sim.scroll_y
            for col in range(world.cols):
                tile = world.get_tile(col, row)
                if tile == Tile.EMPTY:
                    continue
                rect = pygame.Rect(col * TILE, int(screen_y), TILE, TILE)
                if tile in TILE_COLORS:
                    pygame.draw.rect(self.screen, TILE_COLORS[tile], rect)
                    pygame.draw.rect(self.screen, COLOR_TILE_OUTLINE, rect, 1)
                    if tile == Tile.HARD_ROCK:
                        pygame.draw.line(self.screen, COLOR_TILE_OUTLINE, rect.topleft, rect.bottomright, 2)
                elif tile in ITEM_COLORS:
                    pygame.draw.circle(self.screen, ITEM_COLORS[tile], rect.center, TILE // 3)

    def draw_moles(self) -> None:
        for mole in self.sim.moles.moles:
            rect = mole.rect.move(0, -int(self.sim.scroll_y))
            pygame.draw.ellipse(self.screen, COLOR_MOLE, rect)
            pygame.draw.ellipse(self.screen, COLOR_TEXT, rect, 1)
            eye_offset = 4 if mole.vx > 0 else -4
            pygame.draw.circle(self.screen, (0, 0, 0), (rect.centerx + eye_offset, rect.centery - 4), 3)
            pygame.draw.circle(self.screen, (243, 156, 18), (rect.centerx + int(eye_offset * 1.5), rect.centery + 2), 4)

    def draw_particles(self) -> None:
        for particle in self.particles.particles:
            alpha = max(0, int(255 * (particle.life / particle.max_life)))
            size = max(1, int(particle.size))
            surf = pygame.Surface((size, size), pygame.SRCALPHA)
            surf.fill((*particle.color, alpha))
            self.screen.blit(surf, (int(particle.pos.x), int(particle.pos.y - self.sim.scroll_y)))

    def draw_player(self) -> None:
        player = self.sim.player
        rect = player.rect.move(0, -int(self.sim.scroll_y))
        cx, cy = rect.center
        for tx, ty in player.magnet_targets:
            pygame.draw.line(self.screen, COLOR_MAGNET, (cx, cy), (int(tx), int(ty - self.sim.scroll_y)), 1)
        color = COLOR_PLAYER_FEVER if player.is_fever else COLOR_PLAYER
        pygame.draw.rect(self.screen, color, rect, border_radius=4)
        tip = [(rect.left + 4, rect.bottom), (rect.right - 4, rect.bottom), (rect.centerx, rect.bottom + 8)]
        pygame.draw.polygon(self.screen, COLOR_ROCK, tip)


# --------------------------------------------------------------------------------------
# Entry point
# --------------------------------------------------------------------------------------
def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    game = Game(seed=env_seed())
    game.run()


if __name__ == "__main__":
    main()
