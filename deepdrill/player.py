"""
Player
======
The drill: per-axis movement against the tile world, digging, pickups,
bombs, the magnet and the death/respawn state machine.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from .constants import (
    AMETHYST_VALUE_MAX,
    AMETHYST_VALUE_MIN,
    BOMB_COOLDOWN,
    BOMB_RADIUS,
    BOOST_FALL_SPEED,
    MAGNET_CAPTURE_RADIUS,
    PLAYER_SIZE,
    RESPAWN_DEPTH_TILES,
    SCREEN_WIDTH,
    START_BOMBS,
    TILE,
)
from .effects import EffectSink, EffectTag, ignore_effect
from .upgrades import UpgradeEconomy
from .world import ITEM_TILES, SOLID_TILES, Tile, TileWorld

logger = logging.getLogger(__name__)

BOMB_CLEARABLE = (Tile.DIRT, Tile.ROCK, Tile.HARD_ROCK)


@dataclass(frozen=True)
class InputSnapshot:
    """Boolean action state for one tick."""

    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    action: bool = False
    toggle_help: bool = False


class Player:
    """Player-controlled drill."""

    def __init__(
        self,
        economy: UpgradeEconomy,
        on_effect: Optional[EffectSink] = None,
        rng: Optional[random.Random] = None,
        world_width: float = SCREEN_WIDTH,
    ) -> None:
        self.economy = economy
        self.on_effect = on_effect or ignore_effect
        self.rng = rng or random.Random()
        self.width = PLAYER_SIZE
        self.height = PLAYER_SIZE
        self.pos = pygame.Vector2(world_width / 2 - self.width / 2, TILE * 2)
        self.max_hp = economy.max_hp()
        self.hp = self.max_hp
        self.max_bombs = economy.max_bombs()
        self.bomb_count = min(START_BOMBS, self.max_bombs)
        self.bomb_cooldown = 0
        self.money_collected = 0
        self.is_dead = False
        self.is_fever = False
        self.magnet_targets: List[Tuple[float, float]] = []

    # ----------------------------------------------------------------------------------
    # Geometry
    # ----------------------------------------------------------------------------------
    @property
    def center(self) -> Tuple[float, float]:
        return self.pos.x + self.width / 2, self.pos.y + self.height / 2

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.pos.x), int(self.pos.y), int(self.width), int(self.height))

    def corners(self, x: float, y: float) -> List[Tuple[float, float]]:
        return [
            (x, y),
            (x + self.width, y),
            (x, y + self.height),
            (x + self.width, y + self.height),
        ]

    def overlaps(self, x: float, y: float, width: float, height: float) -> bool:
        return (
            self.pos.x < x + width
            and self.pos.x + self.width > x
            and self.pos.y < y + height
            and self.pos.y + self.height > y
        )

    # ----------------------------------------------------------------------------------
    # Update
    # ----------------------------------------------------------------------------------
    def update(self, inputs: InputSnapshot, world: TileWorld, scroll_y: float, scroll_speed: float) -> None:
        if self.is_dead:
            return

        speed = self.economy.drill_speed()
        if inputs.left:
            self.move(-speed, 0, world)
        if inputs.right:
            self.move(speed, 0, world)

        fall_speed = scroll_speed
        if inputs.down:
            fall_speed += BOOST_FALL_SPEED
        self.move(0, fall_speed, world)

        if self.bomb_cooldown > 0:
            self.bomb_cooldown -= 1
        if inputs.action:
            self.use_bomb(world)

        self.apply_magnet(world)

        # Pushed off the top of the view by the scroll.
        if self.pos.y < scroll_y - self.height:
            self.handle_death(world, scroll_y)

    def move(self, dx: float, dy: float, world: TileWorld) -> bool:
        """Try to move by ``(dx, dy)``; returns False and stays put when blocked."""
        new_x = self.pos.x + dx
        new_y = self.pos.y + dy
        corners = self.corners(new_x, new_y)

        blocked = False
        digging = False
        touching_item: Optional[Tuple[float, float, Tile]] = None

        for px, py in corners:
            tile = world.tile_at(px, py)
            if tile in SOLID_TILES:
                if self.is_fever:
                    # Side walls cannot be dug; the clamp below keeps the drill inside.
                    if world.dig(px, py):
                        self.on_effect(px, py, EffectTag.ROCK)
                else:
                    if tile == Tile.HARD_ROCK:
                        world.set_tile_at(px, py, Tile.ROCK)
                        self.on_effect(px, py, EffectTag.SPARK)
                    blocked = True
                    break
            elif tile == Tile.DIRT:
                digging = True
            elif tile in ITEM_TILES:
                touching_item = (px, py, tile)

        if blocked:
            return False

        if touching_item is not None:
            self.collect(world, *touching_item)

        if digging:
            for px, py in corners:
                if world.tile_at(px, py) == Tile.DIRT:
                    world.dig(px, py)
                    self.on_effect(px, py, EffectTag.DIRT)

        self.pos.x = new_x
        self.pos.y = new_y
        max_x = world.pixel_width - self.width
        if self.pos.x < 0:
            self.pos.x = 0
        if self.pos.x > max_x:
            self.pos.x = max_x
        return True

    def collect(self, world: TileWorld, x: float, y: float, tile: Tile) -> None:
        world.dig(x, y)
        if tile == Tile.ITEM_HEAL:
            if self.hp < self.max_hp:
                self.hp += 1
            self.on_effect(x, y, EffectTag.HEAL)
        elif tile == Tile.ITEM_BOMB:
            if self.bomb_count < self.max_bombs:
                self.bomb_count += 1
            self.on_effect(x, y, EffectTag.BOMB)
        elif tile == Tile.ITEM_AMETHYST:
            self.money_collected += self.rng.randint(AMETHYST_VALUE_MIN, AMETHYST_VALUE_MAX)
            self.on_effect(x, y, EffectTag.AMETHYST)

    # ----------------------------------------------------------------------------------
    # Abilities
    # ----------------------------------------------------------------------------------
    def use_bomb(self, world: TileWorld) -> bool:
        if self.bomb_count <= 0 or self.bomb_cooldown > 0:
            return False
        self.bomb_count -= 1
        self.bomb_cooldown = BOMB_COOLDOWN
        cx, cy = self.center
        for col, row, tx, ty in world.cells_in_radius(cx, cy, BOMB_RADIUS):
            if world.get_tile(col, row) in BOMB_CLEARABLE:
                world.set_tile(col, row, Tile.EMPTY)
                self.on_effect(tx, ty, EffectTag.EXPLOSION)
        return True

    def apply_magnet(self, world: TileWorld) -> None:
        """Collect items near the drill.

        Items inside the level-scaled detection radius are tracked in
        ``magnet_targets``; only those also inside the fixed capture radius
        are actually collected.
        """
        self.magnet_targets = []
        radius = self.economy.magnet_radius()
        if radius <= 0:
            return
        cx, cy = self.center
        for col, row, tx, ty in world.cells_in_radius(cx, cy, radius):
            tile = world.get_tile(col, row)
            if tile not in ITEM_TILES:
                continue
            if math.hypot(tx - cx, ty - cy) <= MAGNET_CAPTURE_RADIUS:
                self.collect(world, tx, ty, tile)
            else:
                self.magnet_targets.append((tx, ty))

    # ----------------------------------------------------------------------------------
    # Damage and respawn
    # ----------------------------------------------------------------------------------
    def take_damage(self, world: TileWorld, scroll_y: float) -> None:
        if self.is_fever:
            return
        self.on_effect(*self.center, EffectTag.DAMAGE)
        self.handle_death(world, scroll_y)

    def handle_death(self, world: TileWorld, scroll_y: float) -> None:
        if self.is_fever:
            return
        if self.hp > 1:
            self.hp -= 1
            self.respawn(world, scroll_y)
            logger.info("Respawned with %d hp left", self.hp)
        else:
            self.hp = 0
            self.is_dead = True
            logger.info("Drill destroyed")

    def respawn(self, world: TileWorld, scroll_y: float) -> None:
        self.pos.x = world.pixel_width / 2 - self.width / 2
        self.pos.y = scroll_y + TILE * RESPAWN_DEPTH_TILES
        cx, cy = self.center
        for r in range(-1, 2):
            for c in range(-1, 2):
                world.dig(cx + c * TILE, cy + r * TILE)
