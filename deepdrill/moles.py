"""
Moles
=====
Burrowing enemies that cross the screen horizontally below the view.
"""
from __future__ import annotations

import logging
import random
from typing import List, Optional

import pygame

from .constants import (
    MOLE_DESPAWN_MARGIN,
    MOLE_MIN_SPEED,
    MOLE_SIZE,
    MOLE_SPAWN_BASE_CHANCE,
    MOLE_SPAWN_CHANCE_PER_DEPTH,
    MOLE_SPAWN_OFFSET,
    MOLE_SPEED_SPREAD,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
)
from .effects import EffectSink, EffectTag, ignore_effect
from .player import Player
from .world import TileWorld

logger = logging.getLogger(__name__)


class Mole:
    """A single mole walking in a straight line."""

    def __init__(self, x: float, y: float, vx: float) -> None:
        self.pos = pygame.Vector2(x, y)
        self.vx = vx
        self.width = MOLE_SIZE
        self.height = MOLE_SIZE
        self.is_dead = False

    @classmethod
    def spawn(cls, y: float, rng: random.Random, screen_width: float = SCREEN_WIDTH) -> 'Mole':
        speed = MOLE_MIN_SPEED + rng.random() * MOLE_SPEED_SPREAD
        if rng.random() < 0.5:
            return cls(-MOLE_SIZE, y, speed)
        return cls(screen_width, y, -speed)

    @property
    def center(self):
        return self.pos.x + self.width / 2, self.pos.y + self.height / 2

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.pos.x), int(self.pos.y), self.width, self.height)

    def update(self, scroll_y: float, screen_width: float = SCREEN_WIDTH) -> None:
        self.pos.x += self.vx
        if self.vx > 0 and self.pos.x > screen_width + MOLE_DESPAWN_MARGIN:
            self.is_dead = True
        if self.vx < 0 and self.pos.x < -MOLE_DESPAWN_MARGIN:
            self.is_dead = True
        if self.pos.y < scroll_y - MOLE_DESPAWN_MARGIN:
            self.is_dead = True


class MolePool:
    """Owns live moles, spawns new ones and resolves player contact."""

    def __init__(self, seed: Optional[int] = None, screen_width: float = SCREEN_WIDTH) -> None:
        self.rng = random.Random(seed)
        self.screen_width = screen_width
        self.moles: List[Mole] = []

    def __len__(self) -> int:
        return len(self.moles)

    @staticmethod
    def spawn_chance(depth: int) -> float:
        return MOLE_SPAWN_BASE_CHANCE + depth * MOLE_SPAWN_CHANCE_PER_DEPTH

    def maybe_spawn(self, depth: int, scroll_y: float) -> Optional[Mole]:
        if self.rng.random() >= self.spawn_chance(depth):
            return None
        return self.spawn(scroll_y)

    def spawn(self, scroll_y: float) -> Mole:
        mole = Mole.spawn(scroll_y + SCREEN_HEIGHT - MOLE_SPAWN_OFFSET, self.rng, self.screen_width)
        self.moles.append(mole)
        return mole

    def update(
        self,
        player: Player,
        world: TileWorld,
        scroll_y: float,
        on_effect: Optional[EffectSink] = None,
    ) -> None:
        """Advance every mole, drop despawned ones and handle player contact."""
        on_effect = on_effect or ignore_effect
        for mole in list(self.moles):
            mole.update(scroll_y, self.screen_width)
            if mole.is_dead:
                self.moles.remove(mole)
                continue
            if player.is_dead:
                continue
            if not player.overlaps(mole.pos.x, mole.pos.y, mole.width, mole.height):
                continue
            if player.is_fever:
                on_effect(*mole.center, EffectTag.MOLE)
                logger.debug("Mole crushed in fever")
            else:
                player.take_damage(world, scroll_y)
            mole.is_dead = True
            self.moles.remove(mole)

    def clear(self) -> None:
        self.moles.clear()
