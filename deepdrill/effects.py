"""
Effects
=======
Semantic effect tags emitted by the simulation and the cosmetic particle
system that turns them into dust, sparks and debris.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple

import pygame

from .constants import (
    COLOR_DAMAGE,
    COLOR_DIRT,
    COLOR_EXPLOSION,
    COLOR_ITEM_AMETHYST,
    COLOR_ITEM_BOMB,
    COLOR_ITEM_HEAL,
    COLOR_MOLE,
    COLOR_ROCK,
    COLOR_SPARK,
)


class EffectTag(Enum):
    """What happened at an effect point; the renderer picks the look."""

    DIRT = auto()
    ROCK = auto()
    SPARK = auto()
    HEAL = auto()
    BOMB = auto()
    AMETHYST = auto()
    EXPLOSION = auto()
    MOLE = auto()
    DAMAGE = auto()


EffectSink = Callable[[float, float, EffectTag], None]

EFFECT_COLORS = {
    EffectTag.DIRT: COLOR_DIRT,
    EffectTag.ROCK: COLOR_ROCK,
    EffectTag.SPARK: COLOR_SPARK,
    EffectTag.HEAL: COLOR_ITEM_HEAL,
    EffectTag.BOMB: COLOR_ITEM_BOMB,
    EffectTag.AMETHYST: COLOR_ITEM_AMETHYST,
    EffectTag.EXPLOSION: COLOR_EXPLOSION,
    EffectTag.MOLE: COLOR_MOLE,
    EffectTag.DAMAGE: COLOR_DAMAGE,
}

PARTICLES_PER_EFFECT = 5
PARTICLE_GRAVITY = 0.2


def ignore_effect(x: float, y: float, tag: EffectTag) -> None:
    pass


@dataclass
class Particle:
    pos: pygame.Vector2
    vel: pygame.Vector2
    life: float
    max_life: float
    size: float
    color: Tuple[int, int, int]


class ParticleSystem:
    """Default effect sink: a few short-lived particles per effect."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)
        self.particles: List[Particle] = []

    def __call__(self, x: float, y: float, tag: EffectTag) -> None:
        self.emit(x, y, tag)

    def emit(self, x: float, y: float, tag: EffectTag) -> None:
        rng = self.rng
        color = EFFECT_COLORS[tag]
        for _ in range(PARTICLES_PER_EFFECT):
            life = 30 + rng.random() * 20
            self.particles.append(
                Particle(
                    pos=pygame.Vector2(x, y),
                    vel=pygame.Vector2((rng.random() - 0.5) * 4, (rng.random() - 0.5) * 4 - 2),
                    life=life,
                    max_life=life,
                    size=2 + rng.random() * 3,
                    color=color,
                )
            )

    def update(self) -> None:
        for particle in list(self.particles):
            particle.pos += particle.vel
            particle.vel.y += PARTICLE_GRAVITY
            particle.life -= 1
            if particle.life <= 0:
                self.particles.remove(particle)

    def clear(self) -> None:
        self.particles.clear()
