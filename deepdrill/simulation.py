"""
Simulation
==========
Per-tick orchestration of one run: scrolling, fever windows, mole spawning,
player and mole updates, and the hand-off of results when the drill dies.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .constants import (
    BOOST_SCROLL_MULTIPLIER,
    FEVER_INTERVAL,
    INITIAL_SCROLL_SPEED,
    SCROLL_SPEED_PER_DEPTH,
    TILE,
)
from .effects import EffectSink, ignore_effect
from .moles import MolePool
from .player import InputSnapshot, Player
from .storage import MemorySaveStore, SaveStore
from .upgrades import UpgradeEconomy
from .world import TileWorld

logger = logging.getLogger(__name__)


class FeverState(Enum):
    NORMAL = auto()
    FEVER = auto()


@dataclass(frozen=True)
class RunResult:
    """Final numbers of a finished run."""

    depth: int
    money: int
    high_scores: List[int]


class Simulation:
    """One run of the game, advanced by ``update`` once per frame."""

    def __init__(
        self,
        economy: UpgradeEconomy,
        store: Optional[SaveStore] = None,
        seed: Optional[int] = None,
        on_effect: Optional[EffectSink] = None,
    ) -> None:
        self.economy = economy
        self.store = store if store is not None else MemorySaveStore()
        self.on_effect = on_effect or ignore_effect
        self.rng = random.Random(seed)
        self.world = TileWorld(seed=self.rng.getrandbits(32))
        self.moles = MolePool(seed=self.rng.getrandbits(32), screen_width=self.world.pixel_width)
        self.player = Player(
            economy,
            on_effect=self.on_effect,
            rng=random.Random(self.rng.getrandbits(32)),
            world_width=self.world.pixel_width,
        )
        self.scroll_y = 0.0
        self.scroll_speed = INITIAL_SCROLL_SPEED
        self.score = 0
        self.fever_state = FeverState.NORMAL
        self.fever_timer = 0
        self.last_fever_depth = 0
        self.ticks = 0
        self.running = True
        self.result: Optional[RunResult] = None
        logger.info("Run started (max hp %d, bombs %d)", self.player.max_hp, self.player.max_bombs)

    @property
    def is_fever(self) -> bool:
        return self.fever_state == FeverState.FEVER

    @property
    def depth(self) -> int:
        return int(self.scroll_y // TILE)

    def update(self, inputs: InputSnapshot) -> None:
        if not self.running:
            return
        self.ticks += 1

        depth = self.depth
        if depth > self.score:
            self.score = depth

        speed = INITIAL_SCROLL_SPEED + depth * SCROLL_SPEED_PER_DEPTH
        if inputs.down:
            speed *= BOOST_SCROLL_MULTIPLIER
        self.scroll_speed = speed
        self.scroll_y += speed

        self.update_fever()

        self.moles.maybe_spawn(self.score, self.scroll_y)
        self.world.ensure_generated(self.scroll_y)
        self.player.update(inputs, self.world, self.scroll_y, self.scroll_speed)
        self.moles.update(self.player, self.world, self.scroll_y, self.on_effect)

        if self.player.is_dead:
            self.finish_run()

    def update_fever(self) -> None:
        if self.fever_state == FeverState.FEVER:
            self.fever_timer -= 1
            if self.fever_timer <= 0:
                self.fever_state = FeverState.NORMAL
                # Boundaries passed during the fever are used up.
                self.last_fever_depth = self.score
                logger.info("Fever over at depth %d", self.score)
        elif self.score // FEVER_INTERVAL > self.last_fever_depth // FEVER_INTERVAL:
            self.start_fever()
        self.player.is_fever = self.is_fever

    def start_fever(self) -> None:
        self.fever_state = FeverState.FEVER
        self.fever_timer = self.economy.fever_duration()
        self.last_fever_depth = self.score
        self.player.is_fever = True
        logger.info("Fever started at depth %d for %d ticks", self.score, self.fever_timer)

    def finish_run(self) -> RunResult:
        if self.result is not None:
            return self.result
        self.running = False
        money = self.player.money_collected
        if money:
            self.economy.add_money(money)
        high_scores = self.store.save_high_score(self.score)
        self.result = RunResult(depth=self.score, money=money, high_scores=high_scores)
        logger.info("Run over at depth %d with %d collected", self.score, money)
        return self.result
