"""
Upgrade Economy
===============
Persistent upgrade levels, cost curves and the stat values derived from them.
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Dict, Optional, Union

from .constants import (
    BASE_MAX_BOMBS,
    DRILL_SPEED_PER_LEVEL,
    FEVER_BASE_TICKS,
    FEVER_TICKS_PER_LEVEL,
    MAGNET_RADIUS_PER_LEVEL,
    MAX_LIFE,
    PLAYER_SPEED,
    UPGRADES,
)
from .storage import MemorySaveStore, SaveState, SaveStore

logger = logging.getLogger(__name__)


class UpgradeKind(Enum):
    """Purchasable upgrades. Values double as save-file keys."""

    DRILL_SPEED = "DRILL_SPEED"
    MAX_HP = "MAX_HP"
    BOMB_MAX = "BOMB_MAX"
    FEVER_TIME = "FEVER_TIME"
    MAGNET = "MAGNET"


class UpgradeEconomy:
    """Money and upgrade levels, persisted through a ``SaveStore``.

    Only ``buy`` and ``add_money`` change state; both write through to the
    store immediately.
    """

    def __init__(
        self,
        store: Optional[SaveStore] = None,
        upgrades: Optional[Dict[str, dict]] = None,
    ) -> None:
        self.store = store if store is not None else MemorySaveStore()
        self.upgrades = upgrades if upgrades is not None else UPGRADES
        self.money = 0
        self.levels: Dict[UpgradeKind, int] = {kind: 0 for kind in UpgradeKind}
        self.load()

    def config(self, kind: UpgradeKind) -> dict:
        return self.upgrades[kind.value]

    def load(self) -> None:
        state = self.store.load()
        self.money = max(0, state.money)
        for kind in UpgradeKind:
            stored = state.levels.get(kind.value)
            if stored is None:
                continue
            self.levels[kind] = min(max(0, stored), self.config(kind)['max_level'])

    def save(self) -> None:
        levels = {kind.value: level for kind, level in self.levels.items()}
        self.store.save(SaveState(self.money, levels))

    def add_money(self, amount: int) -> None:
        self.money += amount
        self.save()

    def get_level(self, kind: UpgradeKind) -> int:
        return self.levels[kind]

    def get_cost(self, kind: UpgradeKind) -> Union[int, float]:
        """Cost of the next level, or ``math.inf`` once maxed."""
        data = self.config(kind)
        level = self.levels[kind]
        if level >= data['max_level']:
            return math.inf
        return math.floor(data['base_cost'] * data['factor'] ** level)

    def can_buy(self, kind: UpgradeKind) -> bool:
        return (
            self.levels[kind] < self.config(kind)['max_level']
            and self.money >= self.get_cost(kind)
        )

    def buy(self, kind: UpgradeKind) -> bool:
        if not self.can_buy(kind):
            return False
        cost = self.get_cost(kind)
        self.money -= cost
        self.levels[kind] += 1
        self.save()
        logger.info("Bought %s level %d for %d", kind.value, self.levels[kind], cost)
        return True

    # ----------------------------------------------------------------------------------
    # Derived simulation stats
    # ----------------------------------------------------------------------------------
    def drill_speed(self) -> float:
        return PLAYER_SPEED * (1 + DRILL_SPEED_PER_LEVEL * self.levels[UpgradeKind.DRILL_SPEED])

    def max_hp(self) -> int:
        return MAX_LIFE + self.levels[UpgradeKind.MAX_HP]

    def max_bombs(self) -> int:
        return BASE_MAX_BOMBS + self.levels[UpgradeKind.BOMB_MAX]

    def fever_duration(self) -> int:
        return FEVER_BASE_TICKS + FEVER_TICKS_PER_LEVEL * self.levels[UpgradeKind.FEVER_TIME]

    def magnet_radius(self) -> float:
        return MAGNET_RADIUS_PER_LEVEL * self.levels[UpgradeKind.MAGNET]
