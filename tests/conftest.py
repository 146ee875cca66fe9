from typing import List, Tuple

import pytest

from deepdrill.effects import EffectTag
from deepdrill.player import Player
from deepdrill.storage import MemorySaveStore, SaveState
from deepdrill.upgrades import UpgradeEconomy
from deepdrill.world import TileWorld

ROW_WIDTH = 15


def grid(*rows: str, fill: str = '.', height: int = 30) -> TileWorld:
    """World from explicit rows, padded below with ``fill`` rows."""
    lines = list(rows) + [fill * ROW_WIDTH] * max(0, height - len(rows))
    return TileWorld.from_layout("\n".join(lines), seed=0)


def place_centered(player: Player, col: int, row: int) -> None:
    """Put the player's centre on the centre of tile (col, row)."""
    player.pos.x = col * 32 + 16 - player.width / 2
    player.pos.y = row * 32 + 16 - player.height / 2


class EffectRecorder:
    def __init__(self) -> None:
        self.events: List[Tuple[float, float, EffectTag]] = []

    def __call__(self, x: float, y: float, tag: EffectTag) -> None:
        self.events.append((x, y, tag))

    def tags(self) -> List[EffectTag]:
        return [tag for _, _, tag in self.events]


@pytest.fixture
def store():
    return MemorySaveStore()


@pytest.fixture
def economy(store):
    return UpgradeEconomy(store)


@pytest.fixture
def effects():
    return EffectRecorder()


@pytest.fixture
def player(economy, effects):
    return Player(economy, on_effect=effects)


def economy_with(**levels) -> UpgradeEconomy:
    return UpgradeEconomy(MemorySaveStore(SaveState(0, dict(levels))))
