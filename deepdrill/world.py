"""
Tile World
==========
Vertically endless grid of destructible tiles. Rows are generated on demand
from their own depth and freed once they scroll far enough above the view.
"""
from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import List, Optional, Tuple

from .constants import (
    BOMB_ITEM_CHANCE,
    COLS,
    DEPTH_BAND_CORE,
    DEPTH_BAND_MID,
    HARD_ROCK_CHANCE,
    HEAL_ITEM_CHANCE,
    INITIAL_EXTRA_ROWS,
    LOOKAHEAD_ROWS,
    ORE_CHANCE,
    RETAIN_ROWS_ABOVE,
    ROCK_CHANCE,
    START_CLEAR_ROWS,
    TILE,
    VISIBLE_ROWS,
)

logger = logging.getLogger(__name__)


class Tile(Enum):
    """Closed set of tile kinds."""

    EMPTY = auto()
    DIRT = auto()
    ROCK = auto()
    HARD_ROCK = auto()
    ITEM_HEAL = auto()
    ITEM_BOMB = auto()
    ITEM_AMETHYST = auto()


SOLID_TILES = (Tile.ROCK, Tile.HARD_ROCK)
ITEM_TILES = (Tile.ITEM_HEAL, Tile.ITEM_BOMB, Tile.ITEM_AMETHYST)

LAYOUT_CHARS = {
    '.': Tile.EMPTY,
    '#': Tile.DIRT,
    '@': Tile.ROCK,
    'X': Tile.HARD_ROCK,
    '+': Tile.ITEM_HEAL,
    'b': Tile.ITEM_BOMB,
    '*': Tile.ITEM_AMETHYST,
}


def depth_band(depth: int) -> int:
    if depth <= DEPTH_BAND_MID:
        return 0
    if depth <= DEPTH_BAND_CORE:
        return 1
    return 2


class TileWorld:
    """Stores the tile rows and answers pixel-space queries.

    ``rows[0]`` holds world row ``row_offset``; everything above it has been
    freed and reads as open space.
    """

    def __init__(self, seed: Optional[int] = None, cols: int = COLS, generate: bool = True) -> None:
        self.rng = random.Random(seed)
        self.cols = cols
        self.rows: List[List[Tile]] = []
        self.row_offset = 0
        if generate:
            for _ in range(VISIBLE_ROWS + INITIAL_EXTRA_ROWS):
                self.generate_row()
            for r in range(START_CLEAR_ROWS):
                self.rows[r] = [Tile.EMPTY] * self.cols

    @classmethod
    def from_layout(cls, layout: str, seed: Optional[int] = None) -> 'TileWorld':
        """Build a world from an ASCII map, one character per tile."""
        lines = [line for line in layout.strip("\n").splitlines()]
        if not lines:
            raise ValueError("Layout has no rows")
        width = len(lines[0])
        world = cls(seed=seed, cols=width, generate=False)
        for y, line in enumerate(lines):
            if len(line) != width:
                raise ValueError(f"Layout row {y} has width {len(line)}, expected {width}")
            try:
                world.rows.append([LAYOUT_CHARS[char] for char in line])
            except KeyError as exc:
                raise ValueError(f"Unknown layout character {exc.args[0]!r} in row {y}") from None
        return world

    # ----------------------------------------------------------------------------------
    # Generation
    # ----------------------------------------------------------------------------------
    @property
    def generated_rows(self) -> int:
        return self.row_offset + len(self.rows)

    @property
    def pixel_width(self) -> int:
        return self.cols * TILE

    def generate_row(self) -> None:
        depth = self.generated_rows
        band = depth_band(depth)
        rng = self.rng
        row = [Tile.DIRT] * self.cols
        has_path = False

        for c in range(self.cols):
            if rng.random() < ROCK_CHANCE[band]:
                roll = rng.random()
                if roll < ORE_CHANCE[band]:
                    row[c] = Tile.ITEM_AMETHYST
                    has_path = True
                elif roll < ORE_CHANCE[band] + HARD_ROCK_CHANCE[band]:
                    row[c] = Tile.HARD_ROCK
                else:
                    row[c] = Tile.ROCK
            else:
                roll = rng.random()
                if roll < BOMB_ITEM_CHANCE:
                    row[c] = Tile.ITEM_BOMB
                elif roll < BOMB_ITEM_CHANCE + HEAL_ITEM_CHANCE:
                    row[c] = Tile.ITEM_HEAL
                has_path = True

        if not has_path:
            row[rng.randrange(self.cols)] = Tile.DIRT

        self.rows.append(row)

    def ensure_generated(self, scroll_y: float) -> int:
        """Grow to cover the look-ahead window below ``scroll_y``.

        Returns the total number of rows ever generated.
        """
        scroll_row = int(scroll_y // TILE)
        target = scroll_row + VISIBLE_ROWS + LOOKAHEAD_ROWS
        while self.generated_rows < target:
            self.generate_row()
        self.trim_above(scroll_row - RETAIN_ROWS_ABOVE)
        return self.generated_rows

    def trim_above(self, first_kept_row: int) -> None:
        drop = min(first_kept_row - self.row_offset, len(self.rows))
        if drop <= 0:
            return
        del self.rows[:drop]
        self.row_offset += drop
        logger.debug("Freed %d rows, window now starts at row %d", drop, self.row_offset)

    # ----------------------------------------------------------------------------------
    # Queries and mutation
    # ----------------------------------------------------------------------------------
    def world_to_tile(self, x: float, y: float) -> Tuple[int, int]:
        return int(x // TILE), int(y // TILE)

    def tile_center(self, col: int, row: int) -> Tuple[float, float]:
        return col * TILE + TILE / 2, row * TILE + TILE / 2

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.cols and self.row_offset <= row < self.generated_rows

    def get_tile(self, col: int, row: int) -> Tile:
        if col < 0 or col >= self.cols:
            return Tile.ROCK
        if row < self.row_offset:
            return Tile.EMPTY
        if row >= self.generated_rows:
            return Tile.ROCK
        return self.rows[row - self.row_offset][col]

    def set_tile(self, col: int, row: int, tile: Tile) -> bool:
        if not self.in_bounds(col, row):
            return False
        self.rows[row - self.row_offset][col] = tile
        return True

    def tile_at(self, x: float, y: float) -> Tile:
        return self.get_tile(*self.world_to_tile(x, y))

    def set_tile_at(self, x: float, y: float, tile: Tile) -> bool:
        return self.set_tile(*self.world_to_tile(x, y), tile)

    def dig(self, x: float, y: float) -> bool:
        """Clear the tile under ``(x, y)``. Callers decide whether that is allowed."""
        col, row = self.world_to_tile(x, y)
        if not self.in_bounds(col, row):
            return False
        if self.rows[row - self.row_offset][col] != Tile.EMPTY:
            self.rows[row - self.row_offset][col] = Tile.EMPTY
            return True
        return False

    def cells_in_radius(self, cx: float, cy: float, radius: float) -> List[Tuple[int, int, float, float]]:
        """Stored cells whose centre lies within ``radius`` of ``(cx, cy)``.

        Entries are ``(col, row, centre_x, centre_y)``; distance is Euclidean.
        """
        min_col, min_row = self.world_to_tile(cx - radius, cy - radius)
        max_col, max_row = self.world_to_tile(cx + radius, cy + radius)
        min_col = max(min_col, 0)
        max_col = min(max_col, self.cols - 1)
        min_row = max(min_row, self.row_offset)
        max_row = min(max_row, self.generated_rows - 1)
        radius_sq = radius * radius
        cells = []
        for row in range(min_row, max_row + 1):
            for col in range(min_col, max_col + 1):
                tx, ty = self.tile_center(col, row)
                if (tx - cx) ** 2 + (ty - cy) ** 2 <= radius_sq:
                    cells.append((col, row, tx, ty))
        return cells
