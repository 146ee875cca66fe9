import pytest

import deepdrill.world as world_module
from deepdrill.constants import COLS, LOOKAHEAD_ROWS, START_CLEAR_ROWS, TILE, VISIBLE_ROWS
from deepdrill.world import SOLID_TILES, Tile, TileWorld, depth_band

from tests.conftest import grid


def test_cols_cover_canvas():
    assert COLS == 15
    assert TileWorld(seed=1).cols == 15


def test_start_area_is_clear():
    world = TileWorld(seed=3)
    for row in range(START_CLEAR_ROWS):
        assert all(tile == Tile.EMPTY for tile in world.rows[row])


def test_every_generated_row_has_a_passable_column():
    world = TileWorld(seed=7)
    for _ in range(1500):
        world.generate_row()
    assert world.generated_rows > 1000
    for row in world.rows:
        assert any(tile not in SOLID_TILES for tile in row)


def test_all_rock_roll_forces_single_dirt(monkeypatch):
    monkeypatch.setattr(world_module, "ROCK_CHANCE", (1.0, 1.0, 1.0))
    monkeypatch.setattr(world_module, "ORE_CHANCE", (0.0, 0.0, 0.0))
    world = TileWorld(seed=5, generate=False)
    for _ in range(50):
        world.generate_row()
    for row in world.rows:
        assert row.count(Tile.DIRT) == 1
        assert all(tile in SOLID_TILES or tile == Tile.DIRT for tile in row)


def test_deep_rows_are_rockier():
    world = TileWorld(seed=11, generate=False)
    for _ in range(700):
        world.generate_row()

    def solid_share(rows):
        cells = [tile for row in rows for tile in row]
        return sum(tile in SOLID_TILES for tile in cells) / len(cells)

    shallow = world.rows[:100]
    core = world.rows[400:700]
    assert solid_share(core) > solid_share(shallow)
    assert not any(Tile.HARD_ROCK in row for row in shallow)
    assert any(Tile.HARD_ROCK in row for row in core)


def test_depth_bands():
    assert depth_band(0) == 0
    assert depth_band(100) == 0
    assert depth_band(101) == 1
    assert depth_band(300) == 1
    assert depth_band(301) == 2


def test_same_seed_same_rows():
    assert TileWorld(seed=42).rows == TileWorld(seed=42).rows


def test_tile_at_fallbacks():
    world = grid('#' * 15, height=4)
    assert world.tile_at(-1, 10) == Tile.ROCK
    assert world.tile_at(15 * TILE, 10) == Tile.ROCK
    assert world.tile_at(10, -1) == Tile.EMPTY
    assert world.tile_at(10, 4 * TILE) == Tile.ROCK
    assert world.tile_at(10, 10) == Tile.DIRT


def test_dig_empty_cell_is_noop():
    world = grid('...............', '@@@@@@@@@@@@@@@')
    before = [list(row) for row in world.rows]
    assert world.dig(40, 10) is False
    assert world.rows == before


def test_dig_removes_any_tile():
    world = grid('#@X+b*.........')
    for col in range(6):
        assert world.dig(col * TILE + 1, 1) is True
        assert world.get_tile(col, 0) == Tile.EMPTY


def test_dig_out_of_bounds_returns_false():
    world = grid('#' * 15, height=3)
    assert world.dig(-5, 5) is False
    assert world.dig(5, -5) is False
    assert world.dig(5, 10 * TILE) is False


def test_ensure_generated_covers_lookahead_and_never_shrinks():
    world = TileWorld(seed=9)
    previous = world.generated_rows
    for scroll_y in range(0, 200 * TILE, 7 * TILE):
        count = world.ensure_generated(scroll_y)
        assert count >= previous
        assert count >= scroll_y // TILE + VISIBLE_ROWS + LOOKAHEAD_ROWS
        previous = count


def test_dug_cells_stay_empty_while_scrolling():
    world = TileWorld(seed=2)
    world.ensure_generated(0)
    world.set_tile(4, 10, Tile.ROCK)
    assert world.dig(4 * TILE + 3, 10 * TILE + 3)
    for scroll_y in range(0, 18 * TILE, TILE):
        world.ensure_generated(scroll_y)
        assert world.get_tile(4, 10) == Tile.EMPTY


def test_rows_far_above_view_are_freed():
    world = TileWorld(seed=4)
    world.ensure_generated(100 * TILE)
    assert world.row_offset > 0
    assert world.row_offset + len(world.rows) == world.generated_rows
    assert world.get_tile(3, 10) == Tile.EMPTY
    assert world.dig(3 * TILE, 10 * TILE) is False
    assert world.in_bounds(3, 100)


def test_set_tile_at_replaces_in_place():
    world = grid('......X........')
    assert world.set_tile_at(6 * TILE + 5, 5, Tile.ROCK)
    assert world.get_tile(6, 0) == Tile.ROCK


def test_cells_in_radius_is_a_disc():
    world = grid(height=20)
    cells = world.cells_in_radius(7 * TILE + 16, 10 * TILE + 16, 5 * TILE)
    coords = {(col, row) for col, row, _, _ in cells}
    assert len(coords) == 81
    assert (12, 10) in coords
    assert (10, 14) in coords
    assert (11, 14) not in coords


def test_from_layout_rejects_bad_input():
    with pytest.raises(ValueError):
        TileWorld.from_layout("...\n..")
    with pytest.raises(ValueError):
        TileWorld.from_layout("..?")
    with pytest.raises(ValueError):
        TileWorld.from_layout("")
