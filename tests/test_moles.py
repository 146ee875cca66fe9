import random

import pytest

from deepdrill.constants import SCREEN_HEIGHT
from deepdrill.effects import EffectTag
from deepdrill.moles import Mole, MolePool

from tests.conftest import grid


def test_spawn_side_and_speed():
    rng = random.Random(3)
    for _ in range(200):
        mole = Mole.spawn(100, rng)
        if mole.vx > 0:
            assert mole.pos.x == -24
            assert 2 <= mole.vx < 3
        else:
            assert mole.pos.x == 480
            assert -3 < mole.vx <= -2
        assert mole.pos.y == 100


def test_both_sides_are_used():
    rng = random.Random(8)
    directions = {Mole.spawn(0, rng).vx > 0 for _ in range(100)}
    assert directions == {True, False}


def test_despawn_after_crossing():
    right = Mole(529, 100, 2.0)
    right.update(scroll_y=0)
    assert right.is_dead
    left = Mole(-49, 100, -2.0)
    left.update(scroll_y=0)
    assert left.is_dead
    still_on = Mole(400, 100, 2.0)
    still_on.update(scroll_y=0)
    assert not still_on.is_dead


def test_despawn_when_scrolled_past():
    mole = Mole(100, 100, 2.0)
    mole.update(scroll_y=151)
    assert mole.is_dead


def test_spawn_chance_grows_with_depth():
    assert MolePool.spawn_chance(0) == pytest.approx(0.005)
    assert MolePool.spawn_chance(100) == pytest.approx(0.006)


def test_pool_spawns_below_view():
    pool = MolePool(seed=1)
    mole = pool.maybe_spawn(depth=10 ** 6, scroll_y=320)
    assert mole is not None
    assert mole.pos.y == 320 + SCREEN_HEIGHT - 50
    assert len(pool) == 1


def test_pool_spawning_is_seeded():
    a = MolePool(seed=5)
    b = MolePool(seed=5)
    for depth in range(0, 3000, 3):
        a.maybe_spawn(depth, 0)
        b.maybe_spawn(depth, 0)
    assert [(m.pos.x, m.vx) for m in a.moles] == [(m.pos.x, m.vx) for m in b.moles]


def test_contact_damages_player_and_removes_mole(player, effects):
    world = grid()
    pool = MolePool(seed=0)
    pool.moles.append(Mole(player.pos.x, player.pos.y, 0.5))
    pool.update(player, world, scroll_y=0, on_effect=effects)
    assert player.hp == 2
    assert len(pool) == 0
    assert EffectTag.DAMAGE in effects.tags()


def test_fever_contact_kills_mole_only(player, effects):
    world = grid()
    player.is_fever = True
    pool = MolePool(seed=0)
    pool.moles.append(Mole(player.pos.x, player.pos.y, 0.5))
    pool.update(player, world, scroll_y=0, on_effect=effects)
    assert player.hp == 3
    assert len(pool) == 0
    assert effects.tags() == [EffectTag.MOLE]


def test_far_mole_keeps_walking(player):
    world = grid()
    pool = MolePool(seed=0)
    pool.moles.append(Mole(0, player.pos.y + 200, 2.0))
    pool.update(player, world, scroll_y=0)
    assert len(pool) == 1
    assert pool.moles[0].pos.x == 2.0
    assert player.hp == 3
