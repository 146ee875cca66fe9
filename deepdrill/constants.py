"""Tunables shared by the simulation and the pygame front-end."""
from __future__ import annotations

import math
import os
from typing import Optional

# --------------------------------------------------------------------------------------
# Screen and grid
# --------------------------------------------------------------------------------------
SCREEN_WIDTH = 480
SCREEN_HEIGHT = 640
TILE = 32
COLS = math.ceil(SCREEN_WIDTH / TILE)
VISIBLE_ROWS = math.ceil(SCREEN_HEIGHT / TILE)
LOOKAHEAD_ROWS = 2
INITIAL_EXTRA_ROWS = 5
START_CLEAR_ROWS = 5
RETAIN_ROWS_ABOVE = 8
FPS = 60

# --------------------------------------------------------------------------------------
# Scrolling and fever
# --------------------------------------------------------------------------------------
INITIAL_SCROLL_SPEED = 1.0
SCROLL_SPEED_PER_DEPTH = 0.005
BOOST_SCROLL_MULTIPLIER = 2.0
FEVER_INTERVAL = 100
FEVER_BASE_TICKS = 300
FEVER_TICKS_PER_LEVEL = 60

# --------------------------------------------------------------------------------------
# Player
# --------------------------------------------------------------------------------------
PLAYER_SIZE = TILE * 0.8
PLAYER_SPEED = 4.0
DRILL_SPEED_PER_LEVEL = 0.15
BOOST_FALL_SPEED = 4.0
MAX_LIFE = 3
BASE_MAX_BOMBS = 1
START_BOMBS = 1
RESPAWN_DEPTH_TILES = 3
BOMB_RADIUS = TILE * 5
BOMB_COOLDOWN = 30
MAGNET_RADIUS_PER_LEVEL = TILE * 2
MAGNET_CAPTURE_RADIUS = TILE * 1.5
AMETHYST_VALUE_MIN = 5
AMETHYST_VALUE_MAX = 15

# --------------------------------------------------------------------------------------
# Moles
# --------------------------------------------------------------------------------------
MOLE_SIZE = 24
MOLE_MIN_SPEED = 2.0
MOLE_SPEED_SPREAD = 1.0
MOLE_SPAWN_OFFSET = 50
MOLE_DESPAWN_MARGIN = 50
MOLE_SPAWN_BASE_CHANCE = 0.005
MOLE_SPAWN_CHANCE_PER_DEPTH = 0.00001

# --------------------------------------------------------------------------------------
# Row generation (depth bands in rows)
# --------------------------------------------------------------------------------------
DEPTH_BAND_MID = 100
DEPTH_BAND_CORE = 300
ROCK_CHANCE = (0.20, 0.28, 0.36)
HARD_ROCK_CHANCE = (0.0, 0.20, 0.35)
ORE_CHANCE = (0.05, 0.10, 0.18)
BOMB_ITEM_CHANCE = 0.01
HEAL_ITEM_CHANCE = 0.02

# --------------------------------------------------------------------------------------
# Upgrades
# --------------------------------------------------------------------------------------
UPGRADES = {
    'DRILL_SPEED': {
        'name': 'Drill Speed',
        'base_cost': 50,
        'factor': 1.5,
        'max_level': 5,
    },
    'MAX_HP': {
        'name': 'Max Battery',
        'base_cost': 100,
        'factor': 2.0,
        'max_level': 3,
    },
    'BOMB_MAX': {
        'name': 'Bomb Rack',
        'base_cost': 80,
        'factor': 1.8,
        'max_level': 3,
    },
    'FEVER_TIME': {
        'name': 'Fever Time',
        'base_cost': 60,
        'factor': 1.6,
        'max_level': 5,
    },
    'MAGNET': {
        'name': 'Magnet',
        'base_cost': 120,
        'factor': 2.0,
        'max_level': 3,
    },
}
HIGH_SCORE_COUNT = 5

# --------------------------------------------------------------------------------------
# Colors
# --------------------------------------------------------------------------------------
COLOR_BACKGROUND = (44, 62, 80)
COLOR_SKY_TOP = (41, 128, 185)
COLOR_EARTH_START = (93, 64, 55)
COLOR_EARTH_CORE = (192, 57, 43)
COLOR_CORE_MAGMA = (241, 196, 15)
COLOR_PLAYER = (231, 76, 60)
COLOR_PLAYER_FEVER = (241, 196, 15)
COLOR_DIRT = (211, 84, 0)
COLOR_ROCK = (127, 140, 141)
COLOR_HARD_ROCK = (84, 96, 97)
COLOR_TILE_OUTLINE = (34, 34, 34)
COLOR_ITEM_HEAL = (46, 204, 113)
COLOR_ITEM_BOMB = (52, 73, 94)
COLOR_ITEM_AMETHYST = (155, 89, 182)
COLOR_MOLE = (142, 68, 173)
COLOR_EXPLOSION = (243, 156, 18)
COLOR_SPARK = (236, 240, 241)
COLOR_DAMAGE = (231, 76, 60)
COLOR_TEXT = (236, 240, 241)
COLOR_HIGHLIGHT = (241, 196, 15)
COLOR_MAGNET = (52, 152, 219)

# --------------------------------------------------------------------------------------
# Environment
# --------------------------------------------------------------------------------------
SAVE_DIR = os.environ.get(
    "DEEPDRILL_SAVE_DIR", os.path.join(os.path.expanduser("~"), ".deepdrill")
)
LOG_LEVEL = os.environ.get("DEEPDRILL_LOG_LEVEL", "WARNING").upper()


def env_seed() -> Optional[int]:
    raw = os.environ.get("DEEPDRILL_SEED")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
