"""
Save Stores
===========
Key-value persistence for the upgrade economy and the high-score table.
Missing or corrupt data always reads back as a fresh save.
"""
from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import HIGH_SCORE_COUNT

logger = logging.getLogger(__name__)

SAVE_FILE = "dig_save_v1.json"
HIGH_SCORE_FILE = "dig_highscores.json"


@dataclass
class SaveState:
    """Flat persisted economy state."""

    money: int = 0
    levels: Dict[str, int] = field(default_factory=dict)


class SaveStore(ABC):
    """Interface for the persistence collaborator."""

    @abstractmethod
    def load(self) -> SaveState:
        ...

    @abstractmethod
    def save(self, state: SaveState) -> None:
        ...

    @abstractmethod
    def load_high_scores(self) -> List[int]:
        ...

    def save_high_score(self, score: int) -> List[int]:
        """Insert ``score``, keep the best entries and return the new table."""
        scores = self.load_high_scores()
        scores.append(int(score))
        scores.sort(reverse=True)
        scores = scores[:HIGH_SCORE_COUNT]
        self._write_high_scores(scores)
        return scores

    @abstractmethod
    def _write_high_scores(self, scores: List[int]) -> None:
        ...


class MemorySaveStore(SaveStore):
    """Process-local store, used by tests and when no save directory is wanted."""

    def __init__(self, state: Optional[SaveState] = None, high_scores: Optional[List[int]] = None) -> None:
        self._state = state or SaveState()
        self._high_scores = list(high_scores or [])

    def load(self) -> SaveState:
        return SaveState(self._state.money, dict(self._state.levels))

    def save(self, state: SaveState) -> None:
        self._state = SaveState(state.money, dict(state.levels))

    def load_high_scores(self) -> List[int]:
        return list(self._high_scores)

    def _write_high_scores(self, scores: List[int]) -> None:
        self._high_scores = list(scores)


class JsonSaveStore(SaveStore):
    """Stores the save and the high scores as two JSON files in ``directory``."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        self.save_path = os.path.join(directory, SAVE_FILE)
        self.high_score_path = os.path.join(directory, HIGH_SCORE_FILE)

    def _read(self, path: str):
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable save file %s: %s", path, exc)
            return None

    def _write(self, path: str, data) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            logger.warning("Could not write %s: %s", path, exc)

    def load(self) -> SaveState:
        data = self._read(self.save_path)
        if not isinstance(data, dict):
            return SaveState()
        money = data.get("money", 0)
        levels = data.get("levels", {})
        if not isinstance(money, int) or isinstance(money, bool) or money < 0:
            money = 0
        if not isinstance(levels, dict):
            levels = {}
        clean = {
            str(key): value
            for key, value in levels.items()
            if isinstance(value, int) and not isinstance(value, bool)
        }
        return SaveState(money, clean)

    def save(self, state: SaveState) -> None:
        self._write(self.save_path, {"money": state.money, "levels": dict(state.levels)})

    def load_high_scores(self) -> List[int]:
        data = self._read(self.high_score_path)
        if not isinstance(data, list):
            return []
        return [value for value in data if isinstance(value, int) and not isinstance(value, bool)]

    def _write_high_scores(self, scores: List[int]) -> None:
        self._write(self.high_score_path, scores)
