"""
Game-mode scoring configurations.

A game mode tells the score validator the highest score a side may report.
Modes are looked up by key from a registry loaded from YAML, for example:

    standard:
      label: Standard
      max_score: 99
    bo3:
      label: Best of 3
      best_of: 3
"""
import os
from typing import Dict, Optional

import yaml

from .errors import UnknownGameMode


class GameMode:
    def __init__(self, label, max_score=None, best_of=None):
        if max_score is None and best_of is None:
            raise ValueError(f"Game mode '{label}' needs max_score or best_of")
        if best_of is not None and (best_of < 1 or best_of % 2 == 0):
            raise ValueError(f"Game mode '{label}': best_of must be a positive odd number")
        self.label = label
        self.best_of = best_of
        # A best-of-N series ends once a side takes a majority of games
        self.max_score = max_score if max_score is not None else best_of // 2 + 1

    def to_dict(self):
        return {'label': self.label, 'max_score': self.max_score, 'best_of': self.best_of}

    def __repr__(self):
        return f"GameMode(label={self.label}, max_score={self.max_score}, best_of={self.best_of})"


DEFAULT_GAME_MODE = 'standard'

DEFAULT_GAME_MODES = {
    'standard': GameMode('Standard', max_score=99),
    'bo3': GameMode('Best of 3', best_of=3),
    'bo5': GameMode('Best of 5', best_of=5),
}


def load_game_modes(file_path: Optional[str] = None) -> Dict[str, GameMode]:
    """Load the game-mode registry from YAML, falling back to the built-in modes."""
    if not file_path or not os.path.exists(file_path):
        return dict(DEFAULT_GAME_MODES)
    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return dict(DEFAULT_GAME_MODES)

    modes = {}
    for key, entry in data.items():
        modes[str(key)] = GameMode(
            label=entry.get('label', str(key)),
            max_score=entry.get('max_score'),
            best_of=entry.get('best_of'),
        )
    return modes


def get_game_mode(modes: Dict[str, GameMode], key: Optional[str]) -> GameMode:
    key = key or DEFAULT_GAME_MODE
    if key not in modes:
        raise UnknownGameMode(key)
    return modes[key]
