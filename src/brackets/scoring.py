"""
Score report validation.
"""
from typing import Dict, Union

from .errors import InvalidScore, TiedScore
from .formats import GameMode


class ScoreReport:
    """A validated result, ready to be applied to the bracket."""

    def __init__(self, match_id, winner_slot, top_score, bottom_score):
        self.match_id = match_id
        self.winner_slot = winner_slot  # 'top' or 'bottom'
        self.top_score = top_score
        self.bottom_score = bottom_score

    def to_dict(self):
        return {
            'match_id': self.match_id,
            'winner_slot': self.winner_slot,
            'top_score': self.top_score,
            'bottom_score': self.bottom_score,
        }

    def __repr__(self):
        return f"ScoreReport(match_id={self.match_id}, {self.top_score}-{self.bottom_score}, winner={self.winner_slot})"


def _max_score(scoring: Union[GameMode, Dict, int]) -> int:
    if isinstance(scoring, GameMode):
        return scoring.max_score
    if isinstance(scoring, dict):
        return scoring['max_score']
    return scoring


def _check_score(label: str, value, max_score: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScore(f"{label} score must be a whole number, got {value!r}")
    if value < 0 or value > max_score:
        raise InvalidScore(f"{label} score {value} is outside the allowed range 0-{max_score}")
    return value


def validate_score_report(match_id: int, top_score, bottom_score,
                          scoring: Union[GameMode, Dict, int]) -> ScoreReport:
    """
    Validate a proposed result against the game mode's score ceiling.

    Raises InvalidScore for scores outside [0, max_score] and TiedScore for
    equal scores. Has no side effects.
    """
    max_score = _max_score(scoring)
    top_score = _check_score('Top', top_score, max_score)
    bottom_score = _check_score('Bottom', bottom_score, max_score)

    if top_score == bottom_score:
        raise TiedScore(top_score)

    winner_slot = 'top' if top_score > bottom_score else 'bottom'
    return ScoreReport(match_id, winner_slot, top_score, bottom_score)
